"""Fields shared by transfers, pay-ins, pay-outs and refunds"""

from dataclasses import dataclass

from mangoclient.models.base import Money, Timestamp
from mangoclient.services.entity_lifecycle import Resource


@dataclass
class Transaction(Resource):
    status: str = ""
    result_code: str = ""
    result_message: str = ""
    execution_date: Timestamp = Timestamp()
    author_id: str = ""
    credited_user_id: str = ""
    debited_funds: Money = Money()
    fees: Money = Money()
    credited_funds: Money = Money()
    type: str = ""
    nature: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status == "SUCCEEDED"

    @property
    def failed(self) -> bool:
        return self.status == "FAILED"
