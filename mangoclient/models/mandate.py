"""MangoPay direct-debit mandates (fetch only)"""

from dataclasses import dataclass

from mangoclient.models.base import Timestamp, wire
from mangoclient.services.entity_lifecycle import Resource


@dataclass
class Mandate(Resource):
    status: str = ""
    result_code: str = ""
    result_message: str = ""
    execution_date: Timestamp = Timestamp()
    bank_account_id: str = ""
    user_id: str = ""
    return_url: str = wire("", name="ReturnURL")
    redirect_url: str = wire("", name="RedirectURL")
    document_url: str = wire("", name="DocumentURL")
    culture: str = ""
    scheme: str = ""
    execution_type: str = ""
    mandate_type: str = ""
    bank_reference: str = ""
