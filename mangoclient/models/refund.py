"""MangoPay refunds of transfers and pay-ins"""

from dataclasses import dataclass
from typing import Any, Dict

from mangoclient.exceptions import ValidationError
from mangoclient.models.base import local
from mangoclient.models.transaction import Transaction
from mangoclient.services.action_registry import Operation


@dataclass
class Refund(Transaction):
    initial_transaction_id: str = ""
    initial_transaction_type: str = ""
    debited_wallet_id: str = ""
    credited_wallet_id: str = ""

    # which transaction this refund targets; not part of the resource body
    transfer_id: str = local("")
    payin_id: str = local("")

    read_only_fields = frozenset(
        {
            "CreditedFunds",
            "CreditedUserId",
            "Fees",
            "InitialTransactionType",
            "InitialTransactionId",
            "DebitedFunds",
            "Nature",
            "Type",
            "DebitedWalletId",
            "CreditedWalletId",
        }
    )

    @property
    def create_operation(self) -> Operation:
        if self.transfer_id:
            return Operation.CREATE_TRANSFER_REFUND
        return Operation.CREATE_PAYIN_REFUND

    def validate(self) -> None:
        if bool(self.transfer_id) == bool(self.payin_id):
            raise ValidationError("refund targets exactly one of a transfer or a pay-in")
        if not self.author_id:
            raise ValidationError("refund author has empty Id")

    def _prepare_payload(self, payload: Dict[str, Any], creating: bool) -> Dict[str, Any]:
        if self.transfer_id:
            payload["TransferId"] = self.transfer_id
        else:
            payload["PayInId"] = self.payin_id
        return payload
