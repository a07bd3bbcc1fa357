"""MangoPay wallet-to-wallet transfers"""

from dataclasses import dataclass

from mangoclient.exceptions import TransferFailedError, ValidationError
from mangoclient.models.refund import Refund
from mangoclient.models.transaction import Transaction
from mangoclient.services.action_registry import Operation


@dataclass
class Transfer(Transaction):
    debited_wallet_id: str = ""
    credited_wallet_id: str = ""

    create_operation = Operation.CREATE_TRANSFER
    read_only_fields = frozenset({"CreditedFunds", "CreditedUserId", "Type", "Nature"})
    failure_error = TransferFailedError

    def validate(self) -> None:
        if not self.author_id:
            raise ValidationError("transfer author has empty Id")
        if not self.debited_wallet_id or not self.credited_wallet_id:
            raise ValidationError("transfer needs both a debited and a credited wallet Id")

    def refund(self):
        """Refund this transfer; returns the saved Refund"""
        if not self.is_persisted:
            raise ValidationError("cannot refund a transfer that was never saved")
        refund = Refund(author_id=self.author_id, transfer_id=self.id).bind(self._require_service())
        return refund.save()
