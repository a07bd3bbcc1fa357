"""MangoPay bank-wire pay-outs"""

from dataclasses import dataclass

from mangoclient.exceptions import PayOutFailedError, ValidationError
from mangoclient.models.transaction import Transaction
from mangoclient.services.action_registry import Operation


@dataclass
class PayOut(Transaction):
    payment_type: str = ""
    debited_wallet_id: str = ""
    bank_account_id: str = ""
    mean_of_payment_type: str = ""
    bank_wire_ref: str = ""

    create_operation = Operation.CREATE_PAYOUT
    read_only_fields = frozenset(
        {"CreditedUserId", "Type", "Nature", "PaymentType", "CreditedFunds", "MeanOfPaymentType"}
    )
    failure_error = PayOutFailedError

    def validate(self) -> None:
        if not self.author_id:
            raise ValidationError("pay-out author has empty Id")
        if not self.debited_wallet_id:
            raise ValidationError("pay-out debited wallet has empty Id")
        if not self.bank_account_id:
            raise ValidationError("pay-out bank account has empty Id")
