"""
MangoPay pay-ins
Money entering a wallet: card web payment, direct card payment with a
registered card, bank wire and direct-debit web payment
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from mangoclient.exceptions import PayInFailedError, ValidationError
from mangoclient.models.base import Money, validate_url, wire
from mangoclient.models.refund import Refund
from mangoclient.models.transaction import Transaction
from mangoclient.services.action_registry import Operation

PAYIN_READ_ONLY = frozenset(
    {"CreditedFunds", "CreditedUserId", "ExecutionType", "PaymentType", "SecureMode", "Type", "Nature"}
)


@dataclass
class PayIn(Transaction):
    credited_wallet_id: str = ""
    secure_mode: str = ""
    payment_type: str = ""
    execution_type: str = ""

    read_only_fields = PAYIN_READ_ONLY
    failure_error = PayInFailedError

    def validate(self) -> None:
        if not self.author_id:
            raise ValidationError("pay-in author has empty Id")
        if not self.credited_wallet_id:
            raise ValidationError("pay-in credited wallet has empty Id")

    def refund(self) -> Refund:
        """Refund this pay-in; returns the saved Refund"""
        if not self.is_persisted:
            raise ValidationError("cannot refund a pay-in that was never saved")
        refund = Refund(author_id=self.author_id, payin_id=self.id).bind(self._require_service())
        return refund.save()


@dataclass
class WebPayIn(PayIn):
    """Card payment through the hosted payment page"""

    return_url: str = ""
    template_url_options: Optional[Dict[str, str]] = None
    culture: str = ""
    card_type: str = "CB_VISA_MASTERCARD"
    redirect_url: str = ""

    create_operation = Operation.CREATE_WEB_PAYIN
    read_only_fields = PAYIN_READ_ONLY | {"RedirectUrl"}

    def validate(self) -> None:
        super().validate()
        validate_url(self.return_url, "ReturnUrl")
        if self.template_url_options:
            for url in self.template_url_options.values():
                validate_url(url, "TemplateUrlOptions")


@dataclass
class DirectPayIn(PayIn):
    """Payment with an already registered card"""

    secure_mode_return_url: str = ""
    card_id: str = ""
    debited_wallet_id: str = ""
    secure_mode_redirect_url: str = ""

    create_operation = Operation.CREATE_DIRECT_PAYIN
    # the beneficiary travels with a card payment
    read_only_fields = (PAYIN_READ_ONLY - {"CreditedUserId"}) | {"DebitedWalletId", "SecureModeRedirectUrl"}

    def validate(self) -> None:
        super().validate()
        if not self.card_id:
            raise ValidationError("direct pay-in card has empty Id")
        validate_url(self.secure_mode_return_url, "SecureModeReturnUrl")


@dataclass
class BankWireDirectPayIn(PayIn):
    """Pay-in awaiting an incoming bank wire; the API returns the wire reference"""

    declared_debited_funds: Money = Money()
    declared_fees: Money = Money()
    wire_reference: str = ""
    bank_account: Optional[Dict[str, Any]] = None

    create_operation = Operation.CREATE_BANKWIRE_DIRECT_PAYIN
    read_only_fields = PAYIN_READ_ONLY | {"WireReference", "BankAccount", "DebitedFunds", "Fees"}

    def validate(self) -> None:
        super().validate()
        if self.declared_debited_funds.amount <= 0 or not self.declared_debited_funds.currency:
            raise ValidationError("bank wire pay-in needs positive DeclaredDebitedFunds")


@dataclass
class DirectDebitWebPayIn(PayIn):
    """Direct debit through the hosted payment page"""

    return_url: str = ""
    redirect_url: str = ""
    culture: str = ""
    direct_debit_type: str = "GIROPAY"
    template_url: Optional[str] = wire(None, name="TemplateURL")

    create_operation = Operation.CREATE_DIRECT_DEBIT_WEB_PAYIN
    read_only_fields = PAYIN_READ_ONLY | {"RedirectUrl"}

    def validate(self) -> None:
        super().validate()
        validate_url(self.return_url, "ReturnUrl")
