"""
MangoPay enumerations
Environments, auth modes and the string constants used on the wire
"""

from enum import Enum


class ExecEnvironment(Enum):
    PRODUCTION = "production"
    SANDBOX = "sandbox"


class AuthMode(Enum):
    """Authorization header strategy"""
    BASIC = "basic"
    OAUTH = "oauth"


class TransactionStatus(Enum):
    CREATED = "CREATED"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class TransactionType(Enum):
    PAYIN = "PAYIN"
    PAYOUT = "PAYOUT"
    TRANSFER = "TRANSFER"


class TransactionNature(Enum):
    REGULAR = "REGULAR"
    REFUND = "REFUND"
    REPUDIATION = "REPUDIATION"


class DocumentType(Enum):
    IDENTITY_PROOF = "IDENTITY_PROOF"
    REGISTRATION_PROOF = "REGISTRATION_PROOF"
    ARTICLES_OF_ASSOCIATION = "ARTICLES_OF_ASSOCIATION"
    SHAREHOLDER_DECLARATION = "SHAREHOLDER_DECLARATION"
    ADDRESS_PROOF = "ADDRESS_PROOF"


class DocumentStatus(Enum):
    CREATED = "CREATED"
    VALIDATION_ASKED = "VALIDATION_ASKED"
    VALIDATED = "VALIDATED"
    REFUSED = "REFUSED"


class BankAccountType(Enum):
    IBAN = "IBAN"
    GB = "GB"
    US = "US"
    CA = "CA"
    OTHER = "OTHER"


class HookStatus(Enum):
    ENABLED = "ENABLED"
    DISABLED = "DISABLED"


class EventType(Enum):
    """Webhook event types"""
    PAYIN_NORMAL_CREATED = "PAYIN_NORMAL_CREATED"
    PAYIN_NORMAL_SUCCEEDED = "PAYIN_NORMAL_SUCCEEDED"
    PAYIN_NORMAL_FAILED = "PAYIN_NORMAL_FAILED"
    PAYOUT_NORMAL_CREATED = "PAYOUT_NORMAL_CREATED"
    PAYOUT_NORMAL_SUCCEEDED = "PAYOUT_NORMAL_SUCCEEDED"
    PAYOUT_NORMAL_FAILED = "PAYOUT_NORMAL_FAILED"
    TRANSFER_NORMAL_CREATED = "TRANSFER_NORMAL_CREATED"
    TRANSFER_NORMAL_SUCCEEDED = "TRANSFER_NORMAL_SUCCEEDED"
    TRANSFER_NORMAL_FAILED = "TRANSFER_NORMAL_FAILED"
    PAYIN_REFUND_CREATED = "PAYIN_REFUND_CREATED"
    PAYIN_REFUND_SUCCEEDED = "PAYIN_REFUND_SUCCEEDED"
    PAYIN_REFUND_FAILED = "PAYIN_REFUND_FAILED"
    PAYOUT_REFUND_CREATED = "PAYOUT_REFUND_CREATED"
    PAYOUT_REFUND_SUCCEEDED = "PAYOUT_REFUND_SUCCEEDED"
    PAYOUT_REFUND_FAILED = "PAYOUT_REFUND_FAILED"
    TRANSFER_REFUND_CREATED = "TRANSFER_REFUND_CREATED"
    TRANSFER_REFUND_SUCCEEDED = "TRANSFER_REFUND_SUCCEEDED"
    TRANSFER_REFUND_FAILED = "TRANSFER_REFUND_FAILED"
    PAYIN_REPUDIATION_CREATED = "PAYIN_REPUDIATION_CREATED"
    PAYIN_REPUDIATION_SUCCEEDED = "PAYIN_REPUDIATION_SUCCEEDED"
    PAYIN_REPUDIATION_FAILED = "PAYIN_REPUDIATION_FAILED"
    KYC_CREATED = "KYC_CREATED"
    KYC_SUCCEEDED = "KYC_SUCCEEDED"
    KYC_FAILED = "KYC_FAILED"
    KYC_VALIDATION_ASKED = "KYC_VALIDATION_ASKED"
    KYC_OUTDATED = "KYC_OUTDATED"
    DISPUTE_DOCUMENT_CREATED = "DISPUTE_DOCUMENT_CREATED"
    DISPUTE_DOCUMENT_VALIDATION_ASKED = "DISPUTE_DOCUMENT_VALIDATION_ASKED"
    DISPUTE_DOCUMENT_SUCCEEDED = "DISPUTE_DOCUMENT_SUCCEEDED"
    DISPUTE_DOCUMENT_FAILED = "DISPUTE_DOCUMENT_FAILED"
    DISPUTE_CREATED = "DISPUTE_CREATED"
    DISPUTE_SUBMITTED = "DISPUTE_SUBMITTED"
    DISPUTE_ACTION_REQUIRED = "DISPUTE_ACTION_REQUIRED"
    DISPUTE_FURTHER_ACTION_REQUIRED = "DISPUTE_FURTHER_ACTION_REQUIRED"
    DISPUTE_CLOSED = "DISPUTE_CLOSED"
    DISPUTE_SENT_TO_BANK = "DISPUTE_SENT_TO_BANK"
    TRANSFER_SETTLEMENT_CREATED = "TRANSFER_SETTLEMENT_CREATED"
    TRANSFER_SETTLEMENT_SUCCEEDED = "TRANSFER_SETTLEMENT_SUCCEEDED"
    TRANSFER_SETTLEMENT_FAILED = "TRANSFER_SETTLEMENT_FAILED"
    MANDATE_CREATED = "MANDATE_CREATED"
    MANDATE_FAILED = "MANDATED_FAILED"  # sic, as sent by the API
    MANDATE_ACTIVATED = "MANDATE_ACTIVATED"
    MANDATE_SUBMITTED = "MANDATE_SUBMITTED"


class SortDirection(Enum):
    ASCENDING = ":asc"
    DESCENDING = ":desc"


class ResultCode(Enum):
    """Documented transaction result codes"""
    # Payment session errors
    USER_NOT_REDIRECTED = "001031"
    USER_FILLING_CARD_DETAILS = "001032"
    PAYMENT_SESSION_EXPIRED = "001033"
    SESSION_EXPIRED_WITHOUT_PAYING = "001034"

    # Transaction errors
    USER_NOT_COMPLETE_TRANSACTION = "101001"
    TRANSACTION_CANCELLED_BY_USER = "101002"
    TRANSACTION_AMOUNT_TOO_HIGH = "001011"

    # 3DS errors
    SECURE_MODE_AUTHENTICATION_FAILED = "101301"
    SECURE_MODE_CARD_NOT_ENROLLED = "101302"
    SECURE_MODE_CARD_NOT_COMPATIBLE = "101303"
    SECURE_MODE_SESSION_EXPIRED = "101304"
    SECURE_MODE_NOT_AVAILABLE = "101399"
