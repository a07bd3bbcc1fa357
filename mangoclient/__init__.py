"""
MangoPay v2 API client

    from mangoclient import Credential, MangoPayService, Money

    service = MangoPayService(Credential("client-id", "passphrase"))
    user = service.new_natural_user(first_name="Ada", ...).save()
"""

import logging

from mangoclient.config import Config, Credential, load_credential_file
from mangoclient.exceptions import (
    BusinessFailureError,
    DecodeError,
    HTTPStatusError,
    MangoPayError,
    MissingParameterError,
    PayInFailedError,
    PayOutFailedError,
    ProgrammingError,
    RetryExhaustedError,
    TransferFailedError,
    TransportError,
    UnknownOperationError,
    ValidationError,
)
from mangoclient.models.base import Money, Timestamp
from mangoclient.models.enums import (
    AuthMode,
    BankAccountType,
    DocumentStatus,
    DocumentType,
    EventType,
    ExecEnvironment,
    ResultCode,
    SortDirection,
    TransactionNature,
    TransactionStatus,
    TransactionType,
)
from mangoclient.services.mangopay_service import MangoPayService
from mangoclient.services.retry_service import HTTPRetryConfig

__version__ = "0.4.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
