"""
MangoPay Client Exceptions
Error taxonomy shared by the dispatcher, decoder and entity lifecycle

Categories:
- ProgrammingError: caller/integration bugs (unknown operation, missing path parameter)
- TransportError: no response was received (DNS, connection, timeout)
- HTTPStatusError: non-2xx response carrying the service error body
- BusinessFailureError: 2xx response whose transaction status is FAILED
- ValidationError: local precondition failures raised before any network call
- DecodeError: malformed JSON or a payload that does not fit the target shape
"""

from typing import Any, Dict, Optional


class MangoPayError(Exception):
    """Base exception for every error raised by the client"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


# ============ PROGRAMMING ERRORS ============


class ProgrammingError(MangoPayError):
    """Integration bug; never retried"""

    pass


class UnknownOperationError(ProgrammingError):
    def __init__(self, operation: Any):
        super().__init__(f"unknown operation: {operation!r}", {"operation": repr(operation)})
        self.operation = operation


class MissingParameterError(ProgrammingError):
    """A path placeholder has no value in the payload"""

    def __init__(self, name: str, operation: Any = None):
        message = f"missing required parameter: {name}"
        if operation is not None:
            message = f"{message} (operation {getattr(operation, 'name', operation)})"
        super().__init__(message, {"parameter": name})
        self.name = name
        self.operation = operation


# ============ NETWORK AND HTTP ERRORS ============


class TransportError(MangoPayError):
    """No HTTP response was received"""

    def __init__(self, message: str, original_exception: Optional[Exception] = None, url: str = ""):
        super().__init__(message, {"url": url})
        self.original_exception = original_exception
        self.url = url


class HTTPStatusError(MangoPayError):
    """
    Non-2xx response from the API

    The service error body is {"Message": str, "errors": {field: detail}}; both
    keys are optional and surface as ``message`` and ``errors``.
    """

    def __init__(self, status_code: int, message: str = "", errors: Optional[Dict[str, Any]] = None, url: str = ""):
        self.status_code = status_code
        self.errors = errors or {}
        self.url = url
        text = f"HTTP {status_code}"
        if message:
            text = f"{text}: {message}"
        if self.errors:
            details = ", ".join(f"{field}: {detail}" for field, detail in self.errors.items())
            text = f"{text} ({details})"
        super().__init__(text, {"status_code": status_code, "errors": self.errors, "url": url})
        self.message = message or text


class RetryExhaustedError(HTTPStatusError):
    """Every attempt ended on a retryable status"""

    def __init__(self, url: str, attempts: int, last_status: int):
        super().__init__(last_status, f"request retrying failed for URL {url}", url=url)
        self.attempts = attempts
        self.last_status = last_status
        self.details["attempts"] = attempts


# ============ BUSINESS FAILURES ============


class BusinessFailureError(MangoPayError):
    """
    The request succeeded but the resulting transaction did not

    ``entity`` is the already-updated resource so callers can inspect
    ResultCode / ResultMessage.
    """

    kind = "transaction"

    def __init__(self, entity_id: str, message: str, entity: Any = None, result_code: str = ""):
        super().__init__(
            f"{self.kind} {entity_id} failed: {message}",
            {"entity_id": entity_id, "result_code": result_code},
        )
        self.entity_id = entity_id
        self.result_message = message
        self.result_code = result_code
        self.entity = entity


class TransferFailedError(BusinessFailureError):
    kind = "transfer"


class PayInFailedError(BusinessFailureError):
    kind = "payin"


class PayOutFailedError(BusinessFailureError):
    kind = "payout"


# ============ LOCAL ERRORS ============


class ValidationError(MangoPayError):
    """Local precondition failed before any network call"""

    pass


class DecodeError(MangoPayError):
    """Response body could not be decoded into the requested shape"""

    pass
