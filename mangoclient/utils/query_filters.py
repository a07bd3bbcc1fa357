"""
Query filters and sorts for MangoPay list endpoints

Each helper validates its value and adds it to a plain dict that is passed
as ``query=`` to a list call:

    params = {}
    add_transaction_nature_filter(params, TransactionNature.REGULAR)
    sort_by_creation_date(params, SortDirection.DESCENDING)
    service.transfers(user, query=params)
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, Union

from mangoclient.exceptions import ValidationError
from mangoclient.models.base import Timestamp
from mangoclient.models.enums import (
    DocumentStatus,
    DocumentType,
    SortDirection,
    TransactionNature,
    TransactionStatus,
    TransactionType,
)

Params = Dict[str, Any]


def _value(value: Union[str, Enum]) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def _add_filter(params: Params, key: str, value: Union[str, Enum], allowed: Iterable[Enum]) -> Params:
    raw = _value(value)
    valid = [member.value for member in allowed]
    if raw not in valid:
        raise ValidationError(f"invalid value {raw} for key {key}", {"allowed": valid})
    params[key] = raw
    return params


def add_transaction_nature_filter(params: Params, value: Union[str, TransactionNature]) -> Params:
    return _add_filter(params, "Nature", value, TransactionNature)


def add_transaction_status_filter(params: Params, value: Union[str, TransactionStatus]) -> Params:
    return _add_filter(params, "Status", value, TransactionStatus)


def add_transaction_type_filter(params: Params, value: Union[str, TransactionType]) -> Params:
    return _add_filter(params, "Type", value, TransactionType)


def add_kyc_status_filter(params: Params, value: Union[str, DocumentStatus]) -> Params:
    allowed = [DocumentStatus.VALIDATION_ASKED, DocumentStatus.VALIDATED, DocumentStatus.REFUSED]
    return _add_filter(params, "Status", value, allowed)


def add_kyc_type_filter(params: Params, value: Union[str, DocumentType]) -> Params:
    return _add_filter(params, "Type", value, DocumentType)


def _unix(value: Union[datetime, Timestamp, int]) -> int:
    if isinstance(value, datetime):
        return int(value.timestamp())
    if isinstance(value, Timestamp):
        return value.seconds
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"date filter expects a datetime, Timestamp or unix seconds, got {value!r}")
    return value


def add_before_date_filter(params: Params, value: Union[datetime, Timestamp, int]) -> Params:
    params["BeforeDate"] = _unix(value)
    return params


def add_after_date_filter(params: Params, value: Union[datetime, Timestamp, int]) -> Params:
    params["AfterDate"] = _unix(value)
    return params


SORT_KEYS = ("CreationDate", "ExecutionDate", "Date")


def add_sort(params: Params, key: str, direction: Union[str, SortDirection] = SortDirection.ASCENDING) -> Params:
    if key not in SORT_KEYS:
        raise ValidationError(f"invalid sort key '{key}'", {"allowed": list(SORT_KEYS)})
    raw = _value(direction)
    if raw not in (SortDirection.ASCENDING.value, SortDirection.DESCENDING.value):
        raise ValidationError(f"invalid direction for sort '{raw}'")
    params["Sort"] = f"{key}{raw}"
    return params


def sort_by_creation_date(params: Params, direction: Union[str, SortDirection] = SortDirection.ASCENDING) -> Params:
    """Users, cards, bank accounts, KYC documents and transactions"""
    return add_sort(params, "CreationDate", direction)


def sort_by_execution_date(params: Params, direction: Union[str, SortDirection] = SortDirection.ASCENDING) -> Params:
    """Wallet and user transactions"""
    return add_sort(params, "ExecutionDate", direction)


def sort_events_by_date(params: Params, direction: Union[str, SortDirection] = SortDirection.ASCENDING) -> Params:
    return add_sort(params, "Date", direction)
