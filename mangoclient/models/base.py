"""
Base value types for MangoPay entities
Money and Timestamp semantic types plus the field helpers that drive wire naming
"""

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterator, Optional, Tuple
from urllib.parse import urlparse

from mangoclient.exceptions import ValidationError


@dataclass(frozen=True)
class Money:
    """Amount in minor units (120 == 1.20 EUR)"""

    currency: str = ""
    amount: int = 0

    def __post_init__(self):
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError(f"Money amount must be an integer number of minor units, got {self.amount!r}")

    @classmethod
    def from_wire(cls, data: Optional[Dict[str, Any]]) -> "Money":
        if not data:
            return cls()
        amount = data.get("Amount", 0)
        if isinstance(amount, float):
            if not amount.is_integer():
                raise ValueError(f"fractional minor-unit amount: {amount}")
            amount = int(amount)
        return cls(currency=data.get("Currency", "") or "", amount=amount)

    def to_wire(self) -> Dict[str, Any]:
        return {"Currency": self.currency, "Amount": self.amount}

    def is_zero(self) -> bool:
        return not self.currency and self.amount == 0

    def to_decimal(self) -> Decimal:
        return Decimal(self.amount).scaleb(-2)

    def __str__(self) -> str:
        return f"{self.to_decimal():.2f} {self.currency}".strip()


@dataclass(frozen=True)
class Timestamp:
    """
    Unix timestamp in whole seconds

    The API sends these as JSON numbers that may be floats; they are
    truncated to int on decode. ``Timestamp(0)`` means "never".
    """

    seconds: int = 0

    @classmethod
    def from_wire(cls, value: Any) -> "Timestamp":
        if value is None:
            return cls()
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"timestamp must be a number, got {type(value).__name__}")
        return cls(int(value))

    @classmethod
    def from_datetime(cls, value: datetime) -> "Timestamp":
        return cls(int(value.timestamp()))

    @classmethod
    def now(cls) -> "Timestamp":
        return cls(int(datetime.now(timezone.utc).timestamp()))

    def to_wire(self) -> int:
        return self.seconds

    def to_datetime(self) -> Optional[datetime]:
        if not self.seconds:
            return None
        return datetime.fromtimestamp(self.seconds, tz=timezone.utc)

    def __bool__(self) -> bool:
        return self.seconds != 0

    def __str__(self) -> str:
        if not self.seconds:
            return "Never"
        return self.to_datetime().isoformat()


# ============ FIELD HELPERS ============

_WIRE = "wire_name"
_LOCAL = "local"


def wire(default: Any = None, *, name: Optional[str] = None, default_factory: Any = None):
    """Serialized field; ``name`` overrides the derived PascalCase key"""
    metadata = {_WIRE: name} if name else {}
    if default_factory is not None:
        return field(default_factory=default_factory, metadata=metadata)
    return field(default=default, metadata=metadata)


def local(default: Any = None, *, default_factory: Any = None):
    """Caller-local field, never sent nor decoded"""
    metadata = {_LOCAL: True}
    if default_factory is not None:
        return field(default_factory=default_factory, repr=False, compare=False, metadata=metadata)
    return field(default=default, repr=False, compare=False, metadata=metadata)


def pascal_case(attribute: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in attribute.split("_") if part)


def wire_fields(shape: Any) -> Iterator[Tuple[str, str]]:
    """Yield (attribute, wire key) for every serialized field of a dataclass"""
    if not is_dataclass(shape):
        raise TypeError(f"{shape!r} is not a dataclass")
    for f in fields(shape):
        if f.metadata.get(_LOCAL):
            continue
        yield f.name, f.metadata.get(_WIRE) or pascal_case(f.name)


def validate_url(value: str, label: str) -> str:
    """Require an absolute http(s) URL"""
    parsed = urlparse(value or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(f"{label} must be an absolute http(s) URL, got {value!r}")
    return value
