"""
MangoPay Response Decoder
Turns HTTP responses into typed entities, and non-2xx responses into HTTPStatusError

One generic helper serves every entity shape: decode_payload() walks the
dataclass type hints of the target class and coerces each JSON value.
"""

import json
import logging
import typing
from dataclasses import is_dataclass
from functools import lru_cache
from typing import Any, Dict, List, Type, TypeVar

from mangoclient.exceptions import DecodeError, HTTPStatusError
from mangoclient.models.base import Money, Timestamp, wire_fields

logger = logging.getLogger(__name__)
T = TypeVar("T")


def raise_for_service_error(response) -> None:
    """
    Raise HTTPStatusError for a non-2xx response

    The error body is parsed as {"Message": str, "errors": {...}}. A body that
    is not a JSON object still raises, with the raw text as the message.
    """
    status = response.status_code
    if 200 <= status < 300:
        return

    message = ""
    errors: Dict[str, Any] = {}
    text = response.text or ""
    try:
        body = json.loads(text) if text.strip() else {}
    except ValueError:
        body = None

    if isinstance(body, dict):
        message = str(body.get("Message") or body.get("message") or "")
        raw_errors = body.get("errors") or body.get("Errors") or {}
        if isinstance(raw_errors, dict):
            errors = raw_errors
    else:
        message = text.strip()[:500]

    logger.error(f"❌ MangoPay HTTP {status} for {getattr(response, 'url', '')}: {message}")
    raise HTTPStatusError(status, message, errors, url=getattr(response, "url", "") or "")


def decode_json(response) -> Any:
    """Parse a response body; an empty body is None, malformed JSON is a DecodeError"""
    text = response.text
    if not text or not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError as e:
        raise DecodeError(f"malformed JSON in response: {e}", {"body": text[:200]}) from e


@lru_cache(maxsize=None)
def _hints(cls: type) -> Dict[str, Any]:
    return typing.get_type_hints(cls)


def _coerce(hint: Any, value: Any, key: str) -> Any:
    if value is None:
        return None

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)

    if origin is typing.Union:
        options = [a for a in args if a is not type(None)]
        if len(options) == 1:
            return _coerce(options[0], value, key)
        return value

    if hint is Any:
        return value
    if hint is Timestamp:
        try:
            return Timestamp.from_wire(value)
        except TypeError as e:
            raise DecodeError(f"field {key}: {e}") from e
    if hint is Money:
        if not isinstance(value, dict):
            raise DecodeError(f"field {key}: expected Money object, got {type(value).__name__}")
        try:
            return Money.from_wire(value)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"field {key}: {e}") from e
    if hint is bool:
        if not isinstance(value, bool):
            raise DecodeError(f"field {key}: expected boolean, got {type(value).__name__}")
        return value
    if hint is int:
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError(f"field {key}: expected integer, got {value!r}")
        return value
    if hint is str:
        if not isinstance(value, str):
            raise DecodeError(f"field {key}: expected string, got {type(value).__name__}")
        return value
    if origin in (list, List):
        if not isinstance(value, list):
            raise DecodeError(f"field {key}: expected list, got {type(value).__name__}")
        item = args[0] if args else Any
        return [_coerce(item, v, key) for v in value]
    if origin in (dict, Dict) or hint is dict:
        if not isinstance(value, dict):
            raise DecodeError(f"field {key}: expected object, got {type(value).__name__}")
        return dict(value)
    if isinstance(hint, type) and is_dataclass(hint):
        return decode_payload(hint, value)
    return value


def decode_payload(cls: Type[T], data: Any) -> T:
    """Build a fresh ``cls`` from a decoded JSON object; unknown keys are ignored"""
    if not isinstance(data, dict):
        raise DecodeError(f"cannot decode {type(data).__name__} into {cls.__name__}")

    hints = _hints(cls)
    values = {}
    for attribute, key in wire_fields(cls):
        if key not in data:
            continue
        coerced = _coerce(hints.get(attribute, Any), data[key], key)
        if coerced is not None:
            values[attribute] = coerced
    return cls(**values)


def decode_response(response, cls: Type[T]) -> T:
    return decode_payload(cls, decode_json(response))


def decode_list(response, cls: Type[T]) -> List[T]:
    data = decode_json(response)
    if data is None:
        return []
    if not isinstance(data, list):
        raise DecodeError(f"expected a JSON list of {cls.__name__}, got {type(data).__name__}")
    return [decode_payload(cls, item) for item in data]
