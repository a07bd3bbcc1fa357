"""
Entity Lifecycle
Shared save() protocol for every MangoPay resource

An entity with an empty ``id`` is transient and save() creates it; once the
API has assigned an id it is persisted and save() updates it, when the
resource has an update operation. The payload is built from the entity's wire
fields:

- create: server-owned fields and the resource's read-only fields are stripped
- update: the same, except Id (needed for the path), and every zero value is
  dropped so a partial update never blanks a remote field

The decoded response then replaces the entity's wire state in one step;
caller-local fields such as the service binding are left untouched.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, Optional, Type, TypeVar

from mangoclient.exceptions import BusinessFailureError, ProgrammingError, ValidationError
from mangoclient.models.base import Money, Timestamp, local, wire_fields
from mangoclient.services.action_registry import Operation
from mangoclient.services.response_decoder import decode_response

logger = logging.getLogger(__name__)
R = TypeVar("R", bound="Resource")

SERVER_OWNED_FIELDS = frozenset({"Id", "CreationDate", "ExecutionDate", "ResultCode", "ResultMessage", "Status"})
FAILED_STATUS = "FAILED"


def encode_value(value: Any) -> Any:
    if isinstance(value, (Money, Timestamp)):
        return value.to_wire()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [encode_value(v) for v in value]
    if isinstance(value, dict):
        return {k: encode_value(v) for k, v in value.items()}
    return value


def encode_payload(entity: Any) -> Dict[str, Any]:
    """Generic key/value view of an entity's wire fields; None values are omitted"""
    payload = {}
    for attribute, key in wire_fields(entity):
        value = getattr(entity, attribute)
        if value is None:
            continue
        payload[key] = encode_value(value)
    return payload


def is_zero_value(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (str, int, float)):
        return not value
    if isinstance(value, Timestamp):
        return not value
    if isinstance(value, Money):
        return value.is_zero()
    if isinstance(value, dict) and set(value) == {"Currency", "Amount"}:
        return not value["Currency"] and not value["Amount"]
    return False


def create_payload(payload: Dict[str, Any], read_only: FrozenSet[str] = frozenset()) -> Dict[str, Any]:
    stripped = SERVER_OWNED_FIELDS | read_only
    return {k: v for k, v in payload.items() if k not in stripped}


def update_payload(payload: Dict[str, Any], read_only: FrozenSet[str] = frozenset()) -> Dict[str, Any]:
    stripped = (SERVER_OWNED_FIELDS | read_only) - {"Id"}
    return {k: v for k, v in payload.items() if k not in stripped and (k == "Id" or not is_zero_value(v))}


@dataclass
class Resource:
    """
    Base for every MangoPay entity

    Subclasses set ``create_operation`` and optionally ``update_operation``,
    list extra never-sent keys in ``read_only_fields`` and, for transactions,
    the ``failure_error`` raised when the saved entity comes back FAILED.
    """

    id: str = ""
    tag: str = ""
    creation_date: Timestamp = Timestamp()
    _service: Any = local()

    create_operation: ClassVar[Optional[Operation]] = None
    update_operation: ClassVar[Optional[Operation]] = None
    read_only_fields: ClassVar[FrozenSet[str]] = frozenset()
    failure_error: ClassVar[Optional[Type[BusinessFailureError]]] = None

    @property
    def service(self):
        return self._service

    def bind(self: R, service: Any) -> R:
        self._service = service
        return self

    @property
    def is_persisted(self) -> bool:
        return bool(self.id)

    def _require_service(self):
        if self._service is None:
            raise ValidationError(f"{type(self).__name__} is not bound to a MangoPay service")
        return self._service

    def validate(self) -> None:
        """Local preconditions checked before any request; raise ValidationError"""
        pass

    def _prepare_payload(self, payload: Dict[str, Any], creating: bool) -> Dict[str, Any]:
        return payload

    def _path_params(self, creating: bool) -> Dict[str, Any]:
        return {}

    def build_payload(self, creating: bool) -> Dict[str, Any]:
        payload = encode_payload(self)
        if creating:
            payload = create_payload(payload, self.read_only_fields)
        else:
            payload = update_payload(payload, self.read_only_fields)
        return self._prepare_payload(payload, creating)

    def save(self: R) -> R:
        service = self._require_service()
        self.validate()

        creating = not self.is_persisted
        operation = self.create_operation
        if not creating:
            if self.update_operation is not None:
                operation = self.update_operation
            else:
                creating = True
                logger.warning(
                    f"⚠️ {type(self).__name__} {self.id} has no update operation; save() creates a new one"
                )
        if operation is None:
            raise ProgrammingError(f"{type(self).__name__} cannot be saved")

        payload = self.build_payload(creating)
        response = service.dispatch(operation, payload, path_params=self._path_params(creating))
        self.replace_state(decode_response(response, type(self)))
        self._check_outcome()
        return self

    def replace_state(self, fresh: "Resource") -> None:
        """Swap in every wire field of ``fresh`` at once, keeping local fields"""
        self.__dict__.update({attribute: getattr(fresh, attribute) for attribute, _ in wire_fields(fresh)})

    def _check_outcome(self) -> None:
        if self.failure_error is not None and getattr(self, "status", "") == FAILED_STATUS:
            message = getattr(self, "result_message", "")
            logger.warning(f"⚠️ {type(self).__name__} {self.id} FAILED: {message}")
            raise self.failure_error(self.id, message, entity=self, result_code=getattr(self, "result_code", ""))

