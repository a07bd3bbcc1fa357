"""MangoPay webhooks (one hook per event type)"""

from dataclasses import dataclass
from typing import Any, Dict

from mangoclient.exceptions import ValidationError
from mangoclient.models.base import validate_url
from mangoclient.models.enums import EventType, HookStatus
from mangoclient.services.action_registry import Operation
from mangoclient.services.entity_lifecycle import Resource


@dataclass
class Hook(Resource):
    url: str = ""
    event_type: str = ""
    status: str = ""
    validity: str = ""

    create_operation = Operation.CREATE_HOOK
    update_operation = Operation.UPDATE_HOOK
    read_only_fields = frozenset({"Validity"})

    def validate(self) -> None:
        if self.url or not self.is_persisted:
            validate_url(self.url, "Url")
        if not self.is_persisted and self.event_type not in {e.value for e in EventType}:
            raise ValidationError(f"unknown event type: {self.event_type!r}")
        if self.status and self.status not in {s.value for s in HookStatus}:
            raise ValidationError(f"unknown hook status: {self.status!r}")

    def _prepare_payload(self, payload: Dict[str, Any], creating: bool) -> Dict[str, Any]:
        if not creating:
            # the event type is fixed; enabling/disabling goes through Status
            payload.pop("EventType", None)
            if self.status:
                payload["Status"] = self.status
        return payload
