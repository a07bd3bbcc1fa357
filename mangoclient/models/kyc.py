"""MangoPay KYC documents"""

import base64
import logging
from dataclasses import dataclass

from mangoclient.exceptions import ValidationError
from mangoclient.models.enums import DocumentStatus, DocumentType
from mangoclient.services.action_registry import Operation
from mangoclient.services.entity_lifecycle import Resource
from mangoclient.services.response_decoder import decode_response

logger = logging.getLogger(__name__)


@dataclass
class Document(Resource):
    user_id: str = ""
    status: str = ""
    type: str = ""
    refused_reason_message: str = ""
    refused_reason_type: str = ""

    create_operation = Operation.CREATE_KYC_DOCUMENT
    read_only_fields = frozenset({"RefusedReasonMessage", "RefusedReasonType"})

    def validate(self) -> None:
        if not self.user_id:
            raise ValidationError("document user has empty Id")
        if self.type not in {t.value for t in DocumentType}:
            raise ValidationError(f"unknown KYC document type: {self.type!r}")

    def _require_ids(self) -> None:
        if not self.is_persisted or not self.user_id:
            raise ValidationError("document must be created before it is submitted")

    def submit(self, status: str = DocumentStatus.VALIDATION_ASKED.value, tag: str = "") -> "Document":
        """Ask for validation once every page is uploaded"""
        self._require_ids()
        payload = {"Id": self.id, "UserId": self.user_id, "Status": status}
        if tag:
            payload["Tag"] = tag
        response = self._require_service().dispatch(Operation.SUBMIT_KYC_DOCUMENT, payload)
        self.replace_state(decode_response(response, Document))
        logger.info(f"📄 KYC document {self.id} submitted ({self.status})")
        return self

    def create_page(self, content: bytes) -> None:
        """Upload one page; the file travels base64-encoded"""
        self._require_ids()
        if not content:
            raise ValidationError("KYC page is empty")
        payload = {
            "Id": self.id,
            "UserId": self.user_id,
            "File": base64.b64encode(content).decode("ascii"),
        }
        self._require_service().dispatch(Operation.CREATE_KYC_PAGE, payload)
        logger.info(f"📄 KYC page uploaded for document {self.id} ({len(content)} bytes)")
