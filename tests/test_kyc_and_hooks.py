"""
Tests for KYC documents, webhooks and hook event parsing
"""

import base64

import pytest

from conftest import BASE_URL
from mangoclient.exceptions import ValidationError
from mangoclient.models.base import Timestamp
from mangoclient.models.enums import DocumentType, EventType
from mangoclient.models.event import Event
from mangoclient.models.hook import Hook
from mangoclient.models.kyc import Document
from mangoclient.models.user import NaturalUser


class TestDocuments:
    @pytest.fixture
    def user(self, service):
        return NaturalUser(id="user-1").bind(service)

    def test_create_upload_submit(self, service, session, user):
        session.queue(200, {"Id": "doc-1", "UserId": "user-1", "Type": "IDENTITY_PROOF", "Status": "CREATED"})
        document = service.new_document(user, DocumentType.IDENTITY_PROOF, tag="passport")

        create_call = session.calls[0]
        assert create_call.url == f"{BASE_URL}/users/user-1/KYC/documents"
        assert create_call.json == {"Tag": "passport", "UserId": "user-1", "Type": "IDENTITY_PROOF"}
        assert document.id == "doc-1"
        assert document.status == "CREATED"

        session.queue(204, text="")
        document.create_page(b"%PDF-1.4 scanned passport")

        page_call = session.calls[1]
        assert page_call.method == "POST"
        assert page_call.url == f"{BASE_URL}/users/user-1/KYC/documents/doc-1/pages"
        assert base64.b64decode(page_call.json["File"]) == b"%PDF-1.4 scanned passport"

        session.queue(200, {"Id": "doc-1", "UserId": "user-1", "Type": "IDENTITY_PROOF", "Status": "VALIDATION_ASKED"})
        document.submit()

        submit_call = session.calls[2]
        assert submit_call.method == "PUT"
        assert submit_call.url == f"{BASE_URL}/users/user-1/KYC/documents/doc-1"
        assert submit_call.json == {"Id": "doc-1", "UserId": "user-1", "Status": "VALIDATION_ASKED"}
        assert document.status == "VALIDATION_ASKED"

    def test_empty_page_is_rejected(self, service, session):
        document = Document(id="doc-1", user_id="user-1", type="IDENTITY_PROOF").bind(service)
        with pytest.raises(ValidationError, match="empty"):
            document.create_page(b"")
        assert session.calls == []

    def test_submit_before_create(self, service):
        with pytest.raises(ValidationError):
            Document(user_id="user-1", type="IDENTITY_PROOF").bind(service).submit()

    def test_unknown_document_type(self, service, session):
        document = Document(user_id="user-1", type="SELFIE").bind(service)
        with pytest.raises(ValidationError, match="SELFIE"):
            document.save()
        assert session.calls == []

    def test_refused_document(self, service, session):
        session.queue(
            200,
            {
                "Id": "doc-2",
                "Status": "REFUSED",
                "RefusedReasonType": "DOCUMENT_UNREADABLE",
                "RefusedReasonMessage": "Blurry scan",
            },
        )
        document = service.document("doc-2")
        assert document.refused_reason_type == "DOCUMENT_UNREADABLE"
        assert session.calls[0].url == f"{BASE_URL}/KYC/documents/doc-2"

    def test_listings(self, service, session, user):
        session.queue(200, [{"Id": "doc-1"}])
        assert [d.id for d in user.documents()] == ["doc-1"]
        assert session.calls[0].url == f"{BASE_URL}/users/user-1/KYC/documents"

        session.queue(200, [{"Id": "doc-1"}, {"Id": "doc-2"}])
        assert len(service.documents(query={"Status": "VALIDATED"})) == 2
        assert session.calls[1].url == f"{BASE_URL}/KYC/documents"
        assert session.calls[1].params == {"Status": "VALIDATED"}


class TestHooks:
    def test_create_hook(self, service, session):
        hook = service.new_hook(EventType.PAYIN_NORMAL_SUCCEEDED, "https://shop.test/hooks/payin")
        session.queue(
            200,
            {
                "Id": "hook-1",
                "Url": "https://shop.test/hooks/payin",
                "EventType": "PAYIN_NORMAL_SUCCEEDED",
                "Status": "ENABLED",
                "Validity": "VALID",
            },
        )

        hook.save()

        call = session.calls[0]
        assert call.url == f"{BASE_URL}/hooks"
        assert call.json == {"Tag": "", "Url": "https://shop.test/hooks/payin", "EventType": "PAYIN_NORMAL_SUCCEEDED"}
        assert hook.validity == "VALID"

    def test_update_hook(self, service, session):
        hook = Hook(id="hook-1", url="https://shop.test/old", event_type="KYC_FAILED", status="ENABLED").bind(service)
        hook.url = "https://shop.test/new"
        hook.status = "DISABLED"
        session.queue(200, {"Id": "hook-1", "Url": "https://shop.test/new", "Status": "DISABLED"})

        hook.save()

        call = session.calls[0]
        assert call.method == "PUT"
        assert call.url == f"{BASE_URL}/hooks/hook-1"
        assert call.json == {"Id": "hook-1", "Url": "https://shop.test/new", "Status": "DISABLED"}
        assert hook.status == "DISABLED"

    def test_hook_url_must_be_absolute(self, service):
        with pytest.raises(ValidationError, match="Url"):
            service.new_hook(EventType.KYC_FAILED, "shop.test/hooks").validate()

    def test_unknown_event_type(self, service):
        with pytest.raises(ValidationError):
            Hook(url="https://shop.test/h", event_type="SOMETHING_ELSE").validate()

    def test_mandate_event_spelling(self):
        assert EventType("MANDATED_FAILED") is EventType.MANDATE_FAILED


class TestEvents:
    def test_from_hook_query(self):
        event = Event.from_query(
            {"RessourceId": "payin-1", "EventType": "PAYIN_NORMAL_SUCCEEDED", "Date": "1700000000"}
        )
        assert event.resource_id == "payin-1"
        assert event.event_type == EventType.PAYIN_NORMAL_SUCCEEDED.value
        assert event.date == Timestamp(1700000000)

    def test_resource_id_fallback(self):
        event = Event.from_query({"ResourceId": "transfer-1", "EventType": "TRANSFER_NORMAL_FAILED", "Date": "1"})
        assert event.resource_id == "transfer-1"

    @pytest.mark.parametrize("raw_date", ["", "yesterday", "1.5"])
    def test_bad_date(self, raw_date):
        with pytest.raises(ValidationError, match="Date"):
            Event.from_query({"RessourceId": "x", "EventType": "KYC_FAILED", "Date": raw_date})
