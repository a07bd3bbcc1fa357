"""
Tests for the shared save() protocol: create vs update selection, payload
construction, state replacement and business-failure detection
"""

import pytest

from conftest import BASE_URL, natural_user_body, transfer_body, wallet_body
from mangoclient.exceptions import HTTPStatusError, TransferFailedError, ValidationError
from mangoclient.models.base import Money, Timestamp
from mangoclient.models.user import NaturalUser
from mangoclient.models.wallet import Wallet
from mangoclient.models.transfer import Transfer
from mangoclient.services.entity_lifecycle import (
    SERVER_OWNED_FIELDS,
    create_payload,
    encode_payload,
    is_zero_value,
    update_payload,
)


class TestPayloads:
    def test_encode_payload_uses_wire_names(self):
        wallet = Wallet(id="w-1", owners=["u-1"], description="Main", currency="EUR", balance=Money("EUR", 10))
        payload = encode_payload(wallet)

        assert payload["Owners"] == ["u-1"]
        assert payload["Balance"] == {"Currency": "EUR", "Amount": 10}
        assert payload["CreationDate"] == 0
        assert "_service" not in payload
        assert "Service" not in payload

    def test_create_payload_strips_server_and_read_only_fields(self):
        payload = {"Id": "x", "CreationDate": 1, "Status": "CREATED", "Balance": {}, "Description": "d"}
        assert create_payload(payload, frozenset({"Balance"})) == {"Description": "d"}

    def test_update_payload_keeps_id_and_drops_zero_values(self):
        payload = {
            "Id": "w-1",
            "CreationDate": 1700000000,
            "Description": "",
            "Tag": "vip",
            "Balance": {"Currency": "", "Amount": 0},
            "Active": False,
        }
        assert update_payload(payload) == {"Id": "w-1", "Tag": "vip", "Active": False}
        assert update_payload(payload, frozenset({"Tag"})) == {"Id": "w-1", "Active": False}

    def test_server_owned_fields(self):
        assert {"Id", "CreationDate", "ExecutionDate", "ResultCode", "ResultMessage", "Status"} == SERVER_OWNED_FIELDS

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("", True),
            (0, True),
            (None, True),
            (False, False),
            (Money(), True),
            (Money("EUR", 0), False),
            (Timestamp(), True),
            (Timestamp(5), False),
            ([], False),
            ("x", False),
        ],
    )
    def test_zero_values(self, value, expected):
        assert is_zero_value(value) is expected


class TestSave:
    def test_unbound_entity_cannot_be_saved(self):
        with pytest.raises(ValidationError, match="not bound"):
            NaturalUser(first_name="Ada").save()

    def test_validation_runs_before_any_request(self, service, session):
        user = service.new_natural_user(first_name="Ada")
        with pytest.raises(ValidationError) as exc_info:
            user.save()
        assert "LastName" in exc_info.value.details["missing"]
        assert session.calls == []

    def test_create_then_update(self, service, session):
        user = service.new_natural_user(
            first_name="Ada",
            last_name="Lovelace",
            email="ada@example.test",
            nationality="GB",
            country_of_residence="FR",
            birthday=Timestamp(-4691520000),
        )
        session.queue(200, natural_user_body())

        assert user.save() is user

        create_call = session.calls[0]
        assert create_call.method == "POST"
        assert create_call.url == f"{BASE_URL}/users/natural"
        body = create_call.json
        assert "Id" not in body
        assert "CreationDate" not in body
        assert "PersonType" not in body
        assert body["FirstName"] == "Ada"
        assert body["Birthday"] == -4691520000
        assert user.id == "user-1"
        assert user.creation_date == Timestamp(1700000000)
        assert user.service is service

        user.occupation = "Mathematician"
        session.queue(200, natural_user_body(Occupation="Mathematician"))
        user.save()

        update_call = session.calls[1]
        assert update_call.method == "PUT"
        assert update_call.url == f"{BASE_URL}/users/natural/user-1"
        assert update_call.json["Id"] == "user-1"
        assert update_call.json["Occupation"] == "Mathematician"
        assert "Address" not in update_call.json
        assert "CreationDate" not in update_call.json
        assert user.occupation == "Mathematician"

    def test_failed_save_leaves_state_untouched(self, service, session):
        wallet = service.new_wallet(["user-1"], "Main", "EUR")
        session.queue(400, {"Message": "Currency not supported"})

        with pytest.raises(HTTPStatusError):
            wallet.save()

        assert wallet.id == ""
        assert wallet.description == "Main"
        assert wallet.service is service

    def test_response_replaces_wire_state_but_keeps_binding(self, service, session):
        wallet = service.new_wallet(["user-1"], "Main", "EUR")
        session.queue(200, wallet_body(Tag="from-server"))
        wallet.save()

        assert wallet.description == "Main wallet"
        assert wallet.tag == "from-server"
        assert wallet.service is service

    def test_resource_without_update_is_recreated(self, service, session, caplog):
        transfer = Transfer(
            id="transfer-1",
            author_id="user-1",
            debited_funds=Money("EUR", 1000),
            fees=Money("EUR", 100),
            debited_wallet_id="wallet-1",
            credited_wallet_id="wallet-2",
        ).bind(service)
        session.queue(200, transfer_body("transfer-2"))

        transfer.save()

        assert session.calls[0].method == "POST"
        assert session.calls[0].url == f"{BASE_URL}/transfers"
        assert "Id" not in session.calls[0].json
        assert transfer.id == "transfer-2"
        assert "no update operation" in caplog.text

    def test_failed_transaction_raises_with_updated_entity(self, service, session):
        author = NaturalUser(id="user-1")
        source = Wallet(id="wallet-1")
        destination = Wallet(id="wallet-2")
        transfer = service.new_transfer(author, Money("EUR", 1000), Money("EUR", 100), source, destination)
        session.queue(200, transfer_body(status="FAILED"))

        with pytest.raises(TransferFailedError) as exc_info:
            transfer.save()

        error = exc_info.value
        assert error.entity is transfer
        assert error.entity_id == "transfer-1"
        assert error.result_code == "001001"
        assert error.result_message == "Unsufficient wallet balance"
        assert str(error) == "transfer transfer-1 failed: Unsufficient wallet balance"
        assert transfer.id == "transfer-1"
        assert transfer.failed
