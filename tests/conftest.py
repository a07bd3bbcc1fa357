"""
Shared fixtures for the MangoPay client test suite

FakeSession stands in for requests.Session: every request() pops the next
scripted response (or raises a scripted exception) and records the call, so
tests can assert on method, URL, headers, query and JSON body without any
network access.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest
import requests

from mangoclient.config import Credential
from mangoclient.models.enums import AuthMode, ExecEnvironment
from mangoclient.services.mangopay_service import MangoPayService
from mangoclient.services.retry_service import HTTPRetryConfig

CLIENT_ID = "acme-marketplace"
PASSPHRASE = "s3cr3t-passphrase"
ROOT_URL = "https://api.sandbox.mangopay.com/v2/"
BASE_URL = f"{ROOT_URL}{CLIENT_ID}"


def make_response(status_code: int = 200, body: Any = None, text: Optional[str] = None) -> Mock:
    """requests.Response look-alike carrying a JSON (or raw text) body"""
    response = Mock()
    response.status_code = status_code
    if text is None:
        text = json.dumps(body) if body is not None else ""
    response.text = text
    response.url = ""
    return response


@dataclass
class RecordedCall:
    method: str
    url: str
    kwargs: Dict[str, Any] = field(default_factory=dict)

    @property
    def headers(self) -> Dict[str, str]:
        return self.kwargs.get("headers") or {}

    @property
    def params(self) -> Dict[str, Any]:
        return self.kwargs.get("params") or {}

    @property
    def json(self) -> Any:
        data = self.kwargs.get("data")
        return json.loads(data) if data else None


class FakeSession:
    def __init__(self):
        self.responses: List[Any] = []
        self.calls: List[RecordedCall] = []
        self.token_calls: List[RecordedCall] = []
        self.token_responses: List[Any] = []

    def queue(self, status_code: int = 200, body: Any = None, text: Optional[str] = None) -> "FakeSession":
        self.responses.append(make_response(status_code, body, text))
        return self

    def queue_error(self, error: Exception) -> "FakeSession":
        self.responses.append(error)
        return self

    def queue_token(self, access_token: str = "token-1", expires_in: int = 3600, status_code: int = 200) -> None:
        body = {"access_token": access_token, "token_type": "Bearer", "expires_in": expires_in}
        self.token_responses.append(make_response(status_code, body))

    def request(self, method: str, url: str, **kwargs):
        self.calls.append(RecordedCall(method, url, kwargs))
        if not self.responses:
            raise AssertionError(f"unexpected request {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        item.url = url
        return item

    def post(self, url: str, **kwargs):
        self.token_calls.append(RecordedCall("POST", url, kwargs))
        if not self.token_responses:
            raise AssertionError(f"unexpected token request {url}")
        item = self.token_responses.pop(0)
        if isinstance(item, Exception):
            raise item
        item.url = url
        return item


@pytest.fixture
def credential():
    return Credential(CLIENT_ID, PASSPHRASE, ExecEnvironment.SANDBOX, name="Acme", email="ops@acme.test")


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def service(credential, session, sleeps):
    """Basic-auth service over the fake session; retries never really sleep"""
    return MangoPayService(
        credential,
        auth_mode=AuthMode.BASIC,
        session=session,
        retry=HTTPRetryConfig(attempts=3, pause=0.5),
        sleep=sleeps.append,
    )


def natural_user_body(user_id: str = "user-1", **overrides) -> Dict[str, Any]:
    body = {
        "Id": user_id,
        "CreationDate": 1700000000,
        "Tag": "",
        "PersonType": "NATURAL",
        "Email": "ada@example.test",
        "FirstName": "Ada",
        "LastName": "Lovelace",
        "Address": "",
        "Birthday": 0,
        "Nationality": "GB",
        "CountryOfResidence": "FR",
        "Occupation": "",
        "IncomeRange": "",
        "ProofOfIdentity": None,
        "ProofOfAddress": None,
    }
    body.update(overrides)
    return body


def wallet_body(wallet_id: str = "wallet-1", owners=("user-1",), amount: int = 0, **overrides) -> Dict[str, Any]:
    body = {
        "Id": wallet_id,
        "CreationDate": 1700000100,
        "Tag": "",
        "Owners": list(owners),
        "Description": "Main wallet",
        "Currency": "EUR",
        "Balance": {"Currency": "EUR", "Amount": amount},
    }
    body.update(overrides)
    return body


def transfer_body(transfer_id: str = "transfer-1", status: str = "SUCCEEDED", **overrides) -> Dict[str, Any]:
    body = {
        "Id": transfer_id,
        "CreationDate": 1700000200,
        "Tag": "",
        "AuthorId": "user-1",
        "CreditedUserId": "user-2",
        "DebitedFunds": {"Currency": "EUR", "Amount": 1000},
        "Fees": {"Currency": "EUR", "Amount": 100},
        "CreditedFunds": {"Currency": "EUR", "Amount": 900},
        "Status": status,
        "ResultCode": "000000" if status == "SUCCEEDED" else "001001",
        "ResultMessage": "Success" if status == "SUCCEEDED" else "Unsufficient wallet balance",
        "ExecutionDate": 1700000201,
        "Type": "TRANSFER",
        "Nature": "REGULAR",
        "DebitedWalletId": "wallet-1",
        "CreditedWalletId": "wallet-2",
    }
    body.update(overrides)
    return body
