"""
Tests for Basic and OAuth authorization strategies
"""

import base64
import threading
import time

import pytest
import requests

from conftest import CLIENT_ID, PASSPHRASE, ROOT_URL, FakeSession, make_response
from mangoclient.exceptions import DecodeError, HTTPStatusError, TransportError
from mangoclient.services.auth_provider import (
    BasicAuthProvider,
    OAuthToken,
    OAuthTokenProvider,
    TokenState,
    basic_authorization,
)

BASIC_HEADER = "Basic " + base64.b64encode(f"{CLIENT_ID}:{PASSPHRASE}".encode()).decode()


class Clock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestBasicAuth:
    def test_basic_authorization_header(self):
        assert basic_authorization(CLIENT_ID, PASSPHRASE) == BASIC_HEADER
        assert basic_authorization("acme", "secret") == "Basic YWNtZTpzZWNyZXQ="

    def test_provider_is_stateless(self):
        provider = BasicAuthProvider(CLIENT_ID, PASSPHRASE)
        assert provider.authorization() == BASIC_HEADER
        assert provider.authorization() == BASIC_HEADER


class TestOAuthTokenProvider:
    @pytest.fixture
    def clock(self):
        return Clock()

    @pytest.fixture
    def session(self):
        return FakeSession()

    @pytest.fixture
    def provider(self, session, clock):
        return OAuthTokenProvider(CLIENT_ID, PASSPHRASE, ROOT_URL, session=session, timeout=5, clock=clock)

    def test_first_call_requests_a_token(self, provider, session, clock):
        session.queue_token("token-1", expires_in=3600)

        assert provider.state is TokenState.ABSENT
        assert provider.authorization() == "Bearer token-1"

        assert len(session.token_calls) == 1
        call = session.token_calls[0]
        assert call.url == f"{ROOT_URL}oauth/token"
        assert call.kwargs["data"] == "grant_type=client_credentials"
        assert call.headers["Authorization"] == BASIC_HEADER
        assert call.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert call.kwargs["timeout"] == 5
        assert provider.token.issued_at == clock.now
        assert provider.state is TokenState.VALID

    def test_valid_token_is_reused(self, provider, session, clock):
        session.queue_token("token-1", expires_in=3600)
        provider.authorization()
        clock.now += 100
        assert provider.authorization() == "Bearer token-1"
        assert len(session.token_calls) == 1

    def test_token_reused_before_safety_margin(self, provider, session, clock):
        provider._token = OAuthToken("token-1", "Bearer", 3600, clock.now)
        clock.now += 3600 - 60 - 2
        assert provider.state is TokenState.VALID
        assert provider.authorization() == "Bearer token-1"
        assert session.token_calls == []

    def test_token_refreshed_at_safety_margin(self, provider, session, clock):
        # issued ttl - margin - 1 seconds ago
        provider._token = OAuthToken("token-1", "Bearer", 3600, clock.now - (3600 - 60 - 1))
        session.queue_token("token-2", expires_in=3600)

        assert provider.state is TokenState.EXPIRED
        assert provider.authorization() == "Bearer token-2"
        assert len(session.token_calls) == 1

    def test_token_refreshed_inside_safety_margin(self, provider, session, clock):
        provider._token = OAuthToken("token-1", "Bearer", 3600, clock.now)
        clock.now += 3600 - 30
        session.queue_token("token-2", expires_in=3600)

        assert provider.state is TokenState.EXPIRED
        assert provider.authorization() == "Bearer token-2"
        assert len(session.token_calls) == 1

    def test_token_issued_now_is_valid(self, provider, clock):
        provider._token = OAuthToken("token-1", "Bearer", 3600, clock.now)
        assert provider.state is TokenState.VALID

    def test_concurrent_callers_share_one_refresh(self, clock):
        class SlowTokenSession(FakeSession):
            def post(self, url, **kwargs):
                time.sleep(0.05)
                return super().post(url, **kwargs)

        session = SlowTokenSession()
        session.queue_token("token-1")
        provider = OAuthTokenProvider(CLIENT_ID, PASSPHRASE, ROOT_URL, session=session, clock=clock)

        barrier = threading.Barrier(8)
        headers = []

        def call():
            barrier.wait()
            headers.append(provider.authorization())

        threads = [threading.Thread(target=call) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert headers == ["Bearer token-1"] * 8
        assert len(session.token_calls) == 1

    def test_invalidate_forces_refresh(self, provider, session):
        session.queue_token("token-1")
        session.queue_token("token-2")
        provider.authorization()
        provider.invalidate()
        assert provider.state is TokenState.ABSENT
        assert provider.authorization() == "Bearer token-2"

    def test_missing_token_type_defaults_to_bearer(self, provider, session):
        session.token_responses.append(make_response(200, {"access_token": "abc", "expires_in": 60}))
        assert provider.authorization() == "Bearer abc"

    def test_rejected_credentials(self, provider, session):
        session.token_responses.append(make_response(401, {"Message": "invalid_client"}))
        with pytest.raises(HTTPStatusError) as exc_info:
            provider.authorization()
        assert exc_info.value.status_code == 401
        assert provider.token is None

    def test_token_response_without_access_token(self, provider, session):
        session.token_responses.append(make_response(200, {"token_type": "Bearer", "expires_in": 3600}))
        with pytest.raises(DecodeError):
            provider.authorization()

    def test_token_response_with_bad_expiry(self, provider, session):
        session.token_responses.append(make_response(200, {"access_token": "abc", "expires_in": "soon"}))
        with pytest.raises(DecodeError, match="expires_in"):
            provider.authorization()

    def test_network_failure(self, provider, session):
        session.token_responses.append(requests.ConnectionError("connection refused"))
        with pytest.raises(TransportError) as exc_info:
            provider.authorization()
        assert isinstance(exc_info.value.original_exception, requests.ConnectionError)
        assert exc_info.value.url == f"{ROOT_URL}oauth/token"
