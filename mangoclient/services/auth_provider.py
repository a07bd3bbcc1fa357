"""
MangoPay Authentication Provider
Produces the Authorization header value for API calls

Two interchangeable strategies:
- BasicAuthProvider: static "Basic base64(client_id:passphrase)"
- OAuthTokenProvider: bearer token fetched from {root}oauth/token, cached and
  refreshed under a lock once it is within the safety margin of expiry
"""

import base64
import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import requests

from mangoclient.exceptions import DecodeError, TransportError
from mangoclient.services.response_decoder import decode_json, raise_for_service_error

logger = logging.getLogger(__name__)

DEFAULT_SAFETY_MARGIN = 60


def basic_authorization(client_id: str, passphrase: str) -> str:
    encoded = base64.b64encode(f"{client_id}:{passphrase}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


class AuthProvider(ABC):
    @abstractmethod
    def authorization(self) -> str:
        """Return the Authorization header value for the next request"""
        pass


class BasicAuthProvider(AuthProvider):
    """Stateless; the same header on every call"""

    def __init__(self, client_id: str, passphrase: str):
        self._header = basic_authorization(client_id, passphrase)

    def authorization(self) -> str:
        return self._header


class TokenState(Enum):
    ABSENT = "absent"
    VALID = "valid"
    EXPIRED = "expired"


@dataclass(frozen=True)
class OAuthToken:
    access_token: str
    token_type: str
    expires_in: int
    issued_at: float

    def header(self) -> str:
        return f"{self.token_type or 'Bearer'} {self.access_token}"


class OAuthTokenProvider(AuthProvider):
    """
    Bearer token strategy

    The token is EXPIRED once no more than ``safety_margin + 1`` seconds of its
    lifetime remain, i.e. ``now - issued_at >= expires_in - safety_margin - 1``;
    ``expires_in`` is whole seconds while the issue time is not.
    The state check and the refresh happen under one lock per provider, so
    concurrent callers sharing a service never refresh a still-valid token
    twice.
    """

    def __init__(
        self,
        client_id: str,
        passphrase: str,
        root_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
        safety_margin: int = DEFAULT_SAFETY_MARGIN,
        clock: Callable[[], float] = time.time,
    ):
        self._basic = basic_authorization(client_id, passphrase)
        self.token_url = f"{root_url}oauth/token"
        self.session = session or requests.Session()
        self.timeout = timeout
        self.safety_margin = safety_margin
        self._clock = clock
        self._lock = threading.Lock()
        self._token: Optional[OAuthToken] = None

    @property
    def token(self) -> Optional[OAuthToken]:
        return self._token

    @property
    def state(self) -> TokenState:
        return self._state_of(self._token)

    def _state_of(self, token: Optional[OAuthToken]) -> TokenState:
        if token is None:
            return TokenState.ABSENT
        remaining = token.expires_in - (self._clock() - token.issued_at)
        if remaining <= self.safety_margin + 1:
            return TokenState.EXPIRED
        return TokenState.VALID

    def authorization(self) -> str:
        with self._lock:
            state = self._state_of(self._token)
            if state is not TokenState.VALID:
                logger.info(f"🔑 OAuth token {state.value}, requesting a new one")
                self._token = self._request_token()
            return self._token.header()

    def invalidate(self) -> None:
        with self._lock:
            self._token = None

    def _request_token(self) -> OAuthToken:
        issued_at = self._clock()
        try:
            response = self.session.post(
                self.token_url,
                data="grant_type=client_credentials",
                headers={
                    "Authorization": self._basic,
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"❌ OAuth token request failed: {e}")
            raise TransportError(f"token request failed: {e}", original_exception=e, url=self.token_url) from e

        raise_for_service_error(response)
        body = decode_json(response)
        if not isinstance(body, dict) or not body.get("access_token"):
            raise DecodeError("token response carries no access_token")
        try:
            expires_in = int(body.get("expires_in", 0))
        except (TypeError, ValueError) as e:
            raise DecodeError(f"invalid expires_in in token response: {body.get('expires_in')!r}") from e

        logger.info(f"✅ OAuth token issued, expires in {expires_in}s")
        return OAuthToken(
            access_token=body["access_token"],
            token_type=body.get("token_type") or "Bearer",
            expires_in=expires_in,
            issued_at=issued_at,
        )
