"""Configuration management for the MangoPay client"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict

from dotenv import load_dotenv

from mangoclient.exceptions import ValidationError
from mangoclient.models.enums import AuthMode, ExecEnvironment
from mangoclient.services.retry_service import HTTPRetryConfig, parse_statuses

load_dotenv()

logger = logging.getLogger(__name__)

ROOT_URLS = {
    ExecEnvironment.PRODUCTION: "https://api.mangopay.com/v2/",
    ExecEnvironment.SANDBOX: "https://api.sandbox.mangopay.com/v2/",
}


def parse_environment(value: str) -> ExecEnvironment:
    try:
        return ExecEnvironment((value or "").lower().strip())
    except ValueError:
        raise ValidationError(f"unknown execution environment: {value!r}") from None


def parse_auth_mode(value: str) -> AuthMode:
    try:
        return AuthMode((value or "").lower().strip())
    except ValueError:
        raise ValidationError(f"unknown auth mode: {value!r}") from None


@dataclass(frozen=True)
class Credential:
    """API client credentials; immutable once built"""

    client_id: str
    passphrase: str
    environment: ExecEnvironment = ExecEnvironment.SANDBOX
    name: str = ""
    email: str = ""

    @property
    def root_url(self) -> str:
        return ROOT_URLS[self.environment]

    def __repr__(self) -> str:
        return (
            f"Credential(client_id={self.client_id!r}, environment={self.environment.value}, "
            f"name={self.name!r}, email={self.email!r})"
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Credential":
        """Read the {"ClientId", "Name", "Email", "Passphrase", "Env"} JSON layout"""
        client_id = data.get("ClientId") or ""
        passphrase = data.get("Passphrase") or ""
        if not client_id or not passphrase:
            raise ValidationError("credential requires ClientId and Passphrase")
        return cls(
            client_id=client_id,
            passphrase=passphrase,
            environment=parse_environment(data.get("Env") or ExecEnvironment.SANDBOX.value),
            name=data.get("Name") or "",
            email=data.get("Email") or "",
        )


def load_credential_file(path: str) -> Credential:
    with open(path, "r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except ValueError as e:
            raise ValidationError(f"invalid credential file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError(f"invalid credential file {path}: expected a JSON object")
    return Credential.from_dict(data)


class Config:
    """Client configuration, read from the environment (and .env) at import"""

    MANGOPAY_CLIENT_ID = os.getenv("MANGOPAY_CLIENT_ID", "")
    MANGOPAY_PASSPHRASE = os.getenv("MANGOPAY_PASSPHRASE", "")
    MANGOPAY_NAME = os.getenv("MANGOPAY_NAME", "")
    MANGOPAY_EMAIL = os.getenv("MANGOPAY_EMAIL", "")
    MANGOPAY_ENV = os.getenv("MANGOPAY_ENV", "sandbox").lower().strip()
    MANGOPAY_AUTH_MODE = os.getenv("MANGOPAY_AUTH_MODE", "oauth").lower().strip()

    # Transport
    MANGOPAY_TIMEOUT = float(os.getenv("MANGOPAY_TIMEOUT", "30"))
    MANGOPAY_TOKEN_SAFETY_MARGIN = int(os.getenv("MANGOPAY_TOKEN_SAFETY_MARGIN", "60"))

    # Retry on gateway timeouts
    MANGOPAY_RETRY_ATTEMPTS = int(os.getenv("MANGOPAY_RETRY_ATTEMPTS", "3"))
    MANGOPAY_RETRY_PAUSE = float(os.getenv("MANGOPAY_RETRY_PAUSE", "1.0"))
    MANGOPAY_RETRY_STATUSES = os.getenv("MANGOPAY_RETRY_STATUSES", "504,524")
    MANGOPAY_RETRY_TRANSPORT_ERRORS = os.getenv("MANGOPAY_RETRY_TRANSPORT_ERRORS", "false").lower() == "true"

    @staticmethod
    def credential() -> Credential:
        if not Config.MANGOPAY_CLIENT_ID or not Config.MANGOPAY_PASSPHRASE:
            raise ValidationError("MANGOPAY_CLIENT_ID and MANGOPAY_PASSPHRASE must be set")
        return Credential(
            client_id=Config.MANGOPAY_CLIENT_ID,
            passphrase=Config.MANGOPAY_PASSPHRASE,
            environment=parse_environment(Config.MANGOPAY_ENV),
            name=Config.MANGOPAY_NAME,
            email=Config.MANGOPAY_EMAIL,
        )

    @staticmethod
    def auth_mode() -> AuthMode:
        return parse_auth_mode(Config.MANGOPAY_AUTH_MODE)

    @staticmethod
    def retry_config() -> HTTPRetryConfig:
        return HTTPRetryConfig(
            attempts=Config.MANGOPAY_RETRY_ATTEMPTS,
            pause=Config.MANGOPAY_RETRY_PAUSE,
            statuses=parse_statuses(Config.MANGOPAY_RETRY_STATUSES),
            retry_transport_errors=Config.MANGOPAY_RETRY_TRANSPORT_ERRORS,
        )

    @staticmethod
    def validate_configuration() -> bool:
        """Validate the MangoPay configuration and log its status"""
        logger.info("🔧 MangoPay Client Configuration:")
        logger.info(f"   MANGOPAY_ENV: {Config.MANGOPAY_ENV}")
        logger.info(f"   MANGOPAY_AUTH_MODE: {Config.MANGOPAY_AUTH_MODE}")
        logger.info(f"   MANGOPAY_CLIENT_ID: {Config.MANGOPAY_CLIENT_ID or '[NOT SET]'}")
        logger.info(f"   MANGOPAY_PASSPHRASE: {'[SET]' if Config.MANGOPAY_PASSPHRASE else '[NOT SET]'}")
        logger.info(f"   Timeout: {Config.MANGOPAY_TIMEOUT}s")
        logger.info(
            f"   Retry: {Config.MANGOPAY_RETRY_ATTEMPTS} attempts, {Config.MANGOPAY_RETRY_PAUSE}s pause, "
            f"statuses {Config.MANGOPAY_RETRY_STATUSES}"
        )

        valid = True
        if not Config.MANGOPAY_CLIENT_ID or not Config.MANGOPAY_PASSPHRASE:
            logger.error("❌ MANGOPAY_CLIENT_ID / MANGOPAY_PASSPHRASE missing")
            valid = False
        try:
            parse_environment(Config.MANGOPAY_ENV)
            parse_auth_mode(Config.MANGOPAY_AUTH_MODE)
            Config.retry_config()
        except (ValidationError, ValueError) as e:
            logger.error(f"❌ Invalid MangoPay configuration: {e}")
            valid = False

        if valid and Config.MANGOPAY_ENV == ExecEnvironment.PRODUCTION.value:
            logger.warning("🔒 MangoPay client targets PRODUCTION")
        return valid
