"""
Data Sanitization for MangoPay wire logging
Masks credentials and card data before request/response dumps reach the logs
"""

from typing import Any, Dict, Mapping, Optional


class DataSanitizer:
    """Masking helpers for debug logging of API traffic"""

    # Header names whose values are never logged in clear
    SENSITIVE_HEADERS = {"authorization", "proxy-authorization", "cookie"}

    # Payload keys (lower-cased) to mask in logged bodies
    SENSITIVE_FIELDS = {
        "passphrase",
        "access_token",
        "accesskey",
        "preregistrationdata",
        "registrationdata",
        "cardregistrationdata",
        "cardnumber",
        "cardcvx",
        "iban",
        "accountnumber",
        "file",
    }

    @classmethod
    def mask_secret(cls, value: Optional[str], show_chars: int = 2) -> str:
        if not value:
            return "[EMPTY]"
        if len(value) <= show_chars * 2:
            return "[REDACTED]"
        return f"[{value[:show_chars]}***{value[-show_chars:]}]"

    @classmethod
    def mask_authorization(cls, value: Optional[str]) -> str:
        """Keep the scheme ("Basic", "Bearer"), mask the credential part"""
        if not value:
            return "[NO_AUTH]"
        scheme, _, credential = value.partition(" ")
        if not credential:
            return cls.mask_secret(value)
        return f"{scheme} {cls.mask_secret(credential)}"

    @classmethod
    def sanitize_headers(cls, headers: Optional[Mapping[str, str]]) -> Dict[str, str]:
        sanitized = {}
        for key, value in (headers or {}).items():
            if key.lower() in cls.SENSITIVE_HEADERS:
                sanitized[key] = cls.mask_authorization(value)
            else:
                sanitized[key] = value
        return sanitized

    @classmethod
    def sanitize_payload(cls, data: Any) -> Any:
        """Recursively mask sensitive keys of a JSON-like payload"""
        if isinstance(data, dict):
            sanitized = {}
            for key, value in data.items():
                if str(key).lower() in cls.SENSITIVE_FIELDS and isinstance(value, str):
                    sanitized[key] = cls.mask_secret(value)
                else:
                    sanitized[key] = cls.sanitize_payload(value)
            return sanitized
        if isinstance(data, list):
            return [cls.sanitize_payload(item) for item in data]
        return data
