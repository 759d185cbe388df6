"""Credentials management for Google Sheets API access.

Supports two authentication modes:
1. Explicit access token - used as-is (e.g. from SHEETRECORDS_ACCESS_TOKEN)
2. Service account file - short-lived tokens minted with google-auth
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import keyring
from keyring.errors import KeyringError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# Keyring service name for storing tokens
KEYRING_SERVICE = "sheetrecords"
KEYRING_USERNAME = "token"


@dataclass
class Token:
    """Unified token structure for Google API access.

    Attributes:
        access_token: The OAuth2 access token for API calls.
        service_account_email: Email of the service account, if any.
        expires_at: Unix timestamp when the token expires (0 = unknown).
    """

    access_token: str
    service_account_email: str = ""
    expires_at: float = 0

    def is_valid(self, buffer_seconds: int = 60) -> bool:
        """Check if token is still valid with a safety buffer."""
        return time.time() < self.expires_at - buffer_seconds

    def expires_in_seconds(self) -> int:
        """Return seconds until token expires."""
        return max(0, int(self.expires_at - time.time()))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "access_token": self.access_token,
            "service_account_email": self.service_account_email,
            "expires_at": self.expires_at,
            "token_type": "Bearer",
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Token:
        """Create Token from dictionary."""
        return cls(
            access_token=data["access_token"],
            service_account_email=data.get("service_account_email", ""),
            expires_at=data["expires_at"],
        )


class CredentialsManager:
    """Resolves an access token for the Sheets API.

    Precedence order:
    1. access_token constructor parameter
    2. service_account_path constructor parameter
    3. SERVICE_ACCOUNT_PATH environment variable

    Service account tokens are cached in the OS keyring and reused until
    they are about to expire.
    """

    def __init__(
        self,
        access_token: str | None = None,
        service_account_path: str | Path | None = None,
    ) -> None:
        """Initialize the credentials manager.

        Raises:
            ValueError: If neither an access token nor a service account
                file is configured.
        """
        self._access_token = access_token
        sa_path = service_account_path or os.environ.get("SERVICE_ACCOUNT_PATH")
        self._sa_path = Path(sa_path) if sa_path else None

        if not self._access_token and not self._sa_path:
            raise ValueError(
                "No authentication method configured. "
                "Set SHEETRECORDS_ACCESS_TOKEN or SERVICE_ACCOUNT_PATH, "
                "or pass access_token/service_account_path to the constructor."
            )

    @property
    def auth_mode(self) -> str:
        """Return the active authentication mode."""
        return "access_token" if self._access_token else "service_account"

    def get_token(self, force_refresh: bool = False) -> Token:
        """Get a valid access token.

        Args:
            force_refresh: If True, ignore any cached service account token.

        Raises:
            FileNotFoundError: If the service account file does not exist.
        """
        if self._access_token:
            return Token(access_token=self._access_token)
        return self._get_service_account_token(force_refresh)

    def _get_service_account_token(self, force_refresh: bool) -> Token:
        """Get token from service account file."""
        if not force_refresh:
            cached = self._load_cached_token()
            if cached and cached.is_valid():
                logger.info(
                    "Using cached token (expires in %d seconds)",
                    cached.expires_in_seconds(),
                )
                return cached

        from google.auth.transport.requests import Request
        from google.oauth2 import service_account

        if not self._sa_path or not self._sa_path.exists():
            raise FileNotFoundError(f"Service account file not found: {self._sa_path}")

        logger.info("Loading credentials from %s", self._sa_path)
        credentials = service_account.Credentials.from_service_account_file(
            str(self._sa_path), scopes=SCOPES
        )
        credentials.refresh(Request())

        token = Token(
            access_token=credentials.token,
            service_account_email=credentials.service_account_email,
            expires_at=credentials.expiry.timestamp() if credentials.expiry else 0,
        )
        self._save_token(token)
        return token

    def _keyring_username(self) -> str:
        """Cache entry name, one per service account file."""
        if self._sa_path is None:
            return KEYRING_USERNAME
        return f"{KEYRING_USERNAME}:{self._sa_path.resolve()}"

    def _load_cached_token(self) -> Token | None:
        """Load cached token from OS keyring if it exists and is still valid."""
        try:
            token_json = keyring.get_password(KEYRING_SERVICE, self._keyring_username())
            if not token_json:
                return None
            token = Token.from_dict(json.loads(token_json))
        except KeyringError as e:
            logger.warning("OS keyring unavailable, not using token cache: %s", e)
            return None
        except (json.JSONDecodeError, KeyError) as e:
            logger.warning("Invalid cached token: %s", e)
            return None
        if token.is_valid():
            return token
        logger.info("Cached token expired, need to re-authenticate")
        return None

    def _save_token(self, token: Token) -> None:
        """Save token securely to OS keyring."""
        try:
            keyring.set_password(
                KEYRING_SERVICE, self._keyring_username(), json.dumps(token.to_dict())
            )
        except KeyringError as e:
            logger.warning("OS keyring unavailable, token not cached: %s", e)
            return
        logger.debug("Token saved to OS keyring")
