"""
Discord OAuth2 client.

Builds the consent URL and performs the code-exchange and refresh calls
against the token endpoint. Each call sends exactly one request; failures are
raised to the caller without retrying.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, Optional, Type

import httpx
from pydantic import ValidationError

from tokenkeeper.core.config import DiscordSettings
from tokenkeeper.core.errors import TokenError
from tokenkeeper.models.token import TokenRecord, utc_now
from tokenkeeper.schemas.oauth import TokenResponse

logger = logging.getLogger(__name__)


class OAuthTokenError(TokenError):
    """Raised when the token endpoint call does not yield a usable token."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExchangeError(OAuthTokenError):
    """Raised when an authorization code cannot be exchanged for tokens."""


class RefreshError(OAuthTokenError):
    """Raised when a refresh token cannot be exchanged for a new access token."""


class DiscordOAuthClient:
    """Build Discord authorization URLs and exchange codes and refresh tokens."""

    AUTHORIZE_PATH = "/oauth2/authorize"
    TOKEN_PATH = "/api/v10/oauth2/token"

    def __init__(
        self,
        settings: DiscordSettings,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._clock = clock

    @property
    def token_url(self) -> str:
        return f"{self._settings.base_url}{self.TOKEN_PATH}"

    @staticmethod
    def build_authorization_url(
        client_id: str,
        scope: str,
        redirect_uri: str,
        *,
        base_url: str = "https://discord.com",
    ) -> str:
        """Compose the consent URL; values are inserted verbatim."""
        return (
            f"{base_url.rstrip('/')}{DiscordOAuthClient.AUTHORIZE_PATH}"
            f"?response_type=code&client_id={client_id}"
            f"&scope={scope}&redirect_uri={redirect_uri}"
        )

    def authorization_url(self) -> str:
        """Consent URL for the configured application."""
        return self.build_authorization_url(
            self._settings.client_id,
            self._settings.scope,
            self._settings.redirect_uri,
            base_url=self._settings.base_url,
        )

    def exchange_authorization_code(self, code: str) -> TokenRecord:
        """Exchange an authorization code for an access and refresh token."""
        payload = {
            "client_id": self._settings.client_id,
            "client_secret": self._settings.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self._settings.redirect_uri,
        }
        return self._request_token(payload, ExchangeError, "get user access token")

    def refresh_token(self, refresh_token: str) -> TokenRecord:
        """
        Refresh the access token using a stored refresh token.

        The returned record carries the refresh token issued by this call, which
        supersedes the one passed in.
        """
        payload = {
            "client_id": self._settings.client_id,
            "client_secret": self._settings.client_secret,
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }
        return self._request_token(payload, RefreshError, "refresh token")

    def _request_token(
        self,
        payload: Dict[str, str],
        error_cls: Type[OAuthTokenError],
        action: str,
    ) -> TokenRecord:
        issued_at = self._clock()
        logger.info("Requesting %s grant from %s", payload["grant_type"], self.token_url)

        try:
            with httpx.Client(
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = client.post(
                    self.token_url,
                    data=payload,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as exc:
            logger.warning("Token endpoint request failed: %s", exc)
            raise error_cls(f"Failed to {action}: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            logger.warning("Token endpoint returned status code %s", response.status_code)
            raise error_cls(
                f"Failed to {action}: API Endpoint returned status code {response.status_code}",
                status_code=response.status_code,
            )

        try:
            token_payload = TokenResponse.model_validate_json(response.content)
        except ValidationError as exc:
            logger.warning("Token endpoint returned an unusable body")
            raise error_cls(
                f"Failed to {action}: incomplete or malformed token payload",
                status_code=response.status_code,
            ) from exc

        record = TokenRecord.from_response(token_payload, issued_at=issued_at)
        logger.info("Token issued for scope %r, expires at %s", record.scope, record.expires_at)
        return record


__all__ = [
    "DiscordOAuthClient",
    "ExchangeError",
    "OAuthTokenError",
    "RefreshError",
]
