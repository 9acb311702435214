"""
Helpers for retrieving and refreshing the cached Discord user token.
"""

from __future__ import annotations

import enum
import logging
from datetime import datetime
from typing import Callable, Optional, Protocol

from tokenkeeper.core.errors import AuthorizationRequired
from tokenkeeper.models.token import TokenRecord, utc_now

logger = logging.getLogger(__name__)


class TokenState(str, enum.Enum):
    NO_TOKEN = "no_token"
    VALID = "valid"
    EXPIRED = "expired"


class OAuthClient(Protocol):
    def authorization_url(self) -> str: ...

    def exchange_authorization_code(self, code: str) -> TokenRecord: ...

    def refresh_token(self, refresh_token: str) -> TokenRecord: ...


class TokenStore(Protocol):
    def save(self, record: TokenRecord) -> None: ...

    def load(self) -> Optional[TokenRecord]: ...


class TokenLifecycleManager:
    """
    Gate all token consumption through one validity check and refresh path.

    A stored record is returned as-is while ``now < expires_at``. Once expired,
    it is refreshed through the OAuth client and the new record is persisted
    before being handed out. Errors from the client or the store propagate to
    the caller unchanged, and a failed refresh never removes the stored record.
    """

    def __init__(
        self,
        store: TokenStore,
        oauth_client: OAuthClient,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._oauth = oauth_client
        self._clock = clock
        self._record: Optional[TokenRecord] = None
        self._state = TokenState.NO_TOKEN

    @property
    def state(self) -> TokenState:
        return self._state

    @property
    def current(self) -> Optional[TokenRecord]:
        return self._record

    def authorization_url(self) -> str:
        return self._oauth.authorization_url()

    def get_usable_token(self) -> TokenRecord:
        """Return an unexpired token, refreshing the stored one when needed."""
        record = self._load()
        if self._state is TokenState.VALID:
            logger.debug("Stored access token valid until %s", record.expires_at)
            return record

        logger.info("Stored access token expired at %s; refreshing", record.expires_at)
        return self._refresh(record)

    def complete_authorization(self, code: str) -> TokenRecord:
        """Exchange a consent code and persist the resulting token."""
        record = self._oauth.exchange_authorization_code(code)
        self._store.save(record)
        self._replace(record)
        logger.info("Authorization completed; token expires at %s", record.expires_at)
        return record

    def refresh(self) -> TokenRecord:
        """Refresh the stored token regardless of its expiry."""
        return self._refresh(self._load())

    def _load(self) -> TokenRecord:
        record = self._store.load()
        if record is None:
            self._record = None
            self._state = TokenState.NO_TOKEN
            raise AuthorizationRequired(self._oauth.authorization_url())
        self._replace(record)
        return record

    def _refresh(self, record: TokenRecord) -> TokenRecord:
        refreshed = self._oauth.refresh_token(record.refresh_token)
        # The previous refresh token is spent once the provider answers.
        self._replace(refreshed)
        self._store.save(refreshed)
        logger.info("Access token refreshed; expires at %s", refreshed.expires_at)
        return refreshed

    def _replace(self, record: TokenRecord) -> None:
        self._record = record
        if record.is_expired(self._clock()):
            self._state = TokenState.EXPIRED
        else:
            self._state = TokenState.VALID


__all__ = ["OAuthClient", "TokenLifecycleManager", "TokenState", "TokenStore"]
