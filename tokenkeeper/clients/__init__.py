"""Expose constructed client wrappers."""

from .discord_oauth import DiscordOAuthClient, ExchangeError, OAuthTokenError, RefreshError
from .token_store import StoreReadError, StoreWriteError, TokenFileStore, TokenStoreError

__all__ = [
    "DiscordOAuthClient",
    "ExchangeError",
    "OAuthTokenError",
    "RefreshError",
    "StoreReadError",
    "StoreWriteError",
    "TokenFileStore",
    "TokenStoreError",
]
