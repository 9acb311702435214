"""
Factory functions wiring settings into the shared clients and services.
"""

from pathlib import Path
from typing import Optional, Union

from tokenkeeper.clients import DiscordOAuthClient, TokenFileStore
from tokenkeeper.core.config import AppSettings, get_settings
from tokenkeeper.services import TokenLifecycleManager


def get_discord_oauth_client(settings: Optional[AppSettings] = None) -> DiscordOAuthClient:
    """Create a Discord OAuth client from the configured credentials."""
    settings = settings or get_settings()
    return DiscordOAuthClient(settings.discord)


def get_token_store(
    settings: Optional[AppSettings] = None,
    token_path: Optional[Union[str, Path]] = None,
) -> TokenFileStore:
    """Provide the token file store, optionally at an explicit location."""
    settings = settings or get_settings()
    return TokenFileStore(token_path or settings.token_path)


def get_token_lifecycle_manager(
    settings: Optional[AppSettings] = None,
    token_path: Optional[Union[str, Path]] = None,
) -> TokenLifecycleManager:
    """Assemble the lifecycle manager from its store and OAuth client."""
    settings = settings or get_settings()
    return TokenLifecycleManager(
        store=get_token_store(settings, token_path),
        oauth_client=get_discord_oauth_client(settings),
    )
