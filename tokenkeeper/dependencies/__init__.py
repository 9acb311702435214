"""Expose dependency helpers for the CLI."""

from .clients import (
    get_discord_oauth_client,
    get_token_lifecycle_manager,
    get_token_store,
)

__all__ = [
    "get_discord_oauth_client",
    "get_token_lifecycle_manager",
    "get_token_store",
]
