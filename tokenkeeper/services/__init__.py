"""Service layer exports."""

from .token_lifecycle import TokenLifecycleManager, TokenState

__all__ = [
    "TokenLifecycleManager",
    "TokenState",
]
