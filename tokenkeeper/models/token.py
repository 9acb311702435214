"""
Domain model for the persisted user access token.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tokenkeeper.schemas.oauth import TokenResponse


def utc_now() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TokenRecord(BaseModel):
    """
    An access token together with the refresh token used to renew it.

    Records are immutable; a refresh produces a brand new record that replaces
    the previous one as a whole.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(..., min_length=1, repr=False)
    refresh_token: str = Field(..., min_length=1, repr=False)
    scope: str
    expires_at: datetime

    @field_validator("expires_at")
    @classmethod
    def _normalize_expires_at(cls, value: datetime) -> datetime:
        try:
            return _as_utc(value)
        except OverflowError as exc:
            raise ValueError("expiry is outside the supported date range") from exc

    @classmethod
    def from_response(cls, response: TokenResponse, *, issued_at: datetime) -> "TokenRecord":
        """Build a record whose expiry is relative to when the token was issued."""
        return cls(
            access_token=response.access_token,
            refresh_token=response.refresh_token,
            scope=response.scope,
            expires_at=_as_utc(issued_at) + timedelta(seconds=response.expires_in),
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Return True once ``now`` has reached the expiry instant."""
        current = _as_utc(now) if now is not None else utc_now()
        return current >= self.expires_at

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.access_token}"

    @property
    def scopes(self) -> Tuple[str, ...]:
        return tuple(self.scope.split())

    def __str__(self) -> str:
        return f"TokenRecord[scope={self.scope}, expires={self.expires_at.isoformat()}]"


__all__ = ["TokenRecord", "utc_now"]
