"""Schemas for payloads returned by the OAuth2 token endpoint."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TokenResponse(BaseModel):
    """Successful response body of the token endpoint."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)
    scope: str
    expires_in: int = Field(
        ...,
        strict=True,
        ge=0,
        le=2**31 - 1,
        description="Lifetime of the access token in seconds.",
    )


__all__ = ["TokenResponse"]
