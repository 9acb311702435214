"""Expose request/response schemas."""

from .oauth import TokenResponse

__all__ = ["TokenResponse"]
