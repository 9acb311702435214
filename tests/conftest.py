"""Pytest configuration shared across the suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import pytest

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for rootdir-less collection
    import _bootstrap  # type: ignore # noqa: F401

from tokenkeeper.core.config import DiscordSettings
from tokenkeeper.models.token import TokenRecord

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    """Deterministic stand-in for ``utc_now``."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeOAuthClient:
    """Records calls and returns canned records or raises canned errors."""

    def __init__(self) -> None:
        self.exchange_result: Optional[TokenRecord] = None
        self.exchange_error: Optional[Exception] = None
        self.refresh_result: Optional[TokenRecord] = None
        self.refresh_error: Optional[Exception] = None
        self.codes: list[str] = []
        self.refresh_calls: list[str] = []

    def authorization_url(self) -> str:
        return "https://discord.example/oauth2/authorize?response_type=code"

    def exchange_authorization_code(self, code: str) -> TokenRecord:
        self.codes.append(code)
        if self.exchange_error is not None:
            raise self.exchange_error
        assert self.exchange_result is not None
        return self.exchange_result

    def refresh_token(self, refresh_token: str) -> TokenRecord:
        self.refresh_calls.append(refresh_token)
        if self.refresh_error is not None:
            raise self.refresh_error
        assert self.refresh_result is not None
        return self.refresh_result


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def discord_settings() -> DiscordSettings:
    return DiscordSettings(
        client_id="abc",
        client_secret="client-secret",
        redirect_uri="http://localhost",
        scope="identify",
    )


@pytest.fixture
def fake_oauth_client() -> FakeOAuthClient:
    return FakeOAuthClient()


@pytest.fixture
def make_record() -> Callable[..., TokenRecord]:
    def _make(
        access_token: str = "A",
        refresh_token: str = "R",
        scope: str = "identify",
        expires_at: datetime = T0 + timedelta(seconds=600),
    ) -> TokenRecord:
        return TokenRecord(
            access_token=access_token,
            refresh_token=refresh_token,
            scope=scope,
            expires_at=expires_at,
        )

    return _make
