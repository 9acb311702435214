"""Obtain and cache a Discord user access token.

Without a cached token the tool prints the consent URL, reads the code the
provider appended to the redirect URI, exchanges it and saves the result.
Later runs reuse the cached token and refresh it once it has expired.

Example usages::

    # Print a usable bearer token, authorizing interactively if needed.
    python -m scripts.get_token

    # Non-interactive flow: print the URL, then exchange the code separately.
    python -m scripts.get_token url
    python -m scripts.get_token exchange <code>

    # Inspect the cached record without touching the network.
    python -m scripts.get_token --token-file ~/.cache/discord_token show
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from tokenkeeper.clients import OAuthTokenError, TokenStoreError
from tokenkeeper.core.config import AppSettings, _load_env_file
from tokenkeeper.core.errors import AuthorizationRequired
from tokenkeeper.core.logging import configure_logging
from tokenkeeper.dependencies import get_token_lifecycle_manager, get_token_store
from tokenkeeper.models.token import TokenRecord, utc_now
from tokenkeeper.services import TokenLifecycleManager

EXIT_OK = 0
EXIT_AUTHORIZATION_REQUIRED = 1
EXIT_VALIDATION_ERROR = 2
EXIT_PROVIDER_ERROR = 3
EXIT_STORE_ERROR = 4

logger = logging.getLogger(__name__)


def _print_token(record: TokenRecord, as_json: bool) -> None:
    if as_json:
        print(record.model_dump_json(indent=2))
    else:
        print(record.authorization_header)


def _prompt_for_code() -> Optional[str]:
    """Read the authorization code from the terminal."""
    try:
        code = input("Enter code: ").strip()
    except EOFError:
        print("\nError: No code provided", file=sys.stderr)
        return None
    if not code:
        print("Error: No code provided", file=sys.stderr)
        return None
    return code


def _get(manager: TokenLifecycleManager, args: argparse.Namespace) -> int:
    try:
        record = manager.get_usable_token()
    except AuthorizationRequired as signal:
        print(signal.authorization_url)
        if args.no_prompt:
            print(
                "Authorization required. Open the URL above, then run "
                "'exchange <code>' with the code from the redirect.",
                file=sys.stderr,
            )
            return EXIT_AUTHORIZATION_REQUIRED
        code = _prompt_for_code()
        if code is None:
            return EXIT_AUTHORIZATION_REQUIRED
        record = manager.complete_authorization(code)
    _print_token(record, args.json)
    return EXIT_OK


def _url(manager: TokenLifecycleManager, args: argparse.Namespace) -> int:
    print(manager.authorization_url())
    return EXIT_OK


def _exchange(manager: TokenLifecycleManager, args: argparse.Namespace) -> int:
    record = manager.complete_authorization(args.code)
    _print_token(record, args.json)
    return EXIT_OK


def _refresh(manager: TokenLifecycleManager, args: argparse.Namespace) -> int:
    record = manager.refresh()
    _print_token(record, args.json)
    return EXIT_OK


def _show(settings: AppSettings, args: argparse.Namespace) -> int:
    store = get_token_store(settings, args.token_file)
    record = store.load()
    if record is None:
        print(f"No token stored at {store.path}", file=sys.stderr)
        return EXIT_AUTHORIZATION_REQUIRED

    state = "expired" if record.is_expired(utc_now()) else "valid"
    if args.json:
        payload = json.loads(record.model_dump_json())
        payload["state"] = state
        print(json.dumps(payload, indent=2))
        return EXIT_OK

    print(f"access_token={record.access_token}")
    print(f"refresh_token={record.refresh_token}")
    print(f"scope={record.scope}")
    print(f"expires_at={record.expires_at.isoformat()}")
    print(f"state={state}")
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Obtain, cache and refresh a Discord user access token."
    )
    parser.add_argument(
        "--token-file",
        type=Path,
        default=None,
        help="Location of the cached token (default: TOKEN_FILE_PATH or ./access_token).",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Additional environment file holding DISCORD_* credentials.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full token record as JSON instead of the bearer header.",
    )
    parser.add_argument(
        "--no-prompt",
        action="store_true",
        help="Fail instead of prompting for a code when authorization is required.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override TOKENKEEPER_LOG_LEVEL for this run.",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser(
        "get",
        help="Print a usable token, refreshing or authorizing as needed (default).",
    )
    subparsers.add_parser("url", help="Print the authorization URL.")
    exchange_parser = subparsers.add_parser(
        "exchange",
        help="Exchange an authorization code and cache the resulting token.",
    )
    exchange_parser.add_argument("code", help="Code appended to the redirect URI.")
    subparsers.add_parser("refresh", help="Refresh the cached token now.")
    subparsers.add_parser("show", help="Show the cached token without network access.")
    subparsers.add_parser("check", help="Validate configuration only.")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.env_file is not None:
        if not args.env_file.exists():
            print(f"Environment file {args.env_file} does not exist.", file=sys.stderr)
            return EXIT_VALIDATION_ERROR
        _load_env_file(str(args.env_file))

    try:
        settings = AppSettings()  # type: ignore[call-arg]
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR

    configure_logging(args.log_level or settings.log_level)

    command: str = args.command or "get"
    if command == "check":
        print("Configuration OK.")
        return EXIT_OK

    handlers: dict[str, Callable[[], int]] = {
        "get": lambda: _get(manager, args),
        "url": lambda: _url(manager, args),
        "exchange": lambda: _exchange(manager, args),
        "refresh": lambda: _refresh(manager, args),
        "show": lambda: _show(settings, args),
    }
    manager = get_token_lifecycle_manager(settings, args.token_file)

    try:
        return handlers[command]()
    except AuthorizationRequired as signal:
        print(
            "No token stored. Authorize at the URL below, then run 'exchange <code>':\n"
            f"{signal.authorization_url}",
            file=sys.stderr,
        )
        return EXIT_AUTHORIZATION_REQUIRED
    except OAuthTokenError as exc:
        logger.debug("Provider call failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_PROVIDER_ERROR
    except TokenStoreError as exc:
        logger.debug("Token store access failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_STORE_ERROR


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
