"""CLI commands for znuny-rest-client.

This module provides command-line utilities for:
- Validating and dumping configuration (with secrets redacted)
- Checking that the configured credentials can open a session
- Reading tickets and ticket numbers
- Creating tickets and adding articles, optionally with attachments
"""
from __future__ import annotations

import argparse
import asyncio
import json
import mimetypes
import sys
from pathlib import Path
from typing import Any

from znuny_rest_client._version import __version__
from znuny_rest_client.adapters.znuny.client import AsyncZnunyClient
from znuny_rest_client.config.load import load_settings
from znuny_rest_client.config.redact import redact_settings_dict
from znuny_rest_client.config.settings import Settings
from znuny_rest_client.config.validate import ConfigValidationError
from znuny_rest_client.domain.errors import ZnunyError
from znuny_rest_client.observability.logger import configure_logging

_FALLBACK_MIME = "application/octet-stream"


def _load() -> Settings:
    settings = load_settings()
    obs = settings.observability
    configure_logging(
        log_level=obs.log_level,
        json_logs=obs.json_logs,
        log_format=obs.log_format,
    )
    return settings


def _parse_attachment(value: str) -> tuple[Path, str]:
    """Split `PATH[:MIME]`; the MIME type is guessed from the file name when omitted."""
    path_text, sep, mime = value.rpartition(":")
    if sep and "/" in mime and path_text:
        return Path(path_text), mime
    path = Path(value)
    guessed, _ = mimetypes.guess_type(path.name)
    return path, guessed or _FALLBACK_MIME


def _stage_attachments(client: AsyncZnunyClient, values: list[str] | None) -> None:
    for value in values or []:
        path, mime = _parse_attachment(value)
        client.stage_attachment(path, path.name, mime)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def cmd_validate_config(args: argparse.Namespace) -> int:
    """Validate configuration and exit with appropriate code.

    Exit codes:
        0: Configuration is valid
        1: Configuration is invalid
        2: Configuration file not found (when CONFIG_PATH is set)
    """
    try:
        settings = load_settings()
        print("✓ Configuration is valid")
        print(f"  - Znuny URL: {settings.znuny.base_url}")
        print(f"  - Username: {settings.znuny.username}")
        print(f"  - Verify TLS: {settings.znuny.verify_tls}")
        return 0
    except FileNotFoundError as e:
        print(f"✗ Configuration file not found: {e}", file=sys.stderr)
        return 2
    except ConfigValidationError as e:
        print(f"✗ Configuration is invalid: {e}", file=sys.stderr)
        return 1


def cmd_dump_config(args: argparse.Namespace) -> int:
    """Dump current configuration as JSON (with secrets redacted)."""
    try:
        settings = load_settings()
    except (ConfigValidationError, FileNotFoundError) as e:
        print(f"✗ Failed to load configuration: {e}", file=sys.stderr)
        return 1
    data = settings.model_dump(mode="json")
    _print_json(redact_settings_dict(data))
    return 0


def cmd_session_check(args: argparse.Namespace) -> int:
    """Open a session to prove the credentials work. The session id is not printed."""
    async def run(settings: Settings) -> None:
        async with AsyncZnunyClient.from_settings(settings) as client:
            await client.session_create()

    try:
        settings = _load()
        asyncio.run(run(settings))
    except (ConfigValidationError, FileNotFoundError, ZnunyError) as e:
        print(f"✗ Session check failed: {e}", file=sys.stderr)
        return 1
    print(f"✓ Logged in to {settings.znuny.base_url} as {settings.znuny.username}")
    return 0


def cmd_get_ticket(args: argparse.Namespace) -> int:
    async def run(settings: Settings) -> dict[str, Any]:
        async with AsyncZnunyClient.from_settings(settings) as client:
            return await client.get_ticket(args.ticket_id, extended=args.extended)

    try:
        settings = _load()
        ticket = asyncio.run(run(settings))
    except (ConfigValidationError, FileNotFoundError, ZnunyError) as e:
        print(f"✗ Failed to fetch ticket {args.ticket_id}: {e}", file=sys.stderr)
        return 1
    _print_json(ticket)
    return 0


def cmd_ticket_number(args: argparse.Namespace) -> int:
    async def run(settings: Settings) -> str:
        async with AsyncZnunyClient.from_settings(settings) as client:
            return await client.get_ticket_number(args.ticket_id)

    try:
        settings = _load()
        number = asyncio.run(run(settings))
    except (ConfigValidationError, FileNotFoundError, ZnunyError) as e:
        print(f"✗ Failed to fetch ticket number for {args.ticket_id}: {e}", file=sys.stderr)
        return 1
    print(number)
    return 0


def cmd_create_ticket(args: argparse.Namespace) -> int:
    async def run(settings: Settings) -> Any:
        defaults = settings.defaults
        queue_id = args.queue_id
        queue_name = args.queue_name
        if queue_id is None and queue_name is None:
            queue_id = defaults.queue_id
            queue_name = defaults.queue_name if queue_id is None else None

        async with AsyncZnunyClient.from_settings(settings) as client:
            _stage_attachments(client, args.attach)
            return await client.create_ticket(
                args.title,
                args.customer,
                args.subject,
                args.body,
                args.from_,
                queue_id=queue_id,
                queue_name=queue_name,
                content_type=args.content_type or defaults.content_type,
                communication_channel=args.channel or defaults.communication_channel,
            )

    try:
        settings = _load()
        result = asyncio.run(run(settings))
    except (ConfigValidationError, FileNotFoundError, ZnunyError) as e:
        print(f"✗ Failed to create ticket: {e}", file=sys.stderr)
        return 1
    _print_json(result)
    return 0


def cmd_add_article(args: argparse.Namespace) -> int:
    async def run(settings: Settings) -> Any:
        defaults = settings.defaults
        async with AsyncZnunyClient.from_settings(settings) as client:
            _stage_attachments(client, args.attach)
            return await client.add_article(
                args.ticket_id,
                args.created_by,
                args.subject,
                args.body,
                args.from_,
                content_type=args.content_type or defaults.content_type,
                communication_channel=args.channel or defaults.communication_channel,
            )

    try:
        settings = _load()
        result = asyncio.run(run(settings))
    except (ConfigValidationError, FileNotFoundError, ZnunyError) as e:
        print(f"✗ Failed to add article to ticket {args.ticket_id}: {e}", file=sys.stderr)
        return 1
    _print_json(result)
    return 0


def _add_article_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--subject", required=True)
    parser.add_argument("--body", required=True)
    parser.add_argument("--from", dest="from_", default=None, help="Sender address")
    parser.add_argument(
        "--channel",
        default=None,
        help="Communication channel, e.g. Internal, note-internal, Email (default from config)",
    )
    parser.add_argument("--content-type", default=None)
    parser.add_argument(
        "--attach",
        action="append",
        metavar="PATH[:MIME]",
        help="Attach a file; may be repeated",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="znuny-rest-client",
        description="Znuny REST client CLI utilities",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    validate_parser = subparsers.add_parser(
        "validate-config",
        help="Validate configuration and exit",
    )
    validate_parser.set_defaults(func=cmd_validate_config)

    dump_parser = subparsers.add_parser(
        "dump-config",
        help="Dump configuration as JSON (secrets redacted)",
    )
    dump_parser.set_defaults(func=cmd_dump_config)

    session_parser = subparsers.add_parser(
        "session-check",
        help="Create a session to verify the configured credentials",
    )
    session_parser.set_defaults(func=cmd_session_check)

    get_parser = subparsers.add_parser("get-ticket", help="Print a ticket as JSON")
    get_parser.add_argument("ticket_id", type=int)
    get_parser.add_argument(
        "--extended",
        action="store_true",
        help="Request extended ticket data",
    )
    get_parser.set_defaults(func=cmd_get_ticket)

    number_parser = subparsers.add_parser("ticket-number", help="Print a ticket's number")
    number_parser.add_argument("ticket_id", type=int)
    number_parser.set_defaults(func=cmd_ticket_number)

    create_parser = subparsers.add_parser("create-ticket", help="Create a ticket")
    create_parser.add_argument("--title", required=True)
    create_parser.add_argument("--customer", required=True, help="CustomerUser login or email")
    queue_group = create_parser.add_mutually_exclusive_group()
    queue_group.add_argument("--queue-id", type=int, default=None)
    queue_group.add_argument("--queue-name", default=None)
    _add_article_arguments(create_parser)
    create_parser.set_defaults(func=cmd_create_ticket)

    article_parser = subparsers.add_parser("add-article", help="Add an article to a ticket")
    article_parser.add_argument("ticket_id", type=int)
    article_parser.add_argument("--created-by", required=True, help="History comment")
    _add_article_arguments(article_parser)
    article_parser.set_defaults(func=cmd_add_article)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
