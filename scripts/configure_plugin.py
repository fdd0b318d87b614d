"""Provision the Pushbullet OAuth client credentials in the forum store.

The forum's admin screens are not part of this service, so operators record
the client id and secret from the Pushbullet "create client" page here. The
running service reads them once at startup; restart it after changing them.

Example usages::

    python -m scripts.configure_plugin set --client-id abc --client-secret s3cr3t
    python -m scripts.configure_plugin show --db-path /var/lib/forum/pushbullet.db
    python -m scripts.configure_plugin clear
"""

from __future__ import annotations

import argparse
import sqlite3
import sys
from typing import Callable, Optional

from forum_pushbullet.clients import SQLiteStore
from forum_pushbullet.core.config import PluginConfig, PushbulletSettings
from forum_pushbullet.services.plugin_config import (
    clear_plugin_config,
    load_plugin_config,
    save_plugin_config,
)

EXIT_OK = 0
EXIT_NOT_CONFIGURED = 2
EXIT_RUNTIME_ERROR = 5

DEFAULT_DB_PATH = "data/forum_pushbullet.db"


def _mask(secret: str) -> str:
    if len(secret) <= 4:
        return "*" * len(secret)
    return f"{secret[:2]}{'*' * (len(secret) - 4)}{secret[-2:]}"


def _set(store: SQLiteStore, client_id: str, client_secret: str) -> int:
    save_plugin_config(store, PluginConfig(client_id=client_id, client_secret=client_secret))
    print(f"Stored Pushbullet credentials for client {client_id}.")
    return EXIT_OK


def _show(store: SQLiteStore) -> int:
    # Only the stored record matters here, not whatever the shell exports.
    config = load_plugin_config(PushbulletSettings(client_id=None, client_secret=None), store)
    if config is None:
        print("Pushbullet is not configured.", file=sys.stderr)
        return EXIT_NOT_CONFIGURED
    print(f"client_id:     {config.client_id}")
    print(f"client_secret: {_mask(config.client_secret)}")
    return EXIT_OK


def _clear(store: SQLiteStore) -> int:
    clear_plugin_config(store)
    print("Removed stored Pushbullet credentials.")
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Manage the Pushbullet client credentials used by the bridge."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common_arguments(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--db-path",
            default=DEFAULT_DB_PATH,
            help=f"Path to the forum store database (default: {DEFAULT_DB_PATH}).",
        )

    set_parser = subparsers.add_parser("set", help="Store a client id and secret.")
    add_common_arguments(set_parser)
    set_parser.add_argument("--client-id", required=True)
    set_parser.add_argument("--client-secret", required=True)

    show_parser = subparsers.add_parser(
        "show", help="Print the stored client id with the secret masked."
    )
    add_common_arguments(show_parser)

    clear_parser = subparsers.add_parser("clear", help="Remove stored credentials.")
    add_common_arguments(clear_parser)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        store = SQLiteStore(args.db_path)
    except (OSError, sqlite3.Error) as exc:
        print(f"Unable to open store at {args.db_path}: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    command: str = args.command
    handlers: dict[str, Callable[[], int]] = {
        "set": lambda: _set(store, args.client_id, args.client_secret),
        "show": lambda: _show(store),
        "clear": lambda: _clear(store),
    }
    try:
        return handlers[command]()
    except sqlite3.Error as exc:
        print(f"Store operation failed: {exc}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
