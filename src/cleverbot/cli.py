"""
Interactive terminal chat.

Reads one message per line from stdin, keeps the conversation history
itself, and prints each reply.  Commands:

    /reset   start a new remote session and clear history
    /stats   print the diagnostics snapshot as JSON
    /quit    exit (EOF works too)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import TextIO

from .client import CleverbotClient
from .config import ClientConfig
from .errors import Banned, CleverbotError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cleverbot",
        description="Chat with Cleverbot from the terminal.",
    )
    parser.add_argument("--language", type=str, default=None,
                        help="Default language code (e.g. 'en', 'fr')")
    parser.add_argument("--max-retries", type=int, default=None,
                        help="Attempts per message before giving up")
    parser.add_argument("--debug", action="store_true",
                        help="Log wire-level details")
    return parser


def run_chat(client: CleverbotClient, stdin: TextIO, stdout: TextIO) -> int:
    """
    Drive the read-reply loop until EOF or ``/quit``.

    Returns:
        Process exit status: 0 normally, 1 if the IP address was banned.
    """
    history: list[str] = []

    for line in stdin:
        message = line.strip()
        if not message:
            continue
        if message == "/quit":
            break
        if message == "/reset":
            client.new_session()
            history.clear()
            print("[INFO] Session reset.", file=stdout)
            continue
        if message == "/stats":
            print(json.dumps(client.get_diagnostics(), indent=2), file=stdout)
            continue

        try:
            reply = client.interact(message, history)
        except Banned as exc:
            print(f"[ERROR] {exc}", file=stdout)
            return 1
        except CleverbotError as exc:
            print(f"[ERROR] {exc}", file=stdout)
            continue

        history.extend([message, reply])
        print(reply, file=stdout)

    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    overrides: dict = {"debug": args.debug} if args.debug else {}
    if args.language is not None:
        overrides["default_language"] = args.language
    if args.max_retries is not None:
        overrides["max_retry_attempts"] = args.max_retries

    try:
        config = ClientConfig.from_env().apply(overrides)
    except CleverbotError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2

    return run_chat(CleverbotClient(config=config), sys.stdin, sys.stdout)


if __name__ == "__main__":
    sys.exit(main())
