# Command-line entry point
#
#   hideable-db encode [--hex] < raw > encoded
#   hideable-db decode [--hex] < encoded > raw
#   hideable-db escape TEXT
#   hideable-db is-table NAME        (exit 0 if present, 1 if not)

import argparse
import binascii
import sys
from typing import BinaryIO, List, Optional

import structlog

from . import __version__
from .codec import MalformedEncoding, decode, encode, escape_count, escape_for_literal
from .config import Settings
from .core.log_config import configure_logging
from .db import Database, DatabaseError

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hideable-db",
        description="Binary-safe SQLite helpers for the Hideable wiki",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"hideable-db {__version__}",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Load settings from this .env file (default: ./.env if present)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_encode = sub.add_parser("encode", help="Encode stdin with the binary codec")
    p_encode.add_argument("--hex", action="store_true", help="Write output as hex")

    p_decode = sub.add_parser("decode", help="Decode codec output from stdin")
    p_decode.add_argument("--hex", action="store_true", help="Read input as hex")

    p_escape = sub.add_parser("escape", help="Escape TEXT for a SQL literal")
    p_escape.add_argument("text")

    p_table = sub.add_parser("is-table", help="Check whether a table exists")
    p_table.add_argument("name")
    p_table.add_argument("--db", default=None, help="Database file (default: from settings)")

    return parser


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = Settings.from_env(args.env_file)
    except ValueError as e:
        print(f"hideable-db: invalid configuration: {e}", file=sys.stderr)
        return EXIT_ERROR
    configure_logging(settings.log_level, json=settings.log_json)

    stdin = stdin or sys.stdin.buffer
    stdout = stdout or sys.stdout.buffer

    try:
        if args.command == "encode":
            data = stdin.read()
            out = encode(data)
            logger.debug("encoded", size=len(data), escapes=escape_count(data))
            stdout.write(binascii.hexlify(out) + b"\n" if args.hex else out)

        elif args.command == "decode":
            data = stdin.read()
            if args.hex:
                data = binascii.unhexlify(data.strip())
            stdout.write(decode(data))

        elif args.command == "escape":
            stdout.write(escape_for_literal(args.text.encode("utf-8")) + b"\n")

        elif args.command == "is-table":
            with Database(args.db, settings=settings) as db:
                found = db.is_table(args.name)
            stdout.write(b"yes\n" if found else b"no\n")
            stdout.flush()
            return EXIT_OK if found else EXIT_NOT_FOUND

    except (MalformedEncoding, binascii.Error) as e:
        print(f"hideable-db: invalid encoded input: {e}", file=sys.stderr)
        return EXIT_ERROR
    except DatabaseError as e:
        print(f"hideable-db: {e}", file=sys.stderr)
        return EXIT_ERROR

    stdout.flush()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
