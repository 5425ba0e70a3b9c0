#
# Copyright 2025 The Apache Software Foundation
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#

"""
Read messages from an mbox file.

Usage: mbox-text [--mbox <path>] count
       mbox-text [--mbox <path>] raw <n>
       mbox-text [--mbox <path>] headers <n>
       mbox-text [--mbox <path>] text <n> [--to <m>]
"""

import argparse
import sys
from pathlib import Path

import structlog

from mail_reader.config import settings
from mail_reader.errors import MessageNotFoundError, MessageRangeError
from mail_reader.extractors import extract_plain_text
from mail_reader.parsers.email_parser import parse_mail
from mail_reader.parsers.mbox_parser import MboxIndex

logger = structlog.get_logger(__name__)

MESSAGE_SEPARATOR = "-" * 72


def cmd_count(mbox: MboxIndex, args: argparse.Namespace) -> int:
    print(len(mbox))
    return 0


def cmd_raw(mbox: MboxIndex, args: argparse.Namespace) -> int:
    sys.stdout.buffer.write(mbox[args.number])
    sys.stdout.flush()
    return 0


def cmd_headers(mbox: MboxIndex, args: argparse.Namespace) -> int:
    mail = parse_mail(mbox[args.number])
    for name in mail.headers:
        for value in mail.headers.get_all(name):
            print(f"{name}: {value}")
    return 0


def cmd_text(mbox: MboxIndex, args: argparse.Namespace) -> int:
    """Print plain text of one message or of an inclusive range."""
    if args.to is None:
        print(extract_plain_text(parse_mail(mbox[args.number])))
        return 0

    for position, raw in enumerate(mbox.iter_range(args.number, args.to)):
        if position:
            print(MESSAGE_SEPARATOR)
        print(extract_plain_text(parse_mail(raw)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Read messages from an mbox file",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--mbox",
        default=settings.mbox_path,
        type=Path,
        metavar="PATH",
        help="Path to mbox file (default: MAIL_READER_MBOX_PATH)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    count_parser = subparsers.add_parser("count", help="Print the number of messages")
    count_parser.set_defaults(handler=cmd_count)

    raw_parser = subparsers.add_parser("raw", help="Write the raw bytes of a message")
    raw_parser.add_argument("number", type=int, help="Message number, starting at 1")
    raw_parser.set_defaults(handler=cmd_raw)

    headers_parser = subparsers.add_parser("headers", help="Print the headers of a message")
    headers_parser.add_argument("number", type=int, help="Message number, starting at 1")
    headers_parser.set_defaults(handler=cmd_headers)

    text_parser = subparsers.add_parser("text", help="Print the plain text of a message")
    text_parser.add_argument("number", type=int, help="Message number, starting at 1")
    text_parser.add_argument(
        "--to",
        type=int,
        default=None,
        metavar="M",
        help="Print messages number to M (inclusive)"
    )
    text_parser.set_defaults(handler=cmd_text)

    return parser


def run(argv: list[str] | None = None) -> int:
    """
    Run the command line tool.

    Args:
        argv: Arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.mbox is None:
        print("Error: No mbox file given (use --mbox or MAIL_READER_MBOX_PATH)", file=sys.stderr)
        return 2

    mbox_path = args.mbox.resolve()
    if not mbox_path.is_file():
        logger.error("file_not_found", path=str(mbox_path))
        print(f"Error: File not found: {mbox_path}", file=sys.stderr)
        return 1

    mbox = MboxIndex(mbox_path)
    try:
        return args.handler(mbox, args)
    except (MessageNotFoundError, MessageRangeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.error("mbox_read_failed", path=str(mbox_path), error=str(e))
        print(f"Error: Reading {mbox_path} failed: {e}", file=sys.stderr)
        return 1


def main() -> None:
    """Main entry point for mbox-text command."""
    sys.exit(run())


if __name__ == "__main__":
    main()
