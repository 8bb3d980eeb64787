#!/usr/bin/env python3
"""
Command-line interface for amoid.
Usage:
  amoid [-d] [convert] [identifier ...] [-i TYPE] [-o COLUMN ...] [-U] [-w] [-d]
  amoid [-d] partition [identifier ...] [-o TYPE ...] [-d]
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import config
from .classifier import detect_id_type, partition_ids
from .db import QueryClient, make_client
from .errors import AmoidError, InvalidArgument, InvalidInput
from .formatter import format_partition, format_rows
from .models import AUTO, USER_ID
from .query_builder import build_convert_query, display_columns
from .sql_validator import is_safe_sql

LOG = logging.getLogger("amoid")

COMMANDS = ("convert", "partition")
GLOBAL_FLAGS = ("-d", "--debug")


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise InvalidArgument(message, usage=self.format_usage())


class StoreOnce(argparse.Action):
    """Reject an option given more than once."""

    def __call__(self, parser, namespace, values, option_string=None):
        if getattr(namespace, "_seen_" + self.dest, False):
            raise InvalidArgument(f"{option_string} may only be specified once", usage=parser.format_usage())
        setattr(namespace, "_seen_" + self.dest, True)
        setattr(namespace, self.dest, values)


def build_parser() -> ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-d", "--debug", action="store_true", help="Show debugging information")

    parser = ArgumentParser(prog="amoid", description="Convert between add-on id formats: ids, guids, slugs and user ids.")
    sub = parser.add_subparsers(dest="command", parser_class=ArgumentParser)

    conv = sub.add_parser("convert", parents=[common],
                          help="Convert between different id formats (default command)")
    conv.add_argument("identifier", nargs="*", help="The guids, ids or slugs as input (default: stdin)")
    conv.add_argument("-i", "--input", action=StoreOnce, default=AUTO,
                      choices=config.FORMAT_CHOICES + [AUTO], help="The input format (default: auto)")
    conv.add_argument("-o", "--output", action="append", choices=config.FORMAT_CHOICES,
                      help="The output format, may be repeated (default: id, guid and slug)")
    conv.add_argument("-U", "--user", action="store_true",
                      help="Expand list to include all add-ons of all involved users")
    conv.add_argument("-w", "--wx", action="store_true",
                      help="Filter ids to only include add-ons that have a WebExtension version")

    part = sub.add_parser("partition", parents=[common],
                          help="Split ids between different formats: ids, guids, or slugs. "
                               "Slugs may also contain invalid guids as there is no format restriction on slugs.")
    part.add_argument("identifier", nargs="*", help="The guids, ids or slugs as input (default: stdin)")
    part.add_argument("-o", "--output", action="append", choices=config.BASE_COLUMNS,
                      help="The id types to output. If this option is passed, no headers will be shown")

    parser.commands = {"convert": conv, "partition": part}
    return parser


def parse_args(argv: List[str]) -> argparse.Namespace:
    """
    Pick the command, then let its parser take options and identifiers in any order.
    Global flags may come before the command; convert is the default command.
    """
    parser = build_parser()
    argv = list(argv)
    leading = []
    while argv and argv[0] in GLOBAL_FLAGS:
        leading.append(argv.pop(0))
    if argv and argv[0] in ("-h", "--help") and not leading:
        return parser.parse_args(argv)

    command = argv.pop(0) if argv and argv[0] in COMMANDS else "convert"
    args = parser.commands[command].parse_intermixed_args(leading + argv)
    args.command = command
    return args


def read_stdin(message: Optional[str] = None, stream=None) -> List[str]:
    """Read lines until end of input."""
    stream = stream or sys.stdin
    if message and stream.isatty():
        LOG.info(message)
    return [line.rstrip("\r\n") for line in stream]


class AMOID:
    def __init__(self, client: Optional[QueryClient] = None, stdin=None):
        self._client = client
        self.stdin = stdin

    @property
    def client(self) -> QueryClient:
        # partition never needs the config or the network
        if self._client is None:
            self._client = make_client(config.load_config(), debug=LOG.isEnabledFor(logging.DEBUG))
        return self._client

    def get_input_data(self, data: List[str], message: Optional[str] = None) -> List[str]:
        if not data:
            data = read_stdin(message, self.stdin)
        return data

    def convert(self, args: argparse.Namespace) -> str:
        data = self.get_input_data(args.identifier, f"Waiting for {args.input}s... (one per line, Ctrl+D to finish)")
        data = [line for line in data if line]
        if not data:
            raise InvalidArgument("No identifiers given")

        input_type = detect_id_type(data) if args.input == AUTO else args.input
        columns = list(args.output or config.BASE_COLUMNS)
        if args.wx and columns == [USER_ID] and not args.user:
            raise InvalidArgument("--wx cannot be combined with a user_id-only output unless --user is given")

        LOG.info("Converting %ss to %ss", input_type, "s,".join(columns))

        sql = build_convert_query(input_type, data, columns, expand_users=args.user, wx_only=args.wx)
        ok, msg = is_safe_sql(sql)
        if not ok:
            raise InvalidInput(f"Refusing to run generated query: {msg}")

        result = self.client.sql(sql)
        return format_rows(display_columns(columns, args.user), result.rows, expected=len(data))

    def partition(self, args: argparse.Namespace) -> str:
        data = self.get_input_data(args.identifier)
        parts = partition_ids(data)
        LOG.debug("Found %d ids, %d guids, and %d potential slugs", len(parts.ids), len(parts.guids), len(parts.other))
        return format_partition(parts, args.output)


def setup_logging(debug: bool = False) -> logging.Handler:
    """Send diagnostics to stderr, keeping stdout for data."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    LOG.addHandler(handler)
    LOG.setLevel(logging.DEBUG if debug else logging.INFO)
    return handler


def main(argv: Optional[List[str]] = None, client: Optional[QueryClient] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    handler = None
    try:
        args = parse_args(argv)
        handler = setup_logging(args.debug)
        amoid = AMOID(client=client)
        output = getattr(amoid, args.command)(args)
    except InvalidArgument as e:
        if e.usage:
            sys.stderr.write(e.usage)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except AmoidError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        if handler is not None:
            LOG.removeHandler(handler)

    if output:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
