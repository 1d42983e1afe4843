"""Command-line interface for autodbconv

Subcommands:
    signals    list frames and the signals they carry
    schedules  list schedule tables slot by slot
    extract    decode signals from raw frame bytes
    convert    export an LDF as JSON, YAML, DBC or Excel

Usage:
    python -m autodbconv signals network.ldf
    python -m autodbconv schedules network.ldf --json
    python -m autodbconv extract network.ldf CEM_Frm1 0F
    python -m autodbconv convert network.ldf -o network.dbc
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

from .database import Database, Message, describe_command
from .errors import LDFError
from .layout import decode_frame
from .ldf_converter import convert_ldf_file, database_to_json, schedule_entry_to_json
from .ldf_parser import parse_ldf


# ============================================================================
# Exit codes
# ============================================================================

_EXIT_OK = 0
_EXIT_ERROR = 2


# ============================================================================
# Helpers
# ============================================================================

def _die(msg: str) -> NoReturn:
    """Print error to stderr and exit with code 2."""
    print(f"Error: {msg}", file=sys.stderr)
    sys.exit(_EXIT_ERROR)


def parse_frame_id(s: str) -> int:
    """Parse a frame ID from hex (0x10) or decimal (16) string.

    Raises:
        ValueError: If *s* is not a valid integer.
    """
    s = s.strip()
    try:
        if s.lower().startswith("0x"):
            return int(s, 16)
        return int(s)
    except ValueError as exc:
        raise ValueError(f"invalid frame ID: {s!r}") from exc


def parse_hex_data(s: str) -> bytearray:
    """Parse hex data string into a bytearray.

    Accepts:
        "401F8200"
        "40 1F 82 00"
        "40:1F:82:00"

    Raises:
        ValueError: If *s* contains non-hex characters or has odd length.
    """
    cleaned = s.replace(" ", "").replace(":", "")
    if cleaned.lower().startswith("0x"):
        cleaned = cleaned[2:]
    if len(cleaned) % 2 != 0:
        raise ValueError(f"hex data has odd number of characters: {s!r}")
    try:
        return bytearray.fromhex(cleaned)
    except ValueError as exc:
        raise ValueError(f"invalid hex data: {s!r}") from exc


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.WARNING
    if getattr(args, "verbose", False):
        level = logging.DEBUG
    elif getattr(args, "quiet", False):
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_ldf(args: argparse.Namespace) -> Database:
    """Parse the LDF named on the command line."""
    p = Path(args.ldf)
    if not p.exists():
        _die(f"LDF file not found: {args.ldf}")
    return parse_ldf(p)


def _find_frame(db: Database, frame: str) -> str | None:
    """Resolve a frame given by name or by ID."""
    if frame in db.messages:
        return frame
    try:
        frame_id = parse_frame_id(frame)
    except ValueError:
        return None
    for name, message in db.messages.items():
        if message.id == frame_id:
            return name
    return None


# ============================================================================
# Subcommand: signals
# ============================================================================

def _format_signal_line(db: Database, name: str) -> str:
    """Format a single signal as a one-line summary."""
    sig = db.signals[name]
    order = "LE" if sig.little_endian else "BE"
    subscribers = ", ".join(sig.subscribers)
    return (
        f"  {name:<24s} bits[{sig.bit_start}:{sig.bit_width}]"
        + f"   {order}  init {sig.init_value:<6d}"
        + f"  -> {subscribers}"
    )


def _print_frame_header(name: str, message: Message) -> None:
    sender_part = f", sender {message.sender}" if message.sender else ""
    print(f"Frame 0x{message.id:02X} {name} ({message.byte_width} bytes{sender_part})")


def _print_signals_text(db: Database) -> None:
    """Print frames and signals in human-readable text format."""
    total_signals = 0

    for name, message in db.messages.items():
        _print_frame_header(name, message)
        for sig_name in message.signals:
            total_signals += 1
            print(_format_signal_line(db, sig_name))
        print()

    ldf = db.ldf
    print(f"Commander {ldf.commander}, responders: {', '.join(ldf.responders) or 'none'}")
    print(f"{len(db.messages)} frames, {total_signals} signals, {ldf.bitrate:g} bps")


def _cmd_signals(args: argparse.Namespace) -> int:
    """List frames and signals defined in an LDF file."""
    db = _load_ldf(args)

    if getattr(args, "json", False):
        print(json.dumps(database_to_json(db), indent=2))
    else:
        _print_signals_text(db)

    return _EXIT_OK


# ============================================================================
# Subcommand: schedules
# ============================================================================

def _cmd_schedules(args: argparse.Namespace) -> int:
    """List schedule tables."""
    db = _load_ldf(args)
    tables = db.ldf.schedule_tables

    if getattr(args, "json", False):
        out = {
            name: [schedule_entry_to_json(e) for e in entries]
            for name, entries in tables.items()
        }
        print(json.dumps(out, indent=2))
        return _EXIT_OK

    for name, entries in tables.items():
        cycle = sum(e.delay for e in entries)
        print(f"Schedule {name} ({len(entries)} slots, {cycle:g} ms cycle)")
        for slot, entry in enumerate(entries, start=1):
            keyword, cmd_args = describe_command(entry.command)
            print(f"  {slot:>3d}. {keyword} {cmd_args}".rstrip() + f"  delay {entry.delay:g} ms")
        print()

    print(f"{len(tables)} schedule tables")
    return _EXIT_OK


# ============================================================================
# Subcommand: extract
# ============================================================================

def _cmd_extract(args: argparse.Namespace) -> int:
    """Decode signals from raw frame bytes."""
    db = _load_ldf(args)
    frame = _find_frame(db, args.frame)
    if frame is None:
        _die(f"unknown frame: {args.frame}")

    data = parse_hex_data(args.data)
    message = db.messages[frame]
    if len(data) != message.byte_width:
        _die(f"frame {frame} is {message.byte_width} bytes, got {len(data)}")

    values = decode_frame(db, frame, data)

    if getattr(args, "json", False):
        out = {"frame": frame, "id": message.id, "values": values}
        print(json.dumps(out, indent=2))
    else:
        _print_frame_header(frame, message)
        print()
        if values:
            for name, value in values.items():
                print(f"  {name:<24s} = {value}")
        else:
            print("  (no signals)")

    return _EXIT_OK


# ============================================================================
# Subcommand: convert
# ============================================================================

def _cmd_convert(args: argparse.Namespace) -> int:
    """Export an LDF file to another format."""
    p = Path(args.ldf)
    if not p.exists():
        _die(f"LDF file not found: {args.ldf}")

    text = convert_ldf_file(p, args.output, args.format)
    if args.output is None:
        print(text)
    else:
        print(f"Converted {args.ldf} to {args.output}", file=sys.stderr)

    return _EXIT_OK


# ============================================================================
# Argument parser
# ============================================================================

def _build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="autodbconv",
        description="LIN description file parser and converter",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="only log errors")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # -- signals -------------------------------------------------------------
    p_signals = subparsers.add_parser(
        "signals",
        help="list frames and signals defined in an LDF file",
    )
    p_signals.add_argument("ldf", help=".ldf file")
    p_signals.add_argument("--json", action="store_true", help="output as JSON")

    # -- schedules -----------------------------------------------------------
    p_schedules = subparsers.add_parser(
        "schedules",
        help="list schedule tables",
    )
    p_schedules.add_argument("ldf", help=".ldf file")
    p_schedules.add_argument("--json", action="store_true", help="output as JSON")

    # -- extract -------------------------------------------------------------
    p_extract = subparsers.add_parser(
        "extract",
        help="decode signals from raw frame bytes",
    )
    p_extract.add_argument("ldf", help=".ldf file")
    p_extract.add_argument("frame", help="frame name or ID (hex 0x10 or decimal 16)")
    p_extract.add_argument("data", help="frame data as hex bytes")
    p_extract.add_argument("--json", action="store_true", help="output as JSON")

    # -- convert -------------------------------------------------------------
    p_convert = subparsers.add_parser(
        "convert",
        help="export an LDF file as JSON, YAML, DBC or Excel",
    )
    p_convert.add_argument("ldf", help=".ldf file")
    p_convert.add_argument("-o", "--output", help="output file (format from suffix)")
    p_convert.add_argument(
        "--format",
        choices=["json", "yaml", "dbc", "xlsx"],
        help="output format (default: from --output suffix, else json)",
    )

    return parser


# ============================================================================
# Entry point
# ============================================================================

_COMMANDS = {
    "signals": _cmd_signals,
    "schedules": _cmd_schedules,
    "extract": _cmd_extract,
    "convert": _cmd_convert,
}


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code."""
    parser = _build_parser()

    try:
        args = parser.parse_args(argv)
        _configure_logging(args)
        handler = _COMMANDS[args.command]
        return handler(args)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else _EXIT_ERROR
    except (LDFError, FileExistsError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return _EXIT_ERROR
