#!/usr/bin/env python3
"""Inspect a LIN network description

Parses an LDF, prints its frames and schedule tables, round-trips one
frame through the bit layout helpers and exports the network as DBC.

Usage:
    python examples/inspect_network.py [network.ldf]
"""

import sys
from pathlib import Path

from autodbconv import LDFError, parse_ldf
from autodbconv.database import describe_command
from autodbconv.layout import decode_frame, encode_frame
from autodbconv.ldf_converter import database_to_dbc

DEFAULT_LDF = Path(__file__).parent.parent / "python" / "tests" / "data" / "LIN_2.2A.ldf"


def main():
    ldf_file = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_LDF

    print("=== autodbconv network inspection ===\n")

    print(f"Loading LDF from: {ldf_file}")
    try:
        db = parse_ldf(ldf_file)
    except LDFError as e:
        print(f"Parse failed: {e}")
        return 1
    ldf = db.ldf
    print(f"LIN {ldf.protocol_version} at {ldf.bitrate:g} bps, commander {ldf.commander}\n")

    print("Frames:")
    for name, message in db.messages.items():
        print(f"  0x{message.id:02X} {name:<12s} {message.byte_width} bytes  {', '.join(message.signals)}")

    print("\nSchedule tables:")
    for table, entries in ldf.schedule_tables.items():
        print(f"  {table}")
        for entry in entries:
            keyword, args = describe_command(entry.command)
            print(f"    {keyword} {args}".rstrip() + f"  ({entry.delay:g} ms)")

    first = next(iter(db.messages), None)
    if first is not None:
        data = encode_frame(db, first)
        print(f"\nInitial bytes of {first}: {data.hex(' ').upper()}")
        for signal, value in decode_frame(db, first, data).items():
            print(f"  {signal} = {value}")

    print("\nDBC export:\n")
    print(database_to_dbc(db))
    return 0


if __name__ == "__main__":
    sys.exit(main())
