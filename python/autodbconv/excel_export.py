"""Excel export of LDF signal tables

Writes a workbook for people who review LIN networks in spreadsheets.

**Signals**: one row per signal::

    Frame ID | Frame Name | Length | Sender | Signal | Start Bit | Width |
    Init Value | Subscribers | Encoding

Signals declared but never placed in a frame come last, with the frame
columns left empty.

**Schedules**: one row per schedule slot::

    Table | Slot | Command | Arguments | Delay (ms)
"""

from __future__ import annotations

from pathlib import Path

from openpyxl.styles import Font
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from .database import Database, EnumEncoding, ScalarEncoding, Signal, describe_command

_SIGNAL_HEADERS = [
    "Frame ID", "Frame Name", "Length", "Sender", "Signal", "Start Bit",
    "Width", "Init Value", "Subscribers", "Encoding",
]

_SCHEDULE_HEADERS = ["Table", "Slot", "Command", "Arguments", "Delay (ms)"]


def write_signal_workbook(db: Database, path: str | Path) -> None:
    """Write the Signals and Schedules sheets for *db* to *path*.

    Does not overwrite existing files.

    Raises:
        FileExistsError: File already exists
    """
    p = Path(path)
    if p.exists():
        raise FileExistsError(f"File already exists: {path}")

    wb = Workbook()

    ws_signals = wb.active
    assert ws_signals is not None
    ws_signals.title = "Signals"
    _write_header_row(ws_signals, _SIGNAL_HEADERS)
    _write_signal_rows(ws_signals, db)

    ws_schedules = wb.create_sheet("Schedules")
    _write_header_row(ws_schedules, _SCHEDULE_HEADERS)
    _write_schedule_rows(ws_schedules, db)

    wb.save(str(p))


def _write_header_row(ws: Worksheet, headers: list[str]) -> None:
    """Write bold header row to a worksheet."""
    bold = Font(bold=True)
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = bold


def _encoding_summary(signal: Signal) -> str | None:
    parts: list[str] = []
    for encoding in signal.encodings:
        if isinstance(encoding, ScalarEncoding):
            unit = f" {encoding.unit}" if encoding.unit else ""
            parts.append(
                f"[{encoding.raw_min}..{encoding.raw_max}] "
                f"x{encoding.scale:g} {encoding.offset:+g}{unit}"
            )
        elif isinstance(encoding, EnumEncoding):
            labels = ", ".join(f"{raw}={label}" for label, raw in encoding.mapping.items())
            parts.append(f"{encoding.name}: {labels}")
    return "; ".join(parts) or None


def _write_signal_rows(ws: Worksheet, db: Database) -> None:
    placed: set[str] = set()
    for frame_name, message in db.messages.items():
        for name in message.signals:
            signal = db.signals[name]
            placed.add(name)
            ws.append([
                f"0x{message.id:02X}", frame_name, message.byte_width, message.sender or None,
                name, signal.bit_start, signal.bit_width, signal.init_value,
                ", ".join(signal.subscribers) or None, _encoding_summary(signal),
            ])

    for name, signal in db.signals.items():
        if name in placed:
            continue
        ws.append([
            None, None, None, None,
            name, None, signal.bit_width, signal.init_value,
            ", ".join(signal.subscribers) or None, _encoding_summary(signal),
        ])


def _write_schedule_rows(ws: Worksheet, db: Database) -> None:
    for table, entries in db.ldf.schedule_tables.items():
        for slot, entry in enumerate(entries, start=1):
            keyword, args = describe_command(entry.command)
            ws.append([table, slot, keyword, args or None, entry.delay])
