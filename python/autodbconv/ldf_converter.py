"""
Convert parsed LDF databases to other formats.

JSON/YAML follow the structure in protocols.LDFDefinition. DBC output goes
through cantools so LIN frames can be opened with CAN tooling; Excel output
is handled by excel_export.
"""

import json
from dataclasses import asdict
from pathlib import Path

import yaml  # type: ignore[import-untyped]

try:
    import cantools
    from cantools.database.conversion import BaseConversion
    from cantools.database.namedsignalvalue import NamedSignalValue
except ImportError:
    raise ImportError(
        "cantools is required for DBC conversion. "
        "Install it with: pip install cantools"
    )

from .database import (
    Database,
    DatabaseKind,
    Encoding,
    EnumEncoding,
    Message,
    ResponderData,
    ScalarEncoding,
    ScheduleEntry,
    Signal,
)
from .errors import UnsupportedFeatureError
from .excel_export import write_signal_workbook
from .ldf_parser import parse_ldf
from .protocols import (
    ByteOrder,
    EncodingDict,
    LDFDefinition,
    MessageDict,
    OutputFormat,
    ResponderDict,
    ScheduleEntryDict,
    SignalDict,
)

_SUFFIX_FORMATS = {
    ".json": OutputFormat.JSON,
    ".yaml": OutputFormat.YAML,
    ".yml": OutputFormat.YAML,
    ".dbc": OutputFormat.DBC,
    ".xlsx": OutputFormat.XLSX,
}


def _require_ldf(db: Database) -> None:
    if db.kind is not DatabaseKind.LDF:
        raise UnsupportedFeatureError(f"cannot export a {db.kind.value} database")


def encoding_to_json(encoding: Encoding) -> EncodingDict:
    """Convert a signal encoding to JSON format."""
    if isinstance(encoding, EnumEncoding):
        return {"type": "enum", "name": encoding.name, "values": dict(encoding.mapping)}
    return {
        "type": "scalar",
        "rawMin": encoding.raw_min,
        "rawMax": encoding.raw_max,
        "scale": encoding.scale,
        "offset": encoding.offset,
        "unit": encoding.unit,
    }


def signal_to_json(name: str, signal: Signal) -> SignalDict:
    """Convert a Signal to JSON format."""
    byte_order = ByteOrder.LITTLE_ENDIAN if signal.little_endian else ByteOrder.BIG_ENDIAN
    sig_json: SignalDict = {
        "name": name,
        "startBit": signal.bit_start,
        "length": signal.bit_width,
        "byteOrder": byte_order.value,
        "signed": signal.signed,
        "initValue": signal.init_value,
        "publisher": signal.publisher,
        "subscribers": list(signal.subscribers),
        "encodings": [encoding_to_json(e) for e in signal.encodings],
    }
    if signal.init_array is not None:
        sig_json["initArray"] = list(signal.init_array)
    return sig_json


def message_to_json(name: str, message: Message) -> MessageDict:
    """Convert a Message to JSON format."""
    return {
        "id": message.id,
        "name": name,
        "length": message.byte_width,
        "sender": message.sender,
        "signals": list(message.signals),
    }


def responder_to_json(name: str, responder: ResponderData) -> ResponderDict:
    product_id = list(responder.product_id) if responder.product_id is not None else None
    return {
        "name": name,
        "protocolVersion": responder.protocol_version,
        "configuredNAD": responder.configured_nad,
        "initialNAD": responder.initial_nad,
        "productId": product_id,
        "responseError": responder.response_error,
        "subscribedSignals": list(responder.subscribed_signals),
        "configurableFrames": [
            {"frame": frame, "id": frame_id}
            for frame, frame_id in responder.configurable_frames
        ],
    }


def schedule_entry_to_json(entry: ScheduleEntry) -> ScheduleEntryDict:
    """Convert a schedule slot; tuples become lists so YAML can represent them."""
    args: dict[str, object] = {
        key: list(value) if isinstance(value, tuple) else value
        for key, value in asdict(entry.command).items()
    }
    return {
        "command": type(entry.command).__name__,
        "args": args,
        "delay": entry.delay,
    }


def database_to_json(db: Database) -> LDFDefinition:
    """
    Convert a parsed LDF database to JSON format.

    Args:
        db: Database returned by parse_ldf

    Returns:
        Dictionary in the format described by protocols.LDFDefinition

    Raises:
        UnsupportedFeatureError: The database was not read from an LDF
    """
    _require_ldf(db)
    ldf = db.ldf

    return {
        "protocolVersion": ldf.protocol_version,
        "languageVersion": ldf.language_version,
        "bitrate": ldf.bitrate,
        "channel": ldf.postfix,
        "commander": ldf.commander,
        "timeBase": ldf.time_base,
        "jitter": ldf.jitter,
        "responders": [responder_to_json(n, r) for n, r in ldf.responders.items()],
        "signals": [signal_to_json(n, s) for n, s in db.signals.items()],
        "messages": [message_to_json(n, m) for n, m in db.messages.items()],
        "sporadicFrames": {n: list(f) for n, f in ldf.sporadic_frames.items()},
        "eventFrames": [
            {
                "name": name,
                "collisionTable": event.collision_table,
                "id": event.id,
                "frames": list(event.frames),
            }
            for name, event in ldf.event_frames.items()
        ],
        "scheduleTables": {
            name: [schedule_entry_to_json(e) for e in entries]
            for name, entries in ldf.schedule_tables.items()
        },
    }


def database_to_yaml(db: Database) -> str:
    """Same structure as database_to_json, as a YAML document."""
    return yaml.safe_dump(database_to_json(db), sort_keys=False)


# ============================================================================
# cantools (DBC)
# ============================================================================

def _conversion(signal: Signal) -> tuple[BaseConversion, float | None, float | None, str | None]:
    """cantools conversion plus physical min/max and unit for *signal*."""
    scalar = next((e for e in signal.encodings if isinstance(e, ScalarEncoding)), None)
    labels = next((e for e in signal.encodings if isinstance(e, EnumEncoding)), None)

    choices = None
    if labels is not None:
        choices = {raw: NamedSignalValue(raw, label) for label, raw in labels.mapping.items()}

    if scalar is None:
        conversion = BaseConversion.factory(scale=1, offset=0, choices=choices, is_float=False)
        return conversion, None, None, None

    conversion = BaseConversion.factory(
        scale=scalar.scale, offset=scalar.offset, choices=choices, is_float=False,
    )
    bounds = (scalar.to_physical(scalar.raw_min), scalar.to_physical(scalar.raw_max))
    return conversion, min(bounds), max(bounds), scalar.unit or None


def signal_to_cantools(name: str, signal: Signal) -> cantools.database.can.Signal:
    """Convert a placed Signal to a cantools Signal."""
    conversion, minimum, maximum, unit = _conversion(signal)
    return cantools.database.can.Signal(
        name=name,
        start=signal.bit_start if signal.bit_start is not None else 0,
        length=signal.bit_width,
        byte_order="little_endian" if signal.little_endian else "big_endian",
        is_signed=signal.signed,
        raw_initial=signal.init_value,
        conversion=conversion,
        minimum=minimum,
        maximum=maximum,
        unit=unit,
        receivers=list(signal.subscribers),
    )


def message_to_cantools(db: Database, name: str, message: Message) -> cantools.database.can.Message:
    """Convert a Message (and its signals) to a cantools Message."""
    return cantools.database.can.Message(
        frame_id=message.id,
        name=name,
        length=message.byte_width,
        signals=[signal_to_cantools(s, db.signals[s]) for s in message.signals],
        senders=[message.sender] if message.sender else None,
        strict=False,
    )


def database_to_cantools(db: Database) -> cantools.database.can.Database:
    """
    Convert a parsed LDF database to a cantools Database.

    Frame ids are kept as-is (LIN ids fit in 11-bit CAN ids). Only the
    first scalar range of a signal is carried over; cantools has a single
    scale/offset per signal.
    """
    _require_ldf(db)
    ldf = db.ldf
    nodes = [cantools.database.can.Node(name=ldf.commander)]
    nodes.extend(cantools.database.can.Node(name=n) for n in ldf.responders)

    return cantools.database.can.Database(
        messages=[message_to_cantools(db, n, m) for n, m in db.messages.items()],
        nodes=nodes,
        version=ldf.protocol_version,
        strict=False,
    )


def database_to_dbc(db: Database) -> str:
    """Render *db* as DBC text."""
    return database_to_cantools(db).as_dbc_string()


# ============================================================================
# Files
# ============================================================================

def output_format(output_path: str | Path | None, fmt: str | None = None) -> OutputFormat:
    """Pick the output format from *fmt*, else from the output suffix, else JSON.

    Raises:
        ValueError: *fmt* is not a known format name
    """
    if fmt is not None:
        return OutputFormat(fmt.lower())
    if output_path is not None:
        return _SUFFIX_FORMATS.get(Path(output_path).suffix.lower(), OutputFormat.JSON)
    return OutputFormat.JSON


def convert_ldf_file(
    ldf_path: str | Path,
    output_path: str | Path | None = None,
    fmt: str | None = None,
) -> str:
    """
    Convert an .ldf file and optionally write the result to a file.

    Args:
        ldf_path: Path to the .ldf file
        output_path: Optional path to write to. If None, only returns the text.
        fmt: "json", "yaml", "dbc" or "xlsx"; defaults from output_path's suffix

    Returns:
        The converted text (empty for xlsx, which is binary)

    Raises:
        LDFError: The LDF file failed to parse
        ValueError: Unknown format, or xlsx without an output path
    """
    out_format = output_format(output_path, fmt)
    db = parse_ldf(ldf_path)

    if out_format is OutputFormat.XLSX:
        if output_path is None:
            raise ValueError("xlsx output needs an output path")
        write_signal_workbook(db, output_path)
        return ""

    if out_format is OutputFormat.YAML:
        text = database_to_yaml(db)
    elif out_format is OutputFormat.DBC:
        text = database_to_dbc(db)
    else:
        text = json.dumps(database_to_json(db), indent=2)

    if output_path:
        Path(output_path).write_text(text)

    return text


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python -m autodbconv.ldf_converter <input.ldf> [output.json|.yaml|.dbc|.xlsx]")
        sys.exit(1)

    input_file = sys.argv[1]
    output_file = sys.argv[2] if len(sys.argv) > 2 else None

    converted = convert_ldf_file(input_file, output_file)

    if output_file:
        print(f"Converted {input_file} to {output_file}")
    else:
        print(converted)
