"""In-memory network database produced by the LDF parser

The parser is the only writer: it builds a Database during a single call
to parse_ldf() and hands it to the caller afterwards. Everything downstream
(exporters, bit layout helpers, the CLI) only reads it.

Ordering rules:
- Message.signals, sporadic/event constituent lists, configurable frames
  and schedule table entries keep source order (bit layout and scheduling
  depend on it).
- Name-keyed dicts (signals, messages, responders, ...) are lookups only.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import NamedTuple, TypeAlias, Union

MAX_SIGNAL_WIDTH = 64
"""Widest signal (in bits) the parser accepts."""


# ============================================================================
# Encodings
# ============================================================================

@dataclass
class ScalarEncoding:
    """Linear physical range: actual = scale * raw + offset for raw_min <= raw <= raw_max"""
    raw_min: int
    raw_max: int
    scale: float
    offset: float
    unit: str = ""

    def covers(self, raw: int) -> bool:
        return self.raw_min <= raw <= self.raw_max

    def to_physical(self, raw: int) -> float:
        return self.scale * raw + self.offset


@dataclass
class EnumEncoding:
    """Named raw values (label -> raw)"""
    name: str
    mapping: dict[str, int] = field(default_factory=dict)

    def label_for(self, raw: int) -> str | None:
        for label, value in self.mapping.items():
            if value == raw:
                return label
        return None


Encoding: TypeAlias = Union[ScalarEncoding, EnumEncoding]


# ============================================================================
# Signals and frames
# ============================================================================

@dataclass
class Signal:
    """One value carried inside a frame.

    bit_start stays None until the Frames section places the signal;
    see layout.py for how bit_start, bit_width and little_endian map onto
    the frame bytes.
    """
    bit_width: int
    init_value: int = 0
    signed: bool = False
    little_endian: bool = True
    bit_start: int | None = None
    encodings: list[Encoding] = field(default_factory=list)
    publisher: str = ""
    subscribers: list[str] = field(default_factory=list)
    init_array: list[int] | None = None

    @property
    def is_placed(self) -> bool:
        return self.bit_start is not None

    def physical_value(self, raw: int) -> float | str | int:
        """Apply encodings to a raw value.

        Enum labels win over scalar ranges; a raw value no encoding
        covers is returned unchanged.
        """
        for encoding in self.encodings:
            if isinstance(encoding, EnumEncoding):
                label = encoding.label_for(raw)
                if label is not None:
                    return label
        for encoding in self.encodings:
            if isinstance(encoding, ScalarEncoding) and encoding.covers(raw):
                return encoding.to_physical(raw)
        return raw


@dataclass
class Message:
    """A frame: fixed id, fixed byte width, ordered list of signal names"""
    sender: str
    id: int
    byte_width: int
    signals: list[str] = field(default_factory=list)
    # multiplexed signal groups: mux name -> (selector value, signal names)
    mux_signals: dict[str, tuple[int, list[str]]] = field(default_factory=dict)


# ============================================================================
# Node data
# ============================================================================

class ProductId(NamedTuple):
    supplier_id: int
    function_id: int
    variant: int = 0


@dataclass
class ResponderData:
    """Per-responder subscriptions and diagnostic attributes"""
    subscribed_signals: list[str] = field(default_factory=list)
    configured_nad: int = 0
    initial_nad: int | None = None
    product_id: ProductId | None = None
    response_error: str | None = None
    # (frame or event group name, fixed id or None)
    configurable_frames: list[tuple[str, int | None]] = field(default_factory=list)
    protocol_version: str = ""


@dataclass
class EventFrame:
    """Event-triggered frame group"""
    collision_table: str | None
    id: int
    frames: list[str] = field(default_factory=list)


# ============================================================================
# Schedule commands
# ============================================================================

@dataclass(frozen=True)
class FrameSlot:
    """Transmit a frame, sporadic group or event group"""
    frame: str


@dataclass(frozen=True)
class MasterReqSlot:
    """Diagnostic master request slot"""


@dataclass(frozen=True)
class SlaveRespSlot:
    """Diagnostic slave response slot"""


@dataclass(frozen=True)
class AssignNAD:
    node: str


@dataclass(frozen=True)
class ConditionalChangeNAD:
    nad: int
    id: int
    byte: int
    mask: int
    inv: int
    new_nad: int


@dataclass(frozen=True)
class DataDump:
    node: str
    data: tuple[int, int, int, int, int]


@dataclass(frozen=True)
class SaveConfiguration:
    node: str


@dataclass(frozen=True)
class AssignFrameIdRange:
    node: str
    index: int
    pids: tuple[int, int, int, int] = (0xFF, 0xFF, 0xFF, 0xFF)


@dataclass(frozen=True)
class FreeFormat:
    data: tuple[int, int, int, int, int, int, int, int]


@dataclass(frozen=True)
class AssignFrameId:
    node: str
    frame: str


ScheduleCommand: TypeAlias = Union[
    FrameSlot,
    MasterReqSlot,
    SlaveRespSlot,
    AssignNAD,
    ConditionalChangeNAD,
    DataDump,
    SaveConfiguration,
    AssignFrameIdRange,
    FreeFormat,
    AssignFrameId,
]


class ScheduleEntry(NamedTuple):
    command: ScheduleCommand
    delay: float  # ms


def describe_command(command: ScheduleCommand) -> tuple[str, str]:
    """Keyword and argument text of *command*, as written in an LDF.

    >>> describe_command(AssignFrameIdRange("LSM", 0))
    ('AssignFrameIdRange', '{ LSM, 0, 0xFF, 0xFF, 0xFF, 0xFF }')
    """
    if isinstance(command, FrameSlot):
        return command.frame, ""
    if isinstance(command, MasterReqSlot):
        return "MasterReq", ""
    if isinstance(command, SlaveRespSlot):
        return "SlaveResp", ""

    args: list[str] = []
    for f in fields(command):
        value = getattr(command, f.name)
        values = value if isinstance(value, tuple) else (value,)
        for item in values:
            if isinstance(item, int) and f.name != "index":
                args.append(f"0x{item:02X}")
            else:
                args.append(str(item))
    return type(command).__name__, "{ " + ", ".join(args) + " }"


# ============================================================================
# Network and database
# ============================================================================

@dataclass
class LDFData:
    """Network-level data only an LDF carries"""
    bitrate: float = 0.0  # bps
    postfix: str = ""
    commander: str = ""
    time_base: float = 0.0  # ms
    jitter: float = 0.0  # ms
    responders: dict[str, ResponderData] = field(default_factory=dict)
    sporadic_frames: dict[str, list[str]] = field(default_factory=dict)
    event_frames: dict[str, EventFrame] = field(default_factory=dict)
    schedule_tables: dict[str, list[ScheduleEntry]] = field(default_factory=dict)
    encoding_types: dict[str, list[Encoding]] = field(default_factory=dict)
    protocol_version: str = ""
    language_version: str = ""

    def is_node(self, name: str) -> bool:
        return name == self.commander or name in self.responders


class DatabaseKind(str, Enum):
    """Description dialect a Database was read from"""
    NCF = "ncf"
    LDF = "ldf"
    DBC = "dbc"


@dataclass
class Database:
    signals: dict[str, Signal] = field(default_factory=dict)
    messages: dict[str, Message] = field(default_factory=dict)
    kind: DatabaseKind = DatabaseKind.NCF
    extra: LDFData | None = None

    @property
    def ldf(self) -> LDFData:
        """LDF network data; raises ValueError for other database kinds."""
        if self.kind is not DatabaseKind.LDF or self.extra is None:
            raise ValueError(f"database kind is {self.kind.value}, not ldf")
        return self.extra
