"""Type definitions for the exported JSON structure

Defines TypedDict classes and Enums describing what
ldf_converter.database_to_json() produces. The same structure is written
to YAML.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, NotRequired, TypedDict, Union


class ByteOrder(str, Enum):
    """Signal byte order"""
    LITTLE_ENDIAN = "little_endian"
    BIG_ENDIAN = "big_endian"


class OutputFormat(str, Enum):
    """Formats accepted by convert_ldf_file"""
    JSON = "json"
    YAML = "yaml"
    DBC = "dbc"
    XLSX = "xlsx"


# ============================================================================
# Encodings
# ============================================================================

class ScalarEncodingDict(TypedDict):
    """physical_value range"""
    type: Literal["scalar"]
    rawMin: int
    rawMax: int
    scale: float
    offset: float
    unit: str


class EnumEncodingDict(TypedDict):
    """logical_value table (label -> raw)"""
    type: Literal["enum"]
    name: str
    values: dict[str, int]


EncodingDict = Union[ScalarEncodingDict, EnumEncodingDict]


# ============================================================================
# Signals and frames
# ============================================================================

class SignalDict(TypedDict):
    """Signal definition"""
    name: str
    startBit: int | None  # None if never placed in a frame
    length: int
    byteOrder: str  # "little_endian" | "big_endian"
    signed: bool
    initValue: int
    publisher: str
    subscribers: list[str]
    encodings: list[EncodingDict]
    initArray: NotRequired[list[int]]


class MessageDict(TypedDict):
    """Frame definition; signals in frame order"""
    id: int
    name: str
    length: int
    sender: str
    signals: list[str]


# ============================================================================
# Nodes and schedules
# ============================================================================

class ResponderDict(TypedDict):
    name: str
    protocolVersion: str
    configuredNAD: int
    initialNAD: int | None
    productId: list[int] | None  # [supplier, function, variant]
    responseError: str | None
    subscribedSignals: list[str]
    configurableFrames: list[dict[str, int | str | None]]


class EventFrameDict(TypedDict):
    name: str
    collisionTable: str | None
    id: int
    frames: list[str]


class ScheduleEntryDict(TypedDict):
    """One slot: command name plus its fields, and the delay in ms"""
    command: str
    args: dict[str, object]
    delay: float


class LDFDefinition(TypedDict):
    """Complete export of an LDF database"""
    protocolVersion: str
    languageVersion: str
    bitrate: float
    channel: str
    commander: str
    timeBase: float
    jitter: float
    responders: list[ResponderDict]
    signals: list[SignalDict]
    messages: list[MessageDict]
    sporadicFrames: dict[str, list[str]]
    eventFrames: list[EventFrameDict]
    scheduleTables: dict[str, list[ScheduleEntryDict]]
