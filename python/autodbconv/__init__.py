"""autodbconv - LIN description file parser

Reads LIN Description Files (LDF) into a validated network database of
signals, frames, node roles and schedule tables:

    from autodbconv import parse_ldf

    db = parse_ldf("network.ldf")
    ldf = db.ldf
    print(ldf.commander, ldf.bitrate)
    for name, message in db.messages.items():
        print(f"0x{message.id:02X} {name}: {message.signals}")

Parsing is fail-fast: the first problem raises an LDFError subclass and
no partial database is returned.

Export
======

    from autodbconv.ldf_converter import database_to_json, database_to_dbc

    json_dict = database_to_json(db)
    dbc_text = database_to_dbc(db)   # via cantools
"""

from autodbconv.database import (
    MAX_SIGNAL_WIDTH,
    Database,
    DatabaseKind,
    EnumEncoding,
    LDFData,
    Message,
    ResponderData,
    ScalarEncoding,
    ScheduleEntry,
    Signal,
)
from autodbconv.errors import (
    DuplicateEncodingError,
    DuplicateFrameError,
    DuplicateScheduleTableError,
    DuplicateSignalError,
    EventFrameDifferentLengthError,
    ExpectedCommentError,
    ExpectedTokenError,
    IncorrectTokenError,
    LDFError,
    LDFIOError,
    NotUnconditionalFrameError,
    NumberParseError,
    SignalTooWideError,
    SporadicFrameHasResponderError,
    UnexpectedTokenError,
    UnknownEncodingError,
    UnknownFrameError,
    UnknownNodeError,
    UnknownSignalError,
    UnsupportedFeatureError,
)
from autodbconv.ldf_parser import parse_ldf, parse_ldf_text

__version__ = "0.1.0"
__all__ = [
    "parse_ldf",
    "parse_ldf_text",
    "MAX_SIGNAL_WIDTH",
    "Database",
    "DatabaseKind",
    "EnumEncoding",
    "LDFData",
    "Message",
    "ResponderData",
    "ScalarEncoding",
    "ScheduleEntry",
    "Signal",
    "LDFError",
    "LDFIOError",
    "ExpectedCommentError",
    "ExpectedTokenError",
    "IncorrectTokenError",
    "UnexpectedTokenError",
    "NumberParseError",
    "SignalTooWideError",
    "UnknownNodeError",
    "UnknownFrameError",
    "UnknownSignalError",
    "UnknownEncodingError",
    "DuplicateSignalError",
    "DuplicateFrameError",
    "DuplicateEncodingError",
    "DuplicateScheduleTableError",
    "NotUnconditionalFrameError",
    "SporadicFrameHasResponderError",
    "EventFrameDifferentLengthError",
    "UnsupportedFeatureError",
]
