"""Parse LIN description files (LDF) into a Database

Usage:
    from autodbconv import parse_ldf

    db = parse_ldf("network.ldf")
    print(db.ldf.commander, db.ldf.bitrate)
    for name, message in db.messages.items():
        print(name, message.id, message.signals)

Grammar
=======

Sections appear once each, in this order (bracketed ones are optional)::

    LIN_description_file ;
    LIN_protocol_version = "2.2" ;
    LIN_language_version = "2.2" ;
    LIN_speed = 19.2 kbps ;
    [Channel_name = "..." ;]
    Nodes { Master: ... ; Slaves: ... ; }
    [composite { ... }]
    Signals { ... }
    [Diagnostic_signals { ... }]
    Frames { ... }
    [Sporadic_frames { ... }]
    [Event_triggered_frames { ... }]
    [Diagnostic_frames { ... }]
    Node_attributes { ... }
    Schedule_tables { ... }
    [Signal_groups { ... }]
    [Signal_encoding_types { ... }]
    [Signal_representation { ... }]

The first error aborts the parse; see errors.py for the failure kinds.
Recognised but unsupported constructs are skipped with a warning on the
module logger.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from pathlib import Path

from .database import (
    MAX_SIGNAL_WIDTH,
    AssignFrameId,
    AssignFrameIdRange,
    AssignNAD,
    ConditionalChangeNAD,
    Database,
    DatabaseKind,
    DataDump,
    Encoding,
    EnumEncoding,
    EventFrame,
    FrameSlot,
    FreeFormat,
    LDFData,
    MasterReqSlot,
    Message,
    ProductId,
    ResponderData,
    SaveConfiguration,
    ScalarEncoding,
    ScheduleCommand,
    ScheduleEntry,
    Signal,
    SlaveRespSlot,
)
from .errors import (
    DuplicateEncodingError,
    DuplicateFrameError,
    DuplicateScheduleTableError,
    DuplicateSignalError,
    EventFrameDifferentLengthError,
    IncorrectTokenError,
    NotUnconditionalFrameError,
    NumberParseError,
    SignalTooWideError,
    SporadicFrameHasResponderError,
    UnexpectedTokenError,
    UnknownEncodingError,
    UnknownFrameError,
    UnknownNodeError,
    UnknownSignalError,
)
from .literals import is_number, parse_float, parse_int
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)

LIN_VERSION = "2.2"

_DELIMITERS = frozenset(",;:={}/")

# Node attributes read past without being modelled
_SKIPPED_NODE_ATTRIBUTES = frozenset({
    "P2_min", "ST_min", "N_As_timeout", "N_Cr_timeout", "fault_state_signals",
})

_DIAGNOSTIC_FRAMES = (
    ("MasterReq", 0x3C, "MasterReqB"),
    ("SlaveResp", 0x3D, "SlaveRespB"),
)
_DIAGNOSTIC_BYTES = 8

_DEFAULT_FRAME_ID_PIDS = (0xFF, 0xFF, 0xFF, 0xFF)


# ============================================================================
# Public API
# ============================================================================

def parse_ldf(path: str | Path) -> Database:
    """Parse the LDF file at *path*.

    Returns:
        Database with kind LDF and its LDFData in ``extra``

    Raises:
        LDFError: Any lexical, syntactic, semantic or I/O failure
    """
    logger.debug("parsing %s", path)
    return _LDFParser(Tokenizer(path)).parse()


def parse_ldf_text(text: str) -> Database:
    """Parse LDF content held in a string."""
    return _LDFParser(Tokenizer.from_text(text)).parse()


def _unquote(token: str) -> str:
    if len(token) >= 2 and token.startswith('"') and token.endswith('"'):
        return token[1:-1]
    return token


# ============================================================================
# Parser
# ============================================================================

class _LDFParser:
    """Walks the section sequence once, filling a private Database."""

    def __init__(self, tokens: Tokenizer):
        self._tokens = tokens
        self._ldf = LDFData()
        self._db = Database(kind=DatabaseKind.LDF, extra=self._ldf)
        # signals already named in Signal_representation
        self._represented: set[str] = set()
        self._schedule_commands: dict[str, Callable[[], ScheduleCommand]] = {
            "MasterReq": MasterReqSlot,
            "SlaveResp": SlaveRespSlot,
            "AssignNAD": self._assign_nad,
            "ConditionalChangeNAD": self._conditional_change_nad,
            "DataDump": self._data_dump,
            "SaveConfiguration": self._save_configuration,
            "AssignFrameIdRange": self._assign_frame_id_range,
            "FreeFormat": self._free_format,
            "AssignFrameId": self._assign_frame_id,
        }

    def parse(self) -> Database:
        self._header()
        self._protocol_version()
        self._language_version()
        self._speed()
        if self._lookahead("Channel_name", "Nodes") == "Channel_name":
            self._channel_name()
        self._nodes()
        if self._lookahead("composite", "Signals") == "composite":
            self._node_composition()
        self._signals()
        if self._lookahead("Diagnostic_signals", "Frames") == "Diagnostic_signals":
            self._diagnostic_signals()
        self._frames()

        after_frames = ["Sporadic_frames", "Event_triggered_frames",
                        "Diagnostic_frames", "Node_attributes"]
        if self._lookahead(*after_frames) == "Sporadic_frames":
            self._sporadic_frames()
        if self._lookahead(*after_frames[1:]) == "Event_triggered_frames":
            self._event_triggered_frames()
        if self._lookahead(*after_frames[2:]) == "Diagnostic_frames":
            self._diagnostic_frames()
        self._node_attributes()
        self._schedule_tables()

        trailing = ["Signal_groups", "Signal_encoding_types", "Signal_representation"]
        if self._lookahead(*trailing, end_ok=True) == "Signal_groups":
            self._signal_groups()
        if self._lookahead(*trailing[1:], end_ok=True) == "Signal_encoding_types":
            self._signal_encoding_types()
        if self._lookahead(*trailing[2:], end_ok=True) == "Signal_representation":
            self._signal_representation()
        if not self._tokens.at_end():
            token = self._tokens.next()
            raise UnexpectedTokenError(
                f"{self._where()}: unexpected {token!r} after the last section"
            )

        logger.debug(
            "parsed %d signals, %d frames, %d schedule tables",
            len(self._db.signals), len(self._db.messages),
            len(self._ldf.schedule_tables),
        )
        return self._db

    # ------------------------------------------------------------------------
    # Token helpers
    # ------------------------------------------------------------------------

    def _where(self) -> str:
        return f"line {self._tokens.line}"

    def _expect(self, literal: str) -> None:
        token = self._tokens.next()
        if token != literal:
            raise IncorrectTokenError(
                f"{self._where()}: expected {literal!r}, found {token!r}"
            )

    def _at(self, literal: str) -> bool:
        return self._tokens.peek() == literal

    def _lookahead(self, *allowed: str, end_ok: bool = False) -> str | None:
        """Peek at the next section keyword, which must be one of *allowed*.

        Returns None at end of input when *end_ok* is set.
        """
        if end_ok and self._tokens.at_end():
            return None
        token = self._tokens.peek()
        if token not in allowed:
            self._tokens.next()
            raise UnexpectedTokenError(
                f"{self._where()}: expected one of {', '.join(allowed)}, found {token!r}"
            )
        return token

    def _name(self) -> str:
        token = self._tokens.next()
        if token in _DELIMITERS or token.startswith('"'):
            raise UnexpectedTokenError(
                f"{self._where()}: expected an identifier, found {token!r}"
            )
        return token

    def _string(self) -> str:
        token = self._tokens.next()
        if len(token) < 2 or not (token.startswith('"') and token.endswith('"')):
            raise IncorrectTokenError(
                f"{self._where()}: expected a quoted string, found {token!r}"
            )
        return token[1:-1]

    def _int(self) -> int:
        token = self._tokens.next()
        try:
            return parse_int(token)
        except NumberParseError as exc:
            raise NumberParseError(f"{self._where()}: {exc}") from exc

    def _float(self) -> float:
        token = self._tokens.next()
        try:
            return parse_float(token)
        except NumberParseError as exc:
            raise NumberParseError(f"{self._where()}: {exc}") from exc

    def _int_list(self, count: int) -> tuple[int, ...]:
        """Read *count* comma-separated integers."""
        values = [self._int()]
        for _ in range(count - 1):
            self._expect(",")
            values.append(self._int())
        return tuple(values)

    def _expect_value(self, expected: int) -> None:
        """Read an integer that must equal *expected* (template matching)."""
        token = self._tokens.next()
        try:
            value: int | None = parse_int(token)
        except NumberParseError:
            value = None
        if value != expected:
            raise IncorrectTokenError(
                f"{self._where()}: expected {expected}, found {token!r}"
            )

    def _skip_block(self) -> None:
        """Consume a brace-delimited block, nested blocks included."""
        self._expect("{")
        depth = 1
        while depth:
            token = self._tokens.next()
            if token == "{":
                depth += 1
            elif token == "}":
                depth -= 1

    def _skip_statement(self) -> None:
        """Consume tokens up to and including the next ';'."""
        while self._tokens.next() != ";":
            pass

    def _is_any_frame(self, name: str) -> bool:
        return (
            name in self._db.messages
            or name in self._ldf.sporadic_frames
            or name in self._ldf.event_frames
        )

    def _responder(self, name: str) -> ResponderData:
        responder = self._ldf.responders.get(name)
        if responder is None:
            raise UnknownNodeError(f"{self._where()}: unknown responder node {name!r}")
        return responder

    def _signal(self, name: str) -> Signal:
        signal = self._db.signals.get(name)
        if signal is None:
            raise UnknownSignalError(f"{self._where()}: unknown signal {name!r}")
        return signal

    # ------------------------------------------------------------------------
    # Header, versions, speed, channel
    # ------------------------------------------------------------------------

    def _header(self) -> None:
        self._expect("LIN_description_file")
        self._expect(";")

    def _version(self, keyword: str) -> str:
        self._expect(keyword)
        self._expect("=")
        version = self._string()
        if version != LIN_VERSION:
            logger.warning("%s is %r, expected %r", keyword, version, LIN_VERSION)
        self._expect(";")
        return version

    def _protocol_version(self) -> None:
        self._ldf.protocol_version = self._version("LIN_protocol_version")

    def _language_version(self) -> None:
        self._ldf.language_version = self._version("LIN_language_version")

    def _speed(self) -> None:
        self._expect("LIN_speed")
        self._expect("=")
        self._ldf.bitrate = self._float() * 1000.0
        self._expect("kbps")
        self._expect(";")

    def _channel_name(self) -> None:
        self._expect("Channel_name")
        self._expect("=")
        self._ldf.postfix = self._string()
        self._expect(";")

    # ------------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------------

    def _nodes(self) -> None:
        self._expect("Nodes")
        self._expect("{")

        self._expect("Master")
        self._expect(":")
        self._ldf.commander = self._name()
        self._expect(",")
        self._ldf.time_base = self._float()
        self._expect("ms")
        self._expect(",")
        self._ldf.jitter = self._float()
        self._expect("ms")
        if self._at(","):
            logger.warning("%s: extra commander parameters are not supported, skipping", self._where())
            self._skip_statement()
        else:
            self._expect(";")

        if self._at("Slaves"):
            self._tokens.next()
            self._expect(":")
            while True:
                name = self._name()
                if self._ldf.is_node(name):
                    logger.warning("%s: node %r listed twice", self._where(), name)
                else:
                    self._ldf.responders[name] = ResponderData()
                if not self._at(","):
                    break
                self._tokens.next()
            self._expect(";")
        self._expect("}")

    def _node_composition(self) -> None:
        self._expect("composite")
        logger.warning("%s: node composition is not supported, skipping", self._where())
        self._skip_block()

    # ------------------------------------------------------------------------
    # Signals
    # ------------------------------------------------------------------------

    def _add_signal(self, name: str, signal: Signal) -> None:
        if name in self._db.signals:
            raise DuplicateSignalError(f"{self._where()}: signal {name!r} declared twice")
        self._db.signals[name] = signal

    def _signals(self) -> None:
        self._expect("Signals")
        self._expect("{")
        while not self._at("}"):
            self._signal_definition()
        self._expect("}")

    def _signal_definition(self) -> None:
        name = self._name()
        self._expect(":")
        width = self._int()
        if width < 1:
            raise IncorrectTokenError(f"{self._where()}: signal {name!r} has width 0")
        if width > MAX_SIGNAL_WIDTH:
            raise SignalTooWideError(
                f"{self._where()}: signal {name!r} is {width} bits wide, "
                f"maximum is {MAX_SIGNAL_WIDTH}"
            )
        self._expect(",")
        signal = Signal(bit_width=width)
        if self._at("{"):
            signal.init_array = self._init_array()
            logger.warning(
                "%s: initial value array of %r is not supported, using 0",
                self._where(), name,
            )
        else:
            signal.init_value = self._int()
        self._expect(",")
        # senders come from frame membership, the publisher is informational
        signal.publisher = self._name()
        while self._at(","):
            self._tokens.next()
            subscriber = self._name()
            if subscriber in signal.subscribers:
                logger.warning("%s: %r subscribes to %r twice", self._where(), subscriber, name)
                continue
            signal.subscribers.append(subscriber)
            responder = self._ldf.responders.get(subscriber)
            if responder is not None:
                responder.subscribed_signals.append(name)
        self._expect(";")
        self._add_signal(name, signal)

    def _init_array(self) -> list[int]:
        self._expect("{")
        values = [self._int()]
        while self._at(","):
            self._tokens.next()
            values.append(self._int())
        self._expect("}")
        return values

    def _diagnostic_signals(self) -> None:
        self._expect("Diagnostic_signals")
        self._expect("{")
        for frame_name, _, prefix in _DIAGNOSTIC_FRAMES:
            publisher = self._ldf.commander if frame_name == "MasterReq" else ""
            for index in range(_DIAGNOSTIC_BYTES):
                name = f"{prefix}{index}"
                self._expect(name)
                self._expect(":")
                self._expect("8")
                self._expect(",")
                self._expect("0")
                self._expect(";")
                self._add_signal(name, Signal(bit_width=8, publisher=publisher))
        self._expect("}")

    # ------------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------------

    def _add_message(self, name: str, message: Message) -> None:
        if self._is_any_frame(name):
            raise DuplicateFrameError(f"{self._where()}: frame {name!r} declared twice")
        self._db.messages[name] = message

    def _place_signal(self, frame_name: str, message: Message, signal_name: str, offset: int) -> None:
        signal = self._signal(signal_name)
        if signal.bit_start is not None:
            raise DuplicateSignalError(
                f"{self._where()}: signal {signal_name!r} already placed in a frame"
            )
        signal.bit_start = offset
        message.signals.append(signal_name)
        if offset + signal.bit_width > message.byte_width * 8:
            logger.warning(
                "%s: signal %r does not fit in %d-byte frame %r",
                self._where(), signal_name, message.byte_width, frame_name,
            )

    def _frames(self) -> None:
        self._expect("Frames")
        self._expect("{")
        while not self._at("}"):
            self._frame_definition()
        self._expect("}")

    def _frame_definition(self) -> None:
        name = self._name()
        self._expect(":")
        frame_id = self._int()
        self._expect(",")
        sender = self._name()
        if not self._ldf.is_node(sender):
            raise UnknownNodeError(f"{self._where()}: frame {name!r} sent by unknown node {sender!r}")
        self._expect(",")
        message = Message(sender=sender, id=frame_id, byte_width=self._int())
        self._add_message(name, message)
        self._expect("{")
        while not self._at("}"):
            signal_name = self._name()
            self._expect(",")
            offset = self._int()
            self._expect(";")
            self._place_signal(name, message, signal_name, offset)
        self._expect("}")

    def _sporadic_frames(self) -> None:
        self._expect("Sporadic_frames")
        self._expect("{")
        while not self._at("}"):
            name = self._name()
            if self._is_any_frame(name):
                raise DuplicateFrameError(f"{self._where()}: frame {name!r} declared twice")
            self._expect(":")
            frames: list[str] = []
            while True:
                frame = self._name()
                message = self._db.messages.get(frame)
                if message is None:
                    raise UnknownFrameError(f"{self._where()}: unknown frame {frame!r}")
                if message.sender != self._ldf.commander:
                    raise SporadicFrameHasResponderError(
                        f"{self._where()}: sporadic frame {name!r} contains {frame!r} "
                        f"sent by {message.sender!r}"
                    )
                if frame in frames:
                    raise DuplicateFrameError(f"{self._where()}: {frame!r} repeated in {name!r}")
                frames.append(frame)
                if not self._at(","):
                    break
                self._tokens.next()
            self._expect(";")
            self._ldf.sporadic_frames[name] = frames
        self._expect("}")

    def _event_triggered_frames(self) -> None:
        self._expect("Event_triggered_frames")
        self._expect("{")
        while not self._at("}"):
            name = self._name()
            if self._is_any_frame(name):
                raise DuplicateFrameError(f"{self._where()}: frame {name!r} declared twice")
            self._expect(":")
            # LIN 2.0 groups have no collision resolving table
            collision_table: str | None = None
            if not is_number(self._tokens.peek()):
                collision_table = self._name()
                self._expect(",")
            event = EventFrame(collision_table=collision_table, id=self._int())
            byte_width: int | None = None
            while self._at(","):
                self._tokens.next()
                frame = self._name()
                message = self._db.messages.get(frame)
                if message is None:
                    raise NotUnconditionalFrameError(
                        f"{self._where()}: {frame!r} in {name!r} is not an unconditional frame"
                    )
                if frame in event.frames:
                    raise DuplicateFrameError(f"{self._where()}: {frame!r} repeated in {name!r}")
                if byte_width is None:
                    byte_width = message.byte_width
                elif message.byte_width != byte_width:
                    raise EventFrameDifferentLengthError(
                        f"{self._where()}: {frame!r} is {message.byte_width} bytes, "
                        f"other frames of {name!r} are {byte_width}"
                    )
                event.frames.append(frame)
            self._expect(";")
            self._ldf.event_frames[name] = event
        self._expect("}")

    def _diagnostic_frames(self) -> None:
        self._expect("Diagnostic_frames")
        self._expect("{")
        for frame_name, frame_id, prefix in _DIAGNOSTIC_FRAMES:
            self._expect(frame_name)
            self._expect(":")
            self._expect_value(frame_id)
            sender = self._ldf.commander if frame_name == "MasterReq" else ""
            message = Message(sender=sender, id=frame_id, byte_width=_DIAGNOSTIC_BYTES)
            self._add_message(frame_name, message)
            self._expect("{")
            for index in range(_DIAGNOSTIC_BYTES):
                signal_name = f"{prefix}{index}"
                self._expect(signal_name)
                self._expect(",")
                self._expect_value(index * 8)
                self._expect(";")
                self._place_signal(frame_name, message, signal_name, index * 8)
            self._expect("}")
        self._expect("}")

    # ------------------------------------------------------------------------
    # Node attributes
    # ------------------------------------------------------------------------

    def _node_attributes(self) -> None:
        self._expect("Node_attributes")
        self._expect("{")
        while not self._at("}"):
            self._node_attribute_block()
        self._expect("}")

    def _node_attribute_block(self) -> None:
        responder = self._responder(self._name())
        self._expect("{")

        self._expect("LIN_protocol")
        self._expect("=")
        responder.protocol_version = _unquote(self._tokens.next())
        self._expect(";")

        self._expect("configured_NAD")
        self._expect("=")
        responder.configured_nad = self._int()
        self._expect(";")

        if self._at("initial_NAD"):
            self._tokens.next()
            self._expect("=")
            responder.initial_nad = self._int()
            self._expect(";")

        if responder.protocol_version.startswith("2."):
            self._diagnostic_class_attributes(responder)
        self._expect("}")

    def _diagnostic_class_attributes(self, responder: ResponderData) -> None:
        self._expect("product_id")
        self._expect("=")
        supplier_id = self._int()
        self._expect(",")
        function_id = self._int()
        variant = 0
        if self._at(","):
            self._tokens.next()
            variant = self._int()
        self._expect(";")
        responder.product_id = ProductId(supplier_id, function_id, variant)

        self._expect("response_error")
        self._expect("=")
        responder.response_error = self._name()
        self._signal(responder.response_error)
        self._expect(";")

        while self._tokens.peek() in _SKIPPED_NODE_ATTRIBUTES:
            attribute = self._tokens.next()
            logger.warning("%s: node attribute %s is not supported, skipping", self._where(), attribute)
            self._skip_statement()

        self._expect("configurable_frames")
        self._expect("{")
        while not self._at("}"):
            frame = self._name()
            if frame not in self._db.messages and frame not in self._ldf.event_frames:
                raise UnknownFrameError(f"{self._where()}: unknown configurable frame {frame!r}")
            frame_id: int | None = None
            if self._at("="):
                self._tokens.next()
                frame_id = self._int()
            self._expect(";")
            responder.configurable_frames.append((frame, frame_id))
        self._expect("}")

    # ------------------------------------------------------------------------
    # Schedule tables
    # ------------------------------------------------------------------------

    def _schedule_tables(self) -> None:
        self._expect("Schedule_tables")
        self._expect("{")
        while not self._at("}"):
            name = self._name()
            if name in self._ldf.schedule_tables:
                raise DuplicateScheduleTableError(
                    f"{self._where()}: schedule table {name!r} declared twice"
                )
            self._expect("{")
            entries: list[ScheduleEntry] = []
            while not self._at("}"):
                command = self._schedule_command()
                self._expect("delay")
                delay = self._float()
                self._expect("ms")
                self._expect(";")
                entries.append(ScheduleEntry(command, delay))
            self._expect("}")
            self._ldf.schedule_tables[name] = entries
        self._expect("}")

    def _schedule_command(self) -> ScheduleCommand:
        keyword = self._name()
        handler = self._schedule_commands.get(keyword)
        if handler is not None:
            return handler()
        if not self._is_any_frame(keyword):
            raise UnknownFrameError(f"{self._where()}: unknown frame {keyword!r} in schedule table")
        return FrameSlot(keyword)

    def _command_node(self) -> str:
        name = self._name()
        self._responder(name)
        return name

    def _assign_nad(self) -> AssignNAD:
        self._expect("{")
        node = self._command_node()
        self._expect("}")
        return AssignNAD(node)

    def _conditional_change_nad(self) -> ConditionalChangeNAD:
        self._expect("{")
        nad, frame_id, byte, mask, inv, new_nad = self._int_list(6)
        self._expect("}")
        return ConditionalChangeNAD(nad, frame_id, byte, mask, inv, new_nad)

    def _data_dump(self) -> DataDump:
        self._expect("{")
        node = self._command_node()
        self._expect(",")
        d1, d2, d3, d4, d5 = self._int_list(5)
        self._expect("}")
        return DataDump(node, (d1, d2, d3, d4, d5))

    def _save_configuration(self) -> SaveConfiguration:
        self._expect("{")
        node = self._command_node()
        self._expect("}")
        return SaveConfiguration(node)

    def _assign_frame_id_range(self) -> AssignFrameIdRange:
        self._expect("{")
        node = self._command_node()
        self._expect(",")
        index = self._int()
        if self._at(","):
            self._tokens.next()
            p0, p1, p2, p3 = self._int_list(4)
            pids = (p0, p1, p2, p3)
        else:
            # TODO derive the PIDs from the node's configurable_frames
            logger.warning(
                "%s: AssignFrameIdRange for %r without PIDs, using 0xFF",
                self._where(), node,
            )
            pids = _DEFAULT_FRAME_ID_PIDS
        self._expect("}")
        return AssignFrameIdRange(node, index, pids)

    def _free_format(self) -> FreeFormat:
        self._expect("{")
        d1, d2, d3, d4, d5, d6, d7, d8 = self._int_list(8)
        self._expect("}")
        return FreeFormat((d1, d2, d3, d4, d5, d6, d7, d8))

    def _assign_frame_id(self) -> AssignFrameId:
        self._expect("{")
        node = self._command_node()
        self._expect(",")
        frame = self._name()
        if frame not in self._db.messages and frame not in self._ldf.event_frames:
            raise UnknownFrameError(f"{self._where()}: unknown frame {frame!r} in AssignFrameId")
        self._expect("}")
        return AssignFrameId(node, frame)

    # ------------------------------------------------------------------------
    # Signal groups, encodings, representation
    # ------------------------------------------------------------------------

    def _signal_groups(self) -> None:
        self._expect("Signal_groups")
        logger.warning("%s: signal groups are not supported, skipping", self._where())
        self._skip_block()

    def _signal_encoding_types(self) -> None:
        self._expect("Signal_encoding_types")
        self._expect("{")
        while not self._at("}"):
            name = self._name()
            if name in self._ldf.encoding_types:
                raise DuplicateEncodingError(
                    f"{self._where()}: signal encoding type {name!r} declared twice"
                )
            self._expect("{")
            self._ldf.encoding_types[name] = self._encoding_block(name)
            self._expect("}")
        self._expect("}")

    def _encoding_block(self, name: str) -> list[Encoding]:
        scalars: list[Encoding] = []
        labels: dict[str, int] = {}
        while not self._at("}"):
            kind = self._tokens.next()
            if kind == "logical_value":
                self._expect(",")
                raw = self._int()
                label = str(raw)
                if self._at(","):
                    self._tokens.next()
                    label = self._string()
                labels[label] = raw
            elif kind == "physical_value":
                self._expect(",")
                raw_min = self._int()
                self._expect(",")
                raw_max = self._int()
                self._expect(",")
                scale = self._float()
                self._expect(",")
                offset = self._float()
                unit = ""
                if self._at(","):
                    self._tokens.next()
                    unit = self._string()
                scalars.append(ScalarEncoding(raw_min, raw_max, scale, offset, unit))
            elif kind in ("bcd_value", "ascii_value"):
                logger.warning("%s: %s in %r is not supported, skipping", self._where(), kind, name)
            else:
                raise UnexpectedTokenError(
                    f"{self._where()}: unknown encoding value {kind!r} in {name!r}"
                )
            self._expect(";")

        if labels:
            scalars.append(EnumEncoding(name, labels))
        return scalars

    def _signal_representation(self) -> None:
        self._expect("Signal_representation")
        self._expect("{")
        while not self._at("}"):
            name = self._name()
            encodings = self._ldf.encoding_types.get(name)
            if encodings is None:
                raise UnknownEncodingError(f"{self._where()}: unknown signal encoding type {name!r}")
            self._expect(":")
            while True:
                signal_name = self._name()
                signal = self._signal(signal_name)
                if signal_name in self._represented:
                    raise DuplicateSignalError(
                        f"{self._where()}: signal {signal_name!r} already has a representation"
                    )
                self._represented.add(signal_name)
                signal.encodings.extend(copy.deepcopy(encodings))
                if not self._at(","):
                    break
                self._tokens.next()
            self._expect(";")
        self._expect("}")
