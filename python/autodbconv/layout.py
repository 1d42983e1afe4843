"""Signal bit layout inside frame bytes

A signal's location is given by bit_start, bit_width and little_endian.
Frame bit n is bit (n % 8) of byte (n // 8).

- little-endian: bit_start is the LSB; significance grows with the bit
  number and runs straight across byte boundaries.
- big-endian: bit_start is the MSB; significance falls bit by bit inside
  a byte, then continues at bit 7 of the following byte (a sawtooth).

Masks for an 8-bit signal spread over two bytes::

    little  bit_start=4  ->  F0 0F
    big     bit_start=3  ->  0F F0

LDF signals are always little-endian; the big-endian rule is kept for
databases built by hand or by other front ends.
"""

from __future__ import annotations

from collections.abc import Mapping

from .database import Database, Signal


def bit_positions(signal: Signal) -> list[int]:
    """Frame bit numbers of *signal*, least significant first.

    Raises:
        ValueError: The signal has not been placed in a frame.
    """
    if signal.bit_start is None:
        raise ValueError("signal has no bit_start (not placed in a frame)")

    if signal.little_endian:
        return [signal.bit_start + i for i in range(signal.bit_width)]

    msb_first: list[int] = []
    bit = signal.bit_start
    for _ in range(signal.bit_width):
        msb_first.append(bit)
        bit = bit - 1 if bit % 8 else bit + 15
    msb_first.reverse()
    return msb_first


def _checked_positions(signal: Signal, byte_width: int) -> list[int]:
    positions = bit_positions(signal)
    for bit in positions:
        if not 0 <= bit < byte_width * 8:
            raise ValueError(f"bit {bit} lies outside a {byte_width}-byte frame")
    return positions


def signal_mask(signal: Signal, byte_width: int) -> bytes:
    """Byte mask with a 1 for every bit *signal* occupies."""
    mask = bytearray(byte_width)
    for bit in _checked_positions(signal, byte_width):
        mask[bit // 8] |= 1 << (bit % 8)
    return bytes(mask)


def pack_raw(signal: Signal, raw: int, data: bytearray) -> None:
    """Write raw value *raw* into *data* in place.

    Signed signals accept negative values (two's complement).

    Raises:
        ValueError: *raw* does not fit in the signal, or the signal does
            not fit in *data*.
    """
    width = signal.bit_width
    if signal.signed:
        low, high = -(1 << (width - 1)), (1 << (width - 1)) - 1
    else:
        low, high = 0, (1 << width) - 1
    if not low <= raw <= high:
        raise ValueError(f"raw value {raw} out of range [{low}, {high}]")

    raw &= (1 << width) - 1
    for i, bit in enumerate(_checked_positions(signal, len(data))):
        byte, shift = divmod(bit, 8)
        if raw >> i & 1:
            data[byte] |= 1 << shift
        else:
            data[byte] &= ~(1 << shift) & 0xFF


def unpack_raw(signal: Signal, data: bytes | bytearray) -> int:
    """Read the raw value of *signal* from *data*."""
    raw = 0
    for i, bit in enumerate(_checked_positions(signal, len(data))):
        byte, shift = divmod(bit, 8)
        raw |= (data[byte] >> shift & 1) << i
    if signal.signed and raw >> (signal.bit_width - 1):
        raw -= 1 << signal.bit_width
    return raw


def encode_frame(
    db: Database,
    frame: str,
    raw_values: Mapping[str, int] | None = None,
) -> bytes:
    """Build the bytes of *frame* from raw signal values.

    Signals missing from *raw_values* take their init_value.

    Raises:
        KeyError: Unknown frame or signal name in *raw_values*
        ValueError: A value does not fit its signal
    """
    message = db.messages[frame]
    raw_values = raw_values or {}
    unknown = set(raw_values) - set(message.signals)
    if unknown:
        raise KeyError(f"signals not in frame {frame!r}: {', '.join(sorted(unknown))}")

    data = bytearray(message.byte_width)
    for name in message.signals:
        signal = db.signals[name]
        pack_raw(signal, raw_values.get(name, signal.init_value), data)
    return bytes(data)


def decode_frame(db: Database, frame: str, data: bytes | bytearray) -> dict[str, float | str | int]:
    """Decode every signal of *frame* to its physical value.

    Enum encodings produce labels, scalar encodings produce floats and
    signals without a matching encoding keep their raw integer.
    """
    message = db.messages[frame]
    if len(data) < message.byte_width:
        raise ValueError(
            f"frame {frame!r} needs {message.byte_width} bytes, got {len(data)}"
        )
    values: dict[str, float | str | int] = {}
    for name in message.signals:
        signal = db.signals[name]
        values[name] = signal.physical_value(unpack_raw(signal, data))
    return values
