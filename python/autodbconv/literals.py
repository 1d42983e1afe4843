"""Numeric literals as they appear in LDF text

Two spellings are accepted: ``0x`` followed by hex digits, or a plain
decimal literal. Python-only forms such as ``1_000``, ``inf`` or ``nan``
are rejected so that the accepted grammar does not depend on int()/float()
quirks.
"""

from __future__ import annotations

import re

from .errors import NumberParseError

_HEX_PREFIX = "0x"
_U64_MAX = 2**64 - 1

_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]+")
_DEC_INT = re.compile(r"[0-9]+")
_DEC_REAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _parse_hex(text: str) -> int:
    digits = text[len(_HEX_PREFIX):]
    if not _HEX_DIGITS.fullmatch(digits):
        raise NumberParseError(f"invalid hex literal: {text!r}")
    value = int(digits, 16)
    if value > _U64_MAX:
        raise NumberParseError(f"hex literal out of range: {text!r}")
    return value


def parse_int(text: str) -> int:
    """Parse an unsigned 64-bit integer literal.

    Raises:
        NumberParseError: If *text* is not a hex or decimal integer, or
            does not fit in 64 bits.
    """
    if text.startswith(_HEX_PREFIX):
        return _parse_hex(text)
    if not _DEC_INT.fullmatch(text):
        raise NumberParseError(f"invalid integer literal: {text!r}")
    value = int(text)
    if value > _U64_MAX:
        raise NumberParseError(f"integer literal out of range: {text!r}")
    return value


def parse_float(text: str) -> float:
    """Parse a real-valued literal (hex integers are converted to float).

    Raises:
        NumberParseError: If *text* is not a valid numeral.
    """
    if text.startswith(_HEX_PREFIX):
        return float(_parse_hex(text))
    if not _DEC_REAL.fullmatch(text):
        raise NumberParseError(f"invalid real literal: {text!r}")
    return float(text)


def is_number(text: str) -> bool:
    """True if *text* reads as a real or integer literal."""
    try:
        parse_float(text)
    except NumberParseError:
        return False
    return True
