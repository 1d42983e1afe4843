"""Exceptions raised while reading a LIN description file

Every failure aborts the parse; no partial database is returned.
All exceptions derive directly from LDFError, so callers can catch the
whole family with a single ``except LDFError``.
"""

from __future__ import annotations


class LDFError(Exception):
    """Base exception for all LDF parsing errors"""


# ============================================================================
# Lexical
# ============================================================================

class ExpectedCommentError(LDFError):
    """A '/' was not followed by '*' or '/'"""


class ExpectedTokenError(LDFError):
    """Input ended (or held only comments) where a token was required"""


# ============================================================================
# Syntactic
# ============================================================================

class IncorrectTokenError(LDFError):
    """A token did not match the fixed literal the grammar expects"""


class UnexpectedTokenError(LDFError):
    """A token cannot start any section allowed at this position"""


class NumberParseError(LDFError):
    """A numeric literal is malformed or out of range"""


# ============================================================================
# Semantic
# ============================================================================

class SignalTooWideError(LDFError):
    """Signal bit width exceeds MAX_SIGNAL_WIDTH"""


class UnknownNodeError(LDFError):
    """Reference to a node that is neither commander nor responder"""


class UnknownFrameError(LDFError):
    """Reference to an undeclared frame or frame group"""


class UnknownSignalError(LDFError):
    """Reference to an undeclared signal"""


class UnknownEncodingError(LDFError):
    """Reference to an undeclared signal encoding type"""


class DuplicateSignalError(LDFError):
    """Signal declared twice, or placed in a frame twice"""


class DuplicateFrameError(LDFError):
    """Frame or frame group name already in use, or repeated within a group"""


class DuplicateEncodingError(LDFError):
    """Signal encoding type declared twice"""


class DuplicateScheduleTableError(LDFError):
    """Schedule table declared twice"""


class NotUnconditionalFrameError(LDFError):
    """Event-triggered group references something other than an unconditional frame"""


class SporadicFrameHasResponderError(LDFError):
    """Sporadic group references a frame not published by the commander"""


class EventFrameDifferentLengthError(LDFError):
    """Event-triggered group mixes frames of different byte widths"""


# ============================================================================
# Environmental / unimplemented
# ============================================================================

class LDFIOError(LDFError):
    """The source file could not be read"""


class UnsupportedFeatureError(LDFError):
    """Recognised construct that this package does not model"""
