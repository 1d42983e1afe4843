"""Lexer for LIN description files

Splits LDF text into tokens. Whitespace, ``/* ... */`` block comments and
``// ...`` line comments are skipped. A token is one of:

- a quoted character string, quotes included (``"2.2"``); there are no
  escapes, the first closing quote ends it
- a single delimiter: ``, ; : = { } /``
- a run of any other non-whitespace characters (identifiers, numbers,
  units such as ``kbps``)

The tokenizer has no grammar knowledge; callers only ever see token text.
"""

from __future__ import annotations

from enum import Enum, auto
from pathlib import Path

from .errors import ExpectedCommentError, ExpectedTokenError, LDFIOError

_DELIMITERS = frozenset(",;:={}/")
_QUOTE = '"'


class _Scan(Enum):
    SEARCH = auto()
    EXPECT_COMMENT = auto()
    BLOCK_COMMENT = auto()
    LINE_COMMENT = auto()


class Tokenizer:
    """Token stream over the full text of one LDF file.

    The file is read completely in the constructor and closed right away;
    next() and peek() then work on the in-memory copy.
    """

    def __init__(self, path: str | Path):
        """Load *path* as UTF-8 text.

        Raises:
            LDFIOError: The file cannot be opened or decoded.
        """
        try:
            with open(path, encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise LDFIOError(f"{path}: {exc}") from exc
        self._reset(text)

    @classmethod
    def from_text(cls, text: str) -> Tokenizer:
        """Build a tokenizer over an in-memory string."""
        tokens = cls.__new__(cls)
        tokens._reset(text)
        return tokens

    def _reset(self, text: str) -> None:
        self._text = text
        self._index = 0
        self._last_start = 0

    @property
    def line(self) -> int:
        """1-based line of the most recently consumed token."""
        return self._text.count("\n", 0, self._last_start) + 1

    def next(self) -> str:
        """Consume and return the next token.

        Raises:
            ExpectedTokenError: Nothing but whitespace/comments remains.
            ExpectedCommentError: A '/' is not followed by '*' or '/'.
        """
        start, end = self._scan()
        self._last_start = start
        self._index = end
        return self._text[start:end]

    def peek(self) -> str:
        """Return the next token without consuming it."""
        start, end = self._scan()
        return self._text[start:end]

    def at_end(self) -> bool:
        """True if only whitespace and comments remain."""
        return self._skip(self._index) is None

    def _scan(self) -> tuple[int, int]:
        start = self._skip(self._index)
        if start is None:
            raise ExpectedTokenError(
                f"line {self.line}: expected a token, found end of input"
            )
        return start, self._token_end(start)

    def _skip(self, index: int) -> int | None:
        """Index of the first character of the next token, or None."""
        text = self._text
        state = _Scan.SEARCH
        prev = ""
        for i in range(index, len(text)):
            c = text[i]
            if state is _Scan.SEARCH:
                if c == "/":
                    state = _Scan.EXPECT_COMMENT
                elif not c.isspace():
                    return i
            elif state is _Scan.EXPECT_COMMENT:
                if c == "*":
                    # '/*/' is a complete comment
                    state = _Scan.BLOCK_COMMENT
                elif c == "/":
                    state = _Scan.LINE_COMMENT
                else:
                    line = text.count("\n", 0, i) + 1
                    raise ExpectedCommentError(
                        f"line {line}: expected '*' or '/' after '/', found {c!r}"
                    )
            elif state is _Scan.BLOCK_COMMENT:
                if prev == "*" and c == "/":
                    state = _Scan.SEARCH
            elif state is _Scan.LINE_COMMENT:
                if c == "\n":
                    state = _Scan.SEARCH
            prev = c
        return None

    def _token_end(self, start: int) -> int:
        """Index one past the token starting at *start* (bounded by the text)."""
        text = self._text
        first = text[start]
        if first == _QUOTE:
            close = text.find(_QUOTE, start + 1)
            return len(text) if close < 0 else close + 1
        if first in _DELIMITERS:
            return start + 1
        end = start
        while end < len(text):
            c = text[end]
            if c.isspace() or c in _DELIMITERS or c == _QUOTE:
                break
            end += 1
        return end
