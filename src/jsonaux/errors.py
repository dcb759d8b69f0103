"""Exception types raised by jsonaux."""

from __future__ import annotations


class JSONAuxError(Exception):
    """Base class for all jsonaux errors."""


class JSONSyntaxError(JSONAuxError, ValueError):
    """The token source could not produce a valid next token.

    ``offset`` is a character offset into the input; ``lineno`` and
    ``colno`` are 1-based. Any of them may be ``None`` when the token
    source does not track positions.
    """

    def __init__(
        self,
        msg: str,
        offset: int | None = None,
        lineno: int | None = None,
        colno: int | None = None,
    ) -> None:
        self.msg = msg
        self.offset = offset
        self.lineno = lineno
        self.colno = colno
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.offset is None:
            return self.msg
        return f"{self.msg}: line {self.lineno} column {self.colno} (char {self.offset})"


class ImpossibleStateError(JSONAuxError):
    """A token arrived that a well-nested token stream can never produce."""


class InexactNumberError(JSONAuxError):
    """A token source cannot reproduce a number literal's exact text."""
