"""Token source backed by ijson's event parser.

ijson picks the fastest backend available (yajl2_c when compiled).
Numbers come back as ``int`` or ``Decimal``, which keeps their value but
not their spelling: ``1e5``, ``1.0E5`` and ``10e4`` all arrive as
decimals that no longer say how they were written, and ``-0`` arrives as
``0``. Only nonzero integers can be written back exactly, so any other
number raises ``InexactNumberError``. Use the built-in ``Decoder`` for
documents with fractions, exponents or zeros.
"""

from __future__ import annotations

from typing import IO, Any, Iterator

import ijson

from .errors import InexactNumberError, JSONSyntaxError
from .tokens import DEFAULT_MAX_DEPTH, Token, TokenType

_EVENTS: dict[str, TokenType] = {
    "start_map": TokenType.BEGIN_OBJECT,
    "end_map": TokenType.END_OBJECT,
    "start_array": TokenType.BEGIN_ARRAY,
    "end_array": TokenType.END_ARRAY,
    "map_key": TokenType.STRING,
    "string": TokenType.STRING,
    "number": TokenType.NUMBER,
    "boolean": TokenType.BOOLEAN,
    "null": TokenType.NULL,
}

_OPENERS = frozenset(("start_map", "start_array"))
_CLOSERS = frozenset(("end_map", "end_array"))


def _number_text(value: Any) -> str:
    # bool is an int subclass but ijson reports it as a boolean event
    if isinstance(value, int) and value != 0:
        return str(value)
    raise InexactNumberError(
        f"number {value} cannot be written back exactly by the ijson backend;"
        " use the builtin backend"
    )


class IjsonDecoder:
    """Adapt ``ijson.basic_parse`` events to the token source protocol."""

    def __init__(
        self,
        stream: IO[bytes],
        buffer_size: int = 64 * 1024,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        if max_depth <= 0:
            raise ValueError(f"max depth must be positive, got {max_depth}")
        self._events: Iterator[tuple[str, Any]] = ijson.basic_parse(
            stream, buf_size=buffer_size, use_float=False
        )
        self._peeked: tuple[str, Any] | None = None
        self._depth = 0
        self._max_depth = max_depth

    def _next_event(self) -> tuple[str, Any] | None:
        try:
            return next(self._events)
        except StopIteration:
            return None
        except ijson.JSONError as exc:
            raise JSONSyntaxError(str(exc)) from exc

    def _peek(self) -> tuple[str, Any] | None:
        if self._peeked is None:
            self._peeked = self._next_event()
        return self._peeked

    def more(self) -> bool:
        event = self._peek()
        return event is not None and event[0] not in _CLOSERS

    def token(self) -> Token:
        event = self._peek()
        self._peeked = None
        if event is None:
            raise JSONSyntaxError("unexpected end of input")
        name, value = event
        if name in _OPENERS:
            if self._depth >= self._max_depth:
                raise JSONSyntaxError("exceeded max depth")
            self._depth += 1
        elif name in _CLOSERS:
            self._depth -= 1
        kind = _EVENTS[name]
        if kind is TokenType.NUMBER:
            value = _number_text(value)
        return Token(kind, value)
