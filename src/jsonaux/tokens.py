"""Lexical tokens shared by every token source."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol, Union


class TokenType(Enum):
    BEGIN_OBJECT = auto()
    END_OBJECT = auto()
    BEGIN_ARRAY = auto()
    END_ARRAY = auto()
    STRING = auto()
    NUMBER = auto()    # value is the literal text
    BOOLEAN = auto()
    NULL = auto()

    @property
    def is_scalar(self) -> bool:
        return self in _SCALARS


_SCALARS = frozenset(
    (TokenType.STRING, TokenType.NUMBER, TokenType.BOOLEAN, TokenType.NULL)
)


TokenValue = Union[str, bool, None]

# deepest container nesting a token source accepts
DEFAULT_MAX_DEPTH = 256


@dataclass(frozen=True, slots=True)
class Token:
    type: TokenType
    value: TokenValue = None
    offset: int | None = None  # None when the source has no positions


class TokenSource(Protocol):
    """Cursor over a JSON token stream.

    ``token()`` returns the next token or raises ``JSONSyntaxError``.
    ``more()`` reports whether another element remains in the array or
    object currently being iterated.
    """

    def token(self) -> Token: ...

    def more(self) -> bool: ...
