"""Built-in streaming token source.

``Decoder`` reads a JSON text in chunks and hands out one token at a time.
Commas and colons are checked and consumed internally; callers see only
brackets and scalars. Number tokens carry their literal text so nothing is
lost to float conversion.
"""

from __future__ import annotations

import codecs
import re
from enum import Enum, auto
from typing import IO, Any

from .errors import JSONSyntaxError
from .tokens import DEFAULT_MAX_DEPTH, Token, TokenType

DEFAULT_BUFFER_SIZE = 64 * 1024

_WS_RE = re.compile(r"[ \t\n\r]*")
_LEXEME_RE = re.compile(r"[A-Za-z0-9.+\-]*")
_NUMBER_RE = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_STRING_RUN_RE = re.compile(r'[^"\\\x00-\x1f]*')
_HEX4_RE = re.compile(r"[0-9A-Fa-f]{4}")

_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_LITERALS: dict[str, Token] = {
    "true": Token(TokenType.BOOLEAN, True),
    "false": Token(TokenType.BOOLEAN, False),
    "null": Token(TokenType.NULL, None),
}


# ---------------------------------------------------------------------------
# Input buffer
# ---------------------------------------------------------------------------

class _Input:
    """Sliding window over the input stream.

    ``buf[pos:]`` is unread text. Consumed text is dropped on each refill;
    ``offset`` is the absolute position of ``buf[0]``.
    """

    def __init__(self, stream: IO[Any], buffer_size: int) -> None:
        self._stream = stream
        self._buffer_size = buffer_size
        self._utf8: codecs.IncrementalDecoder | None = None
        self._eof = False
        self._lineno = 1       # line number at buf[0]
        self._line_start = 0   # absolute offset where that line starts
        self.buf = ""
        self.pos = 0
        self.offset = 0

    def fill(self) -> bool:
        """Append the next chunk; return False once the input is exhausted."""
        if self._eof:
            return False
        chunk = self._stream.read(self._buffer_size)
        if isinstance(chunk, bytes):
            if self._utf8 is None:
                self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
            text = self._utf8.decode(chunk, final=not chunk)
        else:
            text = chunk
        if not chunk:
            self._eof = True
            if not text:
                return False
        self._discard()
        self.buf += text
        return True

    def _discard(self) -> None:
        consumed = self.buf[:self.pos]
        nl = consumed.rfind("\n")
        if nl >= 0:
            self._lineno += consumed.count("\n")
            self._line_start = self.offset + nl + 1
        self.offset += self.pos
        self.buf = self.buf[self.pos:]
        self.pos = 0

    def ensure(self, n: int) -> bool:
        """Make at least *n* unread characters available if the input has them."""
        while len(self.buf) - self.pos < n:
            if not self.fill():
                return False
        return True

    def peek(self) -> str:
        """Skip whitespace and return the next character, or "" at end of input."""
        while True:
            self.pos = _WS_RE.match(self.buf, self.pos).end()
            if self.pos < len(self.buf):
                return self.buf[self.pos]
            if not self.fill():
                return ""

    def where(self) -> tuple[int, int, int]:
        """Return (offset, line, column) of the current position."""
        head = self.buf[:self.pos]
        nl = head.rfind("\n")
        if nl >= 0:
            lineno = self._lineno + head.count("\n")
            line_start = self.offset + nl + 1
        else:
            lineno = self._lineno
            line_start = self._line_start
        offset = self.offset + self.pos
        return offset, lineno, offset - line_start + 1


# ---------------------------------------------------------------------------
# Parse state
# ---------------------------------------------------------------------------

class _State(Enum):
    TOP_VALUE = auto()
    ARRAY_START = auto()
    ARRAY_VALUE = auto()
    ARRAY_COMMA = auto()
    OBJECT_START = auto()
    OBJECT_KEY = auto()
    OBJECT_COLON = auto()
    OBJECT_VALUE = auto()
    OBJECT_COMMA = auto()


_VALUE_ALLOWED = frozenset(
    (_State.TOP_VALUE, _State.ARRAY_START, _State.ARRAY_VALUE, _State.OBJECT_VALUE)
)

# what the decoder was waiting for, used in error messages
_EXPECTING = {
    _State.TOP_VALUE: "looking for beginning of value",
    _State.ARRAY_START: "looking for beginning of value",
    _State.ARRAY_VALUE: "looking for beginning of value",
    _State.ARRAY_COMMA: "after array element",
    _State.OBJECT_START: "looking for beginning of object key string",
    _State.OBJECT_KEY: "looking for beginning of object key string",
    _State.OBJECT_COLON: "after object key",
    _State.OBJECT_VALUE: "looking for beginning of value",
    _State.OBJECT_COMMA: "after object key:value pair",
}


# ---------------------------------------------------------------------------
# Decoder
# ---------------------------------------------------------------------------

class Decoder:
    """Token source over a readable text or binary stream.

    Usage::

        dec = Decoder(io.StringIO('{"a": [1, 2]}'))
        dec.token()   # Token(BEGIN_OBJECT)
        dec.more()    # True
        dec.token()   # Token(STRING, "a")

    Only the first JSON value is read; whatever follows it stays unread.
    Opening more than *max_depth* nested containers is a syntax error.
    """

    def __init__(
        self,
        stream: IO[Any],
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        if buffer_size <= 0:
            raise ValueError(f"buffer size must be positive, got {buffer_size}")
        if max_depth <= 0:
            raise ValueError(f"max depth must be positive, got {max_depth}")
        self._max_depth = max_depth
        self._in = _Input(stream, buffer_size)
        self._state = _State.TOP_VALUE
        self._parents: list[_State] = []

    def more(self) -> bool:
        """Is there another element in the current array or object?"""
        c = self._in.peek()
        return c != "" and c not in "]}"

    def token(self) -> Token:
        src = self._in
        while True:
            c = src.peek()
            if c == "":
                raise self._error("unexpected end of input")
            offset = src.offset + src.pos

            if c == "[":
                self._check_value(c)
                self._enter()
                src.pos += 1
                self._parents.append(self._state)
                self._state = _State.ARRAY_START
                return Token(TokenType.BEGIN_ARRAY, offset=offset)

            if c == "]":
                if self._state not in (_State.ARRAY_START, _State.ARRAY_COMMA):
                    raise self._unexpected(c)
                src.pos += 1
                self._state = self._parents.pop()
                self._value_end()
                return Token(TokenType.END_ARRAY, offset=offset)

            if c == "{":
                self._check_value(c)
                self._enter()
                src.pos += 1
                self._parents.append(self._state)
                self._state = _State.OBJECT_START
                return Token(TokenType.BEGIN_OBJECT, offset=offset)

            if c == "}":
                if self._state not in (_State.OBJECT_START, _State.OBJECT_COMMA):
                    raise self._unexpected(c)
                src.pos += 1
                self._state = self._parents.pop()
                self._value_end()
                return Token(TokenType.END_OBJECT, offset=offset)

            if c == ":":
                if self._state is not _State.OBJECT_COLON:
                    raise self._unexpected(c)
                src.pos += 1
                self._state = _State.OBJECT_VALUE
                continue

            if c == ",":
                if self._state is _State.ARRAY_COMMA:
                    self._state = _State.ARRAY_VALUE
                elif self._state is _State.OBJECT_COMMA:
                    self._state = _State.OBJECT_KEY
                else:
                    raise self._unexpected(c)
                src.pos += 1
                continue

            if c == '"' and self._state in (_State.OBJECT_START, _State.OBJECT_KEY):
                key = self._string()
                self._state = _State.OBJECT_COLON
                return Token(TokenType.STRING, key, offset)

            self._check_value(c)
            if c == '"':
                tok = Token(TokenType.STRING, self._string(), offset)
            elif c == "-" or "0" <= c <= "9":
                tok = Token(TokenType.NUMBER, self._number(), offset)
            elif c in "tfn":
                tok = self._literal(offset)
            else:
                raise self._unexpected(c)
            self._value_end()
            return tok

    # -- State transitions ----------------------------------------------

    def _check_value(self, c: str) -> None:
        if self._state not in _VALUE_ALLOWED:
            raise self._unexpected(c)

    def _enter(self) -> None:
        if len(self._parents) >= self._max_depth:
            raise self._error("exceeded max depth")

    def _value_end(self) -> None:
        if self._state in (_State.ARRAY_START, _State.ARRAY_VALUE):
            self._state = _State.ARRAY_COMMA
        elif self._state is _State.OBJECT_VALUE:
            self._state = _State.OBJECT_COMMA

    # -- Scalars --------------------------------------------------------

    def _lexeme(self) -> str:
        """Consume a run of number/literal characters."""
        src = self._in
        while True:
            end = _LEXEME_RE.match(src.buf, src.pos).end()
            if end < len(src.buf) or not src.fill():
                break
        return src.buf[src.pos:end]

    def _number(self) -> str:
        text = self._lexeme()
        if not _NUMBER_RE.fullmatch(text):
            raise self._error(f"invalid number literal {text!r}")
        self._in.pos += len(text)
        return text

    def _literal(self, offset: int) -> Token:
        text = self._lexeme()
        lit = _LITERALS.get(text)
        if lit is None:
            raise self._error(f"invalid literal {text!r}")
        self._in.pos += len(text)
        return Token(lit.type, lit.value, offset)

    def _string(self) -> str:
        src = self._in
        src.pos += 1  # opening quote
        parts: list[str] = []
        while True:
            end = _STRING_RUN_RE.match(src.buf, src.pos).end()
            parts.append(src.buf[src.pos:end])
            src.pos = end
            if end == len(src.buf):
                if not src.fill():
                    raise self._error("unexpected end of input in string literal")
                continue
            c = src.buf[end]
            if c == '"':
                src.pos += 1
                return "".join(parts)
            if c == "\\":
                parts.append(self._escape())
                continue
            raise self._error(f"invalid character {c!r} in string literal")

    def _escape(self) -> str:
        src = self._in
        if not src.ensure(2):
            raise self._error("unexpected end of input in string escape")
        esc = src.buf[src.pos + 1]
        if esc in _ESCAPES:
            src.pos += 2
            return _ESCAPES[esc]
        if esc != "u":
            raise self._error(f"invalid escape character {esc!r} in string literal")

        code = self._hex4()
        if 0xD800 <= code <= 0xDBFF:
            if src.ensure(6) and src.buf.startswith("\\u", src.pos):
                mark = src.pos
                low = self._hex4()
                if 0xDC00 <= low <= 0xDFFF:
                    return chr(0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00))
                src.pos = mark
            return "\ufffd"
        if 0xDC00 <= code <= 0xDFFF:
            return "\ufffd"
        return chr(code)

    def _hex4(self) -> int:
        """Read a ``\\uXXXX`` escape at the current position."""
        src = self._in
        src.ensure(6)
        digits = src.buf[src.pos + 2:src.pos + 6]
        if not _HEX4_RE.fullmatch(digits):
            if len(digits) < 4:
                raise self._error("unexpected end of input in string escape")
            raise self._error(f"invalid unicode escape {digits!r} in string literal")
        src.pos += 6
        return int(digits, 16)

    # -- Errors ---------------------------------------------------------

    def _unexpected(self, c: str) -> JSONSyntaxError:
        return self._error(f"invalid character {c!r} {_EXPECTING[self._state]}")

    def _error(self, msg: str) -> JSONSyntaxError:
        offset, lineno, colno = self._in.where()
        return JSONSyntaxError(msg, offset, lineno, colno)
