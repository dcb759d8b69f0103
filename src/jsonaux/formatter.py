"""Streaming comma-prefix formatter.

The formatter never builds a document. It pulls tokens from a token source
and writes each one as it arrives, keeping only a stack of open container
kinds to decide where newlines go. The layout is opinionated::

    { "a": 1
    , "b":
      [ 2
      , 3
      ]
    }

A composite gets a leading newline only when its parent is an object, so
the ``"b": `` line above ends in a space. Each nesting level costs two
Python frames (``value`` and the object or array body); token sources cap
the depth at ``DEFAULT_MAX_DEPTH`` so deep input fails with a syntax error
rather than ``RecursionError``.
"""

from __future__ import annotations

import io
import json
import logging
from typing import IO, Any

from .decoder import Decoder
from .errors import ImpossibleStateError
from .ijson_backend import IjsonDecoder
from .sink import DEFAULT_BUFFER_SIZE, BufferedSink
from .stack import Container, ContainerStack
from .tokens import DEFAULT_MAX_DEPTH, Token, TokenSource, TokenType

log = logging.getLogger(__name__)

DEFAULT_INDENT = "  "

BACKENDS = {
    "builtin": Decoder,
    "ijson": IjsonDecoder,
}

_CLOSERS = {
    TokenType.BEGIN_OBJECT: TokenType.END_OBJECT,
    TokenType.BEGIN_ARRAY: TokenType.END_ARRAY,
}


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------

class Formatter:
    """Recursive-descent emitter over a token source.

    One instance serves one pass: it owns its container stack and writes
    to *out*, which the caller flushes.
    """

    def __init__(
        self,
        tokens: TokenSource,
        out: BufferedSink,
        *,
        minify: bool = False,
        indent: str = DEFAULT_INDENT,
        ensure_ascii: bool = False,
    ) -> None:
        self.tokens = tokens
        self.out = out
        self.minify = minify
        self.indent_unit = indent
        self.ensure_ascii = ensure_ascii
        self.stack = ContainerStack()

    def value(self) -> None:
        """Read one value from the token source and write it."""
        tok = self.tokens.token()
        if tok.type.is_scalar:
            self._scalar(tok)
            return
        if tok.type is TokenType.BEGIN_OBJECT:
            self._object()
        elif tok.type is TokenType.BEGIN_ARRAY:
            self._array()
        else:
            raise ImpossibleStateError(f"impossible state: {tok.type.name} at value position")
        # the body leaves its closer unread
        end = self.tokens.token()
        if end.type is not _CLOSERS[tok.type]:
            raise ImpossibleStateError(
                f"impossible state: {end.type.name} closes {tok.type.name}"
            )

    def _object(self) -> None:
        with self.stack.entered(Container.OBJECT):
            if self.stack.next() is Container.OBJECT:
                self._indent()
            self.out.write("{")
            self._space()
            first = True
            while self.tokens.more():
                if not first:
                    self._comma()
                self._key()
                self._colon()
                self.value()
                self._indent()
                first = False
            self.out.write("}")

    def _array(self) -> None:
        with self.stack.entered(Container.ARRAY):
            if self.stack.next() is Container.OBJECT:
                self._indent()
            self.out.write("[")
            self._space()
            first = True
            while self.tokens.more():
                if not first:
                    self._comma()
                self.value()
                self._indent()
                first = False
            self.out.write("]")

    def _key(self) -> None:
        tok = self.tokens.token()
        if tok.type is not TokenType.STRING:
            raise ImpossibleStateError(f"impossible state: {tok.type.name} as object key")
        self._scalar(tok)

    def _scalar(self, tok: Token) -> None:
        if tok.type is TokenType.STRING:
            self.out.write(json.dumps(tok.value, ensure_ascii=self.ensure_ascii))
        elif tok.type is TokenType.NUMBER:
            self.out.write(tok.value)
        elif tok.type is TokenType.BOOLEAN:
            self.out.write("true" if tok.value else "false")
        else:
            self.out.write("null")

    # -- Whitespace -----------------------------------------------------

    def _comma(self) -> None:
        self.out.write(",")
        self._space()

    def _colon(self) -> None:
        self.out.write(":")
        self._space()

    def _space(self) -> None:
        if not self.minify:
            self.out.write(" ")

    def _indent(self) -> None:
        if not self.minify:
            self.out.write("\n" + self.indent_unit * (self.stack.depth() - 1))


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def format_stream(
    dst: IO[Any],
    src: IO[Any],
    *,
    minify: bool = False,
    indent: str = DEFAULT_INDENT,
    ensure_ascii: bool = False,
    backend: str = "builtin",
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    max_depth: int = DEFAULT_MAX_DEPTH,
    binary: bool | None = None,
) -> None:
    """Reformat the JSON value read from *src* and write it to *dst*.

    *src* and *dst* may be text or binary streams. The output ends with a
    single newline. On error nothing more is written; whatever the sink had
    already handed to *dst* stays there.

    *dst* receives ``str`` when it is an ``io.TextIOBase`` and UTF-8 bytes
    otherwise; pass *binary* to override that for duck-typed writers.
    Nesting deeper than *max_depth* raises ``JSONSyntaxError``; raising it
    far past the default runs into the interpreter recursion limit.
    """
    try:
        source_cls = BACKENDS[backend]
    except KeyError:
        raise ValueError(f"unknown backend {backend!r}") from None

    log.debug("formatting with %s backend (minify=%s)", backend, minify)
    out = BufferedSink(dst, buffer_size, binary=binary)
    fmt = Formatter(
        source_cls(src, max_depth=max_depth),
        out,
        minify=minify,
        indent=indent,
        ensure_ascii=ensure_ascii,
    )
    fmt.value()
    out.write("\n")
    out.flush()
    log.debug("formatting done")


def format_text(text: str, **options: Any) -> str:
    """Reformat a JSON document held in memory and return the result."""
    if options.get("backend") == "ijson":
        src: IO[Any] = io.BytesIO(text.encode("utf-8"))
    else:
        src = io.StringIO(text)
    dst = io.StringIO()
    format_stream(dst, src, **options)
    return dst.getvalue()
