r"""Command-line tool to reformat JSON in comma-prefix style.

Usage::

    $ echo '{"a":1,"b":[2,3]}' | jsonaux-fmt
    { "a": 1
    , "b":
      [ 2
      , 3
      ]
    }

    $ echo '{ "a" : 1 }' | jsonaux-fmt -c
    {"a":1}

    $ echo '{"a": }' | jsonaux-fmt
    invalid character '}' looking for beginning of value: line 1 column 7 (char 6)

In the first example the ``"b":`` line ends in a space. Also runnable as
``python -m jsonaux.cli``.
"""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
from typing import IO, Any, ContextManager

from .errors import JSONAuxError
from .formatter import BACKENDS, format_stream
from .tokens import DEFAULT_MAX_DEPTH


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsonaux-fmt",
        description="Reformat a JSON document without loading it into memory.",
    )
    parser.add_argument("infile", nargs="?", default="-",
                        help="JSON file to reformat (default: stdin)")
    parser.add_argument("outfile", nargs="?", default="-",
                        help="where to write the result (default: stdout)")
    parser.add_argument("-c", "--compact", action="store_true",
                        help="write compact JSON with no inserted whitespace")
    parser.add_argument("--indent", type=int, default=2, metavar="N",
                        help="spaces per nesting level (default: 2)")
    parser.add_argument("--ensure-ascii", action="store_true",
                        help="escape non-ASCII characters in strings")
    parser.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH, metavar="N",
                        help=f"deepest nesting accepted (default: {DEFAULT_MAX_DEPTH})")
    parser.add_argument("--backend", choices=sorted(BACKENDS), default="builtin",
                        help="token source to read with (default: builtin); ijson"
                        " only accepts nonzero integer numbers")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log debug output to stderr")
    return parser


def _open(path: str, mode: str) -> ContextManager[IO[Any]]:
    """Open *path* in binary *mode*; "-" means stdin or stdout, left open."""
    if path == "-":
        std = sys.stdin if "r" in mode else sys.stdout
        return contextlib.nullcontext(std.buffer)
    return open(path, mode)


def main(argv: list[str] | None = None) -> None:
    """Entry point for ``jsonaux-fmt``."""
    options = _parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )
    if options.indent < 0:
        raise SystemExit("--indent must not be negative")
    if options.max_depth <= 0:
        raise SystemExit("--max-depth must be positive")

    try:
        with _open(options.infile, "rb") as infile, _open(options.outfile, "wb") as outfile:
            format_stream(
                outfile,
                infile,
                minify=options.compact,
                indent=" " * options.indent,
                ensure_ascii=options.ensure_ascii,
                backend=options.backend,
                max_depth=options.max_depth,
            )
            outfile.flush()
    except JSONAuxError as exc:
        raise SystemExit(str(exc))
    except BrokenPipeError as exc:
        raise SystemExit(exc.errno)
    except OSError as exc:
        raise SystemExit(f"{exc.filename or 'jsonaux-fmt'}: {exc.strerror}")


if __name__ == "__main__":
    main()
