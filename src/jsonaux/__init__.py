"""jsonaux: streaming, opinionated JSON reformatting."""

from .decoder import Decoder
from .errors import (
    ImpossibleStateError,
    InexactNumberError,
    JSONAuxError,
    JSONSyntaxError,
)
from .formatter import Formatter, format_stream, format_text
from .ijson_backend import IjsonDecoder
from .sink import BufferedSink
from .stack import Container, ContainerStack
from .tokens import DEFAULT_MAX_DEPTH, Token, TokenSource, TokenType

__all__ = [
    "format_stream",
    "format_text",
    "Formatter",
    "Decoder",
    "IjsonDecoder",
    "TokenSource",
    "Token",
    "TokenType",
    "BufferedSink",
    "Container",
    "ContainerStack",
    "JSONAuxError",
    "JSONSyntaxError",
    "ImpossibleStateError",
    "InexactNumberError",
    "DEFAULT_MAX_DEPTH",
]
