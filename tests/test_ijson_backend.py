"""Tests for the ijson-backed token source."""

import io

import pytest

from jsonaux import InexactNumberError, JSONSyntaxError, format_stream, format_text
from jsonaux.ijson_backend import IjsonDecoder
from jsonaux.tokens import TokenType as T


def _decoder(text):
    return IjsonDecoder(io.BytesIO(text.encode("utf-8")))


# ---------------------------------------------------------------------------
# Token source protocol
# ---------------------------------------------------------------------------

def test_tokens_and_more():
    dec = _decoder('{"a": [true, null, "s"]}')
    assert dec.token().type is T.BEGIN_OBJECT
    assert dec.more()
    key = dec.token()
    assert (key.type, key.value) == (T.STRING, "a")
    assert dec.token().type is T.BEGIN_ARRAY
    assert dec.more()
    assert dec.token().value is True
    assert dec.token().type is T.NULL
    assert dec.token().value == "s"
    assert not dec.more()
    assert dec.token().type is T.END_ARRAY
    assert not dec.more()
    assert dec.token().type is T.END_OBJECT


def test_tokens_have_no_offsets():
    assert _decoder("[1]").token().offset is None


def test_integers_keep_their_text():
    dec = _decoder("[7, -42, 123456789012345678901234567890]")
    dec.token()
    assert dec.token().value == "7"
    assert dec.token().value == "-42"
    assert dec.token().value == "123456789012345678901234567890"


def test_integers_pass_through_formatting():
    doc = "[1, -2, 98765432109876543210]"
    assert format_text(doc, minify=True, backend="ijson") == "[1,-2,98765432109876543210]\n"


@pytest.mark.parametrize("text", ["1e5", "1.0E5", "1.50", "-3.2E-7", "-0", "0", "0.0"])
def test_numbers_without_exact_text_are_refused(text):
    with pytest.raises(InexactNumberError, match="builtin backend"):
        format_text(f"[{text}]", minify=True, backend="ijson")


def test_refused_number_stops_the_pass():
    dst = io.StringIO()
    with pytest.raises(InexactNumberError):
        format_stream(dst, io.BytesIO(b'{"a": 1, "b": 1e5}'), backend="ijson")
    assert dst.getvalue() == ""


# ---------------------------------------------------------------------------
# Formatting through ijson
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("doc", [
    '{"a":1,"b":[2,3]}',
    "[]",
    '"x"',
    '[{"a": {"b": [1, 25]}}, [[]], {}]',
    '{"s": "caf\xe9 \\"q\\""}',
])
def test_same_layout_as_builtin(doc):
    for minify in (False, True):
        assert format_text(doc, minify=minify, backend="ijson") == format_text(doc, minify=minify)


def test_malformed_input():
    with pytest.raises(JSONSyntaxError):
        format_text('{"a": }', backend="ijson")


def test_empty_input():
    with pytest.raises(JSONSyntaxError):
        format_text("", backend="ijson")


def test_truncated_input():
    with pytest.raises(JSONSyntaxError):
        format_text("[1, 2", backend="ijson")


def test_max_depth():
    dec = IjsonDecoder(io.BytesIO(b"[[[1]]]"), max_depth=2)
    assert dec.token().type is T.BEGIN_ARRAY
    assert dec.token().type is T.BEGIN_ARRAY
    with pytest.raises(JSONSyntaxError, match="exceeded max depth"):
        dec.token()


def test_rejects_bad_max_depth():
    with pytest.raises(ValueError):
        IjsonDecoder(io.BytesIO(b"1"), max_depth=0)
