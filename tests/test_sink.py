"""Tests for BufferedSink."""

import io

import pytest

from jsonaux.sink import BufferedSink


def test_holds_writes_until_flush():
    dst = io.StringIO()
    sink = BufferedSink(dst, size=100)
    sink.write("{")
    sink.write(" ")
    assert dst.getvalue() == ""
    assert sink.pending == 2
    sink.flush()
    assert dst.getvalue() == "{ "
    assert sink.pending == 0


def test_flushes_when_full():
    dst = io.StringIO()
    sink = BufferedSink(dst, size=4)
    sink.write("ab")
    assert dst.getvalue() == ""
    sink.write("cd")
    assert dst.getvalue() == "abcd"
    sink.write("e")
    assert dst.getvalue() == "abcd"


def test_binary_stream_gets_utf8():
    dst = io.BytesIO()
    sink = BufferedSink(dst)
    sink.write('"café"')
    sink.flush()
    assert dst.getvalue() == '"café"'.encode("utf-8")


def test_empty_flush_writes_nothing():
    class Recorder:
        def __init__(self):
            self.calls = []

        def write(self, data):
            self.calls.append(data)

    rec = Recorder()
    BufferedSink(rec).flush()
    assert rec.calls == []


def test_rejects_bad_size():
    with pytest.raises(ValueError):
        BufferedSink(io.StringIO(), size=0)


def test_duck_typed_writer_gets_bytes_by_default():
    rec = []

    class Writer:
        def write(self, data):
            rec.append(data)

    sink = BufferedSink(Writer())
    sink.write("x")
    sink.flush()
    assert rec == [b"x"]


def test_binary_flag_overrides_stream_type():
    rec = []

    class Writer:
        def write(self, data):
            rec.append(data)

    sink = BufferedSink(Writer(), binary=False)
    sink.write("caf\xe9")
    sink.flush()
    assert rec == ["caf\xe9"]

    sink = BufferedSink(io.StringIO(), binary=True)
    sink.write("x")
    with pytest.raises(TypeError):
        sink.flush()
