# tests/test_stream.py
import logging

import pytest

from textgen.services.interactions import InteractionEmitter
from textgen.services.stream import (
    StreamAccumulator,
    decode_chunk,
    extract_router_token,
    parse_sse_line,
)


@pytest.mark.parametrize(
    "line, expected",
    [
        ("data: {\"a\":1}", "{\"a\":1}"),
        ("  data:{\"a\":1}  ", "{\"a\":1}"),
        ("data: [DONE]", "[DONE]"),
        ("data:", ""),
        (": keep-alive", None),
        ("event: message", None),
        ("", None),
    ],
)
def test_parse_sse_line(line, expected):
    assert parse_sse_line(line) == expected


def test_extract_router_token_lenient_shapes():
    assert extract_router_token({"choices": [{"delta": {"content": "x"}}]}) == "x"
    assert extract_router_token({"choices": [{"delta": {}}]}) == ""
    assert extract_router_token({"choices": [{"delta": {"content": None}}]}) == ""
    assert extract_router_token({"choices": []}) == ""
    assert extract_router_token({}) == ""


def test_decode_chunk_logs_and_skips_bad_payloads(caplog):
    caplog.set_level(logging.WARNING)
    assert decode_chunk("{\"ok\": true}") == {"ok": True}
    assert decode_chunk("{broken") is None
    assert decode_chunk("[1, 2]") is None
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 2


def test_accumulator_keeps_order_and_last_chunk():
    acc = StreamAccumulator()
    first = acc.add("a")
    empty = acc.add("")
    last = acc.add("bc")
    acc.observe({"n": 1})
    acc.observe({"n": 2})
    assert (first.text, first.accumulated) == ("a", "a")
    assert (empty.text, empty.accumulated) == ("", "a")
    assert last.accumulated == "abc"
    assert acc.text == "abc"
    assert acc.last_chunk == {"n": 2}


def test_emitter_forwards_accumulated_token(recorder, caplog_debug):
    emitter = InteractionEmitter("m", recorder.on_interaction, recorder.on_token)
    acc = StreamAccumulator()
    emitter.token(acc.add("ab"))
    emitter.token(acc.add("c"))
    assert recorder.tokens == ["ab", "c"]
    assert [e.data for e in recorder.events] == ["ab", "c"]
    assert "1 chars, 3 accumulated" in caplog_debug.text
