from __future__ import annotations

import json

import pytest

from tapcanvas.errors import ProtocolError
from tapcanvas.protocol import (
    AddEvent,
    AddIntent,
    InitEvent,
    MarkerOut,
    RemoveEvent,
    RemoveIntent,
    encode,
    parse_event,
    parse_intent,
)


def test_parse_add_intent():
    msg = parse_intent('{"type":"add","x":100,"y":200,"color":"hsl(10,100%,70%)","created_at":1000}')
    assert msg == AddIntent(x=100, y=200, color="hsl(10,100%,70%)", created_at=1000)


def test_parse_remove_intent_with_null_id():
    assert parse_intent('{"type":"remove","id":null}') == RemoveIntent(id=None)
    assert parse_intent('{"type":"remove"}') == RemoveIntent(id=None)


def test_parse_intent_accepts_bytes():
    assert parse_intent(b'{"type":"remove","id":3}') == RemoveIntent(id=3)


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[1, 2]",
        '{"x": 1}',
        '{"type":"clear"}',
        '{"type":"add","x":1,"y":2,"color":"c"}',
        '{"type":"add","x":"left","y":2,"color":"c","created_at":1}',
        '{"type":"remove","id":"seven"}',
        '{"type":"add","x":"100","y":2,"color":"c","created_at":1}',
        '{"type":"add","x":true,"y":2,"color":"c","created_at":1}',
        '{"type":"add","x":100.0,"y":2,"color":"c","created_at":1}',
        '{"type":"add","x":1,"y":2,"color":"c","created_at":"1000"}',
        '{"type":"add","x":1,"y":2,"color":7,"created_at":1}',
        '{"type":"remove","id":"7"}',
        '{"type":"remove","id":true}',
    ],
)
def test_malformed_intents_raise_protocol_error(raw):
    with pytest.raises(ProtocolError):
        parse_intent(raw)


def test_encode_is_compact_json():
    out = encode(AddEvent(id=7, x=100, y=200, color="hsl(10,100%,70%)", created_at=1000))
    assert " " not in out.replace("hsl(10,100%,70%)", "")
    assert json.loads(out) == {
        "type": "add",
        "id": 7,
        "x": 100,
        "y": 200,
        "color": "hsl(10,100%,70%)",
        "created_at": 1000,
    }


def test_remove_intent_for_pending_marker_sends_null():
    assert json.loads(encode(RemoveIntent(id=None))) == {"type": "remove", "id": None}


def test_parse_server_events():
    init = parse_event('{"type":"init","elements":[{"id":1,"x":2,"y":3,"color":"c","created_at":4}]}')
    assert init == InitEvent(elements=[MarkerOut(id=1, x=2, y=3, color="c", created_at=4)])
    assert parse_event('{"type":"remove","id":1}') == RemoveEvent(id=1)
    assert parse_event('{"type":"add","id":1,"x":2,"y":3,"color":"c","created_at":4}').id == 1


def test_server_add_event_requires_id():
    with pytest.raises(ProtocolError):
        parse_event('{"type":"add","x":2,"y":3,"color":"c","created_at":4}')
