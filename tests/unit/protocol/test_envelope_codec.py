"""Unit tests for envelope models and the JSON line codec."""

from __future__ import annotations

import json
from typing import Literal

import pytest
from pydantic import ValidationError

from dsnode.errors import MalformedEnvelope, NodeErrorCode
from dsnode.protocol import (
    CORE_PAYLOADS,
    Body,
    Echo,
    EchoOk,
    Envelope,
    Init,
    InitOk,
    Payload,
    decode_envelope,
    encode_envelope,
)

_INIT_LINE = (
    '{"src":"c1","dest":"n1","body":{"type":"init","msg_id":1,'
    '"node_id":"n1","node_ids":["n1"]}}'
)


def _envelope(payload: Payload, **body: int | None) -> Envelope:
    return Envelope(source="c1", destination="n1", body=Body(payload=payload, **body))


@pytest.mark.unit
def test_decode_init_envelope() -> None:
    """Init line should decode addresses, ids and membership."""
    envelope = decode_envelope(_INIT_LINE)

    assert envelope.source == "c1"
    assert envelope.destination == "n1"
    assert envelope.body.message_id == 1
    assert envelope.body.in_reply_to is None
    assert envelope.body.payload == Init(node_id="n1", node_ids=("n1",))
    assert envelope.payload_type == "init"


@pytest.mark.unit
def test_encode_uses_flat_body_in_wire_order() -> None:
    """Encoded body should place type, in_reply_to, msg_id, then fields."""
    envelope = Envelope(
        source="n1",
        destination="c1",
        body=Body(message_id=1, in_reply_to=2, payload=EchoOk(echo="hi")),
    )

    line = encode_envelope(envelope)

    assert line == (
        '{"src":"n1","dest":"c1","body":{"type":"echo_ok","in_reply_to":2,'
        '"msg_id":1,"echo":"hi"}}'
    )
    assert "\n" not in line


@pytest.mark.unit
def test_encode_omits_absent_ids() -> None:
    """Absent message ids are omitted rather than written as null."""
    line = encode_envelope(_envelope(InitOk()))

    assert json.loads(line)["body"] == {"type": "init_ok"}


@pytest.mark.unit
@pytest.mark.parametrize(
    ("payload", "ids"),
    [
        (Echo(echo="hello"), {"message_id": 3}),
        (EchoOk(echo="héllo"), {"message_id": 4, "in_reply_to": 3}),
        (Init(node_id="n2", node_ids=("n1", "n2", "n3")), {"message_id": 0}),
        (InitOk(), {"message_id": 0, "in_reply_to": 0}),
    ],
)
def test_roundtrip_every_core_variant(payload: Payload, ids: dict[str, int]) -> None:
    """Encode then decode should reproduce an equal envelope."""
    source = _envelope(payload, **ids)

    restored = decode_envelope(encode_envelope(source))

    assert restored == source


@pytest.mark.unit
def test_decode_accepts_trailing_newline_and_null_ids() -> None:
    """Terminator is stripped and null ids decode as absent."""
    line = '{"src":"c1","dest":"n1","body":{"type":"echo","msg_id":null,"echo":"x"}}\n'

    envelope = decode_envelope(line)

    assert envelope.body.message_id is None
    assert envelope.body.payload == Echo(echo="x")


@pytest.mark.unit
def test_decode_ignores_unknown_keys() -> None:
    """Unrecognized keys at any level do not fail decoding."""
    line = (
        '{"id":7,"src":"c1","dest":"n1",'
        '"body":{"type":"echo","msg_id":2,"echo":"x","extra":true}}'
    )

    envelope = decode_envelope(line)

    assert envelope.body.payload == Echo(echo="x")


@pytest.mark.unit
@pytest.mark.parametrize(
    "line",
    [
        "not json",
        "[]",
        '{"dest":"n1","body":{"type":"echo","echo":"x"}}',
        '{"src":"c1","dest":"n1"}',
        '{"src":"c1","dest":"n1","body":"echo"}',
        '{"src":"c1","dest":"n1","body":{"msg_id":1}}',
        '{"src":"c1","dest":"n1","body":{"type":7}}',
        '{"src":"c1","dest":"n1","body":{"type":"echo"}}',
        '{"src":"c1","dest":"n1","body":{"type":"echo","echo":"x","msg_id":-1}}',
        '{"src":"c1","dest":"n1","body":{"type":"init","node_id":"n1"}}',
        '{"src":"c1","dest":"n1","body":{"type":"echo","echo":"x","msg_id":true}}',
        '{"src":"c1","dest":"n1","body":{"type":"echo","echo":"x","msg_id":"5"}}',
        '{"src":"c1","dest":"n1","body":{"type":"echo","echo":"x","msg_id":1.0}}',
        '{"src":"c1","dest":"n1","body":{"type":"init_ok","in_reply_to":"1"}}',
        '{"src":"c1","dest":"n1","body":{"type":"init_ok","in_reply_to":false}}',
    ],
)
def test_decode_rejects_malformed_lines(line: str) -> None:
    """Structurally invalid input should raise MalformedEnvelope with the raw line."""
    with pytest.raises(MalformedEnvelope) as excinfo:
        decode_envelope(line)

    assert excinfo.value.code == NodeErrorCode.MALFORMED_ENVELOPE
    assert excinfo.value.data["line"] == line


@pytest.mark.unit
def test_decode_rejects_unknown_payload_type() -> None:
    """Unknown discriminants are malformed and name the offending type."""
    line = '{"src":"c1","dest":"n1","body":{"type":"broadcast","message":1}}'

    with pytest.raises(MalformedEnvelope, match="broadcast") as excinfo:
        decode_envelope(line)

    assert excinfo.value.data["type"] == "broadcast"


@pytest.mark.unit
def test_decode_with_extended_registry() -> None:
    """Behaviors add variants by extending the registry, not the core."""

    class Broadcast(Payload):
        type: Literal["broadcast"] = "broadcast"
        message: int

    registry = CORE_PAYLOADS.extend(Broadcast)
    line = '{"src":"c1","dest":"n1","body":{"type":"broadcast","msg_id":5,"message":9}}'

    envelope = decode_envelope(line, registry)

    assert envelope.body.payload == Broadcast(message=9)
    assert "broadcast" not in CORE_PAYLOADS
    assert json.loads(encode_envelope(envelope))["body"] == {
        "type": "broadcast",
        "msg_id": 5,
        "message": 9,
    }


@pytest.mark.unit
def test_envelope_is_immutable() -> None:
    """Envelopes are frozen once constructed."""
    envelope = _envelope(Echo(echo="x"))

    with pytest.raises(ValidationError):
        envelope.source = "other"  # type: ignore[misc]


@pytest.mark.unit
def test_reply_swaps_addresses_and_correlates() -> None:
    """Reply should swap src/dest and point in_reply_to at the request."""
    request = _envelope(Echo(echo="x"), message_id=11)

    reply = request.reply(EchoOk(echo="x"), message_id=0)

    assert reply.source == "n1"
    assert reply.destination == "c1"
    assert reply.body.in_reply_to == 11
    assert reply.body.message_id == 0
