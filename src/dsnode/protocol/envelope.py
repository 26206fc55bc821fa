"""Envelope and Body models plus the newline-delimited JSON line codec."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, ValidationError

from dsnode.errors import MalformedEnvelope
from dsnode.protocol.payloads import CORE_PAYLOADS, Payload, PayloadRegistry


class Body(BaseModel):
    """Message metadata plus one payload variant, flattened on the wire."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message_id: int | None = Field(default=None, alias="msg_id", ge=0, strict=True)
    in_reply_to: int | None = Field(default=None, ge=0, strict=True)
    payload: SerializeAsAny[Payload]


class Envelope(BaseModel):
    """Addressed message unit exchanged between nodes and clients."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = Field(alias="src")
    destination: str = Field(alias="dest")
    body: Body

    @property
    def payload_type(self) -> str:
        """Wire tag of the carried payload."""
        return self.body.payload.type_name()

    def reply(self, payload: Payload, *, message_id: int | None) -> Envelope:
        """Build the envelope answering this one.

        Args:
            payload: Reply payload variant.
            message_id: Id assigned to the reply by the sending node.

        Returns:
            Envelope with swapped addresses and `in_reply_to` set to this
            envelope's message id.
        """
        return Envelope(
            source=self.destination,
            destination=self.source,
            body=Body(
                message_id=message_id,
                in_reply_to=self.body.message_id,
                payload=payload,
            ),
        )


class _WireEnvelope(BaseModel):
    """Outer wire frame; the body stays raw until its `type` is resolved."""

    model_config = ConfigDict(extra="ignore")

    src: str
    dest: str
    body: dict[str, Any]


def envelope_to_wire(envelope: Envelope) -> dict[str, Any]:
    """Flatten an envelope into its wire mapping.

    Absent ids are omitted rather than written as null.

    Args:
        envelope: Envelope to flatten.

    Returns:
        JSON-ready mapping with `src`, `dest` and flat `body` keys.
    """
    fields = envelope.body.payload.model_dump(mode="json")
    body: dict[str, Any] = {"type": fields.pop("type")}
    if envelope.body.in_reply_to is not None:
        body["in_reply_to"] = envelope.body.in_reply_to
    if envelope.body.message_id is not None:
        body["msg_id"] = envelope.body.message_id
    body.update(fields)
    return {"src": envelope.source, "dest": envelope.destination, "body": body}


def encode_envelope(envelope: Envelope) -> str:
    """Serialize an envelope as one line of compact JSON (no terminator)."""
    return json.dumps(
        envelope_to_wire(envelope), separators=(",", ":"), ensure_ascii=False
    )


def decode_envelope(
    line: str, registry: PayloadRegistry = CORE_PAYLOADS
) -> Envelope:
    """Parse one wire line into an envelope.

    Args:
        line: Raw input line, with or without trailing newline.
        registry: Payload variants the reader recognizes.

    Returns:
        Decoded envelope.

    Raises:
        MalformedEnvelope: If the line is not JSON, lacks required fields,
            or names an unknown payload type.
    """
    raw = line.rstrip("\r\n")
    try:
        frame = _WireEnvelope.model_validate_json(raw)
    except ValidationError as exc:
        raise MalformedEnvelope(
            f"Invalid envelope: {exc}", data={"line": raw}
        ) from exc

    fields = dict(frame.body)
    tag = fields.pop("type", None)
    if not isinstance(tag, str):
        raise MalformedEnvelope(
            "Envelope body has no string `type` field", data={"line": raw}
        )
    model = registry.resolve(tag)
    if model is None:
        raise MalformedEnvelope(
            f"Unknown payload type {tag!r}", data={"line": raw, "type": tag}
        )
    message_id = fields.pop("msg_id", None)
    in_reply_to = fields.pop("in_reply_to", None)
    try:
        payload = model.model_validate(fields)
        body = Body(message_id=message_id, in_reply_to=in_reply_to, payload=payload)
    except ValidationError as exc:
        raise MalformedEnvelope(
            f"Invalid {tag!r} body: {exc}", data={"line": raw, "type": tag}
        ) from exc
    return Envelope(source=frame.src, destination=frame.dest, body=body)
