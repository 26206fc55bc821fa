"""Wire protocol: payload variants, envelopes and the line codec."""

from dsnode.protocol.envelope import (
    Body,
    Envelope,
    decode_envelope,
    encode_envelope,
    envelope_to_wire,
)
from dsnode.protocol.payloads import (
    CORE_PAYLOADS,
    HANDSHAKE_PAYLOADS,
    Echo,
    EchoOk,
    Init,
    InitOk,
    Payload,
    PayloadRegistry,
)

__all__ = [
    "CORE_PAYLOADS",
    "HANDSHAKE_PAYLOADS",
    "Body",
    "Echo",
    "EchoOk",
    "Envelope",
    "Init",
    "InitOk",
    "Payload",
    "PayloadRegistry",
    "decode_envelope",
    "encode_envelope",
    "envelope_to_wire",
]
