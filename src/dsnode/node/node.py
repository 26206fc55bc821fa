"""Node: handshake gate plus one injected behavior over shared state."""

from __future__ import annotations

from dsnode.node.dispatch import NodeBehavior
from dsnode.node.handshake import Handshake
from dsnode.node.state import NodeState
from dsnode.protocol.envelope import Envelope, decode_envelope
from dsnode.protocol.payloads import HANDSHAKE_PAYLOADS, Payload, PayloadRegistry


def _with_handshake_payloads(registry: PayloadRegistry) -> PayloadRegistry:
    """Add handshake variants a behavior registry does not already hold.

    Args:
        registry: Behavior payload registry.

    Returns:
        Registry that can decode `init` and `init_ok`.

    Raises:
        ValueError: If the registry binds a handshake tag to another model.
    """
    missing: list[type[Payload]] = []
    for model in HANDSHAKE_PAYLOADS:
        registered = registry.resolve(model.type_name())
        if registered is None:
            missing.append(model)
        elif registered is not model:
            raise ValueError(
                f"Payload type {model.type_name()!r} is reserved for the handshake"
            )
    return registry.extend(*missing) if missing else registry


class Node:
    """Routes envelopes to the handshake until active, then to the behavior."""

    def __init__(self, behavior: NodeBehavior, state: NodeState | None = None) -> None:
        """Bind behavior and state.

        Args:
            behavior: Behavior that owns post-handshake payloads.
            state: Optional pre-built state; a fresh one is created otherwise.

        Raises:
            ValueError: If the behavior redefines a handshake payload type.
        """
        self.behavior = behavior
        self.state = state if state is not None else NodeState()
        self.handshake = Handshake()
        self._payloads = _with_handshake_payloads(behavior.payloads)

    @property
    def payloads(self) -> PayloadRegistry:
        """Payload variants this node can decode: behavior plus handshake."""
        return self._payloads

    def decode(self, line: str) -> Envelope:
        """Decode one wire line with this node's payload registry."""
        return decode_envelope(line, self.payloads)

    def process(self, envelope: Envelope) -> Envelope | None:
        """Handle one envelope.

        Args:
            envelope: Decoded incoming envelope.

        Returns:
            Reply envelope, or None when no reply is due.
        """
        handshake_reply = self.handshake.admit(envelope, self.state)
        if handshake_reply is not None:
            return handshake_reply
        return self.behavior.handle(envelope, self.state)
