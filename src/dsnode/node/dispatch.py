"""Dispatch contract implemented by pluggable node behaviors."""

from __future__ import annotations

from typing import Protocol

from dsnode.node.state import NodeState
from dsnode.protocol.envelope import Envelope
from dsnode.protocol.payloads import Payload, PayloadRegistry


class NodeBehavior(Protocol):
    """Protocol for behavior-specific envelope handling after the handshake."""

    name: str
    payloads: PayloadRegistry

    def handle(self, envelope: Envelope, state: NodeState) -> Envelope | None:
        """Consume one envelope and produce at most one reply.

        Replies must be built with `reply_to` so every emitted envelope takes
        the next message id. `payloads` lists the behavior's own variants; the
        node adds `init` and `init_ok` when they are absent.

        Args:
            envelope: Decoded incoming envelope.
            state: Mutable node state for this process.

        Returns:
            Reply envelope, or None when no reply is due.
        """


def reply_to(envelope: Envelope, payload: Payload, state: NodeState) -> Envelope:
    """Build a reply carrying the next message id, advancing the counter.

    Args:
        envelope: Envelope being answered.
        payload: Reply payload variant.
        state: Node state owning the message-id counter.

    Returns:
        Reply envelope addressed back to the sender.
    """
    return envelope.reply(payload, message_id=state.allocate_message_id())
