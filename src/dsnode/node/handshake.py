"""Init handshake gate run before any behavior dispatch."""

from __future__ import annotations

import logging
from enum import StrEnum

from dsnode.errors import AlreadyInitialized, HandshakeNotComplete
from dsnode.node.dispatch import reply_to
from dsnode.node.state import NodeState
from dsnode.protocol.envelope import Envelope
from dsnode.protocol.payloads import Init, InitOk

_LOGGER = logging.getLogger(__name__)


class HandshakeStatus(StrEnum):
    """Handshake lifecycle states."""

    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"


class Handshake:
    """Two-state gate: exactly one `init` must precede all other payloads."""

    def __init__(self) -> None:
        self.status = HandshakeStatus.UNINITIALIZED

    @property
    def active(self) -> bool:
        return self.status is HandshakeStatus.ACTIVE

    def admit(self, envelope: Envelope, state: NodeState) -> Envelope | None:
        """Run the handshake step for one envelope.

        Args:
            envelope: Incoming envelope.
            state: Node state to populate on `init`.

        Returns:
            `init_ok` reply while uninitialized; None once active, meaning the
            envelope belongs to the behavior.

        Raises:
            HandshakeNotComplete: If a non-init payload arrives first.
            AlreadyInitialized: If `init` arrives after the handshake.
        """
        payload = envelope.body.payload
        if self.active:
            if isinstance(payload, Init):
                raise AlreadyInitialized(
                    f"Node {state.node_id!r} received a second init from "
                    f"{envelope.source!r}",
                    data={"node_id": state.node_id, "source": envelope.source},
                )
            return None

        if not isinstance(payload, Init):
            raise HandshakeNotComplete(
                f"Received {envelope.payload_type!r} before init",
                data={"type": envelope.payload_type, "source": envelope.source},
            )
        state.node_id = payload.node_id
        state.peer_ids = list(payload.node_ids)
        reply = reply_to(envelope, InitOk(), state)
        self.status = HandshakeStatus.ACTIVE
        _LOGGER.info(
            "Node %s initialized with %d known nodes",
            state.node_id,
            len(state.peer_ids),
        )
        return reply
