"""Echo behavior: answers `echo` with `echo_ok` carrying the same string."""

from __future__ import annotations

from dsnode.errors import AlreadyInitialized, UnsupportedPayload
from dsnode.node.dispatch import reply_to
from dsnode.node.state import NodeState
from dsnode.protocol.envelope import Envelope
from dsnode.protocol.payloads import CORE_PAYLOADS, Echo, EchoOk, Init, PayloadRegistry

# Unsolicited acknowledgements this behavior accepts without replying.
_TOLERATED = (EchoOk,)


class EchoBehavior:
    """Reference behavior exercising the dispatch contract."""

    name = "echo"
    payloads: PayloadRegistry = CORE_PAYLOADS

    def handle(self, envelope: Envelope, state: NodeState) -> Envelope | None:
        """Reply to echo requests.

        Args:
            envelope: Incoming envelope.
            state: Node state.

        Returns:
            `echo_ok` reply for `echo`, None for tolerated acknowledgements.

        Raises:
            AlreadyInitialized: If an `init` reaches the behavior.
            UnsupportedPayload: For any other payload variant.
        """
        payload = envelope.body.payload
        if isinstance(payload, Echo):
            return reply_to(envelope, EchoOk(echo=payload.echo), state)
        if isinstance(payload, _TOLERATED):
            return None
        if isinstance(payload, Init):
            raise AlreadyInitialized(
                "Echo node is already active", data={"node_id": state.node_id}
            )
        raise UnsupportedPayload(
            f"Echo node does not support payload {envelope.payload_type!r}",
            data={"type": envelope.payload_type, "source": envelope.source},
        )
