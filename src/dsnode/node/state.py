"""Per-process mutable node state."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NodeState(BaseModel):
    """Identity, membership and message-id counter owned by one node process."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    next_message_id: int = Field(default=0, ge=0)
    node_id: str = ""
    peer_ids: list[str] = Field(default_factory=list)

    @property
    def initialized(self) -> bool:
        """Whether the handshake has assigned this node an identity."""
        return bool(self.node_id)

    def allocate_message_id(self) -> int:
        """Return the current counter value and advance it by one.

        Returns:
            Message id for the envelope about to be emitted.
        """
        message_id = self.next_message_id
        self.next_message_id = message_id + 1
        return message_id
