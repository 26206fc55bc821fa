"""Node runtime: state, handshake, dispatch contract and transport."""

from dsnode.node.dispatch import NodeBehavior, reply_to
from dsnode.node.handshake import Handshake, HandshakeStatus
from dsnode.node.node import Node
from dsnode.node.state import NodeState
from dsnode.node.transport import TransportLoop, serve

__all__ = [
    "Handshake",
    "HandshakeStatus",
    "Node",
    "NodeBehavior",
    "NodeState",
    "TransportLoop",
    "reply_to",
    "serve",
]
