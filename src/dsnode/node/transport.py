"""Synchronous line transport between process streams and a node."""

from __future__ import annotations

import logging
from typing import TextIO

from dsnode.errors import IoFailure, MalformedEnvelope
from dsnode.node.dispatch import NodeBehavior
from dsnode.node.node import Node
from dsnode.node.state import NodeState
from dsnode.protocol.envelope import Envelope, encode_envelope

_LOGGER = logging.getLogger(__name__)


class TransportLoop:
    """Read one envelope per line, process it, write and flush any reply."""

    def __init__(self, node: Node, *, reader: TextIO, writer: TextIO) -> None:
        """Bind node and streams.

        Args:
            node: Node consuming decoded envelopes.
            reader: Text stream of newline-delimited envelopes.
            writer: Text stream receiving replies.
        """
        self._node = node
        self._reader = reader
        self._writer = writer

    def run(self) -> None:
        """Process input until end of stream.

        Raises:
            MalformedEnvelope: If input is not UTF-8 or a line does not decode.
            IoFailure: If a stream read, write or flush fails.
            NodeError: Any handshake or behavior failure, unchanged.
        """
        while True:
            line = self._read_line()
            if not line:
                _LOGGER.debug("Input stream closed")
                return
            if not line.strip():
                continue
            envelope = self._node.decode(line)
            _LOGGER.debug("recv %s", line.rstrip("\r\n"))
            reply = self._node.process(envelope)
            if reply is not None:
                self._write(reply)

    def _read_line(self) -> str:
        try:
            return self._reader.readline()
        except UnicodeDecodeError as exc:
            raise MalformedEnvelope(
                f"Input is not valid UTF-8 text: {exc}", data={"cause": repr(exc)}
            ) from exc
        except OSError as exc:
            raise IoFailure(
                f"Failed to read input stream: {exc}", data={"cause": repr(exc)}
            ) from exc

    def _write(self, envelope: Envelope) -> None:
        line = encode_envelope(envelope)
        try:
            self._writer.write(line + "\n")
            self._writer.flush()
        except (OSError, UnicodeEncodeError) as exc:
            raise IoFailure(
                f"Failed to write reply: {exc}",
                data={"cause": repr(exc), "line": line},
            ) from exc
        _LOGGER.debug("sent %s", line)


def serve(
    behavior: NodeBehavior,
    *,
    reader: TextIO,
    writer: TextIO,
    state: NodeState | None = None,
) -> NodeState:
    """Run a node with the given behavior until its input closes.

    Args:
        behavior: Behavior handling post-handshake payloads.
        reader: Input stream.
        writer: Output stream.
        state: Optional initial node state.

    Returns:
        Final node state.
    """
    node = Node(behavior, state)
    TransportLoop(node, reader=reader, writer=writer).run()
    return node.state
