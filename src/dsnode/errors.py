"""Deterministic node error contracts."""

from __future__ import annotations

from enum import StrEnum


class NodeErrorCode(StrEnum):
    """Stable node failure codes surfaced at the process boundary."""

    MALFORMED_ENVELOPE = "malformed_envelope"
    HANDSHAKE_NOT_COMPLETE = "handshake_not_complete"
    ALREADY_INITIALIZED = "already_initialized"
    UNSUPPORTED_PAYLOAD = "unsupported_payload"
    IO_FAILURE = "io_failure"


class NodeError(RuntimeError):
    """Fatal node failure with stable deterministic code."""

    code: NodeErrorCode

    def __init__(self, message: str, *, data: dict[str, object] | None = None) -> None:
        """Create node failure.

        Args:
            message: Human-readable error message.
            data: Optional structured payload for diagnostics.
        """
        super().__init__(message)
        self.message = message
        self.data = data or {}

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class MalformedEnvelope(NodeError):
    """Raised when an input line does not decode to a valid envelope."""

    code = NodeErrorCode.MALFORMED_ENVELOPE


class HandshakeNotComplete(NodeError):
    """Raised when a non-init payload arrives before the handshake."""

    code = NodeErrorCode.HANDSHAKE_NOT_COMPLETE


class AlreadyInitialized(NodeError):
    """Raised when an init payload arrives after the handshake."""

    code = NodeErrorCode.ALREADY_INITIALIZED


class UnsupportedPayload(NodeError):
    """Raised when a behavior receives a payload variant it does not handle."""

    code = NodeErrorCode.UNSUPPORTED_PAYLOAD


class IoFailure(NodeError):
    """Raised when reading from or writing to the node streams fails."""

    code = NodeErrorCode.IO_FAILURE
