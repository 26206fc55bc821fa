"""Payload variants and the registry that resolves wire `type` tags."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Literal

from pydantic import BaseModel, ConfigDict

# Wire convention: `type` is the lower_snake_case variant name and sits beside
# msg_id/in_reply_to in the flat body object.


class Payload(BaseModel):
    """Base class for every payload variant. Subclasses declare `type` first."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    @classmethod
    def type_name(cls) -> str:
        """Return the wire tag declared by the variant's `type` literal.

        Returns:
            Variant tag string.

        Raises:
            TypeError: If the model does not declare a defaulted `type` field.
        """
        field = cls.model_fields.get("type")
        if field is None or not isinstance(field.default, str):
            raise TypeError(f"{cls.__name__} must declare a defaulted `type` literal")
        return field.default


class Echo(Payload):
    """Echo request carrying an arbitrary string."""

    type: Literal["echo"] = "echo"
    echo: str


class EchoOk(Payload):
    """Echo reply carrying the requested string back."""

    type: Literal["echo_ok"] = "echo_ok"
    echo: str


class Init(Payload):
    """Handshake request assigning identity and cluster membership."""

    type: Literal["init"] = "init"
    node_id: str
    node_ids: tuple[str, ...]


class InitOk(Payload):
    """Handshake acknowledgement."""

    type: Literal["init_ok"] = "init_ok"


class PayloadRegistry:
    """Immutable mapping from wire `type` tags to payload models."""

    def __init__(self, models: Iterable[type[Payload]] = ()) -> None:
        """Index payload models by their wire tag.

        Args:
            models: Payload variant models to register.

        Raises:
            ValueError: If two models declare the same tag.
        """
        self._models: dict[str, type[Payload]] = {}
        for model in models:
            name = model.type_name()
            if name in self._models:
                raise ValueError(f"Duplicate payload type: {name!r}")
            self._models[name] = model

    def extend(self, *models: type[Payload]) -> PayloadRegistry:
        """Return a new registry with additional variants.

        Args:
            models: Behavior-specific payload models.

        Returns:
            Registry holding existing plus new variants.
        """
        return PayloadRegistry((*self._models.values(), *models))

    def resolve(self, name: str) -> type[Payload] | None:
        """Look up the model for a wire tag, or None when unknown."""
        return self._models.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __iter__(self) -> Iterator[str]:
        return iter(self._models)

    def __len__(self) -> int:
        return len(self._models)


# Decodable by every node regardless of the behavior registry.
HANDSHAKE_PAYLOADS: tuple[type[Payload], ...] = (Init, InitOk)

CORE_PAYLOADS = PayloadRegistry((Echo, EchoOk, *HANDSHAKE_PAYLOADS))
