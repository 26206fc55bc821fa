"""Named behavior factories selected at process start."""

from __future__ import annotations

from collections.abc import Callable

from dsnode.behaviors.echo import EchoBehavior
from dsnode.node.dispatch import NodeBehavior

BehaviorFactory = Callable[[], NodeBehavior]


class UnknownBehaviorError(KeyError):
    """Raised when no behavior is registered under a requested name."""

    def __init__(self, name: str, available: tuple[str, ...]) -> None:
        super().__init__(name)
        self.name = name
        self.available = available

    def __str__(self) -> str:
        choices = ", ".join(self.available) or "none"
        return f"Unknown behavior {self.name!r}. Available: {choices}"


class BehaviorRegistry:
    """Deterministic behavior factory registry."""

    def __init__(self, factories: dict[str, BehaviorFactory] | None = None) -> None:
        """Construct registry with built-in behaviors plus optional overrides.

        Args:
            factories: Optional factories keyed by behavior name.
        """
        self._factories: dict[str, BehaviorFactory] = {"echo": EchoBehavior}
        if factories:
            self._factories.update(factories)

    def names(self) -> tuple[str, ...]:
        """Return registered behavior names in sorted order."""
        return tuple(sorted(self._factories))

    def create(self, name: str) -> NodeBehavior:
        """Instantiate a registered behavior.

        Args:
            name: Behavior name.

        Returns:
            Fresh behavior instance.

        Raises:
            UnknownBehaviorError: If the name is not registered.
        """
        factory = self._factories.get(name)
        if factory is None:
            raise UnknownBehaviorError(name, self.names())
        return factory()
