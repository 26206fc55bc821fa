"""Node behaviors built on the dispatch contract."""

from dsnode.behaviors.echo import EchoBehavior
from dsnode.behaviors.registry import (
    BehaviorFactory,
    BehaviorRegistry,
    UnknownBehaviorError,
)

__all__ = [
    "BehaviorFactory",
    "BehaviorRegistry",
    "EchoBehavior",
    "UnknownBehaviorError",
]
