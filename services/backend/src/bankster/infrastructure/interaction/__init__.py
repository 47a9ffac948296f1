"""Stores for in-flight interactive state."""

from bankster.infrastructure.interaction.memory_interaction_store import (
    MemoryInteractionStore,
)

__all__ = ["MemoryInteractionStore"]
