"""Short-lived key/value store for interactive setup state."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class InteractionStore(ABC):
    """
    Keeps setup wizard state between two requests of the same actor.

    Keys are built by the caller and must include the actor and account so
    state never leaks between them. Values are JSON-compatible dicts.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[dict[str, Any]]:
        """Return the value or None if missing or expired."""

    @abstractmethod
    async def set(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        """Store a value that expires after ``ttl_seconds``."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a value; missing keys are ignored."""
