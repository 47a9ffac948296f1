"""Process local InteractionStore."""

from __future__ import annotations

import asyncio
import copy
import time
from typing import Any, Callable, Optional

from bankster.domain.banking.ports import InteractionStore


class MemoryInteractionStore(InteractionStore):
    """In-memory store with per-key expiry.

    Suitable for a single process. Values are copied on the way in and out
    so callers can never mutate stored state by accident.
    """

    def __init__(self, monotonic: Callable[[], float] = time.monotonic):
        self._monotonic = monotonic
        self._data: dict[str, tuple[float, dict[str, Any]]] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        async with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._monotonic() >= expires_at:
                del self._data[key]
                return None
            return copy.deepcopy(value)

    async def set(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        async with self._lock:
            now = self._monotonic()
            self._prune(now)
            expires_at = now + ttl_seconds
            self._data[key] = (expires_at, copy.deepcopy(value))

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._data.pop(key, None)

    def _prune(self, now: float) -> None:
        expired = [
            key for key, (expires_at, _) in self._data.items() if now >= expires_at
        ]
        for key in expired:
            del self._data[key]

    def __len__(self) -> int:
        return len(self._data)
