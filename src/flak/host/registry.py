"""ZoneRegistry — named zone definitions shared by the mission and the engine.

Read-mostly: lookups are plain dict reads, inserts and name enumeration
take the lock so a corridor build on one thread never tears a prefix scan
on another.
"""

from __future__ import annotations

import threading
from typing import Iterator, Optional

from loguru import logger

from .interface import ZoneDefinition


class ZoneRegistry:
    """Case-sensitive name -> ZoneDefinition map."""

    def __init__(self) -> None:
        self._zones: dict[str, ZoneDefinition] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._zones)

    def __contains__(self, name: object) -> bool:
        return name in self._zones

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def lookup(self, name: str) -> Optional[ZoneDefinition]:
        return self._zones.get(name)

    def register(self, name: str, definition: ZoneDefinition) -> None:
        with self._lock:
            replaced = name in self._zones
            self._zones[name] = definition
        if replaced:
            logger.debug(f"Zone registry: replaced '{name}'")

    def names(self) -> list[str]:
        """Snapshot of registered names (insertion order)."""
        with self._lock:
            return list(self._zones)

    def to_dict(self) -> dict[str, dict]:
        with self._lock:
            return {name: d.to_dict() for name, d in self._zones.items()}
