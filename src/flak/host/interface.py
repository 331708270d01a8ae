"""Host boundary — everything the flak engine needs from the simulator.

The engine never talks to a simulator directly.  It is handed an object
satisfying :class:`Host` and uses only these calls:

    query_aircraft_positions(side, category)  live contact positions
    query_user_flag(flag_id)                  mission flag value (unset = 0)
    lookup_zone / register_zone / zone_names  named zone registry
    emit_explosion(position, intensity)       fire-and-forget effect
    schedule_at(time, callback)               deferred execution
    now()                                     scheduler time (seconds)
    display_message(text, duration)           in-sim text output

:class:`~flak.host.simulated.SimulatedHost` is the in-process implementation
used by the mission runner and the tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Sequence, runtime_checkable

from flak.geometry import Point3


@dataclass(frozen=True)
class ZoneDefinition:
    """A registry record: where a named zone is and how big it is."""

    center: Point3
    radius: Optional[float] = None

    def to_dict(self) -> dict:
        return {"center": self.center.to_list(), "radius": self.radius}

    @classmethod
    def from_dict(cls, data: dict) -> ZoneDefinition:
        radius = data.get("radius")
        return cls(
            center=Point3.from_sequence(data["center"]),
            radius=float(radius) if radius is not None else None,
        )


@runtime_checkable
class ScheduledTask(Protocol):
    """Handle returned by ``schedule_at``."""

    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


@runtime_checkable
class Host(Protocol):
    def query_aircraft_positions(self, side: str, category: str) -> Sequence[Point3]: ...

    def query_user_flag(self, flag_id: str) -> int: ...

    def lookup_zone(self, name: str) -> Optional[ZoneDefinition]: ...

    def register_zone(self, name: str, definition: ZoneDefinition) -> None: ...

    def zone_names(self) -> Optional[list[str]]: ...

    def emit_explosion(self, position: Point3, intensity: int) -> None: ...

    def schedule_at(self, time: float, callback: Callable[[], None]) -> ScheduledTask: ...

    def now(self) -> float: ...

    def display_message(self, text: str, duration: float) -> None: ...
