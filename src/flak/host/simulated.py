"""SimulatedHost — in-process stand-in for the flight simulator.

Holds a scripted air picture, mission flags and a zone registry, and records
every explosion the engine asks for.  Explosions and in-sim messages are
also published on the EventBus (``flak_burst`` / ``flak_message``) so a
mission runner can watch the barrage without polling.

Usage:
    host = SimulatedHost()
    host.register_zone("SAM-1", ZoneDefinition(Point3(0, 0, 0), 1200))
    host.add_aircraft("blue", "airplane", Point3(100, 4000, 50))
    system = FlakSystem(host)
    system.add_zone("SAM-1", ZoneOptions(altitude=4000))
    host.clock.advance(10.0)
    len(host.explosions)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from flak.comms.event_bus import EventBus
from flak.geometry import Point3

from .clock import SimulationClock, TimerTask
from .interface import ZoneDefinition
from .registry import ZoneRegistry


@dataclass(frozen=True)
class Explosion:
    """One explosion as received by the host."""

    time: float
    position: Point3
    intensity: int


class SimulatedHost:
    """Host implementation backed by a SimulationClock."""

    def __init__(
        self,
        clock: SimulationClock | None = None,
        registry: ZoneRegistry | None = None,
        event_bus: EventBus | None = None,
        registry_available: bool = True,
    ) -> None:
        self.clock = clock if clock is not None else SimulationClock()
        self.registry = registry if registry is not None else ZoneRegistry()
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self.registry_available = registry_available
        self.flags: dict[str, int] = {}
        self.explosions: list[Explosion] = []
        self.messages: list[str] = []
        self._aircraft: dict[tuple[str, str], list[Point3]] = {}

    # -- Air picture ----------------------------------------------------------

    def add_aircraft(self, side: str, category: str, position: Point3) -> None:
        self._aircraft.setdefault((side.lower(), category.lower()), []).append(position)

    def set_aircraft(self, side: str, category: str, positions: Sequence[Point3]) -> None:
        self._aircraft[(side.lower(), category.lower())] = list(positions)

    def clear_aircraft(self) -> None:
        self._aircraft.clear()

    def query_aircraft_positions(self, side: str, category: str) -> list[Point3]:
        return list(self._aircraft.get((side.lower(), category.lower()), []))

    # -- Flags ----------------------------------------------------------------

    def set_flag(self, flag_id: str, value: int) -> None:
        self.flags[flag_id] = int(value)

    def query_user_flag(self, flag_id: str) -> int:
        return self.flags.get(flag_id, 0)

    # -- Zones ----------------------------------------------------------------

    def lookup_zone(self, name: str) -> Optional[ZoneDefinition]:
        return self.registry.lookup(name)

    def register_zone(self, name: str, definition: ZoneDefinition) -> None:
        self.registry.register(name, definition)

    def zone_names(self) -> Optional[list[str]]:
        if not self.registry_available:
            return None
        return self.registry.names()

    # -- Effects & output -----------------------------------------------------

    def emit_explosion(self, position: Point3, intensity: int) -> None:
        boom = Explosion(self.clock.now(), position, intensity)
        self.explosions.append(boom)
        self.event_bus.publish("flak_burst", {
            "time": boom.time,
            "position": position.to_list(),
            "intensity": intensity,
        })

    def display_message(self, text: str, duration: float) -> None:
        self.messages.append(text)
        self.event_bus.publish("flak_message", {"text": text, "duration": duration})

    # -- Scheduling -----------------------------------------------------------

    def schedule_at(self, time: float, callback: Callable[[], None]) -> TimerTask:
        return self.clock.schedule_at(time, callback)

    def now(self) -> float:
        return self.clock.now()
