"""Host boundary — simulator interface, clocks, zone registry, simulated host."""
from .clock import RealtimeClock, SimulationClock, TimerTask
from .interface import Host, ScheduledTask, ZoneDefinition
from .registry import ZoneRegistry
from .simulated import Explosion, SimulatedHost

__all__ = [
    "Explosion",
    "Host",
    "RealtimeClock",
    "ScheduledTask",
    "SimulatedHost",
    "SimulationClock",
    "TimerTask",
    "ZoneDefinition",
    "ZoneRegistry",
]
