"""Flak simulation — zones, activation, burst scheduling, zone factory."""
from .activation import ActivationLoop
from .altitude import AltitudeBin, bin_altitudes, estimate_dominant_altitude
from .bursts import BurstEvent, BurstGenerator, burst_count
from .factory import ZoneFactory
from .log import MissionLog
from .scheduler import BurstScheduler
from .system import FlakSystem
from .zone import AltitudeMode, AltitudePolicy, Zone, ZoneOptions, ZoneState

__all__ = [
    "ActivationLoop",
    "AltitudeBin",
    "AltitudeMode",
    "AltitudePolicy",
    "BurstEvent",
    "BurstGenerator",
    "BurstScheduler",
    "FlakSystem",
    "MissionLog",
    "Zone",
    "ZoneFactory",
    "ZoneOptions",
    "ZoneState",
    "bin_altitudes",
    "burst_count",
    "estimate_dominant_altitude",
]
