"""Zone — a named circular flak area and its runtime state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from flak.geometry import Point3, horizontal_distance


class ZoneState(str, Enum):
    DISABLED = "disabled"
    ENABLED = "enabled"


class AltitudeMode(str, Enum):
    FIXED = "fixed"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class AltitudePolicy:
    """Where a zone centers its barrage.

    FIXED returns ``value`` (None means the zone never has an altitude and
    so never fires).  DYNAMIC asks the altitude estimator every cycle.
    """

    mode: AltitudeMode
    value: Optional[float] = None

    @classmethod
    def fixed(cls, value: Optional[float]) -> AltitudePolicy:
        return cls(AltitudeMode.FIXED, value)

    @classmethod
    def dynamic(cls) -> AltitudePolicy:
        return cls(AltitudeMode.DYNAMIC)

    @property
    def is_dynamic(self) -> bool:
        return self.mode is AltitudeMode.DYNAMIC

    def resolve(self, estimate: Callable[[], Optional[float]]) -> Optional[float]:
        if self.is_dynamic:
            return estimate()
        return self.value


@dataclass(frozen=True)
class ZoneOptions:
    """Per-zone settings handed to the factory.

    ``flag_prefix`` only applies to multi-zone builds (scan, corridor), where
    each zone gets ``flag_prefix + ordinal``; it wins over a shared ``flag``.
    A single zone logs a warning and ignores it.
    """

    dynamic_altitude: bool = False
    altitude: Optional[float] = None
    flag: Optional[str] = None
    flag_prefix: Optional[str] = None

    def altitude_policy(self) -> AltitudePolicy:
        if self.dynamic_altitude:
            return AltitudePolicy.dynamic()
        return AltitudePolicy.fixed(self.altitude)

    def flag_for(self, ordinal: int) -> Optional[str]:
        if self.flag_prefix:
            return f"{self.flag_prefix}{ordinal}"
        return self.flag


@dataclass
class Zone:
    """A flak zone.

    ``state`` is written only by the zone's ActivationLoop; everything else
    reads ``enabled``.
    """

    name: str
    center: Point3
    radius: float
    altitude_policy: AltitudePolicy = field(default_factory=lambda: AltitudePolicy.fixed(None))
    control_flag: Optional[str] = None
    state: ZoneState = ZoneState.DISABLED

    @property
    def enabled(self) -> bool:
        return self.state is ZoneState.ENABLED

    def contains(self, point: Point3) -> bool:
        """Horizontal containment, edge inclusive."""
        return horizontal_distance(self.center, point) <= self.radius

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "center": self.center.to_list(),
            "radius": self.radius,
            "altitude_mode": self.altitude_policy.mode.value,
            "altitude": self.altitude_policy.value,
            "control_flag": self.control_flag,
            "state": self.state.value,
        }
