"""Burst sizing and placement.

Placement samples a uniform angle and a uniform *radial distance*, not a
uniform point over the disc area.  Bursts therefore cluster toward the zone
center, which reads as aimed fire; keep it that way.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from flak.geometry import Point3

from .zone import Zone

INTENSITY_MIN = 1
INTENSITY_MAX = 3


@dataclass(frozen=True)
class BurstEvent:
    """A single explosion to hand to the host."""

    position: Point3
    intensity: int


def burst_count(radius: float, density_factor: float, density_multiplier: float) -> int:
    """Bursts per altitude layer for a zone of *radius* meters (at least 1)."""
    return max(1, math.floor((radius / density_factor) * density_multiplier))


class BurstGenerator:
    """Draws randomized bursts inside a zone's disc and vertical band."""

    def __init__(
        self,
        vertical_jitter: float = 50.0,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.vertical_jitter = vertical_jitter
        self._rng = rng if rng is not None else np.random.default_rng(seed)

    def generate(self, zone: Zone, layer_altitude: float) -> BurstEvent:
        angle = self._rng.uniform(0.0, 2.0 * math.pi)
        dist = self._rng.uniform(0.0, zone.radius)
        jitter = self._rng.uniform(-self.vertical_jitter, self.vertical_jitter)
        position = Point3(
            zone.center.x + math.cos(angle) * dist,
            layer_altitude + jitter,
            zone.center.z + math.sin(angle) * dist,
        )
        intensity = int(self._rng.integers(INTENSITY_MIN, INTENSITY_MAX + 1))
        return BurstEvent(position, intensity)
