"""Point and distance helpers in the host's mission coordinates.

Coordinate convention:
    X and Z span the map plane, +Y = altitude (meters).
    All horizontal tests use (x, z); y is only ever an altitude.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass(frozen=True)
class Point3:
    """A mission-space position.  ``y`` is altitude."""

    x: float
    y: float
    z: float

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> Point3:
        """Accept [x, y, z] or a 2D map point [x, z] (altitude 0)."""
        if len(values) == 2:
            return cls(float(values[0]), 0.0, float(values[1]))
        if len(values) == 3:
            return cls(float(values[0]), float(values[1]), float(values[2]))
        raise ValueError(f"expected 2 or 3 coordinates, got {len(values)}")

    def to_list(self) -> list[float]:
        return [self.x, self.y, self.z]


def horizontal_distance(a: Point3, b: Point3) -> float:
    return math.hypot(b.x - a.x, b.z - a.z)


def interpolate_line(start: Point3, end: Point3, segments: int) -> list[Point3]:
    """Return ``segments + 1`` evenly spaced points from *start* to *end*.

    Points sit at t = i / segments for i in [0, segments]; altitude is
    flattened to 0 since these are ground anchors.
    """
    ts = np.linspace(0.0, 1.0, segments + 1)
    dx = end.x - start.x
    dz = end.z - start.z
    return [Point3(start.x + dx * float(t), 0.0, start.z + dz * float(t)) for t in ts]
