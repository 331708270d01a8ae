"""Dominant-altitude estimation for dynamic flak zones.

Aircraft are bucketed into vertical bands of ``bin_size`` meters
(``floor(alt / bin_size)``).  The most populated band wins and its members'
mean altitude becomes the barrage center.  Ties go to the band seen first
in the input order, which keeps the result stable for a given picture.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from flak.geometry import Point3


@dataclass
class AltitudeBin:
    """Running aggregate for one altitude band."""

    count: int = 0
    sum_altitude: float = 0.0

    def add(self, altitude: float) -> None:
        self.count += 1
        self.sum_altitude += altitude

    @property
    def mean(self) -> float:
        return self.sum_altitude / self.count


def bin_altitudes(positions: Iterable[Point3], bin_size: float) -> dict[int, AltitudeBin]:
    """Group positions into altitude bins keyed by band index.

    Dict order is first-seen order.
    """
    if bin_size <= 0:
        raise ValueError(f"bin_size must be positive, got {bin_size}")
    bins: dict[int, AltitudeBin] = {}
    for pos in positions:
        band = math.floor(pos.y / bin_size)
        bins.setdefault(band, AltitudeBin()).add(pos.y)
    return bins


def estimate_dominant_altitude(
    positions: Iterable[Point3], bin_size: float
) -> Optional[float]:
    """Mean altitude of the most populated bin, or None with no aircraft.

    None means "no estimate this cycle". Callers skip firing rather than
    treating it as altitude zero.
    """
    best: AltitudeBin | None = None
    for data in bin_altitudes(positions, bin_size).values():
        # Strictly greater: the first-seen bin keeps a tie
        if best is None or data.count > best.count:
            best = data
    if best is None:
        return None
    return best.mean
