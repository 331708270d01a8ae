"""ZoneFactory — builds Zones from the registry, by prefix, or as a corridor.

The factory only constructs and hands zones to an ``activate`` callback
(FlakSystem.activate), which owns the loops.  Zone names already managed
are skipped, so repeating a scan or a corridor build is a no-op.

Failures never raise: a lookup miss, an unavailable registry or a bad
corridor is logged and the zone is left out of the result.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Callable, Optional, Union

from flak.geometry import Point3, horizontal_distance, interpolate_line
from flak.host.interface import ZoneDefinition

from .zone import Zone, ZoneOptions

if TYPE_CHECKING:
    from flak.config import FlakSettings
    from flak.host.interface import Host
    from .log import MissionLog

Anchor = Union[str, Point3]


class ZoneFactory:
    """Constructs zones and passes them to *activate*."""

    def __init__(
        self,
        host: Host,
        config: FlakSettings,
        log: MissionLog,
        activate: Callable[[Zone], bool],
        is_managed: Callable[[str], bool],
    ) -> None:
        self._host = host
        self._config = config
        self._log = log
        self._activate = activate
        self._is_managed = is_managed

    # -- Single zone ----------------------------------------------------------

    def new_zone(self, name: str, options: ZoneOptions | None = None) -> Optional[Zone]:
        """Build a Zone from the registry entry *name*, or None on a miss."""
        options = options or ZoneOptions()
        if options.flag_prefix:
            self._log.warning(f"flag_prefix ignored for single zone {name}; use flag")

        definition = self._host.lookup_zone(name)
        if definition is None:
            self._log.warning(f"Zone not found: {name}")
            return None

        radius = definition.radius if definition.radius is not None else self._config.default_zone_radius
        if radius <= 0:
            self._log.warning(f"Zone {name} has non-positive radius {radius}")
            return None

        policy = options.altitude_policy()
        if not policy.is_dynamic and policy.value is None:
            self._log.warning(f"Zone {name} has no altitude configured and will never fire")

        return Zone(
            name=name,
            center=definition.center,
            radius=float(radius),
            altitude_policy=policy,
            control_flag=options.flag,
        )

    # -- Prefix scan ----------------------------------------------------------

    def scan_zones_by_prefix(self, prefix: str, options: ZoneOptions | None = None) -> int:
        """Register every registry zone whose name starts with *prefix*.

        Matching is case-insensitive; zones are visited in case-insensitive
        name order. ``flag_prefix`` ordinals count the zones registered by
        this scan (1-based), so skipped and failed matches take no number.
        Returns the number of zones newly registered.
        """
        options = options or ZoneOptions()

        names = self._host.zone_names()
        if names is None:
            self._log.warning("Zone registry not available")
            return 0

        wanted = prefix.lower()
        matches = sorted((n for n in names if n.lower().startswith(wanted)), key=str.lower)

        count = 0
        for name in matches:
            if self._is_managed(name):
                self._log.debug(f"Zone already registered: {name}")
                continue
            zone = self.new_zone(name, ZoneOptions(
                dynamic_altitude=options.dynamic_altitude,
                altitude=options.altitude,
                flag=options.flag_for(count + 1),
            ))
            if zone is not None and self._activate(zone):
                count += 1
                self._log.info(f"Registered zone: {name}")

        self._log.info(f"Prefix scan '{prefix}' complete. Zones: {count}")
        return count

    # -- Corridor -------------------------------------------------------------

    def _anchor_point(self, anchor: Anchor) -> Optional[Point3]:
        if isinstance(anchor, Point3):
            return anchor
        definition = self._host.lookup_zone(anchor)
        return definition.center if definition is not None else None

    def build_corridor(
        self,
        start_anchor: Anchor,
        end_anchor: Anchor,
        spacing_meters: float,
        options: ZoneOptions | None = None,
        *,
        name_prefix: str | None = None,
        zone_radius: float | None = None,
    ) -> list[Zone]:
        """Lay a line of zones from *start_anchor* to *end_anchor*.

        ``segments = max(1, floor(distance / spacing_meters))`` and one zone
        sits at each of the ``segments + 1`` interpolation points, named
        ``name_prefix + ordinal`` (1-based).  Returns the zones created.
        """
        options = options or ZoneOptions()
        name_prefix = name_prefix if name_prefix is not None else self._config.corridor_name_prefix
        zone_radius = zone_radius if zone_radius is not None else self._config.corridor_zone_radius

        p1 = self._anchor_point(start_anchor)
        p2 = self._anchor_point(end_anchor)
        if p1 is None or p2 is None:
            self._log.warning(f"Corridor zones invalid: {start_anchor}, {end_anchor}")
            return []
        if spacing_meters <= 0:
            self._log.warning(f"Corridor spacing must be positive, got {spacing_meters}")
            return []
        if zone_radius <= 0:
            self._log.warning(f"Corridor zone radius must be positive, got {zone_radius}")
            return []

        distance = horizontal_distance(p1, p2)
        segments = max(1, math.floor(distance / spacing_meters))

        created: list[Zone] = []
        for i, center in enumerate(interpolate_line(p1, p2, segments), start=1):
            zone_name = f"{name_prefix}{i}"
            if self._is_managed(zone_name):
                self._log.debug(f"Corridor zone already registered: {zone_name}")
                continue

            self._host.register_zone(zone_name, ZoneDefinition(center, zone_radius))
            zone = self.new_zone(zone_name, ZoneOptions(
                dynamic_altitude=options.dynamic_altitude,
                altitude=options.altitude,
                flag=options.flag_for(i),
            ))
            if zone is not None and self._activate(zone):
                created.append(zone)
                self._log.info(f"Corridor zone created: {zone_name}")

        self._log.info("Corridor build complete")
        return created
