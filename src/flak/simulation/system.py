"""FlakSystem — owns the managed zones and their loops.

Architecture
------------
One FlakSystem per mission.  It is built with a Host and a frozen
FlakSettings and wires, per zone:

    Zone <-- ActivationLoop (1 Hz, sole writer of zone.state)
         <-- BurstScheduler (every ``interval`` while enabled)

The ZoneFactory constructs zones (single name, prefix scan, corridor) and
hands them back through ``activate()``, which starts the loop right away.
All loops run on the host scheduler; nothing here blocks.

Usage:
    system = FlakSystem(host, settings)
    system.add_zone("SAM-North", ZoneOptions(altitude=3500, flag="SAM_ON"))
    system.scan_zones_by_prefix("Flak-", ZoneOptions(dynamic_altitude=True))
    system.build_corridor("Corridor-A", "Corridor-B", 3000, ZoneOptions(altitude=4000))
"""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping, Optional

from flak.comms.event_bus import EventBus
from flak.config import FlakSettings, settings as default_settings

from .activation import ActivationLoop
from .bursts import BurstGenerator
from .factory import Anchor, ZoneFactory
from .log import MissionLog
from .scheduler import BurstScheduler
from .zone import Zone, ZoneOptions

if TYPE_CHECKING:
    from flak.host.interface import Host


class FlakSystem:
    """Mission-wide flak controller."""

    def __init__(
        self,
        host: Host,
        config: FlakSettings | None = None,
        event_bus: EventBus | None = None,
        generator: BurstGenerator | None = None,
    ) -> None:
        self.host = host
        self.config = config if config is not None else default_settings
        if event_bus is None:
            event_bus = getattr(host, "event_bus", None)
        self.event_bus = event_bus
        self.log = MissionLog(host, self.config)
        self.generator = generator if generator is not None else BurstGenerator(
            vertical_jitter=self.config.vertical_jitter, seed=self.config.seed,
        )
        self._zones: dict[str, Zone] = {}
        self._loops: dict[str, ActivationLoop] = {}
        self._lock = threading.Lock()
        self.factory = ZoneFactory(
            host, self.config, self.log,
            activate=self.activate, is_managed=self.is_managed,
        )

    # -- Managed zones --------------------------------------------------------

    @property
    def zones(self) -> Mapping[str, Zone]:
        return MappingProxyType(self._zones)

    def get_zone(self, name: str) -> Optional[Zone]:
        return self._zones.get(name)

    def get_loop(self, name: str) -> Optional[ActivationLoop]:
        return self._loops.get(name)

    def is_managed(self, name: str) -> bool:
        return name in self._zones

    def activate(self, zone: Zone) -> bool:
        """Take ownership of *zone* and start its ActivationLoop.

        Returns False (and leaves the existing loop alone) if a zone with
        the same name is already managed.
        """
        with self._lock:
            if zone.name in self._zones:
                return False
            scheduler = BurstScheduler(zone, self.host, self.config, self.generator, self.log)
            loop = ActivationLoop(
                zone, self.host, self.config, scheduler,
                log=self.log, event_bus=self.event_bus,
            )
            self._zones[zone.name] = zone
            self._loops[zone.name] = loop
        loop.start()
        return True

    # -- Factory entry points -------------------------------------------------

    def new_zone(self, name: str, options: ZoneOptions | None = None) -> Optional[Zone]:
        """Construct a zone without activating it."""
        return self.factory.new_zone(name, options)

    def add_zone(self, name: str, options: ZoneOptions | None = None) -> Optional[Zone]:
        """Construct *name* from the registry and start its loop."""
        if self.is_managed(name):
            self.log.debug(f"Zone already registered: {name}")
            return self._zones[name]
        zone = self.factory.new_zone(name, options)
        if zone is None:
            return None
        self.activate(zone)
        self.log.info(f"Registered zone: {name}")
        return zone

    def scan_zones_by_prefix(self, prefix: str, options: ZoneOptions | None = None) -> int:
        return self.factory.scan_zones_by_prefix(prefix, options)

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
        return self.factory.build_corridor(
            start_anchor, end_anchor, spacing_meters, options,
            name_prefix=name_prefix, zone_radius=zone_radius,
        )

    # -- Lifecycle ------------------------------------------------------------

    def stop(self) -> None:
        """Cancel every loop and barrage.  Zones keep their last state."""
        for loop in list(self._loops.values()):
            loop.stop()
        self.log.debug(f"Stopped {len(self._loops)} zone loops")

    def summary(self) -> list[dict]:
        """Per-zone snapshot for reports."""
        rows = []
        for name, zone in self._zones.items():
            sched = self._loops[name].scheduler
            rows.append({
                **zone.to_dict(),
                "bursts_per_layer": sched.bursts_per_layer,
                "waves": sched.waves,
                "bursts_emitted": sched.bursts_emitted,
                "bursts_held": sched.bursts_held,
                "skipped_ticks": sched.skipped_ticks,
            })
        return rows
