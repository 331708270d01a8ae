"""BurstScheduler — the barrage cycle of one enabled zone.

Each tick (every ``interval`` seconds):

  1. Resolve the center altitude (fixed value, or the dominant altitude of
     the current air picture).  No altitude -> no bursts this tick.
  2. For every layer offset, schedule ``burst_count`` bursts, burst ``i``
     of a layer at ``now + i * burst_stagger`` so a wave is spread over
     several frames instead of landing at once.
  3. Schedule the next tick.

Every burst re-checks at fire time that the zone is still enabled and that
hold fire is not set; a hold skips that single burst only.  ``stop()``
cancels the pending tick and every queued burst, so a disable/re-enable
inside one interval leaves exactly one chain and never overlaps two waves.
"""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Optional

from .altitude import estimate_dominant_altitude
from .bursts import BurstGenerator, burst_count

if TYPE_CHECKING:
    from flak.config import FlakSettings
    from flak.host.interface import Host, ScheduledTask
    from .log import MissionLog
    from .zone import Zone


class BurstScheduler:
    """Self-rescheduling barrage for a single zone."""

    def __init__(
        self,
        zone: Zone,
        host: Host,
        config: FlakSettings,
        generator: BurstGenerator,
        log: MissionLog | None = None,
    ) -> None:
        self.zone = zone
        self._host = host
        self._config = config
        self._generator = generator
        self._log = log
        self._next_tick: ScheduledTask | None = None
        self._pending_bursts: dict[int, ScheduledTask] = {}
        self._burst_ids = itertools.count()

        # Counters (read by mission summaries and tests)
        self.waves = 0
        self.skipped_ticks = 0
        self.bursts_emitted = 0
        self.bursts_held = 0

    @property
    def running(self) -> bool:
        return self._next_tick is not None and not self._next_tick.cancelled

    @property
    def bursts_per_layer(self) -> int:
        return burst_count(
            self.zone.radius,
            self._config.density_factor,
            self._config.density_multiplier,
        )

    def start(self) -> None:
        """Fire the first wave now and keep cycling while the zone is enabled."""
        if self.running:
            return
        self._tick()

    def stop(self) -> None:
        """Cancel the next tick and any bursts still queued."""
        if self._next_tick is not None:
            self._next_tick.cancel()
            self._next_tick = None
        for task in self._pending_bursts.values():
            task.cancel()
        self._pending_bursts.clear()

    def center_altitude(self) -> Optional[float]:
        return self.zone.altitude_policy.resolve(self._estimate_altitude)

    def _estimate_altitude(self) -> Optional[float]:
        positions = self._host.query_aircraft_positions(
            self._config.target_side, self._config.target_category,
        )
        return estimate_dominant_altitude(positions, self._config.altitude_bin_size)

    def _tick(self) -> None:
        self._next_tick = None
        if not self.zone.enabled:
            return

        now = self._host.now()
        center = self.center_altitude()
        if center is None:
            self.skipped_ticks += 1
            if self._log is not None:
                self._log.debug(f"{self.zone.name}: no target altitude, holding this cycle")
        else:
            self._schedule_wave(now, center)

        self._next_tick = self._host.schedule_at(now + self._config.interval, self._tick)

    def _schedule_wave(self, now: float, center: float) -> None:
        count = self.bursts_per_layer
        stagger = self._config.burst_stagger
        for offset in self._config.layer_offsets:
            layer_alt = center + offset
            for i in range(1, count + 1):
                burst_id = next(self._burst_ids)
                self._pending_bursts[burst_id] = self._host.schedule_at(
                    now + i * stagger,
                    lambda alt=layer_alt, bid=burst_id: self._fire(alt, bid),
                )
        self.waves += 1

    def _hold_fire(self) -> bool:
        flag = self._config.hold_fire_flag
        if not flag:
            return False
        return self._host.query_user_flag(flag) == self._config.hold_fire_value

    def _fire(self, layer_altitude: float, burst_id: int) -> None:
        self._pending_bursts.pop(burst_id, None)
        if not self.zone.enabled:
            return
        if self._hold_fire():
            self.bursts_held += 1
            return
        burst = self._generator.generate(self.zone, layer_altitude)
        self._host.emit_explosion(burst.position, burst.intensity)
        self.bursts_emitted += 1
