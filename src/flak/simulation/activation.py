"""ActivationLoop — per-zone enable/disable state machine.

States: disabled (initial) <-> enabled.  No terminal state.

Evaluated once at start, then every ``update_interval`` seconds:

    enemy_present  = any tracked aircraft horizontally inside the zone
    should_enable  = flag == 1        if the zone has a control flag
                   = enemy_present    otherwise

    disabled -> enabled   on should_enable: start the BurstScheduler
    enabled  -> disabled  on not should_enable: stop the BurstScheduler

A control flag overrides presence entirely: flag 1 fires over an empty
sky, flag 0 stays silent with aircraft overhead.  This loop is the only
writer of ``zone.state``; the scheduler and its bursts only read it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .zone import ZoneState

if TYPE_CHECKING:
    from flak.comms.event_bus import EventBus
    from flak.config import FlakSettings
    from flak.host.interface import Host, ScheduledTask
    from .log import MissionLog
    from .scheduler import BurstScheduler
    from .zone import Zone


class ActivationLoop:
    """Periodic activation check for one zone."""

    def __init__(
        self,
        zone: Zone,
        host: Host,
        config: FlakSettings,
        scheduler: BurstScheduler,
        log: MissionLog | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.zone = zone
        self.scheduler = scheduler
        self._host = host
        self._config = config
        self._log = log
        self._event_bus = event_bus
        self._next_check: ScheduledTask | None = None
        self.evaluations = 0

    @property
    def running(self) -> bool:
        return self._next_check is not None and not self._next_check.cancelled

    def start(self) -> None:
        if self.running:
            return
        self.update()

    def stop(self) -> None:
        """Cancel the loop and any barrage it started."""
        if self._next_check is not None:
            self._next_check.cancel()
            self._next_check = None
        self.scheduler.stop()

    def enemy_present(self) -> bool:
        positions = self._host.query_aircraft_positions(
            self._config.target_side, self._config.target_category,
        )
        return any(self.zone.contains(pos) for pos in positions)

    def should_enable(self) -> bool:
        if self.zone.control_flag:
            return self._host.query_user_flag(self.zone.control_flag) == 1
        return self.enemy_present()

    def update(self) -> None:
        """One evaluation, then reschedule."""
        self._next_check = None
        self.evaluations += 1

        wanted = self.should_enable()
        if wanted and not self.zone.enabled:
            self._transition(ZoneState.ENABLED)
            self.scheduler.start()
        elif not wanted and self.zone.enabled:
            self._transition(ZoneState.DISABLED)
            self.scheduler.stop()

        self._next_check = self._host.schedule_at(
            self._host.now() + self._config.update_interval, self.update,
        )

    def _transition(self, state: ZoneState) -> None:
        self.zone.state = state
        if self._log is not None:
            self._log.debug(f"{self.zone.name}: {state.value}")
        if self._event_bus is not None:
            self._event_bus.publish(f"flak_zone_{state.value}", {
                "zone": self.zone.name,
                "time": self._host.now(),
            })
