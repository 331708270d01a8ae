"""Unit tests for ActivationLoop — presence and flag control of a zone."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from flak.comms.event_bus import EventBus, drain
from flak.geometry import Point3
from flak.host.simulated import SimulatedHost
from flak.simulation.activation import ActivationLoop
from flak.simulation.bursts import BurstGenerator
from flak.simulation.scheduler import BurstScheduler
from flak.simulation.zone import AltitudePolicy, Zone, ZoneState

pytestmark = pytest.mark.unit


def _zone(flag: str | None = None) -> Zone:
    return Zone(
        name="SAM-1",
        center=Point3(0.0, 0.0, 0.0),
        radius=1000.0,
        altitude_policy=AltitudePolicy.fixed(3000.0),
        control_flag=flag,
    )


def _loop(zone: Zone, host: SimulatedHost, config, event_bus: EventBus | None = None) -> ActivationLoop:
    sched = BurstScheduler(zone, host, config, BurstGenerator(seed=1))
    return ActivationLoop(zone, host, config, sched, event_bus=event_bus)


class TestPresenceControl:
    def test_empty_sky_stays_disabled(self, config):
        host = SimulatedHost()
        zone = _zone()
        loop = _loop(zone, host, config)
        loop.start()
        host.clock.run_until(5.0)
        assert zone.state is ZoneState.DISABLED
        assert host.explosions == []
        assert loop.evaluations == 6  # t=0..5

    def test_aircraft_inside_enables_immediately(self, config):
        host = SimulatedHost()
        host.add_aircraft("blue", "airplane", Point3(300.0, 3000.0, -400.0))
        zone = _zone()
        loop = _loop(zone, host, config)
        loop.start()
        assert zone.enabled
        assert loop.scheduler.running
        host.clock.run_until(0.15)
        assert len(host.explosions) == 3

    def test_aircraft_outside_radius_ignored(self, config):
        host = SimulatedHost()
        host.add_aircraft("blue", "airplane", Point3(1000.1, 3000.0, 0.0))
        zone = _zone()
        _loop(zone, host, config).start()
        assert not zone.enabled

    def test_edge_of_radius_counts(self, config):
        host = SimulatedHost()
        host.add_aircraft("blue", "airplane", Point3(0.0, 8000.0, 1000.0))
        zone = _zone()
        _loop(zone, host, config).start()
        assert zone.enabled

    def test_other_side_not_an_enemy(self, config):
        host = SimulatedHost()
        host.add_aircraft("red", "airplane", Point3(0.0, 3000.0, 0.0))
        zone = _zone()
        _loop(zone, host, config).start()
        assert not zone.enabled

    def test_aircraft_leaving_disables_on_next_tick(self, config):
        host = SimulatedHost()
        host.add_aircraft("blue", "airplane", Point3(0.0, 3000.0, 0.0))
        zone = _zone()
        loop = _loop(zone, host, config)
        loop.start()
        host.clock.run_until(2.0)
        assert zone.enabled
        fired = len(host.explosions)

        host.clear_aircraft()
        host.clock.run_until(3.0)
        assert not zone.enabled
        assert not loop.scheduler.running
        host.clock.run_until(10.0)
        assert len(host.explosions) <= fired + 3  # only the wave already in flight

    def test_re_enable_within_interval_keeps_one_chain(self, make_config):
        config = make_config(interval=5.0, update_interval=1.0)
        host = SimulatedHost()
        host.add_aircraft("blue", "airplane", Point3(0.0, 3000.0, 0.0))
        zone = _zone()
        loop = _loop(zone, host, config)
        loop.start()                      # wave 1 at t=0
        host.clock.run_until(0.5)
        host.clear_aircraft()
        host.clock.run_until(1.0)         # disabled at t=1
        host.add_aircraft("blue", "airplane", Point3(0.0, 3000.0, 0.0))
        host.clock.run_until(2.0)         # re-enabled at t=2, wave 2
        host.clock.run_until(6.5)         # next tick at t=7, not t=5
        assert loop.scheduler.waves == 2
        host.clock.run_until(7.0)
        assert loop.scheduler.waves == 3


class TestFlagControl:
    def test_flag_on_enables_without_aircraft(self, config):
        host = SimulatedHost()
        host.set_flag("F", 1)
        zone = _zone(flag="F")
        _loop(zone, host, config).start()
        assert zone.enabled

    def test_flag_off_stays_disabled_with_aircraft(self, config):
        host = SimulatedHost()
        host.set_flag("F", 0)
        host.add_aircraft("blue", "airplane", Point3(0.0, 3000.0, 0.0))
        zone = _zone(flag="F")
        _loop(zone, host, config).start()
        assert not zone.enabled

    def test_unset_flag_reads_as_off(self, config):
        host = SimulatedHost()
        host.add_aircraft("blue", "airplane", Point3(0.0, 3000.0, 0.0))
        zone = _zone(flag="Never")
        _loop(zone, host, config).start()
        assert not zone.enabled

    def test_flag_toggle_follows_on_next_tick(self, config):
        host = SimulatedHost()
        host.add_aircraft("blue", "airplane", Point3(0.0, 3000.0, 0.0))
        zone = _zone(flag="F")
        loop = _loop(zone, host, config)
        loop.start()
        assert not zone.enabled

        host.set_flag("F", 1)
        assert not zone.enabled  # nothing changes until the loop runs
        host.clock.run_until(1.0)
        assert zone.enabled

        host.set_flag("F", 0)
        host.clock.run_until(2.0)
        assert not zone.enabled

    def test_flag_values_other_than_one_are_off(self, config):
        host = SimulatedHost()
        host.set_flag("F", 2)
        zone = _zone(flag="F")
        _loop(zone, host, config).start()
        assert not zone.enabled


class TestLoopLifecycle:
    def test_reschedules_every_update_interval(self, make_config):
        config = make_config(update_interval=0.5)
        host = SimulatedHost()
        loop = _loop(_zone(), host, config)
        loop.start()
        host.clock.run_until(2.0)
        assert loop.evaluations == 5
        assert loop.running

    def test_stop_cancels_loop_and_scheduler(self, config):
        host = SimulatedHost()
        host.add_aircraft("blue", "airplane", Point3(0.0, 3000.0, 0.0))
        loop = _loop(_zone(), host, config)
        loop.start()
        loop.stop()
        evaluations = loop.evaluations
        host.clock.run_until(5.0)
        assert loop.evaluations == evaluations
        assert not loop.running
        assert not loop.scheduler.running

    def test_start_twice_is_noop(self, config):
        host = SimulatedHost()
        loop = _loop(_zone(), host, config)
        loop.start()
        loop.start()
        assert loop.evaluations == 1

    def test_transitions_published(self, config):
        host = SimulatedHost()
        bus = EventBus()
        q = bus.subscribe()
        host.set_flag("F", 1)
        loop = _loop(_zone(flag="F"), host, config, event_bus=bus)
        loop.start()
        host.set_flag("F", 0)
        host.clock.run_until(1.0)
        types = [m["type"] for m in drain(q)]
        assert types == ["flak_zone_enabled", "flak_zone_disabled"]

    def test_uses_host_queries(self, config):
        host = MagicMock()
        host.now.return_value = 0.0
        host.query_aircraft_positions.return_value = [Point3(0.0, 1000.0, 0.0)]
        zone = _zone()
        loop = ActivationLoop(zone, host, config, MagicMock())
        loop.update()
        host.query_aircraft_positions.assert_called_with("blue", "airplane")
        loop.scheduler.start.assert_called_once()
        host.schedule_at.assert_called_once()
        assert host.schedule_at.call_args[0][0] == pytest.approx(1.0)
