"""Unit tests for the Zone model and its options."""

from __future__ import annotations

import pytest

from flak.geometry import Point3
from flak.simulation.zone import AltitudeMode, AltitudePolicy, Zone, ZoneOptions, ZoneState

pytestmark = pytest.mark.unit


class TestAltitudePolicy:
    def test_fixed_ignores_estimator(self):
        policy = AltitudePolicy.fixed(3000.0)
        assert policy.resolve(lambda: 9999.0) == 3000.0
        assert not policy.is_dynamic

    def test_fixed_without_value(self):
        assert AltitudePolicy.fixed(None).resolve(lambda: 1.0) is None

    def test_dynamic_uses_estimator(self):
        policy = AltitudePolicy.dynamic()
        assert policy.is_dynamic
        assert policy.resolve(lambda: 4200.0) == 4200.0
        assert policy.resolve(lambda: None) is None


class TestZoneOptions:
    def test_default_policy_is_fixed_none(self):
        policy = ZoneOptions().altitude_policy()
        assert policy.mode is AltitudeMode.FIXED
        assert policy.value is None

    def test_dynamic_wins_over_altitude(self):
        policy = ZoneOptions(dynamic_altitude=True, altitude=3000.0).altitude_policy()
        assert policy.is_dynamic

    def test_flag_prefix_synthesizes_ordinal(self):
        opts = ZoneOptions(flag="shared", flag_prefix="FLK")
        assert opts.flag_for(1) == "FLK1"
        assert opts.flag_for(12) == "FLK12"

    def test_shared_flag_without_prefix(self):
        assert ZoneOptions(flag="shared").flag_for(3) == "shared"
        assert ZoneOptions().flag_for(3) is None


class TestZone:
    def _zone(self) -> Zone:
        return Zone(name="Z", center=Point3(100.0, 0.0, 100.0), radius=500.0)

    def test_starts_disabled(self):
        zone = self._zone()
        assert zone.state is ZoneState.DISABLED
        assert zone.enabled is False

    def test_enabled_reflects_state(self):
        zone = self._zone()
        zone.state = ZoneState.ENABLED
        assert zone.enabled is True

    def test_contains_is_horizontal_and_edge_inclusive(self):
        zone = self._zone()
        assert zone.contains(Point3(100.0, 9000.0, 100.0))
        assert zone.contains(Point3(600.0, 0.0, 100.0))
        assert not zone.contains(Point3(600.1, 0.0, 100.0))

    def test_to_dict(self):
        zone = Zone(
            name="Z", center=Point3(1.0, 0.0, 2.0), radius=800.0,
            altitude_policy=AltitudePolicy.fixed(2500.0), control_flag="F",
        )
        d = zone.to_dict()
        assert d["name"] == "Z"
        assert d["center"] == [1.0, 0.0, 2.0]
        assert d["altitude_mode"] == "fixed"
        assert d["altitude"] == 2500.0
        assert d["control_flag"] == "F"
        assert d["state"] == "disabled"
