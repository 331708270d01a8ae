"""Shared fixtures for flak tests."""

from __future__ import annotations

import pytest

from flak.config import FlakSettings
from flak.geometry import Point3
from flak.host.interface import ZoneDefinition
from flak.host.simulated import SimulatedHost
from flak.simulation.system import FlakSystem


def _make_config(**overrides) -> FlakSettings:
    values = {"seed": 1234}
    values.update(overrides)
    return FlakSettings(**values)


@pytest.fixture
def make_config():
    """Factory for seeded FlakSettings; keyword overrides win."""
    return _make_config


@pytest.fixture
def config() -> FlakSettings:
    return _make_config()


@pytest.fixture
def host() -> SimulatedHost:
    """Simulated host with one 1000 m zone 'SAM-1' at the origin."""
    h = SimulatedHost()
    h.register_zone("SAM-1", ZoneDefinition(Point3(0.0, 0.0, 0.0), 1000.0))
    return h


@pytest.fixture
def system(host: SimulatedHost, config: FlakSettings):
    sys_ = FlakSystem(host, config)
    yield sys_
    sys_.stop()
