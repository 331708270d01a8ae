"""Mission — JSON description of zones, air picture and flak setup.

Usage:
    mission = load_mission("missions/corridor_demo.json")
    host = SimulatedHost()
    system = apply_mission(mission, host)
    host.clock.advance(30.0)

Flak directives (``"flak"`` list), one of:
    {"zone": "SAM-1", "altitude": 3000, "flag": "SAM_ON"}
    {"scan": "Flak-", "dynamic_altitude": true, "flag_prefix": "FLK"}
    {"corridor": ["A", "B"], "spacing": 3000, "altitude": 4000,
     "name_prefix": "Belt_", "zone_radius": 800}

Corridor anchors are zone names or coordinate lists ([x, z] or [x, y, z]).
Malformed directives are logged and skipped.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from flak.config import FlakSettings, settings as default_settings
from flak.geometry import Point3
from flak.host.interface import ZoneDefinition
from flak.host.simulated import SimulatedHost
from flak.simulation.system import FlakSystem
from flak.simulation.zone import ZoneOptions

_OPTION_KEYS = ("dynamic_altitude", "altitude", "flag", "flag_prefix")


@dataclass
class AircraftContact:
    """A static contact in the scripted air picture."""

    position: Point3
    side: str = "blue"
    category: str = "airplane"


@dataclass
class Mission:
    """Complete mission definition."""

    name: str
    zones: dict[str, ZoneDefinition] = field(default_factory=dict)
    flags: dict[str, int] = field(default_factory=dict)
    aircraft: list[AircraftContact] = field(default_factory=list)
    flak: list[dict[str, Any]] = field(default_factory=list)
    settings: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "settings": dict(self.settings),
            "zones": [
                {"name": name, **d.to_dict()}
                for name, d in self.zones.items()
            ],
            "flags": dict(self.flags),
            "aircraft": [
                {
                    "side": a.side,
                    "category": a.category,
                    "position": a.position.to_list(),
                }
                for a in self.aircraft
            ],
            "flak": [dict(d) for d in self.flak],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Mission:
        zones = {
            z["name"]: ZoneDefinition.from_dict(z)
            for z in data.get("zones", [])
        }
        aircraft = [
            AircraftContact(
                position=Point3.from_sequence(a["position"]),
                side=a.get("side", "blue"),
                category=a.get("category", "airplane"),
            )
            for a in data.get("aircraft", [])
        ]
        return cls(
            name=data.get("name", "unnamed"),
            zones=zones,
            flags={k: int(v) for k, v in data.get("flags", {}).items()},
            aircraft=aircraft,
            flak=list(data.get("flak", [])),
            settings=dict(data.get("settings", {})),
        )

    def build_settings(self, base: FlakSettings | None = None, **overrides: Any) -> FlakSettings:
        """Mission settings layered over *base*, validated."""
        base = base if base is not None else default_settings
        merged = {**base.model_dump(), **self.settings, **overrides}
        return FlakSettings.model_validate(merged)


def load_mission(path: str) -> Mission:
    """Load a Mission from a JSON file.

    Raises:
        FileNotFoundError: If path does not exist.
        json.JSONDecodeError: If file is not valid JSON.
        KeyError/TypeError/ValueError: If required fields are malformed.
    """
    with open(path) as f:
        data = json.load(f)
    return Mission.from_dict(data)


def _options(directive: dict[str, Any]) -> ZoneOptions:
    return ZoneOptions(**{k: directive[k] for k in _OPTION_KEYS if k in directive})


def _anchor(value: Any) -> str | Point3:
    """Corridor anchor: a registry zone name or a coordinate list."""
    if isinstance(value, str):
        return value
    return Point3.from_sequence(value)


def apply_directive(system: FlakSystem, directive: dict[str, Any]) -> int:
    """Run one flak directive.  Returns the number of zones it activated."""
    if "zone" in directive:
        return 1 if system.add_zone(directive["zone"], _options(directive)) else 0
    if "scan" in directive:
        return system.scan_zones_by_prefix(directive["scan"], _options(directive))
    if "corridor" in directive:
        anchors = directive["corridor"]
        if not isinstance(anchors, (list, tuple)) or len(anchors) != 2:
            logger.warning(f"Corridor needs two anchors, got {anchors!r}; skipped")
            return 0
        start, end = (_anchor(a) for a in anchors)
        zones = system.build_corridor(
            start, end, float(directive.get("spacing", 3000.0)), _options(directive),
            name_prefix=directive.get("name_prefix"),
            zone_radius=directive.get("zone_radius"),
        )
        return len(zones)
    logger.warning(f"Unknown flak directive skipped: {directive}")
    return 0


def apply_mission(
    mission: Mission,
    host: SimulatedHost,
    config: FlakSettings | None = None,
) -> FlakSystem:
    """Populate *host* from *mission* and return a FlakSystem running it."""
    for name, definition in mission.zones.items():
        host.register_zone(name, definition)
    for flag_id, value in mission.flags.items():
        host.set_flag(flag_id, value)
    for contact in mission.aircraft:
        host.add_aircraft(contact.side, contact.category, contact.position)

    system = FlakSystem(host, config if config is not None else mission.build_settings())
    total = 0
    for directive in mission.flak:
        try:
            total += apply_directive(system, directive)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Malformed flak directive skipped: {directive} ({e})")
    logger.info(f"Mission '{mission.name}': {total} flak zones active "
                f"({len(mission.zones)} zones defined)")
    return system
