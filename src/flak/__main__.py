"""Run a flak mission against the simulated host and report the barrage.

Usage:
    python -m flak missions/corridor_demo.json --duration 30
    python -m flak missions/corridor_demo.json --seed 7 --debug
    python -m flak missions/corridor_demo.json --duration 10 --realtime
"""

from __future__ import annotations

import argparse
import json
import sys
import time

from loguru import logger

from flak.comms.event_bus import drain
from flak.host.clock import RealtimeClock, SimulationClock
from flak.host.simulated import SimulatedHost
from flak.mission import apply_mission, load_mission


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flak", description="Simulate a flak mission")
    parser.add_argument("mission", help="Mission JSON file")
    parser.add_argument("--duration", type=float, default=30.0, help="Simulated seconds to run")
    parser.add_argument("--seed", type=int, default=None, help="Burst RNG seed")
    parser.add_argument("--debug", action="store_true", help="Echo in-sim debug messages")
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    parser.add_argument("--realtime", action="store_true",
                        help="Pace the clock against wall time instead of running instantly")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.debug:
        overrides["debug"] = True

    try:
        mission = load_mission(args.mission)
        config = mission.build_settings(**overrides)
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.error(f"Cannot load mission {args.mission}: {e}")
        return 1

    clock = RealtimeClock() if args.realtime else SimulationClock()
    host = SimulatedHost(clock=clock)
    enabled_q = host.event_bus.subscribe("flak_zone_enabled")
    disabled_q = host.event_bus.subscribe("flak_zone_disabled")
    system = apply_mission(mission, host, config)

    if isinstance(clock, RealtimeClock):
        clock.start()
        try:
            time.sleep(args.duration)
        finally:
            clock.stop()
    # Catches up anything the realtime thread had not reached yet
    clock.run_until(args.duration)
    system.stop()

    transitions = sorted(
        drain(enabled_q) + drain(disabled_q), key=lambda m: m["data"]["time"],
    )
    summary = system.summary()

    if args.json:
        print(json.dumps({
            "mission": mission.name,
            "duration": args.duration,
            "explosions": len(host.explosions),
            "transitions": transitions,
            "zones": summary,
        }, indent=2))
        return 0

    print(f"Mission: {mission.name}  ({args.duration:.1f}s {'realtime' if args.realtime else 'simulated'})")
    print(f"Explosions: {len(host.explosions)}  Zone transitions: {len(transitions)}")
    for row in summary:
        print(
            f"  {row['name']:<24} {row['state']:<9} waves={row['waves']:<4} "
            f"bursts={row['bursts_emitted']:<5} held={row['bursts_held']:<4} "
            f"skipped={row['skipped_ticks']}"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
