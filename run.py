"""
Frostbound - run.py
Headless driver: makes camp, then simulates a number of hours and prints a
status line per hour.
"""

import argparse
import json

from survival.activity import ActivityType
from survival.events import WILDCARD
from survival.logging_config import configure_logging
from survival.loop import SimulationSession

MAX_FIRE_ATTEMPTS = 5


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run a headless Frostbound survival session.")
    parser.add_argument("--seed", type=int, default=None, help="seed for a reproducible run")
    parser.add_argument("--location", default="clearing", help="starting location template")
    parser.add_argument("--forage-hours", type=int, default=2)
    parser.add_argument("--hours", type=int, default=8, help="hours to simulate after making camp")
    parser.add_argument("--activity", default=ActivityType.RESTING.value,
                        choices=[a.value for a in ActivityType])
    parser.add_argument("--log-level", default=None, help="overrides FROSTBOUND_LOG_LEVEL")
    parser.add_argument("--events", action="store_true", help="print every bus event")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.log_level)

    session = SimulationSession(seed=args.seed, start_location=args.location)
    if args.events:
        session.bus.subscribe(WILDCARD, lambda e: print(f"  [{e.event_key}] {e.data}"))

    found = session.forage(args.forage_hours)
    print(f"Foraged {args.forage_hours}h, found {len(found)} item(s).")

    for attempt in range(1, MAX_FIRE_ATTEMPTS + 1):
        result = session.start_fire()
        print(f"Fire attempt {attempt}: {'lit' if result.success else 'failed'} (chance {result.chance:.2f})")
        if result.success:
            break

    for item in found:
        if not session.burn_item(item):
            session.consume_item(item)

    activity = ActivityType(args.activity)
    for _ in range(args.hours):
        report = session.advance(60, activity)
        fire = session.campfire
        fire_text = f"fire {fire.fuel_remaining:.1f}h" if fire and fire.is_active else "no fire"
        print(f"{session.clock}  {report.body_temperature:6.2f}F {report.stage.value:<10} "
              f"kcal {session.needs.calories:7.1f}  water {session.needs.hydration:7.1f}  "
              f"{fire_text}  {','.join(sorted(report.signals)) or '-'}")

    print(json.dumps(session.status(), indent=2))


if __name__ == "__main__":
    main()
