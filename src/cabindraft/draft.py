#!/usr/bin/env python3
"""Cabin Draft Scheduler.

Status mode (default):
    cabindraft status [--config config.yaml] [--bookings bookings.yaml] [--now ISO]

    Prints whose turn it is, their window and the draft phase.

Timeline mode:
    cabindraft timeline [...] [-o DIR]

    Prints every turn of the season. With -o, also writes status.json,
    timeline.json and timeline.txt into DIR for the store to pick up.

Validate mode:
    cabindraft validate [...]

    Checks the computed timeline against the draft rules. Exit code 0 if
    valid, 1 if violations found.

Cost mode:
    cabindraft cost CHECK_IN CHECK_OUT

Examples:
    cabindraft status --now 2026-03-04T12:00:00-08:00
    cabindraft timeline --bookings bookings.yaml --json
    cabindraft cost 2026-07-06 2026-07-13
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from cabindraft.config import ConfigError, load_actions, load_config, parse_datetime
from cabindraft.constraints import format_validation_report, validate_timeline
from cabindraft.output import (
    format_cost, format_status, format_timeline, status_json, timeline_json,
    write_outputs,
)
from cabindraft.pricing import calculate_booking_cost
from cabindraft.scheduler import compute_schedule, compute_timeline, utc_now
from cabindraft.timing import as_pacific_date


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Cabin Draft Scheduler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Exit codes:
  0  Success (or timeline valid)
  1  Missing/invalid input, or draft rule violations found
""",
    )
    parser.add_argument(
        "command", nargs="?", default="status",
        choices=["status", "timeline", "validate", "cost"],
        help="What to compute (default: status)"
    )
    parser.add_argument(
        "dates", nargs="*",
        help="Check-in and check-out dates for the cost command"
    )
    parser.add_argument(
        "--config", default="config.yaml",
        help="Path to config YAML file (default: config.yaml)"
    )
    parser.add_argument(
        "--bookings", default=None,
        help="Path to booking history YAML/JSON (default: no bookings)"
    )
    parser.add_argument(
        "--now", default=None,
        help="Evaluate at this ISO-8601 instant instead of the current time"
    )
    parser.add_argument(
        "--start", default=None,
        help="Override the configured draft start (ISO-8601)"
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Print JSON instead of text"
    )
    parser.add_argument(
        "--output-prefix", "-o", default=None,
        help="Also write status/timeline files into this directory"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log scheduling decisions"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "cost":
        if len(args.dates) != 2:
            print("Error: cost needs CHECK_IN and CHECK_OUT dates")
            sys.exit(1)
        check_in, check_out = (as_pacific_date(d) for d in args.dates)
        if check_in is None or check_out is None:
            print(f"Error: could not read dates {args.dates}")
            sys.exit(1)
        cost = calculate_booking_cost(check_in, check_out)
        if args.json:
            print(json.dumps(cost.to_dict(), indent=2))
        else:
            print(format_cost(cost))
        return

    config_path = args.config
    if not Path(config_path).exists():
        print(f"Error: config file {config_path} not found")
        sys.exit(1)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        print(e)
        sys.exit(1)

    aliases = config["name_aliases"]
    actions = []
    if args.bookings:
        if not Path(args.bookings).exists():
            print(f"Error: bookings file {args.bookings} not found")
            sys.exit(1)
        actions = load_actions(args.bookings, aliases)

    try:
        now = parse_datetime(args.now) if args.now else utc_now()
        start = parse_datetime(args.start) if args.start else None
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    participants = config["participants"]
    settings = config["settings"]
    season_name = config["season"]["name"]

    status = compute_schedule(participants, actions, now, start_override=start,
                              settings=settings, aliases=aliases)
    records = compute_timeline(participants, actions, now, start_override=start,
                               settings=settings, aliases=aliases)

    if args.command == "status":
        print(status_json(status) if args.json else format_status(status, season_name))
    elif args.command == "timeline":
        if args.json:
            print(timeline_json(records))
        else:
            print(format_status(status, season_name))
            print()
            print(format_timeline(records))
    elif args.command == "validate":
        result = validate_timeline(records, participants,
                                   snaps_to_ten_am=settings.snaps_to_ten_am,
                                   aliases=aliases)
        print(format_validation_report(result))
        if not result["valid"]:
            sys.exit(1)

    if args.output_prefix:
        write_outputs(status, records, args.output_prefix, season_name)


if __name__ == "__main__":
    main()
