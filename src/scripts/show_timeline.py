#!/usr/bin/env python3
"""
Print the event timeline for a user.

Logs in, loads registered/past/ongoing/upcoming events in parallel, lays
them out on the day strip and prints one line per event with its row and
pixel geometry.

Usage:
    uv run python src/scripts/show_timeline.py --rollno 21CS001 --mode all
"""

import argparse
import asyncio
import getpass
import os
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import TIMELINE_MONTHS_AFTER, TIMELINE_MONTHS_BEFORE
from core.errors import ApiError
from core.http_client import ApiClient
from services.auth import AuthSession
from services.events import build_timeline_events, fetch_timeline_data
from services.timeline import (
    compute_visible_days,
    group_by_month,
    group_events_by_month,
    layout_events,
    row_count,
)


def print_strip(timeline_events: list[dict]):
    days = compute_visible_days(TIMELINE_MONTHS_BEFORE, TIMELINE_MONTHS_AFTER)
    segments = group_by_month(days)
    positioned = layout_events(timeline_events, days)

    print(f"Window: {days[0]} .. {days[-1]} ({len(days)} days, {len(segments)} months)")
    print(f"Rows used: {row_count(positioned)}\n")
    print("=" * 80)

    for event in sorted(positioned, key=lambda e: (e["row"], e["left"])):
        marker = "*" if event["is_registered"] else " "
        print(
            f"{marker} row {event['row']:>2}  {event['start']} -> {event['end']}  "
            f"left={event['left']:<6} width={event['width']:<5} {event['name']}"
        )

    undated = [event for event in timeline_events if not event["date"]]
    if undated:
        print(f"\nNot on the strip (no date): {', '.join(e['name'] for e in undated)}")


def print_list(timeline_events: list[dict]):
    for group in group_events_by_month(timeline_events):
        print(f"\n{group['label']}")
        print("-" * 80)
        for event in group["events"]:
            team = f"  (team: {event['team_name']})" if event["team_name"] else ""
            print(f"  {event['name']} @ {event['venue']}{team}")


async def main(args: argparse.Namespace) -> int:
    password = os.environ.get("EVENTS_PASSWORD") or getpass.getpass("Password: ")

    async with ApiClient() as client:
        session = AuthSession(client)
        try:
            user = await session.signin(args.rollno, password)
            print(f"Logged in as {user.name} ({user.rollno})\n")

            registered, all_events = await fetch_timeline_data(client)
        except ApiError as e:
            print(f"\nError: {e}")
            return 1

        timeline_events = build_timeline_events(args.mode, registered, all_events)
        if args.list:
            print_list(timeline_events)
        else:
            print_strip(timeline_events)

        await session.logout()

    print("\nDone!")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Show the event timeline")
    parser.add_argument("--rollno", required=True, help="Roll number to log in with")
    parser.add_argument(
        "--mode",
        choices=["registered", "all"],
        default="registered",
        help="Only my events, or every event",
    )
    parser.add_argument("--list", action="store_true", help="Month-grouped list instead of the strip")

    sys.exit(asyncio.run(main(parser.parse_args())))
