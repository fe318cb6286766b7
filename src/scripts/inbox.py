#!/usr/bin/env python3
"""
List, accept or reject team invitations.

Usage:
    uv run python src/scripts/inbox.py --rollno 21CS001
    uv run python src/scripts/inbox.py --rollno 21CS001 --accept 12
    uv run python src/scripts/inbox.py --rollno 21CS001 --reject 12
"""

import argparse
import asyncio
import getpass
import os
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.errors import ApiError
from core.http_client import ApiClient
from services.auth import AuthSession
from services.teams import accept_invitation, fetch_invitations, reject_invitation


async def main(args: argparse.Namespace) -> int:
    password = os.environ.get("EVENTS_PASSWORD") or getpass.getpass("Password: ")

    async with ApiClient() as client:
        session = AuthSession(client)
        try:
            await session.signin(args.rollno, password)
            invitations = await fetch_invitations(client)

            team_id = args.accept or args.reject
            if team_id is None:
                print(f"Found {len(invitations)} invitations\n")
                for invite in invitations:
                    print(f"  [{invite.from_team_id}] {invite.team_name} - {invite.event_name}")
                    print(f"      from {invite.from_user_name}")
                return 0

            invite = next((i for i in invitations if i.from_team_id == team_id), None)
            if invite is None:
                print(f"\nError: no pending invitation from team {team_id}")
                return 1

            if args.accept:
                message = await accept_invitation(client, invite)
            else:
                message = await reject_invitation(client, invite)
            print(message or "Done!")
            return 0

        except ApiError as e:
            print(f"\nError: {e}")
            return 1
        finally:
            await session.logout()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Manage team invitations")
    parser.add_argument("--rollno", required=True, help="Roll number to log in with")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--accept", type=int, metavar="TEAM_ID", help="Accept the invitation from this team")
    group.add_argument("--reject", type=int, metavar="TEAM_ID", help="Reject the invitation from this team")

    sys.exit(asyncio.run(main(parser.parse_args())))
