"""
Event registration and team management: invitations by roll number,
accepting/rejecting invitations, and team membership.
"""

from core.config import (
    ACCEPT_INVITATION_PATH,
    INVITATIONS_PATH,
    MEMBERSHIP_PATH,
    REGISTER_PATH,
    REJECT_INVITATION_PATH,
    REMOVE_MEMBER_PATH,
    SEND_INVITATION_PATH,
    TEAM_MEMBERS_PATH,
    USER_BY_ROLLNO_PATH,
)
from core.errors import ValidationError
from core.http_client import ApiClient
from models.responses import (
    EventListItem,
    InvitationsResponse,
    InviteWithDetails,
    MembershipDetails,
    MembershipDetailsResponse,
    MessageResponse,
    RegisteredEvent,
    RegistrationResponse,
    TeamMembersResponse,
    UserIdResponse,
    parse_response,
)


async def register_for_event(
    client: ApiClient, event: EventListItem, team_name: str | None = None
) -> RegistrationResponse:
    """
    Register the current user for an event.

    Team events (min_no_member > 1) need a team name; the user becomes the
    team's first member and invites the rest.
    """
    if event.status == "past":
        raise ValidationError({"event_id": f"Registration for '{event.name}' is closed"})

    team_name = (team_name or "").strip()
    if event.min_no_member > 1 and not team_name:
        raise ValidationError({"team_name": "Team name is required for team events"})

    payload: dict = {"event_id": event.id}
    if team_name:
        payload["teamName"] = team_name
    return parse_response(RegistrationResponse, await client.post(REGISTER_PATH, json=payload))


async def find_user_by_rollno(client: ApiClient, rollno: str) -> int:
    """Resolve a roll number to a user id (ApiStatusError if nobody has it)."""
    rollno = (rollno or "").strip()
    if not rollno:
        raise ValidationError({"rollno": "Roll number is required"})
    data = await client.post(USER_BY_ROLLNO_PATH, json={"rollno": rollno})
    return parse_response(UserIdResponse, data).user_id


async def invite_by_rollno(
    client: ApiClient,
    registration: RegisteredEvent,
    rollno: str,
    current_size: int | None = None,
) -> str:
    """
    Invite the holder of `rollno` to the user's team for this event.

    Refuses when the team is already full. `current_size` defaults to the
    member count in the registration record.
    """
    size = current_size if current_size is not None else len(registration.members)
    if size >= registration.event.max_no_member:
        raise ValidationError(
            {"team": f"Team is full ({size}/{registration.event.max_no_member} members)"}
        )

    to_user_id = await find_user_by_rollno(client, rollno)
    data = await client.post(
        SEND_INVITATION_PATH,
        json={
            "from_team_id": registration.team_id,
            "to_user_id": to_user_id,
            "event_id": registration.event.id,
        },
    )
    return parse_response(MessageResponse, data or {}).message


async def fetch_invitations(client: ApiClient) -> list[InviteWithDetails]:
    return parse_response(InvitationsResponse, await client.get(INVITATIONS_PATH)).data


def _invitation_payload(invite: InviteWithDetails) -> dict:
    # The invitee is the logged-in user; the backend takes identity from the session
    return {"from_team_id": invite.from_team_id, "event_id": invite.event_id}


async def accept_invitation(client: ApiClient, invite: InviteWithDetails) -> str:
    data = await client.post(ACCEPT_INVITATION_PATH, json=_invitation_payload(invite))
    return parse_response(MessageResponse, data or {}).message


async def reject_invitation(client: ApiClient, invite: InviteWithDetails) -> str:
    data = await client.post(REJECT_INVITATION_PATH, json=_invitation_payload(invite))
    return parse_response(MessageResponse, data or {}).message


def remaining_invitations(invitations: list[InviteWithDetails], handled: InviteWithDetails) -> list[InviteWithDetails]:
    """Drop the handled invitation from a local list."""
    return [invite for invite in invitations if invite.from_team_id != handled.from_team_id]


async def fetch_team_members(client: ApiClient, event_id: int) -> TeamMembersResponse:
    return parse_response(TeamMembersResponse, await client.post(TEAM_MEMBERS_PATH, json={"event_id": event_id}))


async def remove_team_member(client: ApiClient, event_id: int, user_id: int) -> str:
    data = await client.post(REMOVE_MEMBER_PATH, json={"event_id": event_id, "user_id": user_id})
    return parse_response(MessageResponse, data or {}).message


async def fetch_membership_details(client: ApiClient) -> list[MembershipDetails]:
    return parse_response(MembershipDetailsResponse, await client.get(MEMBERSHIP_PATH)).data
