"""Pydantic models for backend payloads."""

import datetime as dt
from typing import Annotated, Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from core.errors import MalformedResponseError

EventStatus = Literal["past", "ongoing", "upcoming"]

# Dates parse when they can; anything else (e.g. "TBD") is kept as the raw
# string so the timeline can apply its own fallbacks.
ApiDate = Annotated[dt.date | dt.datetime | str | None, Field(union_mode="left_to_right")]

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_response(model: type[ModelT], data: Any) -> ModelT:
    """Validate a backend body, raising MalformedResponseError on a shape mismatch."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise MalformedResponseError(
            f"Unexpected {model.__name__} payload: {e.error_count()} validation error(s)"
        ) from e


class UserProfile(BaseModel):
    """Profile fields shown and edited by the user."""

    name: str
    rollno: str
    department: str
    email: str
    phoneno: int
    yearofstudy: int


class User(UserProfile):
    """Authenticated user as returned by login/signup/status."""

    id: int | None = None


class EventListItem(BaseModel):
    """Event from the past/ongoing/upcoming listings."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    about: str = ""
    date: ApiDate = None
    end_date: ApiDate = Field(default=None, alias="endDate")
    venue: str = ""
    event_type: str = ""
    event_category: str = ""
    min_no_member: int = 1
    max_no_member: int = 1
    club_name: str | None = None
    chief_guest: str | None = None
    status: EventStatus = "upcoming"


class TeamMember(BaseModel):
    id: int
    name: str
    email: str
    rollno: str
    department: str
    yearofstudy: int


class RegisteredEventData(BaseModel):
    """Event embedded in a registration record."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    about: str = ""
    date: ApiDate = None
    end_date: ApiDate = Field(default=None, alias="endDate")
    venue: str = ""
    event_type: str = ""
    event_category: str = ""
    chief_guest: str | None = None
    min_no_member: int = 1
    max_no_member: int = 1


class RegisteredEvent(BaseModel):
    """A team the current user belongs to, with its event."""

    team_id: int
    team_name: str | None = None
    event: RegisteredEventData
    members: list[TeamMember] = []


class InviteWithDetails(BaseModel):
    """Pending invitation addressed to the current user."""

    model_config = ConfigDict(populate_by_name=True)

    event_id: int
    event_name: str
    from_user_name: str
    team_name: str = Field(alias="teamName")
    from_team_id: int


class MembershipDetails(BaseModel):
    """Club membership of the current user."""

    id: int
    role: str
    name: str


# =============================================================================
# RESPONSE ENVELOPES
# =============================================================================


class MessageResponse(BaseModel):
    message: str = ""


class AuthResponse(MessageResponse):
    user: User


class StatusResponse(BaseModel):
    user: User


class PasswordResetTokenResponse(MessageResponse):
    token: str


class EventListResponse(MessageResponse):
    data: list[EventListItem] = []


class RegisteredEventsResponse(MessageResponse):
    data: list[RegisteredEvent] = []


class InvitationsResponse(MessageResponse):
    data: list[InviteWithDetails] = []


class MembershipDetailsResponse(MessageResponse):
    data: list[MembershipDetails] = []


class ProfileResponse(MessageResponse):
    profile: UserProfile


class UpdateProfileResponse(MessageResponse):
    profile: UserProfile


class RegistrationResponse(MessageResponse):
    team_name: str | None = None


class TeamMembersResponse(BaseModel):
    team_id: int
    members: list[TeamMember] = []


class UserIdResponse(BaseModel):
    user_id: int
