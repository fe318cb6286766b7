"""
Profile and feedback operations.
"""

from core.config import FEEDBACK_PATH, PROFILE_PATH, UPDATE_PROFILE_PATH
from core.http_client import ApiClient
from core.validation import raise_for_errors, validate_feedback, validate_profile_update
from models.responses import (
    MessageResponse,
    ProfileResponse,
    UpdateProfileResponse,
    UserProfile,
    parse_response,
)

EDITABLE_FIELDS = ("name", "department", "email", "phoneno", "yearofstudy")


async def fetch_profile(client: ApiClient) -> UserProfile:
    return parse_response(ProfileResponse, await client.get(PROFILE_PATH)).profile


async def update_profile(client: ApiClient, form: dict) -> UserProfile:
    """Validate and save profile edits. The roll number is not editable."""
    raise_for_errors(validate_profile_update(form))
    payload = {key: form[key] for key in EDITABLE_FIELDS if key in form}
    if isinstance(payload.get("name"), str):
        payload["name"] = payload["name"].strip()
    return parse_response(UpdateProfileResponse, await client.post(UPDATE_PROFILE_PATH, json=payload)).profile


async def submit_feedback(client: ApiClient, event_id: int, feedback: str, rating: int) -> str:
    raise_for_errors(validate_feedback(feedback, rating))
    data = await client.post(
        FEEDBACK_PATH,
        json={"event_id": event_id, "feedback": feedback.strip(), "rating": rating},
    )
    return parse_response(MessageResponse, data or {}).message
