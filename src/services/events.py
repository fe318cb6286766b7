"""
Event listings from the backend and preparation for the timeline views.
"""

import asyncio
from typing import Literal

from core.config import (
    DEFAULT_COLOR,
    EVENT_FILTERS,
    ONGOING_EVENTS_PATH,
    PAST_EVENTS_PATH,
    REGISTERED_COLOR,
    REGISTERED_EVENTS_PATH,
    STATUS_COLORS,
    UPCOMING_EVENTS_PATH,
)
from core.errors import ApiError
from core.http_client import ApiClient
from models.events import TimelineEvent
from models.responses import (
    EventListItem,
    EventListResponse,
    RegisteredEvent,
    RegisteredEventsResponse,
    parse_response,
)

TimelineMode = Literal["registered", "all"]


async def fetch_past_events(client: ApiClient) -> list[EventListItem]:
    return parse_response(EventListResponse, await client.get(PAST_EVENTS_PATH)).data


async def fetch_ongoing_events(client: ApiClient) -> list[EventListItem]:
    return parse_response(EventListResponse, await client.get(ONGOING_EVENTS_PATH)).data


async def fetch_upcoming_events(client: ApiClient) -> list[EventListItem]:
    return parse_response(EventListResponse, await client.get(UPCOMING_EVENTS_PATH)).data


async def fetch_registered_events(client: ApiClient) -> list[RegisteredEvent]:
    return parse_response(RegisteredEventsResponse, await client.get(REGISTERED_EVENTS_PATH)).data


async def _past_or_empty(client: ApiClient) -> list[EventListItem]:
    try:
        return await fetch_past_events(client)
    except ApiError as e:
        print(f"  Could not load past events, continuing without them: {e}")
        return []


async def fetch_timeline_data(client: ApiClient) -> tuple[list[RegisteredEvent], list[EventListItem]]:
    """
    Load everything the timeline needs in parallel.

    Returns (registered, all_events) where all_events is past + ongoing +
    upcoming. Past events are optional; any other failure propagates.
    """
    registered, past, ongoing, upcoming = await asyncio.gather(
        fetch_registered_events(client),
        _past_or_empty(client),
        fetch_ongoing_events(client),
        fetch_upcoming_events(client),
    )
    return registered, [*past, *ongoing, *upcoming]


async def fetch_active_events(client: ApiClient) -> list[EventListItem]:
    """Ongoing and upcoming events (the ones that can still be registered for)."""
    ongoing, upcoming = await asyncio.gather(
        fetch_ongoing_events(client),
        fetch_upcoming_events(client),
    )
    return [*ongoing, *upcoming]


def find_event(events: list[EventListItem], event_id: int) -> EventListItem | None:
    return next((event for event in events if event.id == event_id), None)


def find_registration(registered: list[RegisteredEvent], event_id: int) -> RegisteredEvent | None:
    return next((reg for reg in registered if reg.event.id == event_id), None)


def event_color(is_registered: bool, status: str) -> str:
    if is_registered:
        return REGISTERED_COLOR
    return STATUS_COLORS.get(status, DEFAULT_COLOR)


def build_timeline_events(
    mode: TimelineMode,
    registered: list[RegisteredEvent],
    all_events: list[EventListItem],
) -> list[TimelineEvent]:
    """
    Flatten API records into timeline events.

    'registered' mode shows only the user's teams; 'all' mode shows every
    event, flagging the ones the user is registered for.
    """
    if mode == "registered":
        return [
            {
                "id": reg.event.id,
                "name": reg.event.name,
                "date": reg.event.date,
                "end_date": reg.event.end_date or reg.event.date,
                "venue": reg.event.venue,
                "description": reg.event.about,
                "team_name": reg.team_name,
                "is_registered": True,
                "event_type": reg.event.event_type,
                "event_category": reg.event.event_category,
                "color": REGISTERED_COLOR,
                "status": "registered",
            }
            for reg in registered
        ]

    if mode != "all":
        raise ValueError(f"Unknown timeline mode '{mode}'")

    timeline_events = []
    for event in all_events:
        registration = find_registration(registered, event.id)
        timeline_events.append(
            {
                "id": event.id,
                "name": event.name,
                "date": event.date,
                "end_date": event.end_date or event.date,
                "venue": event.venue,
                "description": event.about,
                "team_name": registration.team_name if registration else None,
                "is_registered": registration is not None,
                "event_type": event.event_type,
                "event_category": event.event_category,
                "color": event_color(registration is not None, event.status),
                "status": event.status,
            }
        )
    return timeline_events


def filter_events(events: list[EventListItem], filter_type: str) -> list[EventListItem]:
    """Apply one of the dashboard filters: all, ongoing, upcoming, technical, non-technical."""
    if filter_type not in EVENT_FILTERS:
        raise ValueError(f"Unknown event filter '{filter_type}'")

    if filter_type == "all":
        return list(events)
    if filter_type in ("ongoing", "upcoming"):
        return [event for event in events if event.status == filter_type]
    return [event for event in events if _normalize_type(event.event_type) == filter_type]


def _normalize_type(event_type: str) -> str:
    """'Non Technical', 'non_technical' -> 'non-technical'."""
    return "-".join(event_type.strip().lower().replace("_", " ").split())
