"""
Data models for timeline rendering.

Using TypedDict for the per-render event dictionaries; they are rebuilt from
the API responses on every fetch and never mutated in place.
"""

from datetime import date
from typing import TypedDict


class TimelineEvent(TypedDict):
    """Event prepared for the timeline (before layout)."""
    id: int
    name: str
    date: str | date | None
    end_date: str | date | None
    venue: str
    description: str
    team_name: str | None
    is_registered: bool
    event_type: str
    event_category: str
    color: str
    status: str


class PositionedEvent(TimelineEvent):
    """Timeline event with resolved dates and pixel geometry."""
    start: date
    end: date
    left: int
    width: int
    row: int


class MonthSegment(TypedDict):
    """Month header cell spanning a run of visible days."""
    key: str
    label: str
    start_index: int
    length: int


class MonthGroup(TypedDict):
    """Events listed under one month heading (or 'TBA')."""
    label: str
    events: list[TimelineEvent]
