"""
Timeline layout: visible days, month header segments, event geometry with
row packing, and drag/wheel panning of the horizontal strip.
"""

from datetime import date, datetime, timedelta
from typing import Callable

from dateutil.relativedelta import relativedelta

from core.config import (
    DAY_WIDTH,
    DRAG_SENSITIVITY,
    DRAG_THRESHOLD_PX,
    TIMELINE_MONTHS_AFTER,
    TIMELINE_MONTHS_BEFORE,
    UNDATED_GROUP_LABEL,
)
from models.events import MonthGroup, MonthSegment, PositionedEvent


def to_date(value) -> date | None:
    """Coerce an API date value (ISO string, date, datetime) to a date; None if unusable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()
    except ValueError:
        return None


# =============================================================================
# VISIBLE WINDOW
# =============================================================================


def compute_visible_days(
    months_before: int = TIMELINE_MONTHS_BEFORE,
    months_after: int = TIMELINE_MONTHS_AFTER,
    today: date | None = None,
) -> list[date]:
    """
    One entry per day from `months_before` months before today to
    `months_after` months after today, inclusive.

    Month arithmetic clamps to the end of shorter months (Aug 31 - 6 months
    is Feb 28/29).
    """
    if months_before < 0 or months_after < 0:
        raise ValueError("Window sizes must be non-negative")

    today = today or date.today()
    start = today - relativedelta(months=months_before)
    end = today + relativedelta(months=months_after)

    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def group_by_month(days: list[date]) -> list[MonthSegment]:
    """Split the day sequence into contiguous per-month header segments."""
    segments: list[MonthSegment] = []
    start_index = 0

    for i in range(1, len(days) + 1):
        first = days[start_index]
        if i < len(days) and (days[i].year, days[i].month) == (first.year, first.month):
            continue
        segments.append(
            {
                "key": f"{first.year}-{first.month:02d}",
                "label": first.strftime("%B %Y"),
                "start_index": start_index,
                "length": i - start_index,
            }
        )
        start_index = i

    return segments


def day_index(days: list[date], day: date) -> int | None:
    """Position of `day` in the visible window, or None if outside it."""
    if not days:
        return None
    offset = (day - days[0]).days
    if 0 <= offset < len(days):
        return offset
    return None


# =============================================================================
# EVENT LAYOUT
# =============================================================================


def layout_events(
    events: list[dict],
    days: list[date],
    day_width: int = DAY_WIDTH,
    today: date | None = None,
) -> list[PositionedEvent]:
    """
    Position dated events on the strip and pack them into rows.

    Events without a date are skipped; callers list them separately. Bad
    dates never raise: an unreadable start falls back to today, an unreadable
    end to start + 1 day, and every event is at least one day wide.

    Rows are assigned greedily in input order: each event takes the lowest
    row whose last extent ends at or before the event's left edge. Events
    that overlap never share a row; the row count is not guaranteed minimal.
    """
    if not days:
        return []

    first_day = days[0]
    row_ends: list[int] = []
    positioned: list[PositionedEvent] = []

    for event in events:
        if not event.get("date"):
            continue

        start = to_date(event["date"]) or today or date.today()
        end = to_date(event.get("end_date") or event["date"]) or start + timedelta(days=1)

        # Events starting before the window are pinned to its left edge
        start_offset = max(0, (start - first_day).days)
        end_offset = (end - first_day).days
        duration = max(1, end_offset - start_offset)

        left = start_offset * day_width
        width = duration * day_width

        row = next((i for i, row_end in enumerate(row_ends) if row_end <= left), len(row_ends))
        if row == len(row_ends):
            row_ends.append(left + width)
        else:
            row_ends[row] = left + width

        positioned.append(
            {**event, "start": start, "end": end, "left": left, "width": width, "row": row}
        )

    return positioned


def row_count(positioned: list[PositionedEvent]) -> int:
    return max((event["row"] for event in positioned), default=-1) + 1


def group_events_by_month(events: list[dict]) -> list[MonthGroup]:
    """
    Group events for the vertical list view.

    Most recent first, one group per '<Month> <Year>'; events without a
    usable date go into a trailing 'TBA' group.
    """
    dated = [event for event in events if to_date(event.get("date"))]
    undated = [event for event in events if not to_date(event.get("date"))]
    dated.sort(key=lambda event: to_date(event["date"]), reverse=True)

    groups: list[MonthGroup] = []
    for event in dated:
        label = to_date(event["date"]).strftime("%B %Y")
        if not groups or groups[-1]["label"] != label:
            groups.append({"label": label, "events": []})
        groups[-1]["events"].append(event)

    if undated:
        groups.append({"label": UNDATED_GROUP_LABEL, "events": undated})

    return groups


# =============================================================================
# PANNING
# =============================================================================


class DragScroller:
    """
    Horizontal scroll state of the timeline strip.

    Pointer and touch input share the same gesture handling:
    Idle -> (pointer_down) -> Dragging -> (pointer_up) -> Idle.
    A gesture that moved more than the threshold is a drag, and the click
    fired on release is suppressed so dragging never opens an event.
    """

    def __init__(
        self,
        content_width: float = 0,
        viewport_width: float | None = None,
        sensitivity: float = DRAG_SENSITIVITY,
        threshold: float = DRAG_THRESHOLD_PX,
        call_soon: Callable[[Callable[[], None]], object] | None = None,
    ):
        self.content_width = content_width
        self.viewport_width = viewport_width
        self.sensitivity = sensitivity
        self.threshold = threshold
        self.call_soon = call_soon

        self.scroll_left = 0.0
        self.dragging = False
        self.prevent_click = False
        self._start_x = 0.0
        self._start_scroll_left = 0.0

    @classmethod
    def for_days(cls, days: list[date], viewport_width: float | None = None, day_width: int = DAY_WIDTH, **kwargs):
        return cls(content_width=len(days) * day_width, viewport_width=viewport_width, **kwargs)

    @property
    def max_scroll_left(self) -> float | None:
        if self.viewport_width is None:
            return None
        return max(0.0, self.content_width - self.viewport_width)

    def set_scroll_left(self, value: float) -> float:
        """Set the offset, clamped to the scrollable range when the viewport is known."""
        value = max(0.0, value)
        if self.max_scroll_left is not None:
            value = min(value, self.max_scroll_left)
        self.scroll_left = value
        return self.scroll_left

    def scroll_by(self, amount: float) -> float:
        return self.set_scroll_left(self.scroll_left + amount)

    def center_on(self, days: list[date], day: date, day_width: int = DAY_WIDTH) -> float:
        """Scroll so that `day` sits in the middle of the viewport (no-op outside the window)."""
        index = day_index(days, day)
        if index is None:
            return self.scroll_left
        viewport = self.viewport_width or 0
        return self.set_scroll_left(index * day_width - (viewport - day_width) / 2)

    # -------------------------------------------------------------------------
    # Gesture handlers
    # -------------------------------------------------------------------------

    def pointer_down(self, x: float):
        self.dragging = True
        self._start_x = x
        self._start_scroll_left = self.scroll_left
        self.prevent_click = False

    def pointer_move(self, x: float) -> bool:
        """Pan while dragging. Returns True if the move was consumed."""
        if not self.dragging:
            return False
        delta = (x - self._start_x) * self.sensitivity
        if abs(delta) > self.threshold:
            self.prevent_click = True
        self.set_scroll_left(self._start_scroll_left - delta)
        return True

    def pointer_up(self):
        if not self.dragging:
            return
        self.dragging = False
        # The click for this release fires first, then the flag is cleared
        if self.call_soon is not None:
            self.call_soon(self._release_click)

    def _release_click(self):
        self.prevent_click = False

    def click(self) -> bool:
        """Whether a click on an event should go through (False right after a drag)."""
        allowed = not self.prevent_click
        self.prevent_click = False
        return allowed

    def wheel(self, delta_x: float, delta_y: float) -> bool:
        """Redirect a mostly-vertical wheel to horizontal scroll. Returns True if handled."""
        if abs(delta_y) > abs(delta_x):
            self.scroll_by(delta_y)
            return True
        return False
