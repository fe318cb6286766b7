"""
Tests for the timeline layout engine and drag panning.
"""

import random
from datetime import date, datetime, timedelta

import pytest

from services.timeline import (
    DragScroller,
    compute_visible_days,
    day_index,
    group_by_month,
    group_events_by_month,
    layout_events,
    row_count,
    to_date,
)

TODAY = date(2026, 1, 1)
DAY = 100


@pytest.fixture
def days():
    return compute_visible_days(6, 6, today=TODAY)


def _event(event_id, start, end=None, **extra):
    return {"id": event_id, "name": f"E{event_id}", "date": start, "end_date": end, **extra}


# =============================================================================
# VISIBLE DAYS / MONTH SEGMENTS
# =============================================================================


def test_visible_days_are_contiguous_with_exact_bounds(days):
    assert days[0] == date(2025, 7, 1)
    assert days[-1] == date(2026, 7, 1)
    assert all(b - a == timedelta(days=1) for a, b in zip(days, days[1:]))
    assert len(days) == (date(2026, 7, 1) - date(2025, 7, 1)).days + 1


def test_visible_days_clamp_to_month_end():
    days = compute_visible_days(6, 0, today=date(2026, 8, 31))
    assert days[0] == date(2026, 2, 28)
    assert days[-1] == date(2026, 8, 31)


def test_zero_window_is_just_today():
    assert compute_visible_days(0, 0, today=TODAY) == [TODAY]


def test_negative_window_rejected():
    with pytest.raises(ValueError):
        compute_visible_days(-1, 6, today=TODAY)


def test_month_segments_partition_days(days):
    segments = group_by_month(days)

    assert sum(s["length"] for s in segments) == len(days)
    expected_start = 0
    for segment in segments:
        assert segment["start_index"] == expected_start
        expected_start += segment["length"]

    assert segments[0]["label"] == "July 2025"
    assert segments[0]["length"] == 31
    assert segments[-1]["label"] == "July 2026"
    assert segments[-1]["length"] == 1
    assert [s["key"] for s in segments][:2] == ["2025-07", "2025-08"]
    assert len(segments) == 13


def test_month_segments_empty():
    assert group_by_month([]) == []


def test_day_index(days):
    assert day_index(days, date(2025, 7, 1)) == 0
    assert day_index(days, TODAY) == (TODAY - date(2025, 7, 1)).days
    assert day_index(days, date(2030, 1, 1)) is None
    assert day_index([], TODAY) is None


# =============================================================================
# LAYOUT
# =============================================================================


def test_overlapping_scenario_rows(days):
    a = _event(1, "2026-01-05", "2026-01-05")
    b = _event(2, "2026-01-05", "2026-01-10")
    c = _event(3, "2026-01-08", "2026-01-12")

    positioned = {e["id"]: e for e in layout_events([a, b, c], days)}

    assert positioned[1]["row"] != positioned[2]["row"]
    assert positioned[3]["row"] != positioned[2]["row"]
    assert positioned[3]["row"] == positioned[1]["row"] == 0
    assert positioned[2]["row"] == 1


def test_geometry_uses_day_offsets(days):
    offset = (date(2026, 1, 5) - days[0]).days

    [event] = layout_events([_event(1, "2026-01-05", "2026-01-08")], days, day_width=DAY)

    assert event["left"] == offset * DAY
    assert event["width"] == 3 * DAY
    assert event["start"] == date(2026, 1, 5)
    assert event["end"] == date(2026, 1, 8)


def test_single_day_event_is_one_day_wide(days):
    [event] = layout_events([_event(1, "2026-01-05", "2026-01-05")], days)
    assert event["width"] == 100


def test_event_before_window_is_clamped_to_left_edge(days):
    [event] = layout_events([_event(1, "2025-01-01", "2025-07-04")], days)
    assert event["left"] == 0
    assert event["width"] == 3 * 100


def test_undated_events_are_skipped(days):
    positioned = layout_events([_event(1, None), _event(2, ""), _event(3, "2026-01-02")], days)
    assert [e["id"] for e in positioned] == [3]


def test_malformed_dates_never_raise(days):
    events = [
        _event(1, "2026-01-10", "2026-01-02"),  # end before start
        _event(2, "2026-01-10"),  # missing end
        _event(3, "not-a-date", "2026-01-02"),  # bad start falls back to today
        _event(4, "2026-01-10", "garbage"),  # bad end falls back to start + 1 day
    ]

    positioned = layout_events(events, days, today=TODAY)

    assert [e["width"] for e in positioned] == [100, 100, 100, 100]
    assert positioned[2]["start"] == TODAY
    assert positioned[3]["end"] == date(2026, 1, 11)


def test_accepts_date_and_datetime_objects(days):
    positioned = layout_events(
        [_event(1, date(2026, 1, 5), datetime(2026, 1, 7, 18, 30))], days
    )
    assert positioned[0]["width"] == 200


def test_layout_preserves_event_fields(days):
    [event] = layout_events([_event(1, "2026-01-05", color="#8b5cf6", is_registered=True)], days)
    assert event["color"] == "#8b5cf6"
    assert event["is_registered"] is True
    assert event["name"] == "E1"


def test_no_window_means_nothing_to_place():
    assert layout_events([_event(1, "2026-01-05")], []) == []


def test_same_row_events_never_overlap(days):
    rng = random.Random(42)
    events = []
    for i in range(200):
        start = days[0] + timedelta(days=rng.randrange(-20, len(days)))
        end = start + timedelta(days=rng.randrange(-3, 15))
        events.append(_event(i, start.isoformat(), end.isoformat()))

    positioned = layout_events(events, days)

    by_row: dict[int, list] = {}
    for event in positioned:
        by_row.setdefault(event["row"], []).append((event["left"], event["left"] + event["width"]))
    for intervals in by_row.values():
        intervals.sort()
        for (_, end), (start, _) in zip(intervals, intervals[1:]):
            assert end <= start
    assert all(e["width"] >= 100 for e in positioned)
    assert row_count(positioned) == max(e["row"] for e in positioned) + 1


def test_row_count_empty():
    assert row_count([]) == 0


def test_to_date():
    assert to_date("2026-01-05T10:00:00Z") == date(2026, 1, 5)
    assert to_date("2026-01-05") == date(2026, 1, 5)
    assert to_date(None) is None
    assert to_date("soon") is None


# =============================================================================
# MONTH-GROUPED LIST
# =============================================================================


def test_group_events_by_month_most_recent_first():
    events = [
        _event(1, "2026-01-05"),
        _event(2, None),
        _event(3, "2026-03-01"),
        _event(4, "2026-01-20"),
    ]

    groups = group_events_by_month(events)

    assert [g["label"] for g in groups] == ["March 2026", "January 2026", "TBA"]
    assert [e["id"] for e in groups[1]["events"]] == [4, 1]
    assert [e["id"] for e in groups[2]["events"]] == [2]


# =============================================================================
# PANNING
# =============================================================================


def test_drag_pans_with_sensitivity_and_suppresses_click():
    scroller = DragScroller(content_width=10_000, viewport_width=1_000)
    scroller.set_scroll_left(500)

    scroller.pointer_down(400)
    assert scroller.dragging
    assert scroller.pointer_move(300)
    assert scroller.scroll_left == 500 + 150
    scroller.pointer_up()

    assert not scroller.dragging
    assert scroller.click() is False
    assert scroller.click() is True


def test_small_move_is_not_a_drag():
    scroller = DragScroller(content_width=10_000, viewport_width=1_000)
    scroller.set_scroll_left(500)

    scroller.pointer_down(100)
    scroller.pointer_move(103)  # 4.5px after sensitivity
    scroller.pointer_up()

    assert scroller.scroll_left == 500 - 4.5
    assert scroller.click() is True


def test_move_without_pointer_down_is_ignored():
    scroller = DragScroller()
    assert scroller.pointer_move(50) is False
    assert scroller.scroll_left == 0


def test_pointer_up_schedules_click_release():
    scheduled = []
    scroller = DragScroller(content_width=10_000, viewport_width=1_000, call_soon=scheduled.append)

    scroller.pointer_down(0)
    scroller.pointer_move(-100)
    scroller.pointer_up()
    assert scroller.prevent_click

    for callback in scheduled:
        callback()
    assert not scroller.prevent_click


def test_scroll_is_clamped_to_content():
    scroller = DragScroller(content_width=2_000, viewport_width=500)
    assert scroller.set_scroll_left(-50) == 0
    assert scroller.set_scroll_left(5_000) == 1_500
    assert scroller.scroll_by(-200) == 1_300


def test_vertical_wheel_scrolls_horizontally():
    scroller = DragScroller(content_width=10_000, viewport_width=1_000)

    assert scroller.wheel(0, 120) is True
    assert scroller.scroll_left == 120
    assert scroller.wheel(80, 10) is False
    assert scroller.scroll_left == 120


def test_center_on_today(days):
    scroller = DragScroller.for_days(days, viewport_width=1_000)
    index = day_index(days, TODAY)

    scroller.center_on(days, TODAY)

    assert scroller.content_width == len(days) * 100
    assert scroller.scroll_left == index * 100 - 450
