"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.http_client import ApiClient  # noqa: E402


class FakeBackend:
    """
    In-memory stand-in for the events backend.

    Each (method, path) route holds a queue of replies; the last reply keeps
    repeating once the queue is down to one. A reply is (status, json_body)
    or the string "network" to simulate a connection failure.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], list] = {}
        self.calls: list[httpx.Request] = []

    def add(self, method: str, path: str, *replies):
        self.routes.setdefault((method, path), []).extend(replies)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": "Not found"})

        reply = queue[0] if len(queue) == 1 else queue.pop(0)
        if reply == "network":
            raise httpx.ConnectError("Connection refused", request=request)
        status, body = reply
        return httpx.Response(status, json=body)

    def count(self, method: str, path: str) -> int:
        return sum(1 for r in self.calls if r.method == method and r.url.path == path)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
async def client(backend):
    api = ApiClient(
        base_url="http://testserver",
        transport=httpx.MockTransport(backend.handler),
        request_log_enabled=False,
    )
    yield api
    await api.aclose()


@pytest.fixture
def sample_user():
    """Sample user record as returned by login/status."""
    return {
        "id": 7,
        "name": "Asha Verma",
        "rollno": "21CS001",
        "department": "Computer Science and Engineering",
        "email": "asha@college.edu",
        "phoneno": 9876543210,
        "yearofstudy": 3,
    }


@pytest.fixture
def signup_form(sample_user):
    return {
        **{k: v for k, v in sample_user.items() if k != "id"},
        "password": "secret123",
        "confirm_password": "secret123",
    }


@pytest.fixture
def sample_event():
    """Sample event listing item."""
    return {
        "id": 1,
        "name": "Hackathon",
        "about": "24 hour build",
        "date": "2026-01-05",
        "endDate": "2026-01-06",
        "venue": "Main Hall",
        "event_type": "Technical",
        "event_category": "Competition",
        "min_no_member": 2,
        "max_no_member": 4,
        "club_name": "Coding Club",
        "status": "upcoming",
    }


@pytest.fixture
def sample_registration(sample_event, sample_user):
    """Registration record for sample_event with one member."""
    event = {k: v for k, v in sample_event.items() if k not in ("club_name", "status")}
    member = {k: v for k, v in sample_user.items() if k != "phoneno"}
    return {
        "team_id": 31,
        "team_name": "Byte Me",
        "event": event,
        "members": [member],
    }
