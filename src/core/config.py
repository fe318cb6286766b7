"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.environ.get("EVENTS_DB_PATH", PROJECT_ROOT / "data" / "db" / "campus-events.db"))

# =============================================================================
# BACKEND CONFIGURATION (from environment)
# =============================================================================

BACKEND_URL = os.environ.get("EVENTS_BACKEND_URL", "http://localhost:3000")
HTTP_TIMEOUT_SECONDS = float(os.environ.get("HTTP_TIMEOUT_SECONDS", "30"))
REQUEST_LOG_ENABLED = os.environ.get("REQUEST_LOG_ENABLED", "false").lower() == "true"

# =============================================================================
# ENDPOINTS
# =============================================================================

AUTH_BASE = "/auth/user"
USER_BASE = "/user"

LOGIN_PATH = f"{AUTH_BASE}/login"
SIGNUP_PATH = f"{AUTH_BASE}/signup"
LOGOUT_PATH = f"{AUTH_BASE}/logout"
REFRESH_PATH = f"{AUTH_BASE}/getnewaccesstoken"
STATUS_PATH = f"{AUTH_BASE}/status"
EMAIL_CODE_PATH = f"{AUTH_BASE}/generateemailcode"
RESET_CODE_PATH = f"{AUTH_BASE}/generatecode"
VERIFY_RESET_CODE_PATH = f"{AUTH_BASE}/verifycode"
RESET_PASSWORD_PATH = f"{AUTH_BASE}/resetpassword"

# A 401 from these never triggers a token refresh
NO_REFRESH_PATHS = (LOGIN_PATH, SIGNUP_PATH, REFRESH_PATH, STATUS_PATH)

REGISTER_PATH = f"{USER_BASE}/register"
SEND_INVITATION_PATH = f"{USER_BASE}/sendTeamInvitaion"  # backend spelling
ACCEPT_INVITATION_PATH = f"{USER_BASE}/acceptTeamInvite"
REJECT_INVITATION_PATH = f"{USER_BASE}/rejectTeamInvite"
MEMBERSHIP_PATH = f"{USER_BASE}/membershipDetails"
INVITATIONS_PATH = f"{USER_BASE}/fetch/invitations"
PROFILE_PATH = f"{USER_BASE}/fetch/profile"
UPDATE_PROFILE_PATH = f"{USER_BASE}/update/profile"
REGISTERED_EVENTS_PATH = f"{USER_BASE}/registeredevents"
FEEDBACK_PATH = f"{USER_BASE}/feedback"
USER_BY_ROLLNO_PATH = f"{USER_BASE}/getUserIdByRollNo"
TEAM_MEMBERS_PATH = f"{USER_BASE}/fetchTeamMembersOfEvent"
REMOVE_MEMBER_PATH = f"{USER_BASE}/removeTeamMember"
PAST_EVENTS_PATH = f"{USER_BASE}/events/past"
ONGOING_EVENTS_PATH = f"{USER_BASE}/events/ongoing"
UPCOMING_EVENTS_PATH = f"{USER_BASE}/events/upcoming"

# =============================================================================
# TIMELINE CONFIGURATION
# =============================================================================

DAY_WIDTH = 100  # px per day

TIMELINE_MONTHS_BEFORE = 6
TIMELINE_MONTHS_AFTER = 6

DRAG_SENSITIVITY = 1.5
DRAG_THRESHOLD_PX = 5

REGISTERED_COLOR = "#8b5cf6"
STATUS_COLORS = {
    "ongoing": "#10b981",
    "upcoming": "#3b82f6",
    "past": "#6b7280",
}
DEFAULT_COLOR = "#6b7280"

UNDATED_GROUP_LABEL = "TBA"

# =============================================================================
# VALIDATION RULES
# =============================================================================

MIN_PASSWORD_LENGTH = 6
MIN_PHONE_DIGITS = 10
PROFILE_PHONE_DIGITS = 10
YEAR_OF_STUDY_RANGE = (1, 4)
RESET_CODE_LENGTH = 6
FEEDBACK_RATING_RANGE = (1, 5)

EVENT_FILTERS = ("all", "ongoing", "upcoming", "technical", "non-technical")

DEPARTMENTS = [
    "Computer Science and Engineering",
    "CSE (AI & ML)",
    "Information Technology",
    "Electronics and Communication Engineering",
    "Electrical and Electronics Engineering",
    "Mechanical Engineering",
    "Civil Engineering",
    "Chemical Engineering",
    "Aerospace Engineering",
    "Biomedical Engineering",
    "Other",
]
