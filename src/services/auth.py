"""
Account session: signup with email verification, login/logout, status and
the password reset flow.
"""

from core.config import (
    EMAIL_CODE_PATH,
    LOGIN_PATH,
    LOGOUT_PATH,
    RESET_CODE_PATH,
    RESET_PASSWORD_PATH,
    SIGNUP_PATH,
    STATUS_PATH,
    VERIFY_RESET_CODE_PATH,
)
from core.errors import ApiError, EmailVerificationRequired, SessionExpiredError, ValidationError
from core.http_client import ApiClient
from core.validation import (
    raise_for_errors,
    validate_login,
    validate_new_password,
    validate_reset_code,
    validate_signup,
)
from models.responses import (
    AuthResponse,
    MessageResponse,
    PasswordResetTokenResponse,
    StatusResponse,
    User,
    parse_response,
)


class AuthSession:
    """
    Tracks who is logged in on top of an ApiClient.

    Credentials themselves live in the client's cookie jar; this object only
    mirrors the current user. It clears itself when the client reports that
    the session expired.
    """

    def __init__(self, client: ApiClient):
        self.client = client
        self.user: User | None = None
        self._unsubscribe = client.on_session_expired(self._on_session_expired)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def clear(self):
        self.user = None

    def close(self):
        """Stop listening for session expiry."""
        self._unsubscribe()

    def _on_session_expired(self, error: SessionExpiredError):
        print(f"  {error.message}")
        self.clear()

    # -------------------------------------------------------------------------
    # Signup / login
    # -------------------------------------------------------------------------

    async def generate_email_code(self, rollno: str) -> str:
        """Ask the backend to email a verification code for this roll number."""
        data = await self.client.post(EMAIL_CODE_PATH, json={"rollno": rollno})
        return parse_response(MessageResponse, data or {}).message

    async def signup(self, form: dict):
        """
        Start signup: validate the form and request an email code.

        Always ends with EmailVerificationRequired on success; finish with
        complete_signup() once the user has the code.
        """
        raise_for_errors(validate_signup(form))
        message = await self.generate_email_code(form["rollno"].strip())
        raise EmailVerificationRequired(message or "Verification code sent to your email")

    async def complete_signup(self, form: dict, code: str) -> User:
        raise_for_errors(validate_signup(form))
        if not (code or "").strip():
            raise ValidationError({"code": "Verification code is required"})

        payload = {key: value for key, value in form.items() if key != "confirm_password"}
        payload["code"] = code.strip()

        response = parse_response(AuthResponse, await self.client.post(SIGNUP_PATH, json=payload))
        self.user = response.user
        return self.user

    async def signin(self, rollno: str, password: str) -> User:
        raise_for_errors(validate_login(rollno, password))
        data = await self.client.post(LOGIN_PATH, json={"rollno": rollno.strip(), "password": password})
        self.user = parse_response(AuthResponse, data).user
        return self.user

    async def logout(self):
        """Log out on the backend; local state is cleared even if that fails."""
        try:
            await self.client.post(LOGOUT_PATH)
        except ApiError as e:
            print(f"  Logout request failed, clearing local session anyway: {e}")
        finally:
            self.clear()

    # -------------------------------------------------------------------------
    # Session status
    # -------------------------------------------------------------------------

    async def load_current_user(self) -> User:
        data = await self.client.get(STATUS_PATH)
        # Status answers either {"user": {...}} or the bare profile
        if isinstance(data, dict) and "user" in data:
            self.user = parse_response(StatusResponse, data).user
        else:
            self.user = parse_response(User, data)
        return self.user

    async def check_status(self) -> bool:
        """True if the backend recognises the current session. Never raises."""
        try:
            await self.load_current_user()
            return True
        except ApiError:
            self.clear()
            return False

    async def refresh(self) -> User:
        """Refresh the access token explicitly and reload the user."""
        try:
            await self.client.refresh_access_token()
            return await self.load_current_user()
        except ApiError:
            self.clear()
            raise

    # -------------------------------------------------------------------------
    # Password reset
    # -------------------------------------------------------------------------

    async def request_password_reset(self, rollno: str) -> str:
        if not (rollno or "").strip():
            raise ValidationError({"rollno": "Roll number is required"})
        data = await self.client.post(RESET_CODE_PATH, json={"rollno": rollno.strip()})
        return parse_response(MessageResponse, data or {}).message

    async def verify_reset_code(self, rollno: str, code: str) -> str:
        """Exchange the emailed code for a one-time reset token."""
        raise_for_errors(validate_reset_code(code))
        data = await self.client.post(
            VERIFY_RESET_CODE_PATH, json={"rollno": rollno.strip(), "code": code.strip()}
        )
        return parse_response(PasswordResetTokenResponse, data).token

    async def reset_password(self, rollno: str, password: str, confirm_password: str, token: str) -> str:
        raise_for_errors(validate_new_password(password, confirm_password))
        data = await self.client.post(
            RESET_PASSWORD_PATH,
            json={"rollno": rollno.strip(), "password": password, "token": token},
        )
        return parse_response(MessageResponse, data or {}).message
