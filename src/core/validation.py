"""
Form validation for signup, profile, password reset and feedback.

Each validator returns a dict mapping field name to error message; an empty
dict means the form is valid.
"""

import re

from core.config import (
    DEPARTMENTS,
    FEEDBACK_RATING_RANGE,
    MIN_PASSWORD_LENGTH,
    MIN_PHONE_DIGITS,
    PROFILE_PHONE_DIGITS,
    RESET_CODE_LENGTH,
    YEAR_OF_STUDY_RANGE,
)
from core.errors import ValidationError

EMAIL_RE = re.compile(r"\S+@\S+\.\S+")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.search(email or ""))


def _phone_digits(phoneno) -> int:
    """Number of digits in the phone number (0 if missing)."""
    if not phoneno:
        return 0
    return sum(ch.isdigit() for ch in str(phoneno))


def _check_year(yearofstudy, errors: dict[str, str]):
    low, high = YEAR_OF_STUDY_RANGE
    if not isinstance(yearofstudy, int) or isinstance(yearofstudy, bool) or not low <= yearofstudy <= high:
        errors["yearofstudy"] = f"Year of study must be between {low} and {high}"


def _check_password(password: str, confirm_password: str, errors: dict[str, str]):
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"

    if not confirm_password:
        errors["confirm_password"] = "Please confirm your password"
    elif password != confirm_password:
        errors["confirm_password"] = "Passwords do not match"


def validate_signup(form: dict) -> dict[str, str]:
    """
    Validate the signup form.

    Checks:
    1. Name and roll number are present
    2. Password length and confirmation
    3. Department is one of the offered departments
    4. Email format, phone number length, year of study
    """
    errors: dict[str, str] = {}

    if not (form.get("name") or "").strip():
        errors["name"] = "Name is required"
    if not (form.get("rollno") or "").strip():
        errors["rollno"] = "Roll number is required"

    _check_password(form.get("password") or "", form.get("confirm_password") or "", errors)

    department = form.get("department")
    if not department:
        errors["department"] = "Department is required"
    elif department not in DEPARTMENTS:
        errors["department"] = f"Unknown department '{department}'"

    email = form.get("email")
    if not email:
        errors["email"] = "Email is required"
    elif not is_valid_email(email):
        errors["email"] = "Email is invalid"

    if _phone_digits(form.get("phoneno")) < MIN_PHONE_DIGITS:
        errors["phoneno"] = "Valid phone number is required"

    _check_year(form.get("yearofstudy"), errors)

    return errors


def validate_profile_update(form: dict) -> dict[str, str]:
    """Validate the profile edit form (stricter phone rule than signup)."""
    errors: dict[str, str] = {}

    if not (form.get("name") or "").strip():
        errors["name"] = "Name is required"
    if not form.get("department"):
        errors["department"] = "Department is required"

    email = form.get("email")
    if not email:
        errors["email"] = "Email is required"
    elif not is_valid_email(email):
        errors["email"] = "Email is invalid"

    if _phone_digits(form.get("phoneno")) != PROFILE_PHONE_DIGITS:
        errors["phoneno"] = f"Phone number must be {PROFILE_PHONE_DIGITS} digits"

    _check_year(form.get("yearofstudy"), errors)

    return errors


def validate_login(rollno: str, password: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not (rollno or "").strip():
        errors["rollno"] = "Roll number is required"
    if not password:
        errors["password"] = "Password is required"
    return errors


def validate_reset_code(code: str) -> dict[str, str]:
    if len((code or "").strip()) != RESET_CODE_LENGTH:
        return {"code": f"Please enter a valid {RESET_CODE_LENGTH}-digit code"}
    return {}


def validate_new_password(password: str, confirm_password: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    _check_password(password, confirm_password, errors)
    return errors


def validate_feedback(feedback: str, rating: int) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not (feedback or "").strip():
        errors["feedback"] = "Feedback is required"
    low, high = FEEDBACK_RATING_RANGE
    if not isinstance(rating, int) or not low <= rating <= high:
        errors["rating"] = f"Rating must be between {low} and {high}"
    return errors


def raise_for_errors(errors: dict[str, str]):
    """Raise ValidationError if any field failed."""
    if errors:
        raise ValidationError(errors)
