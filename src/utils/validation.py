import re
from typing import Callable, Dict, Mapping

Errors = Dict[str, str]

LOOSE_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
REG_PHONE_RE = re.compile(r"^[0-9+\-\s()]{8,15}$")
PHONE_RE = re.compile(r"^[+]?[0-9\s\-()]+$")
POSTAL_CODE_RE = re.compile(r"^\d{5}$")

MIN_PASSWORD_LENGTH = 8


def _text(form: Mapping[str, object], key: str) -> str:
    return str(form.get(key) or "")


def _password_problem(pwd: str) -> str:
    """Empty string when the password is strong enough."""
    if len(pwd) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if not (
        re.search(r"[a-z]", pwd) and re.search(r"[A-Z]", pwd) and re.search(r"\d", pwd)
    ):
        return "Password needs an uppercase letter, a lowercase letter and a digit"
    return ""


def validate_registration(
    form: Mapping[str, object], email_available: Callable[[str], bool]
) -> Errors:
    """
    Validate the sign-up form.

    Returns:
        Errors: field name -> message, empty when the form is valid.
    """
    errors: Errors = {}

    for key, label in (("first_name", "First name"), ("last_name", "Last name")):
        value = _text(form, key).strip()
        if not value:
            errors[key] = f"{label} is required"
        elif len(value) < 2:
            errors[key] = f"{label} must be at least 2 characters"

    email = _text(form, "email")
    if not email:
        errors["email"] = "Email is required"
    elif not LOOSE_EMAIL_RE.search(email):
        errors["email"] = "Email is not valid"
    elif not email_available(email):
        errors["email"] = "This email is already registered"

    phone = _text(form, "phone")
    if not phone:
        errors["phone"] = "Phone is required"
    elif not REG_PHONE_RE.match(phone):
        errors["phone"] = "Phone is not valid"

    pwd = _text(form, "password")
    if not pwd:
        errors["password"] = "Password is required"
    elif _password_problem(pwd):
        errors["password"] = _password_problem(pwd)

    confirm = _text(form, "confirm_password")
    if not confirm:
        errors["confirm_password"] = "Please confirm your password"
    elif confirm != pwd:
        errors["confirm_password"] = "Passwords do not match"

    if not form.get("accept_terms"):
        errors["accept_terms"] = "You must accept the terms and conditions"

    return errors


def validate_profile(form: Mapping[str, object]) -> Errors:
    errors: Errors = {}
    if not _text(form, "first_name").strip():
        errors["first_name"] = "First name is required"
    if not _text(form, "last_name").strip():
        errors["last_name"] = "Last name is required"

    email = _text(form, "email").strip()
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_RE.match(email):
        errors["email"] = "Please enter a valid email"

    phone = _text(form, "phone")
    if phone and not PHONE_RE.match(phone):
        errors["phone"] = "Please enter a valid phone number"

    postal_code = _text(form, "postal_code")
    if postal_code and not POSTAL_CODE_RE.match(postal_code):
        errors["postal_code"] = "Postal code must have 5 digits"
    return errors


def validate_contact(form: Mapping[str, object]) -> Errors:
    errors: Errors = {}
    if not _text(form, "name").strip():
        errors["name"] = "Please enter your name"

    email = _text(form, "email").strip()
    if not email:
        errors["email"] = "Please enter your email"
    elif not EMAIL_RE.match(email):
        errors["email"] = "Please enter a valid email"

    if not _text(form, "message").strip():
        errors["message"] = "Please enter your message"
    return errors


def validate_password_change(current: str, new: str, confirm: str) -> Errors:
    errors: Errors = {}
    if not current:
        errors["current"] = "Current password is required"
    if not new:
        errors["new"] = "New password is required"
    elif _password_problem(new):
        errors["new"] = _password_problem(new)
    elif new == current:
        errors["new"] = "New password must differ from the current one"
    if not confirm:
        errors["confirm"] = "Please confirm your new password"
    elif confirm != new:
        errors["confirm"] = "Passwords do not match"
    return errors
