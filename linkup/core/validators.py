"""
Field validators shared by the request schemas.

Each ``validate_*`` function is a pure predicate. The ``*_MESSAGE`` constants are
the user-facing explanations returned in 400 responses.
"""
import re
from typing import Optional

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]{3,20}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$"
)
IMAGE_URL_PATTERN = re.compile(r"^https?://[^\s$.?#].[^\s]*$", re.IGNORECASE)
IMAGE_EXTENSIONS = ("jpeg", "jpg", "png", "webp")
CODE_PATTERN = re.compile(r"^\d{4}$")

USERNAME_MESSAGE = (
    "Username must be 3-20 characters long and can only contain letters, numbers, and underscores."
)
EMAIL_MESSAGE = "Please provide a valid email address."
PASSWORD_MESSAGE = (
    "Password must be at least 8 characters long and include at least one uppercase letter, "
    "one lowercase letter, one number, and one special character."
)
HIGHLIGHT_TITLE_MESSAGE = "Title must be 2-50 characters"
IMAGE_URL_MESSAGE = "Image URL must be a valid http(s) URL ending in .jpeg, .jpg, .png or .webp"
CODE_MESSAGE = "Verification code must be 4 digits"


def validate_username(username: Optional[str]) -> bool:
    return bool(username) and USERNAME_PATTERN.fullmatch(username) is not None


def validate_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.fullmatch(email) is not None


def validate_password(password: Optional[str]) -> bool:
    return bool(password) and PASSWORD_PATTERN.fullmatch(password) is not None


def validate_highlight_title(title: Optional[str]) -> bool:
    if title is None:
        return False
    return 2 <= len(title.strip()) <= 50


def validate_image_url(url: Optional[str]) -> bool:
    if not url or IMAGE_URL_PATTERN.fullmatch(url) is None:
        return False
    path = url.split("?", 1)[0].split("#", 1)[0]
    return path.lower().rsplit(".", 1)[-1] in IMAGE_EXTENSIONS


def validate_verification_code(code: Optional[str]) -> bool:
    return bool(code) and CODE_PATTERN.fullmatch(code) is not None


def normalize_email(email: str) -> str:
    """Lower-case an address and drop the dots Gmail ignores in the local part."""
    email = email.strip().lower()
    local, _, domain = email.partition("@")
    if domain in ("gmail.com", "googlemail.com"):
        local = local.replace(".", "")
    return f"{local}@{domain}"
