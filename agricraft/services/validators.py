import re
from typing import Optional

from ..errors import ValidationError

VALID_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp", "image/avif")

FILENAME_RE = re.compile(r"[a-zA-Z0-9_\-. ]+")
PHONE_RE = re.compile(r"[0-9+\-() ]+")
USER_ID_RE = re.compile(r"[a-zA-Z0-9_\-]+")

USER_ROLES = ("farmer", "buyer", "admin")


def validate_image_file(content_type: Optional[str], filename: Optional[str]) -> None:
    if content_type not in VALID_IMAGE_TYPES:
        raise ValidationError("Invalid file type. Please upload JPEG, PNG, GIF, WEBP, or AVIF images.")
    if not filename or not FILENAME_RE.fullmatch(filename):
        raise ValidationError("Filename must contain only English letters and numbers.")


def validate_price(raw) -> float:
    try:
        price = float(raw)
    except (TypeError, ValueError):
        price = None
    # NaN fails the comparison as well
    if price is None or not price > 0:
        raise ValidationError("Please enter a valid price greater than 0.")
    return price


def validate_phone(raw: Optional[str]) -> str:
    if not raw or not PHONE_RE.fullmatch(raw):
        raise ValidationError("Please enter a valid phone number.")
    return raw


def validate_title(raw: Optional[str]) -> str:
    title = (raw or "").strip()
    if not title:
        raise ValidationError("Please enter a product title.")
    return title


def validate_feedback_message(raw: Optional[str]) -> str:
    message = (raw or "").strip()
    if not message:
        raise ValidationError("Please enter your feedback message.")
    return message


def validate_user_id(raw: Optional[str]) -> str:
    # ends up inside storage object names
    if not raw or not USER_ID_RE.fullmatch(raw):
        raise ValidationError("Invalid user id.")
    return raw


def validate_role(raw: Optional[str]) -> str:
    if raw not in USER_ROLES:
        raise ValidationError("Role must be one of farmer, buyer or admin.")
    return raw
