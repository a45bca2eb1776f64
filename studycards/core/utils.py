import re
from datetime import datetime, timezone
from uuid import uuid4

from studycards.core.errors import InvalidArgumentError

UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)


def generate_uuid() -> str:
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_valid_uuid(value) -> bool:
    return isinstance(value, str) and UUID_RE.fullmatch(value) is not None


def require_uuid(value, label: str) -> str:
    """Return ``value`` lower-cased, or raise if it is not a canonical UUID."""
    if not is_valid_uuid(value):
        raise InvalidArgumentError(f"Invalid {label} format")
    return value.lower()


def clean_text(value, label: str, max_length: int) -> str:
    """Strip ``value`` and check it is non-empty and at most ``max_length`` long."""
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{label} must be a string")
    if not value.strip():
        raise InvalidArgumentError(f"{label} cannot be empty")
    value = value.strip()
    if len(value) > max_length:
        raise InvalidArgumentError(f"{label} cannot exceed {max_length} characters")
    return value
