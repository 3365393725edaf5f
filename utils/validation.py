"""
utils/validation.py
-------------------
Field normalizers used by the domain models and the repositories.

Each normalizer takes a raw value and either returns the cleaned value
or raises InvalidInput / OutOfRange. They are composed per field:

    clean_text     trim -> sanitize -> trim -> reject empty
    bounded_text   clean_text -> reject values over max_length
    enum_member    clean_text -> reject values outside the enum (exact case)
    identifier     UUID / string / 16 raw bytes -> uuid.UUID
    timestamp      datetime / ISO string / None -> aware datetime (UTC)
"""

import re
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional, Type

from utils.errors import InvalidInput, OutOfRange

# A tag, or an unterminated "<" that runs to the end of the value.
_TAG_RE = re.compile(r"<[^>]*(?:>|$)")
# Control characters other than tab, newline and carriage return.
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
# Anything that is not legal in a URL.
_URL_ILLEGAL_RE = re.compile(r"[^A-Za-z0-9$\-_.+!*'(),{}|\\^~\[\]`<>#%\";/?:@&=]")


def sanitize_text(value: str) -> str:
    """Strip markup tags and control characters."""
    return _CONTROL_RE.sub("", _TAG_RE.sub("", value))


def sanitize_url(value: str) -> str:
    """Remove every character that may not appear in a URL."""
    return _URL_ILLEGAL_RE.sub("", value)


def clean_text(
    value: Any, field: str, sanitizer: Callable[[str], str] = sanitize_text
) -> str:
    """
    Trim and sanitize a text value.

    Raises:
        InvalidInput: If the value is not a string or is empty once cleaned.
    """
    if not isinstance(value, str):
        raise InvalidInput(field, f"expected text, got {type(value).__name__}")
    cleaned = sanitizer(value.strip()).strip()
    if not cleaned:
        raise InvalidInput(field, "value is empty or insecure")
    return cleaned


def bounded_text(
    value: Any,
    field: str,
    max_length: int,
    sanitizer: Callable[[str], str] = sanitize_text,
) -> str:
    """
    Clean a text value and enforce its length limit (in characters).

    Raises:
        InvalidInput: If the value is empty once cleaned.
        OutOfRange: If the cleaned value is longer than `max_length`.
    """
    cleaned = clean_text(value, field, sanitizer)
    if len(cleaned) > max_length:
        raise OutOfRange(field, f"value is too long, limit {max_length} characters")
    return cleaned


def enum_member(value: Any, field: str, allowed: Type[Enum]) -> str:
    """
    Clean a value and require an exact (case-sensitive) enum match.

    Returns:
        The matching enum value as a plain string.
    """
    cleaned = clean_text(value, field)
    choices = [member.value for member in allowed]
    if cleaned not in choices:
        raise InvalidInput(field, f"'{cleaned}' is not one of {', '.join(choices)}")
    return cleaned


def identifier(value: Any, field: str, generate: bool = False) -> uuid.UUID:
    """
    Coerce a UUID, a UUID string or 16 raw bytes into a uuid.UUID.

    Args:
        value: The raw identifier.
        field: Field name used in error messages.
        generate: When True, a missing value yields a fresh uuid4.
    """
    if value is None:
        if generate:
            return uuid.uuid4()
        raise InvalidInput(field, "identifier is required")
    if isinstance(value, uuid.UUID):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
        if len(raw) != 16:
            raise InvalidInput(field, f"binary identifier must be 16 bytes, got {len(raw)}")
        return uuid.UUID(bytes=raw)
    if isinstance(value, str):
        try:
            return uuid.UUID(value.strip())
        except ValueError as e:
            raise InvalidInput(field, f"'{value}' is not a valid identifier") from e
    raise InvalidInput(field, f"unsupported identifier type {type(value).__name__}")


def timestamp(value: Optional[Any], field: str) -> datetime:
    """
    Coerce a datetime or ISO-8601 string into an aware UTC-based datetime.
    A missing value means "now". Naive values are taken to be UTC.
    """
    if value is None:
        return datetime.now(timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        # fromisoformat only accepts a trailing Z from Python 3.11 on
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError as e:
            raise InvalidInput(field, f"'{value}' is not a valid date") from e
    if not isinstance(value, datetime):
        raise InvalidInput(field, f"unsupported date type {type(value).__name__}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
