"""
models/animal.py
----------------
Domain model for a lost/found animal posting.

A posting is immutable: every field is normalized and validated when the
object is built, and changes produce a new, fully revalidated posting.
"""

import string
import uuid
from dataclasses import asdict, dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from utils.errors import InvalidInput
from utils.validation import (
    bounded_text,
    enum_member,
    identifier,
    sanitize_url,
    timestamp,
)


class Gender(str, Enum):
    FEMALE = "Female"
    MALE = "Male"
    UNKNOWN = "Unknown"


class Species(str, Enum):
    DOG = "Dog"
    CAT = "Cat"


class Status(str, Enum):
    LOST = "Lost"
    FOUND = "Found"
    REUNITED = "Reunited"


# Maximum length (characters) of each free-text field.
COLOR_MAX = 25
DESCRIPTION_MAX = 250
IMAGE_URL_MAX = 500
LOCATION_MAX = 200
NAME_MAX = 100

DEFAULT_NAME = "Unknown"

# Column order used by the repository for SELECT / INSERT.
FIELDS = (
    "id",
    "profile_id",
    "color",
    "observed_at",
    "description",
    "gender",
    "image_url",
    "location",
    "name",
    "species",
    "status",
)


def _normalize_name(value: Any) -> str:
    if value is None:
        value = DEFAULT_NAME
    if not isinstance(value, str):
        raise InvalidInput("name", f"expected text, got {type(value).__name__}")
    return bounded_text(string.capwords(value.strip().lower()), "name", NAME_MAX)


@dataclass(frozen=True)
class AnimalPosting:
    """
    One lost/found sighting report.

    Attributes:
        profile_id: Author of the posting (owned by the profile service).
        color: Coat color, 1-25 characters.
        description: Free-text description, 1-250 characters.
        gender: One of Gender's values ('Female', 'Male', 'Unknown').
        image_url: Link to the picture, 1-500 URL-safe characters.
        location: Where the animal was last seen, 1-200 characters.
        species: One of Species' values ('Dog', 'Cat').
        status: One of Status' values ('Lost', 'Found', 'Reunited').
        name: Title-cased name, 1-100 characters (default 'Unknown').
        observed_at: When the animal was seen (default: now, UTC).
        id: Primary key; a uuid4 is generated for new postings.

    Raises:
        InvalidInput: A value is empty, insecure, malformed or not allowed.
        OutOfRange: A text value is longer than its limit.
    """
    profile_id: uuid.UUID
    color: str
    description: str
    gender: str
    image_url: str
    location: str
    species: str
    status: str
    name: str = DEFAULT_NAME
    observed_at: Optional[datetime] = None
    id: Optional[uuid.UUID] = None

    def __post_init__(self) -> None:
        normalized = {
            "id": identifier(self.id, "id", generate=True),
            "profile_id": identifier(self.profile_id, "profile_id"),
            "color": bounded_text(self.color, "color", COLOR_MAX),
            "observed_at": timestamp(self.observed_at, "observed_at"),
            "description": bounded_text(self.description, "description", DESCRIPTION_MAX),
            "gender": enum_member(self.gender, "gender", Gender),
            "image_url": bounded_text(self.image_url, "image_url", IMAGE_URL_MAX, sanitize_url),
            "location": bounded_text(self.location, "location", LOCATION_MAX),
            "name": _normalize_name(self.name),
            "species": enum_member(self.species, "species", Species),
            "status": enum_member(self.status, "status", Status),
        }
        # Frozen dataclass: normalized values are written once, here.
        for key, value in normalized.items():
            object.__setattr__(self, key, value)

    # ── Derivation ────────────────────────────────────────

    def with_changes(self, **changes: Any) -> "AnimalPosting":
        """
        Return a copy with some fields replaced and everything revalidated.

        Raises:
            InvalidInput: If an attempt is made to change the id, or a
                new value is invalid.
        """
        if "id" in changes and identifier(changes["id"], "id") != self.id:
            raise InvalidInput("id", "a posting id cannot be reassigned")
        changes.pop("id", None)
        return replace(self, **changes)

    def is_active(self) -> bool:
        """Returns True while the animal has not been reunited."""
        return self.status != Status.REUNITED.value

    # ── Serialization ─────────────────────────────────────

    def to_dict(self) -> dict:
        """
        Field-keyed representation for the presentation layer.
        Identifiers become canonical strings, `observed_at` becomes
        epoch milliseconds.
        """
        data = asdict(self)
        data["id"] = str(self.id)
        data["profile_id"] = str(self.profile_id)
        data["observed_at"] = round(self.observed_at.timestamp() * 1000)
        return data

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AnimalPosting":
        """Build a posting from a database row keyed by column name."""
        return cls(**{key: row[key] for key in FIELDS})

    def __str__(self) -> str:
        return f"{self.status}: {self.name} ({self.species}, {self.color}) near {self.location}"
