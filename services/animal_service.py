"""
services/animal_service.py
---------------------------
Business logic for animal postings.

Borrows a pooled connection per call and hands it to the repository,
and implements the list view's "(field, value) -> postings" dispatch.
"""

from functools import cmp_to_key
from typing import Any, Iterable, Optional

from db.connection import borrowed_connection
from models.animal import AnimalPosting, Status
from repositories.animal_repo import SEARCH_FIELDS, AnimalRepository
from utils.errors import InvalidInput
from utils.logger import get_logger

logger = get_logger(__name__)


def compare_by_observed_at(a: dict, b: dict) -> int:
    """
    Three-way comparison of serialized postings, newest observation first.

    Returns:
        A negative number if `a` sorts before `b`, positive if after,
        0 if both were observed at the same millisecond.
    """
    return b["observed_at"] - a["observed_at"]


def sort_newest_first(postings: Iterable[dict]) -> list[dict]:
    """Order serialized postings by observation time, newest first."""
    return sorted(postings, key=cmp_to_key(compare_by_observed_at))


def format_posting(posting: dict) -> str:
    """Render one serialized posting as a short chat entry."""
    return (
        f"{posting['name']} ({posting['species']}, {posting['gender']}) - {posting['status']}\n"
        f"  Color: {posting['color']}\n"
        f"  Seen near: {posting['location']}\n"
        f"  {posting['description']}\n"
        f"  {posting['image_url']}"
    )


def format_posting_list(
    postings: list[dict],
    limit: Optional[int] = None,
    max_chars: Optional[int] = None,
) -> str:
    """
    Render serialized postings for a chat reply.

    Args:
        postings: Serialized postings, already in display order.
        limit: Show at most this many entries.
        max_chars: Stop adding entries once the text would grow past this
            many characters, including the "... and N more." line.

    Returns:
        The rendered text. Entries left out are counted on the last line.
    """
    if not postings:
        return "No postings found."
    candidates = postings if limit is None else postings[:limit]
    footer_room = len(f"\n\n... and {len(postings)} more.")

    lines: list[str] = []
    size = 0
    for posting in candidates:
        entry = format_posting(posting)
        added = len(entry) + (2 if lines else 0)
        if max_chars is not None and size + added + footer_room > max_chars:
            break
        lines.append(entry)
        size += added

    hidden = len(postings) - len(lines)
    if hidden:
        lines.append(f"... and {hidden} more.")
    return "\n\n".join(lines)


class AnimalService:
    """Coordinates pooled connections and the animal repository."""

    def __init__(self, repo: Optional[AnimalRepository] = None):
        self.repo = repo or AnimalRepository()

    # ── Writes ────────────────────────────────────────────

    def add(self, posting: AnimalPosting) -> AnimalPosting:
        with borrowed_connection() as conn:
            return self.repo.insert(conn, posting)

    def save(self, posting: AnimalPosting) -> bool:
        """Persist changes to an existing posting. False if it no longer exists."""
        with borrowed_connection() as conn:
            return self.repo.update(conn, posting)

    def remove(self, posting_id: Any) -> bool:
        with borrowed_connection() as conn:
            return self.repo.delete(conn, posting_id)

    # ── Reads ─────────────────────────────────────────────

    def get(self, posting_id: Any) -> Optional[AnimalPosting]:
        with borrowed_connection() as conn:
            return self.repo.find_by_id(conn, posting_id)

    def list_for_profile(self, profile_id: Any) -> tuple[AnimalPosting, ...]:
        with borrowed_connection() as conn:
            return self.repo.find_by_profile_id(conn, profile_id)

    def search(self, field_name: str, field_value: str) -> list[dict]:
        """
        Run the search named by a list-view parameter pair.

        Args:
            field_name: A searchable field (see SEARCH_FIELDS).
            field_value: The term to look for.

        Returns:
            Serialized postings, newest observation first.

        Raises:
            InvalidInput: Unknown field name or empty term.
            StorageError: On database failure.
        """
        field_name = (field_name or "").strip().lower()
        if field_name not in SEARCH_FIELDS:
            raise InvalidInput("field", f"cannot search on '{field_name}', use one of {', '.join(SEARCH_FIELDS)}")
        with borrowed_connection() as conn:
            postings = self.repo.find_by_field(conn, field_name, field_value)
        logger.info(f"Search {field_name}={field_value!r} returned {len(postings)} postings")
        return sort_newest_first(p.to_dict() for p in postings)

    def active(self) -> list[dict]:
        """All postings that are not reunited yet, newest first."""
        with borrowed_connection() as conn:
            postings = self.repo.find_all_active(conn)
        return sort_newest_first(p.to_dict() for p in postings)

    def success_stories(self) -> list[dict]:
        """Reunited postings, newest first."""
        return self.search("status", Status.REUNITED.value)
