"""
repositories/animal_repo.py
----------------------------
Data access layer for animal postings.
All SQL queries related to the `animal` table live here.

Every method takes the caller's connection as its first argument and runs
exactly one parameterized statement. The repository never opens, pools or
closes connections.
"""

from enum import Enum
from typing import Any, Optional

import psycopg2
from psycopg2.extras import RealDictCursor

from models.animal import FIELDS, AnimalPosting, Status
from utils.errors import InvalidInput, LostPawsError, StorageError
from utils.logger import get_logger
from utils.validation import clean_text, identifier

logger = get_logger(__name__)


class MatchMode(str, Enum):
    EXACT = "exact"
    SUBSTRING = "substring"


# Searchable columns and how each one is matched.
# Gender keeps the exact match it has always had; the rest are substring.
SEARCH_FIELDS: dict[str, MatchMode] = {
    "color": MatchMode.SUBSTRING,
    "description": MatchMode.SUBSTRING,
    "gender": MatchMode.EXACT,
    "species": MatchMode.SUBSTRING,
    "status": MatchMode.SUBSTRING,
}

_COLUMNS = ", ".join(FIELDS)
_SELECT = f"SELECT {_COLUMNS} FROM animal"


def escape_like(value: str) -> str:
    """Escape LIKE metacharacters so the value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _search_sql(field: str, mode: MatchMode) -> str:
    if mode is MatchMode.EXACT:
        return f"{_SELECT} WHERE {field} = %(pattern)s;"
    return f"{_SELECT} WHERE {field} LIKE %(pattern)s ESCAPE '\\';"


class AnimalRepository:
    """Repository for CRUD and search operations on the animal table."""

    # ── CREATE ────────────────────────────────────────────

    def insert(self, conn, posting: AnimalPosting) -> AnimalPosting:
        """
        Insert a new posting.

        Args:
            conn: Open psycopg2 connection owned by the caller.
            posting: The validated posting to persist.

        Returns:
            The same posting.

        Raises:
            StorageError: On duplicate id, constraint violation or
                connectivity failure.
        """
        placeholders = ", ".join(f"%({key})s" for key in FIELDS)
        sql = f"INSERT INTO animal ({_COLUMNS}) VALUES ({placeholders});"
        self._write(conn, sql, self._to_params(posting), f"insert posting {posting.id}")
        logger.info(f"Inserted posting {posting.id} for profile {posting.profile_id}")
        return posting

    # ── UPDATE ────────────────────────────────────────────

    def update(self, conn, posting: AnimalPosting) -> bool:
        """
        Overwrite the row matching `posting.id` with the posting's values.

        Returns:
            True if a row was updated, False if no row has that id.
        """
        assignments = ", ".join(f"{key} = %({key})s" for key in FIELDS if key != "id")
        sql = f"UPDATE animal SET {assignments} WHERE id = %(id)s;"
        updated = self._write(conn, sql, self._to_params(posting), f"update posting {posting.id}") > 0
        if updated:
            logger.info(f"Updated posting {posting.id}")
        else:
            logger.warning(f"Update matched no posting with id {posting.id}")
        return updated

    # ── DELETE ────────────────────────────────────────────

    def delete(self, conn, posting_id: Any) -> bool:
        """
        Delete a posting by id.

        Returns:
            True if a row was deleted, False if no row has that id.
        """
        key = self._key(posting_id, "id")
        sql = "DELETE FROM animal WHERE id = %(id)s;"
        deleted = self._write(conn, sql, {"id": key.bytes}, f"delete posting {key}") > 0
        if deleted:
            logger.info(f"Deleted posting {key}")
        return deleted

    # ── READ ──────────────────────────────────────────────

    def find_by_id(self, conn, posting_id: Any) -> Optional[AnimalPosting]:
        """
        Fetch a single posting by its primary key.

        Returns:
            An AnimalPosting or None if not found.

        Raises:
            StorageError: On a malformed id or a database failure.
        """
        key = self._key(posting_id, "id")
        rows = self._fetch(conn, f"{_SELECT} WHERE id = %(id)s;", {"id": key.bytes})
        return rows[0] if rows else None

    def find_by_profile_id(self, conn, profile_id: Any) -> tuple[AnimalPosting, ...]:
        """
        Fetch every posting written by a profile, in store order.

        Raises:
            StorageError: On a malformed id or a database failure.
        """
        key = self._key(profile_id, "profile_id")
        sql = f"{_SELECT} WHERE profile_id = %(profile_id)s;"
        return self._fetch(conn, sql, {"profile_id": key.bytes})

    def find_by_field(self, conn, field: str, value: Any) -> tuple[AnimalPosting, ...]:
        """
        Search postings on one column.

        The value is trimmed and sanitized; substring fields have their
        LIKE metacharacters escaped and are matched case-sensitively
        anywhere in the column. See SEARCH_FIELDS for each column's mode.

        Args:
            conn: Open psycopg2 connection owned by the caller.
            field: One of SEARCH_FIELDS.
            value: Search term.

        Raises:
            InvalidInput: Unknown field, or a term that is empty once cleaned.
            StorageError: On a database failure or an unreadable row.
        """
        mode = SEARCH_FIELDS.get(field)
        if mode is None:
            raise InvalidInput("field", f"cannot search on '{field}', use one of {', '.join(SEARCH_FIELDS)}")
        term = clean_text(value, field)
        if mode is MatchMode.SUBSTRING:
            term = f"%{escape_like(term)}%"
        return self._fetch(conn, _search_sql(field, mode), {"pattern": term})

    def find_by_color(self, conn, color: str) -> tuple[AnimalPosting, ...]:
        return self.find_by_field(conn, "color", color)

    def find_by_description(self, conn, description: str) -> tuple[AnimalPosting, ...]:
        return self.find_by_field(conn, "description", description)

    def find_by_gender(self, conn, gender: str) -> tuple[AnimalPosting, ...]:
        return self.find_by_field(conn, "gender", gender)

    def find_by_species(self, conn, species: str) -> tuple[AnimalPosting, ...]:
        return self.find_by_field(conn, "species", species)

    def find_by_status(self, conn, status: str) -> tuple[AnimalPosting, ...]:
        return self.find_by_field(conn, "status", status)

    def find_all_active(self, conn) -> tuple[AnimalPosting, ...]:
        """Fetch every posting whose status is not 'Reunited'."""
        sql = f"{_SELECT} WHERE status <> %(status)s;"
        return self._fetch(conn, sql, {"status": Status.REUNITED.value})

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _key(value: Any, field: str):
        """Coerce an id argument, reporting malformed ids as storage errors."""
        try:
            return identifier(value, field)
        except InvalidInput as e:
            raise StorageError(f"Cannot look up posting: {e}") from e

    @staticmethod
    def _write(conn, sql: str, params: dict, action: str) -> int:
        """Run one write statement, commit, and return the affected row count."""
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                count = cur.rowcount
            conn.commit()
            return count
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to {action}: {e}")
            raise StorageError(f"Failed to {action}") from e

    @classmethod
    def _fetch(cls, conn, sql: str, params: dict) -> tuple[AnimalPosting, ...]:
        """Run one query and convert every row; one bad row fails the call."""
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(sql, params)
                rows = cur.fetchall()
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Query failed: {e}")
            raise StorageError("Failed to query postings") from e
        return tuple(cls._row_to_posting(row) for row in rows)

    @staticmethod
    def _row_to_posting(row) -> AnimalPosting:
        """Convert a database row to an AnimalPosting domain object."""
        try:
            return AnimalPosting.from_row(row)
        except (LostPawsError, KeyError) as e:
            logger.error(f"Stored row is not a valid posting: {e}")
            raise StorageError(f"Stored row is not a valid posting: {e}") from e

    @staticmethod
    def _to_params(posting: AnimalPosting) -> dict:
        """Named statement parameters for a posting (ids as raw bytes)."""
        return {
            "id": posting.id.bytes,
            "profile_id": posting.profile_id.bytes,
            "color": posting.color,
            "observed_at": posting.observed_at,
            "description": posting.description,
            "gender": posting.gender,
            "image_url": posting.image_url,
            "location": posting.location,
            "name": posting.name,
            "species": posting.species,
            "status": posting.status,
        }
