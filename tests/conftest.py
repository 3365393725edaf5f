"""Shared test fixtures for the LostPaws test suite."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import psycopg2
import pytest

from models.animal import (
    COLOR_MAX,
    DESCRIPTION_MAX,
    IMAGE_URL_MAX,
    LOCATION_MAX,
    NAME_MAX,
    AnimalPosting,
)

PROFILE_ID = "5f0c5b4e-2f0a-4a8e-9c41-6d3f5f1a2b3c"
OTHER_PROFILE_ID = "0b7e2d1c-9a3f-4c5d-8e6f-1a2b3c4d5e6f"


def like_to_regex(pattern: str) -> re.Pattern:
    """Translate a LIKE pattern (backslash escapes) into a regex."""
    out = []
    chars = iter(pattern)
    for ch in chars:
        if ch == "\\":
            out.append(re.escape(next(chars, "\\")))
        elif ch == "%":
            out.append(".*")
        elif ch == "_":
            out.append(".")
        else:
            out.append(re.escape(ch))
    return re.compile("".join(out), re.DOTALL)


class FakeCursor:
    """Cursor over FakeStore understanding the repository's single-WHERE SQL."""

    _WHERE = re.compile(r"WHERE (\w+) (=|<>|LIKE) %\((\w+)\)s")

    def __init__(self, store: "FakeStore"):
        self.store = store
        self.rowcount = -1
        self._result: list[dict] = []

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, *exc: Any) -> bool:
        return False

    def execute(self, sql: str, params: dict | None = None) -> None:
        params = params or {}
        self.store.statements.append((sql, params))
        if self.store.fail is not None:
            raise self.store.fail

        verb = sql.split(None, 1)[0].upper()
        if verb == "INSERT":
            if any(row["id"] == params["id"] for row in self.store.rows):
                raise psycopg2.IntegrityError("duplicate key value violates unique constraint")
            self.store.rows.append(dict(params))
            self.rowcount = 1
            return

        matched = [row for row in self.store.rows if self._matches(row, sql, params)]
        self.rowcount = len(matched)
        if verb == "SELECT":
            self._result = [dict(row) for row in matched]
        elif verb == "UPDATE":
            for row in matched:
                row.update(params)
        elif verb == "DELETE":
            self.store.rows = [row for row in self.store.rows if not any(row is m for m in matched)]

    def _matches(self, row: dict, sql: str, params: dict) -> bool:
        m = self._WHERE.search(sql)
        if m is None:
            return True
        column, op, name = m.groups()
        actual, expected = row[column], params[name]
        if op == "=":
            return actual == expected
        if op == "<>":
            return actual != expected
        return like_to_regex(expected).fullmatch(actual) is not None

    def fetchall(self) -> list[dict]:
        return self._result


class FakeStore:
    """In-memory stand-in for a psycopg2 connection to the animal table."""

    def __init__(self):
        self.rows: list[dict] = []
        self.statements: list[tuple[str, dict]] = []
        self.fail: Exception | None = None
        self.commits = 0
        self.rollbacks = 0

    def cursor(self, **kwargs: Any) -> FakeCursor:
        return FakeCursor(self)

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


@pytest.fixture
def store() -> FakeStore:
    """An empty fake animal table."""
    return FakeStore()


@pytest.fixture
def valid_fields() -> dict:
    """Raw constructor arguments for a valid posting."""
    return {
        "profile_id": PROFILE_ID,
        "color": "Brown",
        "description": "Small terrier wearing a red collar",
        "gender": "Male",
        "image_url": "https://images.example.com/rex.jpg",
        "location": "Central Park, north entrance",
        "species": "Dog",
        "status": "Lost",
        "name": "rex",
        "observed_at": "2018-08-01 14:30:15.123456",
    }


@pytest.fixture
def sample_posting(valid_fields: dict) -> AnimalPosting:
    """A valid posting for repository and service tests."""
    return AnimalPosting(**valid_fields)


@pytest.fixture
def make_posting(valid_fields: dict):
    """Factory for postings that differ from the defaults in a few fields."""

    def _make(**overrides: Any) -> AnimalPosting:
        return AnimalPosting(**{**valid_fields, **overrides})

    return _make


@pytest.fixture
def max_length_postings(make_posting) -> list[dict]:
    """Twelve serialized postings with every text field at its maximum length."""
    url_prefix = "https://images.example.com/"
    return [
        make_posting(
            color="c" * COLOR_MAX,
            description="d" * DESCRIPTION_MAX,
            image_url=url_prefix + "p" * (IMAGE_URL_MAX - len(url_prefix)),
            location="l" * LOCATION_MAX,
            name="n" * NAME_MAX,
        ).to_dict()
        for _ in range(12)
    ]


@pytest.fixture
def serialized_postings() -> list[dict]:
    """Serialized postings as produced by AnimalPosting.to_dict()."""
    return [
        {
            "id": "11111111-1111-4111-8111-111111111111",
            "profile_id": PROFILE_ID,
            "color": "Black",
            "observed_at": int(datetime(2024, 3, 1, tzinfo=timezone.utc).timestamp() * 1000),
            "description": "Black cat with a white patch",
            "gender": "Female",
            "image_url": "https://images.example.com/luna.jpg",
            "location": "Elm Street",
            "name": "Luna",
            "species": "Cat",
            "status": "Lost",
        },
        {
            "id": "22222222-2222-4222-8222-222222222222",
            "profile_id": OTHER_PROFILE_ID,
            "color": "Golden",
            "observed_at": int(datetime(2024, 5, 1, tzinfo=timezone.utc).timestamp() * 1000),
            "description": "Friendly retriever, no tag",
            "gender": "Male",
            "image_url": "https://images.example.com/max.jpg",
            "location": "Riverside Park",
            "name": "Max",
            "species": "Dog",
            "status": "Found",
        },
    ]


@pytest.fixture
def telegram_update() -> MagicMock:
    """A Telegram Update whose replies can be awaited and inspected."""
    update = MagicMock()
    update.effective_user.id = 42
    update.effective_user.first_name = "Jude"
    update.message.reply_text = AsyncMock()
    update.message.reply_document = AsyncMock()
    return update
