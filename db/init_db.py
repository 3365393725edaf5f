"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Animal postings: one row per lost/found sighting.
-- Identifiers are stored as 16 raw bytes.
CREATE TABLE IF NOT EXISTS animal (
    id              BYTEA PRIMARY KEY CHECK (octet_length(id) = 16),
    profile_id      BYTEA NOT NULL CHECK (octet_length(profile_id) = 16),
    color           VARCHAR(25) NOT NULL,
    observed_at     TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    description     VARCHAR(250) NOT NULL,
    gender          VARCHAR(7) NOT NULL CHECK (gender IN ('Female', 'Male', 'Unknown')),
    image_url       VARCHAR(500) NOT NULL,
    location        VARCHAR(200) NOT NULL,
    name            VARCHAR(100) NOT NULL DEFAULT 'Unknown',
    species         VARCHAR(3) NOT NULL CHECK (species IN ('Dog', 'Cat')),
    status          VARCHAR(8) NOT NULL CHECK (status IN ('Lost', 'Found', 'Reunited'))
);

-- Postings are looked up by author and listed by status
CREATE INDEX IF NOT EXISTS idx_animal_profile ON animal(profile_id);
CREATE INDEX IF NOT EXISTS idx_animal_status ON animal(status);
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
