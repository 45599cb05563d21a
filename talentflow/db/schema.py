"""
Collection declarations and schema bootstrap for the record store.

Each collection is one SQLite table holding JSON records, addressed by a
declared primary key and at most one secondary equality index.
"""

import sqlite3
from dataclasses import dataclass
from typing import Dict, Optional

from talentflow.models.errors import create_db_error

JOBS = "jobs"
CANDIDATES = "candidates"
ASSESSMENTS = "assessments"
TIMELINE = "timeline"
ASSESSMENT_RESPONSES = "assessment_responses"


@dataclass(frozen=True)
class CollectionSpec:
    """Declared addressing for one collection."""

    name: str
    key_field: str
    auto_key: bool = False
    index_field: Optional[str] = None


COLLECTIONS: Dict[str, CollectionSpec] = {
    JOBS: CollectionSpec(JOBS, key_field="id", index_field="status"),
    CANDIDATES: CollectionSpec(CANDIDATES, key_field="id", index_field="job_id"),
    ASSESSMENTS: CollectionSpec(ASSESSMENTS, key_field="job_id"),
    TIMELINE: CollectionSpec(TIMELINE, key_field="id", auto_key=True, index_field="candidate_id"),
    ASSESSMENT_RESPONSES: CollectionSpec(
        ASSESSMENT_RESPONSES, key_field="id", auto_key=True, index_field="candidate_id"
    ),
}


def _table_ddl(spec: CollectionSpec) -> str:
    if spec.auto_key:
        key_column = "pk INTEGER PRIMARY KEY AUTOINCREMENT"
    else:
        key_column = "pk TEXT PRIMARY KEY"
    return f"""
        CREATE TABLE IF NOT EXISTS {spec.name} (
            {key_column},
            idx TEXT,
            body TEXT NOT NULL
        )
    """


def bootstrap_schema(conn: sqlite3.Connection) -> None:
    """
    Create every collection table and its index if they don't exist.

    This operation is idempotent - safe to call on existing databases.

    Args:
        conn: Database connection in autocommit mode

    Raises:
        ToolError: If schema creation fails
    """
    try:
        for spec in COLLECTIONS.values():
            conn.execute(_table_ddl(spec))
            if spec.index_field is not None:
                conn.execute(
                    f"CREATE INDEX IF NOT EXISTS idx_{spec.name}_{spec.index_field} "
                    f"ON {spec.name}(idx)"
                )
    except sqlite3.Error as e:
        raise create_db_error(
            f"Failed to bootstrap schema: {str(e)}", retryable=False, original_error=e
        ) from e
