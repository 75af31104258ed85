"""SQLite persistence for jobs and sourced candidates."""

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path

from sourcing.core.errors import PersistenceError
from sourcing.core.schemas import CandidateRecord, Job, JobStatus

logger = logging.getLogger(__name__)

_JOBS_TABLE = """
CREATE TABLE IF NOT EXISTS jobs (
    id                TEXT    PRIMARY KEY,
    user_id           TEXT    NOT NULL DEFAULT '',
    title             TEXT    NOT NULL,
    department        TEXT    NOT NULL DEFAULT 'General',
    company           TEXT    NOT NULL DEFAULT '',
    location          TEXT,
    remote            INTEGER NOT NULL DEFAULT 0,
    experience_level  TEXT,
    skills_json       TEXT    NOT NULL DEFAULT '[]',
    description       TEXT    NOT NULL DEFAULT '',
    status            TEXT    NOT NULL DEFAULT 'Active',
    applicants_count  INTEGER NOT NULL DEFAULT 0
);
"""

_CANDIDATES_TABLE = """
CREATE TABLE IF NOT EXISTS candidates (
    id                   INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id              TEXT    NOT NULL DEFAULT '',
    job_id               TEXT    NOT NULL,
    name                 TEXT    NOT NULL,
    email                TEXT,
    role                 TEXT    NOT NULL,
    location             TEXT,
    experience           INTEGER NOT NULL DEFAULT 0,
    skills_json          TEXT    NOT NULL DEFAULT '[]',
    resume_summary       TEXT    NOT NULL DEFAULT '',
    ai_match_score       INTEGER NOT NULL DEFAULT 0,
    ai_analysis_json     TEXT    NOT NULL DEFAULT '{}',
    stage                TEXT    NOT NULL DEFAULT 'New',
    source               TEXT    NOT NULL,
    is_test              INTEGER NOT NULL DEFAULT 0,
    applied_date         TEXT    NOT NULL,
    profile_url          TEXT,
    portfolio_urls_json  TEXT,
    linkedin_url         TEXT,
    work_experience_json TEXT,
    education_json       TEXT
);
"""

_CANDIDATES_INDEX = """
CREATE INDEX IF NOT EXISTS idx_candidates_job ON candidates (job_id, linkedin_url);
"""


def init_db(path: str | Path) -> sqlite3.Connection:
    """Create the database and tables, returning a connection."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(_JOBS_TABLE)
    conn.execute(_CANDIDATES_TABLE)
    conn.execute(_CANDIDATES_INDEX)
    conn.commit()
    return conn


def _row_to_job(row: sqlite3.Row) -> Job:
    return Job(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        department=row["department"],
        company=row["company"],
        location=row["location"],
        remote=bool(row["remote"]),
        experience_level=row["experience_level"],
        skills=json.loads(row["skills_json"]),
        description=row["description"],
        status=JobStatus(row["status"]),
        applicants_count=row["applicants_count"],
    )


def insert_job(conn: sqlite3.Connection, job: Job) -> None:
    """Insert or replace a job row."""
    conn.execute(
        """
        INSERT OR REPLACE INTO jobs
            (id, user_id, title, department, company, location, remote,
             experience_level, skills_json, description, status, applicants_count)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            job.id,
            job.user_id,
            job.title,
            job.department,
            job.company,
            job.location,
            int(job.remote),
            job.experience_level,
            json.dumps(job.skills),
            job.description,
            job.status.value,
            job.applicants_count,
        ),
    )
    conn.commit()


def get_job(conn: sqlite3.Connection, job_id: str) -> Job | None:
    row = conn.execute("SELECT * FROM jobs WHERE id = ?", (job_id,)).fetchone()
    return _row_to_job(row) if row is not None else None


def get_active_jobs(conn: sqlite3.Connection) -> list[Job]:
    rows = conn.execute(
        "SELECT * FROM jobs WHERE status = ? ORDER BY title",
        (JobStatus.ACTIVE.value,),
    ).fetchall()
    return [_row_to_job(r) for r in rows]


def candidate_exists(
    conn: sqlite3.Connection,
    job_id: str,
    *,
    linkedin_url: str | None = None,
    name: str | None = None,
) -> bool:
    """Check whether a candidate is already stored for this job.

    The canonical LinkedIn URL is the primary key; without one, fall back to a
    case-insensitive exact name match.
    """
    if linkedin_url:
        row = conn.execute(
            "SELECT 1 FROM candidates WHERE job_id = ? AND linkedin_url = ? LIMIT 1",
            (job_id, linkedin_url),
        ).fetchone()
        return row is not None
    if name:
        row = conn.execute(
            "SELECT 1 FROM candidates WHERE job_id = ? AND lower(name) = lower(?) LIMIT 1",
            (job_id, name.strip()),
        ).fetchone()
        return row is not None
    return False


def _json_or_none(value: object) -> str | None:
    return json.dumps(value) if value is not None else None


def insert_candidate(conn: sqlite3.Connection, record: CandidateRecord) -> int:
    """Insert an accepted candidate. Returns the row ID."""
    cursor = conn.execute(
        """
        INSERT INTO candidates
            (user_id, job_id, name, email, role, location, experience, skills_json,
             resume_summary, ai_match_score, ai_analysis_json, stage, source, is_test,
             applied_date, profile_url, portfolio_urls_json, linkedin_url,
             work_experience_json, education_json)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            record.user_id,
            record.job_id,
            record.name,
            record.email,
            record.role,
            record.location,
            record.experience,
            json.dumps(record.skills),
            record.resume_summary,
            record.ai_match_score,
            record.ai_analysis.model_dump_json(),
            record.stage,
            record.source,
            int(record.is_test),
            record.applied_date.isoformat(),
            record.profile_url,
            _json_or_none(
                record.portfolio_urls.model_dump(exclude_none=True)
                if record.portfolio_urls
                else None
            ),
            record.linkedin_url,
            _json_or_none(
                [w.model_dump() for w in record.work_experience]
                if record.work_experience is not None
                else None
            ),
            _json_or_none(
                [e.model_dump() for e in record.education]
                if record.education is not None
                else None
            ),
        ),
    )
    conn.commit()
    return cursor.lastrowid or 0


def count_candidates(conn: sqlite3.Connection, job_id: str) -> int:
    row = conn.execute(
        "SELECT COUNT(*) AS n FROM candidates WHERE job_id = ?", (job_id,)
    ).fetchone()
    return int(row["n"])


def increment_applicants_count(conn: sqlite3.Connection, job_id: str, delta: int) -> None:
    conn.execute(
        "UPDATE jobs SET applicants_count = applicants_count + ? WHERE id = ?",
        (delta, job_id),
    )
    conn.commit()


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------


class PersistenceGateway(ABC):
    """Storage boundary used by the orchestrator and the CLI."""

    @abstractmethod
    def get_job(self, job_id: str) -> Job | None:
        """Return the job, or None when it does not exist."""

    @abstractmethod
    def list_active_jobs(self) -> list[Job]:
        """Return all jobs in Active status."""

    @abstractmethod
    def candidate_exists(
        self, job_id: str, *, linkedin_url: str | None = None, name: str | None = None
    ) -> bool:
        """Return True when an equivalent candidate is already stored for the job."""

    @abstractmethod
    def save_candidate(self, record: CandidateRecord) -> int:
        """Persist an accepted candidate and return its ID."""

    @abstractmethod
    def increment_applicants_count(self, job_id: str, delta: int) -> None:
        """Bump the requisition's applicant counter."""


class SQLiteGateway(PersistenceGateway):
    """PersistenceGateway backed by a sqlite3 connection.

    sqlite3 errors are re-raised as PersistenceError so callers only handle
    one exception type at the storage boundary.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get_job(self, job_id: str) -> Job | None:
        try:
            return get_job(self._conn, job_id)
        except sqlite3.Error as e:
            msg = f"Failed to load job {job_id}: {e}"
            raise PersistenceError(msg) from e

    def list_active_jobs(self) -> list[Job]:
        try:
            return get_active_jobs(self._conn)
        except sqlite3.Error as e:
            msg = f"Failed to list active jobs: {e}"
            raise PersistenceError(msg) from e

    def candidate_exists(
        self, job_id: str, *, linkedin_url: str | None = None, name: str | None = None
    ) -> bool:
        try:
            return candidate_exists(self._conn, job_id, linkedin_url=linkedin_url, name=name)
        except sqlite3.Error as e:
            msg = f"Failed to check candidate existence for job {job_id}: {e}"
            raise PersistenceError(msg) from e

    def save_candidate(self, record: CandidateRecord) -> int:
        try:
            row_id = insert_candidate(self._conn, record)
        except sqlite3.Error as e:
            msg = f"Failed to save candidate '{record.name}': {e}"
            raise PersistenceError(msg) from e
        logger.debug("Saved candidate '%s' (row %d)", record.name, row_id)
        return row_id

    def increment_applicants_count(self, job_id: str, delta: int) -> None:
        try:
            increment_applicants_count(self._conn, job_id, delta)
        except sqlite3.Error as e:
            msg = f"Failed to update applicant count for job {job_id}: {e}"
            raise PersistenceError(msg) from e
