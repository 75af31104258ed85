"""Tests for the database layer: init, jobs, candidate existence, gateway."""

import sqlite3
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from sourcing.core.db import (
    SQLiteGateway,
    candidate_exists,
    count_candidates,
    get_active_jobs,
    get_job,
    increment_applicants_count,
    init_db,
    insert_candidate,
    insert_job,
)
from sourcing.core.errors import PersistenceError
from sourcing.core.schemas import (
    CandidateRecord,
    Education,
    Job,
    JobStatus,
    NarrativeAnalysis,
    PortfolioUrls,
    WorkExperience,
)


def _make_job(**overrides: object) -> Job:
    defaults: dict[str, object] = {
        "id": "job-1",
        "title": "Backend Engineer",
        "user_id": "owner-1",
        "location": "Austin, TX",
        "skills": ["Python", "Django"],
    }
    defaults.update(overrides)
    return Job.model_validate(defaults)


def _record(**overrides: object) -> CandidateRecord:
    defaults: dict[str, object] = {
        "user_id": "owner-1",
        "job_id": "job-1",
        "name": "Jane Doe",
        "role": "Backend Engineer",
        "source": "linkedin",
        "skills": ["Python"],
        "ai_match_score": 72,
        "applied_date": datetime(2026, 3, 1, 12, 0),
    }
    defaults.update(overrides)
    return CandidateRecord.model_validate(defaults)


@pytest.fixture()
def db(tmp_path):  # type: ignore[no-untyped-def]
    """Provide a fresh SQLite connection per test."""
    return init_db(tmp_path / "test.db")


class TestInitDb:
    def test_creates_tables(self, db) -> None:  # type: ignore[no-untyped-def]
        tables = {
            row[0]
            for row in db.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
        }
        assert {"jobs", "candidates"} <= tables

    def test_idempotent(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        p = tmp_path / "nested" / "double.db"
        init_db(p).close()
        init_db(p).close()


class TestJobs:
    def test_round_trip(self, db) -> None:  # type: ignore[no-untyped-def]
        job = _make_job(remote=True, experience_level="Senior Level (5+ years)")
        insert_job(db, job)
        assert get_job(db, "job-1") == job

    def test_missing(self, db) -> None:  # type: ignore[no-untyped-def]
        assert get_job(db, "nope") is None

    def test_active_only(self, db) -> None:  # type: ignore[no-untyped-def]
        insert_job(db, _make_job(id="a", title="Active role"))
        insert_job(db, _make_job(id="b", title="Closed role", status=JobStatus.CLOSED))
        assert [j.id for j in get_active_jobs(db)] == ["a"]

    def test_increment_applicants(self, db) -> None:  # type: ignore[no-untyped-def]
        insert_job(db, _make_job())
        increment_applicants_count(db, "job-1", 3)
        increment_applicants_count(db, "job-1", 2)
        job = get_job(db, "job-1")
        assert job is not None
        assert job.applicants_count == 5


class TestCandidates:
    def test_insert_all_fields(self, db) -> None:  # type: ignore[no-untyped-def]
        record = _record(
            email="jane@example.com",
            ai_analysis=NarrativeAnalysis(score=80, summary="Good"),
            portfolio_urls=PortfolioUrls(github="https://github.com/jane"),
            linkedin_url="https://www.linkedin.com/in/jane",
            work_experience=[WorkExperience(role="Dev", company="Acme")],
            education=[Education(degree="BSc", school="UT")],
        )
        row_id = insert_candidate(db, record)
        assert row_id > 0
        row = db.execute("SELECT * FROM candidates WHERE id = ?", (row_id,)).fetchone()
        assert row["stage"] == "New"
        assert row["is_test"] == 0
        assert '"score": 80' in row["ai_analysis_json"] or '"score":80' in row["ai_analysis_json"]
        assert row["applied_date"] == "2026-03-01T12:00:00"
        assert count_candidates(db, "job-1") == 1

    def test_optional_fields_null(self, db) -> None:  # type: ignore[no-untyped-def]
        row_id = insert_candidate(db, _record())
        row = db.execute("SELECT * FROM candidates WHERE id = ?", (row_id,)).fetchone()
        assert row["email"] is None
        assert row["portfolio_urls_json"] is None
        assert row["work_experience_json"] is None

    def test_exists_by_linkedin_url(self, db) -> None:  # type: ignore[no-untyped-def]
        insert_candidate(db, _record(linkedin_url="https://www.linkedin.com/in/jane"))
        assert candidate_exists(db, "job-1", linkedin_url="https://www.linkedin.com/in/jane")
        assert not candidate_exists(db, "job-2", linkedin_url="https://www.linkedin.com/in/jane")

    def test_url_takes_precedence_over_name(self, db) -> None:  # type: ignore[no-untyped-def]
        insert_candidate(db, _record(linkedin_url="https://www.linkedin.com/in/jane"))
        assert not candidate_exists(
            db, "job-1", linkedin_url="https://www.linkedin.com/in/other", name="Jane Doe"
        )

    def test_exists_by_name_case_insensitive(self, db) -> None:  # type: ignore[no-untyped-def]
        insert_candidate(db, _record())
        assert candidate_exists(db, "job-1", name="  JANE DOE ")
        assert not candidate_exists(db, "job-1", name="John Doe")

    def test_no_key(self, db) -> None:  # type: ignore[no-untyped-def]
        insert_candidate(db, _record())
        assert candidate_exists(db, "job-1") is False


class TestSQLiteGateway:
    def test_delegates(self, db) -> None:  # type: ignore[no-untyped-def]
        insert_job(db, _make_job())
        gateway = SQLiteGateway(db)
        assert gateway.get_job("job-1") is not None
        assert len(gateway.list_active_jobs()) == 1
        gateway.save_candidate(_record())
        assert gateway.candidate_exists("job-1", name="jane doe")
        gateway.increment_applicants_count("job-1", 1)
        assert gateway.get_job("job-1").applicants_count == 1  # type: ignore[union-attr]

    def test_wraps_sqlite_errors(self) -> None:
        conn = MagicMock()
        conn.execute.side_effect = sqlite3.OperationalError("database is locked")
        gateway = SQLiteGateway(conn)
        with pytest.raises(PersistenceError, match="database is locked"):
            gateway.save_candidate(_record())
        with pytest.raises(PersistenceError):
            gateway.get_job("job-1")
        with pytest.raises(PersistenceError):
            gateway.candidate_exists("job-1", name="x")
