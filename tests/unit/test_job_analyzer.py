"""Tests for job classification and source allocation."""

from sourcing.core.schemas import Job
from sourcing.pipeline.job_analyzer import is_technical_job, recommend_sources, source_priority


def _make_job(**overrides: object) -> Job:
    defaults: dict[str, object] = {
        "id": "job-1",
        "title": "Senior React Developer",
        "department": "Engineering",
        "skills": ["React", "TypeScript"],
    }
    defaults.update(overrides)
    return Job.model_validate(defaults)


def _hr_job() -> Job:
    return _make_job(
        title="HR Coordinator",
        department="Human Resources",
        skills=["Onboarding", "Payroll"],
        description="Coordinate hiring and onboarding for new staff",
    )


class TestIsTechnicalJob:
    def test_engineering_department(self) -> None:
        assert is_technical_job(_make_job(title="Office Manager", skills=[])) is True

    def test_keywords_without_department(self) -> None:
        job = _make_job(
            title="Python Developer",
            department="General",
            skills=[],
            description="Build APIs with Django",
        )
        assert is_technical_job(job) is True

    def test_non_technical(self) -> None:
        assert is_technical_job(_hr_job()) is False

    def test_mixed_needs_clear_majority(self) -> None:
        job = _make_job(
            title="Marketing Manager",
            department="Marketing",
            skills=["SQL"],
            description="Own brand and content strategy",
        )
        assert is_technical_job(job) is False

    def test_department_word_boundary(self) -> None:
        # "Facilities" contains "it" but is not an IT department
        job = _make_job(title="Facilities Coordinator", department="Facilities", skills=[])
        assert is_technical_job(job) is False


class TestRecommendSources:
    def test_technical_split(self) -> None:
        recs = recommend_sources(_make_job(), 50)
        assert [r.source for r in recs] == ["linkedin", "github", "mightyrecruiter", "jobspider"]
        assert [r.quota for r in recs] == [29, 13, 4, 4]
        assert sum(r.quota for r in recs) == 50
        assert all(r.reason for r in recs)

    def test_non_technical_excludes_github(self) -> None:
        recs = recommend_sources(_hr_job(), 50)
        assert [r.source for r in recs] == ["linkedin", "mightyrecruiter", "jobspider"]
        assert [r.quota for r in recs] == [28, 11, 11]

    def test_non_technical_github_only_is_empty(self) -> None:
        assert recommend_sources(_hr_job(), 50, ["github"]) == []

    def test_subset_remainder_to_highest_priority(self) -> None:
        recs = recommend_sources(_make_job(), 50, ["jobspider", "github"])
        assert [(r.source, r.quota) for r in recs] == [("github", 38), ("jobspider", 12)]

    def test_unknown_and_duplicate_sources_ignored(self) -> None:
        recs = recommend_sources(_make_job(), 10, ["linkedin", "linkedin", "monster"])
        assert [(r.source, r.quota) for r in recs] == [("linkedin", 10)]

    def test_small_budget_can_zero_out_sources(self) -> None:
        recs = recommend_sources(_make_job(), 3)
        quotas = {r.source: r.quota for r in recs}
        assert quotas["linkedin"] == 3
        assert quotas["jobspider"] == 0

    def test_priorities_descending(self) -> None:
        recs = recommend_sources(_make_job(), 50)
        priorities = [r.priority for r in recs]
        assert priorities == sorted(priorities, reverse=True)


class TestSourcePriority:
    def test_technical(self) -> None:
        assert source_priority(_make_job()) == ["linkedin", "github", "mightyrecruiter", "jobspider"]

    def test_non_technical(self) -> None:
        assert source_priority(_hr_job()) == ["linkedin", "mightyrecruiter", "jobspider"]
