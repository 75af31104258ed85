"""Tests for match scoring and candidate processing."""

from datetime import date

import pytest

from sourcing.core.schemas import Job, PortfolioUrls, RawCandidate, WorkExperience
from sourcing.pipeline.processor import CandidateProcessor, normalize_email, synthesize_summary
from sourcing.pipeline.scorer import calculate_match_score, completeness, skills_ratio


def _make_job(**overrides: object) -> Job:
    defaults: dict[str, object] = {
        "id": "job-1",
        "title": "Full Stack Developer",
        "department": "Engineering",
        "location": "Austin, TX",
        "experience_level": "Mid Level (2-5 years)",
        "skills": ["React", "Node.js"],
    }
    defaults.update(overrides)
    return Job.model_validate(defaults)


def _make_candidate(**overrides: object) -> RawCandidate:
    defaults: dict[str, object] = {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "location": "Austin, TX",
        "experience": 3,
        "skills": ["React"],
        "source": "linkedin",
    }
    defaults.update(overrides)
    return RawCandidate.model_validate(defaults)


@pytest.fixture()
def processor() -> CandidateProcessor:
    return CandidateProcessor(today=lambda: date(2026, 3, 1))


# ---------------------------------------------------------------------------
# Scorer
# ---------------------------------------------------------------------------


class TestSkillsRatio:
    def test_no_job_skills_defaults_to_half(self) -> None:
        assert skills_ratio(["React"], []) == 0.5

    def test_partial(self) -> None:
        assert skills_ratio(["react"], ["React", "Node.js"]) == 0.5

    def test_containment_counts(self) -> None:
        assert skills_ratio(["React Native"], ["React"]) == 1.0

    def test_capped_at_one(self) -> None:
        assert skills_ratio(["React", "React Hooks", "Redux"], ["React"]) == 1.0


class TestCompleteness:
    def test_half_factors(self) -> None:
        bare = _make_candidate(email=None, skills=[])
        with_extras = _make_candidate(
            email=None,
            skills=[],
            work_experience=[WorkExperience(role="Dev")],
            portfolio_urls=PortfolioUrls(github="https://github.com/jane"),
        )
        assert completeness(with_extras) == pytest.approx(completeness(bare) + 1 / 6)

    def test_capped(self) -> None:
        full = _make_candidate(
            resume_summary="Engineer",
            work_experience=[WorkExperience(role="Dev")],
            portfolio_urls=PortfolioUrls(github="https://github.com/jane"),
        )
        assert completeness(full) == 1.0


class TestCalculateMatchScore:
    def test_reference_example(self) -> None:
        # skills 30 + experience 20 + location 10 + completeness 5/6 * 10
        assert calculate_match_score(_make_candidate(), _make_job()) == 68

    def test_missing_data_uses_defaults(self) -> None:
        candidate = RawCandidate(source="jobspider")
        job = _make_job(skills=["Python"])
        assert calculate_match_score(candidate, job) == 15

    def test_bounds(self) -> None:
        perfect = _make_candidate(
            skills=["React", "Node.js"],
            resume_summary="Engineer",
            work_experience=[WorkExperience(role="Dev")],
        )
        assert calculate_match_score(perfect, _make_job()) == 100


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_normalize_email(self) -> None:
        assert normalize_email("  Jane@Example.COM ") == "jane@example.com"
        assert normalize_email("not-an-email") is None
        assert normalize_email(None) is None

    def test_synthesize_summary(self) -> None:
        text = synthesize_summary(4, ["Python", "Django", "AWS", "Docker"], "Austin, TX")
        assert text == (
            "Professional with 4 years of experience specializing in "
            "Python, Django, AWS based in Austin, TX."
        )

    def test_synthesize_summary_minimal(self) -> None:
        assert synthesize_summary(None, [], None) == "Experienced professional."


# ---------------------------------------------------------------------------
# CandidateProcessor
# ---------------------------------------------------------------------------


class TestCandidateProcessor:
    def test_reference_candidate_is_valid(self, processor: CandidateProcessor) -> None:
        result = processor.process(_make_candidate(), _make_job())
        assert result.is_valid is True
        assert result.validation_errors == []
        assert 60 <= result.match_score <= 75

    def test_entry_level_overqualified(self, processor: CandidateProcessor) -> None:
        job = _make_job(experience_level="Entry Level (0-2 years)")
        result = processor.process(_make_candidate(experience=6), job)
        assert result.is_valid is False
        assert any("overqualified" in e for e in result.validation_errors)

    def test_location_mismatch_invalidates(self, processor: CandidateProcessor) -> None:
        result = processor.process(_make_candidate(location="Berlin, Germany"), _make_job())
        assert result.is_valid is False
        assert result.validation_errors == [
            "Location mismatch: candidate in 'Berlin, Germany', job in 'Austin, TX'"
        ]

    def test_remote_job_skips_location_check(self, processor: CandidateProcessor) -> None:
        job = _make_job(remote=True, location="Remote")
        result = processor.process(_make_candidate(location="Berlin, Germany"), job)
        assert result.is_valid is True

    def test_remote_wording_in_onsite_job_location(self, processor: CandidateProcessor) -> None:
        job = _make_job(remote=False, location="Austin, TX (Remote OK)")
        result = processor.process(_make_candidate(location="Mumbai, India"), job)
        assert result.is_valid is False
        assert result.validation_errors[0].startswith("Location mismatch")

        local = processor.process(_make_candidate(location="Austin, TX"), job)
        assert local.is_valid is True

    def test_remote_candidate_for_onsite_job(self, processor: CandidateProcessor) -> None:
        result = processor.process(_make_candidate(location="Remote"), _make_job())
        assert result.is_valid is False
        assert result.validation_errors == [
            "Location mismatch: candidate in 'Remote', job in 'Austin, TX'"
        ]

    def test_missing_location_is_not_a_mismatch(self, processor: CandidateProcessor) -> None:
        result = processor.process(_make_candidate(location=None), _make_job())
        assert result.is_valid is True

    def test_missing_name(self, processor: CandidateProcessor) -> None:
        result = processor.process(_make_candidate(name="   "), _make_job())
        assert result.is_valid is False
        assert "Missing name" in result.validation_errors

    def test_normalization(self, processor: CandidateProcessor) -> None:
        raw = _make_candidate(
            name="  Jane Doe ",
            email=" JANE@EXAMPLE.COM",
            location={"city": "Austin", "region": "TX"},
            skills=["react", "REACT", "node.js"],
        )
        result = processor.process(raw, _make_job())
        assert result.name == "Jane Doe"
        assert result.email == "jane@example.com"
        assert result.location == "Austin, TX"
        assert result.skills == ["React", "Node.js"]

    def test_skills_from_summary_when_missing(self, processor: CandidateProcessor) -> None:
        raw = _make_candidate(skills=[], resume_summary="I build things with React and Docker")
        result = processor.process(raw, _make_job())
        assert result.skills == ["React", "Docker"]

    def test_summary_synthesized_when_empty(self, processor: CandidateProcessor) -> None:
        result = processor.process(_make_candidate(resume_summary=""), _make_job())
        assert result.resume_summary.startswith("Professional with 3 years of experience")

    def test_existing_summary_kept(self, processor: CandidateProcessor) -> None:
        result = processor.process(_make_candidate(resume_summary="Builder."), _make_job())
        assert result.resume_summary == "Builder."

    def test_open_to_work_boosts_score(self, processor: CandidateProcessor) -> None:
        base = processor.process(_make_candidate(), _make_job())
        boosted = processor.process(_make_candidate(open_to_work=True), _make_job())
        assert boosted.match_score == base.match_score + 7
        assert boosted.job_seeking_signals.open_to_work is True

    def test_score_always_in_range(self, processor: CandidateProcessor) -> None:
        raw = _make_candidate(hiring=True, skills=[], experience=None, email=None, location=None)
        result = processor.process(raw, _make_job(skills=["Haskell"]))
        assert 0 <= result.match_score <= 100
