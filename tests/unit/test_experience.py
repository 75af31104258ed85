"""Tests for experience-level parsing and bracket checks."""

import pytest

from sourcing.parsers.experience import (
    ExperienceBracket,
    check_experience,
    experience_match_strength,
    parse_experience_level,
)


class TestParseExperienceLevel:
    def test_canonical_labels(self) -> None:
        assert parse_experience_level("Entry Level (0-2 years)") == ExperienceBracket("entry", 0, 2)
        assert parse_experience_level("Mid Level (2-5 years)") == ExperienceBracket("mid", 2, 5)
        assert parse_experience_level("Senior Level (5+ years)") == ExperienceBracket(
            "senior", 5, None
        )

    def test_label_without_years(self) -> None:
        assert parse_experience_level("senior level") == ExperienceBracket("senior", 5, None)

    def test_senior_with_plus(self) -> None:
        assert parse_experience_level("Lead engineer, 8+ years") == ExperienceBracket(
            "senior", 8, None
        )

    def test_mid_with_range(self) -> None:
        assert parse_experience_level("Intermediate 3-6 years") == ExperienceBracket("mid", 3, 6)

    def test_junior_words(self) -> None:
        assert parse_experience_level("Junior") == ExperienceBracket("entry", 0, 2)
        assert parse_experience_level("jr developer") == ExperienceBracket("entry", 0, 2)

    def test_bare_plus_is_senior(self) -> None:
        assert parse_experience_level("7+ years") == ExperienceBracket("senior", 7, None)

    def test_bare_range(self) -> None:
        assert parse_experience_level("0-3 years") == ExperienceBracket("entry", 0, 3)
        assert parse_experience_level("3-5 years") == ExperienceBracket("mid", 3, 5)

    @pytest.mark.parametrize("text", [None, "", "   ", "whatever"])
    def test_unrecognized(self, text: str | None) -> None:
        assert parse_experience_level(text) is None


class TestCheckExperience:
    def test_entry_overqualified(self) -> None:
        reason = check_experience(6, "Entry Level (0-2 years)")
        assert reason is not None
        assert "overqualified" in reason

    def test_entry_within_tolerance(self) -> None:
        assert check_experience(4, "Entry Level (0-2 years)") is None

    def test_senior_underqualified(self) -> None:
        reason = check_experience(3, "Senior Level (5+ years)")
        assert reason is not None
        assert "underqualified" in reason

    def test_senior_no_upper_bound(self) -> None:
        assert check_experience(25, "Senior Level (5+ years)") is None

    def test_mid_tolerances(self) -> None:
        assert check_experience(1, "Mid Level (2-5 years)") is None
        assert check_experience(8, "Mid Level (2-5 years)") is None
        assert "underqualified" in (check_experience(0.5, "Mid Level (2-5 years)") or "")
        assert "overqualified" in (check_experience(9, "Mid Level (2-5 years)") or "")

    def test_unknown_level_never_rejects(self) -> None:
        assert check_experience(30, "something odd") is None
        assert check_experience(0, None) is None


class TestExperienceMatchStrength:
    def test_unknown_level(self) -> None:
        assert experience_match_strength(3, "???") == 0.7

    def test_senior(self) -> None:
        assert experience_match_strength(6, "Senior Level (5+ years)") == 1.0
        assert experience_match_strength(3, "Senior Level (5+ years)") == 0.7
        assert experience_match_strength(1, "Senior Level (5+ years)") == 0.3

    def test_entry(self) -> None:
        assert experience_match_strength(2, "Entry Level (0-2 years)") == 1.0
        assert experience_match_strength(3, "Entry Level (0-2 years)") == 0.7
        assert experience_match_strength(6, "Entry Level (0-2 years)") == 0.5

    def test_mid(self) -> None:
        assert experience_match_strength(3, "Mid Level (2-5 years)") == 1.0
        assert experience_match_strength(5, "Mid Level (2-5 years)") == 1.0
        assert experience_match_strength(1, "Mid Level (2-5 years)") == 0.7
        assert experience_match_strength(0, "Mid Level (2-5 years)") == 0.3
