"""Tests for location parsing, strict matching and graded strength."""

import pytest

from sourcing.parsers.location import (
    ParsedLocation,
    coerce_location,
    is_remote,
    location_match_strength,
    locations_match,
    parse_location,
)

# ---------------------------------------------------------------------------
# parse_location
# ---------------------------------------------------------------------------


class TestParseLocation:
    def test_city_state_abbreviation(self) -> None:
        assert parse_location("Austin, TX") == ParsedLocation(city="austin", state="tx")

    def test_city_full_state_name(self) -> None:
        assert parse_location("Austin, Texas") == ParsedLocation(city="austin", state="tx")

    def test_city_country(self) -> None:
        assert parse_location("London, UK") == ParsedLocation(
            city="london", country="united kingdom"
        )

    def test_three_segments(self) -> None:
        loc = parse_location("Austin, Texas, United States")
        assert loc.city == "austin"
        assert loc.state == "tx"
        assert loc.country == "united states"

    def test_single_state(self) -> None:
        assert parse_location("California") == ParsedLocation(state="ca")

    def test_single_country(self) -> None:
        assert parse_location("Germany") == ParsedLocation(country="germany")

    def test_empty(self) -> None:
        assert parse_location("") == ParsedLocation()
        assert parse_location(None) == ParsedLocation()
        assert parse_location(" , ") == ParsedLocation()


# ---------------------------------------------------------------------------
# is_remote
# ---------------------------------------------------------------------------


class TestIsRemote:
    @pytest.mark.parametrize("text", ["Remote", "Remote - US", "Anywhere", "Worldwide"])
    def test_remote_keywords(self, text: str) -> None:
        assert is_remote(text) is True

    def test_not_remote(self) -> None:
        assert is_remote("Austin, TX") is False
        assert is_remote(None) is False


# ---------------------------------------------------------------------------
# locations_match (strict)
# ---------------------------------------------------------------------------


class TestLocationsMatch:
    def test_same_city_and_state(self) -> None:
        assert locations_match("Austin, Texas", "Austin, TX") is True

    def test_same_state_different_city(self) -> None:
        assert locations_match("Dallas, TX", "Austin, TX") is True

    def test_same_country(self) -> None:
        assert locations_match("Manchester, UK", "London, United Kingdom") is True

    def test_city_name_clash_across_states(self) -> None:
        assert locations_match("Portland, OR", "Portland, ME") is False

    def test_different_countries(self) -> None:
        assert locations_match("Berlin, Germany", "Austin, TX") is False

    def test_substring_fallback(self) -> None:
        assert locations_match("Greater Austin Area", "Austin") is True


# ---------------------------------------------------------------------------
# location_match_strength (graded)
# ---------------------------------------------------------------------------


class TestLocationMatchStrength:
    def test_exact(self) -> None:
        assert location_match_strength("Austin, TX", "austin, tx") == 1.0

    def test_substring(self) -> None:
        assert location_match_strength("Austin", "Austin, TX") == 0.8

    def test_same_last_segment(self) -> None:
        assert location_match_strength("Dallas, TX", "Austin, TX") == 0.6

    def test_same_state_different_spelling(self) -> None:
        assert location_match_strength("Dallas, Texas", "Austin, TX") == 0.6

    def test_remote(self) -> None:
        assert location_match_strength("Remote", "Austin, TX") == 0.9

    def test_unrelated(self) -> None:
        assert location_match_strength("Berlin, Germany", "Austin, TX") == 0.3


# ---------------------------------------------------------------------------
# coerce_location
# ---------------------------------------------------------------------------


class TestCoerceLocation:
    def test_string_passthrough(self) -> None:
        assert coerce_location("  Austin, TX ") == "Austin, TX"

    def test_blank_string(self) -> None:
        assert coerce_location("   ") is None

    def test_linkedin_text(self) -> None:
        assert coerce_location({"linkedinText": "Austin, Texas, United States"}) == (
            "Austin, Texas, United States"
        )

    def test_city_country(self) -> None:
        assert coerce_location({"city": "Berlin", "country": "Germany"}) == "Berlin, Germany"

    def test_city_region(self) -> None:
        assert coerce_location({"city": "Austin", "region": "TX"}) == "Austin, TX"

    def test_nested_parsed(self) -> None:
        value = {"parsed": {"city": "Lisbon", "country": "Portugal"}}
        assert coerce_location(value) == "Lisbon, Portugal"

    def test_text_fallback(self) -> None:
        assert coerce_location({"text": "Greater Boston"}) == "Greater Boston"

    def test_empty_mapping(self) -> None:
        assert coerce_location({}) is None
        assert coerce_location(None) is None
