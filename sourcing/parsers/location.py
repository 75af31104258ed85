"""Free-text location parsing and comparison.

Locations arrive as "Austin, TX", "Austin, Texas, United States",
"London, UK", "Germany" or as structured mappings from provider payloads.
Everything here is pure and deterministic.
"""

from dataclasses import dataclass
from typing import Any

US_STATES: dict[str, str] = {
    "alabama": "al", "alaska": "ak", "arizona": "az", "arkansas": "ar",
    "california": "ca", "colorado": "co", "connecticut": "ct", "delaware": "de",
    "florida": "fl", "georgia": "ga", "hawaii": "hi", "idaho": "id",
    "illinois": "il", "indiana": "in", "iowa": "ia", "kansas": "ks",
    "kentucky": "ky", "louisiana": "la", "maine": "me", "maryland": "md",
    "massachusetts": "ma", "michigan": "mi", "minnesota": "mn", "mississippi": "ms",
    "missouri": "mo", "montana": "mt", "nebraska": "ne", "nevada": "nv",
    "new hampshire": "nh", "new jersey": "nj", "new mexico": "nm", "new york": "ny",
    "north carolina": "nc", "north dakota": "nd", "ohio": "oh", "oklahoma": "ok",
    "oregon": "or", "pennsylvania": "pa", "rhode island": "ri", "south carolina": "sc",
    "south dakota": "sd", "tennessee": "tn", "texas": "tx", "utah": "ut",
    "vermont": "vt", "virginia": "va", "washington": "wa", "west virginia": "wv",
    "wisconsin": "wi", "wyoming": "wy", "district of columbia": "dc",
}

_STATE_ABBREVIATIONS = frozenset(US_STATES.values())

_COUNTRY_ALIASES: dict[str, str] = {
    "us": "united states",
    "usa": "united states",
    "u.s.": "united states",
    "u.s.a.": "united states",
    "united states of america": "united states",
    "uk": "united kingdom",
    "u.k.": "united kingdom",
    "great britain": "united kingdom",
    "england": "united kingdom",
    "uae": "united arab emirates",
}

REMOTE_KEYWORDS = ("remote", "anywhere", "worldwide")


@dataclass(frozen=True)
class ParsedLocation:
    city: str | None = None
    state: str | None = None
    country: str | None = None


def _normalize_state(segment: str) -> str | None:
    s = segment.strip().lower().rstrip(".")
    if s in _STATE_ABBREVIATIONS:
        return s
    return US_STATES.get(s)


def _normalize_country(segment: str) -> str:
    s = segment.strip().lower()
    return _COUNTRY_ALIASES.get(s, s)


def parse_location(text: str | None) -> ParsedLocation:
    """Split a location string into city/state/country by comma segments.

    Three segments are city, state, country. With two, the second segment is a
    state when it names or abbreviates a US state, otherwise a country. A lone
    segment is a state when it is a known US state, otherwise a country.
    """
    if not text:
        return ParsedLocation()
    segments = [s.strip() for s in text.split(",") if s.strip()]
    if not segments:
        return ParsedLocation()

    if len(segments) >= 3:
        state = _normalize_state(segments[1]) or segments[1].lower()
        return ParsedLocation(
            city=segments[0].lower(),
            state=state,
            country=_normalize_country(segments[-1]),
        )

    if len(segments) == 2:
        city = segments[0].lower()
        state = _normalize_state(segments[1])
        if state:
            return ParsedLocation(city=city, state=state)
        return ParsedLocation(city=city, country=_normalize_country(segments[1]))

    state = _normalize_state(segments[0])
    if state:
        return ParsedLocation(state=state)
    return ParsedLocation(country=_normalize_country(segments[0]))


def is_remote(text: str | None) -> bool:
    if not text:
        return False
    lower = text.lower()
    return any(k in lower for k in REMOTE_KEYWORDS)


def _compatible(a: str | None, b: str | None) -> bool:
    return a is None or b is None or a == b


def locations_match(candidate: str, job: str) -> bool:
    """Strict location comparison used for validation.

    Cities must agree (and so must state/country where both sides carry
    them); failing that a shared state, then a shared country, then one raw
    string containing the other.
    """
    c = parse_location(candidate)
    j = parse_location(job)

    if c.city and j.city and c.city == j.city:
        return _compatible(c.state, j.state) and _compatible(c.country, j.country)
    if c.state and j.state and c.state == j.state:
        return True
    if c.country and j.country and c.country == j.country:
        return True

    c_lower = candidate.strip().lower()
    j_lower = job.strip().lower()
    if not c_lower or not j_lower:
        return False
    return c_lower in j_lower or j_lower in c_lower


def location_match_strength(candidate: str, job: str) -> float:
    """Graded location fit in [0, 1] used for scoring."""
    c_lower = candidate.strip().lower()
    j_lower = job.strip().lower()

    if c_lower == j_lower:
        return 1.0
    if c_lower in j_lower or j_lower in c_lower:
        return 0.8
    if c_lower.split(",")[-1].strip() == j_lower.split(",")[-1].strip():
        return 0.6
    c = parse_location(candidate)
    j = parse_location(job)
    if (c.state and c.state == j.state) or (c.country and c.country == j.country):
        return 0.6
    if is_remote(candidate) or is_remote(job):
        return 0.9
    return 0.3


def coerce_location(value: str | dict[str, Any] | None) -> str | None:
    """Turn a provider location (string or mapping) into a display string."""
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None

    if value.get("linkedinText"):
        return str(value["linkedinText"]).strip() or None

    parsed = value.get("parsed")
    if isinstance(parsed, dict):
        value = {**parsed, **{k: v for k, v in value.items() if k != "parsed"}}

    city = value.get("city")
    region = value.get("state") or value.get("region")
    country = value.get("country") or value.get("countryName")
    parts = [str(p).strip() for p in (city, country or region) if p]
    if parts:
        return ", ".join(parts)
    text = value.get("text") or value.get("name")
    return str(text).strip() if text else None
