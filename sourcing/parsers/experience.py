"""Experience-level parsing and bracket checks."""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class ExperienceBracket:
    level: str  # "entry", "mid" or "senior"
    min_years: float
    max_years: float | None  # None means no upper bound


EXPERIENCE_LEVELS: dict[str, ExperienceBracket] = {
    "Entry Level (0-2 years)": ExperienceBracket("entry", 0, 2),
    "Mid Level (2-5 years)": ExperienceBracket("mid", 2, 5),
    "Senior Level (5+ years)": ExperienceBracket("senior", 5, None),
}

_LABELS = {label.split(" (")[0].lower(): b for label, b in EXPERIENCE_LEVELS.items()}

_PLUS_RE = re.compile(r"(\d+)\s*\+")
_RANGE_RE = re.compile(r"(\d+)\s*[-–]\s*(\d+)")
_SENIOR_RE = re.compile(r"\b(senior|sr|lead|principal|staff)\b")
_MID_RE = re.compile(r"\b(mid|middle|intermediate)\b")
_ENTRY_RE = re.compile(r"\b(junior|jr|entry|associate|graduate)\b")


def parse_experience_level(text: str | None) -> ExperienceBracket | None:
    """Map a requisition's experience text to a bracket.

    Canonical labels map exactly; legacy free text is matched on seniority
    words and "N+" / "N-M" year patterns. Returns None when nothing is
    recognized.
    """
    if not text or not text.strip():
        return None
    stripped = text.strip()
    if stripped in EXPERIENCE_LEVELS:
        return EXPERIENCE_LEVELS[stripped]
    lower = stripped.lower()
    if lower in _LABELS:
        return _LABELS[lower]

    plus = _PLUS_RE.search(lower)
    span = _RANGE_RE.search(lower)

    if _SENIOR_RE.search(lower):
        return ExperienceBracket("senior", int(plus.group(1)) if plus else 5, None)
    if _MID_RE.search(lower):
        if span:
            return ExperienceBracket("mid", int(span.group(1)), int(span.group(2)))
        return ExperienceBracket("mid", 2, 5)
    if _ENTRY_RE.search(lower):
        if span:
            return ExperienceBracket("entry", int(span.group(1)), int(span.group(2)))
        return ExperienceBracket("entry", 0, 2)

    if plus:
        return ExperienceBracket("senior", int(plus.group(1)), None)
    if span:
        low, high = int(span.group(1)), int(span.group(2))
        return ExperienceBracket("entry" if low == 0 else "mid", low, high)
    return None


def _fmt(years: float) -> str:
    return f"{years:g}"


def check_experience(years: float, level_text: str | None) -> str | None:
    """Return a rejection reason, or None when the candidate fits the bracket.

    Entry rejects more than 2 years over the maximum. Mid rejects more than
    1 year under the minimum or more than 3 years over the maximum. Senior
    rejects anything under the minimum and has no upper bound.
    """
    bracket = parse_experience_level(level_text)
    if bracket is None:
        return None

    lo, hi = bracket.min_years, bracket.max_years
    if hi is None:
        if years < lo:
            return (
                f"Candidate has {_fmt(years)} years but job requires {_fmt(lo)}+ years "
                f"({bracket.level}) - underqualified"
            )
        return None

    if bracket.level == "entry":
        if years > hi + 2:
            return (
                f"Candidate has {_fmt(years)} years but job is entry level "
                f"({_fmt(lo)}-{_fmt(hi)} years) - overqualified"
            )
        return None

    if years < lo - 1:
        return (
            f"Candidate has {_fmt(years)} years but job requires "
            f"{_fmt(lo)}-{_fmt(hi)} years ({bracket.level}) - underqualified"
        )
    if years > hi + 3:
        return (
            f"Candidate has {_fmt(years)} years but job requires "
            f"{_fmt(lo)}-{_fmt(hi)} years ({bracket.level}) - overqualified"
        )
    return None


def experience_match_strength(years: float, level_text: str) -> float:
    """Graded experience fit in [0, 1] used for scoring."""
    bracket = parse_experience_level(level_text)
    if bracket is None:
        return 0.7

    lo, hi = bracket.min_years, bracket.max_years
    if hi is None:
        if years >= lo:
            return 1.0
        return 0.7 if years >= lo - 2 else 0.3

    if bracket.level == "entry":
        if years <= hi:
            return 1.0
        return 0.7 if years <= hi + 1 else 0.5

    if lo <= years <= hi:
        return 1.0
    return 0.7 if years >= lo - 1 else 0.3
