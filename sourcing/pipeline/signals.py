"""Passive job-seeking signal detection and score boost."""

import logging
import math
import re
from datetime import date

from sourcing.core.schemas import JobSeekingSignals, WorkExperience

logger = logging.getLogger(__name__)

JOB_SEEKING_PHRASES = (
    "open to",
    "looking for",
    "seeking",
    "available",
    "actively",
    "next opportunity",
    "next challenge",
    "next role",
    "new opportunity",
    "new challenge",
    "career change",
    "freelance",
    "consulting",
    "contract work",
    "exploring",
    "considering",
    "interested in",
)

TRANSITION_PHRASES = (
    "contract",
    "freelance",
    "consultant",
    "temporary",
    "short-term",
    "transition",
    "between",
)

_CONTRACT_TERMS = ("contract", "temporary", "freelance", "consultant")

# Subset used to order candidates before processing.
PRIORITY_PHRASES = ("open to", "looking for", "seeking", "available", "actively")

OPEN_TO_WORK_POINTS = 50
HIRING_POINTS = -20
SEEKING_LANGUAGE_POINTS = 25
TRANSITION_POINTS = 20
SHORT_TENURE_POINTS = 15
CONTRACT_HISTORY_POINTS = 15
RECENT_END_POINTS = 20
ACTIVE_DEVELOPER_POINTS = 5

MIN_STRENGTH = -20
MAX_STRENGTH = 100

_MONTHS_RE = re.compile(r"\b(mos?|months?)\b")
_YEARS_RE = re.compile(r"\b(yrs?|years?)\b")
_YEAR_RE = re.compile(r"\b((?:19|20)\d{2})\b")


def _first_match(text: str, phrases: tuple[str, ...]) -> str | None:
    for phrase in phrases:
        if phrase in text:
            return phrase
    return None


def _is_short_tenure(role: WorkExperience) -> bool:
    duration = role.duration.lower()
    return bool(_MONTHS_RE.search(duration)) and not _YEARS_RE.search(duration)


def _end_year(role: WorkExperience) -> int | None:
    if not role.duration or "present" in role.duration.lower():
        return None
    years = _YEAR_RE.findall(role.duration)
    return int(years[-1]) if years else None


def detect_job_seeking_signals(
    *,
    resume_summary: str,
    work_experience: list[WorkExperience],
    website: str | None = None,
    open_to_work: bool = False,
    hiring: bool = False,
    source: str = "",
    profile_url: str | None = None,
    today: date | None = None,
) -> JobSeekingSignals:
    """Score how likely a candidate is to be open to a move.

    Each signal contributes once. The total is clamped to [-20, 100].
    """
    today = today or date.today()
    strength = 0
    detected: list[str] = []
    seeking_language = False
    transition = False
    recent_activity = False

    if open_to_work:
        detected.append('"Open to work" badge')
        strength += OPEN_TO_WORK_POINTS
    if hiring:
        detected.append("Actively hiring (may not be job-seeking)")
        strength += HIRING_POINTS

    text = " ".join(
        [
            resume_summary or "",
            " ".join(f"{w.role} {w.company} {w.description}" for w in work_experience),
            website or "",
        ]
    ).lower()

    phrase = _first_match(text, JOB_SEEKING_PHRASES)
    if phrase:
        seeking_language = True
        detected.append(f'Job-seeking language: "{phrase}"')
        strength += SEEKING_LANGUAGE_POINTS

    phrase = _first_match(text, TRANSITION_PHRASES)
    if phrase:
        transition = True
        detected.append(f'Career transition language: "{phrase}"')
        strength += TRANSITION_POINTS

    if work_experience:
        latest = work_experience[0]
        if _is_short_tenure(latest):
            transition = True
            detected.append("Short tenure at most recent role")
            strength += SHORT_TENURE_POINTS

        recent_text = " ".join(
            f"{w.role} {w.company} {w.description}" for w in work_experience[:2]
        ).lower()
        if any(term in recent_text for term in _CONTRACT_TERMS):
            transition = True
            detected.append("Contract/freelance work history")
            strength += CONTRACT_HISTORY_POINTS

        end_year = _end_year(latest)
        if end_year is not None and end_year >= today.year - 1:
            transition = True
            detected.append(f"Most recent role ended in {end_year}")
            strength += RECENT_END_POINTS

    if source == "github" and profile_url:
        recent_activity = True
        detected.append("Active developer profile")
        strength += ACTIVE_DEVELOPER_POINTS

    strength = max(MIN_STRENGTH, min(MAX_STRENGTH, strength))
    return JobSeekingSignals(
        open_to_work=open_to_work,
        job_seeking_language=seeking_language,
        career_transition=transition,
        recent_activity=recent_activity,
        signal_strength=strength,
        detected_signals=detected,
    )


def signal_boost(signals: JobSeekingSignals) -> int:
    """Points added to the match score; 100 strength is worth +14."""
    return math.floor(signals.signal_strength / 6.67)


def apply_boost(base_score: int, signals: JobSeekingSignals) -> int:
    boost = signal_boost(signals)
    boosted = max(0, min(100, base_score + boost))
    if boost:
        logger.debug("Job-seeking boost %+d (%d -> %d)", boost, base_score, boosted)
    return boosted


def should_prioritize(signals: JobSeekingSignals, threshold: int = 30) -> bool:
    return signals.signal_strength >= threshold


def has_priority_language(text: str | None) -> bool:
    lower = (text or "").lower()
    return any(p in lower for p in PRIORITY_PHRASES)
