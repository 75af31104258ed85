"""Explain zero-result searches and suggest how to relax them."""

import re

from sourcing.core.schemas import Diagnosis, Job

COMMON_CITIES = frozenset(
    {
        "london", "new york", "san francisco", "los angeles", "chicago", "boston",
        "seattle", "austin", "denver", "miami", "atlanta", "paris", "berlin",
        "amsterdam", "toronto", "sydney", "singapore", "tokyo", "dubai", "mumbai",
        "bangalore", "hong kong",
    }
)

COMMON_TITLES = (
    "software engineer",
    "developer",
    "product manager",
    "designer",
    "data analyst",
    "marketing manager",
    "sales",
    "customer success",
    "recruiter",
    "accountant",
)

SLANG_TITLES = {
    "ninja": "engineer",
    "rockstar": "engineer",
    "wizard": "engineer",
    "guru": "specialist",
    "hacker": "engineer",
    "jedi": "engineer",
}

MAX_TITLE_CHARS = 40
MAX_TITLE_WORDS = 5
MAX_SKILLS = 3

_SENIORITY_RE = re.compile(r"\b(senior|junior|lead|principal|staff)\s+", re.IGNORECASE)
_PARENS_RE = re.compile(r"\(.*?\)")
_WITH_TAIL_RE = re.compile(r"\bwith\b.*$", re.IGNORECASE)
_YEARS_RE = re.compile(r"\d+\+?\s*years?", re.IGNORECASE)
_SLANG_RE = re.compile(r"\b(" + "|".join(SLANG_TITLES) + r")\b", re.IGNORECASE)


def simplify_title(title: str) -> str:
    """Drop seniority words, parentheticals, "with ..." tails and year counts."""
    simple = _SENIORITY_RE.sub("", title)
    simple = _PARENS_RE.sub("", simple)
    simple = _WITH_TAIL_RE.sub("", simple)
    simple = _YEARS_RE.sub("", simple)
    return " ".join(simple.split())


def is_common_location(location: str) -> bool:
    return location.split(",")[0].strip().lower() in COMMON_CITIES


def is_common_title(title: str) -> bool:
    lower = title.lower()
    return any(common in lower for common in COMMON_TITLES)


def replace_slang(title: str) -> str:
    return _SLANG_RE.sub(lambda m: SLANG_TITLES[m.group(1).lower()], title.lower())


def diagnose_empty_results(job: Job) -> Diagnosis:
    """Pick the single most likely reason a job's search came back empty."""
    title = job.title.strip()
    location = (job.location or "").strip()
    skills = job.skills

    if len(title) > MAX_TITLE_CHARS or len(title.split()) > MAX_TITLE_WORDS:
        simple = simplify_title(title)
        return Diagnosis(
            message=(
                f'Your job title "{title}" is very specific. '
                f'Try a simpler title like "{simple}" for more results.'
            ),
            suggestion=simple,
            action="edit_title",
        )

    if location and not job.remote and not is_common_location(location):
        city = location.split(",")[0].strip()
        return Diagnosis(
            message=(
                f'Location "{location}" returned no results. '
                f'Try just the city name (e.g. "{city}").'
            ),
            suggestion=city,
            action="edit_location",
        )

    if len(skills) > MAX_SKILLS:
        return Diagnosis(
            message=(
                f"Your search has {len(skills)} required skills which is very "
                "restrictive. Try reducing to 1-2 key skills."
            ),
            suggestion=list(skills[:2]),
            action="reduce_skills",
        )

    if not is_common_title(title) and _SLANG_RE.search(title):
        suggested = replace_slang(title)
        return Diagnosis(
            message=f'"{title}" is an uncommon job title. Try "{suggested}" instead.',
            suggestion=suggested,
            action="edit_title",
        )

    simple = simplify_title(title)
    return Diagnosis(
        message=(
            f'No candidates found for "{title}" in "{location or "Any location"}". '
            "Try removing the location to search globally, or use a broader "
            f'job title like "{simple}".'
        ),
        suggestion=["remove_location", simple],
        action="multiple_options",
    )
