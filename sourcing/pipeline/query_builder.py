"""Translate a Job into provider-specific search queries."""

import logging

from sourcing.core.schemas import DeveloperQuery, Job, ProfileSearchQuery, ResumeDbQuery
from sourcing.parsers.skills import extract_known_skills, is_plausible_skill

logger = logging.getLogger(__name__)

# Exact (lowercased) skill spelling -> GitHub language qualifier
LANGUAGE_ALIASES: dict[str, str] = {
    "javascript": "javascript",
    "js": "javascript",
    "typescript": "typescript",
    "ts": "typescript",
    "python": "python",
    "java": "java",
    "go": "go",
    "golang": "go",
    "rust": "rust",
    "c++": "cpp",
    "cpp": "cpp",
    "c#": "csharp",
    "csharp": "csharp",
    "ruby": "ruby",
    "php": "php",
    "swift": "swift",
    "kotlin": "kotlin",
    "scala": "scala",
    "dart": "dart",
    "r": "r",
}

DEFAULT_LANGUAGE = "javascript"

STOP_WORDS = frozenset(
    {"the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by"}
)

MAX_KEYWORDS = 5
MAX_DESCRIPTION_TERMS = 4


def job_skills(job: Job) -> list[str]:
    """Skills usable as search terms.

    Entries that look like sentences are dropped. When nothing survives, fall
    back to vocabulary terms found in the description.
    """
    skills = [s.strip() for s in job.skills if is_plausible_skill(s)]
    if skills:
        return skills
    extracted = extract_known_skills(job.description)
    if extracted:
        logger.debug("Extracted skills from description for '%s': %s", job.title, extracted)
    return extracted


def job_location(job: Job) -> str | None:
    """Location filter for the job, or None for remote roles."""
    if job.remote:
        return None
    return job.location.strip() if job.location and job.location.strip() else None


def primary_language(skills: list[str]) -> str:
    for skill in skills:
        lang = LANGUAGE_ALIASES.get(skill.strip().lower())
        if lang:
            return lang
    return DEFAULT_LANGUAGE


def experience_keyword(experience_level: str | None) -> str | None:
    if not experience_level:
        return None
    lower = experience_level.lower()
    if "senior" in lower or "lead" in lower:
        return "senior"
    if "mid" in lower:
        return "mid"
    if "junior" in lower or "entry" in lower:
        return "junior"
    return None


def _title_words(title: str) -> list[str]:
    words = []
    for raw in title.lower().split():
        word = raw.strip("()[]{},.:;/|!?\"'")
        if len(word) >= 4 and word not in STOP_WORDS:
            words.append(word)
    return words


def developer_keywords(job: Job) -> list[str]:
    """Title words first, then the seniority keyword, then description terms."""
    candidates = _title_words(job.title)
    level = experience_keyword(job.experience_level)
    if level:
        candidates.append(level)
    candidates.extend(
        t.lower() for t in extract_known_skills(job.description, limit=MAX_DESCRIPTION_TERMS)
    )

    keywords: list[str] = []
    for word in candidates:
        if word not in keywords:
            keywords.append(word)
    return keywords[:MAX_KEYWORDS]


def build_profile_search_query(job: Job, max_results: int = 50) -> ProfileSearchQuery:
    return ProfileSearchQuery(
        job_title=job.title,
        skills=job_skills(job),
        location=job_location(job),
        experience_level=job.experience_level,
        max_results=max_results,
    )


def build_developer_query(job: Job, max_results: int = 50) -> DeveloperQuery:
    return DeveloperQuery(
        language=primary_language(job_skills(job)),
        location=job_location(job),
        keywords=developer_keywords(job),
        experience_level=job.experience_level,
        max_results=max_results,
    )


def build_resume_db_query(job: Job, max_results: int = 50) -> ResumeDbQuery:
    return ResumeDbQuery(
        job_title=job.title,
        skills=job_skills(job),
        location=job_location(job),
        experience_level=job.experience_level,
        max_results=max_results,
    )


def build_search_string(job_title: str, skills: list[str], location: str | None) -> str:
    """Free-text query: quoted title, top three skills OR-ed, then location."""
    parts: list[str] = []
    if job_title:
        parts.append(f'"{job_title}"')
    if skills:
        parts.append(f"({' OR '.join(skills[:3])})")
    if location:
        parts.append(location)
    return " ".join(parts)
