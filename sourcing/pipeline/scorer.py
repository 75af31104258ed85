"""Weighted match scoring of a normalized candidate against a job.

Weights: skills 60, experience 20, location 10, profile completeness 10.
"""

from sourcing.core.schemas import Job, RawCandidate
from sourcing.parsers.experience import experience_match_strength
from sourcing.parsers.location import location_match_strength

SKILLS_WEIGHT = 60
EXPERIENCE_WEIGHT = 20
LOCATION_WEIGHT = 10
COMPLETENESS_WEIGHT = 10

DEFAULT_SKILLS_RATIO = 0.5
COMPLETENESS_FACTORS = 6


def skills_ratio(candidate_skills: list[str], job_skills: list[str]) -> float:
    """Share of job skills covered, capped at 1.

    A candidate skill counts when it equals or contains a job skill, or is
    contained by one.
    """
    wanted = [s.lower() for s in job_skills if s.strip()]
    if not wanted:
        return DEFAULT_SKILLS_RATIO
    have = [s.lower() for s in candidate_skills]
    matching = sum(1 for s in have if any(s == w or w in s or s in w for w in wanted))
    return min(1.0, matching / len(wanted))


def completeness(candidate: RawCandidate) -> float:
    present = sum(
        1
        for value in (
            candidate.name.strip(),
            candidate.email,
            candidate.location,
            candidate.experience is not None,
            candidate.skills,
            candidate.resume_summary.strip(),
        )
        if value
    )
    bonus = 0.0
    if candidate.work_experience:
        bonus += 0.5
    if candidate.portfolio_urls is not None and not candidate.portfolio_urls.is_empty():
        bonus += 0.5
    return min(1.0, (present + bonus) / COMPLETENESS_FACTORS)


def calculate_match_score(candidate: RawCandidate, job: Job) -> int:
    """Base score in [0, 100] before any job-seeking boost.

    ``candidate.location`` must already be coerced to a string.
    """
    score = skills_ratio(candidate.skills, job.skills) * SKILLS_WEIGHT

    if job.experience_level and candidate.experience is not None:
        score += experience_match_strength(candidate.experience, job.experience_level) * EXPERIENCE_WEIGHT
    else:
        score += EXPERIENCE_WEIGHT / 2

    location = candidate.location if isinstance(candidate.location, str) else None
    if job.location and location:
        score += location_match_strength(location, job.location) * LOCATION_WEIGHT
    else:
        score += LOCATION_WEIGHT / 2

    score += completeness(candidate) * COMPLETENESS_WEIGHT
    return max(0, min(100, round(score)))
