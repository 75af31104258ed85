"""Candidate normalization, validation and scoring."""

import logging
from collections.abc import Callable
from datetime import date

from sourcing.core.schemas import Job, ProcessedCandidate, RawCandidate
from sourcing.parsers.experience import check_experience
from sourcing.parsers.location import coerce_location, locations_match
from sourcing.parsers.skills import extract_known_skills, normalize_skills
from sourcing.pipeline.scorer import calculate_match_score
from sourcing.pipeline.signals import apply_boost, detect_job_seeking_signals

logger = logging.getLogger(__name__)


def normalize_email(email: str | None) -> str | None:
    if not email:
        return None
    cleaned = email.strip().lower()
    return cleaned if "@" in cleaned else None


def synthesize_summary(experience: float | None, skills: list[str], location: str | None) -> str:
    if experience:
        parts = [f"Professional with {experience:g} years of experience"]
    else:
        parts = ["Experienced professional"]
    if skills:
        parts.append(f"specializing in {', '.join(skills[:3])}")
    if location:
        parts.append(f"based in {location}")
    return " ".join(parts) + "."


class CandidateProcessor:
    """Turns a RawCandidate into a frozen ProcessedCandidate for one job.

    Validation failures are recorded on the result rather than raised. The
    processor does no I/O; ``today`` only feeds the recent-role-end signal.

    Usage::

        processor = CandidateProcessor()
        processed = processor.process(raw, job)
        if processed.is_valid and processed.match_score >= 60:
            ...
    """

    def __init__(self, today: Callable[[], date] = date.today) -> None:
        self._today = today

    def process(self, candidate: RawCandidate, job: Job) -> ProcessedCandidate:
        name = candidate.name.strip()
        email = normalize_email(candidate.email)
        location = coerce_location(candidate.location)

        skills = normalize_skills(candidate.skills)
        if not skills:
            skills = normalize_skills(extract_known_skills(candidate.resume_summary))

        errors = self._validate(name, location, candidate.experience, job)

        normalized = candidate.model_copy(
            update={"name": name, "email": email, "location": location, "skills": skills}
        )
        base_score = calculate_match_score(normalized, job)

        website = candidate.portfolio_urls.website if candidate.portfolio_urls else None
        signals = detect_job_seeking_signals(
            resume_summary=candidate.resume_summary,
            work_experience=candidate.work_experience,
            website=website,
            open_to_work=candidate.open_to_work,
            hiring=candidate.hiring,
            source=candidate.source,
            profile_url=candidate.profile_url,
            today=self._today(),
        )
        score = apply_boost(base_score, signals)

        summary = candidate.resume_summary.strip() or synthesize_summary(
            candidate.experience, skills, location
        )

        if errors:
            logger.debug("Candidate '%s' invalid: %s", name or "<unnamed>", "; ".join(errors))

        return ProcessedCandidate(
            name=name,
            email=email,
            location=location,
            experience=candidate.experience,
            skills=skills,
            resume_summary=summary,
            profile_url=candidate.profile_url,
            work_experience=candidate.work_experience,
            education=candidate.education,
            portfolio_urls=candidate.portfolio_urls,
            source=candidate.source,
            raw_data=candidate.raw_data,
            is_valid=not errors and bool(name),
            match_score=score,
            validation_errors=errors,
            job_seeking_signals=signals,
        )

    @staticmethod
    def _validate(
        name: str,
        location: str | None,
        experience: float | None,
        job: Job,
    ) -> list[str]:
        errors: list[str] = []
        if not name:
            errors.append("Missing name")

        if (
            not job.remote
            and job.location
            and location
            and not locations_match(location, job.location)
        ):
            errors.append(
                f"Location mismatch: candidate in '{location}', job in '{job.location}'"
            )

        if job.experience_level and experience is not None:
            reason = check_experience(experience, job.experience_level)
            if reason:
                errors.append(reason)

        return errors
