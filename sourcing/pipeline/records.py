"""Build the persistence record for an accepted candidate."""

from datetime import datetime

from sourcing.core.schemas import CandidateRecord, Job, NarrativeAnalysis, ProcessedCandidate
from sourcing.parsers.urls import normalize_linkedin_url


def candidate_linkedin_url(candidate: ProcessedCandidate) -> str | None:
    """Canonical LinkedIn URL from the portfolio links, else the profile URL."""
    if candidate.portfolio_urls and candidate.portfolio_urls.linkedin:
        url = normalize_linkedin_url(candidate.portfolio_urls.linkedin)
        if url:
            return url
    return normalize_linkedin_url(candidate.profile_url)


def augment_summary(candidate: ProcessedCandidate) -> str:
    """Append profile-link and job-seeking blocks to the resume summary."""
    blocks = [candidate.resume_summary.strip()]

    links = []
    if candidate.profile_url:
        links.append(f"Profile: {candidate.profile_url}")
    if candidate.portfolio_urls:
        for label, url in candidate.portfolio_urls.model_dump(exclude_none=True).items():
            if url and url != candidate.profile_url:
                links.append(f"{label.capitalize()}: {url}")
    if links:
        blocks.append("Profile Links:\n" + "\n".join(f"- {line}" for line in links))

    signals = candidate.job_seeking_signals
    if signals.detected_signals:
        lines = "\n".join(f"- {s}" for s in signals.detected_signals)
        blocks.append(
            f"Job-Seeking Signals (strength {signals.signal_strength}):\n{lines}"
        )

    return "\n\n".join(b for b in blocks if b)


def build_candidate_record(
    candidate: ProcessedCandidate,
    job: Job,
    analysis: NarrativeAnalysis,
    *,
    now: datetime | None = None,
) -> CandidateRecord:
    """Optional fields are only populated when the candidate has them."""
    portfolio = (
        candidate.portfolio_urls
        if candidate.portfolio_urls and not candidate.portfolio_urls.is_empty()
        else None
    )
    return CandidateRecord(
        user_id=job.user_id,
        job_id=job.id,
        name=candidate.name,
        email=candidate.email,
        role=job.title,
        location=candidate.location or job.location,
        experience=round(candidate.experience or 0),
        skills=candidate.skills,
        resume_summary=augment_summary(candidate),
        ai_match_score=candidate.match_score,
        ai_analysis=analysis,
        source=candidate.source,
        applied_date=now or datetime.now(),
        profile_url=candidate.profile_url,
        portfolio_urls=portfolio,
        linkedin_url=candidate_linkedin_url(candidate),
        work_experience=candidate.work_experience or None,
        education=candidate.education or None,
    )
