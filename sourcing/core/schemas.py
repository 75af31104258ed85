"""Core data models for the candidate sourcing pipeline."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SOURCES = ("linkedin", "github", "mightyrecruiter", "jobspider")


class JobStatus(str, Enum):
    ACTIVE = "Active"
    CLOSED = "Closed"
    DRAFT = "Draft"


class Job(BaseModel):
    """A hiring requisition. Read-only for the duration of a scrape."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    department: str = "General"
    company: str = ""
    location: str | None = None
    remote: bool = False
    experience_level: str | None = None
    skills: list[str] = Field(default_factory=list)
    description: str = ""
    status: JobStatus = JobStatus.ACTIVE
    user_id: str = ""
    applicants_count: int = 0


class WorkExperience(BaseModel):
    role: str = ""
    company: str = ""
    duration: str = ""
    description: str = ""


class Education(BaseModel):
    degree: str = ""
    school: str = ""
    field: str = ""
    year: str = ""


class PortfolioUrls(BaseModel):
    github: str | None = None
    linkedin: str | None = None
    website: str | None = None
    twitter: str | None = None

    def is_empty(self) -> bool:
        return not any((self.github, self.linkedin, self.website, self.twitter))


class RawCandidate(BaseModel):
    """A candidate profile as emitted by a provider adapter."""

    name: str = ""
    email: str | None = None
    location: str | dict[str, Any] | None = None
    experience: float | None = None
    skills: list[str] = Field(default_factory=list)
    resume_summary: str = ""
    profile_url: str | None = None
    work_experience: list[WorkExperience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    portfolio_urls: PortfolioUrls | None = None
    source: str
    open_to_work: bool = False
    hiring: bool = False
    raw_data: dict[str, Any] = Field(default_factory=dict)


class JobSeekingSignals(BaseModel):
    """Passive indicators that a candidate is open to a move."""

    model_config = ConfigDict(frozen=True)

    open_to_work: bool = False
    job_seeking_language: bool = False
    career_transition: bool = False
    recent_activity: bool = False
    signal_strength: int = Field(default=0, ge=-20, le=100)
    detected_signals: list[str] = Field(default_factory=list)


class ProcessedCandidate(BaseModel):
    """A normalized, validated and scored candidate.

    Frozen: created once per RawCandidate by the processor.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    email: str | None = None
    location: str | None = None
    experience: float | None = None
    skills: list[str] = Field(default_factory=list)
    resume_summary: str = ""
    profile_url: str | None = None
    work_experience: list[WorkExperience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    portfolio_urls: PortfolioUrls | None = None
    source: str
    raw_data: dict[str, Any] = Field(default_factory=dict)
    is_valid: bool
    match_score: int = Field(ge=0, le=100)
    validation_errors: list[str] = Field(default_factory=list)
    job_seeking_signals: JobSeekingSignals = Field(default_factory=JobSeekingSignals)


# ---------------------------------------------------------------------------
# Provider queries
# ---------------------------------------------------------------------------


class ProfileSearchQuery(BaseModel):
    job_title: str
    skills: list[str] = Field(default_factory=list)
    location: str | None = None
    experience_level: str | None = None
    max_results: int = Field(default=50, ge=1)


class DeveloperQuery(BaseModel):
    language: str = "javascript"
    location: str | None = None
    keywords: list[str] = Field(default_factory=list)
    experience_level: str | None = None
    max_results: int = Field(default=50, ge=1)


class ResumeDbQuery(BaseModel):
    job_title: str
    skills: list[str] = Field(default_factory=list)
    location: str | None = None
    experience_level: str | None = None
    max_results: int = Field(default=50, ge=1)


ProviderQuery = ProfileSearchQuery | DeveloperQuery | ResumeDbQuery


# ---------------------------------------------------------------------------
# Analysis and results
# ---------------------------------------------------------------------------


class SourceRecommendation(BaseModel):
    source: str
    priority: int
    quota: int
    reason: str


class Diagnosis(BaseModel):
    """Why a search probably came back empty, and what to relax."""

    message: str
    suggestion: str | list[str] | None = None
    action: str


class NarrativeAnalysis(BaseModel):
    """Opaque AI assessment attached to a saved candidate."""

    score: int = Field(default=0, ge=0, le=100)
    summary: str = ""
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)


class ScrapeStatistics(BaseModel):
    found: int = 0
    processed: int = 0
    invalid: int = 0
    below_threshold: int = 0
    duplicates: int = 0
    save_errors: int = 0
    saved: int = 0


class ScrapeResult(BaseModel):
    """Per-source outcome of one orchestration call."""

    source: str
    success: bool
    candidates_found: int = 0
    candidates_saved: int = 0
    errors: list[str] = Field(default_factory=list)
    statistics: ScrapeStatistics = Field(default_factory=ScrapeStatistics)
    diagnosis: Diagnosis | None = None
    skipped: bool = False


class ScrapeOptions(BaseModel):
    sources: list[str] = Field(default_factory=lambda: list(SOURCES))
    max_candidates: int = Field(default=50, ge=1, le=200)
    min_match_score: int = Field(default=60, ge=0, le=100)


class CandidateRecord(BaseModel):
    """The row handed to the persistence gateway for an accepted candidate."""

    user_id: str
    job_id: str
    name: str
    email: str | None = None
    role: str
    location: str | None = None
    experience: int = 0
    skills: list[str] = Field(default_factory=list)
    resume_summary: str = ""
    ai_match_score: int = Field(default=0, ge=0, le=100)
    ai_analysis: NarrativeAnalysis = Field(default_factory=NarrativeAnalysis)
    stage: str = "New"
    source: str
    is_test: bool = False
    applied_date: datetime = Field(default_factory=datetime.now)
    profile_url: str | None = None
    portfolio_urls: PortfolioUrls | None = None
    linkedin_url: str | None = None
    work_experience: list[WorkExperience] | None = None
    education: list[Education] | None = None
