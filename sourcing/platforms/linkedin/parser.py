"""Profile-search payload model and its mapping to RawCandidate.

The actor has shipped several output shapes over time (``fullName`` vs
``firstName``/``lastName``, ``positions`` vs ``experience``, ``about`` vs
``summary``). ProfileSearchResult accepts all of them through aliases so the
mapping below reads one model instead of probing dicts.
"""

import logging
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from sourcing.core.schemas import Education, PortfolioUrls, RawCandidate, WorkExperience
from sourcing.parsers.location import coerce_location
from sourcing.parsers.urls import name_from_linkedin_slug

logger = logging.getLogger(__name__)

SOURCE = "linkedin"
UNKNOWN_NAME = "Unknown Candidate"
MAX_ABOUT_CHARS = 200
MAX_ESTIMATED_YEARS = 15


def _date_text(value: Any) -> str:
    if isinstance(value, dict):
        return str(value.get("text") or value.get("year") or "")
    return str(value) if value else ""


class ProfilePosition(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: str = Field(default="", validation_alias=AliasChoices("position", "title"))
    company_name: str = Field(default="", validation_alias=AliasChoices("companyName", "company"))
    duration: str = ""
    description: str = ""
    start_date: Any = Field(default=None, validation_alias=AliasChoices("startDate", "start_date"))
    end_date: Any = Field(default=None, validation_alias=AliasChoices("endDate", "end_date"))

    @field_validator("title", "company_name", "duration", "description", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    def to_work_experience(self) -> WorkExperience:
        duration = self.duration
        if not duration and (self.start_date or self.end_date):
            start = _date_text(self.start_date)
            end = _date_text(self.end_date) or "Present"
            duration = f"{start} - {end}".strip(" -")
        return WorkExperience(
            role=self.title,
            company=self.company_name,
            duration=duration,
            description=self.description,
        )


class ProfileEducation(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    degree: str = ""
    school_name: str = Field(default="", validation_alias=AliasChoices("schoolName", "school"))
    field_of_study: str = Field(default="", validation_alias=AliasChoices("fieldOfStudy", "field"))
    period: str = Field(default="", validation_alias=AliasChoices("period", "timePeriod", "year"))

    @field_validator("degree", "school_name", "field_of_study", "period", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, dict):
            return _date_text(v.get("startDate")) + (
                f" - {_date_text(v.get('endDate'))}" if v.get("endDate") else ""
            )
        return str(v)


class ProfileSearchResult(BaseModel):
    """One item from the profile-search actor's dataset."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    full_name: str | None = Field(default=None, validation_alias=AliasChoices("fullName", "name"))
    first_name: str | None = Field(default=None, validation_alias="firstName")
    last_name: str | None = Field(default=None, validation_alias="lastName")
    headline: str | None = None
    about: str | None = Field(default=None, validation_alias=AliasChoices("about", "summary"))
    location: str | dict[str, Any] | None = None
    profile_url: str | None = Field(
        default=None, validation_alias=AliasChoices("linkedinUrl", "linkedInUrl", "url", "profileUrl")
    )
    public_identifier: str | None = Field(default=None, validation_alias="publicIdentifier")
    open_to_work: bool = Field(default=False, validation_alias="openToWork")
    hiring: bool = False
    years_of_experience: float | None = Field(default=None, validation_alias="yearsOfExperience")
    positions: list[ProfilePosition] = Field(
        default_factory=list, validation_alias=AliasChoices("experience", "positions")
    )
    education: list[ProfileEducation] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    websites: list[str] = Field(default_factory=list)

    @field_validator("skills", mode="before")
    @classmethod
    def skill_names(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return [s.get("name", "") if isinstance(s, dict) else str(s) for s in v if s]

    @field_validator("websites", mode="before")
    @classmethod
    def website_urls(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return [w.get("url", "") if isinstance(w, dict) else str(w) for w in v if w]

    @field_validator("open_to_work", "hiring", mode="before")
    @classmethod
    def strict_bool(cls, v: Any) -> bool:
        return v is True

    @field_validator("positions", "education", mode="before")
    @classmethod
    def list_or_empty(cls, v: Any) -> Any:
        return v if isinstance(v, list) else []

    @field_validator("years_of_experience", mode="before")
    @classmethod
    def numeric_years(cls, v: Any) -> Any:
        try:
            return float(v) if v not in (None, "") else None
        except (TypeError, ValueError):
            return None

    @property
    def url(self) -> str | None:
        if self.profile_url:
            return self.profile_url
        if self.public_identifier:
            return f"https://www.linkedin.com/in/{self.public_identifier}"
        return None

    def display_name(self) -> str:
        """Name fallback chain; never returns an empty string."""
        if self.full_name and self.full_name.strip():
            return self.full_name.strip()
        parts = [p.strip() for p in (self.first_name, self.last_name) if p and p.strip()]
        if parts:
            return " ".join(parts)
        if self.headline and self.headline.strip():
            return self.headline.split()[0]
        slug_name = name_from_linkedin_slug(self.url)
        if slug_name:
            return slug_name
        return UNKNOWN_NAME

    def estimated_experience(self) -> float | None:
        if self.years_of_experience is not None:
            return self.years_of_experience
        if self.positions:
            return float(min(len(self.positions) * 2, MAX_ESTIMATED_YEARS))
        return None

    def summary(self, work: list[WorkExperience], location: str | None) -> str:
        parts: list[str] = []
        if self.headline:
            parts.append(self.headline.strip())
        if self.about:
            parts.append(self.about.strip()[:MAX_ABOUT_CHARS])
        elif work:
            parts.append(f"{work[0].role} at {work[0].company}")
        if location:
            parts.append(f"Based in {location}")
        return ". ".join(p for p in parts if p) + "." if parts else ""


def to_raw_candidate(result: ProfileSearchResult) -> RawCandidate:
    """Map one profile-search result. Email is always left empty."""
    work = [p.to_work_experience() for p in result.positions]
    education = [
        Education(degree=e.degree, school=e.school_name, field=e.field_of_study, year=e.period)
        for e in result.education
    ]
    location = coerce_location(result.location)
    url = result.url
    return RawCandidate(
        name=result.display_name(),
        email=None,
        location=location,
        experience=result.estimated_experience(),
        skills=[s for s in result.skills if s],
        resume_summary=result.summary(work, location),
        profile_url=url,
        work_experience=work,
        education=education,
        portfolio_urls=PortfolioUrls(
            linkedin=url,
            website=result.websites[0] if result.websites else None,
        ),
        source=SOURCE,
        open_to_work=result.open_to_work,
        hiring=result.hiring,
        raw_data=result.model_dump(mode="json", by_alias=False),
    )


def parse_items(items: list[dict[str, Any]]) -> list[RawCandidate]:
    """Parse dataset items, skipping any that fail validation."""
    candidates: list[RawCandidate] = []
    for item in items:
        try:
            candidates.append(to_raw_candidate(ProfileSearchResult.model_validate(item)))
        except Exception:
            logger.debug("Failed to parse profile item, skipping", exc_info=True)
    return candidates
