"""GitHub user payload model and its mapping to RawCandidate."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from sourcing.core.schemas import PortfolioUrls, RawCandidate, WorkExperience
from sourcing.parsers.skills import extract_known_skills

SOURCE = "github"
NOREPLY_DOMAIN = "users.noreply.github.com"
MAX_REPO_ESTIMATED_YEARS = 15


class GitHubUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    login: str
    name: str | None = None
    email: str | None = None
    location: str | None = None
    bio: str | None = None
    company: str | None = None
    blog: str | None = None
    html_url: str | None = None
    created_at: datetime | None = None
    public_repos: int = 0
    followers: int = 0


class GitHubRepo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    language: str | None = None
    fork: bool = False


class DeveloperResult(BaseModel):
    """A GitHub user with the repo data fetched alongside the profile."""

    profile: GitHubUser
    repos: list[GitHubRepo] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    commit_email: str | None = None

    def email(self) -> str | None:
        for candidate in (self.profile.email, self.commit_email):
            if candidate and "@" in candidate and NOREPLY_DOMAIN not in candidate:
                return candidate
        return None

    def estimated_experience(self, now: datetime | None = None) -> float | None:
        """Account age in years, else one year per ten repos."""
        if self.profile.created_at is not None:
            now = now or datetime.now(timezone.utc)
            created = self.profile.created_at
            if created.tzinfo is None:
                created = created.replace(tzinfo=timezone.utc)
            return float(round((now - created).days / 365.25))
        if self.repos:
            return float(min(round(len(self.repos) / 10), MAX_REPO_ESTIMATED_YEARS))
        return None

    def work_experience(self) -> list[WorkExperience]:
        if not self.profile.company:
            return []
        bio = self.profile.bio or ""
        role = bio.split(" at ")[0].strip() if " at " in bio else "Developer"
        return [
            WorkExperience(
                role=role or "Developer",
                company=self.profile.company.replace("@", "").strip(),
                description=bio,
            )
        ]

    def summary(self) -> str:
        parts: list[str] = []
        if self.profile.bio:
            parts.append(self.profile.bio.strip())
        if self.repos:
            parts.append(f"Active developer with {len(self.repos)}+ repositories")
        if self.languages:
            parts.append(f"Proficient in: {', '.join(self.languages[:5])}")
        if parts:
            return ". ".join(parts)
        return f"{self.profile.name or self.profile.login} - GitHub Developer"


def commit_author_email(commits: list[dict[str, Any]]) -> str | None:
    """First real author email found in a commit listing."""
    for commit in commits:
        author = (commit.get("commit") or {}).get("author") or {}
        email = author.get("email") or ""
        if "@" in email and NOREPLY_DOMAIN not in email:
            return str(email)
    return None


def to_raw_candidate(result: DeveloperResult, now: datetime | None = None) -> RawCandidate:
    profile = result.profile
    skills = result.languages or extract_known_skills(profile.bio)
    return RawCandidate(
        name=profile.name or profile.login,
        email=result.email(),
        location=profile.location,
        experience=result.estimated_experience(now),
        skills=skills,
        resume_summary=result.summary(),
        profile_url=profile.html_url,
        work_experience=result.work_experience(),
        portfolio_urls=PortfolioUrls(github=profile.html_url, website=profile.blog or None),
        source=SOURCE,
        raw_data={
            "profile": profile.model_dump(mode="json"),
            "repos": [r.name for r in result.repos[:5]],
            "languages": result.languages,
        },
    )
