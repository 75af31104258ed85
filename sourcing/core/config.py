"""Configuration models and YAML loader for the candidate sourcing engine."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: str = "data/sourcing.db"


class ProfileSearchConfig(BaseModel):
    """Apify actor settings for LinkedIn profile search."""

    actor_id: str = "harvestapi/linkedin-profile-search"
    api_base: str = "https://api.apify.com/v2"
    tokens: list[str] = Field(default_factory=list)
    call_timeout_s: float = Field(default=30.0, gt=0)
    poll_interval_s: float = Field(default=3.0, gt=0)
    max_wait_s: float = Field(default=120.0, gt=0)
    token_reset_hours: float = Field(default=24.0, gt=0)
    retries: int = Field(default=3, ge=0, le=10)
    backoff_s: float = Field(default=2.0, ge=0)

    @field_validator("tokens", mode="before")
    @classmethod
    def split_tokens(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [t.strip() for t in v.split(",") if t.strip()]
        return v


class DeveloperSearchConfig(BaseModel):
    """GitHub REST API settings."""

    api_base: str = "https://api.github.com"
    token: str | None = None
    request_delay_s: float = Field(default=0.1, ge=0.1)
    timeout_s: float = Field(default=30.0, gt=0)
    max_pages: int = Field(default=5, ge=1, le=10)


class ResumeDatabaseConfig(BaseModel):
    """Settings shared by the resume-database scrapers."""

    enabled: bool = True
    timeout_s: float = Field(default=30.0, gt=0)
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
    )


class ScrapingConfig(BaseModel):
    """Defaults applied when the CLI does not override them."""

    max_candidates: int = Field(default=50, ge=1, le=200)
    min_match_score: int = Field(default=60, ge=0, le=100)


class AnalysisConfig(BaseModel):
    """AI narrative analysis of saved candidates."""

    enabled: bool = True
    provider: str = "gemini"
    model: str | None = None

    @field_validator("provider")
    @classmethod
    def provider_known(cls, v: str) -> str:
        valid = {"anthropic", "openai", "gemini"}
        if v not in valid:
            msg = f"analysis.provider must be one of {sorted(valid)}, got '{v}'"
            raise ValueError(msg)
        return v


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    profile_search: ProfileSearchConfig = Field(default_factory=ProfileSearchConfig)
    developer_search: DeveloperSearchConfig = Field(default_factory=DeveloperSearchConfig)
    resume_databases: ResumeDatabaseConfig = Field(default_factory=ResumeDatabaseConfig)
    scraping: ScrapingConfig = Field(default_factory=ScrapingConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)

    def with_env(self, environ: dict[str, str] | None = None) -> "Settings":
        """Return a copy with secrets overlaid from the environment.

        APIFY_API_TOKEN may hold several comma-separated tokens.
        """
        env = os.environ if environ is None else environ
        settings = self

        tokens = env.get("APIFY_API_TOKEN", "")
        if tokens.strip():
            profile = ProfileSearchConfig.model_validate(
                {**settings.profile_search.model_dump(), "tokens": tokens}
            )
            settings = settings.model_copy(update={"profile_search": profile})

        github_token = env.get("GITHUB_TOKEN")
        if github_token:
            developer = settings.developer_search.model_copy(update={"token": github_token})
            settings = settings.model_copy(update={"developer_search": developer})

        db_path = env.get("SOURCING_DB_PATH")
        if db_path:
            database = settings.database.model_copy(update={"path": db_path})
            settings = settings.model_copy(update={"database": database})

        return settings
