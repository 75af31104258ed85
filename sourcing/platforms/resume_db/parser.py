"""Resume search page parser: HTML rows into ResumeDbResult into RawCandidate.

Rules:
  - Every selector lookup uses a fallback tuple.
  - A row without a name (a posting, an ad) is kept with an empty name so it
    still counts as found; the orchestrator never processes it.
  - Missing optional fields become empty values, never errors.
"""

import logging
import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from pydantic import BaseModel, Field

from sourcing.core.schemas import RawCandidate
from sourcing.platforms.resume_db.selectors import (
    LOCATION_SELECTORS,
    NAME_SELECTORS,
    ROW_SELECTORS,
    SKILL_SELECTORS,
    SUMMARY_SELECTORS,
    TITLE_SELECTORS,
)

logger = logging.getLogger(__name__)

_YEARS_RE = re.compile(r"(\d{1,2})\+?\s*(?:years?|yrs?)", re.IGNORECASE)


class ResumeDbResult(BaseModel):
    """One row of a resume database search page."""

    source: str
    name: str
    location: str | None = None
    title: str = ""
    summary: str = ""
    url: str | None = None
    skills: list[str] = Field(default_factory=list)
    years_of_experience: float | None = None


def _text(node: Tag | None) -> str:
    return " ".join(node.get_text(" ").split()) if node is not None else ""


def _find_first(row: Tag, selectors: tuple[str, ...]) -> Tag | None:
    for selector in selectors:
        found = row.select_one(selector)
        if found is not None and _text(found):
            return found
    return None


def _find_rows(soup: BeautifulSoup) -> list[Tag]:
    for selector in ROW_SELECTORS:
        rows = soup.select(selector)
        if rows:
            logger.debug("Matched %d rows with %r", len(rows), selector)
            return rows
    return []


def _skills(row: Tag) -> list[str]:
    for selector in SKILL_SELECTORS:
        tags = [_text(t) for t in row.select(selector)]
        tags = [t for t in tags if t]
        if tags:
            return tags
    return []


class ResumeDbParser:
    """Parses a resume search page for one source."""

    def __init__(self, source: str, base_url: str) -> None:
        self._source = source
        self._base_url = base_url

    def parse_page(self, html: str, max_results: int) -> list[ResumeDbResult]:
        soup = BeautifulSoup(html, "html.parser")
        results: list[ResumeDbResult] = []
        for row in _find_rows(soup):
            if len(results) >= max_results:
                break
            try:
                result = self.parse_row(row)
            except Exception:
                logger.debug("Failed to parse resume row, skipping", exc_info=True)
                continue
            results.append(result)
        return results

    def parse_row(self, row: Tag) -> ResumeDbResult:
        name = _text(_find_first(row, NAME_SELECTORS))
        if not name:
            logger.debug("Resume row without a name, not a candidate")

        summary = _text(_find_first(row, SUMMARY_SELECTORS))
        link = row.find("a", href=True)
        url = urljoin(self._base_url, str(link["href"])) if isinstance(link, Tag) else None
        years = _YEARS_RE.search(summary)

        return ResumeDbResult(
            source=self._source,
            name=name,
            location=_text(_find_first(row, LOCATION_SELECTORS)) or None,
            title=_text(_find_first(row, TITLE_SELECTORS)),
            summary=summary,
            url=url,
            skills=_skills(row),
            years_of_experience=float(years.group(1)) if years else None,
        )


def to_raw_candidate(result: ResumeDbResult) -> RawCandidate:
    summary = result.summary
    if result.title and result.title.lower() not in summary.lower():
        summary = f"{result.title}. {summary}" if summary else result.title
    return RawCandidate(
        name=result.name,
        location=result.location,
        experience=result.years_of_experience,
        skills=result.skills,
        resume_summary=summary,
        profile_url=result.url,
        source=result.source,
        raw_data=result.model_dump(),
    )
