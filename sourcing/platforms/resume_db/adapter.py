"""Resume-database adapters: one search page GET, parsed with BeautifulSoup.

The two public resume boards differ only in search URL and query parameter
names; page parsing is shared through ResumeDbParser.
"""

import logging
from abc import abstractmethod
from typing import Any

import httpx

from sourcing.core.config import ResumeDatabaseConfig
from sourcing.core.errors import ProviderError, ProviderNotConfiguredError
from sourcing.core.schemas import ProviderQuery, RawCandidate, ResumeDbQuery
from sourcing.platforms.base import ProviderAdapter
from sourcing.platforms.resume_db.parser import ResumeDbParser, to_raw_candidate

logger = logging.getLogger(__name__)


class ResumeDatabaseAdapter(ProviderAdapter):
    """Base for resume boards that serve server-rendered search pages."""

    name: str = ""
    base_url: str = ""
    search_path: str = ""

    def __init__(
        self,
        config: ResumeDatabaseConfig,
        *,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._http = http
        self._parser = ResumeDbParser(self.name, self.base_url)

    @property
    def source_id(self) -> str:
        return self.name

    @property
    def search_url(self) -> str:
        return f"{self.base_url}{self.search_path}"

    def is_configured(self) -> bool:
        return self._config.enabled

    @abstractmethod
    def build_params(self, query: ResumeDbQuery) -> dict[str, Any]:
        """Query-string parameters for this board's search page."""

    async def search(self, query: ProviderQuery) -> list[RawCandidate]:
        if not isinstance(query, ResumeDbQuery):
            msg = f"{self.source_id} adapter expects a ResumeDbQuery, got {type(query).__name__}"
            raise TypeError(msg)
        if not self.is_configured():
            msg = f"{self.source_id} search is disabled in config (resume_databases.enabled)"
            raise ProviderNotConfiguredError(msg, source=self.source_id)

        if self._http is not None:
            html = await self._fetch(self._http, query)
        else:
            async with httpx.AsyncClient(timeout=self._config.timeout_s) as http:
                html = await self._fetch(http, query)

        results = self._parser.parse_page(html, query.max_results)
        logger.info("%s search returned %d resumes", self.source_id, len(results))
        return [to_raw_candidate(r) for r in results]

    async def _fetch(self, http: httpx.AsyncClient, query: ResumeDbQuery) -> str:
        params = {k: v for k, v in self.build_params(query).items() if v}
        logger.debug("%s GET %s %s", self.source_id, self.search_url, params)
        try:
            response = await http.get(
                self.search_url,
                params=params,
                headers={"User-Agent": self._config.user_agent},
                follow_redirects=True,
            )
        except httpx.HTTPError as e:
            msg = f"{self.source_id} request failed: {e}"
            raise ProviderError(msg, source=self.source_id) from e
        if response.status_code >= 400:
            msg = f"{self.source_id} search failed with HTTP {response.status_code}"
            raise ProviderError(msg, source=self.source_id, status_code=response.status_code)
        return response.text


class MightyRecruiterAdapter(ResumeDatabaseAdapter):
    name = "mightyrecruiter"
    base_url = "https://www.mightyrecruiter.com"
    search_path = "/resumes/search"

    def build_params(self, query: ResumeDbQuery) -> dict[str, Any]:
        return {
            "q": query.job_title,
            "location": query.location or "",
            "skills": ",".join(query.skills),
        }


class JobSpiderAdapter(ResumeDatabaseAdapter):
    name = "jobspider"
    base_url = "https://www.jobspider.com"
    search_path = "/job/resume_search.asp"

    def build_params(self, query: ResumeDbQuery) -> dict[str, Any]:
        return {
            "keyword": query.job_title,
            "location": query.location or "",
            "skills": " ".join(query.skills),
        }
