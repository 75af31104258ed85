"""GitHub developer-profile adapter using the public REST API.

Exact-location filters on GitHub's user search are frequently
over-restrictive, so several queries are tried from most to least specific
and the first one returning users wins.
"""

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx

from sourcing.core.config import DeveloperSearchConfig
from sourcing.core.errors import ProviderError
from sourcing.core.retry import first_success
from sourcing.core.schemas import DeveloperQuery, ProviderQuery, RawCandidate
from sourcing.platforms.base import ProviderAdapter
from sourcing.platforms.github.parser import (
    DeveloperResult,
    GitHubRepo,
    GitHubUser,
    commit_author_email,
    to_raw_candidate,
)

logger = logging.getLogger(__name__)

SENIORITY_WORDS = frozenset(
    {"senior", "mid", "junior", "lead", "principal", "entry", "associate", "jr", "middle", "intermediate"}
)

REPOS_PER_USER = 10
LANGUAGE_REPOS = 5


@dataclass
class _SearchSession:
    """Client and call count for one search; spacing applies within it."""

    http: httpx.AsyncClient
    calls: int = 0


def follower_threshold(keywords: list[str]) -> str:
    """Senior >50, mid >20, junior >5, otherwise >10."""
    words = {k.lower() for k in keywords}
    if words & {"senior", "lead", "principal"}:
        return ">50"
    if words & {"mid", "middle", "intermediate"}:
        return ">20"
    if words & {"junior", "jr", "entry", "associate"}:
        return ">5"
    return ">10"


def build_search_queries(query: DeveloperQuery) -> list[tuple[str, str]]:
    """Ordered (name, q) pairs from most to least specific."""
    threshold = follower_threshold(query.keywords)
    tech = [k for k in query.keywords if k.lower() not in SENIORITY_WORDS and len(k) >= 3][:2]
    tech_part = f" {' '.join(tech)}" if tech else ""
    followers = f"followers:{threshold}"

    queries: list[tuple[str, str]] = []
    if query.location and query.language:
        queries.append(
            (
                "location+language+keywords",
                f'location:"{query.location}" language:{query.language}{tech_part} {followers}',
            )
        )
    if query.language:
        queries.append(("language+keywords", f"language:{query.language}{tech_part} {followers}"))
        queries.append(("language", f"language:{query.language} {followers}"))
    if tech:
        queries.append(("keywords", f"{' '.join(tech)} {followers}"))
    queries.append(("active users", f"{followers} type:user"))
    return queries


class DeveloperAdapter(ProviderAdapter):
    """Searches GitHub users and enriches each with repos and languages.

    Works anonymously; GITHUB_TOKEN only raises the rate limit. Successive
    API calls within one search are spaced by at least ``request_delay_s``;
    concurrent searches on one adapter each keep their own spacing.
    """

    def __init__(
        self,
        config: DeveloperSearchConfig,
        *,
        http: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._http = http
        self._sleep = sleep

    @property
    def source_id(self) -> str:
        return "github"

    def is_configured(self) -> bool:
        return True

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "candidate-sourcing/0.1",
        }
        if self._config.token:
            headers["Authorization"] = f"Bearer {self._config.token}"
        return headers

    async def _get(self, session: _SearchSession, path: str, **params: Any) -> Any:
        if session.calls:
            await self._sleep(self._config.request_delay_s)
        session.calls += 1
        try:
            response = await session.http.get(
                f"{self._config.api_base.rstrip('/')}{path}",
                params=params or None,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            msg = f"GitHub request {path} failed: {e}"
            raise ProviderError(msg, source=self.source_id) from e
        if response.status_code >= 400:
            msg = f"GitHub request {path} failed ({response.status_code}): {response.text[:200]}"
            raise ProviderError(msg, source=self.source_id, status_code=response.status_code)
        return response.json()

    async def search(self, query: ProviderQuery) -> list[RawCandidate]:
        if not isinstance(query, DeveloperQuery):
            msg = f"{self.source_id} adapter expects a DeveloperQuery, got {type(query).__name__}"
            raise TypeError(msg)

        if self._http is not None:
            return await self._search(_SearchSession(self._http), query)
        async with httpx.AsyncClient(timeout=self._config.timeout_s) as http:
            return await self._search(_SearchSession(http), query)

    async def _search(self, session: _SearchSession, query: DeveloperQuery) -> list[RawCandidate]:
        strategies = [
            (name, self._user_search(session, q, query.max_results))
            for name, q in build_search_queries(query)
        ]
        users = await first_success(strategies)
        if not users:
            logger.warning("All GitHub queries returned 0 users (location %r)", query.location)
            return []

        candidates: list[RawCandidate] = []
        for login in users[: query.max_results]:
            try:
                result = await self._fetch_developer(session, login)
            except Exception:
                logger.warning("Failed to fetch GitHub profile for %s, skipping", login, exc_info=True)
                continue
            candidates.append(to_raw_candidate(result))

        logger.info("GitHub search returned %d developer profiles", len(candidates))
        return candidates

    def _user_search(
        self,
        session: _SearchSession,
        q: str,
        max_results: int,
    ) -> Callable[[], Awaitable[list[str]]]:
        async def run() -> list[str]:
            per_page = min(100, max(max_results, 30))
            pages = min(math.ceil(max_results / per_page), self._config.max_pages)
            logins: list[str] = []
            for page in range(1, pages + 1):
                body = await self._get(
                    session,
                    "/search/users",
                    q=q,
                    per_page=per_page,
                    page=page,
                    sort="followers",
                    order="desc",
                )
                items = body.get("items", [])
                logins.extend(item["login"] for item in items if item.get("login"))
                if len(logins) >= max_results or len(items) < per_page:
                    break
            logger.debug("GitHub query %r: %d users", q, len(logins))
            return logins[:max_results]

        return run

    async def _fetch_developer(self, session: _SearchSession, login: str) -> DeveloperResult:
        profile = GitHubUser.model_validate(await self._get(session, f"/users/{login}"))
        repos = [
            GitHubRepo.model_validate(r)
            for r in await self._get(
                session,
                f"/users/{login}/repos",
                per_page=REPOS_PER_USER,
                sort="updated",
                direction="desc",
            )
        ]

        commit_email = None
        if not profile.email and repos:
            try:
                commits = await self._get(
                    session,
                    f"/repos/{login}/{repos[0].name}/commits",
                    author=login,
                    per_page=10,
                )
                commit_email = commit_author_email(commits)
            except ProviderError as e:
                logger.debug("Could not read commits for %s: %s", login, e)

        languages: list[str] = []
        for repo in repos[:LANGUAGE_REPOS]:
            try:
                repo_languages = await self._get(session, f"/repos/{login}/{repo.name}/languages")
            except ProviderError as e:
                logger.debug("Could not read languages for %s/%s: %s", login, repo.name, e)
                continue
            for lang in repo_languages:
                if lang not in languages:
                    languages.append(lang)

        return DeveloperResult(
            profile=profile,
            repos=repos,
            languages=languages,
            commit_email=commit_email,
        )
