"""LinkedIn profile-search adapter: Apify actor runs with credential rotation.

Per search:
  1. Acquire a token not yet tried in this search
  2. Start the actor run (30s timeout; transient failures retried 2s/4s/6s)
  3. Quota errors exhaust the token and rotate; transient errors that survive
     their retries rotate too; anything else propagates
  4. Poll the run every 3s for at most 2 minutes
  5. Fetch dataset items (same retry policy) and truncate to max_results
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from sourcing.core.config import ProfileSearchConfig
from sourcing.core.errors import NoCredentialsAvailable, ProviderError, ProviderNotConfiguredError
from sourcing.core.retry import linear_backoff, with_retry
from sourcing.core.schemas import ProfileSearchQuery, ProviderQuery, RawCandidate
from sourcing.pipeline.query_builder import build_search_string
from sourcing.platforms.base import ProviderAdapter
from sourcing.platforms.linkedin.client import TERMINAL_STATUSES, ApifyClient
from sourcing.platforms.linkedin.credentials import CredentialPool
from sourcing.platforms.linkedin.parser import parse_items

logger = logging.getLogger(__name__)

QUOTA_STATUS_CODES = frozenset({402, 429})
QUOTA_MARKERS = ("quota", "run limit", "free tier limit", "usage limit", "monthly usage")
TRANSIENT_MARKERS = ("connection reset", "connection refused", "econnreset", "econnrefused", "timeout", "timed out")


def is_quota_error(error: BaseException) -> bool:
    if isinstance(error, ProviderError) and error.status_code in QUOTA_STATUS_CODES:
        return True
    text = str(error).lower()
    return any(marker in text for marker in QUOTA_MARKERS)


def is_transient_error(error: BaseException) -> bool:
    if isinstance(error, (httpx.TransportError, asyncio.TimeoutError, TimeoutError, ConnectionError)):
        return True
    if is_quota_error(error):
        return False
    text = str(error).lower()
    return any(marker in text for marker in TRANSIENT_MARKERS)


class ProfileSearchAdapter(ProviderAdapter):
    """Profile search through an Apify actor.

    One instance owns one CredentialPool; share the instance to share token
    exhaustion state across scrapes. ``http`` and ``sleep`` are injectable
    for tests.
    """

    def __init__(
        self,
        config: ProfileSearchConfig,
        *,
        pool: CredentialPool | None = None,
        http: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._pool = pool or CredentialPool(
            config.tokens,
            reset_after_s=config.token_reset_hours * 3600,
            source=self.source_id,
        )
        self._http = http
        self._sleep = sleep

    @property
    def source_id(self) -> str:
        return "linkedin"

    @property
    def pool(self) -> CredentialPool:
        return self._pool

    def is_configured(self) -> bool:
        return len(self._pool) > 0

    def build_run_input(self, query: ProfileSearchQuery) -> dict[str, Any]:
        run_input: dict[str, Any] = {
            "searchQuery": build_search_string(query.job_title, query.skills, query.location),
            "currentJobTitles": [query.job_title],
            "maxItems": query.max_results,
            "profileScraperMode": "Full",
        }
        if query.location:
            run_input["locations"] = [query.location]
        return run_input

    async def search(self, query: ProviderQuery) -> list[RawCandidate]:
        if not isinstance(query, ProfileSearchQuery):
            msg = f"{self.source_id} adapter expects a ProfileSearchQuery, got {type(query).__name__}"
            raise TypeError(msg)
        if not self.is_configured():
            msg = "Profile search not configured: set APIFY_API_TOKEN (comma-separate several tokens)"
            raise ProviderNotConfiguredError(msg, source=self.source_id)

        if self._http is not None:
            return await self._search(ApifyClient(self._http, self._config.api_base), query)
        async with httpx.AsyncClient(timeout=self._config.call_timeout_s) as http:
            return await self._search(ApifyClient(http, self._config.api_base), query)

    async def _search(self, client: ApifyClient, query: ProfileSearchQuery) -> list[RawCandidate]:
        run_input = self.build_run_input(query)
        logger.info("Profile search: %s (max %d)", run_input["searchQuery"], query.max_results)

        tried: set[str] = set()
        last_transient: Exception | None = None
        while True:
            try:
                token = self._pool.acquire(exclude=tried)
            except NoCredentialsAvailable:
                if last_transient is not None:
                    msg = f"Profile search failed on every token: {last_transient}"
                    raise ProviderError(msg, source=self.source_id) from last_transient
                raise
            tried.add(token)

            try:
                items = await self._run_actor(client, token, run_input, query.max_results)
            except Exception as e:
                if is_quota_error(e):
                    self._pool.mark_exhausted(token)
                    continue
                if is_transient_error(e):
                    logger.warning("Token failed after retries (%s), trying next token", e)
                    last_transient = e
                    continue
                raise

            candidates = parse_items(items)[: query.max_results]
            logger.info("Profile search returned %d candidates", len(candidates))
            return candidates

    async def _retry(self, operation: Callable[[], Awaitable[Any]], label: str) -> Any:
        return await with_retry(
            operation,
            retries=self._config.retries,
            backoff=linear_backoff(self._config.backoff_s),
            is_retryable=is_transient_error,
            sleep=self._sleep,
            label=label,
        )

    async def _run_actor(
        self,
        client: ApifyClient,
        token: str,
        run_input: dict[str, Any],
        max_results: int,
    ) -> list[dict[str, Any]]:
        run = await self._retry(
            lambda: asyncio.wait_for(
                client.start_run(self._config.actor_id, run_input, token),
                timeout=self._config.call_timeout_s,
            ),
            "Actor start",
        )
        run = await self._wait_for_run(client, token, run)

        dataset_id = run.get("defaultDatasetId")
        if not dataset_id:
            msg = f"Actor run {run.get('id')} has no dataset"
            raise ProviderError(msg, source=self.source_id)

        return await self._retry(  # type: ignore[no-any-return]
            lambda: client.list_items(dataset_id, token, limit=max_results),
            "Dataset fetch",
        )

    async def _wait_for_run(
        self,
        client: ApifyClient,
        token: str,
        run: dict[str, Any],
    ) -> dict[str, Any]:
        run_id = run.get("id", "")
        waited = 0.0
        while run.get("status") not in TERMINAL_STATUSES:
            if waited >= self._config.max_wait_s:
                msg = f"Actor run {run_id} did not finish within {self._config.max_wait_s:.0f}s"
                raise ProviderError(msg, source=self.source_id)
            await self._sleep(self._config.poll_interval_s)
            waited += self._config.poll_interval_s
            run = await self._retry(lambda: client.get_run(run_id, token), "Run status poll")
            logger.debug("Run %s status: %s (%.0fs)", run_id, run.get("status"), waited)

        if run.get("status") != "SUCCEEDED":
            msg = f"Actor run {run_id} ended with status {run.get('status')}"
            raise ProviderError(msg, source=self.source_id)
        return run
