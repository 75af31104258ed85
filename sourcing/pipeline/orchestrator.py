"""Orchestrator: wires source planning, adapters, processing, and persistence.

Data flow per recommended source:
  1. Build the source's query with the recommended quota
  2. Adapter search -> raw candidates (capped at max_candidates)
  3. In-run dedup, then job-seeking candidates first
  4. Process -> validity and match score
  5. Gateway existence check, narrative analysis, save
  6. Short of quota: refetch max(needed * 2, 10) and repeat from 3
A failing source becomes a failed ScrapeResult; the remaining sources still run.
Top-up fetches stop at the quota, after MAX_FETCHES searches, or after
EMPTY_FETCH_LIMIT consecutive fetches that fail or add nothing new.
"""

import logging
from collections.abc import Callable

from sourcing.core.db import PersistenceGateway
from sourcing.core.errors import JobNotFoundError, PersistenceError, ProviderNotConfiguredError
from sourcing.core.schemas import (
    Job,
    JobStatus,
    NarrativeAnalysis,
    ProcessedCandidate,
    ProviderQuery,
    RawCandidate,
    ScrapeOptions,
    ScrapeResult,
    ScrapeStatistics,
    SourceRecommendation,
)
from sourcing.pipeline.analysis import FALLBACK_ANALYSIS, NarrativeAnalyzer
from sourcing.pipeline.diagnosis import diagnose_empty_results
from sourcing.pipeline.filters import DeduplicationFilter, prioritize_candidates, run_filter_chain
from sourcing.pipeline.job_analyzer import recommend_sources
from sourcing.pipeline.processor import CandidateProcessor
from sourcing.pipeline.query_builder import (
    build_developer_query,
    build_profile_search_query,
    build_resume_db_query,
)
from sourcing.pipeline.records import build_candidate_record, candidate_linkedin_url
from sourcing.platforms.base import ProviderAdapter

logger = logging.getLogger(__name__)

MAX_FETCHES = 10
EMPTY_FETCH_LIMIT = 3
TOP_UP_MULTIPLIER = 2
MIN_TOP_UP = 10

QUERY_BUILDERS: dict[str, Callable[[Job, int], ProviderQuery]] = {
    "linkedin": build_profile_search_query,
    "github": build_developer_query,
    "mightyrecruiter": build_resume_db_query,
    "jobspider": build_resume_db_query,
}


class ScrapingOrchestrator:
    """Runs one scrape for a job across its recommended sources.

    ``adapters`` maps source id to adapter; a recommended source with no
    adapter is reported as not configured. Pass ``analyzer=None`` to save
    candidates with the fallback narrative and no LLM calls.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        adapters: dict[str, ProviderAdapter],
        processor: CandidateProcessor | None = None,
        analyzer: NarrativeAnalyzer | None = None,
    ) -> None:
        self._gateway = gateway
        self._adapters = adapters
        self._processor = processor or CandidateProcessor()
        self._analyzer = analyzer

    def plan(self, job: Job, options: ScrapeOptions) -> list[SourceRecommendation]:
        return recommend_sources(job, options.max_candidates, options.sources)

    async def scrape_for_job(
        self,
        job_id: str,
        options: ScrapeOptions | None = None,
    ) -> list[ScrapeResult]:
        """Scrape every recommended source for ``job_id``.

        Raises JobNotFoundError when the job does not exist. Returns an
        empty list for jobs that are not Active.
        """
        options = options or ScrapeOptions()
        job = self._gateway.get_job(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        if job.status != JobStatus.ACTIVE:
            logger.info("Job %s is %s, not scraping", job_id, job.status.value)
            return []

        dedup = DeduplicationFilter()
        results: list[ScrapeResult] = []
        for rec in self.plan(job, options):
            if rec.quota <= 0:
                logger.info("Skipping %s: quota 0 for this run", rec.source)
                results.append(ScrapeResult(source=rec.source, success=True, skipped=True))
                continue
            try:
                result = await self._scrape_source(job, rec, options, dedup)
            except Exception as e:
                logger.warning("Source %s failed: %s", rec.source, e, exc_info=True)
                result = ScrapeResult(source=rec.source, success=False, errors=[str(e)])
            results.append(result)

        return results

    def _build_query(self, job: Job, source: str, size: int) -> ProviderQuery:
        builder = QUERY_BUILDERS.get(source)
        if builder is None:
            msg = f"No query builder for source '{source}'"
            raise ProviderNotConfiguredError(msg, source=source)
        return builder(job, size)

    async def _scrape_source(
        self,
        job: Job,
        rec: SourceRecommendation,
        options: ScrapeOptions,
        dedup: DeduplicationFilter,
    ) -> ScrapeResult:
        adapter = self._adapters.get(rec.source)
        if adapter is None:
            msg = f"Source '{rec.source}' is not configured"
            raise ProviderNotConfiguredError(msg, source=rec.source)

        query = self._build_query(job, rec.source, rec.quota)
        logger.info("Searching %s for '%s' (quota %d): %s", rec.source, job.title, rec.quota, rec.reason)
        raw = (await adapter.search(query))[: options.max_candidates]

        stats = ScrapeStatistics(found=len(raw))
        candidates = run_filter_chain(raw, [dedup, prioritize_candidates])
        stats.duplicates += len(raw) - len(candidates)
        await self._process_batch(candidates, job, rec, options, stats)

        fetches = 1
        empty_fetches = 0
        while stats.saved < rec.quota and fetches < MAX_FETCHES and empty_fetches < EMPTY_FETCH_LIMIT:
            fetches += 1
            needed = rec.quota - stats.saved
            size = min(max(needed * TOP_UP_MULTIPLIER, MIN_TOP_UP), options.max_candidates)
            logger.info(
                "%s: saved %d/%d, fetching %d more (fetch %d/%d)",
                rec.source, stats.saved, rec.quota, size, fetches, MAX_FETCHES,
            )
            try:
                more = (await adapter.search(self._build_query(job, rec.source, size)))[:size]
            except Exception as e:
                empty_fetches += 1
                logger.warning("%s top-up fetch failed (%d in a row): %s", rec.source, empty_fetches, e)
                continue

            # Overlap with earlier fetches is expected and not counted as duplicates.
            fresh = run_filter_chain(
                [c for c in more if c.name.strip()], [dedup, prioritize_candidates]
            )
            if not fresh:
                empty_fetches += 1
                logger.info("%s top-up returned nothing new (%d in a row)", rec.source, empty_fetches)
                continue
            empty_fetches = 0
            stats.found += len(fresh)
            await self._process_batch(fresh, job, rec, options, stats)

        if stats.saved < rec.quota and fetches > 1:
            logger.info("%s: stopped at %d/%d saved after %d fetches", rec.source, stats.saved, rec.quota, fetches)

        logger.info(
            "%s: %d found, %d processed, %d invalid, %d below threshold, "
            "%d duplicates, %d save errors, %d saved",
            rec.source,
            stats.found,
            stats.processed,
            stats.invalid,
            stats.below_threshold,
            stats.duplicates,
            stats.save_errors,
            stats.saved,
        )

        diagnosis = None
        if stats.found == 0:
            diagnosis = diagnose_empty_results(job)
            logger.info("%s returned no candidates: %s", rec.source, diagnosis.message)

        return ScrapeResult(
            source=rec.source,
            success=True,
            candidates_found=stats.found,
            candidates_saved=stats.saved,
            statistics=stats,
            diagnosis=diagnosis,
        )

    async def _process_batch(
        self,
        candidates: list[RawCandidate],
        job: Job,
        rec: SourceRecommendation,
        options: ScrapeOptions,
        stats: ScrapeStatistics,
    ) -> None:
        for candidate in candidates:
            if stats.saved >= rec.quota:
                break
            if not candidate.name.strip():
                continue
            await self._handle_candidate(candidate, job, options, stats)

    async def _handle_candidate(
        self,
        candidate: RawCandidate,
        job: Job,
        options: ScrapeOptions,
        stats: ScrapeStatistics,
    ) -> None:
        try:
            processed = self._processor.process(candidate, job)
        except Exception:
            logger.warning("Failed to process candidate '%s'", candidate.name, exc_info=True)
            stats.invalid += 1
            return
        stats.processed += 1

        if not processed.is_valid:
            stats.invalid += 1
            return
        if processed.match_score < options.min_match_score:
            logger.debug(
                "Candidate '%s' below threshold (%d < %d)",
                processed.name,
                processed.match_score,
                options.min_match_score,
            )
            stats.below_threshold += 1
            return

        try:
            if self._gateway.candidate_exists(
                job.id, linkedin_url=candidate_linkedin_url(processed), name=processed.name
            ):
                logger.debug("Candidate '%s' already stored for job %s", processed.name, job.id)
                stats.duplicates += 1
                return
            record = build_candidate_record(processed, job, await self._analyze(processed, job))
            self._gateway.save_candidate(record)
        except PersistenceError as e:
            logger.warning("Could not save '%s': %s", processed.name, e)
            stats.save_errors += 1
            return
        stats.saved += 1

    async def _analyze(self, candidate: ProcessedCandidate, job: Job) -> NarrativeAnalysis:
        if self._analyzer is None:
            return FALLBACK_ANALYSIS
        return await self._analyzer.analyze(candidate, job)
