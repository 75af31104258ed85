"""CLI entry point for the candidate sourcing engine."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from sourcing.core.config import Settings
from sourcing.core.db import PersistenceGateway, SQLiteGateway, init_db
from sourcing.core.errors import JobNotFoundError, PersistenceError
from sourcing.core.schemas import SOURCES, ScrapeOptions, ScrapeResult
from sourcing.pipeline.analysis import NarrativeAnalyzer
from sourcing.pipeline.job_analyzer import is_technical_job
from sourcing.pipeline.orchestrator import ScrapingOrchestrator
from sourcing.platforms.base import ProviderAdapter
from sourcing.platforms.github.adapter import DeveloperAdapter
from sourcing.platforms.linkedin.adapter import ProfileSearchAdapter
from sourcing.platforms.resume_db.adapter import JobSpiderAdapter, MightyRecruiterAdapter

DEFAULT_CONFIG = "config/settings.yaml"
MAX_CANDIDATES_CAP = 200
JOB_BOARDS = ("mightyrecruiter", "jobspider")


def parse_sources(value: str) -> list[str]:
    """Comma-separated source list; ``jobboard`` expands to both resume databases."""
    sources: list[str] = []
    for item in (v.strip().lower() for v in value.split(",")):
        if not item:
            continue
        expanded = JOB_BOARDS if item == "jobboard" else (item,)
        for source in expanded:
            if source not in SOURCES:
                msg = f"unknown source '{source}' (choose from {', '.join(SOURCES)}, jobboard)"
                raise argparse.ArgumentTypeError(msg)
            if source not in sources:
                sources.append(source)
    if not sources:
        msg = "at least one source is required"
        raise argparse.ArgumentTypeError(msg)
    return sources


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        msg = f"invalid integer: '{value}'"
        raise argparse.ArgumentTypeError(msg) from None
    if number < 1:
        msg = f"must be at least 1, got {number}"
        raise argparse.ArgumentTypeError(msg)
    return number


def match_score(value: str) -> int:
    try:
        score = int(value)
    except ValueError:
        msg = f"invalid integer: '{value}'"
        raise argparse.ArgumentTypeError(msg) from None
    if not 0 <= score <= 100:
        msg = f"must be between 0 and 100, got {score}"
        raise argparse.ArgumentTypeError(msg)
    return score


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Candidate sourcing engine - find candidates for a job across sources",
    )
    subparsers = parser.add_subparsers(dest="command")

    # --- scrape subcommand (default) ---
    scrape_parser = subparsers.add_parser("scrape", help="Source candidates for a job")
    scrape_parser.add_argument(
        "--job-id",
        required=True,
        help="ID of the job to source candidates for",
    )
    scrape_parser.add_argument(
        "--sources",
        type=parse_sources,
        default=list(SOURCES),
        help="Comma-separated sources: linkedin,github,jobboard,mightyrecruiter,jobspider "
        "(default: all)",
    )
    scrape_parser.add_argument(
        "--max-candidates",
        type=positive_int,
        help="Maximum candidates to request across sources (default: from config, capped at 200)",
    )
    scrape_parser.add_argument(
        "--min-match-score",
        type=match_score,
        help="Minimum match score required to save a candidate (default: from config)",
    )
    scrape_parser.add_argument(
        "--provider",
        choices=["gemini", "openai", "anthropic"],
        help="LLM provider for narrative analysis (default: from config)",
    )
    scrape_parser.add_argument(
        "--config",
        help=f"Path to settings YAML file (default: {DEFAULT_CONFIG} when present)",
    )
    scrape_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the job classification and source plan without searching",
    )
    scrape_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    # --- list-jobs subcommand ---
    list_parser = subparsers.add_parser("list-jobs", help="List active jobs")
    list_parser.add_argument(
        "--config",
        help=f"Path to settings YAML file (default: {DEFAULT_CONFIG} when present)",
    )
    list_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(2)

    return args


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_settings(config_path: str | None) -> Settings:
    """Explicit paths must exist; the default path is optional."""
    if config_path is not None:
        settings = Settings.from_yaml(config_path)
    elif Path(DEFAULT_CONFIG).exists():
        settings = Settings.from_yaml(DEFAULT_CONFIG)
    else:
        settings = Settings()
    return settings.with_env()


def build_options(args: argparse.Namespace, settings: Settings) -> ScrapeOptions:
    max_candidates = args.max_candidates or settings.scraping.max_candidates
    min_score = args.min_match_score
    if min_score is None:
        min_score = settings.scraping.min_match_score
    return ScrapeOptions(
        sources=args.sources,
        max_candidates=max(1, min(max_candidates, MAX_CANDIDATES_CAP)),
        min_match_score=min_score,
    )


def build_adapters(settings: Settings) -> dict[str, ProviderAdapter]:
    return {
        "linkedin": ProfileSearchAdapter(settings.profile_search),
        "github": DeveloperAdapter(settings.developer_search),
        "mightyrecruiter": MightyRecruiterAdapter(settings.resume_databases),
        "jobspider": JobSpiderAdapter(settings.resume_databases),
    }


def build_orchestrator(
    settings: Settings,
    gateway: PersistenceGateway,
    provider: str | None,
) -> ScrapingOrchestrator:
    analyzer = None
    if settings.analysis.enabled:
        analyzer = NarrativeAnalyzer(
            provider_name=provider or settings.analysis.provider,
            model=settings.analysis.model,
        )
    return ScrapingOrchestrator(gateway, build_adapters(settings), analyzer=analyzer)


def dry_run(
    orchestrator: ScrapingOrchestrator,
    gateway: PersistenceGateway,
    job_id: str,
    options: ScrapeOptions,
) -> None:
    """Print the classification and source plan without searching."""
    job = gateway.get_job(job_id)
    if job is None:
        raise JobNotFoundError(job_id)

    kind = "technical" if is_technical_job(job) else "non-technical"
    print(f"[DRY RUN] Job {job.id}: '{job.title}' ({job.department}, {kind})")
    print(f"[DRY RUN] Status: {job.status.value}, location: {job.location or 'n/a'}"
          f"{' (remote)' if job.remote else ''}")
    print(f"[DRY RUN] Max candidates {options.max_candidates}, min score {options.min_match_score}")

    for rec in orchestrator.plan(job, options):
        print(f"[DRY RUN] {rec.source}: priority {rec.priority}, quota {rec.quota}")
        print(f"  Reason: {rec.reason}")

    print("[DRY RUN] Would save 0 candidates (no network in dry-run)")


def print_summary(job_id: str, results: list[ScrapeResult]) -> int:
    """Print per-source outcomes and totals; return the number saved."""
    total_found = sum(r.candidates_found for r in results)
    total_saved = sum(r.candidates_saved for r in results)
    failed = [r for r in results if not r.success]

    print(f"\nScrape complete for job {job_id}: {total_found} found, {total_saved} saved, "
          f"{len(failed)} of {len(results)} sources failed.")

    for r in results:
        if r.skipped:
            print(f"  [SKIPPED] {r.source}: quota 0 for this run")
            continue
        status = "OK" if r.success else "FAILED"
        print(f"  [{status}] {r.source}: {r.candidates_found} found, {r.candidates_saved} saved")
        stats = r.statistics
        if r.success and stats.found:
            print(f"    invalid {stats.invalid}, below threshold {stats.below_threshold}, "
                  f"duplicates {stats.duplicates}, save errors {stats.save_errors}")
        for error in r.errors:
            print(f"    Error: {error}")
        if r.diagnosis is not None:
            print(f"    Hint: {r.diagnosis.message}")
            if r.diagnosis.suggestion:
                print(f"    Suggestion ({r.diagnosis.action}): {r.diagnosis.suggestion}")

    return total_saved


async def run(
    orchestrator: ScrapingOrchestrator,
    gateway: PersistenceGateway,
    job_id: str,
    options: ScrapeOptions,
) -> None:
    """Run the scrape and bump the job's applicant counter."""
    results = await orchestrator.scrape_for_job(job_id, options)
    if not results:
        print(f"No sources ran for job {job_id} (job inactive or no suitable sources).")
        return

    saved = print_summary(job_id, results)
    if saved:
        try:
            gateway.increment_applicants_count(job_id, saved)
        except PersistenceError as e:
            print(f"Warning: could not update applicant count: {e}", file=sys.stderr)


def cmd_list_jobs(gateway: PersistenceGateway) -> None:
    """Handle list-jobs subcommand."""
    jobs = gateway.list_active_jobs()
    if not jobs:
        print("No active jobs.")
        return
    print(f"{len(jobs)} active jobs:")
    for job in jobs:
        where = "Remote" if job.remote else (job.location or "n/a")
        print(f"  {job.id}: {job.title} [{job.department}] - {where} "
              f"({job.applicants_count} applicants)")


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    conn = init_db(settings.database.path)
    gateway = SQLiteGateway(conn)
    try:
        if args.command == "list-jobs":
            cmd_list_jobs(gateway)
            return

        options = build_options(args, settings)
        orchestrator = build_orchestrator(settings, gateway, args.provider)
        try:
            if args.dry_run:
                dry_run(orchestrator, gateway, args.job_id, options)
            else:
                asyncio.run(run(orchestrator, gateway, args.job_id, options))
        except (JobNotFoundError, PersistenceError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
