"""In-run filters applied to raw candidates before processing.

Filter order:
  1. DeduplicationFilter: in-memory within run, by canonical profile URL or name
  2. prioritize_candidates: open-to-work and job-seeking candidates first
"""

import logging
from collections.abc import Callable

from sourcing.core.schemas import RawCandidate
from sourcing.parsers.urls import canonical_profile_url
from sourcing.pipeline.signals import has_priority_language

logger = logging.getLogger(__name__)

# A filter is a callable that takes candidates and returns a subset.
Filter = Callable[[list[RawCandidate]], list[RawCandidate]]


def dedup_key(candidate: RawCandidate) -> str | None:
    url = canonical_profile_url(candidate.profile_url)
    if url:
        return f"url:{url}"
    name = candidate.name.strip().lower()
    return f"name:{name}" if name else None


class DeduplicationFilter:
    """Remove duplicates by canonical profile URL, else lowercase name.

    Stateful: tracks seen keys across calls within the same filter instance,
    so one instance shared across sources dedups the whole run. Candidates
    with neither URL nor name pass through untouched.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()
        self.removed = 0

    def __call__(self, candidates: list[RawCandidate]) -> list[RawCandidate]:
        result: list[RawCandidate] = []
        for c in candidates:
            key = dedup_key(c)
            if key is None:
                result.append(c)
                continue
            if key not in self._seen:
                self._seen.add(key)
                result.append(c)
        deduped = len(candidates) - len(result)
        self.removed += deduped
        if deduped:
            logger.debug("DeduplicationFilter: removed %d duplicates", deduped)
        return result


def _priority(candidate: RawCandidate) -> tuple[int, int, int]:
    return (
        0 if candidate.open_to_work else 1,
        1 if candidate.hiring else 0,
        0 if has_priority_language(candidate.resume_summary) else 1,
    )


def prioritize_candidates(candidates: list[RawCandidate]) -> list[RawCandidate]:
    """Stable sort: open-to-work, then not hiring, then seeking language."""
    return sorted(candidates, key=_priority)


def run_filter_chain(
    candidates: list[RawCandidate],
    filters: list[Filter],
) -> list[RawCandidate]:
    """Apply filters in order, returning the surviving candidates."""
    result = candidates
    for f in filters:
        result = f(result)
    return result
