"""AI narrative analysis of candidates about to be saved.

The LLM call is treated as unreliable: any failure, including a missing SDK
or API key, yields FALLBACK_ANALYSIS instead of an exception.
"""

import asyncio
import logging

from sourcing.core.schemas import Job, NarrativeAnalysis, ProcessedCandidate
from sourcing.llm import get_provider, parse_json_response
from sourcing.llm.base import LLMProvider

logger = logging.getLogger(__name__)

FALLBACK_ANALYSIS = NarrativeAnalysis(
    score=0,
    summary="analysis unavailable",
    strengths=[],
    weaknesses=[],
)

_ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert technical recruiter. Analyze the candidate for the "
    "specific job role and give a concise, honest assessment.\n\n"
    "Scoring guidelines (strict but fair):\n"
    "  85-100: Excellent match, 80%+ of required skills and strong experience alignment\n"
    "  70-84:  Good match, 60-79% of required skills and reasonable experience\n"
    "  50-69:  Minimum acceptable, 40-59% of required skills\n"
    "  0-49:   Below minimum, lacks essential skills\n\n"
    "Do not inflate scores.\n\n"
    "Return ONLY a JSON object (no markdown, no explanation):\n"
    '{"score": <integer 0-100>, "summary": "<3-4 sentences>", '
    '"strengths": ["<3-5 items>"], "weaknesses": ["<2-4 items>"]}'
)

MAX_SUMMARY_CHARS = 1000
MAX_ROLES = 5
MAX_ROLE_DESCRIPTION_CHARS = 200


def _build_prompt(candidate: ProcessedCandidate, job: Job) -> str:
    """Assemble the user prompt from job and candidate facts."""
    skills = ", ".join(job.skills) if job.skills else "No specific skills listed"
    job_section = (
        "JOB\n"
        f"Title: {job.title}\n"
        f"Required skills: {skills}\n"
        f"Description: {job.description or 'No description provided'}\n"
    )

    lines = [f"Name: {candidate.name}"]
    if candidate.work_experience:
        lines.append(f"Current role: {candidate.work_experience[0].role}")
    if candidate.location:
        lines.append(f"Location: {candidate.location}")
    if candidate.experience:
        lines.append(f"Experience: {candidate.experience:g} years")
    lines.append(f"Skills: {', '.join(candidate.skills) or 'not listed'}")
    if candidate.resume_summary:
        lines.append(f"\nProfile summary:\n{candidate.resume_summary[:MAX_SUMMARY_CHARS]}")
    if candidate.work_experience:
        lines.append("\nWork experience:")
        for w in candidate.work_experience[:MAX_ROLES]:
            duration = f" ({w.duration})" if w.duration else ""
            lines.append(f"- {w.role} at {w.company}{duration}")
            if w.description:
                lines.append(f"  {w.description[:MAX_ROLE_DESCRIPTION_CHARS]}")

    candidate_section = "CANDIDATE\n" + "\n".join(lines) + "\n"
    return f"{job_section}\n{candidate_section}"


def _parse_analysis(raw_text: str) -> NarrativeAnalysis:
    """Parse the LLM response. Raises ValueError on malformed output."""
    data = parse_json_response(raw_text)
    if "score" not in data or not data.get("summary"):
        msg = "LLM analysis missing 'score' or 'summary'"
        raise ValueError(msg)
    strengths = data.get("strengths") or []
    weaknesses = data.get("weaknesses") or []
    if not isinstance(strengths, list) or not isinstance(weaknesses, list):
        msg = "LLM analysis strengths/weaknesses must be lists"
        raise ValueError(msg)

    score = max(0, min(100, round(float(data["score"]))))
    return NarrativeAnalysis(
        score=score,
        summary=str(data["summary"]),
        strengths=[str(s) for s in strengths],
        weaknesses=[str(w) for w in weaknesses],
    )


class NarrativeAnalyzer:
    """Wraps an LLM provider behind a never-failing async ``analyze``.

    The provider is resolved lazily so a missing SDK only matters when the
    first candidate is analyzed.
    """

    def __init__(
        self,
        provider: LLMProvider | None = None,
        *,
        provider_name: str = "gemini",
        model: str | None = None,
    ) -> None:
        self._provider = provider
        self._provider_name = provider_name
        self._model = model

    def _get_provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = get_provider(self._provider_name)
        return self._provider

    async def analyze(self, candidate: ProcessedCandidate, job: Job) -> NarrativeAnalysis:
        try:
            provider = self._get_provider()
            prompt = _build_prompt(candidate, job)
            raw = await asyncio.to_thread(
                provider.complete, prompt, self._model, system=_ANALYSIS_SYSTEM_PROMPT
            )
            return _parse_analysis(raw)
        except Exception:
            logger.warning(
                "Narrative analysis failed for '%s', using fallback",
                candidate.name,
                exc_info=True,
            )
            return FALLBACK_ANALYSIS
