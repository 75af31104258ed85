"""Classify jobs and decide which sources to query and how many candidates each."""

import logging
import re

from sourcing.core.schemas import SOURCES, Job, SourceRecommendation

logger = logging.getLogger(__name__)

TECHNICAL_KEYWORDS = (
    # Titles
    "developer", "engineer", "programmer", "coder", "architect", "devops", "sre",
    "data scientist", "data engineer", "ml engineer", "ai engineer", "analyst",
    "technical", "software", "programming", "coding", "backend", "frontend",
    "fullstack", "full stack", "mobile", "ios", "android", "web developer",
    # Skills and technologies
    "javascript", "typescript", "python", "java", "c++", "c#", "ruby", "php",
    "react", "vue", "angular", "node.js", "express", "django", "flask",
    "sql", "nosql", "mongodb", "postgresql", "mysql", "redis",
    "aws", "azure", "gcp", "docker", "kubernetes", "git", "github",
    "algorithm", "data structure", "api", "microservice", "cloud",
    "machine learning", "deep learning", "neural network", "nlp", "computer vision",
)

NON_TECHNICAL_KEYWORDS = (
    "hr", "human resources", "recruiter", "talent acquisition",
    "marketing", "brand", "advertising", "social media", "content", "seo",
    "sales", "account executive", "business development", "account manager",
    "operations", "logistics", "supply chain", "procurement",
    "finance", "accounting", "bookkeeping", "analyst", "controller",
    "customer service", "support", "representative",
    "designer", "graphic design", "ui/ux", "product design",
    "manager", "director", "coordinator", "specialist", "assistant",
    "administrative", "executive assistant", "office manager",
    "legal", "lawyer", "paralegal", "compliance",
    "healthcare", "nurse", "doctor", "medical",
    "education", "teacher", "instructor", "trainer",
    "consultant", "advisor", "strategist",
)

_TECH_DEPARTMENT_RE = re.compile(r"\b(engineering|it|tech\w*|development|dev|product)\b")

TECHNICAL_WEIGHTS = {"linkedin": 6, "github": 3, "mightyrecruiter": 1, "jobspider": 1}
NON_TECHNICAL_WEIGHTS = {"linkedin": 7, "mightyrecruiter": 3, "jobspider": 3}

TECHNICAL_PRIORITY = {"linkedin": 4, "github": 3, "mightyrecruiter": 2, "jobspider": 1}
NON_TECHNICAL_PRIORITY = {"linkedin": 3, "mightyrecruiter": 2, "jobspider": 1}

_REASONS = {
    (True, "linkedin"): (
        "LinkedIn profiles carry full work history, education and skills"
    ),
    (True, "github"): (
        "GitHub shows developers' actual code and contributions"
    ),
    (True, "mightyrecruiter"): "MightyRecruiter resume database includes technical professionals",
    (True, "jobspider"): "JobSpider resume database includes technical job seekers",
    (False, "linkedin"): "LinkedIn is the primary source for non-technical roles across industries",
    (False, "mightyrecruiter"): "MightyRecruiter has resumes from all industries",
    (False, "jobspider"): "JobSpider resume database includes job seekers from all industries",
}


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![\w+#]){re.escape(keyword)}(?![\w+#])")


_TECH_PATTERNS = tuple(_keyword_pattern(k) for k in TECHNICAL_KEYWORDS)
_NON_TECH_PATTERNS = tuple(_keyword_pattern(k) for k in NON_TECHNICAL_KEYWORDS)


def is_technical_job(job: Job) -> bool:
    """Technical departments decide outright; otherwise compare keyword hits.

    Technical wins when it has at least one hit and at least 1.5 times the
    non-technical hits.
    """
    if job.department and _TECH_DEPARTMENT_RE.search(job.department.lower()):
        return True

    text = " ".join([job.title, job.department, job.description, *job.skills]).lower()
    technical = sum(1 for p in _TECH_PATTERNS if p.search(text))
    non_technical = sum(1 for p in _NON_TECH_PATTERNS if p.search(text))
    logger.debug(
        "Keyword hits for '%s': technical=%d non-technical=%d",
        job.title,
        technical,
        non_technical,
    )
    return technical > 0 and technical >= non_technical * 1.5


def recommend_sources(
    job: Job,
    max_candidates: int,
    available: list[str] | None = None,
) -> list[SourceRecommendation]:
    """Split ``max_candidates`` across sources by weight, sorted by priority.

    GitHub is dropped for non-technical jobs. The rounding remainder goes to
    the highest-priority source.
    """
    technical = is_technical_job(job)
    weights = TECHNICAL_WEIGHTS if technical else NON_TECHNICAL_WEIGHTS
    priorities = TECHNICAL_PRIORITY if technical else NON_TECHNICAL_PRIORITY
    requested = list(available) if available is not None else list(SOURCES)

    sources = []
    for source in requested:
        if source not in weights:
            if source == "github":
                logger.info("Skipping GitHub for non-technical job '%s'", job.title)
            else:
                logger.warning("Unknown source '%s' ignored", source)
            continue
        if source not in sources:
            sources.append(source)

    if not sources:
        logger.warning("No suitable sources for job '%s'", job.title)
        return []

    total_weight = sum(weights[s] for s in sources)
    recommendations = [
        SourceRecommendation(
            source=s,
            priority=priorities[s],
            quota=max_candidates * weights[s] // total_weight,
            reason=_REASONS[(technical, s)],
        )
        for s in sources
    ]
    recommendations.sort(key=lambda r: r.priority, reverse=True)

    remainder = max_candidates - sum(r.quota for r in recommendations)
    if remainder > 0:
        top = recommendations[0]
        recommendations[0] = top.model_copy(update={"quota": top.quota + remainder})

    logger.info(
        "Recommended sources for '%s' (%s): %s",
        job.title,
        "technical" if technical else "non-technical",
        ", ".join(f"{r.source}={r.quota}" for r in recommendations),
    )
    return recommendations


def source_priority(job: Job, available: list[str] | None = None) -> list[str]:
    """Fallback ordering of sources for this job, best first."""
    technical = is_technical_job(job)
    priorities = TECHNICAL_PRIORITY if technical else NON_TECHNICAL_PRIORITY
    requested = list(available) if available is not None else list(SOURCES)
    return sorted((s for s in set(requested) if s in priorities), key=lambda s: -priorities[s])
