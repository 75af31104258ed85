"""Closed technical vocabulary and skill-list normalization."""

import re

# Display spelling is what ends up on the candidate record.
TECH_VOCABULARY: tuple[str, ...] = (
    # Languages
    "JavaScript", "TypeScript", "Python", "Java", "Golang", "Rust", "C++", "C#",
    "Ruby", "PHP", "Swift", "Kotlin", "Scala", "Dart",
    # Frameworks and runtimes
    "React", "Angular", "Vue", "Next.js", "Node.js", "Express", "Django", "Flask",
    "FastAPI", "Spring", "Rails", "Laravel", ".NET", "Flutter", "React Native",
    # Data stores
    "SQL", "PostgreSQL", "MySQL", "MongoDB", "Redis", "Elasticsearch", "DynamoDB",
    "Cassandra", "Kafka",
    # Cloud and infrastructure
    "AWS", "Azure", "GCP", "Docker", "Kubernetes", "Terraform", "Linux", "CI/CD",
    # Practices and APIs
    "GraphQL", "REST", "Microservices", "Machine Learning", "Data Science",
    "Agile", "Scrum", "TDD", "Git", "HTML", "CSS",
)


def _term_pattern(term: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![\w+#]){re.escape(term.lower())}(?![\w+#])")


_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (term, _term_pattern(term)) for term in TECH_VOCABULARY
)


def extract_known_skills(text: str | None, limit: int | None = None) -> list[str]:
    """Return vocabulary terms found in ``text``, in vocabulary order."""
    if not text:
        return []
    lower = text.lower()
    found = [term for term, pattern in _PATTERNS if pattern.search(lower)]
    return found[:limit] if limit is not None else found


def is_plausible_skill(skill: str) -> bool:
    """Reject entries that look like sentences rather than skills.

    Only sentence punctuation counts as a period; "Node.js" and ".NET" pass.
    """
    s = skill.strip()
    if not s or len(s) > 50 or len(s.split()) > 5:
        return False
    return ". " not in s and not s.endswith(".")


def normalize_skills(skills: list[str]) -> list[str]:
    """Title-case each word and drop case-insensitive duplicates, keeping order."""
    result: list[str] = []
    seen: set[str] = set()
    for skill in skills:
        words = skill.strip().split()
        if not words:
            continue
        titled = " ".join(w[:1].upper() + w[1:].lower() for w in words)
        key = titled.lower()
        if key not in seen:
            seen.add(key)
            result.append(titled)
    return result
