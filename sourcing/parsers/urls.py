"""Profile URL canonicalization."""

import re
from urllib.parse import urlsplit

_LINKEDIN_PROFILE_RE = re.compile(r"linkedin\.com/in/([^/?#]+)", re.IGNORECASE)


def normalize_linkedin_url(url: str | None) -> str | None:
    """Canonical form ``https://www.linkedin.com/in/<slug>`` or None.

    Country subdomains, query strings, fragments, trailing slashes and case
    differences all collapse to the same value.
    """
    if not url:
        return None
    match = _LINKEDIN_PROFILE_RE.search(url.strip())
    if not match:
        return None
    slug = match.group(1).strip().lower()
    return f"https://www.linkedin.com/in/{slug}" if slug else None


def canonical_profile_url(url: str | None) -> str | None:
    """Comparable key for any profile URL, LinkedIn or otherwise."""
    if not url:
        return None
    linkedin = normalize_linkedin_url(url)
    if linkedin:
        return linkedin
    parts = urlsplit(url.strip())
    if not parts.netloc:
        return None
    host = parts.netloc.lower().removeprefix("www.")
    return f"{host}{parts.path.rstrip('/').lower()}"


def name_from_linkedin_slug(url: str | None) -> str | None:
    """Best-effort display name from a profile slug.

    ``jane-doe-4a2b19`` becomes ``Jane Doe``; tokens containing digits are
    treated as LinkedIn's disambiguation suffix and dropped.
    """
    if not url:
        return None
    match = _LINKEDIN_PROFILE_RE.search(url)
    if not match:
        return None
    tokens = [t for t in re.split(r"[-_]+", match.group(1)) if t and not re.search(r"\d", t)]
    if not tokens:
        return None
    return " ".join(t.capitalize() for t in tokens)
