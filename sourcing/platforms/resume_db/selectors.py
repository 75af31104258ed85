"""CSS selector constants for resume search result pages.

Ordered from most to least specific. Each constant is a tuple so callers
iterate until a match is found.
"""

# --- Result row container ---
ROW_SELECTORS: tuple[str, ...] = (
    "[data-resume-id]",
    ".resume-card",
    ".resume-item",
    ".resume-listing",
    "table.resumes tr.result",
)

# --- Candidate name ---
NAME_SELECTORS: tuple[str, ...] = (
    "[data-name]",
    ".candidate-name",
    ".name",
    "h2",
    "h3",
    "h4",
)

# --- Location ---
LOCATION_SELECTORS: tuple[str, ...] = (
    "[data-location]",
    ".location",
    ".city",
)

# --- Desired or current title ---
TITLE_SELECTORS: tuple[str, ...] = (
    "[data-title]",
    ".job-title",
    ".title",
)

# --- Summary / objective ---
SUMMARY_SELECTORS: tuple[str, ...] = (
    ".resume-summary",
    ".summary",
    ".objective",
    ".description",
)

# --- Skill tags (all matches collected) ---
SKILL_SELECTORS: tuple[str, ...] = (
    ".skill",
    ".tag",
    ".keyword",
)
