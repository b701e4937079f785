"""
Compiled patterns shared by the segmenter and the record reconstructors.

Everything here operates on normalized lines (ASCII dashes/quotes, canonical
"• " bullet prefix), see text_normalization.normalize().
"""

import re

# ===== DATES =====

MONTH = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
)
SEASON = r"(?:spring|summer|fall|autumn|winter)"
DATE_POINT = rf"(?:(?:{MONTH}|{SEASON}),?\s*(?:'\d{{2}}|\d{{4}})|\d{{1,2}}/\d{{4}}|\d{{4}})"
ONGOING = r"(?:present|current|now|ongoing|today|date)"
DATE_SEPARATOR = r"\s*(?:-+|\bto\b|\buntil\b|\bthrough\b)\s*"

# "Jan 2020 - Present", "03/2018 - 11/2019", "2019 - 2021", "Summer 2017 to Fall 2018"
DATE_RANGE_RE = re.compile(
    rf"(?<![\w/]){DATE_POINT}{DATE_SEPARATOR}(?:{DATE_POINT}|{ONGOING})(?![\w/])",
    re.IGNORECASE,
)

WORK_MODE_RE = re.compile(r"^(?:remote|hybrid|on-?site|in-?office|full-?time|part-?time|contract)$", re.IGNORECASE)
CITY_REGION_RE = re.compile(r"^[A-Z][A-Za-z.'-]*(?:\s+[A-Z][A-Za-z.'-]*){0,2},\s*[A-Z][A-Za-z.]*(?:\s+[A-Z][A-Za-z.]*)?$")

# ===== BULLETS =====

BULLET_GLYPHS = "•●○◦▪■□►▶➢➤✓✔·‣⁃∙"
BULLET_RE = re.compile(rf"^(?:[{BULLET_GLYPHS}]\s*|[*+-]\s+|\d{{1,2}}[.)]\s+)(?=\S)")

# ===== CONTACT =====

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_RE = re.compile(
    r"(?<![\w/])"
    r"(?:\+\d{1,3}[\s.-]?)?"  # Optional country code
    r"(?:\(\d{2,4}\)|\d{2,4})"  # Area code, optional parens
    r"[\s.-]?\d{3,4}"
    r"[\s.-]?\d{3,4}"
    r"(?![\w/])"
)
LINKEDIN_RE = re.compile(r"(?:https?://)?(?:[a-z]{2,3}\.)?linkedin\.com/(?:in|pub)/[A-Za-z0-9_%-]+/?", re.IGNORECASE)
GITHUB_RE = re.compile(r"(?:https?://)?(?:www\.)?github\.com/[A-Za-z0-9_-]+", re.IGNORECASE)
URL_RE = re.compile(r"(?:https?://|www\.)[^\s)>\]|,]+", re.IGNORECASE)

CONTACT_PATTERNS = (EMAIL_RE, LINKEDIN_RE, GITHUB_RE, URL_RE)


def strip_bullet(text: str) -> str:
    """Drop a leading bullet glyph / list marker, keep the rest verbatim."""
    return BULLET_RE.sub("", text, count=1).strip()


def is_bullet(text: str) -> bool:
    return bool(BULLET_RE.match(text.strip()))


def find_phone(text: str) -> str | None:
    """First phone-shaped run with 7-15 digits that is not a date range."""
    for m in PHONE_RE.finditer(text):
        candidate = m.group(0).strip()
        digits = sum(c.isdigit() for c in candidate)
        if not 7 <= digits <= 15:
            continue
        if DATE_RANGE_RE.search(candidate):
            continue
        return candidate
    return None


def looks_like_contact_line(text: str) -> bool:
    if any(rx.search(text) for rx in CONTACT_PATTERNS):
        return True
    return find_phone(text) is not None
