"""
Contact extraction.

Runs independent pattern searches over the whole normalized document; the first
match per field wins. Location is a coarse "City, Region" guess.
"""

import re
from typing import Optional, Sequence

from app.core.patterns import (
    CITY_REGION_RE,
    EMAIL_RE,
    GITHUB_RE,
    LINKEDIN_RE,
    URL_RE,
    find_phone,
    is_bullet,
)
from app.core.schemas import ContactInfo

# Lines at the top of the document get the permissive location check
TOP_OF_DOCUMENT_LINES = 15

US_STATES = {
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA", "HI", "ID", "IL", "IN",
    "IA", "KS", "KY", "LA", "ME", "MD", "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV",
    "NH", "NJ", "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC", "SD", "TN",
    "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY", "DC",
}
MULTI_WORD_STATES = {
    "new york", "new mexico", "new hampshire", "new jersey", "north carolina", "north dakota",
    "south carolina", "south dakota", "west virginia", "rhode island", "puerto rico",
}
COUNTRIES = {
    "usa", "us", "united states", "canada", "uk", "united kingdom", "england", "ireland",
    "germany", "france", "spain", "italy", "netherlands", "sweden", "poland", "portugal",
    "india", "pakistan", "singapore", "australia", "new zealand", "japan", "brazil", "mexico",
}

SEGMENT_SPLIT_RE = re.compile(r"\s*[|•·]\s*|\s{2,}")
ZIP_SUFFIX_RE = re.compile(r"\s+\d{5}(?:-\d{4})?$")


def _first(rx: re.Pattern, text: str) -> str:
    m = rx.search(text)
    return m.group(0) if m else ""


def _first_website(text: str) -> str:
    for m in URL_RE.finditer(text):
        url = m.group(0).rstrip(".;")
        low = url.lower()
        if "linkedin.com" in low or "github.com" in low:
            continue
        return url
    return ""


def _region_ok(region: str, permissive: bool) -> bool:
    r = region.strip().rstrip(".")
    if r in US_STATES:
        return True
    low = r.lower()
    if low in MULTI_WORD_STATES or low in COUNTRIES:
        return True
    if permissive:
        # Single capitalised word such as "Washington" or "Ontario"
        return bool(re.fullmatch(r"[A-Z][a-z]{3,}", r))
    return False


def _location_in_line(line: str, permissive: bool) -> Optional[str]:
    for segment in SEGMENT_SPLIT_RE.split(line):
        seg = ZIP_SUFFIX_RE.sub("", segment.strip().strip(",;"))
        if not seg or not CITY_REGION_RE.match(seg):
            continue
        city, _, region = seg.rpartition(",")
        if _region_ok(region, permissive):
            return f"{city.strip()}, {region.strip()}"
    return None


def guess_location(lines: Sequence[str]) -> str:
    """
    Find the first "City, Region" shaped segment.

    Top-of-document lines accept any capitalised region word; further down only
    state codes, multi-word states and countries count (skills lines such as
    "Python, Java" would otherwise qualify).
    """
    for idx, line in enumerate(lines):
        if is_bullet(line):
            continue
        found = _location_in_line(line, permissive=idx < TOP_OF_DOCUMENT_LINES)
        if found:
            return found
    return ""


def extract_contact(lines: Sequence[str]) -> ContactInfo:
    text = "\n".join(lines)

    phone = ""
    for line in lines:
        found = find_phone(line)
        if found:
            phone = found
            break

    return ContactInfo(
        email=_first(EMAIL_RE, text),
        phone=phone,
        linkedin=_first(LINKEDIN_RE, text),
        github=_first(GITHUB_RE, text),
        website=_first_website(text),
        location=guess_location(lines),
    )
