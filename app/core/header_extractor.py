"""Name / title detection from the lines above the first section header."""

import re
from typing import Optional, Sequence, Tuple

from app.core.patterns import CITY_REGION_RE, looks_like_contact_line

HEADER_WINDOW = 8
TITLE_MAX_CHARS = 150

PUNCTUATION_ONLY_RE = re.compile(r"^[\W_]+$")
NAME_RE = re.compile(r"^[A-Za-z][A-Za-z .'-]*$")


def _normalize_name(name: str) -> str:
    """ALL-CAPS names display as Title Case; anything else is left alone."""
    t = name.strip()
    if t.isupper():
        return t.title()
    return t


def extract_header(lines: Sequence[str], first_section_start: Optional[int]) -> Tuple[str, str]:
    """
    Return (name, title).

    Only the lines before the first detected section are considered, capped at
    HEADER_WINDOW. Contact lines and punctuation-only lines are skipped; the first
    short alphabetic line (1-5 words) is the name, the next remaining line is the title.
    """
    limit = len(lines) if first_section_start is None else first_section_start
    window = lines[:min(limit, HEADER_WINDOW)]

    name = ""
    title = ""
    for line in window:
        t = line.strip()
        if len(t) < 3 or PUNCTUATION_ONLY_RE.match(t):
            continue
        if looks_like_contact_line(t):
            continue

        if not name:
            words = t.split()
            if 1 <= len(words) <= 5 and NAME_RE.match(t):
                name = _normalize_name(t)
                continue

        if name and not title and 5 < len(t) < TITLE_MAX_CHARS:
            if CITY_REGION_RE.match(t):
                continue
            title = t
            break

    return name, title
