"""
Education parsing module for rebuilding education entries from the Education section.

Deterministic, positional rules:
  - a line with a degree keyword opens a new entry (or completes an open entry
    that so far only has an institution)
  - with no entry open, any short line opens one
  - following lines fill institution, then location

A degree line that also names the school ("B.S. Computer Science, Stanford University")
is split into degree and institution.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from app.core.patterns import CITY_REGION_RE, DATE_RANGE_RE, strip_bullet
from app.core.schemas import EducationItem

logger = logging.getLogger(__name__)

OPEN_LINE_MAX_CHARS = 100
INSTITUTION_MAX_CHARS = 100
LOCATION_MAX_CHARS = 60

# ===== DEGREE KEYWORDS (Strong Signal) =====

DEGREE_WORD_RE = re.compile(
    r"\b(?:bachelor(?:'?s)?|master(?:'?s)?|associate(?:'?s)?|doctor(?:ate|al)?|diploma"
    r"|certificat(?:e|ion)s?|ph\.?\s?d\.?|mba)\b",
    re.IGNORECASE,
)

# Case-sensitive so state codes ("Boston, MA") and ordinary words do not count;
# two-letter forms need their dots.
DEGREE_ABBREV_RE = re.compile(
    r"(?<![A-Za-z])(?:[BM]\.[SAE]\.|[BM]\.?Sc\.?|[BM]\.?Tech|B\.?Eng|M\.?Eng|Ph\.?D\.?|M\.?B\.?A\.?|BS|BA)(?![A-Za-z])"
)

# ===== INSTITUTION KEYWORDS =====

INSTITUTION_RE = re.compile(
    r"\b(?:university|college|institute|school|academy|polytechnic|conservatory)\b",
    re.IGNORECASE,
)

PART_SEPARATORS = (
    re.compile(r"\s*\|\s*"),
    re.compile(r"\s+-+\s+"),
    re.compile(r"\s*,\s*"),
)

# Detail lines that never fill institution/location
DETAIL_RE = re.compile(
    r"^(?:gpa|cgpa|grade|honou?rs|dean'?s list|relevant coursework|coursework|major|minor|thesis|activities|awards?)\b",
    re.IGNORECASE,
)
YEAR_ONLY_RE = re.compile(r"^(?:(?:expected|graduated|class of)\s*:?\s*)?(?:[A-Za-z]{3,9}\.?\s+)?(?:19|20)\d{2}$", re.IGNORECASE)
TRAILING_YEAR_RE = re.compile(r"[\s,(|-]*\b(?:19|20)\d{2}\)?$")


def has_degree_keyword(text: str) -> bool:
    """
    Check if text contains a degree keyword.

    Examples:
        "B.S. in Computer Science" -> True
        "Master of Business Administration" -> True
        "Boston, MA" -> False
    """
    return bool(DEGREE_WORD_RE.search(text) or DEGREE_ABBREV_RE.search(text))


def is_institution_keyword(text: str) -> bool:
    return bool(INSTITUTION_RE.search(text))


def _clean_degree(text: str) -> str:
    t = DATE_RANGE_RE.sub("", text)
    t = TRAILING_YEAR_RE.sub("", t)
    t = re.sub(r"\(\s*\)", "", t)
    return re.sub(r"\s+", " ", t).strip(" |,;-")


def split_degree_line(text: str) -> Tuple[str, str, str]:
    """
    Split a combined line into (degree, institution, location).

    Tries "|", " - " and "," in that order; the first separator that yields a
    degree part and an institution part wins. Anything after the institution
    is kept as location.

    Examples:
        "B.S. Computer Science, Stanford University, Stanford, CA"
            -> ("B.S. Computer Science", "Stanford University", "Stanford, CA")
        "Harvard University | MBA" -> ("MBA", "Harvard University", "")
    """
    for sep in PART_SEPARATORS:
        parts = [p.strip() for p in sep.split(text) if p.strip()]
        if len(parts) < 2:
            continue

        inst_idx = next(
            (i for i, p in enumerate(parts) if is_institution_keyword(p) and not has_degree_keyword(p)),
            None,
        )
        deg_idx = next((i for i, p in enumerate(parts) if has_degree_keyword(p)), None)
        if inst_idx is None or deg_idx is None:
            continue

        joiner = ", " if sep is PART_SEPARATORS[2] else " "
        if deg_idx < inst_idx:
            degree = joiner.join(parts[:inst_idx])
        else:
            degree = joiner.join(parts[deg_idx:])
        institution = parts[inst_idx]
        rest = parts[inst_idx + 1:deg_idx] if deg_idx > inst_idx else parts[inst_idx + 1:]
        location = ", ".join(rest)
        return _clean_degree(degree), institution, _clean_degree(location)

    return _clean_degree(text), "", ""


def _is_noise(text: str) -> bool:
    if DETAIL_RE.match(text) or YEAR_ONLY_RE.match(text):
        return True
    m = DATE_RANGE_RE.search(text)
    return bool(m) and not text.replace(m.group(0), "").strip(" |,;:()-")


@dataclass
class _Entry:
    degree: str = ""
    institution: str = ""
    location: str = ""
    institution_first: bool = False

    def fill(self, text: str) -> None:
        if not self.institution and len(text) < INSTITUTION_MAX_CHARS:
            self.institution = text
        elif not self.location and len(text) < LOCATION_MAX_CHARS:
            self.location = text

    @property
    def emittable(self) -> bool:
        return bool(self.degree or self.institution)

    @property
    def complete(self) -> bool:
        return bool(self.degree and self.institution)


def _open_entry(text: str) -> _Entry:
    if has_degree_keyword(text):
        degree, institution, location = split_degree_line(text)
        return _Entry(degree=degree, institution=institution, location=location)
    if is_institution_keyword(text):
        return _Entry(institution=text, institution_first=True)
    return _Entry(degree=_clean_degree(text))


def _starts_next_entry(current: _Entry, text: str, next_text: str) -> bool:
    """
    A line after a complete entry that names the next school.

    Either it carries an institution keyword, or the entries are written
    school-first and the following line is a degree ("MIT" then "M.S. ...").
    """
    if not current.complete or CITY_REGION_RE.match(text):
        return False
    if is_institution_keyword(text):
        return True
    return current.institution_first and has_degree_keyword(next_text)


def reconstruct_education(lines: Sequence[str]) -> List[EducationItem]:
    """
    Rebuild education entries from the Education section's lines (header excluded).

    Returns EducationItem list with ids edu-1, edu-2, ... in document order.
    """
    entries: List[_Entry] = []
    current: Optional[_Entry] = None

    texts = [t for t in (strip_bullet(raw.strip()) for raw in lines) if t]

    for idx, text in enumerate(texts):
        if has_degree_keyword(text):
            if current is not None and not current.degree and current.institution:
                # "Stanford University" then "B.S. Computer Science"
                degree, _, location = split_degree_line(text)
                current.degree = degree
                if location and not current.location:
                    current.location = location
                logger.debug(f"Education degree completes entry: '{current.degree}' @ '{current.institution}'")
                continue
            current = _open_entry(text)
            entries.append(current)
            logger.debug(f"Education entry opened by degree line: '{text}'")
            continue

        if _is_noise(text):
            continue

        if current is None:
            if len(text) < OPEN_LINE_MAX_CHARS:
                current = _open_entry(text)
                entries.append(current)
                logger.debug(f"Education entry opened by short line: '{text}'")
            continue

        next_text = texts[idx + 1] if idx + 1 < len(texts) else ""
        if _starts_next_entry(current, text, next_text):
            current = _Entry(institution=text, institution_first=True)
            entries.append(current)
            logger.debug(f"Education entry opened by institution line: '{text}'")
            continue

        current.fill(text)

    items: List[EducationItem] = []
    for entry in entries:
        if not entry.emittable:
            continue
        items.append(
            EducationItem(
                id=f"edu-{len(items) + 1}",
                degree=entry.degree,
                institution=entry.institution,
                location=entry.location,
            )
        )
    return items
