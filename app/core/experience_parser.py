"""
Experience reconstruction.

Recovers work-history records from the lines of the Experience section with a
single left-to-right scan. Documents put dates, roles and companies in no fixed
order, so every line is first classified (boundary, bullet, stand-alone date,
header candidate, unknown) and records are anchored on headers or dates:

- header first:  "Senior Engineer | Acme Corp" then a date within 3 lines
- date first:    "2019 - 2021" then "Data Analyst - Beta Inc"
- two-line:      "Senior Engineer" / "Acme Corp" / "Jan 2020 - Present"

Consumed line indices are tracked in a set owned by the scan so no line is
used twice. Records are keyed by the case-folded (company, role, period)
triple; a repeated block merges its bullets into the first record.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, Tuple

from app.core.patterns import (
    CITY_REGION_RE,
    DATE_RANGE_RE,
    WORK_MODE_RE,
    is_bullet,
    strip_bullet,
)
from app.core.schemas import ExperienceItem
from app.core.section_segmenter import is_non_experience_header

logger = logging.getLogger(__name__)

DATE_LOOKAHEAD = 3
HEADER_LOOKBACK = 5
HEADER_MAX_CHARS = 80
HEADER_MAX_WORDS = 10
SIDE_MAX_WORDS = 8

UNKNOWN_ROLE = "Unknown Role"
UNKNOWN_COMPANY = "Unknown Company"

DedupKey = Tuple[str, str, str]


class LineKind(Enum):
    BOUNDARY = "boundary"
    BULLET = "bullet"
    DATE = "date"
    LOCATION = "location"
    HEADER = "header"
    UNKNOWN = "unknown"


# ===== HEADER DECOMPOSITION PATTERNS =====

PIPE_SPLIT_RE = re.compile(r"\s*\|\s*")
DASH_SPLIT_RE = re.compile(r"\s+-+\s+")
AT_SPLIT_RE = re.compile(r"^(?P<role>.+?)\s+(?:at|@)\s+(?P<company>.+)$", re.IGNORECASE)

# "Tech stack: Python, AWS" style labelled content lines
LABELLED_LINE_RE = re.compile(r"^[^:|]{1,40}:\s*\S")

CLIENT_NOTE_RE = re.compile(
    r"^\(?\s*(?:clients?|for\s+client|on\s+behalf\s+of|contract(?:ed)?\s+(?:to|for|with)|placed\s+at|engagement)"
    r"\b\s*[:\-]?\s*(?P<note>[^()]+?)\s*\)?$",
    re.IGNORECASE,
)

COMPANY_SUFFIX_RE = re.compile(
    r"\b(?:inc|llc|llp|ltd|limited|corp|corporation|co|company|gmbh|plc|ag|sa|group|technologies"
    r"|labs|partners|holdings|solutions|systems|bank|agency|studios?|university|ventures)\b\.?",
    re.IGNORECASE,
)
ROLE_KEYWORD_RE = re.compile(
    r"\b(?:engineer|developer|programmer|manager|director|analyst|scientist|designer|consultant"
    r"|intern|lead|architect|specialist|coordinator|administrator|assistant|associate|officer"
    r"|head|vp|president|founder|co-founder|technician|representative|executive|advisor"
    r"|researcher|teacher|instructor|accountant|strategist|owner|supervisor|editor|writer"
    r"|recruiter)s?\b",
    re.IGNORECASE,
)

# Legal forms only; "CO" or "SA" may be a region code on a location line
LEGAL_FORM_RE = re.compile(r"\b(?:inc|llc|llp|ltd|limited|corp|corporation|company|gmbh|plc)\b", re.IGNORECASE)

SENTENCE_END_RE = re.compile(r"[.;!?]$")


# ===== LINE CLASSIFICATION =====

def _strip_date(text: str) -> str:
    """Remove an embedded date range and the separators it leaves dangling."""
    t = DATE_RANGE_RE.sub("", text)
    t = re.sub(r"\(\s*\)|\[\s*\]", "", t)
    t = re.sub(r"(?:\s*\|\s*){2,}", " | ", t)
    t = re.sub(r"\s+", " ", t)
    return t.strip(" |,;:-")


def is_standalone_date(text: str) -> bool:
    """A date range line, optionally with a location or work-mode remainder ("Austin, TX | 2019 - 2021")."""
    m = DATE_RANGE_RE.search(text)
    if not m:
        return False
    rest = f"{text[:m.start()]} {text[m.end():]}".strip(" |,;:()[]/-")
    if not rest:
        return True
    return bool(WORK_MODE_RE.match(rest) or CITY_REGION_RE.match(rest))


def _is_place(text: str) -> bool:
    if WORK_MODE_RE.match(text):
        return True
    return bool(CITY_REGION_RE.match(text)) and not LEGAL_FORM_RE.search(text) and not ROLE_KEYWORD_RE.search(text)


def is_location_line(text: str) -> bool:
    """
    Location or work-mode filler with no role/company content.

    Examples:
        "Austin, TX" -> True
        "Remote | New York, NY" -> True
        "Manager, Operations" -> False
        "Acme, Inc" -> False
    """
    t = text.strip(" |,;")
    if not t:
        return False
    return all(_is_place(p) for p in PIPE_SPLIT_RE.split(t) if p)


def drop_trailing_location(text: str) -> str:
    """"Acme Corp | Austin, TX" -> "Acme Corp"; lines without a location tail are unchanged."""
    for rx, joiner in ((PIPE_SPLIT_RE, " | "), (DASH_SPLIT_RE, " - ")):
        parts = [p for p in rx.split(text) if p]
        if len(parts) < 2:
            continue
        kept = list(parts)
        while len(kept) > 1 and is_location_line(kept[-1]):
            kept.pop()
        if len(kept) < len(parts):
            return joiner.join(kept)
    return text


def _words(text: str) -> int:
    return len(text.split())


def _separator_split(text: str) -> Optional[Tuple[str, str]]:
    """
    Split a header line into (role, company) using, in priority order:

    "Role | Company", "Role - Company", "Role at Company", "COMPANY: Role[: Location]".
    Returns None when no separator form applies.
    """
    parts = [p for p in PIPE_SPLIT_RE.split(text) if p]
    if len(parts) >= 2:
        return parts[0], parts[1]

    parts = [p for p in DASH_SPLIT_RE.split(text) if p]
    if len(parts) >= 2 and _words(parts[0]) <= SIDE_MAX_WORDS and _words(parts[1]) <= SIDE_MAX_WORDS:
        return parts[0], parts[1]

    m = AT_SPLIT_RE.match(text)
    if m and _words(m.group("role")) <= 6 and _words(m.group("company")) <= 6:
        return m.group("role"), m.group("company")

    # Colon form puts the company first
    parts = [p.strip() for p in text.split(":") if p.strip()]
    if len(parts) >= 2 and _words(parts[0]) <= 6:
        if len(parts) >= 3 or ROLE_KEYWORD_RE.search(parts[1]):
            return parts[1], parts[0]

    return None


def _should_swap(role: str, company: str) -> bool:
    """Company-looking role next to role-looking company: the line was written company first."""
    if not role or not company:
        return False
    return (
        bool(COMPANY_SUFFIX_RE.search(role))
        and not COMPANY_SUFFIX_RE.search(company)
        and bool(ROLE_KEYWORD_RE.search(company))
        and not ROLE_KEYWORD_RE.search(role)
    )


def split_role_company(text: str) -> Tuple[str, str]:
    """
    Decompose a header candidate into (role, company).

    Embedded dates are removed first. Without any separator the whole line is
    the role and the company is empty.
    """
    t = drop_trailing_location(_strip_date(text))
    split = _separator_split(t)
    if split is None:
        role, company = t, ""
    else:
        role, company = split
    role = role.strip(" ,;:-")
    company = company.strip(" ,;:-")
    if _should_swap(role, company):
        role, company = company, role
    return role, company


def _is_sentence_like(text: str) -> bool:
    return bool(SENTENCE_END_RE.search(text)) or text[0].islower() or _words(text) > HEADER_MAX_WORDS


def has_separator(text: str) -> bool:
    return _separator_split(_strip_date(text)) is not None


def company_text(text: str) -> str:
    """Line text with any date and trailing location removed."""
    return drop_trailing_location(_strip_date(text))


def is_header_candidate(text: str) -> bool:
    t = text.strip()
    if not t or len(t) > 120:
        return False
    stripped = _strip_date(t)
    if not stripped or _is_sentence_like(stripped):
        return False
    split = _separator_split(stripped)
    if LABELLED_LINE_RE.match(stripped) and split is None:
        return False
    if DATE_RANGE_RE.search(t) or split is not None:
        return True
    return len(t) <= HEADER_MAX_CHARS


def classify_line(text: str) -> LineKind:
    """Priority order: boundary, bullet, stand-alone date, location, header candidate, unknown."""
    if is_non_experience_header(text):
        return LineKind.BOUNDARY
    if is_bullet(text):
        return LineKind.BULLET
    if is_standalone_date(text):
        return LineKind.DATE
    if is_location_line(text):
        return LineKind.LOCATION
    if is_header_candidate(text):
        return LineKind.HEADER
    return LineKind.UNKNOWN


def dedup_key(company: str, role: str, period: str) -> DedupKey:
    return (company.strip().casefold(), role.strip().casefold(), period.strip().casefold())


# ===== SCAN =====

@dataclass
class _Record:
    role: str
    company: str
    period: str
    client_note: Optional[str] = None
    bullets: List[str] = field(default_factory=list)

    def add_bullet(self, text: str) -> None:
        if text and text not in self.bullets:
            self.bullets.append(text)


class ExperienceScanner:
    """One scan over one section. Holds the consumed-line set; not reused across sections."""

    def __init__(self, lines: Sequence[str]):
        self.lines = [ln.strip() for ln in lines if ln and ln.strip()]
        self.kinds = [classify_line(ln) for ln in self.lines]
        self.consumed: Set[int] = set()
        self.records: List[_Record] = []
        self.by_key: Dict[DedupKey, _Record] = {}
        self.stopped = False

    # --- navigation helpers ---

    def _next_unconsumed(self, idx: int) -> Optional[int]:
        for j in range(idx + 1, len(self.lines)):
            if j not in self.consumed:
                return j
        return None

    def _date_ahead(self, idx: int) -> Optional[int]:
        """Stand-alone date within DATE_LOOKAHEAD lines after idx, unless a header/bullet comes first."""
        for j in range(idx + 1, min(len(self.lines), idx + 1 + DATE_LOOKAHEAD)):
            if j in self.consumed:
                continue
            kind = self.kinds[j]
            if kind is LineKind.DATE:
                return j
            if kind in (LineKind.HEADER, LineKind.BULLET, LineKind.BOUNDARY):
                return None
        return None

    def _header_behind(self, idx: int) -> Optional[int]:
        for j in range(idx - 1, max(-1, idx - 1 - HEADER_LOOKBACK), -1):
            if j in self.consumed:
                continue
            kind = self.kinds[j]
            if kind is LineKind.HEADER:
                return j
            if kind is LineKind.BOUNDARY:
                return None
        return None

    def _header_ahead(self, idx: int) -> Optional[int]:
        for j in range(idx + 1, min(len(self.lines), idx + 1 + DATE_LOOKAHEAD)):
            if j in self.consumed:
                continue
            kind = self.kinds[j]
            if kind is LineKind.HEADER:
                return j
            if kind in (LineKind.BULLET, LineKind.DATE, LineKind.BOUNDARY):
                return None
        return None

    def _next_content(self, idx: int) -> Optional[int]:
        """Next unconsumed line that is not a location line."""
        j = self._next_unconsumed(idx)
        while j is not None and self.kinds[j] is LineKind.LOCATION:
            j = self._next_unconsumed(j)
        return j

    def _is_company_candidate(self, j: int) -> bool:
        if self.kinds[j] is not LineKind.HEADER:
            return False
        return _separator_split(company_text(self.lines[j])) is None

    def _company_line(self, idx: int) -> Optional[int]:
        """Header line directly after a role-only header, separator-free once a trailing location is dropped."""
        j = idx + 1
        if j >= len(self.lines) or j in self.consumed:
            return None
        if not self._is_company_candidate(j):
            return None
        return j

    def _is_anchored(self, idx: int) -> bool:
        """Whether a header candidate met during bullet collection really starts a new record."""
        line = self.lines[idx]
        if has_separator(line) or DATE_RANGE_RE.search(line):
            return True
        if self._date_ahead(idx) is not None:
            return True
        nxt = self._next_content(idx)
        if nxt is not None and self._is_company_candidate(nxt):
            after = self._next_content(nxt)
            if after is not None and self.kinds[after] in (LineKind.BULLET, LineKind.DATE):
                return True
        return False

    # --- record building ---

    def _take_company_line(self, role: str, company: str, period: str, after: int) -> Tuple[str, str, str, int]:
        """Fill an empty company from the following line. Returns (role, company, period, last index)."""
        j = self._company_line(after)
        if j is None:
            return role, company, period, after
        line = self.lines[j]
        company = company_text(line)
        if not period:
            m = DATE_RANGE_RE.search(line)
            if m:
                period = m.group(0)
        self.consumed.add(j)
        if _should_swap(role, company):
            role, company = company, role
        return role, company, period, j

    def _consume_locations(self, start: int, end: int) -> None:
        for j in range(start, end):
            if self.kinds[j] is LineKind.LOCATION:
                self.consumed.add(j)

    def _open_from_header(self, idx: int) -> int:
        line = self.lines[idx]
        self.consumed.add(idx)
        role, company = split_role_company(line)
        m = DATE_RANGE_RE.search(line)
        period = m.group(0) if m else ""
        last = idx

        if not company:
            role, company, period, last = self._take_company_line(role, company, period, last)

        if not period:
            date_idx = self._date_ahead(last)
            if date_idx is not None:
                period = DATE_RANGE_RE.search(self.lines[date_idx]).group(0)
                self.consumed.add(date_idx)
                self._consume_locations(last + 1, date_idx)
                last = date_idx

        return self._commit(role, company, period, last)

    def _open_from_date(self, idx: int) -> int:
        period = DATE_RANGE_RE.search(self.lines[idx]).group(0)
        self.consumed.add(idx)

        header_idx = self._header_behind(idx)
        if header_idx is None:
            header_idx = self._header_ahead(idx)

        role = company = ""
        last = idx
        if header_idx is not None:
            self.consumed.add(header_idx)
            role, company = split_role_company(self.lines[header_idx])
            last = max(last, header_idx)
            if not company:
                role, company, period, company_idx = self._take_company_line(role, company, period, header_idx)
                last = max(last, company_idx)
        else:
            logger.debug(f"Date line without header: '{self.lines[idx]}'")

        return self._commit(role, company, period, last)

    def _commit(self, role: str, company: str, period: str, last: int) -> int:
        if not (role or company or period):
            return last + 1

        key = dedup_key(company, role, period)
        record = self.by_key.get(key)
        if record is None:
            record = _Record(role=role, company=company, period=period)
            self.records.append(record)
            self.by_key[key] = record
            logger.debug(f"Experience entry: role='{role}', company='{company}', period='{period}'")
        else:
            logger.debug(f"Merging repeated experience block into role='{role}', company='{company}'")
        return self._collect(record, last + 1)

    def _collect(self, record: _Record, start: int) -> int:
        """Gather bullets and content lines until the next anchored header, date, boundary or end."""
        j = start
        while j < len(self.lines):
            if j in self.consumed:
                j += 1
                continue
            kind = self.kinds[j]
            line = self.lines[j]

            if kind is LineKind.BOUNDARY:
                logger.debug(f"Section boundary inside experience at line {j}: '{line}'")
                self.stopped = True
                break

            if kind is LineKind.BULLET:
                record.add_bullet(strip_bullet(line))
                self.consumed.add(j)
                j += 1
                continue

            note = CLIENT_NOTE_RE.match(line)
            if note and not record.bullets and record.client_note is None:
                record.client_note = note.group("note")
                self.consumed.add(j)
                j += 1
                continue

            if kind is LineKind.DATE:
                follows_bullet = j > 0 and self.kinds[j - 1] is LineKind.BULLET
                nxt = self._next_unconsumed(j)
                header_next = nxt is not None and self.kinds[nxt] is LineKind.HEADER
                if not follows_bullet or header_next:
                    break
                record.add_bullet(line)
                self.consumed.add(j)
                j += 1
                continue

            if kind is LineKind.LOCATION:
                if self._date_ahead(j) is not None:
                    break
                if not record.bullets:
                    self.consumed.add(j)
                    j += 1
                    continue

            if kind is LineKind.HEADER and self._is_anchored(j):
                break

            # Prose and unanchored short lines stay with the current record
            record.add_bullet(line)
            self.consumed.add(j)
            j += 1
        return j

    def scan(self) -> List[_Record]:
        i = 0
        while i < len(self.lines) and not self.stopped:
            if i in self.consumed:
                i += 1
                continue
            kind = self.kinds[i]
            if kind is LineKind.BOUNDARY:
                logger.debug(f"Section boundary ends experience scan at line {i}: '{self.lines[i]}'")
                break
            if kind is LineKind.HEADER:
                i = max(i + 1, self._open_from_header(i))
            elif kind is LineKind.DATE:
                i = max(i + 1, self._open_from_date(i))
            else:
                i += 1
        return self.records


def reconstruct_experience(lines: Sequence[str]) -> List[ExperienceItem]:
    """
    Rebuild experience records from the Experience section's lines (header line excluded).

    Records without role, company and period are dropped; a record missing only
    one of role/company gets an explicit placeholder so it can be repaired by hand.
    """
    if not lines:
        return []

    items: List[ExperienceItem] = []
    for rec in ExperienceScanner(lines).scan():
        if not (rec.role or rec.company or rec.period):
            continue
        items.append(
            ExperienceItem(
                id=f"exp-{len(items) + 1}",
                role=rec.role or UNKNOWN_ROLE,
                company=rec.company or UNKNOWN_COMPANY,
                period=rec.period,
                client_note=rec.client_note,
                bullets=list(rec.bullets),
            )
        )
    return items
