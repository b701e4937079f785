"""
Section detection over normalized resume lines.

Header vocabulary lives in data tables (SECTION_PATTERNS, BOUNDARY_PATTERNS) so
new phrasings can be added without touching the scanning code.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

logger = logging.getLogger(__name__)

HEADER_MAX_CHARS = 50
HEADER_MAX_WORDS = 5


class SectionKind(str, Enum):
    SUMMARY = "summary"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"


# One pattern per kind, tried in this order; matched against the header text
# (the part of the line before any ":").
SECTION_PATTERNS: Tuple[Tuple[SectionKind, Pattern[str]], ...] = (
    (SectionKind.SUMMARY, re.compile(
        r"^(?:professional\s*|career\s*|executive\s*|personal\s*)?(?:summary|profile|objective)\b"
        r"|^about(?:\s*me)?\b",
        re.IGNORECASE,
    )),
    (SectionKind.EXPERIENCE, re.compile(
        r"^(?:work\s*|professional\s*|relevant\s*|career\s*)?experience\b"
        r"|^employment(?:\s*history)?\b"
        r"|^(?:work|career|employment)\s*history\b",
        re.IGNORECASE,
    )),
    (SectionKind.EDUCATION, re.compile(
        r"^education\b|^academic|^qualifications\b|^degrees?\b|^certifications?\b",
        re.IGNORECASE,
    )),
    (SectionKind.SKILLS, re.compile(
        r"^(?:technical\s*|core\s*|key\s*|professional\s*)?skills\b"
        r"|^technologies\b|^(?:core\s*|key\s*)?competenc(?:y|ies)\b|^(?:areas\s+of\s+)?expertise\b"
        r"|^proficienc(?:y|ies)\b|^tech(?:nical)?\s*stack\b",
        re.IGNORECASE,
    )),
)

# Headers that end an experience block even though the segmenter does not
# track them as sections of their own.
BOUNDARY_PATTERNS: Tuple[Pattern[str], ...] = tuple(
    rx for kind, rx in SECTION_PATTERNS if kind is not SectionKind.EXPERIENCE
) + (
    re.compile(
        r"^(?:personal\s*|selected\s*|key\s*|academic\s*)?projects?\b"
        r"|^(?:licenses?|certificates?)\b"
        r"|^(?:awards?|honou?rs)\b"
        r"|^publications?\b|^languages?\b|^volunteer(?:ing)?\b|^(?:interests|hobbies)\b"
        r"|^references?\b|^(?:extracurricular\s*)?activities\b|^training\b|^courses?\b",
        re.IGNORECASE,
    ),
)

CONNECTOR_WORDS = {"&", "and", "/", "+", "of", "-", "|"}

SPACED_CHARS_RE = re.compile(r"^(?:[A-Za-z&]\s+){2,}[A-Za-z&]$")


def _despace_if_needed(text: str) -> str:
    """
    Collapse letter-spaced headers some PDFs produce.

    Examples:
      'E X P E R I E N C E' -> 'EXPERIENCE'
      'W O R K   H I S T O R Y' -> 'WORK HISTORY' (2+ spaces keep the word boundary)
    """
    t = text.strip()
    if SPACED_CHARS_RE.match(t):
        parts = re.split(r"\s{2,}", t)
        return " ".join("".join(p.split()) for p in parts if p.strip())
    return t


def _split_header(line: str) -> Optional[Tuple[str, str]]:
    """Return (header text, inline remainder) when the line is short enough to be a header."""
    t = _despace_if_needed(line)
    head, _, inline = t.partition(":")
    head = head.strip(" |-")
    if not head or len(head) >= HEADER_MAX_CHARS:
        return None
    if len(head.split()) > HEADER_MAX_WORDS or head.endswith("."):
        return None
    return head, inline.strip()


def _remainder_is_headerish(rest: str) -> bool:
    """Trailing words after a matched header phrase: connectors or capitalised nouns only."""
    for word in rest.split():
        if word.lower() in CONNECTOR_WORDS:
            continue
        if word[0].isalpha() and not word[0].isupper():
            return False
    return True


def _remainder_is_connected(rest: str) -> bool:
    """Nothing after the header phrase, or a joined phrase such as "& Certifications"."""
    words = rest.split()
    return not words or words[0].lower() in CONNECTOR_WORDS


def _matches(rx: Pattern[str], head: str, strict: bool = False) -> bool:
    check = _remainder_is_connected if strict else _remainder_is_headerish
    candidates = [head]
    if head.isupper():
        candidates.append(head.lower())
    for cand in candidates:
        m = rx.match(cand)
        if m and check(cand[m.end():]):
            return True
    return False


def match_section_header(line: str) -> Optional[Tuple[SectionKind, str]]:
    """
    Classify a line as a section header.

    Returns (kind, inline remainder) or None. "Skills: Python, Go" yields
    (SKILLS, "Python, Go").
    """
    split = _split_header(line)
    if split is None:
        return None
    head, inline = split
    for kind, rx in SECTION_PATTERNS:
        if _matches(rx, head):
            return kind, inline
    return None


def is_non_experience_header(line: str) -> bool:
    """True for a stand-alone header line (no inline content) naming any section other than Experience."""
    split = _split_header(line)
    if split is None:
        return False
    head, inline = split
    if inline:
        return False
    return any(_matches(rx, head, strict=True) for rx in BOUNDARY_PATTERNS)


@dataclass(frozen=True)
class SectionRange:
    kind: SectionKind
    start: int  # index of the header line
    end: int  # inclusive
    inline: str = ""


@dataclass
class SectionMap:
    sections: Dict[SectionKind, SectionRange] = field(default_factory=dict)

    def __contains__(self, kind: SectionKind) -> bool:
        return kind in self.sections

    def __len__(self) -> int:
        return len(self.sections)

    def get(self, kind: SectionKind) -> Optional[SectionRange]:
        return self.sections.get(kind)

    def ranges(self) -> List[SectionRange]:
        return sorted(self.sections.values(), key=lambda r: r.start)

    @property
    def first_start(self) -> Optional[int]:
        if not self.sections:
            return None
        return min(r.start for r in self.sections.values())

    def content(self, lines: Sequence[str], kind: SectionKind) -> List[str]:
        """Lines belonging to a section, header excluded. Missing section -> []."""
        rng = self.sections.get(kind)
        if rng is None:
            return []
        body = list(lines[rng.start + 1:rng.end + 1])
        if rng.inline:
            body.insert(0, rng.inline)
        return body


def segment(lines: Sequence[str]) -> SectionMap:
    """
    Single pass over the lines; the first header per kind wins.

    Each section runs until the line before the next detected header, the last
    one to the end of the document.
    """
    found: List[Tuple[SectionKind, int, str]] = []
    seen = set()
    for idx, line in enumerate(lines):
        match = match_section_header(line)
        if match is None:
            continue
        kind, inline = match
        if kind in seen:
            logger.debug(f"Ignoring repeated {kind.value} header at line {idx}: '{line}'")
            continue
        seen.add(kind)
        found.append((kind, idx, inline))
        logger.debug(f"SECTION HEADER DETECTED at line {idx}: '{line}' -> {kind.value}")

    sections: Dict[SectionKind, SectionRange] = {}
    for pos, (kind, start, inline) in enumerate(found):
        end = found[pos + 1][1] - 1 if pos + 1 < len(found) else len(lines) - 1
        sections[kind] = SectionRange(kind=kind, start=start, end=end, inline=inline)
    return SectionMap(sections=sections)
