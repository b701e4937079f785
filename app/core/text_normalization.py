"""
Text normalization for extracted resume text.

Turns whatever the extractors produced (PDF text layer, DOCX paragraphs,
markdown-ish plain text) into an ordered tuple of non-empty, trimmed lines:

- contact icon glyphs (emoji, icon-font private-use code points) removed
- unicode folded (NFKC), curly quotes and dashes mapped to ASCII
- markdown links unwrapped: [text](url) -> "text url"
- paired bold / italic / code markers stripped
- horizontal-rule lines removed
- tabs / NBSP -> space, runs of whitespace collapsed
- heading (#) and quote (>) prefixes stripped, list markers rewritten to "• "

normalize() is deterministic and idempotent: feeding its joined output back in
yields the same lines.
"""

import re
import unicodedata
from typing import Tuple

from app.core.patterns import BULLET_GLYPHS

CANONICAL_BULLET = "•"

# ============================================================================
# Markdown artifacts
# ============================================================================

MD_LINK_RE = re.compile(r"\[([^\]\n]+)\]\(([^)\s]+)\)")

# Only paired markers, so snake_case identifiers and e-mail addresses survive
EMPHASIS_PATTERNS = (
    re.compile(r"\*\*(?=\S)(.+?)(?<=\S)\*\*"),
    re.compile(r"__(?=\S)(.+?)(?<=\S)__"),
    re.compile(r"(?<![\w*])\*(?=\S)([^*\n]+?)(?<=\S)\*(?![\w*])"),
    re.compile(r"(?<![\w_])_(?=\S)([^_\n]+?)(?<=\S)_(?![\w_])"),
    re.compile(r"`([^`\n]+)`"),
)

HORIZONTAL_RULE_RE = re.compile(r"^\s*([-*_=─━])(?:\s*\1){2,}\s*$")

HEADING_PREFIX_RE = re.compile(r"^(?:#{1,6}\s+|>\s*)+")
LIST_MARKER_RE = re.compile(rf"^(?:[{BULLET_GLYPHS}]|[*+-](?=\s|$))\s*")

# ============================================================================
# Unicode clean-up
# ============================================================================

# Envelope, phones, pin, link, globe, house, briefcase, laptop + icon-font private use area
CONTACT_ICON_RE = re.compile(
    "["
    "\U0001F4E7\U0001F4E9\U0001F4E8\U0001F4F1\U0001F4DE\U0001F4F2"
    "\U0001F4CD\U0001F4CC\U0001F517\U0001F310\U0001F3E0\U0001F3E1"
    "\U0001F464\U0001F4BC\U0001F4BB\U0001F5A5"
    "\u260E\u260F\u2706\u2709\u2302"
    "\uE000-\uF8FF"
    "\uFE0E\uFE0F"
    "]"
)
INVISIBLE_RE = re.compile("[\u200B\u200C\u200D\u2060\uFEFF\u00AD]")

QUOTE_MAP = {
    "‘": "'", "’": "'", "‚": "'", "‛": "'", "′": "'",
    "“": '"', "”": '"', "„": '"', "‟": '"', "″": '"',
}
DASH_MAP = {
    "‐": "-", "‑": "-", "‒": "-", "–": "-",
    "—": "-", "―": "-", "−": "-",
}
ASCII_TRANSLATION = str.maketrans({**QUOTE_MAP, **DASH_MAP, "\t": " ", "\u00A0": " "})

WHITESPACE_RE = re.compile(r"\s+")


def _unwrap_markdown_links(text: str) -> str:
    return MD_LINK_RE.sub(r"\1 \2", text)


def _strip_emphasis(text: str) -> str:
    for rx in EMPHASIS_PATTERNS:
        text = rx.sub(r"\1", text)
    return text


def _drop_horizontal_rules(text: str) -> str:
    return "\n".join(ln for ln in text.split("\n") if not HORIZONTAL_RULE_RE.match(ln))


def _normalize_unicode(text: str) -> str:
    text = CONTACT_ICON_RE.sub("", text)
    text = INVISIBLE_RE.sub("", text)
    text = unicodedata.normalize("NFKC", text)
    return text.translate(ASCII_TRANSLATION)


def _normalize_line(line: str) -> str:
    """Per-line pass: heading/quote prefixes off, list markers canonical, spaces collapsed."""
    t = WHITESPACE_RE.sub(" ", line).strip()
    t = HEADING_PREFIX_RE.sub("", t).strip()
    if not t or HORIZONTAL_RULE_RE.match(t):
        return ""

    m = LIST_MARKER_RE.match(t)
    if m:
        rest = t
        # Nested markers ("• - item") collapse into one
        while m:
            rest = rest[m.end():]
            m = LIST_MARKER_RE.match(rest)
        rest = rest.strip()
        if not rest:
            return ""
        return f"{CANONICAL_BULLET} {rest}"
    return t


def normalize(text: str) -> Tuple[str, ...]:
    """Clean extracted text into an ordered tuple of non-empty trimmed lines."""
    if not text:
        return ()

    t = text.replace("\r\n", "\n").replace("\r", "\n")
    # Unicode first: full-width and dash variants fold into markdown syntax
    t = _normalize_unicode(t)
    t = _drop_horizontal_rules(t)
    t = _unwrap_markdown_links(t)
    t = _strip_emphasis(t)

    lines = []
    for raw in t.split("\n"):
        line = _normalize_line(raw)
        if line:
            lines.append(line)
    return tuple(lines)


def normalize_text(text: str) -> str:
    """normalize(), joined back into a single newline-separated string."""
    return "\n".join(normalize(text))
