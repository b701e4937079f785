"""
Primary PDF extraction from the text layer (pdfplumber).

Reading order is rebuilt from word positions: words are sorted top-to-bottom,
left-to-right, and a new line starts whenever the vertical displacement between
consecutive words exceeds a small threshold.
"""

import logging
import re
from dataclasses import dataclass
from io import BytesIO
from typing import Any, List

import pdfplumber

from app.core.documents import ExtractedText, RawDocument

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"


@dataclass
class TextFragment:
    """A word from the text layer. `y` grows upward from the page bottom."""
    text: str
    x: float
    y: float


def page_fragments(page: Any, *, x_tolerance: float = 2, y_tolerance: float = 2) -> List[TextFragment]:
    """
    Extract word fragments with their origin.

    pdfplumber measures `bottom` from the top of the page; it is flipped so that
    larger `y` means higher on the page.
    """
    words = page.extract_words(
        x_tolerance=x_tolerance,
        y_tolerance=y_tolerance,
        keep_blank_chars=False,
        use_text_flow=False,
    )
    height = float(page.height)
    return [
        TextFragment(text=w["text"], x=float(w["x0"]), y=height - float(w["bottom"]))
        for w in words
        if (w.get("text") or "").strip()
    ]


def _join_line(fragments: List[TextFragment]) -> str:
    """Left-to-right, single spaces only."""
    ordered = sorted(fragments, key=lambda f: f.x)
    return re.sub(r"\s+", " ", " ".join(f.text.strip() for f in ordered)).strip()


def fragments_to_lines(fragments: List[TextFragment], line_break_threshold: float = 5.0) -> List[str]:
    """
    Group fragments into lines.

    Example (threshold 5):
        ("Jane", x=72, y=700), ("Doe", x=110, y=700.5), ("Engineer", x=72, y=680)
        -> ["Jane Doe", "Engineer"]
    """
    if not fragments:
        return []

    ordered = sorted(fragments, key=lambda f: (-f.y, f.x))
    lines: List[str] = []
    current: List[TextFragment] = []
    last_y = None

    for frag in ordered:
        if last_y is not None and abs(last_y - frag.y) > line_break_threshold:
            lines.append(_join_line(current))
            current = []
        current.append(frag)
        last_y = frag.y

    if current:
        lines.append(_join_line(current))

    return [ln for ln in lines if ln]


def page_text(page: Any, line_break_threshold: float = 5.0) -> str:
    return "\n".join(fragments_to_lines(page_fragments(page), line_break_threshold))


class PdfTextLayerExtractor:
    name = "pdf-text-layer"

    def __init__(self, line_break_threshold: float = 5.0):
        self.line_break_threshold = line_break_threshold

    def extract(self, document: RawDocument) -> ExtractedText:
        try:
            with pdfplumber.open(BytesIO(document.data)) as pdf:
                pages = [page_text(page, self.line_break_threshold) for page in pdf.pages]
        except Exception as e:
            logger.warning(f"PDF text layer extraction failed: {type(e).__name__}: {e}")
            return ExtractedText.failed(self.name, f"{type(e).__name__}: {e}")

        text = PAGE_SEPARATOR.join(p for p in pages if p.strip())
        logger.debug(f"PDF text layer: {len(pages)} pages, {len(text)} chars")
        return ExtractedText(text=text, method=self.name, page_count=len(pages))
