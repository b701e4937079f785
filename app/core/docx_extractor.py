import logging
from io import BytesIO
from typing import Iterator, List

from docx import Document
from docx.oxml.ns import qn
from docx.table import Table
from docx.text.paragraph import Paragraph

from app.core.documents import ExtractedText, RawDocument

logger = logging.getLogger(__name__)


def _table_lines(table: Table) -> Iterator[str]:
    """
    Row-wise table text.

    Single-line cells are joined with " | " (merged cells repeat their text, so
    repeats are dropped); rows holding multi-line cells are emitted cell by cell.
    """
    for row in table.rows:
        cells: List[str] = []
        for cell in row.cells:
            t = (cell.text or "").strip()
            if t and t not in cells:
                cells.append(t)
        if not cells:
            continue
        if any("\n" in c for c in cells):
            for c in cells:
                yield from c.split("\n")
        else:
            yield " | ".join(cells)


def iter_docx_lines(doc) -> Iterator[str]:
    """Paragraph and table text in body order."""
    for child in doc.element.body.iterchildren():
        if child.tag == qn("w:p"):
            yield Paragraph(child, doc).text or ""
        elif child.tag == qn("w:tbl"):
            yield from _table_lines(Table(child, doc))


class DocxExtractor:
    name = "docx"

    def extract(self, document: RawDocument) -> ExtractedText:
        """
        Deterministically extract non-empty paragraph text from a DOCX.
        An unreadable archive is reported through ExtractedText.error.
        """
        try:
            doc = Document(BytesIO(document.data))
            lines = [t.strip() for t in iter_docx_lines(doc) if t and t.strip()]
        except Exception as e:
            logger.warning(f"DOCX extraction failed for '{document.filename}': {type(e).__name__}: {e}")
            return ExtractedText.failed(self.name, f"{type(e).__name__}: {e}")

        logger.debug(f"DOCX extraction: {len(lines)} non-empty lines")
        return ExtractedText(text="\n".join(lines), method=self.name)
