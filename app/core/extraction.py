"""
Format extraction as an ordered chain of strategies.

Each strategy returns an ExtractedText (with `error` set on failure) instead of
raising. extract_text() walks the chain for the document's format and stops at
the first result that clears the format's minimum length; for PDF a failed or
thin text layer gets exactly one fallback attempt on the raw stream.
"""

import logging
from typing import Callable, Dict, List, Optional, Protocol

from app.core.config import Settings, get_settings
from app.core.documents import DocumentFormat, ExtractedText, RawDocument
from app.core.docx_extractor import DocxExtractor
from app.core.errors import (
    DOCX_EXTRACTION_FAILED_MESSAGE,
    PDF_EXTRACTION_FAILED_MESSAGE,
    EmptyExtractionError,
    ExtractionError,
)
from app.core.pdf_extractor import PdfTextLayerExtractor
from app.core.pdf_stream_extractor import PdfRawStreamExtractor

logger = logging.getLogger(__name__)


class Extractor(Protocol):
    name: str

    def extract(self, document: RawDocument) -> ExtractedText:
        ...


class PlainTextExtractor:
    name = "plain-text"

    def extract(self, document: RawDocument) -> ExtractedText:
        # utf-8-sig drops a leading BOM
        text = document.data.decode("utf-8-sig", errors="replace")
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        return ExtractedText(text=text, method=self.name)


ExtractorFactory = Callable[[Settings], Extractor]

EXTRACTION_CHAINS: Dict[DocumentFormat, List[ExtractorFactory]] = {
    DocumentFormat.TEXT: [lambda s: PlainTextExtractor()],
    DocumentFormat.DOCX: [lambda s: DocxExtractor()],
    DocumentFormat.PDF: [
        lambda s: PdfTextLayerExtractor(line_break_threshold=s.pdf_line_break_threshold),
        lambda s: PdfRawStreamExtractor(),
    ],
}


def _min_chars(fmt: DocumentFormat, settings: Settings) -> int:
    if fmt is DocumentFormat.PDF:
        return settings.min_pdf_text_chars
    if fmt is DocumentFormat.DOCX:
        return settings.min_docx_text_chars
    # Plain text length is judged by the assembler (min_resume_text_chars)
    return 0


def _exhausted(fmt: DocumentFormat) -> ExtractionError:
    if fmt is DocumentFormat.PDF:
        return EmptyExtractionError(PDF_EXTRACTION_FAILED_MESSAGE)
    if fmt is DocumentFormat.DOCX:
        return ExtractionError(DOCX_EXTRACTION_FAILED_MESSAGE)
    return ExtractionError("Could not read the text file.")


def extract_text(document: RawDocument, settings: Optional[Settings] = None) -> ExtractedText:
    """
    Run the document's extraction chain.

    Raises:
        EmptyExtractionError: no PDF strategy produced enough text
        ExtractionError: DOCX unreadable or too short
    """
    settings = settings or get_settings()
    minimum = _min_chars(document.format, settings)

    for factory in EXTRACTION_CHAINS[document.format]:
        strategy = factory(settings)
        result = strategy.extract(document)
        if result.ok and result.char_count >= minimum:
            logger.info(
                f"Extracted {result.char_count} chars via {result.method}"
                f"{' (low confidence)' if result.low_confidence else ''}"
            )
            return result
        if result.ok:
            logger.info(f"{result.method} produced {result.char_count} chars (< {minimum}), trying next strategy")
        else:
            logger.warning(f"{result.method} failed: {result.error}")

    raise _exhausted(document.format)
