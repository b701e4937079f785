"""
Errors surfaced by the parsing pipeline.

Only these reach the caller. Intermediate failures (a PDF strategy throwing,
a strategy under-producing) are logged and absorbed by the extraction chain.
"""


class ResumeParseError(Exception):
    """Base class. `message` is safe to show to the person who uploaded the file."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedFormatError(ResumeParseError):
    """Extension / declared tag is not pdf, docx or txt."""


class ExtractionError(ResumeParseError):
    """A format extractor could not produce usable text."""


class EmptyExtractionError(ExtractionError):
    """Every PDF strategy came back under the minimum text length."""


class InsufficientContentError(ResumeParseError):
    """Text was extracted but is too thin to structure."""


PDF_EXTRACTION_FAILED_MESSAGE = (
    "Could not extract enough text from this PDF. "
    "The file may be a scanned image, password-protected, or use an unusual text encoding. "
    "Try converting it to DOCX (recommended) or exporting a PDF with selectable text."
)

DOCX_EXTRACTION_FAILED_MESSAGE = "Failed to parse DOCX file. Please try a different file."

NOT_ENOUGH_TEXT_MESSAGE = "Not enough text extracted from the file."

NO_MEANINGFUL_DATA_MESSAGE = (
    "Could not extract meaningful data from the resume. "
    "Please try a different file format or check that the file contains readable text."
)
