"""Format resolution and the errors surfaced when a file has no usable text."""

from io import BytesIO

import pytest
from docx import Document

from app.core.config import Settings
from app.core.documents import DocumentFormat, RawDocument
from app.core.errors import (
    DOCX_EXTRACTION_FAILED_MESSAGE,
    NO_MEANINGFUL_DATA_MESSAGE,
    NOT_ENOUGH_TEXT_MESSAGE,
    EmptyExtractionError,
    ExtractionError,
    InsufficientContentError,
    UnsupportedFormatError,
)
from app.core.extraction import extract_text
from app.core.resume_parser import parse_document, parse_resume_text


def _docx_bytes(*paragraphs: str) -> bytes:
    doc = Document()
    for p in paragraphs:
        doc.add_paragraph(p)
    buf = BytesIO()
    doc.save(buf)
    return buf.getvalue()


# ===== FORMAT RESOLUTION =====

@pytest.mark.parametrize(
    "filename, fmt",
    [
        ("resume.pdf", DocumentFormat.PDF),
        ("Resume.PDF", DocumentFormat.PDF),
        ("cv.docx", DocumentFormat.DOCX),
        ("notes.txt", DocumentFormat.TEXT),
    ],
)
def test_format_from_extension(filename, fmt):
    assert RawDocument.from_upload(b"x", filename=filename).format is fmt


def test_declared_format_wins_over_extension():
    doc = RawDocument.from_upload(b"x", filename="upload.bin", declared_format="PDF")
    assert doc.format is DocumentFormat.PDF


@pytest.mark.parametrize("filename", ["resume.doc", "resume.rtf", "resume", None])
def test_unsupported_extension(filename):
    with pytest.raises(UnsupportedFormatError):
        RawDocument.from_upload(b"x", filename=filename)


def test_unsupported_declared_format():
    with pytest.raises(UnsupportedFormatError) as exc:
        RawDocument.from_upload(b"x", filename="resume.pdf", declared_format="odt")
    assert "odt" in exc.value.message


# ===== EXTRACTION FAILURES =====

def test_corrupt_pdf_reports_docx_suggestion():
    document = RawDocument(data=b"%PDF-1.4 this is not really a pdf", format=DocumentFormat.PDF)

    with pytest.raises(EmptyExtractionError) as exc:
        extract_text(document, Settings())
    assert "DOCX" in exc.value.message


def test_empty_pdf_error_is_an_extraction_error():
    assert issubclass(EmptyExtractionError, ExtractionError)


def test_unreadable_docx():
    document = RawDocument(data=b"definitely not a zip archive", format=DocumentFormat.DOCX)

    with pytest.raises(ExtractionError) as exc:
        extract_text(document, Settings())
    assert exc.value.message == DOCX_EXTRACTION_FAILED_MESSAGE


def test_docx_below_minimum_length():
    document = RawDocument(data=_docx_bytes("Hi", "there"), format=DocumentFormat.DOCX)

    with pytest.raises(ExtractionError):
        extract_text(document, Settings())


def test_docx_minimum_is_configurable():
    document = RawDocument(data=_docx_bytes("Hi", "there"), format=DocumentFormat.DOCX)
    result = extract_text(document, Settings(min_docx_text_chars=5))

    assert result.method == "docx"
    assert result.text == "Hi\nthere"


# ===== INSUFFICIENT CONTENT =====

def test_text_too_short():
    with pytest.raises(InsufficientContentError) as exc:
        parse_resume_text("Jane", Settings())
    assert exc.value.message == NOT_ENOUGH_TEXT_MESSAGE


def test_whitespace_only_text():
    document = RawDocument(data=b"   \n\n\t  \n", format=DocumentFormat.TEXT)
    with pytest.raises(InsufficientContentError):
        parse_document(document, Settings())


def test_nothing_recognisable():
    text = "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor."

    with pytest.raises(InsufficientContentError) as exc:
        parse_resume_text(text, Settings())
    assert exc.value.message == NO_MEANINGFUL_DATA_MESSAGE


def test_contact_only_resume_is_returned():
    result = parse_resume_text("Reach me at jane.doe@example.com any time", Settings())

    assert result.header.contact.email == "jane.doe@example.com"
    assert "No experience entries detected." in result.warnings
