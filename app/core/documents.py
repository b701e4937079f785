"""
Pipeline-internal document types.

RawDocument goes in, ExtractedText comes out of the extractors. Neither leaves
a single parse invocation.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Optional

from app.core.errors import UnsupportedFormatError


class DocumentFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    TEXT = "text"


# Accepted explicit tags and filename extensions
FORMAT_TAGS = {
    "pdf": DocumentFormat.PDF,
    "docx": DocumentFormat.DOCX,
    "txt": DocumentFormat.TEXT,
    "text": DocumentFormat.TEXT,
}

EXTENSIONS = {
    ".pdf": DocumentFormat.PDF,
    ".docx": DocumentFormat.DOCX,
    ".txt": DocumentFormat.TEXT,
}


@dataclass(frozen=True)
class RawDocument:
    """Immutable upload buffer plus its resolved format."""
    data: bytes
    format: DocumentFormat
    filename: str = ""

    @classmethod
    def from_upload(
        cls,
        data: bytes,
        filename: Optional[str] = None,
        declared_format: Optional[str] = None,
    ) -> "RawDocument":
        """
        Resolve the format from an explicit tag, else from the filename extension.

        Raises UnsupportedFormatError for anything outside pdf / docx / txt.
        """
        name = filename or ""
        if declared_format:
            fmt = FORMAT_TAGS.get(declared_format.strip().lower().lstrip("."))
            if fmt is None:
                raise UnsupportedFormatError(
                    f"Unsupported format '{declared_format}'. Upload a PDF, DOCX or TXT file."
                )
            return cls(data=data, format=fmt, filename=name)

        suffix = PurePath(name).suffix.lower()
        fmt = EXTENSIONS.get(suffix)
        if fmt is None:
            shown = suffix or "(none)"
            raise UnsupportedFormatError(
                f"Unsupported file extension {shown}. Upload a PDF, DOCX or TXT file."
            )
        return cls(data=data, format=fmt, filename=name)


@dataclass
class ExtractedText:
    """Result of one extraction strategy. `error` is set when the strategy failed."""
    text: str
    method: str
    page_count: int = 0
    low_confidence: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def char_count(self) -> int:
        return len(self.text.strip())

    @classmethod
    def failed(cls, method: str, reason: str) -> "ExtractedText":
        return cls(text="", method=method, error=reason)
