"""Shared fixtures: minimal hand-assembled PDFs."""

import zlib
from typing import List, Optional, Sequence

import pytest


def _escape(text: str) -> bytes:
    raw = text.encode("latin-1")
    return raw.replace(b"\\", b"\\\\").replace(b"(", b"\\(").replace(b")", b"\\)")


def text_stream(lines: Sequence[str], start_y: int = 740, leading: int = 16) -> bytes:
    """Content stream painting one Tj per line, top to bottom."""
    parts = [b"BT", b"/F1 11 Tf"]
    for i, line in enumerate(lines):
        parts.append(b"1 0 0 1 72 %d Tm" % (start_y - i * leading))
        parts.append(b"(" + _escape(line) + b") Tj")
    parts.append(b"ET")
    return b"\n".join(parts)


def _stream_object(data: bytes, compress: bool) -> bytes:
    if compress:
        data = zlib.compress(data)
        header = b"<< /Length %d /Filter /FlateDecode >>" % len(data)
    else:
        header = b"<< /Length %d >>" % len(data)
    return header + b"\nstream\n" + data + b"\nendstream"


def build_pdf(
    page_streams: Sequence[bytes],
    orphan_streams: Optional[List[bytes]] = None,
    compress: bool = False,
) -> bytes:
    """
    One page per content stream, Helvetica as /F1.

    `orphan_streams` are stored as objects no page references: readers that
    follow the page tree never see them, a raw byte scan does.
    """
    bodies: List[bytes] = []
    n_pages = len(page_streams)
    page_ids = [4 + 2 * i for i in range(n_pages)]

    bodies.append(b"<< /Type /Catalog /Pages 2 0 R >>")
    kids = b" ".join(b"%d 0 R" % pid for pid in page_ids)
    bodies.append(b"<< /Type /Pages /Kids [" + kids + b"] /Count %d >>" % n_pages)
    bodies.append(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")

    for pid, stream in zip(page_ids, page_streams):
        bodies.append(
            b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            b"/Resources << /Font << /F1 3 0 R >> >> /Contents %d 0 R >>" % (pid + 1)
        )
        bodies.append(_stream_object(stream, compress))

    for stream in orphan_streams or []:
        bodies.append(_stream_object(stream, compress))

    bodies.append(b"<< /Producer (Hand Rolled PDF Writer) /CreationDate (D:20240101120000Z) >>")
    info_id = len(bodies)

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for obj_id, body in enumerate(bodies, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % obj_id + body + b"\nendobj\n"

    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(bodies) + 1)
    out += b"0000000000 65535 f \n"
    for off in offsets:
        out += b"%010d 00000 n \n" % off
    out += b"trailer\n<< /Size %d /Root 1 0 R /Info %d 0 R >>\n" % (len(bodies) + 1, info_id)
    out += b"startxref\n%d\n" % xref_at
    out += b"%%EOF\n"
    return bytes(out)


RESUME_LINES = [
    "Jane Doe",
    "Senior Software Engineer",
    "jane.doe@example.com",
    "Experience",
    "Senior Engineer | Acme Corp",
    "Jan 2020 - Present",
    "- Led a team of 5",
    "- Shipped feature X",
]


@pytest.fixture
def resume_lines():
    return list(RESUME_LINES)


@pytest.fixture
def text_layer_pdf():
    """Ordinary PDF with a readable text layer."""
    return build_pdf([text_stream(RESUME_LINES)])


@pytest.fixture
def hidden_text_pdf():
    """Empty page; the resume text sits in an unreferenced content stream."""
    return build_pdf([b""], orphan_streams=[text_stream(RESUME_LINES)])


@pytest.fixture
def hidden_compressed_text_pdf():
    return build_pdf([b""], orphan_streams=[text_stream(RESUME_LINES)], compress=True)
