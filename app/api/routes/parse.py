import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from starlette.concurrency import run_in_threadpool

from app.core.config import get_settings
from app.core.documents import RawDocument
from app.core.errors import (
    ExtractionError,
    InsufficientContentError,
    UnsupportedFormatError,
)
from app.core.resume_parser import parse_document
from app.core.schemas import ParseResult

logger = logging.getLogger(__name__)

router = APIRouter(tags=["parse"])


@router.post(
    "/parse",
    response_model=ParseResult,
    summary="Parse Resume",
    description="Extract a structured resume record from a PDF, DOCX or TXT file.",
    responses={
        200: {
            "description": "Successfully parsed resume",
            "content": {
                "application/json": {
                    "example": {
                        "header": {
                            "name": "Jane Doe",
                            "title": "Senior Software Engineer",
                            "contact": {
                                "email": "jane@example.com",
                                "phone": "(555) 123-4567",
                                "linkedin": "linkedin.com/in/janedoe",
                                "github": "",
                                "website": "",
                                "location": "San Francisco, CA"
                            }
                        },
                        "summary": "Backend engineer with 8 years of experience.",
                        "skills": [{"id": "skill-1", "category": "Languages", "skills": "Python, Go"}],
                        "experience": [
                            {
                                "id": "exp-1",
                                "role": "Senior Engineer",
                                "company": "Acme Corp",
                                "period": "Jan 2020 - Present",
                                "client_note": None,
                                "description": "",
                                "bullets": ["Led a team of 5"]
                            }
                        ],
                        "education": [
                            {"id": "edu-1", "degree": "B.S. Computer Science", "institution": "Stanford University", "location": ""}
                        ],
                        "forward_deployed_expertise": "",
                        "section_visibility": {"summary": True, "skills": True, "education": True, "expertise": False},
                        "diagnostics": {"method": "pdf-text-layer", "page_count": 1, "char_count": 812, "low_confidence": False},
                        "warnings": []
                    }
                }
            }
        },
        400: {"description": "Empty file uploaded"},
        413: {"description": "File too large"},
        415: {"description": "Unsupported file format"},
        422: {"description": "File has no usable text"}
    }
)
async def parse_resume(
    file: UploadFile = File(..., description="Resume file (PDF, DOCX or TXT)"),
    format: Optional[str] = Form(None, description="Explicit format tag (pdf, docx, txt); defaults to the file extension"),
):
    """
    Parse a resume file into a structured record.

    **Supported formats:**
    - PDF (.pdf) - text layer, with a raw-stream fallback; OCR not supported
    - DOCX (.docx)
    - TXT (.txt)

    Errors come back as a single human-readable `detail` string.
    """
    settings = get_settings()

    raw = await file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Empty file uploaded.")
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large ({len(raw)} bytes). Maximum is {settings.max_upload_bytes} bytes.",
        )

    try:
        document = RawDocument.from_upload(raw, filename=file.filename, declared_format=format)
    except UnsupportedFormatError as e:
        raise HTTPException(status_code=415, detail=e.message)

    try:
        return await run_in_threadpool(parse_document, document, settings)
    except (ExtractionError, InsufficientContentError) as e:
        logger.info(f"Parse of '{document.filename}' failed: {e.message}")
        raise HTTPException(status_code=422, detail=e.message)
