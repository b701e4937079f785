"""
Result assembly: extracted text in, ParseResult out.

    normalize -> segment -> contact/header -> summary/experience/education/skills

Everything is local to one call; nothing is cached between parses.
"""

import logging
from typing import List, Optional

from app.core.config import Settings, get_settings
from app.core.contact_extractor import extract_contact
from app.core.documents import ExtractedText, RawDocument
from app.core.education_parser import reconstruct_education
from app.core.errors import (
    NO_MEANINGFUL_DATA_MESSAGE,
    NOT_ENOUGH_TEXT_MESSAGE,
    InsufficientContentError,
)
from app.core.experience_parser import reconstruct_experience
from app.core.extraction import extract_text
from app.core.header_extractor import extract_header
from app.core.schemas import (
    ExtractionDiagnostics,
    HeaderInfo,
    ParseResult,
    SectionVisibility,
)
from app.core.section_segmenter import SectionKind, segment
from app.core.skills_parser import reconstruct_skills
from app.core.text_normalization import normalize

logger = logging.getLogger(__name__)


def _has_meaningful_data(result: ParseResult) -> bool:
    contact = result.header.contact
    return any((
        result.header.name,
        contact.email,
        contact.phone,
        result.summary,
        result.experience,
        result.skills,
        result.education,
    ))


def parse_resume_text(
    text: str,
    settings: Optional[Settings] = None,
    extraction: Optional[ExtractedText] = None,
) -> ParseResult:
    """
    Structure already-extracted resume text.

    `extraction` (when the text came from a file) only feeds diagnostics and
    warnings. Raises InsufficientContentError when the text is too short or
    nothing could be recovered from it.
    """
    settings = settings or get_settings()
    if not text or len(text.strip()) < settings.min_resume_text_chars:
        raise InsufficientContentError(NOT_ENOUGH_TEXT_MESSAGE)

    lines = normalize(text)
    sections = segment(lines)
    logger.debug(f"Normalized {len(lines)} lines, {len(sections)} sections detected")

    contact = extract_contact(lines)
    name, title = extract_header(lines, sections.first_start)

    summary = " ".join(sections.content(lines, SectionKind.SUMMARY)).strip()
    experience = reconstruct_experience(sections.content(lines, SectionKind.EXPERIENCE))
    education = reconstruct_education(sections.content(lines, SectionKind.EDUCATION))
    skills = reconstruct_skills(sections.content(lines, SectionKind.SKILLS))

    warnings: List[str] = []
    if extraction is not None and extraction.low_confidence:
        warnings.append(
            "Text was recovered with the raw PDF fallback; line order is unreliable. "
            "Converting the file to DOCX usually gives better results."
        )
    if not sections:
        warnings.append("No section headers detected (Summary, Experience, Education, Skills).")
    if not experience:
        warnings.append("No experience entries detected.")

    diagnostics = None
    if extraction is not None:
        diagnostics = ExtractionDiagnostics(
            method=extraction.method,
            page_count=extraction.page_count,
            char_count=extraction.char_count,
            low_confidence=extraction.low_confidence,
        )

    result = ParseResult(
        header=HeaderInfo(name=name, title=title, contact=contact),
        summary=summary,
        skills=skills,
        experience=experience,
        education=education,
        forward_deployed_expertise="",
        section_visibility=SectionVisibility(
            summary=bool(summary),
            skills=bool(skills),
            education=bool(education),
            expertise=False,
        ),
        diagnostics=diagnostics,
        warnings=warnings,
    )

    if not _has_meaningful_data(result):
        raise InsufficientContentError(NO_MEANINGFUL_DATA_MESSAGE)

    logger.info(
        f"Parsed resume: name={'yes' if name else 'no'}, experience={len(experience)}, "
        f"education={len(education)}, skills={len(skills)}"
    )
    return result


def parse_document(document: RawDocument, settings: Optional[Settings] = None) -> ParseResult:
    """Extract then structure. Single blocking unit of work; run it off the event loop."""
    settings = settings or get_settings()
    extraction = extract_text(document, settings)
    return parse_resume_text(extraction.text, settings=settings, extraction=extraction)
