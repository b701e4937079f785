from pydantic import BaseModel, Field
from typing import List, Optional


class ContactInfo(BaseModel):
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    github: str = ""
    website: str = ""
    location: str = Field(default="", description="Coarse 'City, Region' guess")


class HeaderInfo(BaseModel):
    name: str = ""
    title: str = ""
    contact: ContactInfo = Field(default_factory=ContactInfo)


class ExperienceItem(BaseModel):
    """One work-history entry. Identity is the case-folded (company, role, period) triple."""
    id: str
    role: str
    company: str
    period: str = Field(default="", description="Free-form date range, e.g. 'Jan 2020 - Present'")
    client_note: Optional[str] = Field(default=None, description="Short client / engagement context")
    description: str = ""
    bullets: List[str] = Field(default_factory=list)


class EducationItem(BaseModel):
    id: str
    degree: str = ""
    institution: str = ""
    location: str = ""


class SkillCategory(BaseModel):
    id: str
    category: str
    skills: str = Field(..., description="Delimited skill list, e.g. 'Python, Go, Rust'")


class SectionVisibility(BaseModel):
    """Which optional sections had any extracted content."""
    summary: bool = False
    skills: bool = False
    education: bool = False
    expertise: bool = False  # never parsed; kept so editors can merge the record as-is


class ExtractionDiagnostics(BaseModel):
    method: str = Field(..., description="Extractor that produced the text (e.g. 'pdf-text-layer', 'pdf-raw-stream')")
    page_count: int = 0
    char_count: int = 0
    low_confidence: bool = Field(
        default=False,
        description="True when text came from a best-effort source (raw PDF stream scan) with no reliable line order",
    )


class ParseResult(BaseModel):
    header: HeaderInfo = Field(default_factory=HeaderInfo)
    summary: str = ""
    skills: List[SkillCategory] = Field(default_factory=list)
    experience: List[ExperienceItem] = Field(default_factory=list)
    education: List[EducationItem] = Field(default_factory=list)
    forward_deployed_expertise: str = ""
    section_visibility: SectionVisibility = Field(default_factory=SectionVisibility)
    diagnostics: Optional[ExtractionDiagnostics] = None
    warnings: List[str] = Field(default_factory=list)
