"""
Skills section parsing.

"Category: items" lines become categories; anything else lands under a generic
label. Repeated categories are merged so a list wrapped over several lines stays
one entry.
"""

import logging
import re
from typing import Dict, List, Sequence, Tuple

from app.core.patterns import strip_bullet
from app.core.schemas import SkillCategory

logger = logging.getLogger(__name__)

GENERIC_CATEGORY = "Technical Skills"
SKILL_JOINER = ", "

CATEGORY_MAX_WORDS = 5
CATEGORY_LINE_RE = re.compile(r"^(?P<category>[^:]{1,40}):\s*(?P<skills>.+)$")


def split_category(line: str) -> Tuple[str, str]:
    """
    Return (category, skills) for a skills line.

    Examples:
        "Languages: Python, Go" -> ("Languages", "Python, Go")
        "Python, Go, Rust" -> ("Technical Skills", "Python, Go, Rust")
        "Worked with: a very long descriptive phrase here: x" -> generic
    """
    m = CATEGORY_LINE_RE.match(line)
    if m:
        category = m.group("category").strip()
        skills = m.group("skills").strip()
        if category and skills and len(category.split()) <= CATEGORY_MAX_WORDS:
            return category, skills
    return GENERIC_CATEGORY, line


def reconstruct_skills(lines: Sequence[str]) -> List[SkillCategory]:
    """Categorise then consolidate; first-seen category order, ids skill-1, skill-2, ..."""
    grouped: Dict[str, List[str]] = {}
    for raw in lines:
        text = strip_bullet(raw.strip()).strip(" ,;|")
        if len(text) < 2:
            continue
        category, skills = split_category(text)
        if category in grouped:
            logger.debug(f"Consolidating skills category '{category}'")
        grouped.setdefault(category, []).append(skills)

    return [
        SkillCategory(id=f"skill-{i}", category=category, skills=SKILL_JOINER.join(parts))
        for i, (category, parts) in enumerate(grouped.items(), start=1)
    ]
