"""
Tests for education entry reconstruction.

Covers degree detection, combined degree/institution lines and positional filling.
"""

import pytest
from app.core.education_parser import (
    has_degree_keyword,
    is_institution_keyword,
    reconstruct_education,
    split_degree_line,
)
from app.core.text_normalization import normalize


# ===== KEYWORD DETECTION =====

@pytest.mark.parametrize(
    "text",
    [
        "Bachelor of Science in Computer Science",
        "Master's in Public Policy",
        "B.S. Computer Science",
        "M.A. History",
        "Ph.D. Physics",
        "MBA",
        "BTech Mechanical Engineering",
        "Associate of Arts",
        "Professional Certificate in Data Analytics",
    ],
)
def test_degree_keywords(text):
    assert has_degree_keyword(text)


@pytest.mark.parametrize("text", ["Boston, MA", "Stanford University", "Portland, ME", "Computer Science"])
def test_not_degrees(text):
    assert not has_degree_keyword(text)


def test_institution_keywords():
    assert is_institution_keyword("Stanford University")
    assert is_institution_keyword("Lincoln High School")
    assert not is_institution_keyword("Acme Corp")


# ===== COMBINED LINES =====

def test_split_comma_separated_degree_line():
    assert split_degree_line("B.S. Computer Science, Stanford University, Stanford, CA") == (
        "B.S. Computer Science",
        "Stanford University",
        "Stanford, CA",
    )


def test_split_institution_first():
    assert split_degree_line("Harvard University | MBA") == ("MBA", "Harvard University", "")


def test_split_drops_graduation_year():
    assert split_degree_line("M.S. Statistics - University of Michigan - 2016") == (
        "M.S. Statistics",
        "University of Michigan",
        "",
    )


def test_degree_only_line_unchanged():
    assert split_degree_line("Bachelor of Arts in Economics") == ("Bachelor of Arts in Economics", "", "")


# ===== RECONSTRUCTION =====

def test_positional_fill():
    items = reconstruct_education(normalize("B.S. Computer Science\nStanford University\nStanford, CA"))

    assert len(items) == 1
    assert items[0].id == "edu-1"
    assert items[0].degree == "B.S. Computer Science"
    assert items[0].institution == "Stanford University"
    assert items[0].location == "Stanford, CA"


def test_each_degree_line_starts_an_entry():
    text = """M.S. Statistics
University of Michigan
Ann Arbor, MI
B.A. Mathematics
Oberlin College
"""
    items = reconstruct_education(normalize(text))

    assert [(i.id, i.degree, i.institution, i.location) for i in items] == [
        ("edu-1", "M.S. Statistics", "University of Michigan", "Ann Arbor, MI"),
        ("edu-2", "B.A. Mathematics", "Oberlin College", ""),
    ]


def test_institution_before_degree():
    items = reconstruct_education(normalize("Stanford University\nB.S. Computer Science\nStanford, CA"))

    assert len(items) == 1
    assert items[0].degree == "B.S. Computer Science"
    assert items[0].institution == "Stanford University"
    assert items[0].location == "Stanford, CA"


def test_institution_first_entries():
    text = """Stanford University
B.S. Computer Science
MIT
M.S. Computer Science
"""
    items = reconstruct_education(normalize(text))

    assert [(i.id, i.degree, i.institution, i.location) for i in items] == [
        ("edu-1", "B.S. Computer Science", "Stanford University", ""),
        ("edu-2", "M.S. Computer Science", "MIT", ""),
    ]


def test_institution_first_entries_with_locations():
    text = """Stanford University
B.S. Computer Science
Stanford, CA
University of Michigan
M.S. Statistics
Ann Arbor, MI
"""
    items = reconstruct_education(normalize(text))

    assert [(i.degree, i.institution, i.location) for i in items] == [
        ("B.S. Computer Science", "Stanford University", "Stanford, CA"),
        ("M.S. Statistics", "University of Michigan", "Ann Arbor, MI"),
    ]


def test_short_line_opens_entry_without_degree_keyword():
    items = reconstruct_education(normalize("Full Stack Web Development\nGeneral Assembly"))

    assert len(items) == 1
    assert items[0].degree == "Full Stack Web Development"
    assert items[0].institution == "General Assembly"


def test_dates_and_details_do_not_fill_fields():
    text = """B.S. Computer Science
2012 - 2016
Stanford University
GPA: 3.9
Stanford, CA
"""
    items = reconstruct_education(normalize(text))

    assert items[0].institution == "Stanford University"
    assert items[0].location == "Stanford, CA"


def test_bullet_markers_stripped():
    items = reconstruct_education(normalize("- B.S. Computer Science\n- Stanford University"))

    assert items[0].degree == "B.S. Computer Science"
    assert items[0].institution == "Stanford University"


def test_empty_section():
    assert reconstruct_education([]) == []
