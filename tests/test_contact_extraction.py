"""Tests for contact fields and the name / title header."""

from app.core.contact_extractor import extract_contact, guess_location
from app.core.header_extractor import extract_header
from app.core.patterns import find_phone
from app.core.text_normalization import normalize


RESUME_TOP = """Jane Doe
Senior Software Engineer
San Francisco, CA | jane.doe@example.com | (555) 123-4567
linkedin.com/in/janedoe | github.com/janedoe | https://janedoe.dev
Experience
Senior Engineer | Acme Corp
"""


def test_contact_fields_from_whole_document():
    contact = extract_contact(normalize(RESUME_TOP))

    assert contact.email == "jane.doe@example.com"
    assert contact.phone == "(555) 123-4567"
    assert contact.linkedin == "linkedin.com/in/janedoe"
    assert contact.github == "github.com/janedoe"
    assert contact.website == "https://janedoe.dev"
    assert contact.location == "San Francisco, CA"


def test_missing_fields_are_empty():
    contact = extract_contact(normalize("Jane Doe\nSkills\nPython"))

    assert contact.email == ""
    assert contact.phone == ""
    assert contact.linkedin == ""
    assert contact.location == ""


def test_contact_found_outside_header():
    lines = normalize("Jane Doe\nExperience\nEngineer | Acme\nReferences\nReach me at jane@example.com")
    assert extract_contact(lines).email == "jane@example.com"


# ===== PHONE =====

def test_phone_formats():
    assert find_phone("Call +1 555-123-4567 today") == "+1 555-123-4567"
    assert find_phone("555.123.4567") == "555.123.4567"


def test_date_ranges_are_not_phones():
    assert find_phone("2019 - 2021") is None
    assert find_phone("03/2018 - 11/2019") is None
    assert find_phone("Led a team of 5") is None


# ===== LOCATION =====

def test_location_multi_word_state():
    assert guess_location(["JOHN DOE", "New York, New York"]) == "New York, New York"


def test_location_strips_zip():
    assert guess_location(["Austin, TX 78701 | jane@example.com"]) == "Austin, TX"


def test_skills_lines_are_not_locations():
    lines = ["Jane Doe"] * 15 + ["Python, Java", "Seattle, WA"]
    assert guess_location(lines) == "Seattle, WA"


# ===== HEADER =====

def test_name_and_title_before_first_section():
    lines = normalize(RESUME_TOP)
    assert extract_header(lines, first_section_start=4) == ("Jane Doe", "Senior Software Engineer")


def test_all_caps_name_title_cased():
    lines = normalize("JOHN DOE\nNew York, New York\njohn.doe@example.com\n(555) 123-4567\nEXPERIENCE")
    name, title = extract_header(lines, first_section_start=4)

    assert name == "John Doe"
    # City line is not a title
    assert title == ""


def test_contact_and_punctuation_lines_skipped():
    lines = normalize("jane@example.com\n| | |\nJane Doe\nData Scientist\nSkills")
    assert extract_header(lines, first_section_start=4) == ("Jane Doe", "Data Scientist")


def test_header_window_capped():
    lines = ["jane@example.com"] * 8 + ["Jane Doe", "Engineer"]
    assert extract_header(lines, first_section_start=None) == ("", "")
