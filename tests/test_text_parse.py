from fastapi.testclient import TestClient
from app.main import app
from app.core.config import get_settings
from app.core.resume_parser import parse_resume_text

client = TestClient(app)

RESUME = """JANE DOE
Senior Software Engineer
San Francisco, CA | jane.doe@example.com | (555) 123-4567

Summary
Backend engineer with 8 years of experience
building data platforms.

Experience
Senior Engineer | Acme Corp
Jan 2020 - Present
- Led a team of 5
- Shipped feature X

Education
B.S. Computer Science
Stanford University

Skills
Languages: Python, Go
Cloud: AWS
"""


def test_full_resume_record():
    result = parse_resume_text(RESUME)

    assert result.header.name == "Jane Doe"
    assert result.header.title == "Senior Software Engineer"
    assert result.header.contact.email == "jane.doe@example.com"
    assert result.header.contact.phone == "(555) 123-4567"
    assert result.header.contact.location == "San Francisco, CA"

    assert result.summary == "Backend engineer with 8 years of experience building data platforms."

    assert [(e.id, e.role, e.company, e.period) for e in result.experience] == [
        ("exp-1", "Senior Engineer", "Acme Corp", "Jan 2020 - Present")
    ]
    assert result.experience[0].bullets == ["Led a team of 5", "Shipped feature X"]

    assert [(e.degree, e.institution) for e in result.education] == [
        ("B.S. Computer Science", "Stanford University")
    ]
    assert [(s.id, s.category, s.skills) for s in result.skills] == [
        ("skill-1", "Languages", "Python, Go"),
        ("skill-2", "Cloud", "AWS"),
    ]

    visibility = result.section_visibility
    assert (visibility.summary, visibility.skills, visibility.education, visibility.expertise) == (
        True,
        True,
        True,
        False,
    )
    assert result.forward_deployed_expertise == ""
    assert result.warnings == []
    assert result.diagnostics is None


def test_missing_sections_reported():
    result = parse_resume_text("Jane Doe\njane.doe@example.com\n(555) 123-4567\n")

    assert result.header.name == "Jane Doe"
    assert result.experience == []
    assert result.section_visibility.summary is False
    assert "No section headers detected (Summary, Experience, Education, Skills)." in result.warnings
    assert "No experience entries detected." in result.warnings


# ===== API =====

def test_parse_txt():
    files = {"file": ("resume.txt", RESUME.encode("utf-8"), "text/plain")}
    r = client.post("/parse", files=files)
    assert r.status_code == 200
    data = r.json()

    assert data["header"]["name"] == "Jane Doe"
    assert data["experience"][0]["company"] == "Acme Corp"
    assert data["diagnostics"]["method"] == "plain-text"
    assert data["diagnostics"]["low_confidence"] is False


def test_format_field_overrides_extension():
    files = {"file": ("upload.bin", RESUME.encode("utf-8"), "application/octet-stream")}
    r = client.post("/parse", files=files, data={"format": "txt"})

    assert r.status_code == 200
    assert r.json()["header"]["contact"]["email"] == "jane.doe@example.com"


def test_empty_upload_returns_400():
    files = {"file": ("resume.txt", b"", "text/plain")}
    r = client.post("/parse", files=files)
    assert r.status_code == 400


def test_oversized_upload_returns_413(monkeypatch):
    monkeypatch.setattr(get_settings(), "max_upload_bytes", 100)
    files = {"file": ("resume.txt", RESUME.encode("utf-8"), "text/plain")}
    r = client.post("/parse", files=files)

    assert r.status_code == 413


def test_unsupported_format_returns_415():
    files = {"file": ("resume.odt", b"anything", "application/vnd.oasis.opendocument.text")}
    r = client.post("/parse", files=files)

    assert r.status_code == 415
    assert ".odt" in r.json()["detail"]


def test_too_little_text_returns_422():
    files = {"file": ("resume.txt", b"Jane", "text/plain")}
    r = client.post("/parse", files=files)

    assert r.status_code == 422
    assert r.json()["detail"] == "Not enough text extracted from the file."


def test_health():
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/").json()["status"] == "running"


def test_openapi_title_from_settings():
    assert app.title == get_settings().app_name
    assert client.get("/openapi.json").json()["info"]["title"] == f"{get_settings().app_name} API"
