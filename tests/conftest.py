"""Shared fixtures: an isolated data directory, a known bearer token and sample records."""

import os

# Use litellm's bundled model cost map so importing it needs no network access.
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

import pytest  # noqa: E402
from fastapi.testclient import TestClient

from jobtracker.config import settings
from jobtracker.main import app
from jobtracker.models.export_models import ExportContent
from jobtracker.models.jd_models import JobDescription
from jobtracker.models.resume_models import MasterResume
from jobtracker.services import generation_service
from jobtracker.services.autosave import resume_saver
from jobtracker.services.resume_store import reset_stores

TEST_TOKEN = "test-token"
TEST_USER = "user-1"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point storage at a temp dir and install a single known API token."""
    monkeypatch.setattr(settings, "data_dir", str(tmp_path / "users"))
    monkeypatch.setattr(settings, "api_tokens", {TEST_TOKEN: TEST_USER})
    monkeypatch.setattr(settings, "autosave_delay_seconds", 0.05)
    monkeypatch.setattr(settings, "openai_api_key", "sk-test")
    monkeypatch.setattr(settings, "llm_provider", "openai")
    monkeypatch.setattr(settings, "llm_model_key", "gpt-4o-mini")
    reset_stores()
    generation_service._in_flight.clear()
    yield
    resume_saver.cancel_all()
    resume_saver.last_error.clear()
    resume_saver.last_saved_at.clear()
    reset_stores()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TEST_TOKEN}"}


@pytest.fixture
def resume_data():
    """A master resume in its persisted (camelCase) shape."""
    return {
        "header": {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "phone": "555-0100",
            "linkedin": "linkedin.com/in/janedoe",
            "location": "Boston, MA",
        },
        "summaries": [{"id": "1", "name": "Default", "text": "Backend engineer.", "isDefault": True}],
        "education": [
            {
                "id": "edu-1",
                "school": "State University",
                "degree": "BS",
                "field": "Computer Science",
                "location": "Boston, MA",
                "graduationDate": "May 2020",
                "bullets": [{"id": "eb-1", "text": "Dean's list", "enabled": True}],
            }
        ],
        "experience": [
            {
                "id": "exp-1",
                "company": "Initech",
                "title": "Software Engineer",
                "location": "Austin, TX",
                "startDate": "Jan 2021",
                "endDate": "Present",
                "bullets": [
                    {"id": "b-1", "text": "Shipped the billing service", "enabled": True},
                    {"id": "b-2", "text": "Secret disabled bullet", "enabled": False},
                    {"id": "b-3", "text": "Cut p99 latency by 40 percent", "enabled": True},
                ],
            }
        ],
        "leadership": [],
        "projects": [
            {
                "id": "proj-1",
                "name": "Tracker CLI",
                "technologies": ["Python"],
                "startDate": "",
                "endDate": "",
                "link": "github.com/jane/tracker",
                "bullets": [{"id": "pb-1", "text": "Built a CLI", "enabled": True}],
            }
        ],
        "skills": {
            "technical": ["Python", "SQL"],
            "tools": ["Docker"],
            "languages": ["English", "Spanish"],
            "certifications": [],
        },
    }


@pytest.fixture
def master_resume(resume_data):
    return MasterResume.model_validate(resume_data)


@pytest.fixture
def job():
    return JobDescription(
        id="job-1",
        company="Acme Corp",
        role="Backend Engineer",
        location="Remote",
        salary="$120,000 - $150,000",
        job_type="full-time",
        industry="Software",
        required_skills=["Python", "PostgreSQL"],
        keywords=["ownership"],
        raw_text="We are hiring a backend engineer " * 5,
    )


@pytest.fixture
def export_content(master_resume):
    return ExportContent(
        resume_text="Generated resume text",
        cover_letter_text="Dear Hiring Manager,\n\nI am excited to apply.\n\nSincerely,\nJane",
        company_name="Acme Corp",
        role_name="Backend Engineer",
        master_resume=master_resume,
    )


@pytest.fixture
def client():
    """App client with the lifespan running (the auto-saver flushes on exit)."""
    with TestClient(app) as c:
        yield c
