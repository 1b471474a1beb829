"""Unit tests for job-description validation and parsing."""

import asyncio

import pytest

from jobtracker.exceptions import InvalidInputError
from jobtracker.models.jd_models import JobType
from jobtracker.services import jd_service, llm_service

POSTING = "Acme Corp is hiring a Backend Engineer to build Python services. " * 3


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, message",
    [
        (None, "Job description is required"),
        ("   ", "Job description is required"),
        (42, "Job description must be a string"),
        ("too short", "Job description is too short"),
        ("x" * 50_001, "Job description is too long (max 50,000 characters)"),
    ],
)
def test_validation_messages(text, message):
    with pytest.raises(InvalidInputError) as exc:
        jd_service.validate_job_text(text)
    assert exc.value.message == message


@pytest.mark.unit
def test_validation_trims_before_measuring():
    assert jd_service.validate_job_text("  " + "x" * 50 + "  ") == "x" * 50
    assert jd_service.validate_job_text(" " * 10 + "x" * 50_000) == "x" * 50_000


@pytest.mark.unit
def test_parse_job_text_coerces_llm_output(monkeypatch):
    captured = {}

    async def fake_complete_json(**kwargs):
        captured.update(kwargs)
        return {
            "company": "Acme Corp",
            "role": "Backend Engineer",
            "location": "Remote",
            "salary": "null",
            "jobType": "Contract",
            "industry": "Software",
            "requiredSkills": ["• Python", "python", "- FastAPI", ""],
            "keywords": "ownership",
        }

    monkeypatch.setattr(llm_service, "complete_json", fake_complete_json)

    parsed = asyncio.run(jd_service.parse_job_text(POSTING))

    assert captured["prompt_name"] == "jd_parser"
    assert parsed.company == "Acme Corp"
    assert parsed.salary is None
    assert parsed.job_type == JobType.CONTRACT
    assert parsed.required_skills == ["Python", "FastAPI"]
    assert parsed.keywords == ["ownership"]


@pytest.mark.unit
def test_build_parsed_job_defaults_for_garbage():
    parsed = jd_service.build_parsed_job(["not a dict"])
    assert parsed.company == ""
    assert parsed.job_type == JobType.FULL_TIME
    assert parsed.required_skills == []


@pytest.mark.unit
def test_invalid_text_never_reaches_llm(monkeypatch):
    async def fail(**kwargs):
        raise AssertionError("LLM must not be called")

    monkeypatch.setattr(llm_service, "complete_json", fail)
    with pytest.raises(InvalidInputError):
        asyncio.run(jd_service.parse_job_text("short"))
