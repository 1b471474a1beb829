"""Unit tests for storage-boundary coercion on the pydantic models."""

import pytest

from jobtracker.models.application_models import Application, ApplicationStatus, FollowUpReminder, InterviewSchedule
from jobtracker.models.application_models import InterviewType, ReminderType
from jobtracker.models.jd_models import JobDescription, JobType
from jobtracker.models.resume_models import MasterResume


@pytest.mark.unit
def test_master_resume_defaults():
    resume = MasterResume()
    assert resume.header.name == ""
    assert len(resume.summaries) == 1
    assert resume.summaries[0].is_default is True
    assert resume.summaries[0].name == "Default"
    assert resume.is_complete() is False


@pytest.mark.unit
def test_malformed_resume_is_coerced_to_defaults():
    resume = MasterResume.model_validate({
        "header": "not a dict",
        "experience": "not a list",
        "education": [None, 3, {"school": "MIT", "bullets": ["plain string bullet", 7]}],
        "skills": {"technical": "Python", "tools": None},
    })

    assert resume.header.name == ""
    assert resume.experience == []
    assert len(resume.education) == 1
    bullets = resume.education[0].bullets
    assert [b.text for b in bullets] == ["plain string bullet"]
    assert bullets[0].enabled is True
    assert bullets[0].id
    assert resume.skills.technical == ["Python"]
    assert resume.skills.tools == []


@pytest.mark.unit
def test_camel_case_round_trip(resume_data):
    resume = MasterResume.model_validate(resume_data)
    dumped = resume.model_dump(by_alias=True)
    assert dumped["education"][0]["graduationDate"] == "May 2020"
    assert dumped["summaries"][0]["isDefault"] is True
    assert dumped["experience"][0]["startDate"] == "Jan 2021"


@pytest.mark.unit
def test_strings_are_truncated():
    resume = MasterResume.model_validate({"experience": [{"title": "x" * 600, "bullets": [{"text": "y" * 6000}]}]})
    assert len(resume.experience[0].title) == 500
    assert len(resume.experience[0].bullets[0].text) == 5000

    job = JobDescription(raw_text="z" * 60_000)
    assert len(job.raw_text) == 50_000


@pytest.mark.unit
def test_unknown_enum_values_fall_back():
    assert JobDescription.model_validate({"jobType": "freelance"}).job_type == JobType.FULL_TIME
    assert Application.model_validate({"status": "ghosted"}).status == ApplicationStatus.DRAFT
    assert InterviewSchedule.model_validate({"type": "panel"}).type == InterviewType.PHONE
    assert FollowUpReminder.model_validate({"type": "nudge"}).type == ReminderType.CUSTOM


@pytest.mark.unit
def test_application_lists_and_pending_items():
    app = Application.model_validate({
        "connections": 5,
        "interviews": [{"date": "2024-01-01", "completed": False}, {"date": "2024-01-02", "completed": True}],
        "reminders": [{"date": "2024-01-03"}, "garbage"],
    })
    assert app.connections == []
    assert len(app.reminders) == 1
    assert app.pending_items() == 2
