"""Unit tests for the generation orchestrator. The LLM call is monkeypatched."""

import asyncio
import json

import pytest

from jobtracker.exceptions import GenerationError, GenerationInProgressError, InvalidInputError
from jobtracker.models.application_models import ApplicationStatus, ConnectionInfo
from jobtracker.models.generation_models import GeneratedContent, GenerationSettings
from jobtracker.models.resume_models import MasterResume
from jobtracker.services import generation_service, llm_service
from jobtracker.services.generation_service import (
    build_generation_payload,
    create_application_from_generation,
    generate_application,
    parse_generation_response,
)

REPLY = {
    "resume": "Tailored resume",
    "coverLetter": "Dear team",
    "whyRole": "Because backend",
    "whyCompany": "Because Acme",
}


# ── Payload ──────────────────────────────────────────────────────────────────


@pytest.mark.unit
def test_payload_keeps_only_enabled_bullets(master_resume, job):
    payload = build_generation_payload(master_resume, job, GenerationSettings())

    bullets = payload["masterResume"]["experience"][0]["bullets"]
    assert [b["text"] for b in bullets] == ["Shipped the billing service", "Cut p99 latency by 40 percent"]
    assert payload["jobDescription"]["company"] == "Acme Corp"
    assert payload["settings"]["coverLetterTone"] == "professional"


@pytest.mark.unit
def test_payload_does_not_mutate_input(master_resume, job):
    build_generation_payload(master_resume, job, GenerationSettings())
    assert len(master_resume.experience[0].bullets) == 3


# ── Parsing ──────────────────────────────────────────────────────────────────


@pytest.mark.unit
def test_parse_fenced_json():
    raw = "```json\n" + json.dumps(REPLY) + "\n```"
    assert parse_generation_response(raw) == GeneratedContent(
        resume="Tailored resume",
        cover_letter="Dear team",
        why_role="Because backend",
        why_company="Because Acme",
    )


@pytest.mark.unit
def test_parse_unfenced_json_with_code_fence_inside_value():
    reply = dict(REPLY, resume="## Skills\n```\npython\n```")
    content = parse_generation_response(json.dumps(reply))
    assert content.resume == "## Skills\n```\npython\n```"
    assert content.cover_letter == "Dear team"
    assert content.why_company == "Because Acme"


@pytest.mark.unit
def test_parse_fenced_json_with_code_fence_inside_value():
    reply = dict(REPLY, resume="Intro\n```\ncode\n```\nEnd")
    content = parse_generation_response("```json\n" + json.dumps(reply, indent=2) + "\n```")
    assert content.resume == "Intro\n```\ncode\n```\nEnd"
    assert content.cover_letter == "Dear team"
    assert content.why_role == "Because backend"


@pytest.mark.unit
def test_parse_bare_fence_and_missing_keys():
    content = parse_generation_response('```\n{"resume": "Only resume"}\n```')
    assert content.resume == "Only resume"
    assert content.cover_letter == ""
    assert content.why_company == ""


@pytest.mark.unit
def test_parse_unparseable_falls_back_to_raw_resume():
    content = parse_generation_response("not json")
    assert content == GeneratedContent(resume="not json")


@pytest.mark.unit
def test_parse_non_string_values_become_text():
    content = parse_generation_response(json.dumps({"resume": {"sections": []}, "whyRole": None}))
    assert content.resume == '{"sections": []}'
    assert content.why_role == ""


@pytest.mark.unit
@pytest.mark.parametrize("raw", ["", "   ", None])
def test_parse_empty_reply_is_error(raw):
    with pytest.raises(GenerationError):
        parse_generation_response(raw)


# ── Orchestration ────────────────────────────────────────────────────────────


@pytest.mark.unit
def test_generate_application_calls_llm_once(monkeypatch, master_resume, job):
    calls = []

    async def fake_complete(**kwargs):
        calls.append(kwargs)
        return json.dumps(REPLY)

    monkeypatch.setattr(llm_service, "complete", fake_complete)

    content = asyncio.run(generate_application(
        user_id="u1", master_resume=master_resume, job=job, settings=GenerationSettings(),
    ))

    assert content.why_company == "Because Acme"
    assert len(calls) == 1
    assert calls[0]["prompt_name"] == "application_generator"
    assert "Secret disabled bullet" not in calls[0]["messages"][1]["content"]
    assert not generation_service.is_generating("u1", job.id)


@pytest.mark.unit
def test_incomplete_resume_rejected_before_llm(monkeypatch, job):
    async def fail(**kwargs):
        raise AssertionError("LLM must not be called")

    monkeypatch.setattr(llm_service, "complete", fail)

    with pytest.raises(InvalidInputError):
        asyncio.run(generate_application(
            user_id="u1", master_resume=MasterResume(), job=job, settings=GenerationSettings(),
        ))


@pytest.mark.unit
def test_llm_failure_propagates_and_clears_guard(monkeypatch, master_resume, job):
    async def boom(**kwargs):
        raise GenerationError("Failed to generate content. Please try again.")

    monkeypatch.setattr(llm_service, "complete", boom)

    with pytest.raises(GenerationError):
        asyncio.run(generate_application(
            user_id="u1", master_resume=master_resume, job=job, settings=GenerationSettings(),
        ))
    assert not generation_service.is_generating("u1", job.id)


@pytest.mark.unit
def test_concurrent_duplicate_request_is_rejected(monkeypatch, master_resume, job):
    async def scenario():
        release = asyncio.Event()

        async def slow_complete(**kwargs):
            await release.wait()
            return json.dumps(REPLY)

        monkeypatch.setattr(llm_service, "complete", slow_complete)

        first = asyncio.create_task(generate_application(
            user_id="u1", master_resume=master_resume, job=job, settings=GenerationSettings(),
        ))
        await asyncio.sleep(0)
        assert generation_service.is_generating("u1", job.id)

        with pytest.raises(GenerationInProgressError):
            await generate_application(
                user_id="u1", master_resume=master_resume, job=job, settings=GenerationSettings(),
            )

        release.set()
        return await first

    content = asyncio.run(scenario())
    assert content.resume == "Tailored resume"


# ── Save to tracker ──────────────────────────────────────────────────────────


@pytest.mark.unit
def test_create_application_from_generation(job):
    content = GeneratedContent(resume="R", cover_letter="C")
    app = create_application_from_generation(
        job,
        content,
        GenerationSettings(),
        connection_info=ConnectionInfo(has_connection=True, name="Sam"),
        application_link="https://acme.example/jobs/1",
    )

    assert app.status == ApplicationStatus.DRAFT
    assert app.job_description_id == "job-1"
    assert (app.company, app.role, app.location) == ("Acme Corp", "Backend Engineer", "Remote")
    assert app.resume_version == "Generated v1"
    assert app.saved_resume == "R"
    assert app.saved_cover_letter == "C"
    assert app.connections == ["Sam"]
    assert app.application_link == "https://acme.example/jobs/1"


@pytest.mark.unit
def test_cover_letter_not_saved_when_disabled(job):
    app = create_application_from_generation(
        job, GeneratedContent(resume="R", cover_letter="C"), GenerationSettings(include_cover_letter=False),
    )
    assert app.saved_cover_letter is None
    assert app.connections == []
