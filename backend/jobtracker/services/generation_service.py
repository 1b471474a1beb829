"""
Generation Service — orchestrate one AI tailoring run for a (resume, job) pair.

Pipeline:
  1. Validate the resume is complete enough to tailor
  2. Build the payload (enabled bullets only, caller's snapshot untouched)
  3. Call the LLM with the application-generator prompt
  4. Parse the reply into GeneratedContent (JSON, fenced JSON, or raw-text fallback)

Also builds the draft Application that "save to tracker" persists.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from jobtracker.exceptions import GenerationError, GenerationInProgressError, InvalidInputError
from jobtracker.models.application_models import Application, ApplicationStatus, ConnectionInfo
from jobtracker.models.generation_models import GeneratedContent, GenerationSettings
from jobtracker.models.jd_models import JobDescription
from jobtracker.models.resume_models import MasterResume
from jobtracker.prompts.application_generator import SYSTEM_PROMPT, USER_PROMPT_TEMPLATE
from jobtracker.services import llm_service
from jobtracker.utils.date_utils import now_iso

logger = logging.getLogger(__name__)

GENERATED_RESUME_VERSION = "Generated v1"
INCOMPLETE_RESUME_MESSAGE = "Please complete your master resume first (name and at least one experience)"

# (user_id, job_id) pairs with a generation currently awaiting the LLM
_in_flight: set[tuple[str, str]] = set()


# ── Payload ──────────────────────────────────────────────────────────────────


def build_generation_payload(
    master_resume: MasterResume,
    job: JobDescription,
    settings: GenerationSettings,
) -> dict[str, Any]:
    """camelCase payload with every bullet list filtered to enabled bullets."""
    resume = master_resume.model_copy(deep=True)
    for entries in (resume.education, resume.experience, resume.leadership, resume.projects):
        for entry in entries:
            entry.bullets = [b for b in entry.bullets if b.enabled]

    return {
        "masterResume": resume.model_dump(by_alias=True, mode="json"),
        "jobDescription": job.model_dump(by_alias=True, mode="json"),
        "settings": settings.model_dump(by_alias=True, mode="json"),
    }


def build_messages(payload: dict[str, Any]) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": USER_PROMPT_TEMPLATE.format(
                master_resume=json.dumps(payload["masterResume"], ensure_ascii=False),
                job_description=json.dumps(payload["jobDescription"], ensure_ascii=False),
                settings=json.dumps(payload["settings"], ensure_ascii=False),
            ),
        },
    ]


# ── Response parsing ─────────────────────────────────────────────────────────


def _as_text(val: Any) -> str:
    if val is None:
        return ""
    if isinstance(val, str):
        return val
    return json.dumps(val, ensure_ascii=False)


def parse_generation_response(raw: Optional[str]) -> GeneratedContent:
    """
    Parse the model's reply.

    A JSON object (optionally inside a ``` or ```json fence) maps onto the four
    fields. Anything unparseable becomes the resume text verbatim.
    """
    if raw is None or not raw.strip():
        raise GenerationError(llm_service.GENERIC_FAILURE, detail="No content generated")

    try:
        data = llm_service.loads_reply(raw)
    except json.JSONDecodeError:
        logger.warning(f"Generation reply was not JSON ({len(raw)} chars); using raw text as resume")
        return GeneratedContent(resume=raw)

    if not isinstance(data, dict):
        logger.warning("Generation reply was JSON but not an object; using raw text as resume")
        return GeneratedContent(resume=raw)

    return GeneratedContent(
        resume=_as_text(data.get("resume")),
        cover_letter=_as_text(data.get("coverLetter")),
        why_role=_as_text(data.get("whyRole")),
        why_company=_as_text(data.get("whyCompany")),
    )


# ── Orchestration ────────────────────────────────────────────────────────────


async def generate_application(
    *,
    user_id: str,
    master_resume: MasterResume,
    job: JobDescription,
    settings: GenerationSettings,
) -> GeneratedContent:
    """
    Run one generation. At most one request per (user, job) is outstanding;
    a concurrent duplicate raises GenerationInProgressError.
    """
    if not master_resume.is_complete():
        raise InvalidInputError(INCOMPLETE_RESUME_MESSAGE)

    key = (user_id, job.id)
    if key in _in_flight:
        raise GenerationInProgressError("A generation for this job is already in progress")

    _in_flight.add(key)
    try:
        payload = build_generation_payload(master_resume, job, settings)
        logger.info(f"Generating application: user={user_id} job={job.id} company={job.company!r}")
        raw = await llm_service.complete(
            messages=build_messages(payload),
            prompt_name="application_generator",
        )
        content = parse_generation_response(raw)
    finally:
        _in_flight.discard(key)

    logger.info(
        f"Generation complete: resume={len(content.resume)} chars, "
        f"cover_letter={len(content.cover_letter)} chars"
    )
    return content


def is_generating(user_id: str, job_id: str) -> bool:
    return (user_id, job_id) in _in_flight


# ── Save to tracker ──────────────────────────────────────────────────────────


def create_application_from_generation(
    job: JobDescription,
    content: GeneratedContent,
    settings: GenerationSettings,
    connection_info: Optional[ConnectionInfo] = None,
    application_link: Optional[str] = None,
) -> Application:
    """Draft application snapshotting the job and the generated text."""
    now = now_iso()
    connections = []
    if connection_info is not None and connection_info.has_connection and connection_info.name:
        connections.append(connection_info.name)

    return Application(
        job_description_id=job.id,
        company=job.company,
        role=job.role,
        location=job.location,
        salary=job.salary,
        job_type=job.job_type.value,
        industry=job.industry,
        application_date=now,
        resume_version=GENERATED_RESUME_VERSION,
        status=ApplicationStatus.DRAFT,
        connections=connections,
        connection_info=connection_info if connection_info is not None and connection_info.has_connection else None,
        application_link=application_link,
        saved_resume=content.resume,
        saved_cover_letter=content.cover_letter if settings.include_cover_letter else None,
        created_at=now,
        updated_at=now,
    )
