"""
JD Service — parse pasted job descriptions into structured fields via the LLM.

Responsibilities:
  • Validate the raw text (type, emptiness, 50–50,000 characters after trimming)
  • Parse via LLM → ParsedJobDescription with safe defaults
  • Clean skill/keyword lists (bullet prefixes, blanks, duplicates)
"""

from __future__ import annotations

import logging
from typing import Any

from jobtracker.exceptions import InvalidInputError
from jobtracker.models.jd_models import ParsedJobDescription
from jobtracker.prompts.jd_parser import SYSTEM_PROMPT, USER_PROMPT_TEMPLATE
from jobtracker.services import llm_service
from jobtracker.utils.coercion import RAW_JOB_TEXT
from jobtracker.utils.text_cleanup import clean_term, normalize_text

logger = logging.getLogger(__name__)

MIN_JOB_TEXT = 50


# ── Public API ───────────────────────────────────────────────────────────────


def validate_job_text(job_text: Any) -> str:
    """Return the trimmed job text, or raise InvalidInputError with a user-facing message."""
    if not isinstance(job_text, str):
        if job_text is None:
            raise InvalidInputError("Job description is required")
        raise InvalidInputError("Job description must be a string")

    trimmed = job_text.strip()
    if not trimmed:
        raise InvalidInputError("Job description is required")
    if len(trimmed) < MIN_JOB_TEXT:
        raise InvalidInputError("Job description is too short")
    if len(trimmed) > RAW_JOB_TEXT:
        raise InvalidInputError("Job description is too long (max 50,000 characters)")
    return trimmed


async def parse_job_text(job_text: Any) -> ParsedJobDescription:
    """Parse raw job text into a ParsedJobDescription via LLM."""
    text = validate_job_text(job_text)

    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": USER_PROMPT_TEMPLATE.format(jd_text=normalize_text(text))},
    ]

    logger.info(f"Parsing job description ({len(text)} chars)")

    data = await llm_service.complete_json(messages=messages, prompt_name="jd_parser")

    parsed = build_parsed_job(data)
    logger.info(f"Parsed job description: role={parsed.role!r} company={parsed.company!r}")
    return parsed


# ── Helpers ──────────────────────────────────────────────────────────────────


def build_parsed_job(data: dict | list) -> ParsedJobDescription:
    """Build a ParsedJobDescription from LLM JSON output, with safe defaults."""
    if isinstance(data, list):
        data = data[0] if data else {}
    if not isinstance(data, dict):
        data = {}

    parsed = ParsedJobDescription.model_validate(data)
    parsed.required_skills = _clean_terms(parsed.required_skills)
    parsed.keywords = _clean_terms(parsed.keywords)
    return parsed


def _clean_terms(terms: list[str]) -> list[str]:
    """Strip bullet prefixes and blanks; drop case-insensitive duplicates keeping first order."""
    seen: set[str] = set()
    cleaned = []
    for term in terms:
        term = clean_term(term)
        if term and term.lower() not in seen:
            seen.add(term.lower())
            cleaned.append(term)
    return cleaned
