"""
Storage Service — per-user YAML persistence.

Layout:
  {settings.data_dir}/{user_id}/master_resume.yaml
  {settings.data_dir}/{user_id}/jobs.yaml
  {settings.data_dir}/{user_id}/applications.yaml

Every record is re-validated through its pydantic model on load, so a
hand-edited or partially corrupt file degrades to defaults instead of
crashing the app. Writes go to a temp file first and are swapped in place.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from jobtracker.config import settings
from jobtracker.exceptions import PersistenceError
from jobtracker.models.application_models import Application
from jobtracker.models.jd_models import JobDescription
from jobtracker.models.resume_models import MasterResume

logger = logging.getLogger(__name__)

RESUME_FILE = "master_resume.yaml"
JOBS_FILE = "jobs.yaml"
APPLICATIONS_FILE = "applications.yaml"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


# ── Paths ────────────────────────────────────────────────────────────────────


def user_dir(user_id: str) -> Path:
    """Directory for one user's files; the id is sanitized so it cannot escape data_dir."""
    safe_id = _UNSAFE_CHARS.sub("_", user_id).strip(".") or "_"
    return Path(settings.data_dir) / safe_id


# ── YAML I/O ─────────────────────────────────────────────────────────────────


def _read_yaml(path: Path) -> Any:
    if not path.exists():
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to read {path}: {e}")
        return None


def _write_yaml(path: Path, data: Any) -> None:
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
        os.replace(tmp_path, path)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to save {path}: {e}")
        raise PersistenceError(f"Failed to save {path.stem.replace('_', ' ')}") from e


def _dump(model) -> dict:
    return model.model_dump(by_alias=True, mode="json")


def _load_records(path: Path, key: str) -> list[dict]:
    raw = _read_yaml(path)
    if not raw or not isinstance(raw, dict):
        return []
    records = raw.get(key, [])
    if not isinstance(records, list):
        logger.warning(f"Ignoring malformed '{key}' in {path}")
        return []
    return [r for r in records if isinstance(r, dict)]


# ── Master resume ────────────────────────────────────────────────────────────


def load_master_resume(user_id: str) -> MasterResume:
    raw = _read_yaml(user_dir(user_id) / RESUME_FILE)
    if not isinstance(raw, dict):
        return MasterResume()
    return MasterResume.model_validate(raw)


def save_master_resume(user_id: str, resume: MasterResume) -> None:
    path = user_dir(user_id) / RESUME_FILE
    _write_yaml(path, _dump(resume))
    logger.info(f"Saved master resume for {user_id} to {path}")


# ── Jobs ─────────────────────────────────────────────────────────────────────


def load_jobs(user_id: str) -> list[JobDescription]:
    path = user_dir(user_id) / JOBS_FILE
    jobs = [JobDescription.model_validate(r) for r in _load_records(path, "jobs")]
    logger.debug(f"Loaded {len(jobs)} jobs from {path}")
    return jobs


def save_jobs(user_id: str, jobs: list[JobDescription]) -> None:
    path = user_dir(user_id) / JOBS_FILE
    _write_yaml(path, {"jobs": [_dump(j) for j in jobs]})
    logger.info(f"Saved {len(jobs)} jobs to {path}")


# ── Applications ─────────────────────────────────────────────────────────────


def load_applications(user_id: str) -> list[Application]:
    path = user_dir(user_id) / APPLICATIONS_FILE
    apps = [Application.model_validate(r) for r in _load_records(path, "applications")]
    logger.debug(f"Loaded {len(apps)} applications from {path}")
    return apps


def save_applications(user_id: str, apps: list[Application]) -> None:
    path = user_dir(user_id) / APPLICATIONS_FILE
    _write_yaml(path, {"applications": [_dump(a) for a in apps]})
    logger.info(f"Saved {len(apps)} applications to {path}")
