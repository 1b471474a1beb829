"""
Resume Store — per-user state container over the YAML storage.

Holds the master resume, job descriptions and applications in memory.
  • Master-resume edits mark the store dirty; persistence is debounced by the
    auto-saver and confirmed with mark_saved()
  • Job and application commands write through to storage immediately
  • Every application mutation bumps updatedAt
"""

from __future__ import annotations

import logging
from typing import Optional

from jobtracker.exceptions import NotFoundError
from jobtracker.models.application_models import (
    Application,
    ApplicationUpdate,
    FollowUpReminder,
    InterviewSchedule,
    InterviewUpdate,
    ReminderUpdate,
)
from jobtracker.models.jd_models import JobDescription, JobDescriptionUpdate
from jobtracker.models.resume_models import MasterResume, MasterResumeUpdate
from jobtracker.services import storage_service
from jobtracker.utils.date_utils import now_iso

logger = logging.getLogger(__name__)

RESUME_SECTIONS = ("education", "experience", "leadership", "projects")


def _provided_fields(update) -> dict:
    """Fields the client actually sent; nested values are kept whole so they replace, not merge."""
    return {name: getattr(update, name) for name in update.model_fields_set}


class ResumeStore:
    """In-memory state for one user, loaded lazily from storage."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        self.master_resume: MasterResume = storage_service.load_master_resume(user_id)
        self.jobs: list[JobDescription] = storage_service.load_jobs(user_id)
        self.applications: list[Application] = storage_service.load_applications(user_id)
        self.has_unsaved_changes = False
        logger.info(
            f"Loaded store for {user_id}: {len(self.jobs)} jobs, {len(self.applications)} applications"
        )

    # ── Master resume ────────────────────────────────────────────────────

    def update_master_resume(self, update: MasterResumeUpdate) -> MasterResume:
        """Shallow merge: each provided top-level field replaces the stored one."""
        changes = _provided_fields(update)
        if changes:
            merged = self.master_resume.model_dump()
            merged.update(changes)
            self.master_resume = MasterResume.model_validate(merged)
            self.has_unsaved_changes = True
        return self.master_resume

    def set_master_resume(self, resume: MasterResume) -> None:
        self.master_resume = resume
        self.has_unsaved_changes = False

    def set_bullet_enabled(self, section: str, entry_id: str, bullet_id: str, enabled: bool) -> MasterResume:
        if section not in RESUME_SECTIONS:
            raise NotFoundError(f"Unknown resume section: {section}")
        entry = next((e for e in getattr(self.master_resume, section) if e.id == entry_id), None)
        if entry is None:
            raise NotFoundError(f"Entry {entry_id} not found in {section}")
        bullet = next((b for b in entry.bullets if b.id == bullet_id), None)
        if bullet is None:
            raise NotFoundError(f"Bullet {bullet_id} not found")
        bullet.enabled = enabled
        self.has_unsaved_changes = True
        return self.master_resume

    def save_master_resume(self) -> None:
        storage_service.save_master_resume(self.user_id, self.master_resume)
        self.mark_saved()

    def mark_saved(self) -> None:
        self.has_unsaved_changes = False

    # ── Job descriptions ─────────────────────────────────────────────────

    def get_job(self, job_id: str) -> JobDescription:
        job = next((j for j in self.jobs if j.id == job_id), None)
        if job is None:
            raise NotFoundError("Job description not found")
        return job

    def add_job(self, job: JobDescription) -> JobDescription:
        self.jobs.append(job)
        storage_service.save_jobs(self.user_id, self.jobs)
        return job

    def update_job(self, job_id: str, update: JobDescriptionUpdate) -> JobDescription:
        job = self.get_job(job_id)
        merged = job.model_dump()
        merged.update(_provided_fields(update))
        updated = JobDescription.model_validate(merged)
        self.jobs = [updated if j.id == job_id else j for j in self.jobs]
        storage_service.save_jobs(self.user_id, self.jobs)
        return updated

    def delete_job(self, job_id: str) -> None:
        """Applications keep their snapshot and dangling jobDescriptionId."""
        self.get_job(job_id)
        self.jobs = [j for j in self.jobs if j.id != job_id]
        storage_service.save_jobs(self.user_id, self.jobs)

    # ── Applications ─────────────────────────────────────────────────────

    def get_application(self, app_id: str) -> Application:
        app = next((a for a in self.applications if a.id == app_id), None)
        if app is None:
            raise NotFoundError("Application not found")
        return app

    def add_application(self, app: Application) -> Application:
        self.applications.append(app)
        self._save_applications()
        return app

    def update_application(self, app_id: str, update: ApplicationUpdate) -> Application:
        app = self.get_application(app_id)
        merged = app.model_dump()
        merged.update(_provided_fields(update))
        merged["updated_at"] = now_iso()
        updated = Application.model_validate(merged)
        self._replace(updated)
        return updated

    def delete_application(self, app_id: str) -> None:
        self.get_application(app_id)
        self.applications = [a for a in self.applications if a.id != app_id]
        self._save_applications()

    # ── Interviews & reminders ───────────────────────────────────────────

    def add_interview(self, app_id: str, interview: InterviewSchedule) -> Application:
        app = self.get_application(app_id).model_copy(deep=True)
        app.interviews.append(interview)
        return self._touch(app)

    def update_interview(self, app_id: str, interview_id: str, update: InterviewUpdate) -> Application:
        app = self.get_application(app_id).model_copy(deep=True)
        app.interviews = [
            self._merge(i, update, InterviewSchedule) if i.id == interview_id else i
            for i in app.interviews
        ]
        if not any(i.id == interview_id for i in app.interviews):
            raise NotFoundError("Interview not found")
        return self._touch(app)

    def delete_interview(self, app_id: str, interview_id: str) -> Application:
        app = self.get_application(app_id).model_copy(deep=True)
        if not any(i.id == interview_id for i in app.interviews):
            raise NotFoundError("Interview not found")
        app.interviews = [i for i in app.interviews if i.id != interview_id]
        return self._touch(app)

    def add_reminder(self, app_id: str, reminder: FollowUpReminder) -> Application:
        app = self.get_application(app_id).model_copy(deep=True)
        app.reminders.append(reminder)
        return self._touch(app)

    def update_reminder(self, app_id: str, reminder_id: str, update: ReminderUpdate) -> Application:
        app = self.get_application(app_id).model_copy(deep=True)
        if not any(r.id == reminder_id for r in app.reminders):
            raise NotFoundError("Reminder not found")
        app.reminders = [
            self._merge(r, update, FollowUpReminder) if r.id == reminder_id else r
            for r in app.reminders
        ]
        return self._touch(app)

    def delete_reminder(self, app_id: str, reminder_id: str) -> Application:
        app = self.get_application(app_id).model_copy(deep=True)
        if not any(r.id == reminder_id for r in app.reminders):
            raise NotFoundError("Reminder not found")
        app.reminders = [r for r in app.reminders if r.id != reminder_id]
        return self._touch(app)

    # ── Internals ────────────────────────────────────────────────────────

    @staticmethod
    def _merge(item, update, model_cls):
        merged = item.model_dump()
        merged.update(_provided_fields(update))
        return model_cls.model_validate(merged)

    def _touch(self, app: Application) -> Application:
        app.updated_at = now_iso()
        self._replace(app)
        return app

    def _replace(self, app: Application) -> None:
        self.applications = [app if a.id == app.id else a for a in self.applications]
        self._save_applications()

    def _save_applications(self) -> None:
        storage_service.save_applications(self.user_id, self.applications)


# ── Registry ─────────────────────────────────────────────────────────────────

_stores: dict[str, ResumeStore] = {}


def get_store(user_id: str) -> ResumeStore:
    """Return the user's store, loading it from storage on first access."""
    store = _stores.get(user_id)
    if store is None:
        store = ResumeStore(user_id)
        _stores[user_id] = store
    return store


def reset_stores(user_id: Optional[str] = None) -> None:
    """Drop cached stores (all, or one user's) so the next access reloads from disk."""
    if user_id is None:
        _stores.clear()
    else:
        _stores.pop(user_id, None)
