"""Job board: the saved job applications and their networking contacts.

Stateless over the repository: every call reads the list, applies one change
and writes the whole list back.
"""

import logging
from typing import Iterable, List, Optional

from jobhunter.database.job_repository import JobRepository
from jobhunter.exceptions import ContactNotFoundError, InvalidJobError, JobNotFoundError
from jobhunter.models.job import Contact, ContactStatus, JobApplication, JobStatus
from jobhunter.models.task_factory import ensure_https

logger = logging.getLogger(__name__)


def _next_id(ids: Iterable[int]) -> int:
    return max(list(ids) + [0]) + 1


def _required(value: Optional[str], field: str, job_id: Optional[int] = None) -> str:
    if value is None or not value.strip():
        raise InvalidJobError(f"{field} is required", job_id)
    return value.strip()


def _status(enum_cls, value, job_id: Optional[int] = None):
    try:
        return enum_cls(value).value
    except ValueError:
        raise InvalidJobError(f"Unknown status {value!r}", job_id)


class JobBoard:
    """Add, edit and remove job applications and their contacts."""

    def __init__(self, repository: JobRepository):
        self.repository = repository

    def list_jobs(self) -> List[JobApplication]:
        return self.repository.load_jobs()

    def get_job(self, job_id: int) -> JobApplication:
        return self._find(self.list_jobs(), job_id)

    def _find(self, jobs: List[JobApplication], job_id: int) -> JobApplication:
        for job in jobs:
            if job.id == job_id:
                return job
        raise JobNotFoundError(job_id)

    def _replace(self, jobs: List[JobApplication], updated: JobApplication) -> JobApplication:
        self.repository.save_jobs([updated if j.id == updated.id else j for j in jobs])
        return updated

    def add_job(
        self,
        title: str,
        company: str,
        post_url: str = "",
        description: str = "",
        status: JobStatus = JobStatus.SAVED,
    ) -> JobApplication:
        """Append a job application. Title and company are required."""
        jobs = self.list_jobs()
        job = JobApplication(
            id=_next_id(j.id for j in jobs),
            title=_required(title, "title"),
            company=_required(company, "company"),
            post_url=ensure_https(post_url),
            description=description or "",
            status=_status(JobStatus, status),
        )
        jobs.append(job)
        self.repository.save_jobs(jobs)
        logger.debug(f"Added job application {job.id}: {job.title[:50]} at {job.company[:50]}")
        return job

    def update_job(
        self,
        job_id: int,
        title: Optional[str] = None,
        company: Optional[str] = None,
        post_url: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[JobStatus] = None,
    ) -> JobApplication:
        """Edit a job application; ``None`` leaves a field unchanged."""
        jobs = self.list_jobs()
        job = self._find(jobs, job_id)
        changes: dict = {}
        if title is not None:
            changes["title"] = _required(title, "title", job_id)
        if company is not None:
            changes["company"] = _required(company, "company", job_id)
        if post_url is not None:
            changes["post_url"] = ensure_https(post_url)
        if description is not None:
            changes["description"] = description
        if status is not None:
            changes["status"] = _status(JobStatus, status, job_id)
        if not changes:
            return job
        logger.debug(f"Updated job application {job_id}: {sorted(changes)}")
        return self._replace(jobs, job.model_copy(update=changes))

    def remove_job(self, job_id: int) -> List[JobApplication]:
        jobs = self.list_jobs()
        self._find(jobs, job_id)
        remaining = [j for j in jobs if j.id != job_id]
        self.repository.save_jobs(remaining)
        logger.debug(f"Removed job application {job_id}")
        return remaining

    # ---- contacts ----

    def add_contact(self, job_id: int, name: str, linkedin: str = "") -> Contact:
        jobs = self.list_jobs()
        job = self._find(jobs, job_id)
        contact = Contact(
            id=_next_id(c.id for c in job.contacts),
            name=_required(name, "contact name", job_id),
            linkedin=ensure_https(linkedin),
            status=ContactStatus.NONE,
        )
        self._replace(jobs, job.model_copy(update={"contacts": job.contacts + [contact]}))
        return contact

    def update_contact_status(self, job_id: int, contact_id: int, status: ContactStatus) -> Contact:
        jobs = self.list_jobs()
        job = self._find(jobs, job_id)
        contact = job.find_contact(contact_id)
        if contact is None:
            raise ContactNotFoundError(job_id, contact_id)
        updated = contact.model_copy(update={"status": _status(ContactStatus, status, job_id)})
        contacts = [updated if c.id == contact_id else c for c in job.contacts]
        self._replace(jobs, job.model_copy(update={"contacts": contacts}))
        return updated

    def remove_contact(self, job_id: int, contact_id: int) -> JobApplication:
        jobs = self.list_jobs()
        job = self._find(jobs, job_id)
        if job.find_contact(contact_id) is None:
            raise ContactNotFoundError(job_id, contact_id)
        contacts = [c for c in job.contacts if c.id != contact_id]
        return self._replace(jobs, job.model_copy(update={"contacts": contacts}))
