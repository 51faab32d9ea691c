"""Job service for the postings resumes are tailored against."""

from __future__ import annotations

from typing import TypedDict

from jobpilot.data.db import get_session
from jobpilot.data.models import JobRecord, Resume

__all__ = [
    "JobData",
    "create_job",
    "delete_job",
    "get_job",
    "list_jobs",
]


class JobData(TypedDict, total=False):
    """TypedDict for job data."""

    title: str
    company: str | None
    description: str


def _job_to_dict(job: JobRecord) -> dict:
    return {
        "id": job.id,
        "user_id": job.user_id,
        "title": job.title,
        "company": job.company,
        "description": job.description,
        "created_at": job.created_at,
    }


def create_job(user_id: str, job_data: JobData) -> dict:
    """Store a job posting for a user and return it as a dict."""
    with get_session() as session:
        job = JobRecord(
            user_id=user_id,
            title=job_data["title"],
            company=job_data.get("company"),
            description=job_data["description"],
        )
        session.add(job)
        session.flush()
        return _job_to_dict(job)


def get_job(job_id: int, user_id: str) -> dict | None:
    """Get a job by ID, ensuring it belongs to the user."""
    with get_session() as session:
        job = (
            session.query(JobRecord)
            .filter(JobRecord.id == job_id, JobRecord.user_id == user_id)
            .first()
        )
        return _job_to_dict(job) if job else None


def list_jobs(user_id: str) -> list[dict]:
    """List a user's jobs, newest first."""
    with get_session() as session:
        jobs = (
            session.query(JobRecord)
            .filter(JobRecord.user_id == user_id)
            .order_by(JobRecord.created_at.desc(), JobRecord.id.desc())
            .all()
        )
        return [_job_to_dict(j) for j in jobs]


def delete_job(job_id: int, user_id: str) -> bool:
    """Delete a job. Returns False if it does not exist for this user.

    Resumes made for the job keep their content and lose the job link.
    """
    with get_session() as session:
        session.query(Resume).filter(
            Resume.job_id == job_id, Resume.user_id == user_id
        ).update({Resume.job_id: None}, synchronize_session=False)
        deleted = (
            session.query(JobRecord)
            .filter(JobRecord.id == job_id, JobRecord.user_id == user_id)
            .delete(synchronize_session=False)
        )
    return bool(deleted)
