"""Services"""

from jobpilot.services.job import create_job, delete_job, get_job, list_jobs
from jobpilot.services.profile import delete_profile, get_profile, upsert_profile
from jobpilot.services.resume import (
    create_resume,
    delete_resume,
    get_resume,
    list_resumes,
    patch_resume,
    restart_resume,
)

__all__ = [
    "create_job",
    "delete_job",
    "get_job",
    "list_jobs",
    "delete_profile",
    "get_profile",
    "upsert_profile",
    "create_resume",
    "delete_resume",
    "get_resume",
    "list_resumes",
    "patch_resume",
    "restart_resume",
]
