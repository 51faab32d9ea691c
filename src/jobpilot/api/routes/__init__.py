"""Route handlers for the API."""

from jobpilot.api.routes import health, jobs, profile, resumes

__all__ = [
    "health",
    "jobs",
    "profile",
    "resumes",
]
