"""Resume service: persistence for resume generation records.

Every read and user-facing mutation is keyed by ``(resume_id, user_id)``.
Pipeline writes go through :func:`patch_resume`, which can be pinned to a
generation attempt so that a run superseded by a restart cannot overwrite
the new run's state.
"""

from __future__ import annotations

import json
import logging
from enum import Enum

from jobpilot.constants.resume_constants import DEFAULT_TEMPLATE, GenerationStatus
from jobpilot.data.db import get_session
from jobpilot.data.models import Resume
from jobpilot.services.pdf_storage import delete_resume_pdf

logger = logging.getLogger(__name__)

__all__ = [
    "ResumeNotFoundError",
    "StaleGenerationError",
    "create_resume",
    "delete_resume",
    "find_resume_for_job",
    "get_resume",
    "list_resumes",
    "patch_resume",
    "restart_resume",
]

# Fields the pipeline and API may patch on a Resume
_RESUME_FIELDS = (
    "generation_status",
    "status_before_failure",
    "generation_error",
    "latex_content",
    "chunk_count",
    "tailored_profile",
    "compiled_resume_path",
    "user_resume_compilation_error_message",
    "resume_insights",
)

# Fields stored as JSON strings
_JSON_FIELDS = frozenset({"tailored_profile", "resume_insights"})


class ResumeNotFoundError(LookupError):
    """Raised when a resume does not exist (or is not owned by the caller)."""


class StaleGenerationError(RuntimeError):
    """Raised when a write belongs to a generation attempt that was superseded."""


def _load_json(raw: str | None):
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Discarding malformed JSON column value")
        return None


def _resume_to_dict(resume: Resume) -> dict:
    """Convert a Resume model to a dictionary.

    Args:
        resume: Resume model instance

    Returns:
        Dictionary with resume data, JSON columns decoded
    """
    return {
        "id": resume.id,
        "user_id": resume.user_id,
        "job_id": resume.job_id,
        "template_name": resume.template_name,
        "ai_enhancement_prompt": resume.ai_enhancement_prompt,
        "latex_content": resume.latex_content,
        "tailored_profile": _load_json(resume.tailored_profile),
        "generation_status": resume.generation_status,
        "status_before_failure": resume.status_before_failure,
        "generation_error": resume.generation_error,
        "generation_attempt": resume.generation_attempt,
        "chunk_count": resume.chunk_count,
        "compiled_resume_path": resume.compiled_resume_path,
        "user_resume_compilation_error_message": resume.user_resume_compilation_error_message,
        "resume_insights": _load_json(resume.resume_insights),
        "created_at": resume.created_at,
        "updated_at": resume.updated_at,
    }


def _serialize_updates(fields: dict) -> dict:
    unknown = set(fields) - set(_RESUME_FIELDS)
    if unknown:
        raise ValueError(f"Cannot patch resume fields: {', '.join(sorted(unknown))}")

    values = {}
    for field, value in fields.items():
        if isinstance(value, Enum):
            value = value.value
        if field in _JSON_FIELDS and value is not None:
            value = json.dumps(value)
        values[field] = value
    return values


def create_resume(
    user_id: str,
    job_id: int | None = None,
    template_name: str = DEFAULT_TEMPLATE,
    ai_enhancement_prompt: str | None = None,
) -> int:
    """Create a resume record in the ``started`` status.

    Returns:
        The new resume ID
    """
    with get_session() as session:
        resume = Resume(
            user_id=user_id,
            job_id=job_id,
            template_name=template_name,
            ai_enhancement_prompt=ai_enhancement_prompt or None,
            generation_status=GenerationStatus.STARTED.value,
            latex_content="",
            chunk_count=0,
            generation_attempt=1,
        )
        session.add(resume)
        session.flush()
        return resume.id


def find_resume_for_job(user_id: str, job_id: int) -> int | None:
    """Return the ID of the user's existing resume for *job_id*, if any."""
    with get_session() as session:
        resume = (
            session.query(Resume)
            .filter(Resume.user_id == user_id, Resume.job_id == job_id)
            .order_by(Resume.id)
            .first()
        )
        return resume.id if resume else None


def get_resume(resume_id: int, user_id: str) -> dict | None:
    """Get a resume by ID, ensuring it belongs to the user.

    Returns:
        Dictionary with resume data, or None if not found
    """
    with get_session() as session:
        resume = (
            session.query(Resume)
            .filter(Resume.id == resume_id, Resume.user_id == user_id)
            .first()
        )
        return _resume_to_dict(resume) if resume else None


def list_resumes(user_id: str) -> list[dict]:
    """List all resumes for a user, most recently updated first."""
    with get_session() as session:
        resumes = (
            session.query(Resume)
            .filter(Resume.user_id == user_id)
            .order_by(Resume.updated_at.desc(), Resume.id.desc())
            .all()
        )
        return [_resume_to_dict(r) for r in resumes]


def patch_resume(resume_id: int, *, attempt: int | None = None, **fields) -> None:
    """Atomically update fields on a resume.

    Args:
        resume_id: Resume to update
        attempt: If given, the write only applies while the resume is still
            on this generation attempt
        **fields: Columns from ``_RESUME_FIELDS``; ``tailored_profile`` and
            ``resume_insights`` are JSON-encoded

    Raises:
        ValueError: If an unknown field is passed
        ResumeNotFoundError: If the resume no longer exists
        StaleGenerationError: If *attempt* no longer matches
    """
    values = _serialize_updates(fields)
    if not values:
        return

    with get_session() as session:
        query = session.query(Resume).filter(Resume.id == resume_id)
        if attempt is not None:
            query = query.filter(Resume.generation_attempt == attempt)
        updated = query.update(values, synchronize_session=False)
        if updated:
            return

        exists = session.query(Resume.id).filter(Resume.id == resume_id).first()

    if not exists:
        raise ResumeNotFoundError(f"Resume {resume_id} not found")
    raise StaleGenerationError(
        f"Resume {resume_id} is no longer on generation attempt {attempt}"
    )


def restart_resume(
    resume_id: int,
    user_id: str,
    ai_enhancement_prompt: str | None = None,
) -> int | None:
    """Reset a resume to ``started`` and open a new generation attempt.

    Clears error state, LaTeX, chunk count, tailored profile and the last
    compilation error. The enhancement prompt is replaced when one is given
    (an empty string removes it).

    Returns:
        The new generation attempt number, or None if the resume was not found
    """
    values = {
        Resume.generation_status: GenerationStatus.STARTED.value,
        Resume.generation_error: None,
        Resume.status_before_failure: None,
        Resume.latex_content: "",
        Resume.chunk_count: 0,
        Resume.tailored_profile: None,
        Resume.user_resume_compilation_error_message: None,
        Resume.generation_attempt: Resume.generation_attempt + 1,
    }
    if ai_enhancement_prompt is not None:
        values[Resume.ai_enhancement_prompt] = ai_enhancement_prompt or None

    with get_session() as session:
        updated = (
            session.query(Resume)
            .filter(Resume.id == resume_id, Resume.user_id == user_id)
            .update(values, synchronize_session=False)
        )
        if not updated:
            return None
        attempt = session.query(Resume.generation_attempt).filter(Resume.id == resume_id).scalar()

    logger.info("Restarted resume %d (attempt %d)", resume_id, attempt)
    return attempt


def delete_resume(resume_id: int, user_id: str) -> bool:
    """Delete a resume and its compiled PDF.

    Returns:
        True if deleted, False if not found
    """
    with get_session() as session:
        deleted = (
            session.query(Resume)
            .filter(Resume.id == resume_id, Resume.user_id == user_id)
            .delete(synchronize_session=False)
        )
    if not deleted:
        return False

    delete_resume_pdf(resume_id)
    return True
