"""Helpers for storing and retrieving compiled resume PDFs."""

from __future__ import annotations

import os
from pathlib import Path


def get_pdf_storage_root() -> Path:
    """Return the root directory for compiled resume PDFs."""
    env_root = os.getenv("JOBPILOT_PDF_DIR")
    if env_root:
        return Path(env_root).expanduser().resolve()

    project_root = Path(__file__).resolve().parents[3]
    return project_root / ".jobpilot_pdfs"


def get_resume_pdf_path(resume_id: int) -> Path:
    """Return the expected path for a resume's compiled PDF."""
    return get_pdf_storage_root() / f"resume_{resume_id}.pdf"


def store_resume_pdf(resume_id: int, pdf_bytes: bytes) -> Path:
    """Persist compiled PDF bytes, replacing any earlier compilation."""
    target_path = get_resume_pdf_path(resume_id)
    target_path.parent.mkdir(parents=True, exist_ok=True)
    target_path.write_bytes(pdf_bytes)
    return target_path


def delete_resume_pdf(resume_id: int) -> None:
    """Remove a stored PDF if there is one."""
    get_resume_pdf_path(resume_id).unlink(missing_ok=True)
