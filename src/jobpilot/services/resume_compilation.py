"""Compile a resume's LaTeX through the LaTeX compilation service.

The main app never runs a TeX engine itself; it posts the source to the
service configured by ``LATEX_COMPILER_URL`` and stores the returned PDF.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import requests

from jobpilot.services.pdf_storage import store_resume_pdf
from jobpilot.services.resume import ResumeNotFoundError, get_resume, patch_resume

logger = logging.getLogger(__name__)

__all__ = [
    "CompilerClientError",
    "LatexCompilationFailed",
    "compile_and_save_resume",
    "compile_latex_remote",
]

DEFAULT_COMPILER_URL = "http://localhost:8080"
DEFAULT_REQUEST_TIMEOUT = 90


class CompilerClientError(RuntimeError):
    """The compilation service could not be reached or answered unexpectedly."""


class LatexCompilationFailed(CompilerClientError):
    """The service rejected the document; ``details`` holds the TeX error text."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.details = details

    @property
    def user_message(self) -> str:
        return self.details or str(self)


def _compiler_url() -> str:
    return os.getenv("LATEX_COMPILER_URL", DEFAULT_COMPILER_URL).rstrip("/")


def _error_from_response(response: requests.Response) -> tuple[str, str | None]:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or f"HTTP {response.status_code}", None
    if not isinstance(body, dict):
        return f"HTTP {response.status_code}", None
    return body.get("error") or f"HTTP {response.status_code}", body.get("details")


def compile_latex_remote(latex_source: str, timeout: float = DEFAULT_REQUEST_TIMEOUT) -> bytes:
    """POST *latex_source* to the compilation service and return the PDF bytes.

    Raises:
        LatexCompilationFailed: The service answered with a 4xx/5xx error body.
        CompilerClientError: The service was unreachable or returned no PDF.
    """
    url = f"{_compiler_url()}/latex/compile"
    params = {}
    api_key = os.getenv("LATEX_COMPILER_API_KEY")
    if api_key:
        params["key"] = api_key

    try:
        response = requests.post(
            url,
            params=params,
            data=latex_source.encode("utf-8"),
            headers={"Content-Type": "text/plain; charset=utf-8"},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise CompilerClientError(f"LaTeX compiler unreachable: {exc}") from exc

    if response.status_code != 200:
        error, details = _error_from_response(response)
        if response.status_code in (400, 500):
            raise LatexCompilationFailed(error, details)
        raise CompilerClientError(f"LaTeX compiler returned {response.status_code}: {error}")

    if not response.content.startswith(b"%PDF"):
        raise CompilerClientError("LaTeX compiler did not return a PDF")
    return response.content


def compile_and_save_resume(resume_id: int, user_id: str, latex_content: str) -> Path:
    """Save *latex_content* on the resume, compile it, and store the PDF.

    The LaTeX is saved before compiling so the user's edits survive a
    failed build. A compilation failure is recorded in
    ``user_resume_compilation_error_message``; the generation status is
    never touched.

    Raises:
        ResumeNotFoundError: If the resume does not exist for this user.
        LatexCompilationFailed: If the document does not compile.
        CompilerClientError: If the service could not be used.
    """
    if get_resume(resume_id, user_id) is None:
        raise ResumeNotFoundError(f"Resume {resume_id} not found")

    patch_resume(
        resume_id,
        latex_content=latex_content,
        user_resume_compilation_error_message=None,
    )

    try:
        pdf_bytes = compile_latex_remote(latex_content)
    except LatexCompilationFailed as exc:
        logger.warning("Resume %d failed to compile: %s", resume_id, exc)
        patch_resume(resume_id, user_resume_compilation_error_message=exc.user_message)
        raise
    except CompilerClientError as exc:
        logger.error("Could not compile resume %d: %s", resume_id, exc)
        patch_resume(resume_id, user_resume_compilation_error_message=str(exc))
        raise

    pdf_path = store_resume_pdf(resume_id, pdf_bytes)
    patch_resume(resume_id, compiled_resume_path=str(pdf_path))
    logger.info("Compiled resume %d (%d bytes)", resume_id, len(pdf_bytes))
    return pdf_path
