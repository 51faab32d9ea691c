"""Run a TeX engine over a LaTeX source string and return the PDF bytes.

Each call works in its own temporary directory, so concurrent compilations
share nothing and leave nothing behind.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "pdflatex"
DEFAULT_TIMEOUT = 60.0
DOCUMENT_NAME = "document"

# Lines of log context kept after each "! ..." error line
ERROR_CONTEXT_LINES = 2
LOG_TAIL_LINES = 25

_ERROR_LINE = re.compile(r"^! ")


class LatexError(Exception):
    """Base class for compilation failures."""


class LatexCompilationError(LatexError):
    """The document itself does not compile; ``details`` holds the TeX errors."""

    def __init__(self, details: str) -> None:
        super().__init__(details)
        self.details = details


class LatexTimeoutError(LatexError):
    """The engine did not finish within the configured timeout."""


class LatexServiceError(LatexError):
    """The toolchain is missing or misbehaved."""


def extract_log_errors(log_text: str) -> str:
    """Return the ``! ...`` error lines of a TeX log with a little context.

    Falls back to the tail of the log when no error line is found.
    """
    lines = log_text.splitlines()
    excerpt: list[str] = []
    for index, line in enumerate(lines):
        if _ERROR_LINE.match(line):
            excerpt.extend(lines[index : index + 1 + ERROR_CONTEXT_LINES])
    if not excerpt:
        excerpt = lines[-LOG_TAIL_LINES:]
    return "\n".join(excerpt).strip()


class LatexService:
    """Compiles LaTeX with a configurable engine.

    Args:
        command: Engine executable; defaults to ``LATEX_COMPILER_COMMAND`` or pdflatex
        timeout: Seconds before the engine is killed; defaults to ``LATEX_COMPILE_TIMEOUT``
    """

    def __init__(self, command: str | None = None, timeout: float | None = None) -> None:
        self.command = command or os.getenv("LATEX_COMPILER_COMMAND", DEFAULT_COMMAND)
        if timeout is None:
            timeout = float(os.getenv("LATEX_COMPILE_TIMEOUT", DEFAULT_TIMEOUT))
        self.timeout = timeout

    def _resolve_command(self) -> str:
        executable = shutil.which(self.command)
        if executable is None:
            raise LatexServiceError(f"LaTeX engine '{self.command}' not found on PATH")
        return executable

    def compile(self, latex_source: str) -> bytes:
        """Compile *latex_source* and return the PDF bytes.

        Raises:
            LatexCompilationError: The engine reported an error in the document.
            LatexTimeoutError: The engine ran longer than ``timeout``.
            LatexServiceError: The engine is missing or produced no PDF.
        """
        executable = self._resolve_command()

        with tempfile.TemporaryDirectory(prefix="jobpilot-latex-") as tmpdir:
            workdir = Path(tmpdir)
            tex_path = workdir / f"{DOCUMENT_NAME}.tex"
            tex_path.write_text(latex_source, encoding="utf-8")
            cmd = [
                executable,
                "-interaction=nonstopmode",
                "-halt-on-error",
                "-no-shell-escape",
                "-output-directory",
                tmpdir,
                tex_path.name,
            ]
            logger.debug("Running %s in %s", cmd, tmpdir)

            try:
                result = subprocess.run(
                    cmd,
                    cwd=tmpdir,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    text=True,
                    errors="replace",
                    timeout=self.timeout,
                    check=False,
                )
            except subprocess.TimeoutExpired as exc:
                raise LatexTimeoutError(
                    f"LaTeX compilation timed out after {self.timeout:g} seconds"
                ) from exc

            if result.returncode != 0:
                raise LatexCompilationError(self._error_details(workdir, result.stdout))

            pdf_path = workdir / f"{DOCUMENT_NAME}.pdf"
            if not pdf_path.exists():
                raise LatexServiceError("LaTeX compilation completed without producing a PDF")
            return pdf_path.read_bytes()

    @staticmethod
    def _error_details(workdir: Path, output: str | None) -> str:
        log_path = workdir / f"{DOCUMENT_NAME}.log"
        if log_path.exists():
            details = extract_log_errors(log_path.read_text(encoding="utf-8", errors="replace"))
            if details:
                return details
        tail = "\n".join((output or "").splitlines()[-LOG_TAIL_LINES:]).strip()
        return tail or "Unknown LaTeX compilation error"
