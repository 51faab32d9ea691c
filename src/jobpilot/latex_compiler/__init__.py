"""Standalone LaTeX to PDF compilation service."""

from jobpilot.latex_compiler.service import (
    LatexCompilationError,
    LatexError,
    LatexService,
    LatexServiceError,
    LatexTimeoutError,
)

__all__ = [
    "LatexCompilationError",
    "LatexError",
    "LatexService",
    "LatexServiceError",
    "LatexTimeoutError",
]
