"""Compilation routes."""

from __future__ import annotations

import logging
import os
import secrets
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from jobpilot.latex_compiler.service import (
    LatexCompilationError,
    LatexService,
    LatexServiceError,
    LatexTimeoutError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/latex", tags=["latex"])

MISSING_SOURCE_ERROR = "LaTeX code is required in the request body as plain text"
COMPILE_FAILED_ERROR = "Failed to compile LaTeX document"
TIMEOUT_ERROR = "LaTeX compilation timed out"
SERVICE_ERROR = "LaTeX compiler is unavailable"

# Largest accepted request body (50 MiB); LATEX_COMPILER_MAX_BODY_BYTES overrides it
DEFAULT_MAX_BODY_BYTES = 50 * 1024 * 1024


def get_latex_service() -> LatexService:
    """Return the compiler used by the routes (overridden in tests)."""
    return LatexService()


def _error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _max_body_bytes() -> int:
    return int(os.getenv("LATEX_COMPILER_MAX_BODY_BYTES", DEFAULT_MAX_BODY_BYTES))


async def _read_body(request: Request, limit: int) -> bytes | None:
    """Return the request body, or None once it grows past *limit* bytes."""
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        return None

    body = bytearray()
    async for chunk in request.stream():
        body += chunk
        if len(body) > limit:
            return None
    return bytes(body)


def _is_text_body(content_type: str | None) -> bool:
    return not content_type or content_type.split(";")[0].strip().startswith("text/")


@router.post(
    "/compile",
    responses={
        200: {"content": {"application/pdf": {}}},
        400: {"description": "Missing or oversized LaTeX source"},
        401: {"description": "Invalid API key"},
        500: {"description": "Compilation failed"},
    },
)
async def compile_latex(
    request: Request,
    service: Annotated[LatexService, Depends(get_latex_service)],
    key: Annotated[str | None, Query(description="Service API key")] = None,
) -> Response:
    """Compile a raw LaTeX request body into a PDF."""
    expected_key = os.getenv("LATEX_COMPILER_API_KEY")
    if expected_key and not secrets.compare_digest(key or "", expected_key):
        return _error(status.HTTP_401_UNAUTHORIZED, "Invalid API key")

    if not _is_text_body(request.headers.get("content-type")):
        return _error(status.HTTP_400_BAD_REQUEST, MISSING_SOURCE_ERROR)

    limit = _max_body_bytes()
    body = await _read_body(request, limit)
    if body is None:
        return _error(
            status.HTTP_400_BAD_REQUEST, f"LaTeX document exceeds the {limit} byte size limit"
        )
    latex_source = body.decode("utf-8", errors="replace")
    if not latex_source.strip():
        return _error(status.HTTP_400_BAD_REQUEST, MISSING_SOURCE_ERROR)

    try:
        pdf_bytes = await run_in_threadpool(service.compile, latex_source)
    except LatexCompilationError as e:
        logger.warning("LaTeX compilation failed: %.200s", e.details)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, COMPILE_FAILED_ERROR, e.details)
    except LatexTimeoutError as e:
        logger.warning("LaTeX compilation timed out: %s", e)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, TIMEOUT_ERROR, str(e))
    except LatexServiceError as e:
        logger.error("LaTeX toolchain error: %s", e)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVICE_ERROR, str(e))

    logger.info("Compiled LaTeX document (%d bytes in, %d bytes out)", len(body), len(pdf_bytes))
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": "attachment; filename=document.pdf"},
    )
