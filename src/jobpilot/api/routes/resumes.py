"""Resume routes for the API."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, status
from fastapi import Path as PathParam
from fastapi.responses import FileResponse

from jobpilot.api.dependencies import get_current_user_id
from jobpilot.api.schemas.resumes import (
    ResumeGenerateRequest,
    ResumeGenerateResponse,
    ResumeInsightResponse,
    ResumeLineImproveRequest,
    ResumeResponse,
    ResumeRestartRequest,
    ResumeSummaryResponse,
    TimelineStageResponse,
)
from jobpilot.services.job import get_job
from jobpilot.services.llm_providers import LLMError
from jobpilot.services.llm_service import LLMService
from jobpilot.services.pdf_storage import get_resume_pdf_path
from jobpilot.services.resume import delete_resume, get_resume, list_resumes, restart_resume
from jobpilot.services.resume_compilation import (
    CompilerClientError,
    LatexCompilationFailed,
    compile_and_save_resume,
)
from jobpilot.services.resume_generation import (
    ResumeGenerator,
    improve_resume_line,
    start_resume_generation,
)
from jobpilot.services.resume_insights import generate_resume_insights
from jobpilot.services.resume_status import build_status_timeline
from jobpilot.templates import get_template, list_templates

router = APIRouter(prefix="/resumes", tags=["resumes"])


def get_resume_generator() -> ResumeGenerator:
    """Return the generator used for background runs (overridden in tests)."""
    return ResumeGenerator()


def get_llm_service() -> LLMService:
    """Return an LLM service for on-demand AI calls (overridden in tests)."""
    try:
        return LLMService()
    except LLMError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"AI provider is not configured: {e}",
        ) from None


def _get_owned_resume(resume_id: int, user_id: str) -> dict:
    """Return the resume or raise 404."""
    resume = get_resume(resume_id, user_id)
    if resume is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Resume {resume_id} not found",
        )
    return resume


def _to_response(resume: dict) -> ResumeResponse:
    return ResumeResponse(
        **resume,
        has_pdf=bool(resume["compiled_resume_path"])
        and get_resume_pdf_path(resume["id"]).exists(),
    )


@router.post(
    "/generate",
    response_model=ResumeGenerateResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def generate_resume_endpoint(
    data: ResumeGenerateRequest,
    background_tasks: BackgroundTasks,
    user_id: Annotated[str, Depends(get_current_user_id)],
    generator: Annotated[ResumeGenerator, Depends(get_resume_generator)],
) -> ResumeGenerateResponse:
    """Start generating a resume and return its ID immediately.

    Poll ``GET /resumes/{resume_id}`` for progress. A resume already made
    for the same job is returned instead of starting a new one.
    """
    try:
        get_template(data.template_name)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None

    if data.job_id is not None and get_job(data.job_id, user_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Job {data.job_id} not found",
        )

    resume_id, created = start_resume_generation(
        user_id,
        job_id=data.job_id,
        template_name=data.template_name,
        ai_enhancement_prompt=data.ai_enhancement_prompt,
    )
    if created:
        background_tasks.add_task(generator.run, resume_id, user_id)
    return ResumeGenerateResponse(resume_id=resume_id, created=created)


@router.get("/templates", response_model=list[str])
def list_templates_endpoint() -> list[str]:
    """List the available LaTeX template names."""
    return list_templates()


@router.get("", response_model=list[ResumeSummaryResponse])
def list_resumes_endpoint(
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> list[ResumeSummaryResponse]:
    """List the caller's resumes, most recently updated first."""
    return [ResumeSummaryResponse(**r) for r in list_resumes(user_id)]


@router.get("/{resume_id}", response_model=ResumeResponse)
def get_resume_endpoint(
    resume_id: Annotated[int, PathParam(description="Resume ID")],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> ResumeResponse:
    """Get a resume with its generation status and LaTeX content."""
    return _to_response(_get_owned_resume(resume_id, user_id))


@router.post(
    "/{resume_id}/restart",
    response_model=ResumeResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def restart_resume_endpoint(
    resume_id: Annotated[int, PathParam(description="Resume ID")],
    background_tasks: BackgroundTasks,
    user_id: Annotated[str, Depends(get_current_user_id)],
    generator: Annotated[ResumeGenerator, Depends(get_resume_generator)],
    data: ResumeRestartRequest | None = None,
) -> ResumeResponse:
    """Reset a resume and run generation again from the start."""
    prompt = data.ai_enhancement_prompt if data else None
    if restart_resume(resume_id, user_id, ai_enhancement_prompt=prompt) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Resume {resume_id} not found",
        )

    response = _to_response(_get_owned_resume(resume_id, user_id))
    background_tasks.add_task(generator.run, resume_id, user_id)
    return response


@router.delete("/{resume_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resume_endpoint(
    resume_id: Annotated[int, PathParam(description="Resume ID")],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> None:
    """Delete a resume and its compiled PDF."""
    if not delete_resume(resume_id, user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Resume {resume_id} not found",
        )


@router.get("/{resume_id}/timeline", response_model=list[TimelineStageResponse])
def get_resume_timeline(
    resume_id: Annotated[int, PathParam(description="Resume ID")],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> list[TimelineStageResponse]:
    """Get the generation progress as an ordered list of stages."""
    resume = _get_owned_resume(resume_id, user_id)
    stages = build_status_timeline(
        resume["generation_status"],
        resume["status_before_failure"],
        include_tailoring=resume["job_id"] is not None,
        include_enhancement=bool(resume["ai_enhancement_prompt"]),
    )
    return [
        TimelineStageResponse(
            status=stage.status.value, label=stage.label, state=stage.state.value
        )
        for stage in stages
    ]


@router.post(
    "/{resume_id}/compile",
    response_model=ResumeResponse,
    responses={
        422: {"description": "The LaTeX does not compile"},
        502: {"description": "The compilation service is unavailable"},
    },
)
def compile_resume_endpoint(
    resume_id: Annotated[int, PathParam(description="Resume ID")],
    latex_content: Annotated[str, Body(media_type="text/plain")],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> ResumeResponse:
    """Save edited LaTeX on the resume and compile it to PDF."""
    _get_owned_resume(resume_id, user_id)
    if not latex_content.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="LaTeX content is required",
        )

    try:
        compile_and_save_resume(resume_id, user_id, latex_content)
    except LatexCompilationFailed as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.user_message,
        ) from None
    except CompilerClientError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from None

    return _to_response(_get_owned_resume(resume_id, user_id))


@router.get(
    "/{resume_id}/pdf",
    responses={200: {"content": {"application/pdf": {}}}},
)
def download_resume_pdf(
    resume_id: Annotated[int, PathParam(description="Resume ID")],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> FileResponse:
    """Download the last successfully compiled PDF."""
    resume = _get_owned_resume(resume_id, user_id)
    pdf_path = Path(resume["compiled_resume_path"]) if resume["compiled_resume_path"] else None
    if pdf_path is None or not pdf_path.exists():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Resume {resume_id} has not been compiled",
        )
    return FileResponse(
        path=str(pdf_path),
        media_type="application/pdf",
        filename=f"resume_{resume_id}.pdf",
    )


@router.get("/{resume_id}/insights", response_model=list[ResumeInsightResponse])
def get_resume_insights(
    resume_id: Annotated[int, PathParam(description="Resume ID")],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> list[ResumeInsightResponse]:
    """Get how the resume covers its job's requirements (empty until generated)."""
    resume = _get_owned_resume(resume_id, user_id)
    return [ResumeInsightResponse(**i) for i in resume["resume_insights"] or []]


@router.post("/{resume_id}/insights", response_model=list[ResumeInsightResponse])
def regenerate_resume_insights(
    resume_id: Annotated[int, PathParam(description="Resume ID")],
    user_id: Annotated[str, Depends(get_current_user_id)],
    llm_service: Annotated[LLMService, Depends(get_llm_service)],
) -> list[ResumeInsightResponse]:
    """Generate the resume's insights again from its current LaTeX."""
    _get_owned_resume(resume_id, user_id)
    try:
        insights = generate_resume_insights(resume_id, user_id, llm_service)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    except LLMError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"AI provider error: {e}",
        ) from None
    return [ResumeInsightResponse(**i) for i in insights]


@router.post("/{resume_id}/lines/{line_number}/improve", response_model=ResumeResponse)
def improve_resume_line_endpoint(
    resume_id: Annotated[int, PathParam(description="Resume ID")],
    line_number: Annotated[int, PathParam(description="1-based line in latex_content")],
    data: ResumeLineImproveRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    llm_service: Annotated[LLMService, Depends(get_llm_service)],
) -> ResumeResponse:
    """Rewrite one line of the resume's LaTeX with AI and save the result.

    A blank line is returned unchanged without calling the model.
    """
    _get_owned_resume(resume_id, user_id)
    try:
        improve_resume_line(
            resume_id, user_id, line_number, data.latex_content, data.action, llm_service
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    except LLMError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"AI provider error: {e}",
        ) from None
    return _to_response(_get_owned_resume(resume_id, user_id))
