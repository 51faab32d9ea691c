"""Job posting routes for the API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status

from jobpilot.api.dependencies import get_current_user_id
from jobpilot.api.schemas.jobs import JobCreateRequest, JobResponse
from jobpilot.services.job import create_job, delete_job, get_job, list_jobs

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def create_job_endpoint(
    data: JobCreateRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> JobResponse:
    """Store a job posting to tailor resumes against."""
    result = create_job(user_id, data.model_dump())
    return JobResponse(**result)


@router.get("", response_model=list[JobResponse])
def list_jobs_endpoint(
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> list[JobResponse]:
    """List the caller's job postings, newest first."""
    return [JobResponse(**j) for j in list_jobs(user_id)]


@router.get("/{job_id}", response_model=JobResponse)
def get_job_endpoint(
    job_id: Annotated[int, Path(description="Job ID")],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> JobResponse:
    """Get a job posting by ID."""
    result = get_job(job_id, user_id)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Job {job_id} not found",
        )
    return JobResponse(**result)


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_job_endpoint(
    job_id: Annotated[int, Path(description="Job ID")],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> None:
    """Delete a job posting. Resumes made for it keep their content."""
    if not delete_job(job_id, user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Job {job_id} not found",
        )
