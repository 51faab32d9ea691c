"""Pydantic schemas for resume API endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from jobpilot.constants.resume_constants import DEFAULT_TEMPLATE, ImproveLineAction


class ResumeGenerateRequest(BaseModel):
    """Request schema for starting a resume generation run."""

    job_id: int | None = Field(None, description="Job to tailor the resume to")
    ai_enhancement_prompt: str | None = Field(
        None, description="Instructions for an AI rewrite of the rendered LaTeX"
    )
    template_name: str = Field(DEFAULT_TEMPLATE, description="LaTeX template identifier")


class ResumeGenerateResponse(BaseModel):
    """Response schema for a started (or already existing) resume."""

    resume_id: int
    created: bool = True


class ResumeRestartRequest(BaseModel):
    """Request schema for restarting generation.

    Omit ``ai_enhancement_prompt`` to keep the current one; send an empty
    string to remove it.
    """

    ai_enhancement_prompt: str | None = Field(None, description="Replacement enhancement prompt")


class ResumeLineImproveRequest(BaseModel):
    """Request schema for rewriting one line of a resume with AI."""

    latex_content: str = Field(..., description="The LaTeX document as currently edited")
    action: ImproveLineAction = Field(ImproveLineAction.IMPROVE, description="How to rewrite")


class ResumeInsightResponse(BaseModel):
    requirement: str
    match: Literal["match", "gap"]
    comments: str | None = None


class ResumeSummaryResponse(BaseModel):
    """Response schema for a resume in a list."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    job_id: int | None = None
    template_name: str
    generation_status: str
    status_before_failure: str | None = None
    generation_error: str | None = None
    created_at: datetime
    updated_at: datetime


class ResumeResponse(ResumeSummaryResponse):
    """Response schema for a single resume with its content."""

    ai_enhancement_prompt: str | None = None
    latex_content: str = ""
    tailored_profile: dict[str, Any] | None = None
    generation_attempt: int
    chunk_count: int = 0
    has_pdf: bool = False
    user_resume_compilation_error_message: str | None = None
    resume_insights: list[ResumeInsightResponse] | None = None


class TimelineStageResponse(BaseModel):
    status: str
    label: str
    state: Literal["pending", "current", "done", "failed"]
