"""Resume insights: how a generated resume covers a job's requirements."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field

from jobpilot.services.job import get_job
from jobpilot.services.prompts import RESUME_INSIGHTS_RULES, build_resume_insights_prompt
from jobpilot.services.resume import ResumeNotFoundError, get_resume, patch_resume

if TYPE_CHECKING:
    from jobpilot.services.llm_service import LLMService

logger = logging.getLogger(__name__)

__all__ = [
    "ResumeInsight",
    "ResumeInsights",
    "generate_resume_insights",
]


class ResumeInsight(BaseModel):
    requirement: str
    match: Literal["match", "gap"]
    comments: str | None = None


class ResumeInsights(BaseModel):
    insights: list[ResumeInsight] = Field(default_factory=list)


def generate_resume_insights(resume_id: int, user_id: str, llm_service: LLMService) -> list[dict]:
    """Compare a resume's LaTeX with its job description and store the result.

    Raises:
        ResumeNotFoundError: If the resume does not exist for this user.
        ValueError: If the resume has no job or the job is gone.
        LLMError: If the model call fails.
    """
    resume = get_resume(resume_id, user_id)
    if resume is None:
        raise ResumeNotFoundError(f"Resume {resume_id} not found")
    if resume["job_id"] is None:
        raise ValueError("Resume has no job")
    job = get_job(resume["job_id"], user_id)
    if job is None:
        raise ValueError("Job not found")

    result = llm_service.generate_structured_response(
        system_instructions=RESUME_INSIGHTS_RULES,
        user_content=build_resume_insights_prompt(resume["latex_content"], job["description"]),
        schema=ResumeInsights,
    )
    insights = [insight.model_dump() for insight in result.insights]
    patch_resume(resume_id, resume_insights=insights)
    logger.info("Stored %d insights for resume %d", len(insights), resume_id)
    return insights
