"""Pydantic schemas for job endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class JobCreateRequest(BaseModel):
    """Request schema for storing a job posting."""

    title: str = Field(..., min_length=1, description="Job title")
    company: str | None = Field(None, description="Hiring company")
    description: str = Field(..., min_length=1, description="Full job description text")


class JobResponse(BaseModel):
    """Response schema for a stored job posting."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    company: str | None = None
    description: str
    created_at: datetime
