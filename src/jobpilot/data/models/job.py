"""JobRecord model for imported job postings."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jobpilot.data.db import Base


class JobRecord(Base):
    """A job posting a user wants to tailor resumes against.

    Attributes:
        id: Auto-incrementing primary key.
        user_id: Owning user identifier.
        title: Job title.
        company: Hiring company, if known.
        description: Full posting text used for tailoring.
        created_at: UTC timestamp when the job was imported.
    """

    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
