from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jobpilot.constants.resume_constants import GenerationStatus
from jobpilot.data.db import Base


class Resume(Base):
    """
    A single resume generation record.

    The orchestrator mutates this row in place while a generation run
    advances through its statuses. ``generation_attempt`` is bumped on every
    start/restart so writes from a superseded run can be rejected.
    """

    __tablename__ = "resumes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    job_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("jobs.id", ondelete="SET NULL"), nullable=True, index=True
    )
    template_name: Mapped[str] = mapped_column(String(64), nullable=False, default="jake")
    ai_enhancement_prompt: Mapped[str | None] = mapped_column(Text, nullable=True)

    latex_content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    tailored_profile: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON object

    generation_status: Mapped[str] = mapped_column(
        String(64), nullable=False, default=GenerationStatus.STARTED.value
    )
    status_before_failure: Mapped[str | None] = mapped_column(String(64), nullable=True)
    generation_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    generation_attempt: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    chunk_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    compiled_resume_path: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    user_resume_compilation_error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    resume_insights: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON array

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
