"""ProfileRecord model for storing a user's career profile.

The profile is kept as a single JSON document validated by
:class:`jobpilot.models.profile.Profile`. It has exactly one row per user.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jobpilot.data.db import Base


class ProfileRecord(Base):
    """Stored career profile.

    Attributes:
        id: Auto-incrementing primary key.
        user_id: Owning user identifier (unique).
        data: JSON document matching the ``Profile`` schema.
        updated_at: UTC timestamp when the record was last updated.
    """

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(128), unique=True, nullable=False, index=True)
    data: Mapped[str] = mapped_column(Text, nullable=False)  # JSON object

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
