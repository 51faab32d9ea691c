"""Profile service for reading and storing a user's career profile.

The pipeline only reads profiles; ``upsert_profile`` exists for the REST API.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from jobpilot.data.db import get_session
from jobpilot.data.models import ProfileRecord
from jobpilot.models.profile import Profile

logger = logging.getLogger(__name__)

__all__ = [
    "delete_profile",
    "get_profile",
    "upsert_profile",
]


def get_profile(user_id: str) -> Profile | None:
    """Get the profile for a user.

    Args:
        user_id: Owning user identifier

    Returns:
        The validated :class:`Profile`, or None if the user has no profile
        or the stored document no longer validates.
    """
    with get_session() as session:
        record = session.query(ProfileRecord).filter(ProfileRecord.user_id == user_id).first()
        if not record:
            return None
        raw = record.data

    try:
        return Profile.model_validate_json(raw)
    except ValidationError:
        logger.exception("Stored profile for %s is invalid", user_id)
        return None


def upsert_profile(user_id: str, profile: Profile) -> Profile:
    """Create or replace the profile for a user.

    Args:
        user_id: Owning user identifier
        profile: Validated profile document

    Returns:
        The stored profile
    """
    payload = profile.model_dump_json()
    with get_session() as session:
        record = session.query(ProfileRecord).filter(ProfileRecord.user_id == user_id).first()
        if record:
            record.data = payload
        else:
            session.add(ProfileRecord(user_id=user_id, data=payload))
    return profile


def delete_profile(user_id: str) -> bool:
    """Delete the profile for a user.

    Returns:
        True if a profile was deleted, False if none existed
    """
    with get_session() as session:
        deleted = (
            session.query(ProfileRecord)
            .filter(ProfileRecord.user_id == user_id)
            .delete(synchronize_session=False)
        )
    return bool(deleted)
