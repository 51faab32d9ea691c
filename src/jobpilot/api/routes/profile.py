"""Profile routes for the API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from jobpilot.api.dependencies import get_current_user_id
from jobpilot.models.profile import Profile
from jobpilot.services.profile import delete_profile, get_profile, upsert_profile

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=Profile)
def get_own_profile(
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> Profile:
    """Get the caller's career profile."""
    profile = get_profile(user_id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return profile


@router.put("", response_model=Profile)
def put_own_profile(
    data: Profile,
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> Profile:
    """Create or replace the caller's career profile."""
    return upsert_profile(user_id, data)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_own_profile(
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> None:
    """Delete the caller's career profile."""
    if not delete_profile(user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
