"""Shared dependencies for API routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Header, HTTPException, status


def get_current_user_id(
    x_user_id: Annotated[
        str | None,
        Header(
            description=(
                "Current user ID. In production, this should be extracted "
                "from authenticated session/JWT token."
            )
        ),
    ] = None,
) -> str:
    """Get the current user ID from request context.

    NOTE: This is a simplified implementation using a header.
    In production, this should extract from JWT/session.

    Args:
        x_user_id: User ID from X-User-Id header (temporary mechanism).

    Returns:
        str: Authenticated user ID.

    Raises:
        HTTPException: If authentication is missing (401).
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication. Please provide X-User-Id header.",
        )
    return x_user_id.strip()
