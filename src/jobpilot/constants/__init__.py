from __future__ import annotations

from jobpilot.constants.resume_constants import (
    CHUNK_COUNT_FLUSH_INTERVAL,
    DEFAULT_TEMPLATE,
    GENERATION_ORDER,
    STATUS_LABELS,
    GenerationStatus,
    ImproveLineAction,
    status_rank,
)

__all__ = [
    "CHUNK_COUNT_FLUSH_INTERVAL",
    "DEFAULT_TEMPLATE",
    "GENERATION_ORDER",
    "STATUS_LABELS",
    "GenerationStatus",
    "ImproveLineAction",
    "status_rank",
]
