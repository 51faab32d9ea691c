"""Display mapping for resume generation progress.

The canonical stage list is immutable; failure is annotated by
:func:`build_status_timeline` from ``(generation_status, status_before_failure)``
instead of by editing the stages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from jobpilot.constants.resume_constants import (
    GENERATION_ORDER,
    STATUS_LABELS,
    GenerationStatus,
)

__all__ = [
    "StageState",
    "TimelineStage",
    "build_status_timeline",
]


class StageState(str, Enum):
    PENDING = "pending"
    CURRENT = "current"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class TimelineStage:
    status: GenerationStatus
    label: str
    state: StageState


def _visible_stages(
    include_tailoring: bool, include_enhancement: bool
) -> tuple[GenerationStatus, ...]:
    skipped = set()
    if not include_tailoring:
        skipped.add(GenerationStatus.GENERATING_TAILORED_PROFILE)
    if not include_enhancement:
        skipped.add(GenerationStatus.ENHANCING_RESUME)
    return tuple(s for s in GENERATION_ORDER if s not in skipped)


def build_status_timeline(
    generation_status: GenerationStatus | str,
    status_before_failure: GenerationStatus | str | None = None,
    *,
    include_tailoring: bool = True,
    include_enhancement: bool = False,
) -> list[TimelineStage]:
    """Return the stages of a run with their display state.

    Stages before the current one are ``done``. For a failed run the stage
    named by *status_before_failure* is ``failed`` and labelled
    ``"<label> (Failed)"``; if that status is unknown the first stage is
    marked failed. ``completed`` marks every stage done.

    Args:
        generation_status: Current persisted status.
        status_before_failure: Last status reached before a failure.
        include_tailoring: Whether the run tailors against a job.
        include_enhancement: Whether the run streams an AI enhancement.
    """
    stages = _visible_stages(include_tailoring, include_enhancement)
    status = GenerationStatus(generation_status)

    failed_at: GenerationStatus | None = None
    if status is GenerationStatus.FAILED:
        failed_at = GenerationStatus(status_before_failure or GenerationStatus.STARTED)
        if failed_at not in stages:
            failed_at = stages[0]
        current_index = stages.index(failed_at)
    elif status in stages:
        current_index = stages.index(status)
    else:
        # A status hidden by the flags: fall back to the last visible stage before it.
        rank = GENERATION_ORDER.index(status)
        current_index = max(i for i, s in enumerate(stages) if GENERATION_ORDER.index(s) <= rank)

    timeline: list[TimelineStage] = []
    for index, stage in enumerate(stages):
        label = STATUS_LABELS[stage]
        if index < current_index or status is GenerationStatus.COMPLETED:
            state = StageState.DONE
        elif index == current_index and failed_at is not None:
            state = StageState.FAILED
            label = f"{label} (Failed)"
        elif index == current_index:
            state = StageState.CURRENT
        else:
            state = StageState.PENDING
        timeline.append(TimelineStage(status=stage, label=label, state=state))
    return timeline
