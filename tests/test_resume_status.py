from __future__ import annotations

import pytest

from jobpilot.constants import GENERATION_ORDER, GenerationStatus, status_rank
from jobpilot.services.resume_status import StageState, build_status_timeline


def _states(timeline) -> list[tuple[str, str]]:
    return [(stage.status.value, stage.state.value) for stage in timeline]


def test_started_run_with_job():
    timeline = build_status_timeline(GenerationStatus.STARTED)

    assert _states(timeline) == [
        ("started", "current"),
        ("fetching profile", "pending"),
        ("generating tailored profile", "pending"),
        ("generating tailored resume", "pending"),
        ("completed", "pending"),
    ]


def test_in_progress_marks_earlier_stages_done():
    timeline = build_status_timeline("generating tailored resume")

    assert [stage.state for stage in timeline] == [
        StageState.DONE,
        StageState.DONE,
        StageState.DONE,
        StageState.CURRENT,
        StageState.PENDING,
    ]


def test_optional_stages_follow_flags():
    timeline = build_status_timeline(
        "fetching profile", include_tailoring=False, include_enhancement=True
    )

    assert [stage.status for stage in timeline] == [
        GenerationStatus.STARTED,
        GenerationStatus.FETCHING_PROFILE,
        GenerationStatus.GENERATING_TAILORED_RESUME,
        GenerationStatus.ENHANCING_RESUME,
        GenerationStatus.COMPLETED,
    ]


def test_completed_marks_everything_done():
    timeline = build_status_timeline("completed", include_enhancement=True)

    assert all(stage.state is StageState.DONE for stage in timeline)
    assert timeline[-1].label == "Completed"


def test_failure_is_annotated_on_the_stage_reached():
    timeline = build_status_timeline("failed", "generating tailored profile")

    assert _states(timeline) == [
        ("started", "done"),
        ("fetching profile", "done"),
        ("generating tailored profile", "failed"),
        ("generating tailored resume", "pending"),
        ("completed", "pending"),
    ]
    assert timeline[2].label == "Generating Tailored Profile (Failed)"


def test_failure_without_known_stage_fails_first_stage():
    timeline = build_status_timeline("failed", None)

    assert timeline[0].state is StageState.FAILED
    assert timeline[0].label == "Generation Started (Failed)"


def test_canonical_stages_are_not_modified():
    build_status_timeline("failed", "fetching profile")

    fresh = build_status_timeline("started")
    assert all("(Failed)" not in stage.label for stage in fresh)


def test_status_rank_orders_statuses():
    assert [status_rank(s) for s in GENERATION_ORDER] == list(range(len(GENERATION_ORDER)))
    with pytest.raises(ValueError):
        status_rank(GenerationStatus.FAILED)


def test_unknown_status_is_rejected():
    with pytest.raises(ValueError):
        build_status_timeline("thinking")
