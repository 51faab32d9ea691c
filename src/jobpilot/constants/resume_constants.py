"""
Constants for resume generation.
"""

from enum import Enum


class GenerationStatus(str, Enum):
    """Persisted status of a resume generation run."""

    STARTED = "started"
    FETCHING_PROFILE = "fetching profile"
    GENERATING_TAILORED_PROFILE = "generating tailored profile"
    GENERATING_TAILORED_RESUME = "generating tailored resume"
    ENHANCING_RESUME = "enhancing resume with AI"
    COMPLETED = "completed"
    FAILED = "failed"


# Forward progression of a run; FAILED is reachable from any non-terminal status.
GENERATION_ORDER: tuple[GenerationStatus, ...] = (
    GenerationStatus.STARTED,
    GenerationStatus.FETCHING_PROFILE,
    GenerationStatus.GENERATING_TAILORED_PROFILE,
    GenerationStatus.GENERATING_TAILORED_RESUME,
    GenerationStatus.ENHANCING_RESUME,
    GenerationStatus.COMPLETED,
)

STATUS_LABELS: dict[GenerationStatus, str] = {
    GenerationStatus.STARTED: "Generation Started",
    GenerationStatus.FETCHING_PROFILE: "Fetching Profile",
    GenerationStatus.GENERATING_TAILORED_PROFILE: "Generating Tailored Profile",
    GenerationStatus.GENERATING_TAILORED_RESUME: "Generating Tailored Resume",
    GenerationStatus.ENHANCING_RESUME: "Enhancing Resume with AI",
    GenerationStatus.COMPLETED: "Completed",
    GenerationStatus.FAILED: "Failed",
}

# Streamed deltas between two chunk_count writes.
CHUNK_COUNT_FLUSH_INTERVAL = 10

DEFAULT_TEMPLATE = "jake"


def status_rank(status: GenerationStatus | str) -> int:
    """Return the position of *status* in :data:`GENERATION_ORDER`.

    Raises:
        ValueError: For ``failed``, which has no position in the progression.
    """
    return GENERATION_ORDER.index(GenerationStatus(status))


class ImproveLineAction(str, Enum):
    """How the AI should rewrite a single line of resume LaTeX."""

    IMPROVE = "improve"
    SHORTEN = "shorten"
    LENGTHEN = "lengthen"
    QUANTIFY = "quantify"
