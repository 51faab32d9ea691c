"""Resume generation pipeline.

Runs one generation attempt for a resume record as a sequence of persisted
statuses::

    started -> fetching profile -> generating tailored profile
            -> generating tailored resume -> [enhancing resume with AI]
            -> completed

Any error moves the record to ``failed`` with ``status_before_failure`` set
to the last status that was written. Every write is pinned to the attempt
the run started with, so a run superseded by a restart stops quietly.
"""

from __future__ import annotations

import logging

from jobpilot.constants.resume_constants import (
    CHUNK_COUNT_FLUSH_INTERVAL,
    DEFAULT_TEMPLATE,
    GenerationStatus,
    ImproveLineAction,
)
from jobpilot.services.job import get_job
from jobpilot.services.llm_providers import LLMError
from jobpilot.services.llm_service import LLMService
from jobpilot.services.profile import get_profile
from jobpilot.services.prompts import (
    IMPROVE_RESUME_LINE_RULES,
    RESUME_ENHANCEMENT_RULES,
    build_improve_resume_line_prompt,
    build_resume_enhancement_prompt,
)
from jobpilot.services.resume import (
    ResumeNotFoundError,
    StaleGenerationError,
    create_resume,
    find_resume_for_job,
    get_resume,
    patch_resume,
)
from jobpilot.services.resume_insights import generate_resume_insights
from jobpilot.services.tailoring import tailor_profile
from jobpilot.templates import get_template

logger = logging.getLogger(__name__)

__all__ = [
    "GenerationError",
    "LatexStreamSink",
    "ResumeGenerator",
    "improve_resume_line",
    "start_resume_generation",
]

UNEXPECTED_ERROR_MESSAGE = "Unexpected error while generating resume"


class GenerationError(RuntimeError):
    """A pipeline step could not proceed (missing profile, job, empty output)."""


class LatexStreamSink:
    """Accumulates streamed LaTeX and persists it as it grows.

    The full content is written after every delta so a reader polling the
    resume always sees the latest text. ``chunk_count`` is written every
    ``flush_every`` deltas and once more on :meth:`close`.
    """

    def __init__(
        self,
        resume_id: int,
        attempt: int,
        flush_every: int = CHUNK_COUNT_FLUSH_INTERVAL,
    ) -> None:
        self.resume_id = resume_id
        self.attempt = attempt
        self.flush_every = flush_every
        self.content = ""
        self.chunk_count = 0

    def write(self, delta: str) -> None:
        self.content += delta
        patch_resume(self.resume_id, attempt=self.attempt, latex_content=self.content)
        self.chunk_count += 1
        if self.chunk_count % self.flush_every == 0:
            patch_resume(self.resume_id, attempt=self.attempt, chunk_count=self.chunk_count)

    def close(self) -> None:
        if self.chunk_count % self.flush_every:
            patch_resume(self.resume_id, attempt=self.attempt, chunk_count=self.chunk_count)


def improve_resume_line(
    resume_id: int,
    user_id: str,
    line_number: int,
    latex_content: str,
    action: ImproveLineAction,
    llm_service: LLMService,
) -> str:
    """Rewrite one line of *latex_content* with AI and save it as it streams.

    The document with the partly rewritten line is saved after every delta.
    The line keeps its leading indentation. A blank line is left alone.

    Args:
        line_number: 1-based line to rewrite

    Returns:
        The resulting LaTeX document

    Raises:
        ResumeNotFoundError: If the resume does not exist for this user.
        ValueError: If *line_number* is outside the document.
    """
    action = ImproveLineAction(action)
    if get_resume(resume_id, user_id) is None:
        raise ResumeNotFoundError(f"Resume {resume_id} not found")

    lines = latex_content.split("\n")
    if not 1 <= line_number <= len(lines):
        raise ValueError(f"Line number {line_number} is out of range")

    line = lines[line_number - 1]
    if not line.strip():
        return latex_content

    before = lines[: line_number - 1]
    after = lines[line_number:]
    improved = line[: len(line) - len(line.lstrip())]
    document = latex_content

    stream = llm_service.stream_llm_response(
        system_instructions=IMPROVE_RESUME_LINE_RULES,
        user_content=build_improve_resume_line_prompt(line, action),
    )
    for delta in stream:
        improved += delta
        document = "\n".join([*before, improved, *after])
        patch_resume(resume_id, latex_content=document)

    logger.info("Improved line %d of resume %d (%s)", line_number, resume_id, action.value)
    return document


class ResumeGenerator:
    """Drives one resume record through the generation statuses.

    The LLM service is injected; when none is given one is built on first
    use, so runs without a job or enhancement prompt never need AI
    credentials.
    """

    def __init__(self, llm_service: LLMService | None = None) -> None:
        self._llm_service = llm_service

    @property
    def llm_service(self) -> LLMService:
        if self._llm_service is None:
            self._llm_service = LLMService()
        return self._llm_service

    def run(self, resume_id: int, user_id: str) -> str | None:
        """Run the pipeline for the resume's current attempt.

        Errors are recorded on the resume, never raised.

        Returns:
            The final LaTeX source, or None if the run failed or was superseded.
        """
        try:
            resume = get_resume(resume_id, user_id)
        except Exception as e:
            self._record_failure(resume_id, None, GenerationStatus.STARTED, e)
            return None
        if resume is None:
            logger.warning("Resume %d not found for %s; nothing to generate", resume_id, user_id)
            return None

        attempt = resume["generation_attempt"]
        status = GenerationStatus(resume["generation_status"])

        def advance(next_status: GenerationStatus) -> None:
            nonlocal status
            patch_resume(resume_id, attempt=attempt, generation_status=next_status)
            status = next_status

        try:
            advance(GenerationStatus.FETCHING_PROFILE)
            profile = get_profile(user_id)
            if profile is None:
                raise GenerationError("Profile not found")

            job_id = resume["job_id"]
            if job_id is not None:
                advance(GenerationStatus.GENERATING_TAILORED_PROFILE)
                job = get_job(job_id, user_id)
                if job is None:
                    raise GenerationError("Job not found")
                profile = tailor_profile(profile, job["description"], self.llm_service)
                patch_resume(
                    resume_id,
                    attempt=attempt,
                    tailored_profile=profile.model_dump(mode="json"),
                )

            advance(GenerationStatus.GENERATING_TAILORED_RESUME)
            template = get_template(resume["template_name"] or DEFAULT_TEMPLATE)
            latex_content = template.render(profile)
            patch_resume(resume_id, attempt=attempt, latex_content=latex_content)

            if resume["ai_enhancement_prompt"]:
                advance(GenerationStatus.ENHANCING_RESUME)
                latex_content = self._enhance_latex(
                    resume_id, attempt, latex_content, resume["ai_enhancement_prompt"]
                )

            advance(GenerationStatus.COMPLETED)

        except StaleGenerationError:
            logger.info("Resume %d attempt %d was superseded; abandoning run", resume_id, attempt)
            return None
        except ResumeNotFoundError:
            logger.info("Resume %d was deleted during generation", resume_id)
            return None
        except Exception as e:
            self._record_failure(resume_id, attempt, status, e)
            return None

        logger.info("Resume %d generated (attempt %d)", resume_id, attempt)
        if resume["job_id"] is not None:
            self._generate_insights(resume_id, user_id)
        return latex_content

    def _enhance_latex(
        self, resume_id: int, attempt: int, latex_content: str, instructions: str
    ) -> str:
        sink = LatexStreamSink(resume_id, attempt)
        stream = self.llm_service.stream_llm_response(
            system_instructions=RESUME_ENHANCEMENT_RULES,
            user_content=build_resume_enhancement_prompt(latex_content, instructions),
        )
        for delta in stream:
            sink.write(delta)
        sink.close()

        if not sink.content.strip():
            raise GenerationError("AI enhancement returned an empty document")
        return sink.content

    def _record_failure(
        self,
        resume_id: int,
        attempt: int | None,
        status: GenerationStatus,
        error: Exception,
    ) -> None:
        if isinstance(error, GenerationError | LLMError):
            message = str(error)
            logger.warning("Resume %d failed during %r: %s", resume_id, status.value, message)
        else:
            message = UNEXPECTED_ERROR_MESSAGE
            logger.exception("Resume %d failed during %r", resume_id, status.value)

        try:
            patch_resume(
                resume_id,
                attempt=attempt,
                generation_status=GenerationStatus.FAILED,
                status_before_failure=status,
                generation_error=message,
            )
        except (StaleGenerationError, ResumeNotFoundError):
            logger.info("Not recording failure for superseded resume %d", resume_id)
        except Exception:
            logger.exception("Could not record failure for resume %d", resume_id)

    def _generate_insights(self, resume_id: int, user_id: str) -> None:
        try:
            generate_resume_insights(resume_id, user_id, self.llm_service)
        except Exception:
            logger.exception("Failed to generate insights for resume %d", resume_id)


def start_resume_generation(
    user_id: str,
    job_id: int | None = None,
    template_name: str = DEFAULT_TEMPLATE,
    ai_enhancement_prompt: str | None = None,
) -> tuple[int, bool]:
    """Create a resume record for a generation run.

    A user has at most one resume per job; asking again returns the
    existing record.

    Returns:
        ``(resume_id, created)``; only a created record needs a run scheduled.
    """
    if job_id is not None:
        existing = find_resume_for_job(user_id, job_id)
        if existing is not None:
            return existing, False

    resume_id = create_resume(
        user_id,
        job_id=job_id,
        template_name=template_name,
        ai_enhancement_prompt=ai_enhancement_prompt,
    )
    logger.info("Started resume %d for %s (job=%s)", resume_id, user_id, job_id)
    return resume_id, True
