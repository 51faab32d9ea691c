"""Prompt builders for the resume pipeline.

Each builder takes typed inputs and returns the text sent to the model.
The behavioural contract lives in the output schemas and in the local
post-filters; the wording here only steers the model towards it.
"""

from __future__ import annotations

import json

from pydantic import BaseModel

from jobpilot.constants.resume_constants import ImproveLineAction
from jobpilot.models.profile import Profile

__all__ = [
    "IMPROVE_RESUME_LINE_RULES",
    "RESUME_ENHANCEMENT_RULES",
    "RESUME_INSIGHTS_RULES",
    "TAILORED_PROFILE_RULES",
    "build_improve_resume_line_prompt",
    "build_resume_enhancement_prompt",
    "build_resume_insights_prompt",
    "build_tailored_profile_prompt",
]

TAILORED_PROFILE_RULES = (
    "You are a resume writer. You are given a career profile and a job description. "
    "Select the skills and experiences from the profile that are most relevant to the job. "
    "You may reword work-experience and project bullets to match the job description, but you "
    "must not change the facts of an experience: company, position, dates, institution, degree "
    "and project names stay exactly as given. "
    "If you include a work or project entry you must keep all of its details. "
    "You may leave out entries that do not match the job; usually 3-4 work entries and 2-3 "
    "projects fit on one page. "
    "You cannot add new skills, entries or facts that are not in the profile. "
    "If an entry is current it has no end date; if it has an end date it is not current."
)

RESUME_ENHANCEMENT_RULES = (
    "You are a LaTeX expert specializing in resume enhancement. "
    "You are given a LaTeX resume and user instructions on how to enhance it. "
    "Apply the instructions and output the complete enhanced LaTeX document only. "
    "Do not wrap the answer in code fences and do not add any other text."
)

RESUME_INSIGHTS_RULES = (
    "You are a recruiter reviewing a resume against a job description. "
    "List the key requirements of the job. For each one say whether the resume shows a "
    "'match' or a 'gap', with a one-sentence comment. Judge only from the resume text."
)

IMPROVE_RESUME_LINE_RULES = (
    "You are a resume writer editing one line of a LaTeX resume. "
    "Rewrite only the text content of the line and keep every LaTeX command, brace and "
    "escape it contains. Do not invent facts that are not in the line. "
    "Output the rewritten line only, on a single line, without leading indentation, "
    "code fences or any other text."
)

_IMPROVE_LINE_INSTRUCTIONS: dict[ImproveLineAction, str] = {
    ImproveLineAction.IMPROVE: "Make the line clearer and more impactful.",
    ImproveLineAction.SHORTEN: "Make the line more concise while keeping its key point.",
    ImproveLineAction.LENGTHEN: "Expand the line with more detail about scope and outcome.",
    ImproveLineAction.QUANTIFY: "Emphasise measurable results already implied by the line.",
}


def build_tailored_profile_prompt(
    profile: Profile,
    job_description: str,
    output_schema: type[BaseModel] = Profile,
) -> str:
    """Return the user content for the tailoring call."""
    return (
        "The profile is:\n"
        f"{profile.model_dump_json(exclude_none=True)}\n\n"
        "The job description is:\n"
        "###\n"
        f"{job_description}\n"
        "###\n\n"
        "Answer with a JSON object that follows this schema:\n"
        f"{json.dumps(output_schema.model_json_schema())}"
    )


def build_resume_enhancement_prompt(latex_content: str, instructions: str) -> str:
    """Return the user content for the streamed LaTeX enhancement call."""
    return (
        "The resume is given as a LaTeX string below.\n"
        f"{latex_content}\n\n"
        "Enhance the resume based on these instructions:\n"
        f"{instructions}"
    )


def build_resume_insights_prompt(latex_content: str, job_description: str) -> str:
    """Return the user content for the resume insights call."""
    return (
        "The resume (LaTeX source) is:\n"
        f"{latex_content}\n\n"
        "The job description is:\n"
        "###\n"
        f"{job_description}\n"
        "###"
    )


def build_improve_resume_line_prompt(line: str, action: ImproveLineAction) -> str:
    """Return the user content for rewriting a single resume line."""
    return (
        f"{_IMPROVE_LINE_INSTRUCTIONS[ImproveLineAction(action)]}\n\n"
        "The line is:\n"
        f"{line.strip()}"
    )
