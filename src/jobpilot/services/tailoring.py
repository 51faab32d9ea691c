"""Job tailoring of a career profile.

The model proposes a subset/rewording of the profile; ``clean_tailored_profile``
then drops anything that cannot be matched back to the source profile, so
the result only ever contains verified entries.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from jobpilot.models.profile import Profile
from jobpilot.services.llm_providers import NoStructuredOutput
from jobpilot.services.prompts import TAILORED_PROFILE_RULES, build_tailored_profile_prompt
from jobpilot.utils.dates import parse_profile_date

if TYPE_CHECKING:
    from jobpilot.models.profile import EducationEntry, WorkExperienceEntry
    from jobpilot.services.llm_service import LLMService

logger = logging.getLogger(__name__)

__all__ = [
    "clean_tailored_profile",
    "tailor_profile",
]


def _work_key(entry: WorkExperienceEntry) -> tuple[str, str, str, str | None]:
    return (entry.company, entry.position, entry.start_date, entry.end_date)


def _education_key(entry: EducationEntry) -> tuple[str, str, str | None]:
    return (entry.institution, entry.degree, entry.end_date)


def _start_date_sort_key(entry: WorkExperienceEntry) -> date:
    # Unparseable dates sort after every real date.
    return parse_profile_date(entry.start_date) or date.min


def clean_tailored_profile(tailored: Profile, source: Profile) -> Profile:
    """Restrict *tailored* to entries that exist in *source*.

    - Work experience must match on (company, position, start_date, end_date);
      survivors take ``current`` from the source entry and are sorted by
      start date, newest first.
    - Education must match on (institution, degree, end_date).
    - Projects must match on name.
    - Skills must appear in the source (case-insensitive).
    - Contact details are always taken from *source*.

    Returns:
        A new :class:`Profile`; neither argument is modified.
    """
    source_work = {_work_key(w): w for w in source.work_experience}
    work = [
        w.model_copy(update={"current": source_work[_work_key(w)].current})
        for w in tailored.work_experience
        if _work_key(w) in source_work
    ]
    work.sort(key=_start_date_sort_key, reverse=True)

    source_education = {_education_key(e) for e in source.education}
    education = [e for e in tailored.education if _education_key(e) in source_education]

    source_projects = {p.name for p in source.projects}
    projects = [p for p in tailored.projects if p.name in source_projects]

    source_skills = {s.casefold() for s in source.skills}
    skills = [s for s in tailored.skills if s.casefold() in source_skills]

    dropped = (
        len(tailored.work_experience) - len(work),
        len(tailored.education) - len(education),
        len(tailored.projects) - len(projects),
        len(tailored.skills) - len(skills),
    )
    if any(dropped):
        logger.warning(
            "Dropped unverified tailored entries "
            "(work=%d, education=%d, projects=%d, skills=%d)",
            *dropped,
        )

    return tailored.model_copy(
        update={
            "name": source.name,
            "email": source.email,
            "phone": source.phone,
            "location": source.location,
            "profile_picture_url": source.profile_picture_url,
            "social_links": [link.model_copy() for link in source.social_links],
            "work_experience": work,
            "education": education,
            "projects": projects,
            "skills": skills,
        }
    )


def tailor_profile(profile: Profile, job_description: str, llm_service: LLMService) -> Profile:
    """Tailor *profile* to *job_description* with the injected *llm_service*.

    Raises:
        NoStructuredOutput: If the model cannot produce a profile-shaped answer.
        LLMError: If the model call fails.
    """
    user_content = build_tailored_profile_prompt(profile, job_description, Profile)
    try:
        candidate = llm_service.generate_structured_response(
            system_instructions=TAILORED_PROFILE_RULES,
            user_content=user_content,
            schema=Profile,
        )
    except NoStructuredOutput as e:
        logger.error("No tailored profile generated; raw response: %.500s", e.text or "")
        raise

    return clean_tailored_profile(candidate, profile)
