"""Career profile data model.

These pydantic models are the single shape shared by the profile store,
the AI tailoring contract (structured output) and the template renderer.
Dates are kept as the strings the user entered (``YYYY-MM`` usually) so the
tailoring filter can compare them verbatim with the source profile.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

__all__ = [
    "EducationEntry",
    "Profile",
    "ProjectEntry",
    "SocialLink",
    "WorkExperienceEntry",
]


class SocialLink(BaseModel):
    """A platform/URL pair shown in the resume heading."""

    platform: str
    url: str


class EducationEntry(BaseModel):
    institution: str
    degree: str
    field: str | None = None
    start_date: str
    end_date: str | None = None
    gpa: float | None = Field(default=None, ge=0, le=4)
    description: str | None = None
    location: str | None = None


class WorkExperienceEntry(BaseModel):
    """A position held at a company.

    ``current`` implies there is no end date; a current entry that arrives
    with an end date has it cleared. An entry with neither is treated as
    having an unknown end and renders with its start date only.
    """

    company: str
    position: str
    location: str | None = None
    start_date: str
    end_date: str | None = None
    current: bool = False
    description: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _clear_end_date_when_current(self) -> WorkExperienceEntry:
        if self.current and self.end_date is not None:
            self.end_date = None
        return self


class ProjectEntry(BaseModel):
    name: str
    description: list[str] = Field(default_factory=list)
    start_date: str | None = None
    end_date: str | None = None
    technologies: list[str] = Field(default_factory=list)
    link: str | None = None
    github_url: str | None = None
    highlights: list[str] = Field(default_factory=list)


class Profile(BaseModel):
    """A user's structured career history."""

    name: str
    email: str
    phone: str | None = None
    location: str | None = None
    profile_picture_url: str | None = None
    social_links: list[SocialLink] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    work_experience: list[WorkExperienceEntry] = Field(default_factory=list)
    projects: list[ProjectEntry] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
