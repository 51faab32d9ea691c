"""Data models and type definitions"""

from jobpilot.models.profile import (
    EducationEntry,
    Profile,
    ProjectEntry,
    SocialLink,
    WorkExperienceEntry,
)

__all__ = [
    "EducationEntry",
    "Profile",
    "ProjectEntry",
    "SocialLink",
    "WorkExperienceEntry",
]
