"""ORM models package for database tables.

This package provides SQLAlchemy ORM models representing database tables:
- ProfileRecord: A user's career profile stored as a JSON document
- JobRecord: Imported job postings used for tailoring
- Resume: Resume generation records and their status

All models inherit from the shared Base declarative class defined in data.db.
"""

from jobpilot.data.db import Base
from jobpilot.data.models.job import JobRecord
from jobpilot.data.models.profile import ProfileRecord
from jobpilot.data.models.resume import Resume

__all__ = ["Base", "JobRecord", "ProfileRecord", "Resume"]
