from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from pydantic import BaseModel

from jobpilot.data.db import init_db, reset_engine
from jobpilot.models.profile import Profile
from jobpilot.services.llm_providers import LLMProvider


@pytest.fixture
def api_db(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Use a temporary SQLite DB for API and persistence tests."""
    db_path = tmp_path / "api.db"
    monkeypatch.setenv("DB_URL", f"sqlite:///{db_path.as_posix()}")
    pdf_root = tmp_path / "pdfs"
    monkeypatch.setenv("JOBPILOT_PDF_DIR", pdf_root.as_posix())
    reset_engine()
    init_db()
    yield
    reset_engine()


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Automatically add api_db fixture to tests in API test files."""
    for item in items:
        # Check if test file name contains "api" (case-insensitive)
        test_file_path = Path(str(item.fspath))
        if "api" in test_file_path.stem.lower():
            # Automatically add the api_db fixture using usefixtures marker
            item.add_marker(pytest.mark.usefixtures("api_db"))


class ScriptedProvider(LLMProvider):
    """Provider that answers from canned responses and records every prompt."""

    def __init__(
        self,
        structured: list[BaseModel | Exception] | None = None,
        chunks: list[str] | Exception | None = None,
    ) -> None:
        self.structured = list(structured or [])
        self.chunks = chunks if chunks is not None else []
        self.prompts: list[str] = []
        self.configs: list[dict] = []

    def send_structured_prompt(self, prompt: str, schema, config: dict):
        self.prompts.append(prompt)
        self.configs.append(config)
        if not self.structured:
            raise AssertionError(f"Unexpected structured prompt for {schema.__name__}")
        answer = self.structured.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    def stream_prompt(self, prompt: str, config: dict) -> Iterator[str]:
        self.prompts.append(prompt)
        self.configs.append(config)
        if isinstance(self.chunks, Exception):
            raise self.chunks
        yield from self.chunks


@pytest.fixture
def sample_profile() -> Profile:
    return Profile.model_validate(
        {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "phone": "555-0100",
            "location": "Vancouver, BC",
            "social_links": [
                {"platform": "GitHub", "url": "https://github.com/janedoe"},
            ],
            "education": [
                {
                    "institution": "University of British Columbia",
                    "degree": "B.Sc.",
                    "field": "Computer Science",
                    "start_date": "2016-09",
                    "end_date": "2020-05",
                    "gpa": 3.8,
                    "location": "Kelowna, BC",
                }
            ],
            "work_experience": [
                {
                    "company": "Acme Corp",
                    "position": "Software Engineer",
                    "location": "Remote",
                    "start_date": "2020-06",
                    "end_date": "2022-08",
                    "description": ["Built billing APIs", "Cut deploy time by 50%"],
                    "technologies": ["Python", "PostgreSQL"],
                },
                {
                    "company": "Globex",
                    "position": "Senior Engineer",
                    "location": "Seattle, WA",
                    "start_date": "2022-09",
                    "current": True,
                    "description": ["Lead the data platform team"],
                    "technologies": ["Go", "Kafka"],
                },
            ],
            "projects": [
                {
                    "name": "Resume Bot",
                    "description": ["Generates resumes from a profile"],
                    "start_date": "2021-01",
                    "end_date": "2021-04",
                    "technologies": ["FastAPI", "LaTeX"],
                    "github_url": "https://github.com/janedoe/resume-bot",
                },
                {
                    "name": "Trail Map",
                    "description": ["Offline hiking maps"],
                    "technologies": ["Kotlin"],
                },
            ],
            "skills": ["Python", "Go", "SQL", "Kafka"],
        }
    )
