from __future__ import annotations

import pytest
from conftest import ScriptedProvider

from jobpilot.models.profile import Profile
from jobpilot.services.llm_providers import NoStructuredOutput
from jobpilot.services.llm_service import LLMService
from jobpilot.services.tailoring import clean_tailored_profile, tailor_profile


def _tailored(source: Profile, **updates) -> Profile:
    return source.model_copy(deep=True, update=updates)


def test_verified_entries_survive_with_reworded_bullets(sample_profile):
    acme = sample_profile.work_experience[0].model_copy(
        update={"description": ["Designed billing APIs used by 2M customers"]}
    )
    tailored = _tailored(sample_profile, work_experience=[acme])

    cleaned = clean_tailored_profile(tailored, sample_profile)

    assert len(cleaned.work_experience) == 1
    assert cleaned.work_experience[0].description == [
        "Designed billing APIs used by 2M customers"
    ]


def test_fabricated_work_entry_is_dropped(sample_profile):
    fake = sample_profile.work_experience[0].model_copy(update={"company": "Initech"})
    tailored = _tailored(sample_profile, work_experience=[fake, *sample_profile.work_experience])

    cleaned = clean_tailored_profile(tailored, sample_profile)

    assert {w.company for w in cleaned.work_experience} == {"Acme Corp", "Globex"}


def test_work_entry_with_changed_dates_is_dropped(sample_profile):
    shifted = sample_profile.work_experience[0].model_copy(update={"start_date": "2019-06"})
    tailored = _tailored(sample_profile, work_experience=[shifted])

    assert clean_tailored_profile(tailored, sample_profile).work_experience == []


def test_work_sorted_newest_first(sample_profile):
    tailored = _tailored(sample_profile)

    cleaned = clean_tailored_profile(tailored, sample_profile)

    assert [w.company for w in cleaned.work_experience] == ["Globex", "Acme Corp"]


def test_current_flag_comes_from_source(sample_profile):
    globex = sample_profile.work_experience[1].model_copy(update={"current": False})
    tailored = _tailored(sample_profile, work_experience=[globex])

    cleaned = clean_tailored_profile(tailored, sample_profile)

    assert cleaned.work_experience[0].current is True


def test_education_projects_and_skills_are_filtered(sample_profile):
    education = sample_profile.education[0].model_copy(update={"end_date": "2021-05"})
    extra_project = sample_profile.projects[0].model_copy(update={"name": "Moon Base"})
    tailored = _tailored(
        sample_profile,
        education=[education],
        projects=[sample_profile.projects[1], extra_project],
        skills=["python", "Rust", "Kafka"],
    )

    cleaned = clean_tailored_profile(tailored, sample_profile)

    assert cleaned.education == []
    assert [p.name for p in cleaned.projects] == ["Trail Map"]
    assert cleaned.skills == ["python", "Kafka"]


def test_contact_details_restored_from_source(sample_profile):
    tailored = _tailored(
        sample_profile, name="J. Doe", email="other@example.com", social_links=[]
    )

    cleaned = clean_tailored_profile(tailored, sample_profile)

    assert cleaned.name == "Jane Doe"
    assert cleaned.email == "jane@example.com"
    assert [link.platform for link in cleaned.social_links] == ["GitHub"]


def test_result_is_subset_of_source(sample_profile):
    tailored = Profile(
        name="Someone",
        email="x@example.com",
        work_experience=[
            {"company": "Nowhere", "position": "CTO", "start_date": "2010-01"},
        ],
        projects=[{"name": "Invented"}],
        skills=["Telepathy"],
    )

    cleaned = clean_tailored_profile(tailored, sample_profile)

    assert cleaned.work_experience == []
    assert cleaned.projects == []
    assert cleaned.skills == []


def test_inputs_are_not_modified(sample_profile):
    before = sample_profile.model_dump()
    tailored = _tailored(sample_profile, skills=["Rust"])
    tailored_before = tailored.model_dump()

    clean_tailored_profile(tailored, sample_profile)

    assert sample_profile.model_dump() == before
    assert tailored.model_dump() == tailored_before


def test_tailor_profile_sends_job_and_cleans_answer(sample_profile):
    answer = _tailored(sample_profile, skills=["Go", "Haskell"])
    provider = ScriptedProvider(structured=[answer])

    result = tailor_profile(sample_profile, "Backend Go engineer", LLMService(provider=provider))

    assert result.skills == ["Go"]
    assert "###\nBackend Go engineer\n###" in provider.prompts[0]
    assert '"name":"Jane Doe"' in provider.prompts[0]


def test_tailor_profile_propagates_missing_structured_output(sample_profile):
    provider = ScriptedProvider(structured=[NoStructuredOutput("no profile", text="oops")])

    with pytest.raises(NoStructuredOutput):
        tailor_profile(sample_profile, "Any job", LLMService(provider=provider))
