import json
from datetime import date

import pytest

from fakes import FakeGeminiClient
from prepdeck.exceptions import CVAnalysisError
from prepdeck.schemas.profile import CVAnalysis
from prepdeck.services.cv_parser import (
    CVParser,
    analyze_cv,
    bucket_skills,
    convert_to_profile_format,
    heuristic_to_profile,
    parse_cv_heuristic,
)

SAMPLE_CV = "Jane Doe\nSenior Engineer\nContact: jane@x.com, 5 years experience, skilled in Python and Docker"

AI_PAYLOAD = {
    "name": "Jane Doe",
    "email": "jane@x.com",
    "phone": "+1 555 0100",
    "location": "Berlin",
    "current_role": "Senior Engineer",
    "experience_years": 5,
    "skills": {
        "technical": ["Python", "React", "Docker", "Go", "Terraform"],
        "soft": ["Mentoring"],
        "certifications": ["AWS Solutions Architect"],
    },
    "education": {"degree": "BSc Computer Science", "institution": "TU Berlin", "graduation_year": 2016},
    "experience": [
        {
            "company": "Acme",
            "role": "Engineer",
            "duration": "2019-2024",
            "achievements": ["Cut costs by 20%", "Led migration"],
        }
    ],
    "projects": ["Prepdeck: interview practice app"],
    "key_achievements": ["Shipped v1", "Hired 3 engineers", "Cut latency", "Won hackathon"],
}


def test_heuristic_extracts_basic_fields():
    parsed = parse_cv_heuristic(SAMPLE_CV)

    assert parsed.name == "Jane Doe"
    assert parsed.current_role == "Senior Engineer"
    assert parsed.email == "jane@x.com"
    assert parsed.experience == "5 years"
    assert "python" in parsed.skills
    assert "docker" in parsed.skills


def test_heuristic_leaves_missing_fields_unset():
    parsed = parse_cv_heuristic("Just a name")

    assert parsed.name == "Just a name"
    assert parsed.current_role is None
    assert parsed.email is None
    assert parsed.experience is None
    assert parsed.skills == []


def test_heuristic_handles_empty_text():
    parsed = parse_cv_heuristic("")
    assert parsed.name is None
    assert parsed.skills == []


def test_heuristic_to_profile():
    profile = heuristic_to_profile(parse_cv_heuristic(SAMPLE_CV), today=date(2025, 1, 2))

    assert profile.personal_info.name == "Jane Doe"
    assert profile.personal_info.email == "jane@x.com"
    assert profile.professional.current_role == "Senior Engineer"
    assert profile.professional.experience == "5 years"
    assert profile.skills.programming == ["python"]
    assert profile.skills.tools == ["docker"]
    assert profile.last_updated == "2025-01-02"


def test_analyze_cv_decodes_model_json():
    client = FakeGeminiClient(text=json.dumps(AI_PAYLOAD))
    result = analyze_cv(SAMPLE_CV, client)

    assert result.fallback_used is False
    assert result.analysis.name == "Jane Doe"
    assert result.analysis.skills.technical[0] == "Python"
    assert SAMPLE_CV in client.calls[0]["contents"]


def test_analyze_cv_accepts_fenced_json():
    client = FakeGeminiClient(text="```json\n" + json.dumps(AI_PAYLOAD) + "\n```")
    result = analyze_cv(SAMPLE_CV, client)
    assert result.fallback_used is False
    assert result.analysis.email == "jane@x.com"


@pytest.mark.parametrize("text", ["Sorry, I cannot help with that.", "", '{"skills": "python"}'])
def test_analyze_cv_falls_back_on_unusable_output(text):
    result = analyze_cv(SAMPLE_CV, FakeGeminiClient(text=text))

    assert result.fallback_used is True
    analysis = result.analysis
    assert analysis.skills.technical == []
    assert analysis.skills.soft == []
    assert analysis.skills.certifications == []
    assert analysis.name is None
    assert analysis.email is None
    assert analysis.experience_years is None
    assert analysis.education.degree is None
    assert analysis.experience == []


def test_analyze_cv_null_lists_are_empty():
    payload = dict(AI_PAYLOAD, projects=None, key_achievements=None)
    result = analyze_cv(SAMPLE_CV, FakeGeminiClient(text=json.dumps(payload)))
    assert result.fallback_used is False
    assert result.analysis.projects == []
    assert result.analysis.key_achievements == []


def test_analyze_cv_keeps_fields_around_mistyped_scalars():
    payload = {
        "name": "Jane Doe",
        "phone": 5550100,
        "skills": {"technical": ["Python"]},
        "education": {"degree": "BSc", "graduation_year": "2012-2016"},
        "experience_years": "5+",
    }
    result = analyze_cv(SAMPLE_CV, FakeGeminiClient(text=json.dumps(payload)))

    assert result.fallback_used is False
    assert result.analysis.name == "Jane Doe"
    assert result.analysis.phone == "5550100"
    assert result.analysis.skills.technical == ["Python"]
    assert result.analysis.education.graduation_year == 2016
    assert result.analysis.experience_years == 5

    profile = convert_to_profile_format(result.analysis, today=date(2025, 3, 4))
    assert profile.professional.experience == "5+ years"
    assert profile.education[0].year == "2016"


def test_analyze_cv_unreadable_scalars_become_none():
    payload = {"name": "Jane Doe", "experience_years": "several", "education": {"graduation_year": "soon"}}
    result = analyze_cv(SAMPLE_CV, FakeGeminiClient(text=json.dumps(payload)))

    assert result.fallback_used is False
    assert result.analysis.name == "Jane Doe"
    assert result.analysis.experience_years is None
    assert result.analysis.education.graduation_year is None


def test_analyze_cv_raises_on_upstream_failure():
    client = FakeGeminiClient(error=RuntimeError("500 INTERNAL"))
    with pytest.raises(CVAnalysisError):
        analyze_cv(SAMPLE_CV, client)
    assert len(client.calls) == 1


def test_analyze_cv_retries_rate_limits():
    class FlakyClient(FakeGeminiClient):
        def generate_content(self, model, contents, config=None):
            self.calls.append(contents)
            if len(self.calls) == 1:
                raise RuntimeError("429 RESOURCE_EXHAUSTED")
            return super().generate_content(model, contents, config)

    delays = []
    client = FlakyClient(text=json.dumps(AI_PAYLOAD))
    result = analyze_cv(SAMPLE_CV, client, sleep=delays.append)

    assert result.analysis.name == "Jane Doe"
    assert len(delays) == 1


def test_convert_to_profile_format():
    analysis = CVAnalysis.model_validate(AI_PAYLOAD)
    profile = convert_to_profile_format(analysis, today=date(2025, 3, 4))

    assert profile.personal_info.phone == "+1 555 0100"
    assert profile.professional.experience == "5+ years"
    assert profile.professional.summary == "Shipped v1. Hired 3 engineers. Cut latency"
    assert profile.professional.work_history[0].title == "Engineer"
    assert profile.professional.work_history[0].description == "Cut costs by 20%. Led migration"
    assert profile.education[0].year == "2016"
    assert profile.skills.programming == ["Python", "Go"]
    assert profile.skills.frameworks == ["React"]
    assert profile.skills.tools == ["Docker"]
    assert profile.skills.soft == ["Mentoring"]
    assert profile.projects[0].name == "Prepdeck"
    assert profile.certifications[0].name == "AWS Solutions Architect"
    assert profile.achievements == AI_PAYLOAD["key_achievements"]
    assert profile.last_updated == "2025-03-04"


def test_convert_empty_analysis():
    profile = convert_to_profile_format(CVAnalysis(), today=date(2025, 3, 4))

    assert profile.professional.experience is None
    assert profile.professional.summary is None
    assert profile.education == []
    assert profile.skills.technical == []
    assert profile.projects == []


def test_convert_object_projects():
    analysis = CVAnalysis(projects=[{"name": "Bot", "description": "Slack bot", "technologies": ["Python"]}])
    profile = convert_to_profile_format(analysis)
    assert profile.projects[0].name == "Bot"
    assert profile.projects[0].technologies == ["Python"]


def test_bucket_skills_short_keywords_match_whole_words():
    buckets = bucket_skills(["R", "React", "Go", "Django", "C#"])
    assert buckets["programming"] == ["R", "Go", "C#"]
    assert buckets["frameworks"] == ["React", "Django"]


def test_parser_selection():
    assert CVParser(client=None).name == "heuristic"

    ai = CVParser(client=FakeGeminiClient(text=json.dumps(AI_PAYLOAD)))
    profile, result = ai.parse(SAMPLE_CV)
    assert ai.name == "ai"
    assert result.fallback_used is False
    assert profile.personal_info.location == "Berlin"
