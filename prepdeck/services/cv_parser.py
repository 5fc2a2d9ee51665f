"""CV text to structured profile fields, via Gemini or a local heuristic."""

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from google.genai import types
from pydantic import ValidationError

from prepdeck.config import GEMINI_MODEL, CV_ANALYSIS_MAX_TOKENS, CV_ANALYSIS_TEMPERATURE
from prepdeck.exceptions import CVAnalysisError
from prepdeck.schemas.profile import (
    CVAnalysis,
    HeuristicCV,
    ProfileParsedData,
    PersonalInfo,
    Professional,
    WorkHistoryEntry,
    EducationEntry,
    SkillBuckets,
    ProjectEntry,
    CertificationEntry,
)
from prepdeck.services.llm import call_gemini_with_retry, extract_first_json_object, get_gemini_client

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
EXPERIENCE_RE = re.compile(r"(\d+)\+?\s*years?(?:\s+of)?\s+experience", re.IGNORECASE)

HEURISTIC_SKILLS = [
    "javascript", "typescript", "python", "java", "c++", "c#", "ruby", "php",
    "rust", "kotlin", "swift", "scala", "sql", "html", "css",
    "react", "angular", "vue", "node.js", "django", "flask", "fastapi", "spring",
    "tensorflow", "pytorch",
    "docker", "kubernetes", "aws", "azure", "gcp", "git", "linux",
    "postgresql", "mysql", "mongodb", "redis",
]

PROGRAMMING_KEYWORDS = [
    "javascript", "python", "java", "typescript", "c++", "c#", "php", "ruby", "go",
    "rust", "swift", "kotlin", "scala", "r", "matlab", "sql", "html", "css",
]
FRAMEWORK_KEYWORDS = [
    "react", "angular", "vue", "svelte", "nextjs", "nuxt", "express", "nestjs",
    "django", "flask", "spring", "laravel", "rails", "asp.net", "tensorflow", "pytorch",
]
TOOL_KEYWORDS = [
    "docker", "kubernetes", "aws", "azure", "gcp", "jenkins", "gitlab", "github",
    "git", "mongodb", "postgresql", "mysql", "redis", "elasticsearch",
]

SYSTEM_INSTRUCTION = (
    "You are an expert CV parser and career analyst. Analyze the CV and extract structured "
    "information. Return ONLY valid JSON without any markdown formatting or additional text."
)

CV_SCHEMA_PROMPT = """Analyze this CV and return structured data in this exact JSON format:
{
  "name": "string",
  "email": "string",
  "phone": "string",
  "location": "string",
  "current_role": "string",
  "experience_years": number,
  "skills": {
    "technical": ["array of technical skills"],
    "soft": ["array of soft skills"],
    "certifications": ["array of certifications"]
  },
  "education": {
    "degree": "string",
    "institution": "string",
    "graduation_year": number
  },
  "experience": [
    {
      "company": "string",
      "role": "string",
      "duration": "string",
      "achievements": ["array of key achievements"]
    }
  ],
  "projects": ["array of notable projects"],
  "key_achievements": ["array of major accomplishments"]
}

CV Text:
"""


@dataclass
class CVAnalysisResult:
    analysis: CVAnalysis
    fallback_used: bool = False
    raw_text: Optional[str] = None


def parse_cv_heuristic(text: str) -> HeuristicCV:
    """Best-effort extraction without a model. Missing fields stay unset."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    result = HeuristicCV()

    if lines:
        result.name = lines[0]
    if len(lines) > 1:
        result.current_role = lines[1]

    email_match = EMAIL_RE.search(text)
    if email_match:
        result.email = email_match.group(0)

    lowered = text.lower()
    result.skills = [skill for skill in HEURISTIC_SKILLS if skill in lowered]

    experience_match = EXPERIENCE_RE.search(text)
    if experience_match:
        result.experience = f"{experience_match.group(1)} years"

    return result


def _matches_keyword(skill: str, keyword: str) -> bool:
    # Single and two letter names ("r", "go") only count as whole words
    lowered = skill.lower()
    if len(keyword) <= 2:
        return keyword in re.split(r"[^a-z0-9+#.]+", lowered)
    return keyword in lowered


def bucket_skills(technical: list[str]) -> dict[str, list[str]]:
    """Split technical skills into programming, framework and tool lists."""
    return {
        "programming": [s for s in technical if any(_matches_keyword(s, k) for k in PROGRAMMING_KEYWORDS)],
        "frameworks": [s for s in technical if any(_matches_keyword(s, k) for k in FRAMEWORK_KEYWORDS)],
        "tools": [s for s in technical if any(_matches_keyword(s, k) for k in TOOL_KEYWORDS)],
    }


def _format_years(years: Optional[float]) -> Optional[str]:
    if not years:
        return None
    return f"{years:g}+ years"


def _convert_projects(projects: list) -> list[ProjectEntry]:
    converted = []
    for project in projects:
        if isinstance(project, str):
            converted.append(ProjectEntry(name=project.split(":")[0].strip() or project, description=project))
        elif isinstance(project, dict):
            name = project.get("name") or project.get("description") or ""
            converted.append(ProjectEntry(
                name=str(name),
                description=str(project.get("description") or name),
                technologies=[str(t) for t in project.get("technologies") or []],
            ))
    return converted


def convert_to_profile_format(analysis: CVAnalysis, today: Optional[date] = None) -> ProfileParsedData:
    """Reshape the AI analysis into the profile schema."""
    today = today or date.today()
    technical = analysis.skills.technical

    education = []
    if analysis.education.degree or analysis.education.institution:
        education.append(EducationEntry(
            degree=analysis.education.degree or "Degree",
            institution=analysis.education.institution or "Institution",
            year=str(analysis.education.graduation_year) if analysis.education.graduation_year else None,
            description="",
        ))

    return ProfileParsedData(
        personal_info=PersonalInfo(
            name=analysis.name,
            email=analysis.email,
            phone=analysis.phone,
            location=analysis.location,
        ),
        professional=Professional(
            current_role=analysis.current_role,
            experience=_format_years(analysis.experience_years),
            summary=". ".join(analysis.key_achievements[:3]) or None,
            work_history=[
                WorkHistoryEntry(
                    title=exp.role,
                    company=exp.company,
                    duration=exp.duration,
                    description=". ".join(exp.achievements),
                )
                for exp in analysis.experience
            ],
        ),
        education=education,
        skills=SkillBuckets(technical=technical, soft=analysis.skills.soft, **bucket_skills(technical)),
        projects=_convert_projects(analysis.projects),
        certifications=[CertificationEntry(name=cert) for cert in analysis.skills.certifications],
        languages=[],
        achievements=analysis.key_achievements,
        last_updated=today.isoformat(),
    )


def heuristic_to_profile(parsed: HeuristicCV, today: Optional[date] = None) -> ProfileParsedData:
    today = today or date.today()
    return ProfileParsedData(
        personal_info=PersonalInfo(name=parsed.name, email=parsed.email),
        professional=Professional(current_role=parsed.current_role, experience=parsed.experience),
        skills=SkillBuckets(technical=parsed.skills, **bucket_skills(parsed.skills)),
        last_updated=today.isoformat(),
    )


def analyze_cv(cv_text: str, client, model: str = GEMINI_MODEL, sleep=None) -> CVAnalysisResult:
    """
    Send CV text to Gemini and decode its JSON answer.

    Upstream failures raise CVAnalysisError. Output that is not a JSON object
    matching the schema is replaced by an empty CVAnalysis and reported through
    ``fallback_used`` rather than raised.
    """
    config = types.GenerateContentConfig(
        system_instruction=SYSTEM_INSTRUCTION,
        max_output_tokens=CV_ANALYSIS_MAX_TOKENS,
        temperature=CV_ANALYSIS_TEMPERATURE,
        response_mime_type="application/json",
    )
    retry_kwargs = {"sleep": sleep} if sleep else {}

    try:
        response = call_gemini_with_retry(
            client=client,
            model=model,
            contents=CV_SCHEMA_PROMPT + cv_text,
            config=config,
            **retry_kwargs,
        )
    except Exception as e:
        print(f"[CV] Gemini request failed: {e}")
        raise CVAnalysisError("Failed to analyze CV") from e

    raw_text = getattr(response, "text", None) or ""
    try:
        payload = extract_first_json_object(raw_text)
        analysis = CVAnalysis.model_validate(payload)
    except (ValueError, ValidationError) as e:
        print(f"[CV] Failed to parse CV analysis JSON: {e}")
        print(f"[CV] Raw response: {raw_text[:200]}")
        return CVAnalysisResult(analysis=CVAnalysis(), fallback_used=True, raw_text=raw_text)

    return CVAnalysisResult(analysis=analysis, raw_text=raw_text)


class CVParser:
    """Selects the AI parser when a Gemini client is available, else the heuristic one."""

    def __init__(self, client=None):
        self.client = client

    @property
    def name(self) -> str:
        return "ai" if self.client is not None else "heuristic"

    def parse(self, cv_text: str, today: Optional[date] = None) -> tuple[ProfileParsedData, Optional[CVAnalysisResult]]:
        if self.client is None:
            return heuristic_to_profile(parse_cv_heuristic(cv_text), today), None
        result = analyze_cv(cv_text, self.client)
        return convert_to_profile_format(result.analysis, today), result


def get_cv_parser() -> CVParser:
    """Dependency that provides the CV parser for this deployment."""
    return CVParser(get_gemini_client())
