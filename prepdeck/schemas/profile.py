import re
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Any
from datetime import datetime

NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
YEAR_RE = re.compile(r"(?:19|20)\d{2}")


def _loose_text(value):
    # Model output sometimes puts numbers where strings were asked for
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _loose_number(value):
    """Read "5", "5+" or "about 5.5" as a number. Anything else becomes None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        match = NUMBER_RE.search(value)
        return float(match.group(0)) if match else None
    return None


def _loose_year(value):
    """Read 2016 or "2012-2016" (last year wins). Anything else becomes None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        years = YEAR_RE.findall(value)
        return int(years[-1]) if years else None
    return None


# Shape requested from the AI endpoint

class CVSkills(BaseModel):
    technical: list[str] = []
    soft: list[str] = []
    certifications: list[str] = []

    @field_validator("technical", "soft", "certifications", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value


class CVEducation(BaseModel):
    degree: Optional[str] = None
    institution: Optional[str] = None
    graduation_year: Optional[int] = None

    @field_validator("degree", "institution", mode="before")
    @classmethod
    def _text(cls, value):
        return _loose_text(value)

    @field_validator("graduation_year", mode="before")
    @classmethod
    def _year(cls, value):
        return _loose_year(value)


class CVExperience(BaseModel):
    company: str = ""
    role: str = ""
    duration: str = ""
    achievements: list[str] = []

    @field_validator("achievements", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value


class CVAnalysis(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    current_role: Optional[str] = None
    experience_years: Optional[float] = None
    skills: CVSkills = Field(default_factory=CVSkills)
    education: CVEducation = Field(default_factory=CVEducation)
    experience: list[CVExperience] = []
    projects: list[Any] = []  # plain strings or {name, description, technologies}
    key_achievements: list[str] = []

    @field_validator("name", "email", "phone", "location", "current_role", mode="before")
    @classmethod
    def _text(cls, value):
        return _loose_text(value)

    @field_validator("experience_years", mode="before")
    @classmethod
    def _years(cls, value):
        return _loose_number(value)

    @field_validator("experience", "projects", "key_achievements", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("skills", "education", mode="before")
    @classmethod
    def _none_as_default(cls, value):
        return {} if value is None else value


class HeuristicCV(BaseModel):
    name: Optional[str] = None
    current_role: Optional[str] = None
    email: Optional[str] = None
    experience: Optional[str] = None
    skills: list[str] = []


# Shape stored on the profile

class PersonalInfo(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    website: Optional[str] = None


class WorkHistoryEntry(BaseModel):
    title: str
    company: str
    duration: str
    description: Optional[str] = None


class Professional(BaseModel):
    current_role: Optional[str] = None
    experience: Optional[str] = None
    summary: Optional[str] = None
    work_history: list[WorkHistoryEntry] = []


class EducationEntry(BaseModel):
    degree: str
    institution: str
    year: Optional[str] = None
    description: Optional[str] = None


class SkillBuckets(BaseModel):
    technical: list[str] = []
    programming: list[str] = []
    frameworks: list[str] = []
    tools: list[str] = []
    soft: list[str] = []


class ProjectEntry(BaseModel):
    name: str
    description: str
    technologies: list[str] = []


class CertificationEntry(BaseModel):
    name: str
    issuer: Optional[str] = None
    year: Optional[str] = None


class LanguageEntry(BaseModel):
    language: str
    proficiency: Optional[str] = None


class ProfileParsedData(BaseModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    professional: Professional = Field(default_factory=Professional)
    education: list[EducationEntry] = []
    skills: SkillBuckets = Field(default_factory=SkillBuckets)
    projects: list[ProjectEntry] = []
    certifications: list[CertificationEntry] = []
    languages: list[LanguageEntry] = []
    achievements: list[str] = []
    last_updated: str


# Requests and responses

class CVAnalysisRequest(BaseModel):
    cv_text: Optional[str] = None
    user_id: Optional[int] = None


class CVAnalysisResponse(BaseModel):
    success: bool = True
    parser: str  # "ai" or "heuristic"
    fallback_used: bool = False
    parsed_data: ProfileParsedData
    ai_analysis: Optional[CVAnalysis] = None


class ResumeSaveRequest(BaseModel):
    content: str


class ResumeResponse(BaseModel):
    id: int
    content: str
    parsed_data: Optional[dict[str, Any]]
    fallback_used: bool
    updated_at: datetime

    class Config:
        from_attributes = True
