"""Core data models: candidate profiles, requirement specs, and match results.

All models are frozen. A profile or requirement is built once per request and
never mutated afterwards.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ALLOWED_SENIORITY = ("junior", "mid", "senior", "lead")

MIN_EXPERIENCE_YEARS = 1
MAX_EXPERIENCE_YEARS = 15


def dedupe_casefold(values: list[str]) -> list[str]:
    """Drop blank and case-insensitive duplicate strings, keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        stripped = value.strip()
        key = stripped.lower()
        if not stripped or key in seen:
            continue
        seen.add(key)
        result.append(stripped)
    return result


class Identity(BaseModel):
    """Public identity record of a code-hosting account."""

    model_config = ConfigDict(frozen=True)

    id: int
    login: str
    name: str | None = None
    avatar_url: str = ""
    bio: str | None = None
    location: str | None = None
    html_url: str = ""
    public_repos: int = 0
    followers: int = 0
    created_at: datetime | None = None


class RepositorySummary(BaseModel):
    """One repository as listed for a candidate."""

    model_config = ConfigDict(frozen=True)

    name: str
    full_name: str = ""
    owner: str = ""
    description: str | None = None
    language: str | None = None
    stars: int = Field(default=0, ge=0)
    forks: int = Field(default=0, ge=0)
    pushed_at: datetime | None = None
    html_url: str = ""


class CandidateProfile(BaseModel):
    """Normalized summary of one developer's public activity."""

    model_config = ConfigDict(frozen=True)

    identity: Identity
    repositories: tuple[RepositorySummary, ...] = ()
    languages: dict[str, int] = Field(default_factory=dict)
    total_stars: int = Field(default=0, ge=0)
    total_forks: int = Field(default=0, ge=0)
    top_languages: tuple[str, ...] = ()
    experience_years: int = Field(ge=MIN_EXPERIENCE_YEARS, le=MAX_EXPERIENCE_YEARS)
    recent_activity: bool = False
    skills: tuple[str, ...] = ()
    readme: str | None = None
    warnings: tuple[str, ...] = ()

    @property
    def handle(self) -> str:
        return self.identity.login

    @field_validator("languages")
    @classmethod
    def byte_counts_non_negative(cls, v: dict[str, int]) -> dict[str, int]:
        negative = [lang for lang, count in v.items() if count < 0]
        if negative:
            msg = f"language byte counts must be non-negative: {negative}"
            raise ValueError(msg)
        return v

    @field_validator("skills")
    @classmethod
    def skills_lowercase_unique(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        lowered = tuple(s.lower() for s in v)
        if len(set(lowered)) != len(lowered):
            msg = "skills must not contain case-insensitive duplicates"
            raise ValueError(msg)
        return lowered


class RequirementSpec(BaseModel):
    """Structured hiring criteria interpreted from free text."""

    model_config = ConfigDict(frozen=True)

    skills: list[str] = Field(default_factory=list)
    experience_level: str
    technologies: list[str] = Field(default_factory=list)
    domain: str = ""
    summary: str = ""

    @field_validator("skills", "technologies")
    @classmethod
    def dedupe(cls, v: list[str]) -> list[str]:
        return dedupe_casefold(v)

    @field_validator("experience_level")
    @classmethod
    def level_in_allowed(cls, v: str) -> str:
        level = v.lower().strip()
        if level not in ALLOWED_SENIORITY:
            msg = f"experience_level must be one of {list(ALLOWED_SENIORITY)}, got '{v}'"
            raise ValueError(msg)
        return level


class DocumentExtraction(BaseModel):
    """Structured content of a job-description document."""

    model_config = ConfigDict(frozen=True)

    skills: list[str] = Field(default_factory=list)
    requirements: list[str] = Field(default_factory=list)
    company_info: str = ""
    role_type: str = ""
    summary: str = ""

    @field_validator("skills")
    @classmethod
    def dedupe(cls, v: list[str]) -> list[str]:
        return dedupe_casefold(v)


class DocumentText(BaseModel):
    """Text pulled out of an uploaded document by a text extractor."""

    model_config = ConfigDict(frozen=True)

    text: str
    confidence: float = Field(ge=0.0, le=1.0)
    processing_time_ms: float = Field(ge=0.0)


class MatchResult(BaseModel):
    """Compatibility of one candidate with one requirement spec."""

    model_config = ConfigDict(frozen=True)

    handle: str
    score: float = Field(ge=0.0, le=100.0, allow_inf_nan=False)
    reasoning: str = ""
    strengths: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    source: Literal["reasoning", "fallback"] = "fallback"


class ProfileBatch(BaseModel):
    """Profiles built for a search, plus the reason each failed handle was skipped."""

    model_config = ConfigDict(frozen=True)

    profiles: list[CandidateProfile] = Field(default_factory=list)
    errors: dict[str, str] = Field(default_factory=dict)


class SearchReport(BaseModel):
    """Outcome of one end-to-end search."""

    model_config = ConfigDict(frozen=True)

    requirement: RequirementSpec
    matches: list[MatchResult] = Field(default_factory=list)
    profile_errors: dict[str, str] = Field(default_factory=dict)
    scoring_mode: Literal["reasoning", "fallback"] = "fallback"
    started_at: datetime
    finished_at: datetime
