"""Configuration models and YAML loader for TalentScope."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_SENIORITY_YEARS: dict[str, int] = {
    "junior": 1,
    "mid": 3,
    "senior": 5,
    "lead": 8,
}


class GitHubConfig(BaseModel):
    """Code-hosting platform endpoint, credentials, and aggregation limits."""

    api_url: str = "https://api.github.com"
    token: str | None = None
    token_env: str | None = "GITHUB_PAT"
    timeout_s: float = Field(default=20.0, gt=0)
    max_repositories: int = Field(default=100, ge=1, le=1000)
    language_sample_size: int = Field(default=20, ge=0)
    top_languages: int = Field(default=5, ge=1)
    recent_activity_days: int = Field(default=30, ge=1)
    max_concurrency: int = Field(default=8, ge=1)

    def resolve_token(self) -> str | None:
        """Return the explicit token, else the value of ``token_env``, else None."""
        if self.token:
            return self.token
        if self.token_env:
            return os.environ.get(self.token_env) or None
        return None


class ReasoningConfig(BaseModel):
    """Reasoning collaborator (LLM) selection and credentials."""

    enabled: bool = True
    provider: str = "openai"
    model: str | None = None
    api_key: str | None = None
    api_key_env: str | None = None
    base_url: str | None = None
    max_tokens: int = Field(default=4000, ge=1)
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)

    def resolve_api_key(self) -> str | None:
        """Return the explicit key, else the value of ``api_key_env``.

        None means the provider falls back to its own default variable.
        """
        if self.api_key:
            return self.api_key
        if self.api_key_env:
            return os.environ.get(self.api_key_env) or None
        return None


class ScoringConfig(BaseModel):
    """Weights and batching for compatibility scoring."""

    batch_size: int = Field(default=10, ge=1, le=50)
    skills_weight: float = Field(default=0.6, ge=0.0, le=1.0)
    experience_weight: float = Field(default=0.4, ge=0.0, le=1.0)
    seniority_years: dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_SENIORITY_YEARS),
    )

    @field_validator("seniority_years")
    @classmethod
    def covers_every_level(cls, v: dict[str, int]) -> dict[str, int]:
        missing = sorted(set(DEFAULT_SENIORITY_YEARS) - set(v))
        if missing:
            msg = f"seniority_years is missing levels: {missing}"
            raise ValueError(msg)
        if any(years < 0 for years in v.values()):
            msg = "seniority_years values must be non-negative"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def weights_sum_to_one(self) -> "ScoringConfig":
        if abs(self.skills_weight + self.experience_weight - 1.0) > 1e-9:
            msg = "skills_weight and experience_weight must sum to 1.0"
            raise ValueError(msg)
        return self


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    reasoning: ReasoningConfig = Field(default_factory=ReasoningConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
