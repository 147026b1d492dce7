"""Deterministic compatibility scoring, used when reasoning output is unavailable.

    skills_score     = min(100, 100 * matched_required / len(required))   (0 if none required)
    experience_score = min(100, 100 * candidate_years / required_years)   (100 if 0 required)
    final            = round_half_up(0.6 * skills_score + 0.4 * experience_score)

The component scores enter the weighted sum unrounded; only the final score is
rounded. 2 of 7 skills with 1 of 3 years gives 30, not 31.

A required skill matches when it and any candidate skill contain one another,
case-insensitively ("React" matches "react.js").
"""

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from talentscope.core.config import ScoringConfig
from talentscope.core.schemas import CandidateProfile, MatchResult, RequirementSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FallbackBreakdown:
    skills_score: float
    experience_score: float
    final_score: int
    matched: tuple[str, ...]
    missing: tuple[str, ...]


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def skills_overlap(
    candidate_skills: Iterable[str],
    required_skills: Iterable[str],
) -> tuple[list[str], list[str]]:
    """Split required skills into (matched, missing) against the candidate's skills."""
    candidate = [s.strip().lower() for s in candidate_skills if s.strip()]
    matched: list[str] = []
    missing: list[str] = []
    for required in required_skills:
        needle = required.strip().lower()
        if not needle:
            continue
        if any(needle in skill or skill in needle for skill in candidate):
            matched.append(required)
        else:
            missing.append(required)
    return matched, missing


def fallback_score(
    candidate_skills: Iterable[str],
    required_skills: Sequence[str],
    candidate_years: float,
    required_years: float,
    *,
    skills_weight: float = 0.6,
    experience_weight: float = 0.4,
) -> FallbackBreakdown:
    """Score skill overlap and experience ratio. Pure; never raises on zero denominators."""
    matched, missing = skills_overlap(candidate_skills, required_skills)
    considered = len(matched) + len(missing)

    if considered == 0:
        skills_score = 0.0
    else:
        skills_score = min(100.0, 100.0 * len(matched) / considered)

    if required_years <= 0:
        experience_score = 100.0
    else:
        experience_score = min(100.0, 100.0 * max(candidate_years, 0) / required_years)

    final = round_half_up(skills_weight * skills_score + experience_weight * experience_score)
    return FallbackBreakdown(
        skills_score=skills_score,
        experience_score=experience_score,
        final_score=max(0, min(100, final)),
        matched=tuple(matched),
        missing=tuple(missing),
    )


def required_years_for(requirement: RequirementSpec, config: ScoringConfig) -> int:
    return config.seniority_years[requirement.experience_level]


def score_candidate_fallback(
    requirement: RequirementSpec,
    profile: CandidateProfile,
    config: ScoringConfig,
) -> MatchResult:
    """Score one profile with the deterministic formula and templated explanations."""
    required_years = required_years_for(requirement, config)
    breakdown = fallback_score(
        profile.skills,
        requirement.skills,
        profile.experience_years,
        required_years,
        skills_weight=config.skills_weight,
        experience_weight=config.experience_weight,
    )

    strengths: list[str] = []
    concerns: list[str] = []
    if breakdown.matched:
        strengths.append(f"Matches required skills: {', '.join(breakdown.matched)}")
    if profile.top_languages:
        strengths.append(f"Primary languages: {', '.join(profile.top_languages)}")
    if profile.recent_activity:
        strengths.append("Recently active on public repositories")
    if profile.total_stars:
        strengths.append(f"{profile.total_stars} stars across public repositories")

    if breakdown.missing:
        concerns.append(f"No public evidence of: {', '.join(breakdown.missing)}")
    if required_years and profile.experience_years < required_years:
        concerns.append(
            f"Estimated {profile.experience_years} years of activity, "
            f"below the {required_years} expected for a {requirement.experience_level} role",
        )
    if not profile.recent_activity:
        concerns.append("No public pushes in the last 30 days")
    if not requirement.skills:
        concerns.append("No required skills were stated, so skill fit could not be assessed")

    reasoning = (
        f"Automated estimate: skills {breakdown.skills_score:.0f}/100 "
        f"({len(breakdown.matched)} of {len(breakdown.matched) + len(breakdown.missing)} "
        f"required skills), experience {breakdown.experience_score:.0f}/100 "
        f"({profile.experience_years} of {required_years} years)."
    )

    return MatchResult(
        handle=profile.handle,
        score=breakdown.final_score,
        reasoning=reasoning,
        strengths=strengths,
        concerns=concerns,
        source="fallback",
    )


def score_candidates_fallback(
    requirement: RequirementSpec,
    profiles: Iterable[CandidateProfile],
    config: ScoringConfig,
) -> list[MatchResult]:
    """Score every profile deterministically and return them ranked."""
    return rank_matches(score_candidate_fallback(requirement, p, config) for p in profiles)


def rank_matches(matches: Iterable[MatchResult]) -> list[MatchResult]:
    """Sort by score descending, then handle ascending."""
    return sorted(matches, key=lambda m: (-m.score, m.handle))
