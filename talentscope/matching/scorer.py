"""Compatibility scoring: LLM-assessed matches with an all-or-nothing deterministic fallback.

Reasoning path:
  1. Profiles are sent in batches of ``ScoringConfig.batch_size``
  2. Each response must be a JSON array of per-candidate assessments
  3. Entries with an unknown handle or a score outside [0, 100] are dropped
  4. Any unparsable batch, provider error, or batch with no valid entry sends
     the whole result set down the fallback path, so scores stay comparable
"""

import json
import logging
import math
from collections.abc import Sequence
from typing import Any, Literal

from talentscope.core.config import ScoringConfig
from talentscope.core.schemas import CandidateProfile, MatchResult, RequirementSpec
from talentscope.llm.base import LLMProvider
from talentscope.llm.parsing import Malformed, parse_json_payload
from talentscope.matching.fallback import rank_matches, score_candidates_fallback

logger = logging.getLogger(__name__)

ScoringMode = Literal["reasoning", "fallback"]

_SCORING_SYSTEM_PROMPT = (
    "You are an expert technical recruiter. Match candidate profiles against the job "
    "requirements and provide compatibility scores.\n\n"
    "For each candidate profile, analyze:\n"
    "  1. Technical skill alignment\n"
    "  2. Experience level match\n"
    "  3. Technology stack compatibility\n"
    "  4. Domain experience relevance\n"
    "  5. Recent activity and project quality\n\n"
    "Score on a 0-100 scale:\n"
    "  90-100: Excellent fit, skills, seniority, and stack all align\n"
    "  70-89:  Strong fit, minor gaps in 1-2 areas\n"
    "  50-69:  Moderate fit, some relevant experience but notable gaps\n"
    "  0-49:   Weak fit, fundamentally misaligned stack or seniority\n\n"
    "Return ONLY a JSON array (no markdown, no explanation), one object per candidate:\n"
    '[{"username": "<handle exactly as given>", "score": <number 0-100>, '
    '"reasoning": "<1-2 sentences>", "strengths": ["..."], "potential_concerns": ["..."]}]'
)


def _profile_payload(profile: CandidateProfile) -> dict[str, Any]:
    identity = profile.identity
    return {
        "username": profile.handle,
        "name": identity.name,
        "bio": identity.bio,
        "location": identity.location,
        "experience_years": profile.experience_years,
        "skills": list(profile.skills),
        "primary_languages": list(profile.top_languages),
        "total_stars": profile.total_stars,
        "total_forks": profile.total_forks,
        "recent_activity": profile.recent_activity,
        "repositories": [
            {
                "name": repo.name,
                "description": repo.description,
                "language": repo.language,
                "stars": repo.stars,
            }
            for repo in profile.repositories[:10]
        ],
    }


def _build_user_prompt(requirement: RequirementSpec, profiles: Sequence[CandidateProfile]) -> str:
    """Assemble the requirement and candidate batch as JSON sections."""
    return (
        "JOB REQUIREMENTS\n"
        f"{requirement.model_dump_json(indent=2)}\n\n"
        f"CANDIDATE PROFILES ({len(profiles)})\n"
        f"{json.dumps([_profile_payload(p) for p in profiles], indent=2)}"
    )


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [
        str(item) for item in value
        if isinstance(item, str | int | float) and str(item).strip()
    ]


def _validate_entries(
    entries: list[Any],
    submitted: set[str],
) -> list[MatchResult]:
    """Keep entries with a known handle and a finite score in [0, 100]; log the rest."""
    by_key = {handle.lower(): handle for handle in submitted}
    accepted: dict[str, MatchResult] = {}
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.warning("Dropping LLM entry #%d: not an object", index)
            continue
        handle = by_key.get(str(entry.get("username", "")).strip().lower())
        if handle is None:
            logger.warning(
                "Dropping LLM entry #%d: unknown handle %r", index, entry.get("username"),
            )
            continue
        raw_score = entry.get("score")
        if isinstance(raw_score, bool) or not isinstance(raw_score, int | float):
            logger.warning("Dropping LLM entry for '%s': non-numeric score %r", handle, raw_score)
            continue
        score = float(raw_score)
        if not math.isfinite(score) or not 0.0 <= score <= 100.0:
            logger.warning("Dropping LLM entry for '%s': score %r out of range", handle, raw_score)
            continue
        if handle in accepted:
            logger.warning("Dropping duplicate LLM entry for '%s'", handle)
            continue
        accepted[handle] = MatchResult(
            handle=handle,
            score=score,
            reasoning=str(entry.get("reasoning") or ""),
            strengths=_str_list(entry.get("strengths")),
            concerns=_str_list(entry.get("potential_concerns", entry.get("concerns"))),
            source="reasoning",
        )
    return list(accepted.values())


class CompatibilityScorer:
    """Ranks candidate profiles against a requirement spec.

    With no provider configured every call uses the deterministic fallback.
    """

    def __init__(self, config: ScoringConfig, provider: LLMProvider | None = None) -> None:
        self._config = config
        self._provider = provider

    async def score_candidates(
        self,
        requirement: RequirementSpec,
        profiles: Sequence[CandidateProfile],
    ) -> list[MatchResult]:
        """Return one ranked MatchResult per accepted candidate; never raises on LLM failure."""
        matches, _ = await self.score_with_mode(requirement, profiles)
        return matches

    async def score_with_mode(
        self,
        requirement: RequirementSpec,
        profiles: Sequence[CandidateProfile],
    ) -> tuple[list[MatchResult], ScoringMode]:
        """Like ``score_candidates`` but also reports which path produced the scores."""
        if not profiles:
            return [], "fallback"

        if self._provider is not None:
            reasoned = await self._score_with_reasoning(self._provider, requirement, profiles)
            if reasoned is not None:
                return rank_matches(reasoned), "reasoning"

        return score_candidates_fallback(requirement, profiles, self._config), "fallback"

    async def _score_with_reasoning(
        self,
        provider: LLMProvider,
        requirement: RequirementSpec,
        profiles: Sequence[CandidateProfile],
    ) -> list[MatchResult] | None:
        """Score every batch through the provider. None means: fall back for all."""
        size = self._config.batch_size
        results: list[MatchResult] = []

        for start in range(0, len(profiles), size):
            batch = profiles[start : start + size]
            try:
                raw = await provider.complete(
                    _build_user_prompt(requirement, batch),
                    system=_SCORING_SYSTEM_PROMPT,
                )
            except Exception:
                logger.warning(
                    "LLM scoring request failed for batch of %d; using fallback scores",
                    len(batch),
                    exc_info=True,
                )
                return None

            parsed = parse_json_payload(raw, list)
            if isinstance(parsed, Malformed):
                logger.warning(
                    "Unusable LLM scoring response (%s); using fallback scores", parsed.reason,
                )
                return None

            accepted = _validate_entries(parsed.value, {p.handle for p in batch})
            if not accepted:
                logger.warning("No valid LLM scores survived validation; using fallback scores")
                return None
            dropped = len(batch) - len(accepted)
            if dropped:
                logger.warning(
                    "LLM scoring: %d of %d candidates had no valid entry", dropped, len(batch),
                )
            results.extend(accepted)

        return results
