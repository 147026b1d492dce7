"""Profile aggregation: reduces a candidate's public activity into a CandidateProfile.

Data flow for one handle:
  1. Identity lookup            (NotFound / UpstreamUnavailable propagate)
  2. Repository listing         (most recently updated first)
  3. Language histograms        (sampled repos, concurrent, failures degrade to {})
  4. Merge + derived metrics    (stars, forks, top languages, experience, activity)
  5. Skills                     (Skill Extractor)
  6. Profile README             (optional, absence is not an error)
"""

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import UTC, datetime, timedelta

from talentscope.core.config import GitHubConfig
from talentscope.core.errors import NotFound, PartialAggregationFailure, TalentScopeError
from talentscope.core.schemas import (
    MAX_EXPERIENCE_YEARS,
    MIN_EXPERIENCE_YEARS,
    CandidateProfile,
    ProfileBatch,
    RepositorySummary,
)
from talentscope.github.base import CodeHostClient
from talentscope.profile.skills import extract_skills

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(UTC)


def merge_histograms(histograms: Iterable[Mapping[str, int]]) -> dict[str, int]:
    """Sum byte counts per language. Keys keep first-seen order."""
    merged: dict[str, int] = {}
    for histogram in histograms:
        for language, count in histogram.items():
            merged[language] = merged.get(language, 0) + max(int(count), 0)
    return merged


def rank_languages(languages: Mapping[str, int], top_n: int) -> list[str]:
    """Top ``top_n`` languages by byte count; ties keep first-seen order."""
    ranked = sorted(languages.items(), key=lambda item: item[1], reverse=True)
    return [language for language, _ in ranked[:top_n]]


def estimate_experience_years(created_at: datetime | None, now: datetime) -> int:
    """Account age in calendar years, clamped to [1, 15]. Missing date counts as 1."""
    age = now.year - created_at.year if created_at is not None else 1
    return max(MIN_EXPERIENCE_YEARS, min(age, MAX_EXPERIENCE_YEARS))


def has_recent_activity(
    repositories: Iterable[RepositorySummary],
    now: datetime,
    window_days: int = 30,
) -> bool:
    """True iff any repository was pushed within the last ``window_days``."""
    cutoff = now - timedelta(days=window_days)
    for repo in repositories:
        pushed = repo.pushed_at
        if pushed is None:
            continue
        if pushed.tzinfo is None:
            pushed = pushed.replace(tzinfo=UTC)
        if pushed > cutoff:
            return True
    return False


class ProfileAggregator:
    """Builds immutable CandidateProfiles from a code-hosting client.

    Usage::

        aggregator = ProfileAggregator(client, settings.github)
        profile = await aggregator.build_profile("octocat")
    """

    def __init__(
        self,
        client: CodeHostClient,
        config: GitHubConfig,
        *,
        clock: Clock = _utc_now,
    ) -> None:
        self._client = client
        self._config = config
        self._clock = clock

    async def build_profile(self, handle: str) -> CandidateProfile:
        """Aggregate one candidate. Only identity and listing failures propagate."""
        identity = await self._client.get_identity(handle)
        login = identity.login
        repositories = await self._client.list_repositories(
            login, self._config.max_repositories,
        )
        logger.debug("Fetched %d repositories for '%s'", len(repositories), login)

        sampled = repositories[: self._config.language_sample_size]
        fetched = await self._fetch_histograms(login, sampled)
        languages = merge_histograms(histogram for histogram, _ in fetched)
        failures = [failure for _, failure in fetched if failure is not None]

        now = self._clock()
        readme, readme_failure = await self._fetch_readme(login)
        if readme_failure is not None:
            failures.append(readme_failure)

        for failure in failures:
            logger.warning("%s", failure)

        return CandidateProfile(
            identity=identity,
            repositories=tuple(repositories),
            languages=languages,
            total_stars=sum(repo.stars for repo in repositories),
            total_forks=sum(repo.forks for repo in repositories),
            top_languages=tuple(rank_languages(languages, self._config.top_languages)),
            experience_years=estimate_experience_years(identity.created_at, now),
            recent_activity=has_recent_activity(
                repositories, now, self._config.recent_activity_days,
            ),
            skills=tuple(extract_skills(repositories, languages, identity.bio)),
            readme=readme,
            warnings=tuple(str(f) for f in failures),
        )

    async def build_profiles(self, handles: Iterable[str]) -> ProfileBatch:
        """Aggregate many candidates concurrently.

        A failed candidate is reported in ``errors`` and never cancels the rest.
        Handles are deduplicated case-insensitively, first spelling wins.
        """
        unique: dict[str, str] = {}
        for handle in handles:
            cleaned = handle.strip()
            if cleaned:
                unique.setdefault(cleaned.lower(), cleaned)
        ordered = list(unique.values())

        results = await asyncio.gather(
            *(self.build_profile(h) for h in ordered), return_exceptions=True,
        )

        profiles: list[CandidateProfile] = []
        errors: dict[str, str] = {}
        for handle, result in zip(ordered, results, strict=True):
            if isinstance(result, TalentScopeError):
                logger.warning("Skipping candidate '%s': %s", handle, result)
                errors[handle] = f"{type(result).__name__}: {result}"
            elif isinstance(result, Exception):
                logger.warning(
                    "Skipping candidate '%s' after unexpected error", handle, exc_info=result,
                )
                errors[handle] = f"{type(result).__name__}: {result}"
            elif isinstance(result, BaseException):
                raise result
            else:
                profiles.append(result)

        logger.info("Built %d profiles (%d failed)", len(profiles), len(errors))
        return ProfileBatch(profiles=profiles, errors=errors)

    async def _fetch_histograms(
        self,
        handle: str,
        repositories: list[RepositorySummary],
    ) -> list[tuple[dict[str, int], PartialAggregationFailure | None]]:
        """Fan out one languages request per repository, bounded by max_concurrency.

        Results come back in repository order regardless of completion order.
        """
        semaphore = asyncio.Semaphore(self._config.max_concurrency)

        async def fetch(
            repo: RepositorySummary,
        ) -> tuple[dict[str, int], PartialAggregationFailure | None]:
            async with semaphore:
                try:
                    histogram = await self._client.get_languages(repo.owner or handle, repo.name)
                except Exception as e:
                    if not isinstance(e, TalentScopeError):
                        logger.debug("Unexpected languages error for %s", repo.name, exc_info=e)
                    return {}, PartialAggregationFailure(handle, f"languages of {repo.name}", e)
            return histogram, None

        return list(await asyncio.gather(*(fetch(repo) for repo in repositories)))

    async def _fetch_readme(
        self,
        handle: str,
    ) -> tuple[str | None, PartialAggregationFailure | None]:
        try:
            return await self._client.get_readme(handle, handle), None
        except NotFound:
            return None, None
        except TalentScopeError as e:
            return None, PartialAggregationFailure(handle, "profile README", e)
