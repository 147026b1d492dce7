"""Integration test: full search pipeline over a mocked GitHub API and LLM."""

import base64
import json
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from talentscope.core.config import Settings
from talentscope.core.errors import MalformedReasoningOutput
from talentscope.github.client import GitHubClient
from talentscope.matching.scorer import CompatibilityScorer
from talentscope.pipeline.search import export_report_json, run_search
from talentscope.profile.aggregator import ProfileAggregator
from talentscope.requirements.interpreter import RequirementInterpreter

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)

# ---------------------------------------------------------------------------
# Mock GitHub API
# ---------------------------------------------------------------------------

_USERS: dict[str, dict[str, Any]] = {
    "alice": {
        "id": 1,
        "login": "alice",
        "name": "Alice",
        "bio": "Full-stack, AWS certified",
        "created_at": "2019-03-01T00:00:00Z",
    },
    "bob": {
        "id": 2,
        "login": "bob",
        "name": "Bob",
        "bio": None,
        "created_at": "2025-06-01T00:00:00Z",
    },
}

_REPOS: dict[str, list[dict[str, Any]]] = {
    "alice": [
        {
            "name": "payments-ui",
            "owner": {"login": "alice"},
            "description": "React dashboard with a nodejs backend",
            "language": "TypeScript",
            "stargazers_count": 40,
            "forks_count": 4,
            "pushed_at": "2026-10-10T00:00:00Z",
        },
        {
            "name": "ledger-api",
            "owner": {"login": "alice"},
            "description": "Express service on AWS Lambda",
            "language": "JavaScript",
            "stargazers_count": 10,
            "forks_count": 1,
            "pushed_at": "2026-08-01T00:00:00Z",
        },
    ],
    "bob": [
        {
            "name": "scripts",
            "owner": {"login": "bob"},
            "description": "Assorted automation",
            "language": "Python",
            "stargazers_count": 0,
            "forks_count": 0,
            "pushed_at": "2026-01-01T00:00:00Z",
        },
    ],
}

_LANGUAGES: dict[str, dict[str, int]] = {
    "payments-ui": {"TypeScript": 9000, "CSS": 1000},
    "ledger-api": {"JavaScript": 5000},
    "scripts": {"Python": 3000, "Shell": 200},
}


def _github_handler(request: httpx.Request) -> httpx.Response:
    parts = request.url.path.strip("/").split("/")
    if parts[0] == "users" and len(parts) == 2 and parts[1] in _USERS:
        return httpx.Response(200, json=_USERS[parts[1]])
    if parts[0] == "users" and len(parts) == 3 and parts[1] in _REPOS:
        return httpx.Response(200, json=_REPOS[parts[1]])
    if parts[0] == "repos" and parts[-1] == "languages":
        return httpx.Response(200, json=_LANGUAGES.get(parts[2], {}))
    if parts[0] == "repos" and parts[-1] == "readme" and parts[1] == "alice":
        content = base64.b64encode(b"# Alice\nI build payment systems.").decode()
        return httpx.Response(200, json={"content": content, "encoding": "base64"})
    return httpx.Response(404, json={"message": "Not Found"})


# ---------------------------------------------------------------------------
# Mock LLM
# ---------------------------------------------------------------------------

_REQUIREMENT_RESPONSE = {
    "skills": ["React", "Node", "AWS"],
    "experience_level": "senior",
    "technologies": ["TypeScript"],
    "domain": "fintech",
    "summary": "Senior full-stack engineer",
}


def _llm(scoring_response: str | Exception) -> MagicMock:
    async def complete(prompt: str, *, system: str, **kwargs: Any) -> str:
        if "JSON array" in system:
            if isinstance(scoring_response, Exception):
                raise scoring_response
            return scoring_response
        return json.dumps(_REQUIREMENT_RESPONSE)

    provider = MagicMock()
    provider.provider_id = "fake"
    provider.complete = AsyncMock(side_effect=complete)
    return provider


def _components(
    provider: MagicMock,
    client: GitHubClient,
) -> tuple[RequirementInterpreter, ProfileAggregator, CompatibilityScorer]:
    settings = Settings()
    return (
        RequirementInterpreter(provider),
        ProfileAggregator(client, settings.github, clock=lambda: NOW),
        CompatibilityScorer(settings.scoring, provider),
    )


def _github() -> GitHubClient:
    settings = Settings()
    config = settings.github.model_copy(update={"token_env": None})
    return GitHubClient(config, transport=httpx.MockTransport(_github_handler))


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestSearchPipeline:
    async def test_reasoning_path_end_to_end(self) -> None:
        scoring = json.dumps([
            {"username": "bob", "score": 35, "reasoning": "Python only",
             "strengths": [], "potential_concerns": ["No React"]},
            {"username": "alice", "score": 92, "reasoning": "Strong React and AWS",
             "strengths": ["React", "AWS"], "potential_concerns": []},
        ])
        async with _github() as client:
            report = await run_search(
                "Senior React/Node engineer with AWS",
                ["alice", "bob", "ghost"],
                *_components(_llm(scoring), client),
            )

        assert report.scoring_mode == "reasoning"
        assert [m.handle for m in report.matches] == ["alice", "bob"]
        assert report.matches[0].score == 92
        assert list(report.profile_errors) == ["ghost"]
        assert report.profile_errors["ghost"].startswith("NotFound")
        assert report.started_at <= report.finished_at

    async def test_fallback_path_end_to_end(self) -> None:
        async with _github() as client:
            report = await run_search(
                "Senior React/Node engineer with AWS",
                ["bob", "alice"],
                *_components(_llm(RuntimeError("rate limited")), client),
            )

        assert report.scoring_mode == "fallback"
        assert [m.handle for m in report.matches] == ["alice", "bob"]
        alice = report.matches[0]
        assert alice.source == "fallback"
        # react, node and aws all found; 7 years of activity vs 5 required
        assert alice.score == 100
        assert report.matches[1].score < alice.score

    async def test_malformed_requirements_block_search(self) -> None:
        provider = MagicMock()
        provider.provider_id = "fake"
        provider.complete = AsyncMock(return_value='{"skills": [], "experience_level": "expert"}')

        async with _github() as client:
            with pytest.raises(MalformedReasoningOutput):
                await run_search("We need an expert", ["alice"], *_components(provider, client))

        assert provider.complete.await_count == 1

    async def test_export_json(self) -> None:
        async with _github() as client:
            report = await run_search(
                "Senior React/Node engineer with AWS",
                ["alice"],
                *_components(_llm("garbage"), client),
            )

        data = json.loads(export_report_json(report))
        assert data["scoring_mode"] == "fallback"
        assert data["requirement"]["experience_level"] == "senior"
        first = data["matches"][0]
        assert first["rank"] == 1
        assert first["username"] == "alice"
        assert first["source"] == "fallback"
        assert set(first) == {
            "rank", "username", "score", "reasoning", "strengths", "potential_concerns", "source",
        }


class TestAggregationIsolation:
    async def test_malformed_histogram_keeps_every_candidate(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/repos/bob/scripts/languages":
                return httpx.Response(200, json={"Python": None})
            return _github_handler(request)

        config = Settings().github.model_copy(update={"token_env": None})
        async with GitHubClient(config, transport=httpx.MockTransport(handler)) as client:
            aggregator = ProfileAggregator(client, config, clock=lambda: NOW)
            batch = await aggregator.build_profiles(["alice", "bob"])

        assert batch.errors == {}
        assert [p.handle for p in batch.profiles] == ["alice", "bob"]
        bob = batch.profiles[1]
        assert bob.languages == {}
        assert any("languages of scripts" in w for w in bob.warnings)
