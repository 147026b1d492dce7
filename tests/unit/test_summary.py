"""Tests for LLM-written profile summaries."""

from unittest.mock import AsyncMock, MagicMock

from talentscope.core.schemas import CandidateProfile, Identity, RepositorySummary
from talentscope.profile.summary import FALLBACK_SUMMARY, _summary_prompt, summarize_profile


def _make_profile() -> CandidateProfile:
    return CandidateProfile(
        identity=Identity(id=7, login="octo", name="Octo Cat", bio="Rust and WASM"),
        repositories=(
            RepositorySummary(name="small", stars=1),
            RepositorySummary(name="popular", description="A fast parser", stars=900),
        ),
        experience_years=6,
        top_languages=("Rust",),
        skills=("rust", "wasm"),
        readme="# Hi there\n" + "x" * 5000,
    )


def _mock_provider(**kwargs: object) -> MagicMock:
    provider = MagicMock()
    provider.complete = AsyncMock(**kwargs)
    return provider


class TestSummaryPrompt:
    def test_contains_profile_facts(self) -> None:
        prompt = _summary_prompt(_make_profile())
        assert '"username": "octo"' in prompt
        assert "A fast parser" in prompt
        assert prompt.index("popular") < prompt.index("small")

    def test_readme_excerpt_truncated(self) -> None:
        assert "x" * 1500 not in _summary_prompt(_make_profile())


class TestSummarizeProfile:
    async def test_returns_provider_text(self) -> None:
        provider = _mock_provider(return_value="  Rust engineer focused on parsers.  ")
        summary = await summarize_profile(_make_profile(), provider)

        assert summary == "Rust engineer focused on parsers."
        kwargs = provider.complete.call_args.kwargs
        assert kwargs["max_tokens"] == 200
        assert kwargs["temperature"] == 0.4

    async def test_provider_failure_returns_fallback(self) -> None:
        provider = _mock_provider(side_effect=RuntimeError("quota"))
        assert await summarize_profile(_make_profile(), provider) == FALLBACK_SUMMARY

    async def test_empty_response_returns_fallback(self) -> None:
        provider = _mock_provider(return_value="   ")
        assert await summarize_profile(_make_profile(), provider) == FALLBACK_SUMMARY
