"""Short professional summary of a candidate profile, written by the LLM provider."""

import json
import logging

from talentscope.core.schemas import CandidateProfile
from talentscope.llm.base import LLMProvider
from talentscope.llm.parsing import strip_fences

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = "Experienced developer with strong technical background."

_SUMMARY_SYSTEM_PROMPT = (
    "You are an expert technical recruiter. Create a concise, professional summary "
    "of this developer's profile based on their GitHub data.\n\n"
    "Focus on:\n"
    "- Primary technologies and expertise\n"
    "- Notable projects and contributions\n"
    "- Experience level and specializations\n"
    "- Unique strengths and capabilities\n\n"
    "Keep it under 100 words and professional. Return plain text only."
)


def _summary_prompt(profile: CandidateProfile) -> str:
    payload = {
        "username": profile.handle,
        "name": profile.identity.name,
        "bio": profile.identity.bio,
        "experience_years": profile.experience_years,
        "primary_languages": list(profile.top_languages),
        "skills": list(profile.skills),
        "total_stars": profile.total_stars,
        "recent_activity": profile.recent_activity,
        "top_repositories": [
            {"name": r.name, "description": r.description, "stars": r.stars}
            for r in sorted(profile.repositories, key=lambda r: r.stars, reverse=True)[:5]
        ],
        "readme_excerpt": (profile.readme or "")[:1500],
    }
    return (
        "Generate a professional summary for this developer profile:\n\n"
        f"{json.dumps(payload, indent=2)}"
    )


async def summarize_profile(profile: CandidateProfile, provider: LLMProvider) -> str:
    """Return an LLM-written summary, or FALLBACK_SUMMARY if the provider fails."""
    try:
        raw = await provider.complete(
            _summary_prompt(profile),
            system=_SUMMARY_SYSTEM_PROMPT,
            max_tokens=200,
            temperature=0.4,
        )
    except Exception:
        logger.warning("Profile summary failed for '%s'", profile.handle, exc_info=True)
        return FALLBACK_SUMMARY

    summary = strip_fences(raw or "")
    return summary or FALLBACK_SUMMARY
