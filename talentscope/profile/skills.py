"""Skill extraction from repository metadata, language histograms, and bio text.

Order of the result: histogram languages first (insertion order), then
vocabulary keyword hits in vocabulary order. Truncated to MAX_SKILLS.
"""

from collections.abc import Iterable, Mapping

from talentscope.core.schemas import RepositorySummary

SKILL_VOCABULARY_VERSION = 1

MAX_SKILLS = 15

TECH_KEYWORDS: tuple[str, ...] = (
    # frameworks and runtimes
    "react", "vue", "angular", "nodejs", "express", "fastapi", "django", "flask",
    # languages
    "typescript", "javascript", "python", "java", "golang", "rust", "php",
    # infrastructure and cloud
    "docker", "kubernetes", "aws", "gcp", "azure", "terraform", "jenkins",
    # datastores
    "mongodb", "postgresql", "mysql", "redis", "elasticsearch",
    # frontend tooling
    "nextjs", "nuxt", "svelte", "tailwind", "bootstrap", "material-ui",
    # architecture
    "graphql", "rest", "api", "microservices", "serverless",
)


def extract_skills(
    repositories: Iterable[RepositorySummary],
    languages: Mapping[str, int],
    bio: str | None = None,
    *,
    vocabulary: tuple[str, ...] = TECH_KEYWORDS,
    limit: int = MAX_SKILLS,
) -> list[str]:
    """Derive a lowercase, duplicate-free skill list.

    Args:
        repositories: Repositories whose name and description are scanned.
        languages: Merged language histogram; every key becomes a skill.
        bio: Optional free-text bio, scanned like a repository description.
        vocabulary: Keywords to look for, in priority order.
        limit: Maximum number of skills returned.

    Returns:
        Skills in deterministic order, at most ``limit`` entries.
    """
    skills: dict[str, None] = {}
    for language in languages:
        skills.setdefault(language.lower(), None)

    texts = [f"{repo.name} {repo.description or ''}".lower() for repo in repositories]
    if bio:
        texts.append(bio.lower())

    if texts:
        for keyword in vocabulary:
            if any(keyword in text for text in texts):
                skills.setdefault(keyword, None)

    return list(skills)[:limit]
