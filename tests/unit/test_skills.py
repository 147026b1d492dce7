"""Tests for skill extraction."""

from talentscope.core.schemas import RepositorySummary
from talentscope.profile.skills import MAX_SKILLS, TECH_KEYWORDS, extract_skills


def _repo(name: str, description: str | None = None) -> RepositorySummary:
    return RepositorySummary(name=name, description=description)


class TestExtractSkills:
    def test_languages_seed_skills(self) -> None:
        skills = extract_skills([], {"Python": 100, "TypeScript": 50})
        assert skills == ["python", "typescript"]

    def test_no_repos_no_bio_only_languages(self) -> None:
        assert extract_skills([], {}) == []
        assert extract_skills([], {"Go": 10}, None) == ["go"]

    def test_keywords_from_repo_name_and_description(self) -> None:
        repos = [_repo("react-dashboard", "Admin UI backed by PostgreSQL")]
        skills = extract_skills(repos, {})
        assert "react" in skills
        assert "postgresql" in skills

    def test_keywords_case_insensitive(self) -> None:
        skills = extract_skills([_repo("infra", "DOCKER and Kubernetes manifests")], {})
        assert "docker" in skills
        assert "kubernetes" in skills

    def test_bio_scanned(self) -> None:
        skills = extract_skills([], {}, bio="Serverless fan, AWS certified")
        assert skills == ["aws", "serverless"]

    def test_keywords_follow_vocabulary_order(self) -> None:
        repos = [_repo("terraform-modules"), _repo("django-shop")]
        skills = extract_skills(repos, {})
        assert skills.index("django") < skills.index("terraform")
        assert TECH_KEYWORDS.index("django") < TECH_KEYWORDS.index("terraform")

    def test_language_and_keyword_deduplicated(self) -> None:
        skills = extract_skills([_repo("python-tools")], {"Python": 10})
        assert skills.count("python") == 1
        assert skills[0] == "python"

    def test_truncated_to_max(self) -> None:
        languages = {f"Lang{i}": i for i in range(10)}
        repos = [_repo("stack", "react vue angular django flask docker aws redis graphql")]
        skills = extract_skills(repos, languages)
        assert len(skills) == MAX_SKILLS
        # histogram languages come first and survive truncation
        assert skills[:10] == [f"lang{i}" for i in range(10)]

    def test_deterministic(self) -> None:
        repos = [_repo("api-gateway", "GraphQL over Redis"), _repo("site", "Next.js + tailwind")]
        languages = {"JavaScript": 300, "CSS": 20}
        bio = "Docker and AWS"
        first = extract_skills(repos, languages, bio)
        for _ in range(5):
            assert extract_skills(repos, languages, bio) == first
