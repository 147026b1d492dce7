"""GitHub REST client built on httpx.

Maps platform responses onto the core error taxonomy:
  - 404                       -> NotFound
  - 403 / 429 / 5xx, timeouts -> UpstreamUnavailable
"""

import base64
import binascii
import logging
from datetime import datetime
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx

from talentscope.core.config import GitHubConfig
from talentscope.core.errors import NotFound, UpstreamUnavailable
from talentscope.core.schemas import Identity, RepositorySummary
from talentscope.github.base import CodeHostClient

logger = logging.getLogger(__name__)

_MAX_PER_PAGE = 100


class GitHubClient(CodeHostClient):
    """Async client for the GitHub REST v3 API.

    Usage::

        async with GitHubClient(settings.github) as client:
            identity = await client.get_identity("octocat")
    """

    def __init__(
        self,
        config: GitHubConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        token = config.resolve_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        else:
            logger.debug("No GitHub token configured; using unauthenticated rate limits")
        self._http = httpx.AsyncClient(
            base_url=config.api_url,
            headers=headers,
            timeout=config.timeout_s,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def platform_id(self) -> str:
        return "github"

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get_identity(self, handle: str) -> Identity:
        data = await self._get_json(f"/users/{_segment(handle)}", what=f"user '{handle}'")
        return _parse_identity(data)

    async def list_repositories(self, handle: str, limit: int) -> list[RepositorySummary]:
        per_page = min(_MAX_PER_PAGE, max(limit, 1))
        repositories: list[RepositorySummary] = []
        page = 1
        while len(repositories) < limit:
            batch = await self._get_json(
                f"/users/{_segment(handle)}/repos",
                what=f"repositories of '{handle}'",
                params={
                    "sort": "updated",
                    "direction": "desc",
                    "per_page": per_page,
                    "page": page,
                },
            )
            if not isinstance(batch, list):
                msg = f"Unexpected repository listing payload for '{handle}'"
                raise UpstreamUnavailable(msg)
            repositories.extend(_parse_repository(item, handle) for item in batch)
            if len(batch) < per_page:
                break
            page += 1
        return repositories[:limit]

    async def get_languages(self, owner: str, repo: str) -> dict[str, int]:
        data = await self._get_json(
            f"/repos/{_segment(owner)}/{_segment(repo)}/languages",
            what=f"languages of {owner}/{repo}",
        )
        if not isinstance(data, dict):
            return {}
        malformed = [
            lang for lang, count in data.items()
            if isinstance(count, bool) or not isinstance(count, int) or count < 0
        ]
        if malformed:
            msg = f"Malformed byte counts in languages of {owner}/{repo}: {malformed}"
            raise UpstreamUnavailable(msg)
        return {str(lang): count for lang, count in data.items()}

    async def get_readme(self, owner: str, repo: str) -> str | None:
        try:
            data = await self._get_json(
                f"/repos/{_segment(owner)}/{_segment(repo)}/readme",
                what=f"README of {owner}/{repo}",
            )
        except NotFound:
            return None
        content = data.get("content") if isinstance(data, dict) else None
        if not content:
            return None
        if data.get("encoding", "base64") != "base64":
            return str(content)
        try:
            return base64.b64decode(content).decode("utf-8", errors="replace")
        except (binascii.Error, ValueError):
            logger.warning("Undecodable README content for %s/%s", owner, repo)
            return None

    async def search_users(self, query: str, *, page: int = 1, per_page: int = 10) -> list[str]:
        """Return handles matching a user-search query, most repositories first."""
        data = await self._get_json(
            "/search/users",
            what=f"user search '{query}'",
            params={
                "q": query,
                "page": page,
                "per_page": min(per_page, _MAX_PER_PAGE),
                "sort": "repositories",
                "order": "desc",
            },
        )
        items = data.get("items", []) if isinstance(data, dict) else []
        return [str(item["login"]) for item in items if item.get("login")]

    async def _get_json(
        self,
        path: str,
        *,
        what: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self._http.get(path, params=params)
        except httpx.HTTPError as e:
            msg = f"Request for {what} failed: {e}"
            raise UpstreamUnavailable(msg) from e

        status = response.status_code
        if status == 404:
            msg = f"GitHub reports no {what}"
            raise NotFound(msg)
        if status in (403, 429) or status >= 500:
            remaining = response.headers.get("x-ratelimit-remaining")
            msg = f"GitHub returned {status} for {what}"
            if remaining == "0":
                msg += " (rate limit exhausted)"
            raise UpstreamUnavailable(msg, status_code=status)
        if status >= 400:
            msg = f"GitHub rejected request for {what} with {status}"
            raise UpstreamUnavailable(msg, status_code=status)

        try:
            return response.json()
        except ValueError as e:
            msg = f"GitHub returned invalid JSON for {what}"
            raise UpstreamUnavailable(msg, status_code=status) from e


def _segment(value: str) -> str:
    """Escape one URL path segment so a handle cannot rewrite the request path."""
    return quote(value, safe="")


def _parse_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _parse_identity(data: dict[str, Any]) -> Identity:
    return Identity(
        id=int(data["id"]),
        login=str(data["login"]),
        name=data.get("name"),
        avatar_url=data.get("avatar_url") or "",
        bio=data.get("bio"),
        location=data.get("location"),
        html_url=data.get("html_url") or "",
        public_repos=data.get("public_repos") or 0,
        followers=data.get("followers") or 0,
        created_at=_parse_datetime(data.get("created_at")),
    )


def _parse_repository(data: dict[str, Any], handle: str) -> RepositorySummary:
    owner = (data.get("owner") or {}).get("login") or handle
    return RepositorySummary(
        name=str(data["name"]),
        full_name=data.get("full_name") or f"{owner}/{data['name']}",
        owner=owner,
        description=data.get("description"),
        language=data.get("language"),
        stars=data.get("stargazers_count") or 0,
        forks=data.get("forks_count") or 0,
        pushed_at=_parse_datetime(data.get("pushed_at") or data.get("updated_at")),
        html_url=data.get("html_url") or "",
    )
