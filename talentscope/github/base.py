"""Abstract base class for code-hosting platform clients."""

from abc import ABC, abstractmethod

from talentscope.core.schemas import Identity, RepositorySummary


class CodeHostClient(ABC):
    """Contract every code-hosting client must implement.

    Implementations raise ``NotFound`` when the platform reports a missing
    resource and ``UpstreamUnavailable`` on transport or rate-limit failures.
    """

    @property
    @abstractmethod
    def platform_id(self) -> str:
        """Unique identifier for this platform (e.g. 'github')."""

    @abstractmethod
    async def get_identity(self, handle: str) -> Identity:
        """Fetch the identity record for ``handle``."""

    @abstractmethod
    async def list_repositories(self, handle: str, limit: int) -> list[RepositorySummary]:
        """Return up to ``limit`` repositories, most recently updated first."""

    @abstractmethod
    async def get_languages(self, owner: str, repo: str) -> dict[str, int]:
        """Return the language → byte-count histogram of one repository."""

    @abstractmethod
    async def get_readme(self, owner: str, repo: str) -> str | None:
        """Return the decoded README text, or None when the repository has none."""
