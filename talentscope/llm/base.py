"""Abstract base class for reasoning (LLM) providers."""

import os
from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """Base class that every LLM provider must implement.

    Credentials are passed in explicitly; ``env_var`` is only consulted when
    no key was given to the constructor.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str | None = None,
        base_url: str | None = None,
        max_tokens: int = 4000,
        temperature: float = 0.2,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url
        self._max_tokens = max_tokens
        self._temperature = temperature

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique identifier for this provider (e.g. 'anthropic')."""

    @property
    @abstractmethod
    def default_model(self) -> str:
        """The default model ID used when no override is specified."""

    @property
    @abstractmethod
    def env_var(self) -> str | None:
        """Environment variable name for the API key, or None if not needed."""

    @property
    def model(self) -> str:
        return self._model or self.default_model

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        *,
        system: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        """Send a system instruction plus a user payload and return the raw response text.

        Args:
            prompt: User payload.
            system: System instruction describing the expected output.
            max_tokens: Override the configured response budget.
            temperature: Override the configured sampling temperature.

        Returns:
            Raw text response from the LLM (expected to contain JSON).
        """

    def _require_api_key(self) -> str:
        key = self._api_key
        if not key and self.env_var:
            key = os.environ.get(self.env_var)
        if not key:
            msg = f"{self.env_var} environment variable is required"
            raise ValueError(msg)
        return key
