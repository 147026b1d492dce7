"""Ollama local LLM provider (OpenAI-compatible API)."""

import logging

from talentscope.llm.base import LLMProvider

logger = logging.getLogger(__name__)

_OLLAMA_BASE_URL = "http://localhost:11434/v1"


class OllamaProvider(LLMProvider):
    """LLM provider using a local Ollama instance via OpenAI-compatible API."""

    @property
    def provider_id(self) -> str:
        return "ollama"

    @property
    def default_model(self) -> str:
        return "llama3"

    @property
    def env_var(self) -> None:
        return None

    async def complete(
        self,
        prompt: str,
        *,
        system: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        try:
            import openai
        except ImportError:
            msg = (
                "openai is required for Ollama (OpenAI-compatible API). "
                "Install with: pip install 'talentscope[openai]'"
            )
            raise ImportError(msg) from None

        client = openai.AsyncOpenAI(base_url=self._base_url or _OLLAMA_BASE_URL, api_key="ollama")

        logger.info("Sending request to Ollama (%s)...", self.model)
        response = await client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            max_tokens=max_tokens or self._max_tokens,
            temperature=self._temperature if temperature is None else temperature,
        )

        return response.choices[0].message.content or ""
