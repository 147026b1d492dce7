"""Google Gemini LLM provider (google-genai SDK)."""

import logging

from talentscope.llm.base import LLMProvider

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """LLM provider using the Google Gemini API (google-genai SDK)."""

    @property
    def provider_id(self) -> str:
        return "gemini"

    @property
    def default_model(self) -> str:
        return "gemini-2.5-flash"

    @property
    def env_var(self) -> str:
        return "GOOGLE_API_KEY"

    async def complete(
        self,
        prompt: str,
        *,
        system: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        api_key = self._require_api_key()

        try:
            from google import genai
            from google.genai import types as genai_types
        except ImportError:
            msg = (
                "google-genai is required for this provider. "
                "Install with: pip install 'talentscope[gemini]'"
            )
            raise ImportError(msg) from None

        logger.info("Sending request to Gemini API (%s)...", self.model)
        client = genai.Client(api_key=api_key)
        response = await client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=genai_types.GenerateContentConfig(
                system_instruction=system,
                max_output_tokens=max_tokens or self._max_tokens,
                temperature=self._temperature if temperature is None else temperature,
            ),
        )

        return response.text or ""
