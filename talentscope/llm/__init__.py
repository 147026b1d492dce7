"""LLM provider registry with lazy loading.

Usage:
    from talentscope.llm import build_provider

    provider = build_provider(settings.reasoning)
    raw = await provider.complete(text, system=INSTRUCTION)
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

from talentscope.llm.base import LLMProvider

if TYPE_CHECKING:
    from talentscope.core.config import ReasoningConfig

__all__ = ["LLMProvider", "available_providers", "build_provider", "get_provider"]

# Lazy registry: maps provider name → (module_path, class_name)
_REGISTRY: dict[str, tuple[str, str]] = {
    "anthropic": ("talentscope.llm.anthropic", "AnthropicProvider"),
    "openai": ("talentscope.llm.openai", "OpenAIProvider"),
    "gemini": ("talentscope.llm.gemini", "GeminiProvider"),
    "ollama": ("talentscope.llm.ollama", "OllamaProvider"),
}


def get_provider(name: str, **kwargs: object) -> LLMProvider:
    """Instantiate and return an LLM provider by name.

    Args:
        name: Provider identifier (anthropic, openai, gemini, ollama).
        **kwargs: Passed to the provider constructor (api_key, model, ...).

    Returns:
        An LLMProvider instance.

    Raises:
        ValueError: If the provider name is unknown.
    """
    if name not in _REGISTRY:
        valid = ", ".join(sorted(_REGISTRY))
        msg = f"Unknown LLM provider '{name}'. Available: {valid}"
        raise ValueError(msg)

    module_path, class_name = _REGISTRY[name]
    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)
    return cls(**kwargs)  # type: ignore[no-any-return]


def build_provider(config: ReasoningConfig) -> LLMProvider | None:
    """Build the configured provider, or None when reasoning is disabled."""
    if not config.enabled:
        return None
    return get_provider(
        config.provider,
        api_key=config.resolve_api_key(),
        model=config.model,
        base_url=config.base_url,
        max_tokens=config.max_tokens,
        temperature=config.temperature,
    )


def available_providers() -> list[str]:
    """Return sorted list of registered provider names."""
    return sorted(_REGISTRY)
