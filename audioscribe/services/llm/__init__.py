"""
LLM module - Chat completion abstraction layer.

Factory function for creating LLM instances based on provider configuration.
"""

from audioscribe.core.config import Settings

from .base import BaseLLM

__all__ = ["BaseLLM", "create_llm"]


def create_llm(settings: Settings) -> BaseLLM:
    """
    Factory function to create LLM instance based on provider.

    Args:
        settings: Application settings; ``llm_provider`` selects the backend.

    Returns:
        BaseLLM implementation instance

    Raises:
        ValueError: If provider is unknown
    """
    provider = settings.llm_provider
    if provider == "openai":
        from .openai_llm import OpenAILLM

        return OpenAILLM(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            model=settings.openai_model,
            max_tokens=settings.llm_max_tokens,
        )
    elif provider == "claude":
        from .claude import ClaudeLLM

        return ClaudeLLM(
            api_key=settings.claude_api_key,
            model=settings.claude_model,
            max_tokens=settings.llm_max_tokens,
        )
    elif provider == "ollama":
        from .ollama import OllamaLLM

        return OllamaLLM(
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            max_tokens=settings.llm_max_tokens,
        )
    else:
        raise ValueError(f"Unknown LLM provider: {provider}")
