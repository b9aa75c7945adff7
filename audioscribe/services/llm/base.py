"""
Abstract base class for LLM providers.

All LLM implementations (OpenAI, Claude, Ollama) must implement this
interface, enabling provider-agnostic request handling in the assistant.
"""

from abc import ABC, abstractmethod


class BaseLLM(ABC):
    """Interface that every LLM provider must implement."""

    @abstractmethod
    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a response to a single user prompt.

        Args:
            prompt: The user prompt to send to the model.
            **kwargs: ``system``, ``max_tokens``, ``temperature``.

        Returns:
            The model's text response, unmodified.
        """

    @abstractmethod
    async def chat(self, messages: list[dict[str, str]], **kwargs) -> str:
        """Continue a multi-turn conversation.

        Args:
            messages: Prior turns as ``{"role", "content"}`` dicts, oldest first.
            **kwargs: ``system``, ``max_tokens``, ``temperature``.

        Returns:
            The assistant's next reply, unmodified.
        """
