"""Abstract base class for chat-model providers.

Defines the contract for the large-language-model backend behind the AI
music recommender.  Implementations may wrap any OpenAI-compatible
chat-completions gateway or the Anthropic Messages API; the chat service
only ever talks to this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from musicboard.models.chat import ChatMessage


# Concrete implementations: OpenAILLMProvider, AnthropicLLMProvider
# Located in: musicboard/providers/llm/
class ILLMProvider(ABC):
    """Contract for multi-turn chat completion."""

    @abstractmethod
    async def chat(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        temperature: float = 0.7,
        max_tokens: int = 1500,
    ) -> str:
        """Generate the assistant's next turn for a conversation.

        Parameters
        ----------
        system_prompt:
            Instructions that set the recommender's behaviour, including
            the ``RECOMMENDATION: {...}`` output convention.
        messages:
            The conversation so far, oldest first, as sent by the page.
        temperature:
            Sampling temperature.
        max_tokens:
            Upper bound on the length of the reply.

        Returns
        -------
        str
            The raw reply text, recommendations still embedded.

        Raises
        ------
        musicboard.utils.errors.RateLimitError
            The gateway answered 429.
        musicboard.utils.errors.PaymentRequiredError
            The gateway answered 402.
        musicboard.utils.errors.LLMError
            Any other API failure, timeout, or an empty reply.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier, e.g. ``"openai-compatible"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are configured.

        This does not contact the remote service.
        """
