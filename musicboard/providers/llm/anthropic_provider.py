"""Anthropic chat provider.

Same contract as the OpenAI-compatible adapter, over the Claude Messages
API.  The system prompt is a top-level parameter rather than a message,
and the reply is a list of content blocks of which only the text blocks
are kept.  Used when only ``ANTHROPIC_API_KEY`` is configured.
"""

from __future__ import annotations

import anthropic
import structlog

from musicboard.config.settings import Settings
from musicboard.interfaces.llm_provider import ILLMProvider
from musicboard.models.chat import ChatMessage
from musicboard.utils.errors import LLMError, PaymentRequiredError, RateLimitError

logger = structlog.get_logger(logger_name=__name__)


class AnthropicLLMProvider(ILLMProvider):
    """Chat provider backed by the Anthropic Messages API."""

    def __init__(self, settings: Settings) -> None:
        self._api_key = settings.anthropic_api_key
        self._model = settings.anthropic_model
        self._client = anthropic.AsyncAnthropic(
            api_key=self._api_key or "unset",
            timeout=settings.llm_timeout,
            max_retries=0,
        )

    async def chat(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        temperature: float = 0.7,
        max_tokens: int = 1500,
    ) -> str:
        """Send the conversation with *system_prompt* and join the text blocks of the reply."""
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                system=system_prompt,
                messages=[{"role": m.role, "content": m.content} for m in messages],
                temperature=temperature,
            )
        except anthropic.RateLimitError as exc:
            raise RateLimitError(
                message="Rate limits exceeded, please try again later.",
                provider_name=self.get_provider_name(),
            ) from exc
        except anthropic.APIStatusError as exc:
            if exc.status_code == 402:
                raise PaymentRequiredError(
                    message="Payment required, please add funds to your workspace.",
                    provider_name=self.get_provider_name(),
                ) from exc
            raise LLMError(
                message=f"Anthropic API error: {exc}",
                provider_name=self.get_provider_name(),
                status_code=exc.status_code,
            ) from exc
        except anthropic.APIError as exc:
            raise LLMError(
                message=f"Anthropic API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        text_blocks = [block.text for block in response.content if block.type == "text"]
        if not text_blocks:
            raise LLMError(
                message="Anthropic returned no text content",
                provider_name=self.get_provider_name(),
            )

        logger.info(
            "llm_chat_complete",
            model=self._model,
            provider="anthropic",
            turns=len(messages),
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )
        return "\n".join(text_blocks)

    def is_available(self) -> bool:
        """Return ``True`` if an Anthropic API key is configured."""
        return bool(self._api_key)

    def get_provider_name(self) -> str:
        return "anthropic"
