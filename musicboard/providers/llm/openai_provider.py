"""OpenAI-compatible chat provider.

Wraps the ``openai`` async client to implement :class:`ILLMProvider`.
The client is pointed at ``llm_base_url`` (by default an AI gateway that
fronts Gemini behind the OpenAI chat-completions API), so the same
adapter serves OpenAI itself or any compatible gateway.

Gateway status codes matter to the page: 429 and 402 are surfaced as
:class:`RateLimitError` and :class:`PaymentRequiredError` so the
``music-chat`` route can pass them through with their own messages.
"""

from __future__ import annotations

import openai
import structlog

from musicboard.config.settings import Settings
from musicboard.interfaces.llm_provider import ILLMProvider
from musicboard.models.chat import ChatMessage
from musicboard.utils.errors import LLMError, PaymentRequiredError, RateLimitError

logger = structlog.get_logger(logger_name=__name__)


class OpenAILLMProvider(ILLMProvider):
    """Chat provider backed by an OpenAI-compatible chat-completions API."""

    def __init__(self, settings: Settings) -> None:
        self._api_key = settings.llm_api_key
        self._model = settings.llm_model
        self._timeout = settings.llm_timeout

        client_kwargs: dict = {
            "api_key": self._api_key or "unset",
            "timeout": openai.Timeout(self._timeout, connect=5.0),
            "max_retries": 0,
        }
        if settings.llm_base_url:
            client_kwargs["base_url"] = settings.llm_base_url
        self._client = openai.AsyncOpenAI(**client_kwargs)

        self._provider_label = "openai-compatible" if settings.llm_base_url else "openai"

    # ------------------------------------------------------------------
    # ILLMProvider implementation
    # ------------------------------------------------------------------

    async def chat(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        temperature: float = 0.7,
        max_tokens: int = 1500,
    ) -> str:
        """Send the system prompt plus the conversation and return the reply text."""
        payload = [{"role": "system", "content": system_prompt}]
        payload.extend({"role": m.role, "content": m.content} for m in messages)

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=payload,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.RateLimitError as exc:
            logger.warning("llm_rate_limited", provider=self._provider_label)
            raise RateLimitError(
                message="Rate limits exceeded, please try again later.",
                provider_name=self.get_provider_name(),
            ) from exc
        except openai.APIStatusError as exc:
            if exc.status_code == 402:
                logger.warning("llm_payment_required", provider=self._provider_label)
                raise PaymentRequiredError(
                    message="Payment required, please add funds to your workspace.",
                    provider_name=self.get_provider_name(),
                ) from exc
            raise LLMError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
                status_code=exc.status_code,
            ) from exc
        except openai.APITimeoutError as exc:
            raise LLMError(
                message=f"{self._provider_label} timed out after {self._timeout:g}s",
                provider_name=self.get_provider_name(),
            ) from exc
        except openai.APIError as exc:
            raise LLMError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMError(
                message=f"{self._provider_label} returned empty response",
                provider_name=self.get_provider_name(),
            )

        logger.info(
            "llm_chat_complete",
            model=self._model,
            provider=self._provider_label,
            turns=len(messages),
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return content

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured (doesn't verify it works)."""
        return bool(self._api_key)

    def get_provider_name(self) -> str:
        return self._provider_label
