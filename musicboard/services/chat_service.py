"""AI music recommender chat.

Prepends the Musicboard recommender persona to the page's conversation,
asks the configured chat model for the next turn, and splits the reply
into prose and structured album picks with
:func:`~musicboard.services.recommendation_parser.parse_recommendations`.
"""

from __future__ import annotations

import structlog

from musicboard.interfaces.llm_provider import ILLMProvider
from musicboard.models.chat import ChatMessage, ChatReply
from musicboard.services.recommendation_parser import RECOMMENDATION_MARKER, parse_recommendations
from musicboard.utils.errors import NotConfiguredError, ValidationFailureError

logger = structlog.get_logger(logger_name=__name__)

SYSTEM_PROMPT = f"""\
You are an AI music discovery assistant for Musicboard, a music platform \
similar to Letterboxd for movies. Your role is to:

- Help users discover new music based on their preferences
- Recommend albums, artists, and genres using collaborative filtering concepts
- Explain why recommendations match their taste
- Be conversational, friendly, and enthusiastic about music
- Reference specific albums, artists, and genres
- Provide match percentages (e.g., "92% match with your taste")
- Use emojis sparingly but appropriately
- Keep responses concise but informative

When recommending albums, format them as JSON objects within your response \
that can be parsed, like this:
{RECOMMENDATION_MARKER} {{"albumTitle": "Album Name", "artist": "Artist Name", "cover": "🎸", \
"matchPercentage": 92, "genres": ["indie", "rock"], "reasoning": "Loved by fans of similar artists"}}

Always be helpful and guide users to discover music they'll genuinely enjoy. \
Ask clarifying questions to better understand their taste."""


class MusicChatService:
    """Runs one recommender turn.

    Parameters
    ----------
    llm_provider:
        The chat model, or ``None`` when no LLM key is configured.
    temperature, max_tokens:
        Sampling settings passed to every call.
    system_prompt:
        Override for :data:`SYSTEM_PROMPT`.
    """

    def __init__(
        self,
        llm_provider: ILLMProvider | None,
        temperature: float = 0.7,
        max_tokens: int = 1500,
        system_prompt: str = SYSTEM_PROMPT,
    ) -> None:
        self._llm = llm_provider
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._system_prompt = system_prompt

    def is_available(self) -> bool:
        return self._llm is not None and self._llm.is_available()

    async def reply(self, messages: list[ChatMessage]) -> ChatReply:
        """Return the assistant's next turn for *messages*.

        Raises
        ------
        ValidationFailureError
            *messages* is empty.
        NotConfiguredError
            No chat model is configured.
        RateLimitError, PaymentRequiredError, LLMError
            Propagated from the provider.
        """
        if not messages:
            raise ValidationFailureError(message="messages must not be empty", provider_name="music-chat")
        if self._llm is None or not self._llm.is_available():
            raise NotConfiguredError(message="AI chat is not configured", provider_name="music-chat")

        text = await self._llm.chat(
            self._system_prompt,
            messages,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        reply = parse_recommendations(text)

        logger.info(
            "chat_reply_complete",
            provider=self._llm.get_provider_name(),
            turns=len(messages),
            recommendations=len(reply.recommendations),
        )
        return reply
