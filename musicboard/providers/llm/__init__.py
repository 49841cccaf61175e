"""Chat-model adapters.

Two concrete implementations of ILLMProvider (musicboard/interfaces/llm_provider.py):
    - OpenAILLMProvider    -- any OpenAI-compatible chat-completions gateway
    - AnthropicLLMProvider -- Claude via the Messages API

main.py prefers the OpenAI-compatible gateway when LLM_API_KEY is set and
falls back to Anthropic when only ANTHROPIC_API_KEY is.
"""

from musicboard.providers.llm.anthropic_provider import AnthropicLLMProvider
from musicboard.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["AnthropicLLMProvider", "OpenAILLMProvider"]
