"""OpenRouter chat backend with a model fallback chain."""

import logging
import re

from openai import APITimeoutError, AsyncOpenAI, RateLimitError
from openai.types.chat import ChatCompletionMessageParam

from .protocols import RetryCallback

LOGGER = logging.getLogger("prefixbot.chat")

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

FALLBACK_MODELS: list[str] = [
    "deepseek/deepseek-r1-0528:free",
    "z-ai/glm-4.5-air:free",
    "openai/gpt-oss-120b:free",
    "meta-llama/llama-3.3-70b-instruct:free",
]

SYSTEM_PROMPT = """You are a helpful Discord bot assistant.

Rules:
- Keep answers short: a few sentences, at most 300 words
- Plain text, no headings
- Friendly and direct; do not output your reasoning

Refuse hateful, violent, sexual or illegal requests politely.
"""

_THINK_BLOCK = re.compile(r"<think>[\s\S]*?</think>")
_UNCLOSED_THINK = re.compile(r"<think>[\s\S]*$")


def strip_reasoning(text: str) -> str:
    """Remove <think> blocks some free models leak into their answers."""
    text = _THINK_BLOCK.sub("", text)
    text = _UNCLOSED_THINK.sub("", text)
    return text.strip()


class OpenRouterChatBackend:
    def __init__(
        self,
        api_key: str,
        model: str = "openrouter/free",
        timeout: float = 45.0,
        client: AsyncOpenAI | None = None,
    ):
        if not api_key or not api_key.strip():
            raise ValueError("OPENROUTER_API_KEY is required for the chat backend")

        self.client = client or AsyncOpenAI(
            base_url=OPENROUTER_BASE_URL,
            api_key=api_key,
            timeout=timeout,
        )
        self.models = [model] + [m for m in FALLBACK_MODELS if m != model]
        LOGGER.info(f"Chat backend initialized: primary={model}, fallbacks={len(self.models) - 1}")

    async def chat(
        self,
        prompt: str,
        context: str | None = None,
        on_retry: RetryCallback | None = None,
    ) -> str:
        messages: list[ChatCompletionMessageParam] = [{"role": "system", "content": SYSTEM_PROMPT}]
        if context:
            messages.append({"role": "system", "content": f"Additional context: {context}"})
        messages.append({"role": "user", "content": prompt})

        last_error: Exception | None = None

        for index, model in enumerate(self.models):
            next_model = self.models[index + 1] if index + 1 < len(self.models) else None
            try:
                completion = await self.client.chat.completions.create(
                    model=model,
                    max_tokens=800,
                    messages=messages,
                )
            except (RateLimitError, APITimeoutError) as e:
                LOGGER.warning(f"Chat [{model}] {type(e).__name__}, trying next model")
                last_error = e
                if on_retry and next_model:
                    await on_retry(model, next_model)
                continue

            if not completion.choices:
                LOGGER.warning(f"Chat [{model}]: no choices, trying next model")
                continue

            raw = completion.choices[0].message.content or ""
            response = strip_reasoning(raw)
            LOGGER.info(f"Chat [{model}]: raw={len(raw)}, clean={len(response)}")
            if response:
                return response

        if last_error is not None:
            raise last_error
        raise RuntimeError("Chat backend returned an empty response from every model")
