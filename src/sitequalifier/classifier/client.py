"""
OpenRouter chat-completions client for the classification service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from openai import AsyncOpenAI

from sitequalifier.errors import EmptyResponseError

if TYPE_CHECKING:
    from sitequalifier.config.config import ClassifierConfig

logger = structlog.get_logger(__name__)


class OpenRouterClient:
    """
    Sends one system directive plus one user message and returns the text
    of the first choice.

    The SDK's own retries are disabled; RetryExecutor owns the retry policy.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://openrouter.ai/api/v1",
        model: str = "openai/gpt-4o-mini",
        temperature: float = 0.1,
        max_tokens: int = 1000,
        timeout: float = 60.0,
        default_headers: Optional[Dict[str, str]] = None,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            default_headers=default_headers,
        )

    @classmethod
    def from_config(cls, api_key: str, config: ClassifierConfig) -> OpenRouterClient:
        return cls(
            api_key,
            base_url=config.base_url,
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.request_timeout,
            default_headers={"HTTP-Referer": config.http_referer, "X-Title": config.app_title},
        )

    def _request(self, system_prompt: str, user_message: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            "response_format": {"type": "json_object"},
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    async def complete(self, system_prompt: str, user_message: str) -> str:
        completion = await self._client.chat.completions.create(**self._request(system_prompt, user_message))
        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise EmptyResponseError()
        logger.debug("Classification service answered", model=self.model, response_length=len(content))
        return content

    async def close(self) -> None:
        await self._client.close()
