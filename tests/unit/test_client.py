"""
Tests for the OpenRouter client wrapper.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from sitequalifier.classifier import OpenRouterClient
from sitequalifier.config import ClassifierConfig
from sitequalifier.errors import EmptyResponseError
from sitequalifier.protocols import ClassificationService
from tests.helpers import completion


def _sdk_client(response=None) -> MagicMock:
    sdk = MagicMock()
    sdk.chat.completions.create = AsyncMock(return_value=response)
    sdk.close = AsyncMock()
    return sdk


@pytest.mark.unit
class TestOpenRouterClient:
    """Test OpenRouterClient."""

    @pytest.mark.asyncio
    async def test_complete_returns_first_choice_text(self):
        sdk = _sdk_client(completion('{"verdict": "QUALIFY"}'))
        client = OpenRouterClient("sk-test", client=sdk)

        text = await client.complete("system", "user")

        assert text == '{"verdict": "QUALIFY"}'
        sdk.chat.completions.create.assert_awaited_once_with(
            model="openai/gpt-4o-mini",
            messages=[
                {"role": "system", "content": "system"},
                {"role": "user", "content": "user"},
            ],
            response_format={"type": "json_object"},
            max_tokens=1000,
            temperature=0.1,
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, ""])
    async def test_empty_content_raises(self, content):
        client = OpenRouterClient("sk-test", client=_sdk_client(completion(content)))

        with pytest.raises(EmptyResponseError, match="No response from AI"):
            await client.complete("system", "user")

    @pytest.mark.asyncio
    async def test_no_choices_raises(self):
        response = MagicMock()
        response.choices = []
        client = OpenRouterClient("sk-test", client=_sdk_client(response))

        with pytest.raises(EmptyResponseError):
            await client.complete("system", "user")

    @pytest.mark.asyncio
    async def test_transport_errors_propagate(self):
        sdk = _sdk_client()
        sdk.chat.completions.create.side_effect = Exception("429 Too Many Requests")
        client = OpenRouterClient("sk-test", client=sdk)

        with pytest.raises(Exception, match="429"):
            await client.complete("system", "user")

    def test_from_config_builds_sdk_client(self):
        config = ClassifierConfig(model="openai/gpt-4o", request_timeout=15.0)

        with patch("sitequalifier.classifier.client.AsyncOpenAI") as sdk_cls:
            client = OpenRouterClient.from_config("sk-test", config)

        sdk_cls.assert_called_once_with(
            api_key="sk-test",
            base_url="https://openrouter.ai/api/v1",
            timeout=15.0,
            max_retries=0,
            default_headers={"HTTP-Referer": "https://apify.com", "X-Title": "AI Website Qualifying Agent"},
        )
        assert client.model == "openai/gpt-4o"

    @pytest.mark.asyncio
    async def test_close_closes_sdk_client(self):
        sdk = _sdk_client()

        await OpenRouterClient("sk-test", client=sdk).close()

        sdk.close.assert_awaited_once()

    def test_satisfies_service_protocol(self):
        assert isinstance(OpenRouterClient("sk-test", client=_sdk_client()), ClassificationService)
