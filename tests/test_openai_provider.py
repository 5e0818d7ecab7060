import asyncio
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import httpx
import pytest

from autoresponder.services.errors import CompletionError
from autoresponder.services.llm import openai_provider
from autoresponder.services.llm.openai_provider import OpenAIProvider, get_completion_provider


def _mock_async_client(mock_client_class, response=None, side_effect=None):
    mock_client = MagicMock()
    mock_client.post = AsyncMock(return_value=response, side_effect=side_effect)
    mock_client_class.return_value.__aenter__.return_value = mock_client
    mock_client_class.return_value.__aexit__.return_value = False
    return mock_client


def _response(status_code=200, payload=None):
    response = Mock()
    response.status_code = status_code
    response.text = "error body"
    response.json.return_value = payload or {}
    return response


class TestOpenAIProvider:
    @patch("autoresponder.services.llm.openai_provider.httpx.AsyncClient")
    def test_sends_system_and_user_messages(self, mock_client_class):
        payload = {"model": "gpt-test", "choices": [{"message": {"content": "Hello!"}}], "usage": {"total_tokens": 5}}
        mock_client = _mock_async_client(mock_client_class, _response(200, payload))
        provider = OpenAIProvider(api_key="test-key", default_model="gpt-test")

        result = asyncio.run(provider.complete("Be nice", "hi"))

        assert result.content == "Hello!"
        assert result.model == "gpt-test"
        call_args = mock_client.post.call_args
        assert call_args[1]["headers"]["Authorization"] == "Bearer test-key"
        assert call_args[1]["json"]["messages"] == [
            {"role": "system", "content": "Be nice"},
            {"role": "user", "content": "hi"},
        ]

    @patch("autoresponder.services.llm.openai_provider.httpx.AsyncClient")
    def test_non_200_raises(self, mock_client_class):
        _mock_async_client(mock_client_class, _response(500))
        provider = OpenAIProvider(api_key="test-key")

        with pytest.raises(CompletionError):
            asyncio.run(provider.complete("Be nice", "hi"))

    @patch("autoresponder.services.llm.openai_provider.httpx.AsyncClient")
    def test_missing_content_raises(self, mock_client_class):
        _mock_async_client(mock_client_class, _response(200, {"choices": []}))
        provider = OpenAIProvider(api_key="test-key")

        with pytest.raises(CompletionError):
            asyncio.run(provider.complete("Be nice", "hi"))

    @patch("autoresponder.services.llm.openai_provider.httpx.AsyncClient")
    def test_transport_error_raises(self, mock_client_class):
        _mock_async_client(mock_client_class, side_effect=httpx.ConnectTimeout("timed out"))
        provider = OpenAIProvider(api_key="test-key")

        with pytest.raises(CompletionError):
            asyncio.run(provider.complete("Be nice", "hi"))


class TestGetCompletionProvider:
    def test_returns_none_without_api_key(self):
        with patch.object(openai_provider.settings, "openai_api_key", ""):
            assert get_completion_provider() is None

    def test_builds_provider_once(self):
        with patch.object(openai_provider.settings, "openai_api_key", "test-key"), patch.object(
            openai_provider, "_provider", None
        ):
            first = get_completion_provider()
            second = get_completion_provider()

        assert isinstance(first, OpenAIProvider)
        assert first is second
