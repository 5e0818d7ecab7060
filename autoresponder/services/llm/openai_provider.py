from typing import Optional

import httpx

from autoresponder.config import settings
from autoresponder.logging_config import get_logger
from autoresponder.services.errors import CompletionError
from autoresponder.services.llm.base import CompletionProvider, CompletionResponse

logger = get_logger("llm.openai")


class OpenAIProvider(CompletionProvider):
    """OpenAI chat completions provider."""

    def __init__(
        self,
        api_key: str,
        default_model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1/chat/completions",
        timeout_seconds: float = 15.0,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ):
        self.api_key = api_key
        self.default_model = default_model
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def complete(self, system_prompt: str, user_message: str) -> CompletionResponse:
        payload = {
            "model": self.default_model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            "temperature": self.temperature,
            "max_completion_tokens": self.max_tokens,
        }
        logger.debug(f"OpenAI request: model={self.default_model}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(
                    self.base_url,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
        except httpx.HTTPError as exc:
            raise CompletionError(f"OpenAI request failed: {exc}") from exc

        logger.debug(f"OpenAI response status: {response.status_code}")

        if response.status_code != 200:
            logger.error(f"OpenAI error: {response.text}")
            raise CompletionError(f"OpenAI API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise CompletionError("OpenAI returned a non-JSON body") from exc

        choices = data.get("choices") or []
        content = ""
        if choices:
            message = choices[0].get("message") or {}
            content = message.get("content") or ""
        if not content.strip():
            raise CompletionError("OpenAI returned no content")

        return CompletionResponse(
            content=content,
            model=data.get("model", self.default_model),
            usage=data.get("usage"),
        )


_provider: Optional[OpenAIProvider] = None


def get_completion_provider() -> Optional[CompletionProvider]:
    """Lazily build the provider from settings; None when no API key is configured."""
    global _provider
    if not settings.openai_api_key:
        return None
    if _provider is None:
        _provider = OpenAIProvider(
            api_key=settings.openai_api_key,
            default_model=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout_seconds=settings.completion_timeout_seconds,
            temperature=settings.completion_temperature,
            max_tokens=settings.completion_max_tokens,
        )
    return _provider
