from autoresponder.services.llm.base import CompletionProvider, CompletionResponse
from autoresponder.services.llm.openai_provider import OpenAIProvider, get_completion_provider

__all__ = ["CompletionProvider", "CompletionResponse", "OpenAIProvider", "get_completion_provider"]
