from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class CompletionResponse:
    content: str
    model: str
    usage: Optional[dict] = None


class CompletionProvider(ABC):
    """Abstract base class for language-model completion providers."""

    @abstractmethod
    async def complete(self, system_prompt: str, user_message: str) -> CompletionResponse:
        """Return the model's reply to ``user_message`` under ``system_prompt``."""
        pass
