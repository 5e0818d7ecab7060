"""Resolve an inbound chat message to a reply for one account."""

import asyncio
from typing import Mapping, Optional

from autoresponder.config import settings
from autoresponder.logging_config import get_logger
from autoresponder.services.errors import CompletionError
from autoresponder.services.llm.base import CompletionProvider
from autoresponder.services.plans import Capability, has_capability
from autoresponder.services.response_service import CATALOG_KEY, CUSTOM_PROMPT_KEY, GREETING_KEY

logger = get_logger("router")

DEFAULT_GREETING = (
    "👋 Hi! I'm the virtual assistant for this store.\n"
    "How can I help you?\n"
    "1️⃣ Featured products\n"
    "2️⃣ Check availability\n"
    "3️⃣ Payment methods\n"
    "4️⃣ Talk to customer support"
)
NO_CATALOG_RESPONSE = "No catalog available at the moment."
AI_FALLBACK_NOTICE = "Sorry, I can't answer right now. Please try again in a few minutes."

MENU_KEYS = {
    "1": "option1",
    "2": "option2",
    "3": "option3",
    "4": "option4",
    "catalogo": CATALOG_KEY,
    "catálogo": CATALOG_KEY,
}


def normalize_inbound_text(text: Optional[str]) -> str:
    return (text or "").strip().lower()


def _configured(config: Mapping[str, str], key: str) -> Optional[str]:
    value = config.get(key)
    if value is None or not str(value).strip():
        return None
    return str(value)


def greeting_for(config: Mapping[str, str]) -> str:
    return _configured(config, GREETING_KEY) or DEFAULT_GREETING


def resolve_static_reply(normalized_text: str, config: Mapping[str, str]) -> str:
    """Menu lookup with greeting fallback. Never returns an empty string."""
    key = MENU_KEYS.get(normalized_text)
    if key == CATALOG_KEY:
        return _configured(config, CATALOG_KEY) or NO_CATALOG_RESPONSE
    if key:
        reply = _configured(config, key)
        if reply:
            return reply
    return greeting_for(config)


async def generate_ai_reply(
    provider: Optional[CompletionProvider],
    system_prompt: str,
    user_message: str,
    timeout_seconds: Optional[float] = None,
) -> str:
    """Ask the provider for a reply; any failure degrades to AI_FALLBACK_NOTICE."""
    timeout = timeout_seconds if timeout_seconds is not None else settings.completion_timeout_seconds
    try:
        if provider is None:
            raise CompletionError("No completion provider configured")
        response = await asyncio.wait_for(provider.complete(system_prompt, user_message), timeout=timeout)
        reply = (getattr(response, "content", None) or "").strip()
        if not reply:
            raise CompletionError("Completion returned empty content")
        return reply
    except asyncio.TimeoutError:
        logger.warning("Completion timed out", extra={"context": {"timeout_seconds": timeout}})
    except Exception as exc:
        logger.error("Completion failed", extra={"context": {"error": str(exc)}}, exc_info=True)
    return AI_FALLBACK_NOTICE


async def route(
    inbound_text: Optional[str],
    config: Mapping[str, str],
    plan: object,
    provider: Optional[CompletionProvider] = None,
    *,
    timeout_seconds: Optional[float] = None,
) -> str:
    """Pick the reply for ``inbound_text`` from a snapshot of the account configuration.

    Accounts whose plan carries AI fallback and that configured ``custom_prompt``
    are answered by the completion provider. Everyone else gets the fixed menu:
    "1".."4" map to option1..option4, "catalogo"/"catálogo" to catalog_url, and
    anything else to the greeting.
    """
    normalized = normalize_inbound_text(inbound_text)

    custom_prompt = _configured(config, CUSTOM_PROMPT_KEY)
    if custom_prompt and has_capability(plan, Capability.AI_FALLBACK):
        return await generate_ai_reply(provider, custom_prompt, normalized, timeout_seconds)

    return resolve_static_reply(normalized, config)
