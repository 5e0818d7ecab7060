"""Messaging-provider webhook. Every path answers 200 with a TwiML envelope."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from autoresponder.database import get_db
from autoresponder.logging_config import ContextLogger, get_logger, mask_identity
from autoresponder.services.account_service import normalize_channel_identity, resolve_account_by_channel_identity
from autoresponder.services.errors import UnknownAccountError
from autoresponder.services.llm import get_completion_provider
from autoresponder.services.reply_service import (
    ACCOUNT_NOT_FOUND_RESPONSE,
    GENERIC_ERROR_RESPONSE,
    REPLY_MEDIA_TYPE,
    build_reply_envelope,
)
from autoresponder.services.response_service import get_all
from autoresponder.services.router_service import route

logger = get_logger("webhook")

router = APIRouter()


def _reply(text: str) -> Response:
    return Response(content=build_reply_envelope(text), media_type=REPLY_MEDIA_TYPE, status_code=200)


async def _read_form(request: Request) -> tuple[str | None, str | None]:
    try:
        form = await request.form()
    except Exception as exc:
        logger.warning("Webhook form could not be parsed", extra={"context": {"error": str(exc)}})
        return None, None
    body = form.get("Body")
    sender = form.get("From")
    return (body if isinstance(body, str) else None), (sender if isinstance(sender, str) else None)


@router.post("/webhook")
async def handle_webhook(request: Request, db: Session = Depends(get_db)):
    """Handle an inbound message: find the account by sender, then route against its configuration."""
    message_text, sender = await _read_form(request)
    identity = normalize_channel_identity(sender)
    request_logger = ContextLogger(logger, {"sender": mask_identity(identity)})
    request_logger.info("Webhook received")

    try:
        account = resolve_account_by_channel_identity(db, identity)
        snapshot = get_all(db, account.id)
    except UnknownAccountError:
        request_logger.info("Webhook sender has no account")
        return _reply(ACCOUNT_NOT_FOUND_RESPONSE)
    except SQLAlchemyError as exc:
        request_logger.error("Webhook store lookup failed", context={"error": str(exc)}, exc_info=True)
        return _reply(GENERIC_ERROR_RESPONSE)

    request_logger = request_logger.bind(account_id=account.id, plan=account.plan)
    try:
        reply = await route(message_text, snapshot, account.plan, get_completion_provider())
    except Exception as exc:
        request_logger.error("Webhook routing failed", context={"error": str(exc)}, exc_info=True)
        return _reply(GENERIC_ERROR_RESPONSE)

    request_logger.info("Webhook replied", context={"reply_length": len(reply)})
    return _reply(reply)


@router.get("/webhook")
async def handle_webhook_probe():
    """Health probe for provider console checks; real webhooks must use POST."""
    return {"ok": True, "message": "Use POST with form-encoded Body and From"}
