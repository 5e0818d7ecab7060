"""Owner-facing endpoints for reading and writing reply templates."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from autoresponder.database import get_db
from autoresponder.dependencies import get_current_principal
from autoresponder.schemas.responses import (
    PreviewRequest,
    PreviewResponse,
    ResponsesResponse,
    ResponsesUpdateResponse,
)
from autoresponder.services.auth_service import Principal
from autoresponder.services.errors import ServiceError
from autoresponder.services.llm import get_completion_provider
from autoresponder.services.response_service import get_all, upsert_many
from autoresponder.services.router_service import route

router = APIRouter(prefix="/responses", tags=["responses"])


@router.get("", response_model=ResponsesResponse)
def read_responses(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    return ResponsesResponse(account_id=principal.account_id, responses=get_all(db, principal.account_id))


@router.put("", response_model=ResponsesUpdateResponse)
def write_responses(
    entries: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Upsert every key in the body. Pairs are applied one by one; failures are reported, not rolled back."""
    try:
        result = upsert_many(db, principal.account_id, entries)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ResponsesUpdateResponse(updated=result.updated, failed=result.failed)


@router.post("/preview", response_model=PreviewResponse)
async def preview_reply(
    request: PreviewRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Show the reply an inbound message would get with the caller's current configuration."""
    snapshot = get_all(db, principal.account_id)
    reply = await route(request.message, snapshot, principal.plan, get_completion_provider())
    return PreviewResponse(message=request.message or "", reply=reply)
