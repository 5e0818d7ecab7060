from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from autoresponder.database import get_db
from autoresponder.dependencies import require_capability
from autoresponder.schemas.responses import AIFeatureResponse
from autoresponder.services.auth_service import Principal
from autoresponder.services.plans import Capability
from autoresponder.services.response_service import CUSTOM_PROMPT_KEY, get_all

router = APIRouter(prefix="/features", tags=["features"])


@router.get("/ai", response_model=AIFeatureResponse)
def ai_feature_status(
    principal: Principal = Depends(require_capability(Capability.ADVANCED_FEATURES)),
    db: Session = Depends(get_db),
):
    """Plan-gated: only pro and premium accounts reach this endpoint."""
    snapshot = get_all(db, principal.account_id)
    custom_prompt = (snapshot.get(CUSTOM_PROMPT_KEY) or "").strip()
    return AIFeatureResponse(
        plan=principal.plan.value,
        ai_fallback=True,
        custom_prompt_configured=bool(custom_prompt),
    )
