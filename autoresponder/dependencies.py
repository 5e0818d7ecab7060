from typing import Optional

from fastapi import Depends, Header, HTTPException

from autoresponder.services.auth_service import Principal, authenticate, extract_bearer_token
from autoresponder.services.errors import ServiceError, UnauthenticatedError
from autoresponder.services.plans import Capability, authorize, plans_for


def get_current_principal(authorization: Optional[str] = Header(default=None)) -> Principal:
    """401 for a missing/malformed header, 403 for a token that fails verification."""
    try:
        token = extract_bearer_token(authorization)
        return authenticate(token)
    except UnauthenticatedError as e:
        headers = {"WWW-Authenticate": "Bearer"} if e.status_code == 401 else None
        raise HTTPException(status_code=e.status_code, detail=e.message, headers=headers)


def require_capability(capability: Capability):
    """Dependency factory gating an endpoint on the plans allowed for ``capability``."""
    allowed_plans = plans_for(capability)

    def _dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        try:
            authorize(principal, allowed_plans)
        except ServiceError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)
        return principal

    return _dependency
