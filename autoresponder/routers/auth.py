from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from autoresponder.config import settings
from autoresponder.database import get_db
from autoresponder.dependencies import get_current_principal
from autoresponder.schemas.auth import (
    LoginRequest,
    PrincipalResponse,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
)
from autoresponder.services.account_service import login, register_account
from autoresponder.services.auth_service import Principal
from autoresponder.services.errors import ServiceError

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account; 400 on missing fields or an email/phone already in use."""
    try:
        account = register_account(db, request.email, request.password, request.plan, request.phone)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return RegisterResponse(message="Account created", account_id=account.id)


@router.post("/login", response_model=TokenResponse)
def login_account(request: LoginRequest, db: Session = Depends(get_db)):
    try:
        token = login(db, request.email, request.password)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return TokenResponse(token=token, expires_in=settings.token_ttl_days * 86400)


@router.get("/me", response_model=PrincipalResponse)
def me(principal: Principal = Depends(get_current_principal)):
    return PrincipalResponse(account_id=principal.account_id, email=principal.email, plan=principal.plan.value)
