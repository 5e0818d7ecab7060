from typing import Optional

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    plan: Optional[str] = "basic"
    phone: Optional[str] = None


class RegisterResponse(BaseModel):
    message: str
    account_id: int


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int


class PrincipalResponse(BaseModel):
    account_id: int
    email: str
    plan: str
