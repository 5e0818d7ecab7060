from autoresponder.schemas.auth import LoginRequest, PrincipalResponse, RegisterRequest, RegisterResponse, TokenResponse
from autoresponder.schemas.responses import (
    AIFeatureResponse,
    PreviewRequest,
    PreviewResponse,
    ResponsesResponse,
    ResponsesUpdateResponse,
)

__all__ = [
    "RegisterRequest",
    "RegisterResponse",
    "LoginRequest",
    "TokenResponse",
    "PrincipalResponse",
    "ResponsesResponse",
    "ResponsesUpdateResponse",
    "PreviewRequest",
    "PreviewResponse",
    "AIFeatureResponse",
]
