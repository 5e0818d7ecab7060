from dataclasses import dataclass
from typing import Optional

from autoresponder.services.errors import InvalidTokenError, UnauthenticatedError
from autoresponder.services.plans import Plan, parse_plan
from autoresponder.services.security import decode_access_token


@dataclass(frozen=True)
class Principal:
    account_id: int
    email: str
    plan: Plan


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an ``Authorization: Bearer <token>`` header value."""
    if not authorization or not authorization.strip():
        raise UnauthenticatedError("Missing Authorization header")

    parts = authorization.strip().split()
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise UnauthenticatedError("Authorization header must be 'Bearer <token>'")
    return parts[1]


def authenticate(credential: Optional[str]) -> Principal:
    """Validate a bearer token and build the caller's principal. No state is touched."""
    if not credential:
        raise UnauthenticatedError("Missing credential")

    claims = decode_access_token(credential)

    try:
        account_id = int(claims.get("account_id", claims.get("sub")))
    except (TypeError, ValueError) as exc:
        raise InvalidTokenError("Token has no account id") from exc

    email = claims.get("email")
    plan = parse_plan(claims.get("plan"))
    if not email or plan is None:
        raise InvalidTokenError("Token claims are incomplete")

    return Principal(account_id=account_id, email=email, plan=plan)
