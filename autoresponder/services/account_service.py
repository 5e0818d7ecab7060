"""Account registration, login and channel identity lookup."""

import re
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from autoresponder.logging_config import get_logger
from autoresponder.models import Account
from autoresponder.services.errors import ConflictError, ForbiddenError, UnknownAccountError, ValidationError
from autoresponder.services.plans import Plan, parse_plan
from autoresponder.services.security import create_access_token, hash_password, verify_password

logger = get_logger("account_service")

# Transport scheme label in front of a sender id, e.g. "whatsapp:+34600111222".
_SCHEME_PREFIX = re.compile(r"^[a-z][a-z0-9+.-]*:", re.IGNORECASE)
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
# bcrypt only hashes the first 72 bytes and newer releases refuse longer input.
MAX_PASSWORD_BYTES = 72


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def normalize_channel_identity(raw: Optional[str]) -> str:
    """Strip the transport scheme label and surrounding whitespace from a sender id."""
    value = (raw or "").strip()
    value = _SCHEME_PREFIX.sub("", value, count=1)
    return value.strip()


def register_account(
    db: Session,
    email: Optional[str],
    password: Optional[str],
    plan: object = Plan.BASIC,
    phone: Optional[str] = None,
) -> Account:
    """Create an account. Raises ValidationError or ConflictError; nothing is written on failure."""
    email = normalize_email(email)
    if not email or not password:
        raise ValidationError("email and password are required")
    if not _EMAIL_PATTERN.match(email):
        raise ValidationError("email is not valid")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")

    parsed_plan = parse_plan(plan if plan is not None else Plan.BASIC)
    if parsed_plan is None:
        raise ValidationError(f"plan must be one of: {', '.join(p.value for p in Plan)}")

    normalized_phone = normalize_channel_identity(phone) or None

    if db.query(Account).filter(Account.email == email).first():
        raise ConflictError("email is already registered")
    if normalized_phone and db.query(Account).filter(Account.phone == normalized_phone).first():
        raise ConflictError("phone is already registered")

    account = Account(
        email=email,
        phone=normalized_phone,
        password_hash=hash_password(password),
        plan=parsed_plan.value,
        created_at=datetime.now(timezone.utc),
    )
    db.add(account)
    try:
        db.commit()
    except IntegrityError as exc:
        # Concurrent registration won the unique constraint.
        db.rollback()
        raise ConflictError("email or phone is already registered") from exc
    db.refresh(account)

    logger.info("Account registered", extra={"context": {"account_id": account.id, "plan": account.plan}})
    return account


def authenticate_credentials(db: Session, email: Optional[str], password: Optional[str]) -> Account:
    email = normalize_email(email)
    if not email or not password:
        raise ValidationError("email and password are required")

    account = db.query(Account).filter(Account.email == email).first()
    if not account or not verify_password(password, account.password_hash):
        raise ForbiddenError("Invalid email or password")
    return account


def issue_token(account: Account) -> str:
    return create_access_token(
        {
            "sub": str(account.id),
            "account_id": account.id,
            "email": account.email,
            "plan": account.plan,
        }
    )


def login(db: Session, email: Optional[str], password: Optional[str]) -> str:
    """Verify credentials and return a signed bearer token."""
    account = authenticate_credentials(db, email, password)
    logger.info("Account logged in", extra={"context": {"account_id": account.id}})
    return issue_token(account)


def resolve_account_by_channel_identity(db: Session, channel_identity: Optional[str]) -> Account:
    identity = normalize_channel_identity(channel_identity)
    if not identity:
        raise UnknownAccountError("Missing sender identity")

    account = db.query(Account).filter(Account.phone == identity).first()
    if not account:
        raise UnknownAccountError(f"No account for sender '{identity}'")
    return account
