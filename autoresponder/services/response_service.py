"""Per-account response configuration store."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from autoresponder.logging_config import get_logger
from autoresponder.models import Account, ResponseEntry
from autoresponder.services.errors import ServiceError, UnknownAccountError, ValidationError

logger = get_logger("response_service")

GREETING_KEY = "greeting"
CATALOG_KEY = "catalog_url"
CUSTOM_PROMPT_KEY = "custom_prompt"
OPTION_KEYS = ("option1", "option2", "option3", "option4")
KNOWN_KEYS = (GREETING_KEY, *OPTION_KEYS, CATALOG_KEY, CUSTOM_PROMPT_KEY)

MAX_KEY_LENGTH = 64

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@dataclass
class BatchResult:
    updated: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


def normalize_key(key: object) -> str:
    if not isinstance(key, str):
        raise ValidationError("response key must be a string")
    normalized = key.strip()
    if not normalized:
        raise ValidationError("response key must not be empty")
    if len(normalized) > MAX_KEY_LENGTH:
        raise ValidationError(f"response key must be at most {MAX_KEY_LENGTH} characters")
    return normalized


def get_all(db: Session, account_id: int) -> dict[str, str]:
    """Snapshot of every entry for the account, read in one statement."""
    rows = db.query(ResponseEntry.key, ResponseEntry.value).filter(ResponseEntry.account_id == account_id).all()
    return {key: value for key, value in rows}


def _ensure_account(db: Session, account_id: int) -> None:
    exists = db.query(Account.id).filter(Account.id == account_id).first()
    if not exists:
        raise UnknownAccountError(f"Account {account_id} not found")


def _upsert_statement(db: Session, account_id: int, key: str, value: str):
    dialect = db.get_bind().dialect.name
    insert = _UPSERT_DIALECTS.get(dialect)
    if insert is None:
        raise ServiceError(f"Response storage does not support the '{dialect}' database")

    now = datetime.now(timezone.utc)
    stmt = insert(ResponseEntry).values(account_id=account_id, key=key, value=value, updated_at=now)
    return stmt.on_conflict_do_update(
        index_elements=[ResponseEntry.account_id, ResponseEntry.key],
        set_={"value": value, "updated_at": now},
    )


def upsert(db: Session, account_id: int, key: str, value: object) -> None:
    """Insert or replace the value stored under (account_id, key)."""
    key = normalize_key(key)
    if value is None:
        raise ValidationError(f"value for '{key}' must not be null")
    if not isinstance(value, str):
        raise ValidationError(f"value for '{key}' must be a string")

    _ensure_account(db, account_id)
    db.execute(_upsert_statement(db, account_id, key, value))
    db.commit()


def upsert_many(db: Session, account_id: int, entries: dict) -> BatchResult:
    """Upsert each pair on its own; a failing pair does not undo the ones before it."""
    _ensure_account(db, account_id)

    result = BatchResult()
    for raw_key, value in entries.items():
        label = str(raw_key)
        try:
            upsert(db, account_id, raw_key, value)
        except ValidationError as exc:
            result.failed[label] = exc.message
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(
                "Response upsert failed",
                extra={"context": {"account_id": account_id, "key": label, "error": str(exc)}},
            )
            result.failed[label] = "storage error"
        else:
            result.updated.append(label.strip())

    logger.info(
        "Responses updated",
        extra={"context": {"account_id": account_id, "updated": result.updated, "failed": list(result.failed)}},
    )
    return result
