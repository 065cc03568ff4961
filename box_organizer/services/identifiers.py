"""Generated identifiers: box short ids and QR tokens."""
import secrets
import string
from typing import Callable, Optional, TypeVar

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from box_organizer.config import settings
from box_organizer.errors import IdentifierExhaustedError

logger = structlog.get_logger(__name__)

SHORT_ID_LENGTH = 10
SHORT_ID_ALPHABET = string.ascii_letters + string.digits

QR_TOKEN_LENGTH = 6
QR_TOKEN_ALPHABET = string.ascii_uppercase + string.digits

T = TypeVar("T")


def generate_short_id() -> str:
    """Random 10-character public id for a box."""
    return "".join(secrets.choice(SHORT_ID_ALPHABET) for _ in range(SHORT_ID_LENGTH))


def generate_qr_token(prefix: Optional[str] = None) -> str:
    """Random QR token in the printed ``XX-XXXXXX`` format."""
    if prefix is None:
        prefix = settings.QR_TOKEN_PREFIX
    suffix = "".join(secrets.choice(QR_TOKEN_ALPHABET) for _ in range(QR_TOKEN_LENGTH))
    return f"{prefix}-{suffix}"


def _attempts(max_attempts: Optional[int]) -> int:
    return settings.SHORT_ID_MAX_ATTEMPTS if max_attempts is None else max_attempts


def insert_with_identifier(
    db: Session,
    build: Callable[[str], T],
    generate: Callable[[], str],
    exists: Callable[[str], bool],
    column: str,
    max_attempts: Optional[int] = None,
) -> T:
    """
    Insert the row ``build(candidate)`` under a freshly generated identifier.

    Each insert runs in a savepoint. A unique violation on ``column`` (a
    concurrent writer took the value after the ``exists`` check) rolls the
    savepoint back and retries with a new candidate. Other integrity errors
    propagate. After ``max_attempts`` collisions ``IdentifierExhaustedError``
    is raised.
    """
    max_attempts = _attempts(max_attempts)
    for attempt in range(1, max_attempts + 1):
        candidate = generate()
        if exists(candidate):
            logger.info("identifier_collision", candidate=candidate, attempt=attempt)
            continue
        row = build(candidate)
        try:
            with db.begin_nested():
                db.add(row)
                db.flush()
        except IntegrityError as exc:
            if column not in str(exc.orig):
                raise
            logger.info("identifier_insert_collision", candidate=candidate, attempt=attempt)
            continue
        return row
    logger.warning("identifier_exhausted", attempts=max_attempts)
    raise IdentifierExhaustedError()
