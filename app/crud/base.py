from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import InfrastructureError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(db: Session, operation: str) -> Iterator[None]:
    """
    Roll back and surface any store failure as InfrastructureError.

    Domain errors raised inside the block pass through untouched.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning(
            "store_operation_failed operation=%s error=%s",
            operation,
            exc.__class__.__name__,
        )
        raise InfrastructureError(f"Store failure during {operation}.") from exc
