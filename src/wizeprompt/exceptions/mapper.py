import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .integrity_classifier import classify_integrity_error
from .base import RepositoryError, PersistenceError

logger = logging.getLogger(__name__)


def raise_persistence_error(exc: IntegrityError, model_name: str | None = None) -> None:
    """
    Log the classified integrity violation and raise it as a PersistenceError
    carrying the database's own message.
    """
    violation = classify_integrity_error(exc)
    raw = str(exc.orig) if exc.orig is not None else str(exc)

    logger.info(
        "mapper.integrity_violation",
        extra={
            "model": model_name or "Record",
            "violation": violation.kind.value,
            "table": violation.table,
            "fields": violation.columns,
            "constraint": violation.constraint,
            "referenced": violation.referenced_entity,
        },
    )
    raise PersistenceError(
        raw,
        fields=violation.columns,
        constraint=violation.constraint,
        violation=violation,
    ) from exc


async def _safe_rollback(db: AsyncSession, model_name: str | None) -> None:
    try:
        await db.rollback()
    except Exception:
        logger.exception("mapper.rollback_failed", extra={"model": model_name})


@asynccontextmanager
async def db_error_handler(db: AsyncSession, model_name: str | None = None):
    """
    Usage:
        async with db_error_handler(self.db, self.model.__name__):
            ... DB ops that may raise ...

    Rolls back on error. Application errors pass through unchanged; integrity
    violations and unexpected failures become PersistenceError with the raw text.
    """
    try:
        yield
    except RepositoryError:
        await _safe_rollback(db, model_name)
        raise
    except IntegrityError as exc:
        await _safe_rollback(db, model_name)
        raise_persistence_error(exc, model_name)
    except Exception as exc:
        await _safe_rollback(db, model_name)
        logger.exception("mapper.unexpected_db_error", extra={"model": model_name})
        raise PersistenceError(str(exc)) from exc
