"""Run a block of repository calls as one transaction with bounded retries."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlmodel import Session

from ..errors import ConflictError, DailyBudgetError
from ..infra.database import SessionFactory

T = TypeVar("T")

DEFAULT_RETRY_ATTEMPTS = 3

# serialization_failure, deadlock_detected
_TRANSIENT_SQLSTATES = {"40001", "40P01"}


def is_transient(exc: DBAPIError) -> bool:
    """Return True for lock or serialization failures worth retrying."""

    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _TRANSIENT_SQLSTATES:
        return True
    message = str(orig or exc).lower()
    return "database is locked" in message or "database table is locked" in message


def run_unit_of_work(
    session_factory: SessionFactory,
    work: Callable[[Session], T],
    *,
    logger: logging.Logger,
    operation: str,
    attempts: int = DEFAULT_RETRY_ATTEMPTS,
) -> T:
    """Execute ``work`` inside one session; commit on success, roll back on error.

    Business errors propagate untouched. Transient lock failures restart the
    whole unit up to ``attempts`` times and then surface as ConflictError.
    Any other persistence error is logged and re-raised unchanged.
    """

    attempts = max(1, attempts)
    for attempt in range(1, attempts + 1):
        try:
            with session_factory() as session:
                return work(session)
        except DailyBudgetError:
            raise
        except DBAPIError as exc:
            if not is_transient(exc):
                logger.exception("Persistence failure during %s", operation)
                raise
            logger.warning(
                "Transient conflict during %s (attempt %d/%d)",
                operation,
                attempt,
                attempts,
                extra={"operation": operation, "attempt": attempt},
            )
        except SQLAlchemyError:
            logger.exception("Persistence failure during %s", operation)
            raise
    raise ConflictError(f"{operation} kept conflicting after {attempts} attempts")
