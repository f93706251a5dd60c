"""
Atomic units of work.

Every public mutator on a service is decorated with @atomic.
The decorated call either commits everything it wrote or
rolls everything back; there is no in-between state for any
other session to see.

Services call each other on the same session (a transfer
creates two transactions, a settle creates one). Those inner
calls join the unit that is already open: only the outermost
call commits, rolls back, or retries.

Retries happen only for serialization conflicts, which mean
"someone else changed the same row first": a stale version
counter or a PostgreSQL serialization failure / deadlock. The
whole unit is re-run from scratch on fresh data. Anything else
propagates after the rollback.
"""

import functools
import logging

from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    OperationalError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.orm.exc import StaleDataError

from finance_ledger.config import get_settings
from finance_ledger.errors import ConflictError, StoreUnavailableError

logger = logging.getLogger(__name__)

# SQLSTATEs that mean "retry the transaction"
SERIALIZATION_FAILURES = {"40001", "40P01"}

_DEPTH = "atomic_depth"


def _is_serialization_failure(exc: DBAPIError) -> bool:
    code = getattr(exc.orig, "pgcode", None) or getattr(exc.orig, "sqlstate", None)
    return code in SERIALIZATION_FAILURES


def atomic(method):
    """Run a service method as one all-or-nothing unit on self.db."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        db = self.db
        depth = db.info.get(_DEPTH, 0)

        if depth:
            # Already inside a unit: join it.
            db.info[_DEPTH] = depth + 1
            try:
                return method(self, *args, **kwargs)
            finally:
                db.info[_DEPTH] = depth

        attempts = get_settings().CONFLICT_RETRIES + 1
        name = method.__qualname__

        for attempt in range(1, attempts + 1):
            db.info[_DEPTH] = 1
            try:
                result = method(self, *args, **kwargs)
                db.commit()
                return result
            except StaleDataError as e:
                db.rollback()
                conflict = e
            except IntegrityError as e:
                db.rollback()
                raise ConflictError(f"{name}: {e.orig}") from e
            except DBAPIError as e:
                db.rollback()
                if not _is_serialization_failure(e):
                    if isinstance(e, OperationalError) or e.connection_invalidated:
                        logger.error("%s: store unavailable: %s", name, e.orig)
                        raise StoreUnavailableError(str(e.orig)) from e
                    raise
                conflict = e
            except PoolTimeoutError as e:
                db.rollback()
                logger.error("%s: no connection available: %s", name, e)
                raise StoreUnavailableError(str(e)) from e
            except Exception:
                db.rollback()
                raise
            finally:
                db.info[_DEPTH] = 0

            logger.warning(
                "%s: serialization conflict (attempt %d/%d)",
                name, attempt, attempts,
            )

        raise ConflictError(
            f"{name}: gave up after {attempts} conflicting attempts"
        ) from conflict

    return wrapper
