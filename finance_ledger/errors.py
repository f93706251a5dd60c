"""
Typed failures raised by the ledger core.

Every error means "the operation did not happen": the atomic
unit that raised it has already been rolled back. Errors marked
retryable are safe to retry with the same input ids.
"""


class LedgerError(Exception):
    """Base class for all core failures."""

    retryable: bool = False


class ValidationError(LedgerError, ValueError):
    """Malformed or invariant-violating input."""


class NotFoundError(LedgerError, LookupError):
    """A referenced account, debt, transaction or recurring payment is absent."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ConflictError(LedgerError):
    """Concurrent mutations could not be serialized. Retry."""

    retryable = True


class StoreUnavailableError(LedgerError):
    """The backing store is unreachable or timed out. Retry with backoff."""

    retryable = True
