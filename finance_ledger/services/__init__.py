"""Business logic services."""

from finance_ledger.services.ledger_service import LedgerService
from finance_ledger.services.scheduler_service import SchedulerService
from finance_ledger.services.operations_service import OperationsService, DebtPayment
from finance_ledger.services.summary_service import SummaryService

__all__ = [
    "LedgerService",
    "SchedulerService",
    "OperationsService",
    "DebtPayment",
    "SummaryService",
]
