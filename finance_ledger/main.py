"""
Finance Ledger — FastAPI Application.

This is the entry point for the HTTP adapter.
All routers and error mappings are registered here.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from finance_ledger.config import get_settings
from finance_ledger.errors import (
    ConflictError,
    LedgerError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from finance_ledger.api.health import router as health_router
from finance_ledger.api.accounts import router as accounts_router
from finance_ledger.api.debts import router as debts_router
from finance_ledger.api.transactions import router as transactions_router
from finance_ledger.api.recurring_payments import router as recurring_router
from finance_ledger.api.summary import router as summary_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    description="Personal accounts, debts and recurring payments",
)

# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(debts_router)
app.include_router(transactions_router)
app.include_router(recurring_router)
app.include_router(summary_router)


STATUS_CODES: list[tuple[type[LedgerError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StoreUnavailableError, 503),
]


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    """
    Map core failures to HTTP.

    Every core error means nothing was written, so the body tells
    the client whether repeating the same request is safe.
    """
    status_code = next(
        (code for error_type, code in STATUS_CODES if isinstance(exc, error_type)),
        500,
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "retryable": exc.retryable},
    )
