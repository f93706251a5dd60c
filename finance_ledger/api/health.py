"""
Health check endpoint.

Reports whether the ledger can reach its store and which
backend the database URL selected.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_ledger.config import get_settings
from finance_ledger.models.base import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Probe the store with a trivial query.

    An unreachable store is reported as "degraded" with a 200,
    so monitoring can tell "ledger down" from "database down".
    """
    settings = get_settings()
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.error("Health check could not reach the store: %s", e)
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "finance-ledger",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": db_status,
        "backend": db.get_bind().dialect.name,
    }
