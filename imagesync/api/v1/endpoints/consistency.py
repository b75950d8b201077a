"""
Consistency endpoints for the Image Store Sync service.

This module exposes the on-demand consistency audit.
"""

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from imagesync.core.dependencies import get_reconciliation_engine
from imagesync.core.errors import StoreUnavailable
from imagesync.models.report import ReconciliationReport
from imagesync.reconciliation.engine import ReconciliationEngine
from imagesync.schemas.consistency import DEFAULT_SOURCE, ConsistencyCheckRequest

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/check",
    response_model=ReconciliationReport,
    summary="Run a consistency audit",
    description="Compare the image catalog with the blob store and report the differences.",
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"description": "A store could not be read"}},
)
async def check_consistency(
        payload: Optional[ConsistencyCheckRequest] = None,
        engine: ReconciliationEngine = Depends(get_reconciliation_engine),
) -> Any:
    """
    Run a consistency audit on demand.

    Args:
        payload: Optional request body carrying the trigger label
        engine: Reconciliation engine

    Returns:
        The reconciliation report

    Raises:
        HTTPException: If the catalog or the blob store is unavailable
    """
    source = payload.source if payload else DEFAULT_SOURCE
    structlog.contextvars.bind_contextvars(audit_source=source)
    logger.info("Consistency check requested", source=source)

    try:
        return await engine.audit(source)
    except StoreUnavailable as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        )
