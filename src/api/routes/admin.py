"""Administrative routes for the demo deployment."""

import logging

from fastapi import APIRouter, HTTPException, status

import config
from core.dependencies import StorageManagerDep
from schemas.results import OperationResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post("/reset-database", summary="Restablecer datos de demostracion")
def reset_database(storage: StorageManagerDep) -> OperationResult:
    """Drop all users, tokens and sessions and restore the demo accounts.

    Only available when ENABLE_DATABASE_RESET=true.

    Raises:
        HTTPException: 404 when the reset is disabled.
    """
    if not config.ENABLE_DATABASE_RESET:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not Found",
        )

    storage.reset()
    logger.warning("Demo data reset through the admin API")
    return OperationResult(success=True, message="Datos restablecidos")
