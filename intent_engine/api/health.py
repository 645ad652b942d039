from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..core.engine import IntentsEngine
from .deps import engine_dependency

router = APIRouter()


@router.get("/healthz")
def health_check(engine: IntentsEngine = Depends(engine_dependency)) -> Dict[str, Any]:
    """Health check endpoint that verifies the ledger backend"""

    ledger_status = engine.ledger.health_check()
    return {
        "status": "healthy" if ledger_status.get("status") == "healthy" else "degraded",
        "ledger": ledger_status,
        "name_service": engine.name_service.name,
        "engine_address": engine.address,
    }
