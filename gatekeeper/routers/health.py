"""
Liveness and health endpoints.
/ping answers without touching the database; /health reports DB reachability.
"""

from datetime import datetime
from fastapi import APIRouter, Depends
from gatekeeper.database import Gateway, get_gateway

router = APIRouter()


@router.get("/ping", summary="Liveness check")
def ping():
    return {"message": "pong"}


@router.get("/health", summary="System health check")
def health_check(gateway: Gateway = Depends(get_gateway)):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "database": "ok",
    }
    if not gateway.check_connection():
        result["database"] = "error: unreachable"
        result["status"] = "degraded"
    return result
