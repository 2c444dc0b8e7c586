"""
Advisor Back Office - API v1 Router
"""
from fastapi import APIRouter

from backoffice.api.v1.endpoints import alerts, allocations, risk

api_router = APIRouter()


# API v1 root endpoint
@api_router.get("/", tags=["API Info"])
async def api_root():
    """API v1 root - returns version info."""
    return {
        "api": "Advisor Back Office",
        "version": "v1",
        "status": "operational"
    }


api_router.include_router(risk.router, prefix="/risk", tags=["Risk Limits"])
api_router.include_router(alerts.router, prefix="/alerts", tags=["Trading Alerts"])
api_router.include_router(allocations.router, prefix="/allocations", tags=["Target Allocations"])
