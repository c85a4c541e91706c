"""Health, readiness and liveness routes."""

from typing import Any

from fastapi import APIRouter, Request, Response

from src.core.health import ServiceStatus

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request, response: Response) -> dict[str, Any]:
    """Full report of the document store and catalog checks.

    Returns 200 if every check is healthy, 503 otherwise.
    """
    report = await request.app.state.health_checker.check_all()
    response.status_code = 200 if report.status == ServiceStatus.HEALTHY else 503
    return report.to_dict()


@router.get("/ready")
async def readiness_check(request: Request, response: Response) -> dict[str, Any]:
    """Ready when healthy or degraded (e.g. catalog token missing)."""
    report = await request.app.state.health_checker.check_all()
    is_ready = report.status in (ServiceStatus.HEALTHY, ServiceStatus.DEGRADED)
    response.status_code = 200 if is_ready else 503
    return {"ready": is_ready, "status": report.status.value}


@router.get("/live")
async def liveness_check() -> dict[str, bool]:
    return {"alive": True}
