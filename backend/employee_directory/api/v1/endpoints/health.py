from __future__ import annotations

from fastapi import APIRouter, Request

from employee_directory.core.config import settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(request: Request):
    services: dict[str, str] = {}
    service = getattr(request.app.state, "employee_service", None)

    try:
        if service is not None:
            ok = await service.check_connection()
            services["record_store"] = "ok" if ok else "error"
        else:
            services["record_store"] = "not_configured"
    except Exception:
        services["record_store"] = "error"

    services["cache"] = "ok" if service is not None else "not_configured"

    all_ok = all(v in ("ok", "not_configured") for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": services,
    }


@router.get("/ready")
async def readiness_probe():
    return {"ready": True}
