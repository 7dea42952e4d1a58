"""
Health check endpoints.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config import settings
from database import engine
from services.providers import known_providers, lookup_provider

router = APIRouter()


def _provider_key_status() -> dict:
    status = {}
    for name in known_providers():
        env_name = lookup_provider(name).credential_env_var
        status[name] = "configured" if str(getattr(settings, env_name, "") or "").strip() else "missing"
    return status


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns overall system health status.
    """
    health_status = {
        "status": "healthy",
        "api": "up",
        "database": "unknown",
        "providers": _provider_key_status(),
    }

    # Check database connection
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        health_status["database"] = "up"
    except Exception as e:
        health_status["database"] = f"down: {type(e).__name__}"
        health_status["status"] = "degraded"

    return health_status


@router.get("/health/ready")
async def readiness_check():
    """Kubernetes-style readiness probe."""
    providers = _provider_key_status()
    if not any(value == "configured" for value in providers.values()):
        return JSONResponse(
            status_code=503,
            content={"ready": False, "missing": sorted(lookup_provider(name).credential_env_var for name in providers)},
        )
    return {"ready": True}


@router.get("/health/live")
async def liveness_check():
    """Kubernetes-style liveness probe."""
    return {"alive": True}
