# notecore/routes/health.py
"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from notecore.container import ServiceContainer
from notecore.routes.dependencies import get_services

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": "ok", "service": "notecore"}


@router.get("/readyz")
async def readyz(services: ServiceContainer = Depends(get_services)):
    """
    Readiness check for the storage backend and the auto-save engine.
    The local LLM is reported but does not affect readiness.
    """
    checks = {}
    overall_ok = True

    # 1) Key-value storage
    t0 = time.time()
    try:
        storage_ok = await services.kv.ping()
        checks["storage"] = {
            "ok": bool(storage_ok),
            "backend": services.config.STORAGE_BACKEND,
            "latency_ms": round((time.time() - t0) * 1000, 1),
        }
        overall_ok = overall_ok and bool(storage_ok)
    except Exception as e:
        checks["storage"] = {"ok": False, "error": f"{type(e).__name__}: {e}"}
        overall_ok = False

    # 2) Auto-save queue
    metrics = services.autosave.get_save_metrics()
    checks["autosave"] = {
        "ok": True,
        "is_active": metrics["is_active"],
        "queue_size": metrics["queue_size"],
        "failed": metrics["status_counts"].get("failed", 0),
    }

    # 3) Local LLM (informational)
    checks["ollama"] = await services.ollama.health_check()

    body = {"status": "ready" if overall_ok else "degraded", "checks": checks}
    return JSONResponse(status_code=200 if overall_ok else 503, content=body)
