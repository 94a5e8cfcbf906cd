# ============================================================================
# WATCHER ROUTER
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - FastAPI watcher endpoints
# PURPOSE: List registered watchers and run their checks on demand
# CREATED: 19 OCT 2026
# ============================================================================
"""
Watcher Router

Endpoints:
    GET /livez                  - Liveness probe (process alive, no checks)
    GET /watchers               - Registered watchers
    GET /watchers/check         - Run every watcher
    GET /watchers/{name}/check  - Run a single watcher

Response Codes:
    200 - Check(s) valid
    404 - Unknown watcher
    500 - Watcher could not carry out its check
    503 - Check(s) invalid
"""

from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core.logging import ComponentType, get_logger
from health.core import WatcherException
from health.executor import WatcherExecutor
from health.registry import WatcherRegistry, get_registry
from health.schemas import ErrorResponse, WatcherInfo, WatcherListResponse
from __version__ import __version__, BUILD_DATE

logger = get_logger(__name__, ComponentType.API)

health_router = APIRouter(tags=["Watchers"])

_registry: Optional[WatcherRegistry] = None


def set_router_registry(registry: Optional[WatcherRegistry]) -> None:
    """Serve a specific registry instead of the global one (None resets)."""
    global _registry
    _registry = registry


def _get_router_registry() -> WatcherRegistry:
    return _registry if _registry is not None else get_registry()


def _validity_to_http_code(is_valid: bool) -> int:
    return 200 if is_valid else 503


# ============================================================================
# LIVENESS PROBE
# ============================================================================

@health_router.get("/livez")
async def liveness_probe():
    """Returns 200 while the process is alive. Runs no watchers."""
    return {"status": "alive", "version": __version__, "build_date": BUILD_DATE}


# ============================================================================
# WATCHERS
# ============================================================================

@health_router.get("/watchers", response_model=WatcherListResponse)
async def list_watchers():
    """List registered watchers."""
    registrations = _get_router_registry().get_all()
    return WatcherListResponse(
        count=len(registrations),
        watchers=[WatcherInfo.from_registration(r) for r in registrations],
    )


@health_router.get("/watchers/check")
async def check_all_watchers():
    """
    Run every registered watcher.

    Returns:
        200: All checks valid
        503: Any check invalid or failed
    """
    registry = _get_router_registry()
    executor = WatcherExecutor(registry=registry)
    result = await executor.execute_all()

    response_body = result.to_dict()
    response_body["version"] = __version__
    return JSONResponse(
        status_code=_validity_to_http_code(result.is_valid),
        content=response_body,
    )


@health_router.get("/watchers/{watcher_name}/check")
async def check_single_watcher(watcher_name: str):
    """Run a single watcher by name."""
    executor = WatcherExecutor(registry=_get_router_registry())

    try:
        result = await executor.execute_single(watcher_name)
    except WatcherException as e:
        logger.warning(f"Check of watcher {watcher_name} could not be carried out: {e}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=str(e), watcher_name=watcher_name).model_dump(),
        )

    if result is None:
        return JSONResponse(
            status_code=404,
            content=ErrorResponse(
                error=f"Watcher not found: {watcher_name}",
                watcher_name=watcher_name,
            ).model_dump(),
        )

    return JSONResponse(
        status_code=_validity_to_http_code(result.is_valid),
        content=result.to_dict(),
    )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "health_router",
    "set_router_registry",
]
