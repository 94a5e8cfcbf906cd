# ============================================================================
# WATCHER MODULE
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - Watcher plugin system
# PURPOSE: Register, execute and expose resource watchers
# CREATED: 19 OCT 2026
# ============================================================================
"""
Watcher Module

Plugin-based watcher system:
- Watcher: Base class for resource checks
- WatcherCheckResult: Generic result every watcher reports
- WatcherRegistry: Registration with hooks and intervals
- WatcherExecutor: Parallel execution with timeouts and hooks
- health_router: FastAPI endpoints for listing and running watchers

Usage:
    from health import get_registry, health_router
    from health.checks.mongodb import add_mongodb_watcher

    add_mongodb_watcher(get_registry(), "mongodb://localhost:27017", "TestDb")
    app.include_router(health_router)
"""

from health.core import (
    AggregatedCheckResult,
    Watcher,
    WatcherCheckResult,
    WatcherConfigurationError,
    WatcherException,
)
from health.registry import (
    WatcherHooks,
    WatcherRegistration,
    WatcherRegistry,
    get_registry,
)
from health.executor import WatcherExecutor
from health.router import health_router

__all__ = [
    # Core types
    "Watcher",
    "WatcherCheckResult",
    "AggregatedCheckResult",
    "WatcherConfigurationError",
    "WatcherException",
    # Registry
    "WatcherHooks",
    "WatcherRegistration",
    "WatcherRegistry",
    "get_registry",
    # Executor
    "WatcherExecutor",
    # Router
    "health_router",
]
