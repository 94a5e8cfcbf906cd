# ============================================================================
# WATCHER REGISTRY
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - Watcher registration
# PURPOSE: Register watchers together with their hooks and intervals
# CREATED: 19 OCT 2026
# ============================================================================
"""
Watcher Registry

Manages registration and lookup of watchers.

Each registration holds the watcher, its optional hooks and the interval
at which the host should run it. Registration calls chain:

    registry = get_registry()
    registry.add_watcher(ping_watcher).add_watcher(
        other_watcher,
        hooks=WatcherHooks(on_failure=notify),
        interval_seconds=30,
    )

    registrations = registry.get_all()
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from core.config import get_defaults
from core.logging import ComponentType, get_logger
from health.core import Watcher, WatcherCheckResult, WatcherConfigurationError

logger = get_logger(__name__, ComponentType.REGISTRY)


HookResult = Union[None, Awaitable[None]]


@dataclass(frozen=True)
class WatcherHooks:
    """
    Callbacks invoked by the executor around a watcher check.

    Every hook may be a plain function or a coroutine function.

    on_start: called with the watcher before the check runs
    on_success: called with the result when it is valid
    on_failure: called with the result when it is invalid
    on_completed: called with the result after on_success/on_failure
    on_error: called with the exception when the check could not run
    """
    on_start: Optional[Callable[[Watcher], HookResult]] = None
    on_success: Optional[Callable[[WatcherCheckResult], HookResult]] = None
    on_failure: Optional[Callable[[WatcherCheckResult], HookResult]] = None
    on_completed: Optional[Callable[[WatcherCheckResult], HookResult]] = None
    on_error: Optional[Callable[[Exception], HookResult]] = None


@dataclass
class WatcherRegistration:
    """A watcher with the hooks and interval it was registered with."""
    watcher: Watcher
    hooks: WatcherHooks = field(default_factory=WatcherHooks)
    interval_seconds: float = 5.0

    @property
    def name(self) -> str:
        return self.watcher.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.watcher.name,
            "group": self.watcher.group,
            "watcher_type": self.watcher.watcher_type,
            "interval_seconds": self.interval_seconds,
        }


class WatcherRegistry:
    """
    Registry for watchers.

    Maintains watcher registrations keyed by watcher name.
    """

    def __init__(self):
        self._registrations: Dict[str, WatcherRegistration] = {}

    def add_watcher(
        self,
        watcher: Watcher,
        hooks: Optional[WatcherHooks] = None,
        interval_seconds: Optional[float] = None,
    ) -> "WatcherRegistry":
        """
        Register a watcher.

        Args:
            watcher: Watcher instance to register
            hooks: Optional hooks invoked around each check
            interval_seconds: Interval between checks (default from config)

        Returns:
            This registry, for chaining

        Raises:
            WatcherConfigurationError: If watcher is None or interval <= 0
        """
        if watcher is None:
            raise WatcherConfigurationError("Watcher can not be null.", field="watcher")

        if interval_seconds is None:
            interval_seconds = get_defaults().watcher.interval_seconds
        elif interval_seconds <= 0:
            raise WatcherConfigurationError(
                "Interval must be greater than zero.", field="interval_seconds"
            )

        if watcher.name in self._registrations:
            logger.warning(f"Overwriting watcher: {watcher.name}")

        self._registrations[watcher.name] = WatcherRegistration(
            watcher=watcher,
            hooks=hooks or WatcherHooks(),
            interval_seconds=interval_seconds,
        )
        logger.debug(
            f"Registered watcher: {watcher.name} "
            f"(type={watcher.watcher_type}, interval={interval_seconds}s)"
        )
        return self

    def unregister(self, name: str) -> bool:
        """
        Remove a watcher by name.

        Returns:
            True if watcher was removed
        """
        if name in self._registrations:
            del self._registrations[name]
            return True
        return False

    def get(self, name: str) -> Optional[WatcherRegistration]:
        """Get registration by watcher name."""
        return self._registrations.get(name)

    def get_all(self) -> List[WatcherRegistration]:
        """Get all registrations in registration order."""
        return list(self._registrations.values())

    def get_by_group(self, group: str) -> List[WatcherRegistration]:
        """Get registrations whose watcher belongs to a group."""
        return [
            r for r in self._registrations.values()
            if r.watcher.group == group
        ]

    def clear(self) -> None:
        """Remove all registrations."""
        self._registrations.clear()

    def __len__(self) -> int:
        return len(self._registrations)

    def __contains__(self, name: str) -> bool:
        return name in self._registrations


# ============================================================================
# GLOBAL REGISTRY
# ============================================================================

_registry: Optional[WatcherRegistry] = None


def get_registry() -> WatcherRegistry:
    """Get the global watcher registry."""
    global _registry
    if _registry is None:
        _registry = WatcherRegistry()
    return _registry


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "WatcherHooks",
    "WatcherRegistration",
    "WatcherRegistry",
    "get_registry",
]
