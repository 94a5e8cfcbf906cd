# ============================================================================
# WATCHER CORE TYPES
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - Base classes for watchers
# PURPOSE: Watcher plugin interface, generic check result, error types
# CREATED: 19 OCT 2026
# ============================================================================
"""
Watcher Core Types

Defines the plugin interface and result types shared by every watcher.

A watcher checks one external resource and reports a WatcherCheckResult.
Two outcome classes cross the watcher boundary:
- A check result (valid or invalid): a finding about the resource
- WatcherException: the check itself could not be carried out

Resource-specific watchers subclass Watcher and WatcherCheckResult so the
executor can handle all of them polymorphically.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from dataclasses import dataclass, field
from datetime import datetime


# ============================================================================
# EXCEPTIONS
# ============================================================================

class WatcherConfigurationError(ValueError):
    """Raised when a watcher or its configuration is built with invalid values."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class WatcherException(Exception):
    """
    Raised when a watcher fails to carry out a check.

    The underlying error is chained as __cause__.
    """

    def __init__(self, message: str, watcher_name: Optional[str] = None):
        self.watcher_name = watcher_name
        super().__init__(message)


# ============================================================================
# RESULTS
# ============================================================================

@dataclass
class WatcherCheckResult:
    """Result from a single watcher check."""
    watcher_name: str
    watcher_type: str
    is_valid: bool
    description: str = ""
    watcher_group: Optional[str] = None
    duration_ms: float = 0.0
    checked_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def create(
        cls,
        watcher: "Watcher",
        is_valid: bool,
        description: str = "",
    ) -> "WatcherCheckResult":
        """Create a result carrying the identity of the given watcher."""
        return cls(
            watcher_name=watcher.name,
            watcher_type=watcher.watcher_type,
            watcher_group=watcher.group,
            is_valid=is_valid,
            description=description,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result = {
            "watcher_name": self.watcher_name,
            "watcher_type": self.watcher_type,
            "is_valid": self.is_valid,
            "description": self.description,
            "duration_ms": round(self.duration_ms, 2),
            "checked_at": self.checked_at.isoformat() + "Z",
        }
        if self.watcher_group:
            result["watcher_group"] = self.watcher_group
        return result


@dataclass
class AggregatedCheckResult:
    """Aggregated result from running several watchers."""
    results: Dict[str, WatcherCheckResult]
    errors: Dict[str, str]
    total_duration_ms: float
    checked_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_valid(self) -> bool:
        """True only if no watcher failed and every result is valid."""
        if self.errors:
            return False
        return all(result.is_valid for result in self.results.values())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return {
            "is_valid": self.is_valid,
            "results": {
                name: result.to_dict()
                for name, result in self.results.items()
            },
            "errors": dict(self.errors),
            "total_duration_ms": round(self.total_duration_ms, 2),
            "checked_at": self.checked_at.isoformat() + "Z",
        }


# ============================================================================
# PLUGIN INTERFACE
# ============================================================================

class Watcher(ABC):
    """
    Base class for watchers.

    Subclass and implement execute() to check a new kind of resource.
    Register instances with WatcherRegistry.add_watcher().

    Attributes:
        name: Unique identifier for the watcher
        group: Optional group the watcher belongs to
        watcher_type: Type tag reported in every check result

    Example:
        class PingWatcher(Watcher):
            watcher_type = "ping"

            def __init__(self, name: str):
                self.name = name
                self.group = None

            async def execute(self) -> WatcherCheckResult:
                return WatcherCheckResult.create(self, True, "pong")
    """

    name: str = "unnamed"
    group: Optional[str] = None
    watcher_type: str = "generic"

    @abstractmethod
    async def execute(self) -> WatcherCheckResult:
        """
        Execute the check.

        Returns:
            WatcherCheckResult describing the finding

        Raises:
            WatcherException: If the check could not be carried out
        """
        pass

    async def close(self) -> None:
        """Release resources held by the watcher."""
        return None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "WatcherConfigurationError",
    "WatcherException",
    "WatcherCheckResult",
    "AggregatedCheckResult",
    "Watcher",
]
