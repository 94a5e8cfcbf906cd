# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for watcher timeouts, intervals, execution
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for watcher construction and execution.
These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class WatcherDefaults:
    """
    Defaults for watcher construction and execution.

    Controls check timeouts and how the executor runs registered watchers.
    """
    # Per-check network timeout (seconds)
    timeout_seconds: float = 5.0

    # Interval between checks for a registered watcher (seconds)
    interval_seconds: float = 5.0

    # Executor limits
    overall_timeout_seconds: float = 60.0
    max_parallel: int = 10

    @classmethod
    def from_env(cls) -> "WatcherDefaults":
        """Create from environment variables."""
        return cls(
            timeout_seconds=float(os.getenv("MONGODB_WATCHER_TIMEOUT_SECONDS", 5.0)),
            interval_seconds=float(os.getenv("WATCHER_INTERVAL_SECONDS", 5.0)),
            overall_timeout_seconds=float(os.getenv("WATCHER_OVERALL_TIMEOUT_SECONDS", 60.0)),
            max_parallel=int(os.getenv("WATCHER_MAX_PARALLEL", 10)),
        )


@dataclass(frozen=True)
class MongoDbWatcherSettings:
    """
    Settings for the MongoDB watcher registered at application startup.

    A collection and a query are either both set or both absent.
    """
    connection_string: Optional[str] = None
    database: Optional[str] = None
    collection_name: Optional[str] = None
    query: Optional[str] = None
    watcher_name: Optional[str] = None
    watcher_group: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        """True when the required connection settings are present."""
        return bool(self.connection_string and self.database)

    @property
    def has_query(self) -> bool:
        return bool(
            self.collection_name and self.collection_name.strip()
            and self.query and self.query.strip()
        )

    @classmethod
    def from_env(cls) -> "MongoDbWatcherSettings":
        """Create from environment variables."""
        return cls(
            connection_string=os.getenv("MONGODB_CONNECTION_STRING"),
            database=os.getenv("MONGODB_DATABASE"),
            collection_name=os.getenv("MONGODB_COLLECTION"),
            query=os.getenv("MONGODB_QUERY"),
            watcher_name=os.getenv("MONGODB_WATCHER_NAME"),
            watcher_group=os.getenv("MONGODB_WATCHER_GROUP"),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    watcher: WatcherDefaults = field(default_factory=WatcherDefaults)
    mongodb: MongoDbWatcherSettings = field(default_factory=MongoDbWatcherSettings)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            watcher=WatcherDefaults.from_env(),
            mongodb=MongoDbWatcherSettings.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "WatcherDefaults",
    "MongoDbWatcherSettings",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
