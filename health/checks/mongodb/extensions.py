# ============================================================================
# MONGODB WATCHER REGISTRATION
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - Registry helpers
# PURPOSE: Build and register a MongoDB watcher in one call
# CREATED: 19 OCT 2026
# ============================================================================
"""
MongoDB Watcher Registration

add_mongodb_watcher() builds a MongoDbWatcher either from connection
settings (optionally customised through a configurator) or from a ready
configuration, and adds it to a registry with hooks and an interval.

Usage:
    add_mongodb_watcher(
        registry,
        "mongodb://localhost:27017",
        "TestDb",
        configurator=lambda builder: builder.with_query("Users", "{}"),
        interval_seconds=30,
    )
"""

from typing import Callable, Optional

from health.core import WatcherConfigurationError
from health.registry import WatcherHooks, WatcherRegistry, get_registry
from health.checks.mongodb.configuration import (
    Builder,
    MongoDbWatcherConfiguration,
    Timeout,
)
from health.checks.mongodb.watcher import MongoDbWatcher


def add_mongodb_watcher(
    registry: Optional[WatcherRegistry] = None,
    connection_string: Optional[str] = None,
    database: Optional[str] = None,
    *,
    name: Optional[str] = None,
    configuration: Optional[MongoDbWatcherConfiguration] = None,
    configurator: Optional[Callable[[Builder], None]] = None,
    timeout: Optional[Timeout] = None,
    hooks: Optional[WatcherHooks] = None,
    interval_seconds: Optional[float] = None,
    group: Optional[str] = None,
) -> WatcherRegistry:
    """
    Create a MongoDB watcher and add it to a registry.

    Args:
        registry: Target registry (global registry if None)
        connection_string: Connection string, unless configuration is given
        database: Database name, unless configuration is given
        name: Watcher name (default "MongoDB Watcher")
        configuration: Ready configuration, replaces the connection settings
        configurator: Optional callable customising the configuration builder
        timeout: Connection timeout when building from connection settings
        hooks: Optional hooks invoked around each check
        interval_seconds: Interval between checks
        group: Optional group the watcher belongs to

    Returns:
        The registry, for chaining

    Raises:
        WatcherConfigurationError: If both or neither of configuration and
            connection settings are given, or any setting is invalid
    """
    if registry is None:
        registry = get_registry()

    watcher_name = name or MongoDbWatcher.DEFAULT_NAME

    if configuration is not None:
        if connection_string or database or configurator or timeout is not None:
            raise WatcherConfigurationError(
                "Pass either a configuration or connection settings, not both.",
                field="configuration",
            )
        watcher = MongoDbWatcher.from_configuration(
            configuration, name=watcher_name, group=group
        )
    else:
        watcher = MongoDbWatcher.create(
            connection_string,
            database,
            name=watcher_name,
            timeout=timeout,
            configurator=configurator,
            group=group,
        )

    return registry.add_watcher(watcher, hooks=hooks, interval_seconds=interval_seconds)


__all__ = [
    "add_mongodb_watcher",
]
