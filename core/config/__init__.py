# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for watchers.
"""

from core.config.defaults import (
    WatcherDefaults,
    MongoDbWatcherSettings,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "WatcherDefaults",
    "MongoDbWatcherSettings",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
