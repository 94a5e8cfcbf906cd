# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Core module initialization
# PURPOSE: Export logging and configuration utilities
# CREATED: 19 OCT 2026
# ============================================================================

from core.config import WatcherDefaults, MongoDbWatcherSettings, get_defaults
from core.logging import configure_logging, get_logger, log_context

__all__ = [
    # Config
    "WatcherDefaults",
    "MongoDbWatcherSettings",
    "get_defaults",
    # Logging
    "configure_logging",
    "get_logger",
    "log_context",
]
