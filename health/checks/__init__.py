# ============================================================================
# WATCHER PLUGINS
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - Watcher implementations
# PURPOSE: Concrete watchers for external resources
# CREATED: 19 OCT 2026
# ============================================================================
"""
Watcher Plugins

Concrete watchers:
- mongodb: MongoDB reachability and query result checks
"""

from health.checks.mongodb import MongoDbWatcher, add_mongodb_watcher

__all__ = [
    "MongoDbWatcher",
    "add_mongodb_watcher",
]
