# ============================================================================
# MONGODB WATCHER PACKAGE
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - MongoDB watcher
# PURPOSE: Reachability and content checks for MongoDB databases
# CREATED: 19 OCT 2026
# ============================================================================
"""
MongoDB Watcher

Components:
- connection: DefaultMongoDbConnection resolves the database by name
- database: DefaultMongoDb runs the configured query
- validation: evaluate_predicates combines ensure_that / ensure_that_async
- watcher: MongoDbWatcher runs the check pipeline
- configuration: MongoDbWatcherConfiguration and its Builder
- extensions: add_mongodb_watcher registers a watcher in one call
"""

from health.checks.mongodb.documents import Document, DocumentValue, ValueKind
from health.checks.mongodb.database import (
    DefaultMongoDb,
    MongoDb,
    QueryParseError,
    parse_query,
)
from health.checks.mongodb.connection import (
    ConnectionStringError,
    DefaultMongoDbConnection,
    MongoDbConnection,
    parse_server_address,
)
from health.checks.mongodb.validation import evaluate_predicates
from health.checks.mongodb.configuration import Builder, MongoDbWatcherConfiguration
from health.checks.mongodb.result import CheckOutcome, MongoDbWatcherCheckResult
from health.checks.mongodb.watcher import MongoDbWatcher
from health.checks.mongodb.extensions import add_mongodb_watcher

__all__ = [
    # Documents
    "Document",
    "DocumentValue",
    "ValueKind",
    # Query executor
    "MongoDb",
    "DefaultMongoDb",
    "QueryParseError",
    "parse_query",
    # Connection resolver
    "MongoDbConnection",
    "DefaultMongoDbConnection",
    "ConnectionStringError",
    "parse_server_address",
    # Validation
    "evaluate_predicates",
    # Configuration
    "MongoDbWatcherConfiguration",
    "Builder",
    # Watcher
    "CheckOutcome",
    "MongoDbWatcherCheckResult",
    "MongoDbWatcher",
    "add_mongodb_watcher",
]
