# ============================================================================
# MONGODB WATCHER CONFIGURATION
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - Immutable watcher configuration and builder
# PURPOSE: Validate and bundle everything a MongoDB watcher needs
# CREATED: 19 OCT 2026
# ============================================================================
"""
MongoDB Watcher Configuration

The configuration is a frozen dataclass built once, before any check runs,
and shared by every check of the watcher. Invalid values raise
WatcherConfigurationError at build time.

Usage:
    configuration = (
        MongoDbWatcherConfiguration.create("mongodb://localhost:27017", "TestDb")
        .with_query("Users", '{"name": "admin"}')
        .ensure_that(lambda users: any(user["id"] == 1 for user in users))
        .build()
    )
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Awaitable, Callable, Optional, Union

from core.config import get_defaults
from health.core import WatcherConfigurationError
from health.checks.mongodb.connection import DefaultMongoDbConnection, MongoDbConnection
from health.checks.mongodb.database import MongoDb
from health.checks.mongodb.validation import AsyncPredicate, SyncPredicate

ConnectionProvider = Callable[[str], MongoDbConnection]
MongoDbProvider = Callable[[], Union[Optional[MongoDb], Awaitable[Optional[MongoDb]]]]
Timeout = Union[float, int, timedelta]


def normalize_timeout(timeout: Optional[Timeout]) -> float:
    """
    Convert a timeout to seconds.

    None selects the configured default. Explicit values must be positive.
    """
    if timeout is None:
        timeout_seconds = get_defaults().watcher.timeout_seconds
    elif isinstance(timeout, timedelta):
        timeout_seconds = timeout.total_seconds()
    elif isinstance(timeout, (int, float)) and not isinstance(timeout, bool):
        timeout_seconds = float(timeout)
    else:
        raise WatcherConfigurationError(
            f"Timeout must be a number of seconds or a timedelta, got {type(timeout).__name__}.",
            field="timeout",
        )

    if timeout_seconds <= 0:
        raise WatcherConfigurationError("Timeout must be greater than zero.", field="timeout")
    return timeout_seconds


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def default_connection_provider(database: str, timeout_seconds: float) -> ConnectionProvider:
    """Provider building the pymongo-backed connection for a database."""
    def provider(connection_string: str) -> MongoDbConnection:
        return DefaultMongoDbConnection(database, connection_string, timeout_seconds)
    return provider


@dataclass(frozen=True)
class MongoDbWatcherConfiguration:
    """
    Configuration of a MongoDB watcher.

    collection_name and query are either both set or both None.
    mongodb_provider, when set, replaces the connection lookup entirely.
    """
    connection_string: str
    database: str
    timeout_seconds: float
    connection_provider: ConnectionProvider
    collection_name: Optional[str] = None
    query: Optional[str] = None
    mongodb_provider: Optional[MongoDbProvider] = None
    ensure_that: Optional[SyncPredicate] = None
    ensure_that_async: Optional[AsyncPredicate] = None

    def __post_init__(self):
        if _is_blank(self.connection_string):
            raise WatcherConfigurationError(
                "Connection string can not be empty.", field="connection_string"
            )
        if not self.database:
            raise WatcherConfigurationError("Database name can not be empty.", field="database")
        if self.timeout_seconds is None or self.timeout_seconds <= 0:
            raise WatcherConfigurationError("Timeout must be greater than zero.", field="timeout")
        if self.connection_provider is None:
            raise WatcherConfigurationError(
                "MongoDB connection provider can not be null.", field="connection_provider"
            )
        if _is_blank(self.collection_name) != _is_blank(self.query):
            raise WatcherConfigurationError(
                "MongoDB collection name and query must be set together.", field="query"
            )

    @property
    def has_query(self) -> bool:
        return not _is_blank(self.collection_name) and not _is_blank(self.query)

    @classmethod
    def create(
        cls,
        connection_string: str,
        database: str,
        timeout: Optional[Timeout] = None,
    ) -> "Builder":
        """Start building a configuration."""
        return Builder(connection_string, database, timeout)


class Builder:
    """
    Builder for MongoDbWatcherConfiguration.

    Every method validates its argument immediately and returns the builder.
    """

    def __init__(
        self,
        connection_string: str,
        database: str,
        timeout: Optional[Timeout] = None,
    ):
        if _is_blank(connection_string):
            raise WatcherConfigurationError(
                "Connection string can not be empty.", field="connection_string"
            )
        if not database:
            raise WatcherConfigurationError("Database name can not be empty.", field="database")

        self._connection_string = connection_string
        self._database = database
        self._timeout_seconds = normalize_timeout(timeout)
        self._connection_provider: ConnectionProvider = default_connection_provider(
            database, self._timeout_seconds
        )
        self._collection_name: Optional[str] = None
        self._query: Optional[str] = None
        self._mongodb_provider: Optional[MongoDbProvider] = None
        self._ensure_that: Optional[SyncPredicate] = None
        self._ensure_that_async: Optional[AsyncPredicate] = None

    def with_query(self, collection_name: str, query: str) -> "Builder":
        """Run a query against a collection on every check."""
        if _is_blank(collection_name):
            raise WatcherConfigurationError(
                "MongoDB collection name can not be empty.", field="collection_name"
            )
        if _is_blank(query):
            raise WatcherConfigurationError("MongoDB query can not be empty.", field="query")

        self._collection_name = collection_name
        self._query = query
        return self

    def ensure_that(self, ensure_that: SyncPredicate) -> "Builder":
        """Validate the query result with a predicate."""
        if ensure_that is None:
            raise WatcherConfigurationError(
                "Ensure that predicate can not be null.", field="ensure_that"
            )

        self._ensure_that = ensure_that
        return self

    def ensure_that_async(self, ensure_that: AsyncPredicate) -> "Builder":
        """Validate the query result with a coroutine predicate."""
        if ensure_that is None:
            raise WatcherConfigurationError(
                "Ensure that async predicate can not be null.", field="ensure_that_async"
            )

        self._ensure_that_async = ensure_that
        return self

    def with_connection_provider(self, connection_provider: ConnectionProvider) -> "Builder":
        """Replace the connection used to look up the database."""
        if connection_provider is None:
            raise WatcherConfigurationError(
                "MongoDB connection provider can not be null.", field="connection_provider"
            )

        self._connection_provider = connection_provider
        return self

    def with_mongodb_provider(self, mongodb_provider: MongoDbProvider) -> "Builder":
        """Supply the database handle directly, bypassing the connection lookup."""
        if mongodb_provider is None:
            raise WatcherConfigurationError(
                "MongoDB provider can not be null.", field="mongodb_provider"
            )

        self._mongodb_provider = mongodb_provider
        return self

    def build(self) -> MongoDbWatcherConfiguration:
        return MongoDbWatcherConfiguration(
            connection_string=self._connection_string,
            database=self._database,
            timeout_seconds=self._timeout_seconds,
            connection_provider=self._connection_provider,
            collection_name=self._collection_name,
            query=self._query,
            mongodb_provider=self._mongodb_provider,
            ensure_that=self._ensure_that,
            ensure_that_async=self._ensure_that_async,
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ConnectionProvider",
    "MongoDbProvider",
    "normalize_timeout",
    "default_connection_provider",
    "MongoDbWatcherConfiguration",
    "Builder",
]
