# ============================================================================
# MONGODB WATCHER
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - MongoDB check pipeline
# PURPOSE: Resolve the database, run the query, validate, report
# CREATED: 19 OCT 2026
# ============================================================================
"""
MongoDB Watcher

One execute() call runs the check pipeline once, without retries:

1. Resolve the database: mongodb_provider if configured, otherwise the
   connection lookup. Missing database -> invalid result (NOT_FOUND).
2. No query configured -> valid result; reachability is enough.
3. Run the query against the configured collection.
4. Evaluate the predicates over the documents.
5. Report valid or invalid with the query and its documents.

Driver errors (pymongo.errors.PyMongoError) raised while resolving or
querying are reported as an invalid result (DRIVER_ERROR) carrying the
driver message. Anything else, including predicate failures and queries
that do not parse, is raised as WatcherException.
"""

import inspect
from typing import Callable, Optional

from pymongo.errors import PyMongoError

from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from health.core import Watcher, WatcherConfigurationError, WatcherException
from health.checks.mongodb.configuration import (
    Builder,
    MongoDbWatcherConfiguration,
    Timeout,
)
from health.checks.mongodb.database import MongoDb
from health.checks.mongodb.result import CheckOutcome, MongoDbWatcherCheckResult
from health.checks.mongodb.validation import evaluate_predicates

logger = get_logger(__name__, ComponentType.WATCHER)


class MongoDbWatcher(Watcher):
    """Watcher checking a MongoDB database and, optionally, a query result."""

    DEFAULT_NAME = "MongoDB Watcher"
    watcher_type = "mongodb"

    def __init__(
        self,
        name: str,
        configuration: MongoDbWatcherConfiguration,
        group: Optional[str] = None,
    ):
        if not name:
            raise WatcherConfigurationError("Watcher name can not be empty.", field="name")

        if configuration is None:
            raise WatcherConfigurationError(
                "MongoDB Watcher configuration has not been provided.",
                field="configuration",
            )

        self.name = name
        self.group = group
        self._configuration = configuration
        self._connection = configuration.connection_provider(configuration.connection_string)

    @property
    def configuration(self) -> MongoDbWatcherConfiguration:
        return self._configuration

    async def execute(self) -> MongoDbWatcherCheckResult:
        with log_context(
            watcher_name=self.name,
            watcher_group=self.group,
            component="watcher",
            operation="execute",
        ):
            try:
                return await self._execute_check()
            except Exception as e:
                logger.error(
                    f"MongoDB check of database '{self._configuration.database}' failed: {e}",
                    exc_info=True,
                )
                raise WatcherException(
                    "There was an error while trying to access the MongoDB.",
                    watcher_name=self.name,
                ) from e

    async def close(self) -> None:
        await self._connection.close()

    async def _execute_check(self) -> MongoDbWatcherCheckResult:
        configuration = self._configuration
        logger.debug(f"Checking MongoDB database '{configuration.database}'")

        try:
            mongodb = await self._resolve_database()
            if mongodb is None:
                logger.info(f"Database '{configuration.database}' has not been found")
                return self._result(
                    False,
                    f"Database '{configuration.database}' has not been found.",
                    outcome=CheckOutcome.NOT_FOUND,
                )

            if not configuration.has_query:
                return self._result(
                    True,
                    f"Database {configuration.database} has been successfully checked.",
                )

            documents = await mongodb.query(configuration.collection_name, configuration.query)
            log_checkpoint(
                "query_executed",
                {"collection": configuration.collection_name, "result_count": len(documents)},
            )
        except PyMongoError as e:
            logger.warning(f"MongoDB driver error for database '{configuration.database}': {e}")
            return self._result(False, str(e), outcome=CheckOutcome.DRIVER_ERROR)

        is_valid = await evaluate_predicates(
            documents,
            ensure_that=configuration.ensure_that,
            ensure_that_async=configuration.ensure_that_async,
        )
        description = (
            f"MongoDB check has returned {'valid' if is_valid else 'invalid'} result "
            f"for database '{configuration.database}' and given query."
        )
        logger.info(description)

        return self._result(
            is_valid,
            description,
            query=configuration.query,
            query_result=documents,
        )

    async def _resolve_database(self) -> Optional[MongoDb]:
        """Single branch deciding which source yields the database handle."""
        if self._configuration.mongodb_provider is not None:
            mongodb = self._configuration.mongodb_provider()
            if inspect.isawaitable(mongodb):
                mongodb = await mongodb
            source = "provider"
        else:
            mongodb = await self._connection.get_database()
            source = "connection"

        log_checkpoint("database_resolved", {"source": source, "found": mongodb is not None})
        return mongodb

    def _result(self, is_valid: bool, description: str, **kwargs) -> MongoDbWatcherCheckResult:
        return MongoDbWatcherCheckResult.create(
            self,
            is_valid,
            database=self._configuration.database,
            connection_string=self._configuration.connection_string,
            description=description,
            **kwargs,
        )

    # ========================================================================
    # FACTORIES
    # ========================================================================

    @classmethod
    def create(
        cls,
        connection_string: str,
        database: str,
        *,
        name: str = DEFAULT_NAME,
        timeout: Optional[Timeout] = None,
        configurator: Optional[Callable[[Builder], None]] = None,
        group: Optional[str] = None,
    ) -> "MongoDbWatcher":
        """
        Create a watcher from connection settings.

        Args:
            connection_string: Connection string of the MongoDB server
            database: Name of the MongoDB database
            name: Watcher name (default "MongoDB Watcher")
            timeout: Connection timeout (5 seconds by default)
            configurator: Optional callable receiving the configuration builder
            group: Optional group the watcher belongs to
        """
        builder = MongoDbWatcherConfiguration.create(connection_string, database, timeout)
        if configurator is not None:
            configurator(builder)

        return cls(name, builder.build(), group)

    @classmethod
    def from_configuration(
        cls,
        configuration: MongoDbWatcherConfiguration,
        *,
        name: str = DEFAULT_NAME,
        group: Optional[str] = None,
    ) -> "MongoDbWatcher":
        """Create a watcher from a built configuration."""
        return cls(name, configuration, group)


__all__ = [
    "MongoDbWatcher",
]
