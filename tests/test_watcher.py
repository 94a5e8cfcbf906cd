# ============================================================================
# MONGODB WATCHER TESTS
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Tests - Check pipeline
# PURPOSE: Verify found / not found / query / predicate / error outcomes
# CREATED: 19 OCT 2026
# ============================================================================
"""
MongoDB Watcher Tests

Unit tests with fake connections and databases. No server required.

Run with:
    pytest tests/test_watcher.py -v
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from bson import Decimal128
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from health.core import WatcherConfigurationError, WatcherException
from health.checks.mongodb.configuration import MongoDbWatcherConfiguration
from health.checks.mongodb.connection import ConnectionStringError
from health.checks.mongodb.database import DefaultMongoDb, MongoDb, QueryParseError
from health.checks.mongodb.documents import Document
from health.checks.mongodb.result import CheckOutcome, MongoDbWatcherCheckResult
from health.checks.mongodb.watcher import MongoDbWatcher

CONNECTION_STRING = "proto://localhost:27017"
DATABASE = "TestDb"
USERS_QUERY = '{"name": {"$in": ["admin", "user"]}}'


# ============================================================================
# HELPERS
# ============================================================================

def _users():
    return [
        Document.from_bson({"id": 1, "name": "admin", "role": "admin"}),
        Document.from_bson({"id": 2, "name": "user", "role": "user"}),
    ]


class FakeMongoDb(MongoDb):
    """MongoDb returning fixed documents and recording its queries."""

    def __init__(self, documents=None, error=None):
        self.documents = documents if documents is not None else _users()
        self.error = error
        self.queries = []

    async def query(self, collection_name, query):
        self.queries.append((collection_name, query))
        if self.error:
            raise self.error
        return self.documents


def _make_connection(mongodb=None, error=None):
    """Connection whose get_database() yields mongodb or raises error."""
    connection = MagicMock()
    connection.get_database = AsyncMock(return_value=mongodb)
    if error:
        connection.get_database.side_effect = error
    connection.close = AsyncMock()
    return connection


def _make_watcher(connection, configure=None, name="MongoDB Watcher"):
    """Build a watcher around a fake connection."""
    def configurator(builder):
        builder.with_connection_provider(lambda connection_string: connection)
        if configure is not None:
            configure(builder)

    return MongoDbWatcher.create(
        CONNECTION_STRING, DATABASE, name=name, configurator=configurator
    )


def _execute(watcher):
    return asyncio.run(watcher.execute())


# ============================================================================
# DATABASE RESOLUTION
# ============================================================================

class TestDatabaseResolution:
    """Found / not found without a query."""

    def test_database_found_without_query_is_valid(self):
        mongodb = FakeMongoDb()
        result = _execute(_make_watcher(_make_connection(mongodb)))

        assert isinstance(result, MongoDbWatcherCheckResult)
        assert result.is_valid
        assert result.outcome is CheckOutcome.VALID
        assert result.description == "Database TestDb has been successfully checked."
        assert result.database == DATABASE
        assert result.connection_string == CONNECTION_STRING
        assert result.query == ""
        assert result.query_result == []
        assert mongodb.queries == []

    def test_database_not_found_is_invalid(self):
        result = _execute(_make_watcher(_make_connection(None)))

        assert not result.is_valid
        assert result.outcome is CheckOutcome.NOT_FOUND
        assert result.description == "Database 'TestDb' has not been found."
        assert result.query_result == []

    def test_not_found_skips_query_and_predicates(self):
        ensure_that = MagicMock(return_value=True)
        watcher = _make_watcher(
            _make_connection(None),
            lambda builder: builder.with_query("Users", USERS_QUERY).ensure_that(ensure_that),
        )

        result = _execute(watcher)

        assert result.outcome is CheckOutcome.NOT_FOUND
        ensure_that.assert_not_called()

    def test_connection_provider_receives_connection_string(self):
        connection = _make_connection(FakeMongoDb())
        provider = MagicMock(return_value=connection)

        MongoDbWatcher.create(
            CONNECTION_STRING,
            DATABASE,
            configurator=lambda builder: builder.with_connection_provider(provider),
        )

        provider.assert_called_once_with(CONNECTION_STRING)

    def test_result_carries_watcher_identity(self):
        watcher = MongoDbWatcher.create(
            CONNECTION_STRING,
            DATABASE,
            name="users-db",
            group="storage",
            configurator=lambda builder: builder.with_connection_provider(
                lambda connection_string: _make_connection(FakeMongoDb())
            ),
        )

        result = _execute(watcher)

        assert result.watcher_name == "users-db"
        assert result.watcher_group == "storage"
        assert result.watcher_type == "mongodb"


# ============================================================================
# QUERY AND PREDICATES
# ============================================================================

class TestQueryValidation:
    """Query execution and predicate verdicts."""

    def test_query_with_passing_predicate(self):
        mongodb = FakeMongoDb()
        watcher = _make_watcher(
            _make_connection(mongodb),
            lambda builder: builder
            .with_query("Users", USERS_QUERY)
            .ensure_that(lambda users: any(user["id"] == 1 for user in users)),
        )

        result = _execute(watcher)

        assert result.is_valid
        assert result.outcome is CheckOutcome.VALID
        assert result.description == (
            "MongoDB check has returned valid result for database 'TestDb' and given query."
        )
        assert result.query == USERS_QUERY
        assert [document["name"] for document in result.query_result] == ["admin", "user"]
        assert mongodb.queries == [("Users", USERS_QUERY)]

    def test_query_with_failing_predicate(self):
        watcher = _make_watcher(
            _make_connection(FakeMongoDb()),
            lambda builder: builder
            .with_query("Users", USERS_QUERY)
            .ensure_that(lambda users: any(user["id"] == 3 for user in users)),
        )

        result = _execute(watcher)

        assert not result.is_valid
        assert result.outcome is CheckOutcome.INVALID
        assert result.description == (
            "MongoDB check has returned invalid result for database 'TestDb' and given query."
        )
        assert len(result.query_result) == 2

    def test_query_without_predicates_is_valid(self):
        watcher = _make_watcher(
            _make_connection(FakeMongoDb(documents=[])),
            lambda builder: builder.with_query("Users", "{}"),
        )

        result = _execute(watcher)

        assert result.is_valid
        assert result.query_result == []

    def test_failing_async_predicate_still_runs_sync_predicate(self):
        ensure_that = MagicMock(return_value=True)

        async def ensure_that_async(users):
            return False

        watcher = _make_watcher(
            _make_connection(FakeMongoDb()),
            lambda builder: builder
            .with_query("Users", USERS_QUERY)
            .ensure_that(ensure_that)
            .ensure_that_async(ensure_that_async),
        )

        result = _execute(watcher)

        assert not result.is_valid
        ensure_that.assert_called_once()

    def test_async_predicate(self):
        async def has_admin(users):
            await asyncio.sleep(0)
            return any(user["role"] == "admin" for user in users)

        watcher = _make_watcher(
            _make_connection(FakeMongoDb()),
            lambda builder: builder.with_query("Users", USERS_QUERY).ensure_that_async(has_admin),
        )

        assert _execute(watcher).is_valid

    def test_to_dict_serializes_documents(self):
        watcher = _make_watcher(
            _make_connection(FakeMongoDb()),
            lambda builder: builder.with_query("Users", USERS_QUERY),
        )

        data = _execute(watcher).to_dict()

        assert data["outcome"] == "valid"
        assert data["result_count"] == 2
        assert data["query_result"][0] == {"id": 1, "name": "admin", "role": "admin"}
        assert data["database"] == DATABASE

    def test_membership_predicate_gives_verdict(self):
        watcher = _make_watcher(
            _make_connection(FakeMongoDb()),
            lambda builder: builder
            .with_query("Users", "{}")
            .ensure_that(lambda users: any(user["id"] in {1, 2} for user in users)),
        )

        result = _execute(watcher)

        assert result.is_valid
        assert result.outcome is CheckOutcome.VALID

    def test_membership_predicate_without_match_is_invalid(self):
        watcher = _make_watcher(
            _make_connection(FakeMongoDb()),
            lambda builder: builder
            .with_query("Users", "{}")
            .ensure_that(lambda users: any(user["id"] in {3} for user in users)),
        )

        assert _execute(watcher).outcome is CheckOutcome.INVALID

    def test_to_dict_serializes_decimal_fields(self):
        documents = [Document.from_bson({"id": 1, "price": Decimal128("9.99")})]
        watcher = _make_watcher(
            _make_connection(FakeMongoDb(documents=documents)),
            lambda builder: builder.with_query("Users", "{}"),
        )

        data = _execute(watcher).to_dict()

        assert data["is_valid"] is True
        assert data["query_result"] == [{"id": 1, "price": {"$numberDecimal": "9.99"}}]


# ============================================================================
# DRIVER ERRORS AND FAILURES
# ============================================================================

class TestErrors:
    """Driver errors are results; everything else is WatcherException."""

    def test_driver_error_on_lookup_is_invalid_result(self):
        error = ServerSelectionTimeoutError("localhost:27017: timed out")
        result = _execute(_make_watcher(_make_connection(error=error)))

        assert not result.is_valid
        assert result.outcome is CheckOutcome.DRIVER_ERROR
        assert result.description == "localhost:27017: timed out"

    def test_driver_error_on_query_is_invalid_result(self):
        ensure_that = MagicMock(return_value=True)
        watcher = _make_watcher(
            _make_connection(FakeMongoDb(error=OperationFailure("not authorized on TestDb"))),
            lambda builder: builder.with_query("Users", USERS_QUERY).ensure_that(ensure_that),
        )

        result = _execute(watcher)

        assert result.outcome is CheckOutcome.DRIVER_ERROR
        assert "not authorized" in result.description
        ensure_that.assert_not_called()

    def test_predicate_error_raises_watcher_exception(self):
        def broken(users):
            raise KeyError("missing")

        watcher = _make_watcher(
            _make_connection(FakeMongoDb()),
            lambda builder: builder.with_query("Users", USERS_QUERY).ensure_that(broken),
        )

        with pytest.raises(WatcherException) as exc_info:
            _execute(watcher)

        assert str(exc_info.value) == "There was an error while trying to access the MongoDB."
        assert exc_info.value.watcher_name == "MongoDB Watcher"
        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_unexpected_lookup_error_raises_watcher_exception(self):
        watcher = _make_watcher(_make_connection(error=RuntimeError("boom")))

        with pytest.raises(WatcherException) as exc_info:
            _execute(watcher)

        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_unparseable_query_raises_watcher_exception(self):
        database = MagicMock()
        database.name = DATABASE
        watcher = _make_watcher(
            _make_connection(DefaultMongoDb(database)),
            lambda builder: builder.with_query("Users", "name = admin"),
        )

        with pytest.raises(WatcherException) as exc_info:
            _execute(watcher)

        assert isinstance(exc_info.value.__cause__, QueryParseError)
        database.__getitem__.assert_not_called()


# ============================================================================
# DATABASE PROVIDER
# ============================================================================

class TestMongoDbProvider:
    """A configured mongodb_provider replaces the connection lookup."""

    def test_provider_takes_precedence(self):
        connection = _make_connection(None)
        mongodb = FakeMongoDb()
        watcher = _make_watcher(
            connection,
            lambda builder: builder
            .with_mongodb_provider(lambda: mongodb)
            .with_query("Users", USERS_QUERY),
        )

        result = _execute(watcher)

        assert result.is_valid
        assert mongodb.queries == [("Users", USERS_QUERY)]
        connection.get_database.assert_not_awaited()

    def test_async_provider(self):
        mongodb = FakeMongoDb()

        async def provide():
            return mongodb

        watcher = _make_watcher(
            _make_connection(None),
            lambda builder: builder.with_mongodb_provider(provide),
        )

        assert _execute(watcher).is_valid

    def test_provider_returning_none_is_not_found(self):
        watcher = _make_watcher(
            _make_connection(FakeMongoDb()),
            lambda builder: builder.with_mongodb_provider(lambda: None),
        )

        assert _execute(watcher).outcome is CheckOutcome.NOT_FOUND

    def test_provider_called_on_every_check(self):
        provider = MagicMock(return_value=FakeMongoDb())
        watcher = _make_watcher(
            _make_connection(None),
            lambda builder: builder.with_mongodb_provider(provider),
        )

        _execute(watcher)
        _execute(watcher)

        assert provider.call_count == 2


# ============================================================================
# REPEATED CHECKS
# ============================================================================

class TestRepeatedChecks:
    """Checks hold no state between runs."""

    def test_same_result_on_repeated_checks(self):
        watcher = _make_watcher(
            _make_connection(FakeMongoDb()),
            lambda builder: builder
            .with_query("Users", USERS_QUERY)
            .ensure_that(lambda users: len(users) == 2),
        )

        first = _execute(watcher)
        second = _execute(watcher)

        assert first.is_valid == second.is_valid
        assert first.description == second.description
        assert first.query_result == second.query_result

    def test_database_appearing_between_checks(self):
        connection = _make_connection(None)
        watcher = _make_watcher(connection)

        assert _execute(watcher).outcome is CheckOutcome.NOT_FOUND

        connection.get_database.return_value = FakeMongoDb()
        assert _execute(watcher).is_valid

    def test_close_releases_connection(self):
        connection = _make_connection(FakeMongoDb())
        watcher = _make_watcher(connection)

        asyncio.run(watcher.close())

        connection.close.assert_awaited_once()


# ============================================================================
# CONSTRUCTION
# ============================================================================

class TestConstruction:
    """Watcher construction and factories."""

    def test_default_name(self):
        watcher = _make_watcher(_make_connection(None))
        assert watcher.name == "MongoDB Watcher"

    def test_empty_name_rejected(self):
        configuration = MongoDbWatcherConfiguration.create(
            "mongodb://localhost:27017", DATABASE
        ).build()
        with pytest.raises(WatcherConfigurationError, match="name can not be empty"):
            MongoDbWatcher("", configuration)

    def test_missing_configuration_rejected(self):
        with pytest.raises(WatcherConfigurationError, match="configuration has not been provided"):
            MongoDbWatcher("MongoDB Watcher", None)

    def test_from_configuration(self):
        configuration = MongoDbWatcherConfiguration.create(
            "mongodb://localhost:27017", DATABASE
        ).build()

        watcher = MongoDbWatcher.from_configuration(configuration, name="users-db", group="storage")

        assert watcher.name == "users-db"
        assert watcher.group == "storage"
        assert watcher.configuration is configuration

    def test_default_connection_rejects_unsupported_scheme(self):
        with pytest.raises(ConnectionStringError):
            MongoDbWatcher.create(CONNECTION_STRING, DATABASE)

    def test_default_connection_rejects_missing_scheme(self):
        with pytest.raises(ConnectionStringError):
            MongoDbWatcher.create("localhost:27017", DATABASE)

    def test_default_connection_is_lazy(self):
        # Building the watcher must not contact a server
        watcher = MongoDbWatcher.create("mongodb://localhost:27017", DATABASE, timeout=1)
        assert watcher.configuration.timeout_seconds == 1.0
