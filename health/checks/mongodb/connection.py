# ============================================================================
# MONGODB CONNECTION RESOLVER
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - Database lookup on a MongoDB server
# PURPOSE: Resolve a watched database by name, or report that it is missing
# CREATED: 19 OCT 2026
# ============================================================================
"""
MongoDB Connection Resolver

A MongoDbConnection identifies one server, one database name and one
timeout. get_database() is evaluated on every check:
- database listed on the server -> MongoDb handle
- server reachable, database absent -> None
- transport, auth or timeout failure -> pymongo.errors.PyMongoError

Connection strings have the fixed shape <scheme>://<host>:<port>, where
the scheme prefix is exactly as long as "mongodb://". The string is parsed
when the connection is constructed, so a malformed value fails before any
check runs.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from pymongo import AsyncMongoClient

from health.core import WatcherConfigurationError
from health.checks.mongodb.database import DefaultMongoDb, MongoDb

logger = logging.getLogger(__name__)

MONGODB_SCHEME_PREFIX = "mongodb://"
SCHEME_PREFIX_LENGTH = len(MONGODB_SCHEME_PREFIX)
MAX_PORT = 65535


class ConnectionStringError(WatcherConfigurationError):
    """Raised when a connection string is not <scheme>://<host>:<port>."""

    def __init__(self, message: str, connection_string: str):
        self.connection_string = connection_string
        super().__init__(message, field="connection_string")


def parse_server_address(connection_string: str) -> Tuple[str, int]:
    """
    Split a connection string into host and port.

    The first SCHEME_PREFIX_LENGTH characters are dropped and must end
    with "://"; the remainder must be exactly "<host>:<port>".

    Raises:
        ConnectionStringError: If the string does not have that shape
    """
    if len(connection_string) <= SCHEME_PREFIX_LENGTH or not connection_string[
        :SCHEME_PREFIX_LENGTH
    ].endswith("://"):
        raise ConnectionStringError(
            f"Connection string must start with a {SCHEME_PREFIX_LENGTH}-character "
            f"scheme prefix such as '{MONGODB_SCHEME_PREFIX}'.",
            connection_string,
        )

    host_and_port = connection_string[SCHEME_PREFIX_LENGTH:].split(":")
    if len(host_and_port) != 2:
        raise ConnectionStringError(
            "Connection string must have the form <scheme>://<host>:<port>.",
            connection_string,
        )

    host, port_text = host_and_port
    if not host:
        raise ConnectionStringError("Connection string host can not be empty.", connection_string)
    if not port_text.isdigit():
        raise ConnectionStringError(
            f"Connection string port must be numeric, got '{port_text}'.",
            connection_string,
        )

    port = int(port_text)
    if not 0 < port <= MAX_PORT:
        raise ConnectionStringError(
            f"Connection string port must be between 1 and {MAX_PORT}, got {port}.",
            connection_string,
        )
    return host, port


class MongoDbConnection(ABC):
    """
    Connection used by the watcher to find its database.

    Attributes:
        database: Name of the watched database
        connection_string: Connection string of the server
        timeout_seconds: Connect and server selection timeout
    """

    database: str
    connection_string: str
    timeout_seconds: float

    @abstractmethod
    async def get_database(self) -> Optional[MongoDb]:
        """
        Look up the database on the server.

        Returns:
            MongoDb handle, or None if the database does not exist

        Raises:
            pymongo.errors.PyMongoError: If the server can not be queried
        """
        pass

    async def close(self) -> None:
        """Release any client held by the connection."""
        return None


class DefaultMongoDbConnection(MongoDbConnection):
    """
    MongoDbConnection backed by pymongo's AsyncMongoClient.

    The client is created on first use and reused afterwards; pooling is
    left to the driver.
    """

    def __init__(self, database: str, connection_string: str, timeout_seconds: float):
        self.database = database
        self.connection_string = connection_string
        self.timeout_seconds = timeout_seconds
        self.host, self.port = parse_server_address(connection_string)
        self._client: Optional[AsyncMongoClient] = None

    def _get_client(self) -> AsyncMongoClient:
        if self._client is None:
            timeout_ms = int(self.timeout_seconds * 1000)
            self._client = AsyncMongoClient(
                host=self.host,
                port=self.port,
                connectTimeoutMS=timeout_ms,
                serverSelectionTimeoutMS=timeout_ms,
            )
            logger.debug(
                f"Created MongoDB client for {self.host}:{self.port} "
                f"(timeout={self.timeout_seconds}s)"
            )
        return self._client

    async def get_database(self) -> Optional[MongoDb]:
        client = self._get_client()
        database_names = await client.list_database_names()

        if self.database not in database_names:
            logger.debug(
                f"Database {self.database} not listed on {self.host}:{self.port} "
                f"({len(database_names)} databases)"
            )
            return None

        return DefaultMongoDb(client[self.database])

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "MONGODB_SCHEME_PREFIX",
    "SCHEME_PREFIX_LENGTH",
    "ConnectionStringError",
    "parse_server_address",
    "MongoDbConnection",
    "DefaultMongoDbConnection",
]
