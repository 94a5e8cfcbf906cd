# ============================================================================
# MONGODB QUERY EXECUTOR
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - Query execution against a resolved database
# PURPOSE: Run a watcher's filter query and materialise the documents
# CREATED: 19 OCT 2026
# ============================================================================
"""
MongoDB Query Executor

A MongoDb handle represents a database confirmed to exist on the server.
Its single operation runs a filter query against a named collection and
returns every matching document.

Queries are MongoDB Extended JSON filter documents, for example:

    {"name": "admin"}
    {"createdAt": {"$gte": {"$date": "2026-01-01T00:00:00Z"}}}

Result sets of a health check are small, so the cursor is drained in full.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from bson import json_util
from bson.errors import BSONError
from pymongo.asynchronous.database import AsyncDatabase

from health.checks.mongodb.documents import Document

logger = logging.getLogger(__name__)


class QueryParseError(ValueError):
    """Raised when a query is not a valid Extended JSON filter document."""

    def __init__(self, message: str, query: str):
        self.query = query
        super().__init__(message)


def parse_query(query: str) -> Dict[str, Any]:
    """
    Deserialize an Extended JSON filter document.

    Raises:
        QueryParseError: If the text is not JSON or not a JSON object
    """
    try:
        filter_document = json_util.loads(query)
    except (ValueError, TypeError, BSONError) as e:
        raise QueryParseError(f"MongoDB query could not be parsed: {e}", query) from e

    if not isinstance(filter_document, dict):
        raise QueryParseError(
            f"MongoDB query must be a JSON object, got {type(filter_document).__name__}.",
            query,
        )
    return filter_document


class MongoDb(ABC):
    """Handle to an existing MongoDB database."""

    @abstractmethod
    async def query(self, collection_name: str, query: str) -> List[Document]:
        """
        Execute a filter query against a collection.

        Args:
            collection_name: Name of the collection in the database
            query: Extended JSON filter document

        Returns:
            All matching documents, in the order the server returns them
        """
        pass


class DefaultMongoDb(MongoDb):
    """MongoDb backed by a pymongo AsyncDatabase."""

    def __init__(self, database: AsyncDatabase):
        self._database = database

    @property
    def name(self) -> str:
        return self._database.name

    async def query(self, collection_name: str, query: str) -> List[Document]:
        filter_document = parse_query(query)
        cursor = self._database[collection_name].find(filter_document)
        raw_documents = await cursor.to_list(length=None)

        logger.debug(
            f"Query on {self._database.name}.{collection_name} "
            f"returned {len(raw_documents)} documents"
        )
        return [Document.from_bson(raw) for raw in raw_documents]


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "QueryParseError",
    "parse_query",
    "MongoDb",
    "DefaultMongoDb",
]
