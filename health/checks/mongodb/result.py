# ============================================================================
# MONGODB WATCHER CHECK RESULT
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - MongoDB-specific check result
# PURPOSE: Carry database, query and documents alongside the generic result
# CREATED: 19 OCT 2026
# ============================================================================
"""
MongoDB Watcher Check Result

Extends WatcherCheckResult with the database, connection string, query and
query result of a check, and tags every result with a CheckOutcome so the
reason behind is_valid never has to be parsed out of the description.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from health.core import Watcher, WatcherCheckResult
from health.checks.mongodb.documents import Document


class CheckOutcome(str, Enum):
    """Why a check ended the way it did."""
    VALID = "valid"                  # Database found, predicates passed
    INVALID = "invalid"              # Query ran, predicates failed
    NOT_FOUND = "not_found"          # Server reachable, database missing
    DRIVER_ERROR = "driver_error"    # Transport, auth or timeout failure


@dataclass
class MongoDbWatcherCheckResult(WatcherCheckResult):
    """Result of a MongoDB watcher check."""
    database: str = ""
    connection_string: str = ""
    query: str = ""
    query_result: List[Document] = field(default_factory=list)
    outcome: CheckOutcome = CheckOutcome.VALID

    @classmethod
    def create(
        cls,
        watcher: Watcher,
        is_valid: bool,
        database: str = "",
        connection_string: str = "",
        description: str = "",
        query: str = "",
        query_result: Optional[List[Document]] = None,
        outcome: Optional[CheckOutcome] = None,
    ) -> "MongoDbWatcherCheckResult":
        """
        Create a result for a MongoDB watcher.

        outcome defaults to VALID or INVALID according to is_valid.
        """
        if outcome is None:
            outcome = CheckOutcome.VALID if is_valid else CheckOutcome.INVALID

        return cls(
            watcher_name=watcher.name,
            watcher_type=watcher.watcher_type,
            watcher_group=watcher.group,
            is_valid=is_valid,
            description=description,
            database=database,
            connection_string=connection_string,
            query=query,
            query_result=list(query_result or []),
            outcome=outcome,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update({
            "outcome": self.outcome.value,
            "database": self.database,
            "connection_string": self.connection_string,
            "query": self.query,
            "result_count": len(self.query_result),
            "query_result": [document.to_json_dict() for document in self.query_result],
        })
        return result


__all__ = [
    "CheckOutcome",
    "MongoDbWatcherCheckResult",
]
