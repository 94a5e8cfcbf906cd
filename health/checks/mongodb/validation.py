# ============================================================================
# MONGODB RESULT VALIDATION
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - Predicate composition
# PURPOSE: Combine the sync and async predicates into a single verdict
# CREATED: 19 OCT 2026
# ============================================================================
"""
Result Validation

Combines the optional predicates configured on a watcher:

    neither configured  -> True
    only ensure_that    -> its result
    only async          -> its awaited result
    both configured     -> async first, then sync; async AND sync

Both predicates always run, even when the async one already returned
False. Exceptions raised by a predicate propagate to the caller.
"""

from typing import Awaitable, Callable, List, Optional

from health.checks.mongodb.documents import Document

SyncPredicate = Callable[[List[Document]], bool]
AsyncPredicate = Callable[[List[Document]], Awaitable[bool]]


async def evaluate_predicates(
    documents: List[Document],
    ensure_that: Optional[SyncPredicate] = None,
    ensure_that_async: Optional[AsyncPredicate] = None,
) -> bool:
    """
    Evaluate the configured predicates over a query result.

    Args:
        documents: Documents returned by the query
        ensure_that: Optional synchronous predicate
        ensure_that_async: Optional asynchronous predicate

    Returns:
        Combined verdict
    """
    is_valid = True

    if ensure_that_async is not None:
        is_valid = bool(await ensure_that_async(documents))

    if ensure_that is not None:
        sync_result = bool(ensure_that(documents))
        is_valid = is_valid and sync_result

    return is_valid


__all__ = [
    "SyncPredicate",
    "AsyncPredicate",
    "evaluate_predicates",
]
