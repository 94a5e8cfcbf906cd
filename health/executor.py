# ============================================================================
# WATCHER EXECUTOR
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Infrastructure - Parallel watcher execution
# PURPOSE: Execute registered watchers with timeouts, hooks and aggregation
# CREATED: 19 OCT 2026
# ============================================================================
"""
Watcher Executor

Executes registered watchers with:
- Parallel execution (bounded by max_parallel)
- Per-check timeout
- Hook invocation around every check
- Result aggregation

Execution of one registration:
1. on_start hook
2. watcher.execute() under the timeout
3. on_success or on_failure hook depending on is_valid, then on_completed
4. on_error hook if the check raised WatcherException or timed out

Hook failures are logged and never change the outcome of a check.
Scheduling by interval belongs to the caller; the executor runs on demand.
"""

import asyncio
import inspect
import time
import uuid
from typing import Any, Callable, Dict, List, Optional

from core.config import get_defaults
from core.logging import ComponentType, get_logger, log_context
from health.core import (
    AggregatedCheckResult,
    WatcherCheckResult,
    WatcherException,
)
from health.registry import WatcherRegistration, WatcherRegistry, get_registry

logger = get_logger(__name__, ComponentType.EXECUTOR)


class WatcherExecutor:
    """
    Executes watchers with parallel execution and timeouts.
    """

    def __init__(
        self,
        registry: Optional[WatcherRegistry] = None,
        overall_timeout: Optional[float] = None,
        max_parallel: Optional[int] = None,
    ):
        """
        Initialize executor.

        Args:
            registry: Watcher registry (uses global if None)
            overall_timeout: Max execution time of a single check
            max_parallel: Max concurrent checks
        """
        defaults = get_defaults().watcher
        self.registry = registry if registry is not None else get_registry()
        self.overall_timeout = overall_timeout or defaults.overall_timeout_seconds
        self.max_parallel = max_parallel or defaults.max_parallel

    async def execute_all(self) -> AggregatedCheckResult:
        """
        Execute all registered watchers.

        Returns:
            Aggregated result with every check outcome
        """
        start_time = time.monotonic()
        registrations = self.registry.get_all()

        if not registrations:
            return AggregatedCheckResult(results={}, errors={}, total_duration_ms=0.0)

        results, errors = await self._execute_many(registrations)

        total_duration_ms = (time.monotonic() - start_time) * 1000
        aggregated = AggregatedCheckResult(
            results=results,
            errors=errors,
            total_duration_ms=total_duration_ms,
        )
        logger.info(
            f"Executed {len(registrations)} watchers: "
            f"{sum(1 for r in results.values() if r.is_valid)} valid, "
            f"{sum(1 for r in results.values() if not r.is_valid)} invalid, "
            f"{len(errors)} errors ({total_duration_ms:.1f}ms)"
        )
        return aggregated

    async def execute_group(self, group: str) -> AggregatedCheckResult:
        """Execute only the watchers belonging to a group."""
        start_time = time.monotonic()
        results, errors = await self._execute_many(self.registry.get_by_group(group))
        return AggregatedCheckResult(
            results=results,
            errors=errors,
            total_duration_ms=(time.monotonic() - start_time) * 1000,
        )

    async def execute_single(self, name: str) -> Optional[WatcherCheckResult]:
        """
        Execute a single watcher by name.

        Returns:
            The check result, or None if no watcher has that name

        Raises:
            WatcherException: If the check could not be carried out
        """
        registration = self.registry.get(name)
        if registration is None:
            return None

        return await self.execute_registration(registration)

    async def execute_registration(
        self,
        registration: WatcherRegistration,
    ) -> WatcherCheckResult:
        """Execute one registration with hooks and timeout."""
        watcher = registration.watcher
        hooks = registration.hooks

        with log_context(
            watcher_name=watcher.name,
            watcher_group=watcher.group,
            check_id=uuid.uuid4().hex[:12],
            component="executor",
        ):
            await self._invoke_hook(hooks.on_start, watcher, "on_start")
            start_time = time.monotonic()

            try:
                result = await asyncio.wait_for(
                    watcher.execute(),
                    timeout=self.overall_timeout,
                )
            except asyncio.TimeoutError as e:
                logger.warning(
                    f"Watcher {watcher.name} timed out after {self.overall_timeout}s"
                )
                error = WatcherException(
                    f"Timeout after {self.overall_timeout}s",
                    watcher_name=watcher.name,
                )
                error.__cause__ = e
                await self._invoke_hook(hooks.on_error, error, "on_error")
                raise error
            except WatcherException as e:
                logger.error(f"Watcher {watcher.name} failed: {e}")
                await self._invoke_hook(hooks.on_error, e, "on_error")
                raise
            except Exception as e:
                logger.error(f"Watcher {watcher.name} raised unexpected error: {e}")
                error = WatcherException(
                    f"Watcher '{watcher.name}' raised an unexpected error.",
                    watcher_name=watcher.name,
                )
                error.__cause__ = e
                await self._invoke_hook(hooks.on_error, error, "on_error")
                raise error

            result.duration_ms = (time.monotonic() - start_time) * 1000
            logger.debug(
                f"Watcher {watcher.name}: "
                f"{'valid' if result.is_valid else 'invalid'} "
                f"({result.duration_ms:.1f}ms)"
            )

            if result.is_valid:
                await self._invoke_hook(hooks.on_success, result, "on_success")
            else:
                await self._invoke_hook(hooks.on_failure, result, "on_failure")
            await self._invoke_hook(hooks.on_completed, result, "on_completed")

            return result

    async def _execute_many(
        self,
        registrations: List[WatcherRegistration],
    ):
        """Execute registrations in parallel, collecting results and errors."""
        results: Dict[str, WatcherCheckResult] = {}
        errors: Dict[str, str] = {}

        if not registrations:
            return results, errors

        semaphore = asyncio.Semaphore(self.max_parallel)

        async def run_with_semaphore(registration: WatcherRegistration):
            async with semaphore:
                try:
                    results[registration.name] = await self.execute_registration(
                        registration
                    )
                except WatcherException as e:
                    errors[registration.name] = str(e)

        await asyncio.gather(
            *(run_with_semaphore(registration) for registration in registrations)
        )
        return results, errors

    async def _invoke_hook(
        self,
        hook: Optional[Callable[[Any], Any]],
        argument: Any,
        hook_name: str,
    ) -> None:
        """Invoke a sync or async hook, logging any failure."""
        if hook is None:
            return

        try:
            outcome = hook(argument)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.error(f"Hook {hook_name} failed: {e}")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "WatcherExecutor",
]
