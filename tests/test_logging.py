# ============================================================================
# STRUCTURED LOGGING TESTS
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Tests - Log context and formatters
# PURPOSE: Verify context nesting, task isolation and JSON output
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging Tests

Run with:
    pytest tests/test_logging.py -v
"""

import asyncio
import json
import logging

from core.logging import (
    ComponentType,
    HumanFormatter,
    StructuredFormatter,
    get_current_context,
    get_logger,
    log_checkpoint,
    log_context,
)


# ============================================================================
# HELPERS
# ============================================================================

def _record(message="Resolving database", extra=None):
    record = logging.LogRecord(
        name="health.checks.mongodb.watcher",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    if extra is not None:
        record.extra = extra
    return record


# ============================================================================
# CONTEXT
# ============================================================================

class TestLogContext:

    def test_empty_by_default(self):
        assert get_current_context().to_dict() == {}

    def test_nested_contexts_inherit(self):
        with log_context(watcher_name="MongoDB Watcher", component="executor"):
            with log_context(check_id="abc", operation="execute"):
                context = get_current_context().to_dict()
                assert context == {
                    "watcher_name": "MongoDB Watcher",
                    "check_id": "abc",
                    "component": "executor",
                    "operation": "execute",
                }
            assert "check_id" not in get_current_context().to_dict()
        assert get_current_context().to_dict() == {}

    def test_extra_fields_merged(self):
        with log_context(extra={"database": "TestDb"}):
            with log_context(extra={"collection": "Users"}):
                assert get_current_context().to_dict() == {
                    "database": "TestDb",
                    "collection": "Users",
                }

    def test_context_isolated_between_tasks(self):
        async def check(name):
            with log_context(watcher_name=name):
                await asyncio.sleep(0.01)
                return get_current_context().watcher_name

        async def run_both():
            return await asyncio.gather(check("users"), check("orders"))

        assert asyncio.run(run_both()) == ["users", "orders"]


# ============================================================================
# FORMATTERS
# ============================================================================

class TestFormatters:

    def test_structured_formatter_includes_context(self):
        with log_context(watcher_name="MongoDB Watcher", check_id="abc"):
            output = json.loads(StructuredFormatter().format(_record()))

        assert output["level"] == "INFO"
        assert output["message"] == "Resolving database"
        assert output["context"] == {"watcher_name": "MongoDB Watcher", "check_id": "abc"}

    def test_structured_formatter_data(self):
        output = json.loads(StructuredFormatter().format(_record(extra={"result_count": 2})))
        assert output["data"] == {"result_count": 2}

    def test_human_formatter_inline_context(self):
        with log_context(watcher_name="MongoDB Watcher", watcher_group="storage"):
            output = HumanFormatter().format(_record())

        assert "[watcher=MongoDB Watcher, group=storage]" in output
        assert output.endswith("Resolving database")


# ============================================================================
# LOGGERS
# ============================================================================

class TestContextLogger:

    def test_context_attached_to_records(self, caplog):
        logger = get_logger("tests.watcher", ComponentType.WATCHER)

        with caplog.at_level(logging.INFO, logger="tests.watcher"):
            with log_context(watcher_name="MongoDB Watcher"):
                logger.info("Database found")

        record = caplog.records[-1]
        assert record.extra["watcher_name"] == "MongoDB Watcher"
        assert record.extra["component"] == "watcher"

    def test_context_component_wins_over_logger_component(self, caplog):
        logger = get_logger("tests.watcher", ComponentType.WATCHER)

        with caplog.at_level(logging.INFO, logger="tests.watcher"):
            with log_context(component="executor"):
                logger.info("Check scheduled")

        assert caplog.records[-1].extra["component"] == "executor"

    def test_checkpoint_logged_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="checkpoint"):
            with log_context(watcher_name="MongoDB Watcher"):
                log_checkpoint("query_executed", {"result_count": 2})

        record = caplog.records[-1]
        assert record.levelno == logging.DEBUG
        assert record.extra["checkpoint"] == "query_executed"
        assert record.extra["watcher_name"] == "MongoDB Watcher"
        assert record.extra["data"] == {"result_count": 2}
