"""Tests for logging setup and the event loop safety net."""

import asyncio
import json
import logging
from collections.abc import Iterator

import pytest

from blt_mcp.observability import (
    ROOT_LOGGER,
    JSONFormatter,
    configure_logging,
    handle_loop_exception,
    install_safety_net,
)


@pytest.fixture
def restore_package_logger() -> Iterator[None]:
    package_logger = logging.getLogger(ROOT_LOGGER)
    handlers = list(package_logger.handlers)
    level, propagate = package_logger.level, package_logger.propagate
    yield
    package_logger.handlers = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate


class TestJSONFormatter:
    def test_includes_extras(self) -> None:
        record = logging.LogRecord(
            "blt_mcp.tools", logging.WARNING, __file__, 1, "Tool %s failed", ("x",), None
        )
        record.tool = "add_comment"
        record.error_type = "HTTP_ERROR"

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "Tool x failed"
        assert data["level"] == "WARNING"
        assert data["tool"] == "add_comment"
        assert data["error_type"] == "HTTP_ERROR"
        assert "resource_uri" not in data


class TestConfigureLogging:
    @pytest.mark.usefixtures("restore_package_logger")
    def test_single_stderr_handler(self) -> None:
        configure_logging("DEBUG", "json")
        package_logger = configure_logging("WARNING", "json")

        assert len(package_logger.handlers) == 1
        assert isinstance(package_logger.handlers[0].formatter, JSONFormatter)
        assert package_logger.level == logging.WARNING


class TestSafetyNet:
    def test_logs_escaped_exception(self, caplog: pytest.LogCaptureFixture) -> None:
        loop = asyncio.new_event_loop()
        try:
            with caplog.at_level(logging.ERROR, logger="blt_mcp.observability"):
                handle_loop_exception(
                    loop,
                    {"message": "Task exception was never retrieved", "exception": KeyError("k")},
                )
        finally:
            loop.close()

        assert "Task exception was never retrieved" in caplog.text
        assert caplog.records[0].error_type == "KeyError"

    @pytest.mark.asyncio
    async def test_installed_on_running_loop(self) -> None:
        install_safety_net()
        assert asyncio.get_running_loop().get_exception_handler() is handle_loop_exception

    @pytest.mark.asyncio
    async def test_loop_survives_orphaned_task_failure(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """An exception nobody awaits is logged and the loop keeps running."""
        loop = asyncio.get_running_loop()
        install_safety_net(loop)

        loop.call_soon(lambda: 1 / 0)
        with caplog.at_level(logging.ERROR, logger="blt_mcp.observability"):
            await asyncio.sleep(0.01)

        assert "ZeroDivisionError" in caplog.text or "Unhandled exception" in caplog.text
        assert loop.is_running()
