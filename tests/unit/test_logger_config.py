"""
Unit tests for logger_config module.

Covers the JSON formatter, structured error logging, log_tool_failure and
the log_mcp_call decorator for sync and async tools.
"""

import json
import logging

import pytest

from prompt_mcp.exceptions import PromptNotFoundError
from prompt_mcp.exceptions import ValidationError
from prompt_mcp.logger_config import ErrorCategory
from prompt_mcp.logger_config import StructuredLogFormatter
from prompt_mcp.logger_config import error_logger
from prompt_mcp.logger_config import log_mcp_call
from prompt_mcp.logger_config import log_structured_error
from prompt_mcp.logger_config import log_tool_failure
from prompt_mcp.logger_config import mcp_call_logger


class CapturingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def captured_errors():
    handler = CapturingHandler()
    error_logger.addHandler(handler)
    yield handler.records
    error_logger.removeHandler(handler)


@pytest.fixture
def captured_calls():
    handler = CapturingHandler()
    mcp_call_logger.addHandler(handler)
    yield handler.records
    mcp_call_logger.removeHandler(handler)


class TestStructuredLogFormatter:
    def test_basic_log_entry(self):
        record = logging.LogRecord(
            name="test_logger",
            level=logging.ERROR,
            pathname="test.py",
            lineno=10,
            msg="Test message",
            args=(),
            exc_info=None,
        )

        log_data = json.loads(StructuredLogFormatter().format(record))

        assert log_data["level"] == "ERROR"
        assert log_data["logger"] == "test_logger"
        assert log_data["message"] == "Test message"
        assert log_data["line"] == 10
        assert "exception" not in log_data

    def test_extra_fields_and_exception(self):
        try:
            raise ValueError("bad value")
        except ValueError:
            import sys

            exc_info = sys.exc_info()
        record = logging.LogRecord("t", logging.ERROR, "t.py", 1, "failed", (), exc_info)
        record.operation = "save_prompt"

        log_data = json.loads(StructuredLogFormatter().format(record))

        assert log_data["operation"] == "save_prompt"
        assert log_data["exception"]["type"] == "ValueError"
        assert log_data["exception"]["message"] == "bad value"


class TestLogStructuredError:
    def test_category_sets_level(self, captured_errors):
        log_structured_error(ErrorCategory.WARNING, "careful", operation="list_prompts")

        record = captured_errors[-1]
        assert record.levelno == logging.WARNING
        assert record.error_category == "WARNING"
        assert record.operation == "list_prompts"

    def test_exception_details_attached(self, captured_errors):
        error = PromptNotFoundError("/Prompts/a.md", provider="dropbox")

        log_structured_error(ErrorCategory.ERROR, "read failed", exception=error, context={"prompt_name": "a"})

        record = captured_errors[-1]
        assert record.error_details["error_code"] == "NOT_FOUND"
        assert record.prompt_name == "a"

    def test_reserved_context_keys_are_renamed(self, captured_errors):
        log_structured_error(ErrorCategory.ERROR, "clash", context={"name": "a", "message": "m"})

        record = captured_errors[-1]
        assert record.context_name == "a"
        assert record.context_message == "m"


def test_log_tool_failure_returns_user_message(captured_errors):
    error = PromptNotFoundError("/Prompts/a.md")

    message = log_tool_failure("get_prompt", error, {"prompt_name": "a"})

    assert message == error.user_message
    assert captured_errors[-1].operation == "get_prompt"


def test_log_tool_failure_with_category(captured_errors):
    error = ValidationError("Search query cannot be empty", field="query", value="")

    message = log_tool_failure("search_prompts", error, category=ErrorCategory.WARNING)

    assert message == "Search query cannot be empty"
    assert captured_errors[-1].levelno == logging.WARNING
    assert captured_errors[-1].error_details["error_code"] == "VALIDATION_ERROR"


class TestLogMcpCall:
    def test_sync_function(self, captured_calls):
        @log_mcp_call
        def add(a, b):
            return a + b

        assert add(2, 3) == 5
        messages = [r.getMessage() for r in captured_calls]
        assert any("Calling tool: add" in m for m in messages)
        assert any("Tool add returned: 5" in m for m in messages)

    @pytest.mark.asyncio
    async def test_async_function(self, captured_calls):
        @log_mcp_call
        async def fetch(name):
            return f"content of {name}"

        assert await fetch("a") == "content of a"
        assert fetch.__name__ == "fetch"
        assert any("Tool fetch returned" in r.getMessage() for r in captured_calls)

    @pytest.mark.asyncio
    async def test_async_exception_is_logged_and_reraised(self, captured_calls, captured_errors):
        @log_mcp_call
        async def broken():
            raise ValueError("broken tool")

        with pytest.raises(ValueError, match="broken tool"):
            await broken()

        assert any(r.levelno == logging.ERROR for r in captured_calls)
        assert captured_errors[-1].operation == "tool_execution"
        assert captured_errors[-1].function == "broken"
