"""Logging configuration for the Prompt MCP system.

Two loggers are configured here:
- ``mcp_call_logger`` records every tool call with its arguments and result.
- ``error_logger`` writes structured JSON records for failures.
"""

import functools
import inspect
import json
import logging
import os
import traceback
from datetime import datetime
from datetime import timezone
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from .metrics_config import record_tool_call_error
from .metrics_config import record_tool_call_start
from .metrics_config import record_tool_call_success


class ErrorCategory(Enum):
    """Severity categories for structured error logging."""

    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


_CATEGORY_LEVELS = {
    ErrorCategory.CRITICAL: logging.CRITICAL,
    ErrorCategory.ERROR: logging.ERROR,
    ErrorCategory.WARNING: logging.WARNING,
    ErrorCategory.INFO: logging.INFO,
}

# Attributes every LogRecord carries; anything else came in through ``extra``.
_STANDARD_RECORD_ATTRS = set(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class StructuredLogFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            log_data["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }
        for key, value in vars(record).items():
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_"):
                log_data[key] = value
        return json.dumps(log_data, default=str)


# --- Logging Setup ---
log_dir = Path(os.environ.get("PROMPT_MCP_LOG_DIR", Path(__file__).resolve().parent))
log_dir.mkdir(parents=True, exist_ok=True)

mcp_call_logger = logging.getLogger("mcp_call_logger")
mcp_call_logger.setLevel(logging.INFO)

# maxBytes: 10MB per file, backupCount: 5 files (total ~50MB)
file_handler = RotatingFileHandler(log_dir / "mcp_calls.log", maxBytes=10 * 1024 * 1024, backupCount=5)
file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
mcp_call_logger.addHandler(file_handler)
mcp_call_logger.propagate = False

error_logger = logging.getLogger("error_logger")
error_logger.setLevel(logging.INFO)
error_file_handler = RotatingFileHandler(log_dir / "errors.log", maxBytes=10 * 1024 * 1024, backupCount=5)
error_file_handler.setFormatter(StructuredLogFormatter())
error_logger.addHandler(error_file_handler)
error_logger.propagate = False


def log_structured_error(
    category: ErrorCategory,
    message: str,
    exception: BaseException | None = None,
    context: dict[str, Any] | None = None,
    operation: str | None = None,
    **kwargs,
) -> None:
    """Log an error with a category, the failing operation and arbitrary context."""
    extra: dict[str, Any] = {"error_category": category.value}
    if operation:
        extra["operation"] = operation
    if context:
        extra.update(context)
    extra.update(kwargs)
    if exception is not None and hasattr(exception, "to_dict"):
        extra["error_details"] = exception.to_dict()
    # LogRecord refuses extra keys that shadow its own attributes
    extra = {(f"context_{k}" if k in _STANDARD_RECORD_ATTRS else k): v for k, v in extra.items()}

    error_logger.log(
        _CATEGORY_LEVELS.get(category, logging.ERROR),
        message,
        exc_info=exception is not None,
        extra=extra,
    )


def _format_for_log(value: Any) -> str:
    if hasattr(value, "model_dump_json"):  # Pydantic v2 model
        return value.model_dump_json(indent=None, exclude_none=True)
    if isinstance(value, list) and value and hasattr(value[0], "model_dump_json"):
        return "[" + ", ".join(item.model_dump_json(indent=None, exclude_none=True) for item in value) + "]"
    return repr(value)


def _describe_call(args: tuple, kwargs: dict) -> str:
    try:
        logged_args = [_format_for_log(arg) for arg in args]
        logged_kwargs = {k: _format_for_log(v) for k, v in kwargs.items()}
        return f"args={logged_args}, kwargs={logged_kwargs}"
    except Exception as e:
        return f"args/kwargs logging error: {e}"


def _result_size(result: Any) -> int:
    if isinstance(result, str):
        return len(result.encode("utf-8"))
    try:
        return len(str(result))
    except Exception:
        return 0


def _record_start(func_name: str, args: tuple, kwargs: dict) -> float | None:
    try:
        return record_tool_call_start(func_name, args, kwargs)
    except Exception as e:
        # Don't let metrics errors break the function call
        mcp_call_logger.warning(f"Metrics recording failed for {func_name}: {e}")
        return None


def _record_success(func_name: str, start_time: float | None, result: Any) -> None:
    try:
        record_tool_call_success(func_name, start_time, _result_size(result))
    except Exception as e:
        mcp_call_logger.warning(f"Metrics success recording failed for {func_name}: {e}")
    try:
        result_str = _format_for_log(result)
    except Exception as e:
        result_str = f"Result logging error: {e}"
    mcp_call_logger.info(f"Tool {func_name} returned: {result_str}")


def _record_failure(func_name: str, start_time: float | None, error: Exception) -> None:
    try:
        record_tool_call_error(func_name, start_time, error)
    except Exception as metrics_error:
        mcp_call_logger.warning(f"Metrics error recording failed for {func_name}: {metrics_error}")
    mcp_call_logger.error(f"Tool {func_name} raised exception: {error}", exc_info=True)
    log_structured_error(
        category=ErrorCategory.ERROR,
        message=f"Tool {func_name} failed: {error}",
        exception=error,
        operation="tool_execution",
        function=func_name,
    )


# --- Decorator for Logging MCP Calls with Metrics ---
def log_mcp_call(func):
    """Log arguments, results and failures of an MCP tool (sync or async)."""
    func_name = getattr(func, "__name__", "unknown_function")

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = _record_start(func_name, args, kwargs)
            mcp_call_logger.info(f"Calling tool: {func_name} with {_describe_call(args, kwargs)}")
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _record_failure(func_name, start_time, e)
                raise
            _record_success(func_name, start_time, result)
            return result

        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = _record_start(func_name, args, kwargs)
        mcp_call_logger.info(f"Calling tool: {func_name} with {_describe_call(args, kwargs)}")
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _record_failure(func_name, start_time, e)
            raise
        _record_success(func_name, start_time, result)
        return result

    return wrapper


def log_tool_failure(
    operation: str,
    error: Exception,
    context: dict[str, Any] | None = None,
    category: ErrorCategory = ErrorCategory.ERROR,
) -> str:
    """Log a failed tool operation and return the message meant for the agent."""
    user_message = getattr(error, "user_message", None) or f"Unexpected error: {error}"
    log_structured_error(
        category=category,
        message=f"{operation} failed: {error}",
        exception=error,
        context=context,
        operation=operation,
    )
    return user_message
