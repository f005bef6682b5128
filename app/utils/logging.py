"""Logging helpers: debug-only logging and errors with context."""

import logging
import traceback
from typing import Optional, Any

from app.config import is_debug

logger = logging.getLogger("Sift")


def debug_log(message: str, *args, **kwargs) -> None:
    """
    Log a debug message only if APP_DEBUG is enabled.

    Args:
        message: Log message (supports % formatting)
        *args: Positional arguments for message formatting
        **kwargs: Keyword arguments (level, logger, exc_info, etc.)
    """
    if is_debug():
        level = kwargs.pop("level", logging.DEBUG)
        target = kwargs.pop("logger", logger)
        target.log(level, message, *args, **kwargs)


def format_context(context: Optional[dict]) -> str:
    if not context:
        return ""
    return ", ".join(f"{k}={v}" for k, v in context.items())


def error_log(
    message: str,
    exc: Optional[Exception] = None,
    context: Optional[dict] = None,
    **kwargs
) -> None:
    """
    Log an error with optional context and exception details.

    Args:
        message: Error message
        exc: Optional exception object
        context: Optional dictionary with additional context (item id, request path, ...)
        **kwargs: Additional keyword arguments for logger
    """
    parts = [message]

    if context:
        parts.append(f"Context: {format_context(context)}")

    if exc:
        parts.append(f"Exception: {type(exc).__name__}: {exc}")
        # Full traceback only in debug mode
        if is_debug():
            parts.append(f"Traceback:\n{''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))}")

    full_message = " | ".join(parts)

    if exc:
        logger.error(full_message, exc_info=exc, **kwargs)
    else:
        logger.error(full_message, **kwargs)


def request_context(request: Any) -> dict:
    """Best-effort path/method/user agent of a request."""
    context = {}
    url = getattr(request, "url", None)
    if url is not None:
        context["path"] = getattr(url, "path", str(url))
    method = getattr(request, "method", None)
    if method:
        context["method"] = method
    headers = getattr(request, "headers", None)
    if headers is not None:
        context["user_agent"] = headers.get("user-agent", "unknown")
    return context


def log_request_error(
    request: Any,
    exc: Exception,
    message: Optional[str] = None
) -> None:
    """
    Log an error with request context.

    Args:
        request: Request object (should have url, method, headers)
        exc: The exception
        message: Optional custom message
    """
    msg = message or f"Unhandled exception: {type(exc).__name__}"
    error_log(msg, exc=exc, context=request_context(request))
