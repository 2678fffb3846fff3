"""
Helper methods for common logging patterns.

This module provides decorators and utility functions for entry/exit logging,
performance tracking and error logging.
"""

import functools
import logging
import time
from typing import Any, Callable, Dict, Optional, TypeVar, Union, cast

from fuzzysig.logging.config import get_logger

# Type variables for function decorators
F = TypeVar("F", bound=Callable[..., Any])


def _format_value(value: Any) -> Any:
    return value if isinstance(value, (int, float, str, bool)) else repr(value)


def log_entry_exit(
    logger: Optional[logging.Logger] = None,
    log_args: bool = False,
    log_result: bool = False,
    entry_level: int = logging.DEBUG,
    exit_level: int = logging.DEBUG,
    error_level: int = logging.ERROR,
) -> Callable[[F], F]:
    """
    Decorator to log function entry and exit.

    Args:
        logger: Logger to use (if None, get logger based on module name)
        log_args: Whether to log function arguments
        log_result: Whether to log function return value
        entry_level: Log level for entry messages
        exit_level: Log level for exit messages
        error_level: Log level for error messages

    Returns:
        Decorated function with entry/exit logging
    """

    def decorator(func: F) -> F:
        log = logger or get_logger(func.__module__)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            func_name = func.__qualname__

            entry_msg = f"Entering {func_name}"
            if log_args and (args or kwargs):
                arg_strs = [str(_format_value(arg)) for arg in args]
                arg_strs.extend(
                    f"{name}={_format_value(value)}" for name, value in kwargs.items()
                )
                entry_msg += f" with args: {', '.join(arg_strs)}"
            log.log(entry_level, entry_msg)

            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed = time.perf_counter() - start_time
                log.log(error_level, f"Error in {func_name} after {elapsed:.3f}s: {e}")
                raise

            elapsed = time.perf_counter() - start_time
            exit_msg = f"Exiting {func_name} after {elapsed:.3f}s"
            if log_result:
                result_str = str(_format_value(result))
                # Truncate very long result strings
                if len(result_str) > 1000:
                    result_str = result_str[:997] + "..."
                exit_msg += f" with result: {result_str}"
            log.log(exit_level, exit_msg)
            return result

        return cast(F, wrapper)

    return decorator


def log_performance(
    logger: Optional[logging.Logger] = None,
    threshold_ms: float = 0,  # 0 means log all calls
    log_level: int = logging.DEBUG,
) -> Callable[[F], F]:
    """
    Decorator to log function performance.

    Args:
        logger: Logger to use (if None, get logger based on module name)
        threshold_ms: Only log if execution time exceeds threshold (milliseconds)
        log_level: Log level for performance messages

    Returns:
        Decorated function with performance logging
    """

    def decorator(func: F) -> F:
        log = logger or get_logger(func.__module__)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed_ms = (time.perf_counter() - start_time) * 1000

            if elapsed_ms >= threshold_ms:
                log.log(
                    log_level, f"Performance: {func.__qualname__} took {elapsed_ms:.2f}ms"
                )

            return result

        return cast(F, wrapper)

    return decorator


def log_error(
    exception: Union[Exception, str],
    logger: Optional[logging.Logger] = None,
    level: int = logging.ERROR,
    include_traceback: bool = False,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log an exception or error message with consistent formatting.

    Errors carrying an ``error_code`` attribute are prefixed with it.

    Args:
        exception: Exception object or error message string
        logger: Logger to use (defaults to the package logger)
        level: Log level to use
        include_traceback: Whether to include traceback information
        extra: Extra contextual information to include
    """
    log = logger or get_logger("fuzzysig")

    if isinstance(exception, Exception):
        code = getattr(exception, "error_code", None)
        prefix = f"[{code}] " if code else ""
        error_msg = f"{exception.__class__.__name__}: {prefix}{getattr(exception, 'message', exception)}"
    else:
        error_msg = str(exception)

    log.log(
        level,
        error_msg,
        exc_info=exception if include_traceback and isinstance(exception, Exception) else None,
        extra=extra,
    )
