"""
Utility decorators for logging backtest operations.
"""

import functools
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger


def _describe_arguments(args: tuple[Any, ...], kwargs: dict[str, Any]) -> dict[str, Any]:
    """Build a compact logging context from call arguments."""
    context: dict[str, Any] = {}
    for value in (*args, *kwargs.values()):
        if hasattr(value, "__len__") and not isinstance(value, str | bytes | dict):
            context["bars"] = len(value)
        strategy_type = getattr(value, "strategy_type", None)
        if strategy_type is not None:
            context["strategy_type"] = str(strategy_type)
    return context


def _describe_result(result: Any) -> dict[str, Any]:
    """Extract headline metrics from a result object for the completion log."""
    context: dict[str, Any] = {"result_type": type(result).__name__}
    trades = getattr(result, "trades", None)
    if trades is not None:
        context["trades"] = len(trades)
    total_return = getattr(result, "total_return", None)
    if total_return is not None:
        context["total_return"] = total_return
    return context


F = TypeVar("F", bound=Callable[..., Any])


def log_operation(func: F) -> F:
    """Decorator to log backtest entry points with correlation IDs and timing."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        correlation_id = str(uuid.uuid4())[:8]
        context = {"correlation_id": correlation_id, **_describe_arguments(args, kwargs)}
        bound = logger.bind(**context)
        bound.debug(f"Backtest operation started: {func.__name__}")
        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            execution_time_ms = round((time.perf_counter() - start_time) * 1000, 2)
            bound.error(
                f"Backtest operation failed: {func.__name__} "
                f"({type(e).__name__}: {e}) after {execution_time_ms}ms"
            )
            raise

        execution_time_ms = round((time.perf_counter() - start_time) * 1000, 2)
        bound.bind(execution_time_ms=execution_time_ms, **_describe_result(result)).debug(
            f"Backtest operation completed: {func.__name__} in {execution_time_ms}ms"
        )
        return result

    return wrapper  # type: ignore
