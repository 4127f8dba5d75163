"""
Analyzer boundary helpers.

Analyzers are total functions: any internal exception is caught here,
logged, and replaced by the analyzer's empty/default result.
"""

import functools
from typing import Any, Callable, TypeVar

from sentinel.core.logging_config import logger

T = TypeVar("T")


def best_effort(analyzer: str, default: Callable[[], Any]) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorate a synchronous analyzer entry point.

    Usage:
        @best_effort("quality", default=QualityMetrics.empty)
        def calculate_quality_metrics(code: str) -> QualityMetrics:
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.log_error_with_context(e, context=f"analyzer:{analyzer}", analyzer=analyzer)
                return default()

        return wrapper

    return decorator


def as_text(code: Any) -> str:
    """Coerce analyzer input to text; None becomes the empty string"""
    if code is None:
        return ""
    if isinstance(code, bytes):
        return code.decode("utf-8", errors="replace")
    return str(code)
