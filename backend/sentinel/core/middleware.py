"""
Request middleware: correlation ids, access log lines and timing headers
"""

import logging
import time
from typing import Callable, Optional, Set

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from sentinel.core.logging_config import (
    clear_context,
    generate_request_id,
    logger,
    set_project_id,
    set_request_id,
)

QUIET_PATHS: Set[str] = {"/", "/health", "/favicon.ico", "/docs", "/redoc", "/openapi.json"}

SLOW_REQUEST_MS = 3000  # analysis endpoints sleep on purpose


def should_skip_logging(path: str) -> bool:
    return path in QUIET_PATHS


def extract_path_id(path: str, segment: str) -> Optional[str]:
    """Return the path component following `/<segment>/`, if any"""
    _, marker, rest = path.partition(f"/{segment}/")
    if not marker:
        return None
    return rest.split("/", 1)[0] or None


def _status_level(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an id (the caller's X-Request-ID when given)
    and the project id from the path, so log lines emitted while handling
    it carry both. Responses get X-Request-ID and X-Response-Time headers.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)
        project_id = extract_path_id(request.url.path, "projects")
        if project_id:
            set_project_id(project_id)

        route = f"{request.method} {request.url.path}"
        quiet = should_skip_logging(request.url.path)
        started = time.perf_counter()
        if not quiet:
            logger.info(f"-> {route}", extra={"event_type": "http_request_start"})

        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed = (time.perf_counter() - started) * 1000
            logger.error(
                f"!! {route} raised {type(exc).__name__} after {elapsed:.2f}ms",
                exc_info=True,
                extra={"event_type": "http_request_error", "duration_ms": elapsed},
            )
            raise
        else:
            elapsed = (time.perf_counter() - started) * 1000
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{elapsed:.2f}ms"
            if not quiet:
                logger.log(
                    _status_level(response.status_code),
                    f"<- {route} {response.status_code} ({elapsed:.2f}ms)",
                    extra={"event_type": "http_request_complete", "http_status": response.status_code,
                           "duration_ms": elapsed},
                )
                if elapsed > SLOW_REQUEST_MS:
                    logger.log_performance(route, elapsed, SLOW_REQUEST_MS)
            return response
        finally:
            clear_context()
