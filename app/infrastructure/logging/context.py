"""Context binding for structured logging.

Binds request-scoped and alert-scoped values to structlog's context vars so
every log entry made inside the block carries them.

Usage:
    from infrastructure.logging import bind_alert_context

    with bind_alert_context(alert_id=alert.id, alert_type=alert.type.value):
        logger.info("alert_dispatch_started")

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Optional, Any, Generator
import structlog


def _bind(context: dict[str, Any]) -> Generator[None, None, None]:
    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    request_path: Optional[str] = None,
    request_method: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind HTTP request context to all logs within the block.

    Args:
        correlation_id: Unique request identifier. Auto-generated if not provided.
        request_path: HTTP request path (e.g., "/api/v1/alerts/stats").
        request_method: HTTP method (e.g., "GET", "POST").
        **extra_context: Additional key-value pairs to include in logs.

    Example:
        @app.middleware("http")
        async def logging_middleware(request: Request, call_next):
            with bind_request_context(
                correlation_id=request.headers.get("X-Correlation-ID"),
                request_path=request.url.path,
                request_method=request.method,
            ):
                return await call_next(request)
    """
    context: dict[str, Any] = {"correlation_id": correlation_id or str(uuid.uuid4())}
    if request_path is not None:
        context["request_path"] = request_path
    if request_method is not None:
        context["request_method"] = request_method
    context.update(extra_context)

    yield from _bind(context)


@contextmanager
def bind_alert_context(
    alert_id: str,
    alert_type: Optional[str] = None,
    attempt: Optional[int] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind the alert being dispatched to all logs within the block.

    Args:
        alert_id: Identifier of the alert.
        alert_type: Alert type value (e.g., "reservation_confirmed").
        attempt: Delivery attempt number, 1 for the first send.
        **extra_context: Additional key-value pairs to include in logs.
    """
    context: dict[str, Any] = {"alert_id": alert_id}
    if alert_type is not None:
        context["alert_type"] = alert_type
    if attempt is not None:
        context["attempt"] = attempt
    context.update(extra_context)

    yield from _bind(context)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context."""
    return structlog.contextvars.get_contextvars().get("correlation_id")


def clear_request_context() -> None:
    """Clear all bound context.

    Called at the end of request processing to prevent context leakage
    between requests served by the same worker.
    """
    structlog.contextvars.clear_contextvars()
