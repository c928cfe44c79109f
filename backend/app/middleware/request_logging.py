import logging
import time
from uuid import uuid4

from fastapi import Request

from app.config.settings import settings
from app.utils.logger import get_logger

logger = get_logger("app.requests")


async def log_requests_middleware(request: Request, call_next):
    """Log every request/response pair and tag it with an X-Request-Id."""
    request_id = request.headers.get("x-request-id") or uuid4().hex[:12]
    start = time.perf_counter()

    logger.info(
        "→ %s %s rid=%s client=%s",
        request.method,
        request.url.path,
        request_id,
        request.client.host if request.client else "-",
    )
    if request.method in {"POST", "PUT", "PATCH"} and logger.isEnabledFor(logging.DEBUG):
        body = await request.body()
        # Never echo OAuth secrets back into the logs.
        if request.url.path.startswith("/api/auth"):
            logger.debug("  body rid=%s: (redacted, %d bytes)", request_id, len(body))
        elif body:
            logger.debug(
                "  body rid=%s: %s",
                request_id,
                body[: settings.request_log_body_limit].decode("utf-8", errors="replace"),
            )

    try:
        response = await call_next(request)
    except Exception:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.exception("✗ %s %s rid=%s failed after %.1fms", request.method, request.url.path, request_id, duration_ms)
        raise

    duration_ms = (time.perf_counter() - start) * 1000
    level = logging.WARNING if response.status_code >= 400 else logging.INFO
    logger.log(
        level,
        "← %s %s %d (%.1fms) rid=%s",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
        request_id,
    )
    response.headers["X-Request-Id"] = request_id
    return response
