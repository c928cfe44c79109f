import logging
import sys
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException

from app.config.settings import settings
from app.middleware.request_logging import log_requests_middleware
from app.routes.auth_routes import router as auth_router
from app.routes.customer_routes import router as customer_router
from app.routes.notification_routes import router as notification_router
from app.routes.order_routes import router as order_router
from app.routes.product_routes import router as product_router
from app.services.notification_service import NotificationStateStore
from app.services.shopify_service import ShopifyAPIError
from app.utils.logger import get_logger

API_VERSION = "2.0.0"


def _configure_logging() -> None:
    """Set up a structured, human-readable log format for the whole app.

    Format example::

        2026-02-19 10:33:19,123 | INFO     | app.services.order_service:42 | Unfulfilled orders fetched: 3
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(log_level)
    # Avoid duplicate handlers if create_app() is called more than once (e.g. tests)
    if not root.handlers:
        root.addHandler(handler)
    else:
        for h in root.handlers:
            h.setFormatter(formatter)

    # Quiet down noisy third-party loggers unless we're in DEBUG mode
    if log_level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


def _error_body(error: str, details=None) -> dict:
    return {"success": False, "error": error, "details": details}


def _register_exception_handlers(app: FastAPI) -> None:
    logger = get_logger(__name__)

    @app.exception_handler(ShopifyAPIError)
    async def shopify_error_handler(request: Request, exc: ShopifyAPIError) -> JSONResponse:
        status_code = exc.status_code if 400 <= exc.status_code <= 599 else 500
        logger.error("%s %s failed — %s status=%d", request.method, request.url.path, exc, exc.status_code)
        return JSONResponse(status_code=status_code, content=_error_body(exc.message, exc.details))

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=_error_body(str(exc.detail)))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            f"{'.'.join(str(p) for p in err['loc'][1:])}: {err['msg']}" for err in exc.errors()
        ]
        logger.warning("%s %s rejected — %s", request.method, request.url.path, errors)
        return JSONResponse(status_code=400, content=_error_body("Invalid request parameters", errors))


def create_app() -> FastAPI:
    _configure_logging()

    logger = get_logger(__name__)
    logger.info(
        "Starting Shopify Analytics Backend — log_level=%s, store=%s, api_version=%s",
        settings.log_level.upper(),
        settings.shopify_store_domain,
        settings.shopify_admin_api_version,
    )

    app = FastAPI(title="Shopify Analytics Backend", version=API_VERSION)

    # Read/archive flags for notifications; lives as long as the process.
    app.state.notification_store = NotificationStateStore()

    app.middleware("http")(log_requests_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "X-Request-Id"],
    )
    logger.debug("Request-logging and CORS middleware registered — origins=%s", settings.cors_origins)

    _register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(product_router)
    app.include_router(order_router)
    app.include_router(customer_router)
    app.include_router(notification_router)

    @app.get("/api/health")
    def health() -> dict:
        body = {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": settings.environment,
            "version": API_VERSION,
            "services": {"shopify": "configured" if settings.is_configured else "not configured"},
        }
        if not settings.is_configured:
            body["status"] = "WARNING"
            body["warnings"] = ["Shopify service not properly configured"]
        return body

    # Legacy paths used by older dashboard builds.
    @app.get("/api/best-selling", include_in_schema=False)
    def legacy_best_selling() -> RedirectResponse:
        return RedirectResponse(url="/api/products/best-selling", status_code=301)

    @app.get("/api/worst-selling", include_in_schema=False)
    def legacy_worst_selling() -> RedirectResponse:
        return RedirectResponse(url="/api/products/worst-selling", status_code=301)

    @app.get("/")
    def root() -> dict:
        return {
            "message": "Shopify Analytics API",
            "version": API_VERSION,
            "documentation": {
                "health": "/api/health",
                "auth": "/api/auth",
                "products": "/api/products",
                "orders": "/api/orders",
                "customers": "/api/customers",
                "notifications": "/api/notifications",
            },
        }

    return app


app = create_app()
