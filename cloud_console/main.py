from __future__ import annotations

import logging
import random
import time
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse

from cloud_console.api.routes.endpoints import router as endpoints_router
from cloud_console.api.routes.firestore import router as firestore_router
from cloud_console.api.routes.functions import router as functions_router
from cloud_console.api.routes.iam import router as iam_router
from cloud_console.api.routes.logs import router as logs_router
from cloud_console.core.config import Settings, settings as default_settings
from cloud_console.core.errors import ConsoleError, fail, ok
from cloud_console.core.logging import bind_request_id, configure_logging, reset_request_id
from cloud_console.services.activity import install_activity_log
from cloud_console.services.seed import seed_sample_data
from cloud_console.services.simulator import EndpointSimulator
from cloud_console.services.store import ResourceStore

logger = logging.getLogger("cloud_console")


def _build_store(settings: Settings) -> ResourceStore:
    store = ResourceStore()
    if settings.SEED_SAMPLE_DATA:
        seed_sample_data(store)
    install_activity_log(store)
    return store


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ResourceStore] = None,
    simulator: Optional[EndpointSimulator] = None,
) -> FastAPI:
    """
    Build the API around one ResourceStore.

    Callers (tests) may pass their own store/simulator; a passed-in store is
    used as-is, so it must already have whatever hooks it needs.
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Cloud Console Mock API",
        version="0.1.0",
        default_response_class=ORJSONResponse,
    )

    app.state.settings = settings
    app.state.store = store if store is not None else _build_store(settings)
    app.state.simulator = simulator or EndpointSimulator(
        rng=random.Random(settings.ENDPOINT_TEST_SEED),
        min_ms=settings.ENDPOINT_TEST_MIN_MS,
        max_ms=settings.ENDPOINT_TEST_MAX_MS,
    )

    # -------------------------
    # Middleware
    # -------------------------
    app.add_middleware(GZipMiddleware, minimum_size=1024)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request-id + timing + body-size guard
    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        start = time.perf_counter()

        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                if int(content_length) > settings.MAX_REQUEST_BYTES:
                    return ORJSONResponse(
                        status_code=413,
                        content=fail(
                            code="PAYLOAD_TOO_LARGE",
                            message=f"Request too large. Max is {settings.MAX_REQUEST_MB} MB.",
                            meta={"request_id": request_id},
                        ),
                    )
            except ValueError:
                pass

        token = bind_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            reset_request_id(token)

        response.headers["x-request-id"] = request_id
        response.headers["x-response-ms"] = f"{(time.perf_counter() - start) * 1000:.2f}"
        return response

    # -------------------------
    # Routes
    # -------------------------
    @app.get("/health", response_class=ORJSONResponse)
    async def health():
        return ok({"status": "ok", "env": settings.ENV})

    app.include_router(functions_router, prefix="/api", tags=["functions"])
    app.include_router(endpoints_router, prefix="/api", tags=["endpoints"])
    app.include_router(firestore_router, prefix="/api", tags=["firestore"])
    app.include_router(logs_router, prefix="/api", tags=["logs"])
    app.include_router(iam_router, prefix="/api", tags=["iam"])

    # -------------------------
    # Error handling
    # -------------------------
    @app.exception_handler(ConsoleError)
    async def console_error_handler(request: Request, exc: ConsoleError):
        return ORJSONResponse(
            status_code=exc.status_code,
            content=fail(code=exc.code, message=exc.message, details=exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # Missing fields, wrong types and malformed JSON are all client errors (400, not 422).
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        return ORJSONResponse(
            status_code=400,
            content=fail(code="VALIDATION_ERROR", message="Invalid request data.", details=errors),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

        # Show minimal debug info only in dev
        details = None
        if settings.ENV == "dev":
            details = {"type": exc.__class__.__name__, "message": str(exc)}

        return ORJSONResponse(
            status_code=500,
            content=fail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred.",
                details=details,
            ),
        )

    logger.info(
        "Cloud Console API ready (env=%s, seeded=%s)",
        settings.ENV,
        settings.SEED_SAMPLE_DATA and store is None,
    )
    return app


app = create_app()
