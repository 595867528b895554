# tracker/main.py

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from tracker.api.routes.api import api_router
from tracker.core.config import settings
from tracker.core.exceptions import AuthenticationError, TrackerError
from tracker.core.logging_config import setup_logging
from tracker.core.middleware import RequestLoggingMiddleware
from tracker.db.init_db import init_db
from tracker.services.storage_service import get_upload_dir

logger = logging.getLogger(__name__)


def _validation_errors(exc: RequestValidationError) -> list:
    errors = []
    for err in exc.errors():
        # loc starts with "body" / "query" / "path"
        loc = [str(part) for part in err.get("loc", ())[1:]]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "")})
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TrackerError)
    async def tracker_error_handler(request: Request, exc: TrackerError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "error": "Validation failed",
                "code": "VALIDATION_ERROR",
                "details": {},
                "errors": _validation_errors(exc),
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Server error", "code": "INTERNAL_ERROR", "details": {}},
        )


def create_application() -> FastAPI:
    setup_logging()
    init_db()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
    )

    # ---------- CORS ----------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.backend_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- REQUEST LOGGING ----------
    app.add_middleware(RequestLoggingMiddleware)

    # ---------- ERRORS ----------
    register_exception_handlers(app)

    # ---------- STATIC FILES ----------
    # Stored attachments, served at the path recorded on each attachment
    app.mount("/uploads", StaticFiles(directory=get_upload_dir()), name="uploads")

    # ---------- ROUTERS ----------
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/healthz", tags=["health"])
    def healthz():
        return {"status": "ok"}

    logger.info("%s %s started (env=%s)", settings.PROJECT_NAME, settings.VERSION, settings.env)
    return app


app = create_application()
