import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..domain.errors import AdvisoryError
from ..infra.config import get_config
from ..observability.logging_utils import (
    init_logging,
    log_event,
    reset_trace_id,
    set_trace_id,
)
from ..observability.otel import init_otel, instrument_app
from .routes import router


logger = logging.getLogger(__name__)

TRACE_HEADER = "X-Request-Id"


@asynccontextmanager
async def lifespan(_: FastAPI):
    cfg = get_config()
    init_logging(log_path=cfg.log_path, level=cfg.log_level)
    missing = cfg.missing_credentials()
    if missing:
        log_event("config.missing_credentials", level=logging.WARNING, missing=missing)
    yield


def create_app() -> FastAPI:
    cfg = get_config()
    app = FastAPI(title="BeejSeBazaar Advisory API", version="1.0.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def _trace_requests(request: Request, call_next):
        trace_id = request.headers.get(TRACE_HEADER) or uuid.uuid4().hex
        token = set_trace_id(trace_id)
        try:
            response = await call_next(request)
        finally:
            reset_trace_id(token)
        response.headers[TRACE_HEADER] = trace_id
        return response

    @app.exception_handler(AdvisoryError)
    async def _advisory_error_handler(request: Request, exc: AdvisoryError):
        log_event(
            "request.failed",
            level=logging.WARNING,
            path=request.url.path,
            kind=exc.kind,
            error=exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": {"error": exc.message, "kind": exc.kind}},
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error at %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "detail": {
                    "error": "Something went wrong. Try again later.",
                    "kind": "internal",
                }
            },
        )

    @app.get("/health")
    async def health():
        current = get_config()
        return {"status": "ok", "missing_credentials": current.missing_credentials()}

    app.include_router(router)

    if init_otel():
        instrument_app(app)
    return app


app = create_app()
