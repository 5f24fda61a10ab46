import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .auth import close_auth_provider
from .config import get_settings
from .database import init_models
from .errors import PollguardError
from .observability.logging import setup_logging
from .observability.metrics import get_metrics, get_metrics_content_type
from .observability.middleware import MetricsMiddleware, RequestTracingMiddleware
from .routers import admin_router, auth_router, polls_router
from .security.middleware import SecurityMiddleware
from .security.rate_limit import RateLimiter, build_rate_limit_storage

__version__ = "1.0.0"

settings = get_settings()

setup_logging(
    level=settings.log_level,
    json_format=settings.environment != "development",
    log_file=settings.log_file,
)

logger = logging.getLogger("pollguard.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    logger.info(
        "Pollguard API started",
        extra={"version": __version__, "environment": settings.environment},
    )
    yield
    await close_auth_provider()


app = FastAPI(title="Pollguard API", version=__version__, lifespan=lifespan)

# Shared by SecurityMiddleware; replace at startup or in tests
app.state.rate_limiter = RateLimiter(build_rate_limit_storage(settings))

# Last added is outermost: tracing, then metrics, then rate limiting and headers
app.add_middleware(SecurityMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestTracingMiddleware)

cors_origins = [origin.strip() for origin in settings.allowed_origins if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins or ["*"],
    allow_credentials="*" not in cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PollguardError)
async def pollguard_error_handler(request: Request, exc: PollguardError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"Request failed: {exc.message}",
            extra={"path": request.url.path, "trace_id": getattr(request.state, "trace_id", None)},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(polls_router, prefix=settings.api_prefix)


@app.get("/healthz")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    if not settings.metrics_enabled:
        return Response(status_code=404)
    return Response(content=get_metrics(), media_type=get_metrics_content_type())
