"""FastAPI app entry point for the Dream Car Builder API."""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from dreamcar.api.deps import get_engine, get_nhtsa, get_tracker, limiter
from dreamcar.api.routes import router
from dreamcar.config import get_settings, validate_settings
from dreamcar.core.logging import log_error, log_request, log_response, logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logger.info("Starting Dream Car Builder API...")
    validate_settings()
    engine = get_engine()
    get_tracker()
    logger.info(f"Catalog loaded with {len(engine.all_products())} products")
    yield
    logger.info("Shutting down...")
    await get_nhtsa().close()


app = FastAPI(
    title="Dream Car Builder API",
    description="VIN decoding and affiliate part recommendations for car builds",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    log_error("Rate limit exceeded", client=get_remote_address(request))
    return _rate_limit_exceeded_handler(request, exc)


# CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    log_request(request.method, request.url.path)

    response = await call_next(request)

    duration_ms = (time.time() - start) * 1000
    log_response(request.method, request.url.path, response.status_code, duration_ms)

    return response


# Routes
app.include_router(router, prefix="/api")


@app.get("/health")
async def health():
    return {"status": "ok", "service": "dreamcar-builder"}
