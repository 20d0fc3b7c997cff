"""FastAPI application entry point."""

import logging
import sys
import time
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from restaurant_api.config import settings
from restaurant_api.errors import ApiError, describe_validation_errors
from restaurant_api.routes import restaurants_router, reviews_router

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure logging for the API process."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


app = FastAPI(
    title="Restaurant Reviews API",
    description="Restaurants, reviews and geospatial lookup with cached rating summaries",
    version="0.1.0",
)

# CORS middleware - allow frontend origins
origins = list(settings.cors_origins)
if settings.frontend_url and settings.frontend_url not in origins:
    origins.append(settings.frontend_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Compress responses > 1KB; list and geo results are mostly JSON arrays
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.include_router(restaurants_router)
app.include_router(reviews_router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "restaurant-api"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    """Render domain errors as ``{"error": message}`` with their status code."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies and query values.

    Returns 400 Bad Request instead of FastAPI's default 422.
    """
    message = describe_validation_errors(exc.errors())
    logger.info(f"Validation error on {request.method} {request.url}: {message}")
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Reshape framework HTTP errors (unknown route, wrong method) as ``{"error"}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Handle database failures (connectivity, timeouts, constraint violations).

    Returns 500 without leaking database detail to the client.
    """
    logger.error(
        f"Database error on {request.method} {request.url}: {exc}\n"
        f"{traceback.format_exc()}"
    )
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler that logs errors and returns a generic JSON response."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url}: {exc}\n"
        f"{traceback.format_exc()}"
    )
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


def run() -> None:
    """Entry point for ``restaurant-api``: configure logging and serve with uvicorn."""
    import uvicorn

    setup_logging()
    logger.info("Restaurant Reviews API starting...")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
