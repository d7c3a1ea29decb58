"""
FastAPI Main Application

Realty listing marketplace REST API.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import settings
from src.realty.api.dependencies import get_db
from src.realty.api.rate_limit import api_rate_limit
from src.realty.api.routers import (
    admin,
    amenities,
    auth,
    drafts,
    leads,
    locations,
    media,
    properties,
    reviews,
    wishlist,
)
from src.realty.api.schemas import HealthCheck, ValidationErrorResponse
from src.realty.db.repository import AmenityRepository
from src.realty.db.session import close_connections, create_all_tables, get_db_session, health_check
from src.realty.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

API_VERSION = "1.0.0"

SECURITY_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self'; "
        "style-src 'self' 'unsafe-inline'; "
        "script-src 'self'; "
        "img-src 'self' data: https: http:; "
        "connect-src 'self' http://localhost:3000 http://localhost:5000"
    ),
    "Cross-Origin-Resource-Policy": "cross-origin",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    create_all_tables()
    with get_db_session() as session:
        AmenityRepository().seed_defaults(session)
    logger.info("api_started", environment=settings.environment, port=settings.port)
    yield
    close_connections()
    logger.info("api_stopped")


# Create FastAPI app
app = FastAPI(
    title="Realty Listings API",
    description="REST API for property listings, leads and the admin panel of a real estate marketplace",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(GZipMiddleware, minimum_size=1000)

# Configure CORS for the web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(dict.fromkeys([*settings.cors_origins, settings.frontend_url])),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Render HTTP errors as ``{"error": message}``; structured details are sent as-is.
    """
    if isinstance(exc.detail, dict):
        content = exc.detail
    elif exc.status_code == 404 and exc.detail == "Not Found":
        content = {"error": "Route not found"}
    else:
        content = {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    content = ValidationErrorResponse.from_errors(exc.errors())
    return JSONResponse(status_code=400, content=content.model_dump())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Include routers; every /api route shares the general rate limit
for module in (auth, properties, leads, wishlist, admin, media, drafts, reviews, locations, amenities):
    app.include_router(module.router, dependencies=[Depends(api_rate_limit)])


@app.get("/health", response_model=HealthCheck, tags=["health"])
def get_health(db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Returns:
        Health status with database connectivity check
    """
    connected = health_check(db)
    return HealthCheck(
        status="ok" if connected else "degraded",
        timestamp=datetime.now(timezone.utc),
        database="connected" if connected else "unavailable",
    )


@app.get("/", tags=["root"])
def root():
    """
    Root endpoint.

    Returns:
        API information
    """
    return {
        "name": "Realty Listings API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.realty.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
