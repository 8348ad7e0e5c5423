from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import logging

from app.core import clock
from app.core.config import settings
from app.core.exceptions import (
    InternalServerError,
    PresenceDashboardException,
    RateLimitExceededError,
)
from app.core.rate_limit import limiter
from app.core.middleware import (
    SecurityHeadersMiddleware,
    RequestValidationMiddleware,
)
from app.core.scheduler import start_scheduler, shutdown_scheduler
from app.api import connected_users_router, dashboard_router
from app.api.deps import get_connected_users_service
from app.services.connected_users_service import ConnectedUsersService

APP_VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

IS_PRODUCTION = settings.ENVIRONMENT == "production"
IS_TESTING = settings.ENVIRONMENT == "testing"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting Presence Dashboard API...")

    errors = settings.validate_settings()
    for error in errors:
        logger.error(f"Invalid configuration: {error}")

    # Periodic cleanup of connections that stopped sending heartbeats
    if not IS_TESTING:
        start_scheduler()

    logger.info("Presence Dashboard API started successfully")
    yield
    # Shutdown
    shutdown_scheduler()
    logger.info("Shutting down Presence Dashboard API...")


app = FastAPI(
    title="Presence Dashboard API",
    description="Connected users presence and document processing dashboard",
    version=APP_VERSION,
    lifespan=lifespan,
    # Disable docs in production
    docs_url=None if IS_PRODUCTION else "/docs",
    redoc_url=None if IS_PRODUCTION else "/redoc",
)

# Add rate limiting
app.state.limiter = limiter


# Exception handlers
@app.exception_handler(PresenceDashboardException)
async def presence_dashboard_exception_handler(request: Request, exc: PresenceDashboardException):
    """Handle custom API exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error_code": exc.error_code,
        },
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    """Report slowapi rejections in the same shape as other API errors."""
    error = RateLimitExceededError(detail=f"Rate limit exceeded: {exc.detail}")
    logger.warning(f"Rate limit exceeded for {request.url.path}")
    return JSONResponse(
        status_code=error.status_code,
        content={
            "detail": error.detail,
            "error_code": error.error_code,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    error = InternalServerError()
    return JSONResponse(
        status_code=error.status_code,
        content={
            "detail": error.detail,
            "error_code": error.error_code,
        },
    )


# Apply RATE_LIMIT_DEFAULT to routes without their own limit
app.add_middleware(SlowAPIMiddleware)

# Security middleware (order matters - first added = last executed)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestValidationMiddleware)

# Configure CORS
allowed_origins = [settings.FRONTEND_URL]
if not IS_PRODUCTION:
    # Allow localhost variations in development
    allowed_origins.extend([
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ])

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    max_age=600,  # Cache preflight requests for 10 minutes
)

# Include routers
app.include_router(connected_users_router, prefix="/api")
app.include_router(dashboard_router, prefix="/api")


@app.get("/")
def root():
    return {"message": "Welcome to Presence Dashboard API"}


@app.get("/health")
def health_check(
    service: ConnectedUsersService = Depends(get_connected_users_service),
):
    """Health check endpoint for load balancers and monitoring."""
    health_status = {
        "status": "healthy",
        "timestamp": clock.utcnow().isoformat(),
        "version": APP_VERSION,
    }

    try:
        health_status["connected_users"] = service.get_connected_users_count()
    except Exception as e:
        logger.error(f"Presence registry health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["connected_users"] = None

    return health_status
