"""
Retail POS Billing FastAPI Application
Main application entry point: GST computation, offer evaluation, cart quotes
"""

import time
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request

from retail_pos import __version__
from retail_pos.api.v1 import api_v1_router
from retail_pos.core.config import settings
from retail_pos.core.exceptions import POSBillingException, pos_exception_handler
from retail_pos.core.logging_config import get_logger, set_request_id, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager
    Configures logging on startup
    """
    setup_logging()
    logger.info(f"Starting {settings.PROJECT_NAME} v{__version__} ({settings.ENVIRONMENT})")
    yield
    logger.info(f"Shutting down {settings.PROJECT_NAME}")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="GST tax computation and offer stacking for the POS register",
    version=__version__,
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Tag each request with an ID for log correlation"""
    request_id = request.headers.get("X-Request-ID") or f"req_{uuid.uuid4().hex[:12]}"
    set_request_id(request_id)
    try:
        response = await call_next(request)
    finally:
        set_request_id(None)
    response.headers["X-Request-ID"] = request_id
    return response


@app.middleware("http")
async def add_response_time(request: Request, call_next):
    """Add response time header"""
    start_time = time.time()
    response = await call_next(request)
    response.headers["X-Response-Time"] = f"{(time.time() - start_time) * 1000:.2f}ms"
    return response


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

app.add_exception_handler(POSBillingException, pos_exception_handler)


# =============================================================================
# HEALTH CHECK
# =============================================================================

@app.get("/health", tags=["health"])
async def health_check():
    """
    Basic health check endpoint

    Returns:
        Basic health status
    """
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": __version__,
        "environment": settings.ENVIRONMENT
    }


app.include_router(api_v1_router)


if __name__ == "__main__":
    uvicorn.run(
        "retail_pos.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
    )
