"""
API v1 Router Initialization
Exports all routers for the billing API v1
"""

from fastapi import APIRouter

from .billing import router as billing_router
from .gst import router as gst_router
from .offers import router as offers_router

# Create main v1 router
api_v1_router = APIRouter(prefix="/api/v1")

api_v1_router.include_router(gst_router)
api_v1_router.include_router(offers_router)
api_v1_router.include_router(billing_router)

__all__ = ["api_v1_router"]
