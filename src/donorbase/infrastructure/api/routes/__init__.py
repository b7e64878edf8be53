"""API Routes for DonorBase."""

from .donations_router import router as donations_router
from .events_router import router as events_router
from .exports_router import router as exports_router
from .fields_router import router as fields_router
from .insights_router import router as insights_router
from .realtime_router import router as realtime_router

__all__ = [
    "donations_router",
    "events_router",
    "exports_router",
    "fields_router",
    "insights_router",
    "realtime_router",
]
