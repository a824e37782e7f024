"""Main API router aggregation."""

from fastapi import APIRouter

from .activity import router as activity_router
from .comments import router as comments_router
from .health import router as health_router
from .realtime import router as realtime_router
from .reviews import router as reviews_router

router = APIRouter()

router.include_router(health_router)
router.include_router(realtime_router)

api_router = APIRouter(prefix="/api")
api_router.include_router(reviews_router)
api_router.include_router(comments_router)
api_router.include_router(activity_router)

router.include_router(api_router)
