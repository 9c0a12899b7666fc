"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.feed import router as feed_router
from api.v1.routes.posts import router as posts_router
from api.v1.routes.profiles import router as profiles_router

router = APIRouter()
router.include_router(feed_router)
router.include_router(posts_router)
router.include_router(profiles_router)
