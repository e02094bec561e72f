from fastapi import APIRouter

from store_ratings.api.v1.routes.auth import router as auth_router
from store_ratings.api.v1.routes.user import router as user_router
from store_ratings.api.v1.routes.store import router as store_router
from store_ratings.api.v1.routes.rating import router as rating_router
from store_ratings.api.v1.routes.dashboard import router as dashboard_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(store_router)
api_router.include_router(rating_router)
api_router.include_router(dashboard_router)
