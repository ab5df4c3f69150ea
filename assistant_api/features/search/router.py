"""Search API routes."""

from fastapi import APIRouter

from assistant_api.features.search.routes.search import router as search_router

router = APIRouter()

router.include_router(search_router)
