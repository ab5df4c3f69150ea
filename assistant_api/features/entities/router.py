"""Entity API routes - one CRUD router per kind plus the unified routes."""

from fastapi import APIRouter

from assistant_api.features.entities.registry import ENTITY_KINDS, get_kind_spec
from assistant_api.features.entities.routes.entities import router as entities_router
from assistant_api.features.entities.routes.entity_router import create_entity_router
from assistant_api.features.entities.routes.stats import router as stats_router

router = APIRouter()

for _kind in ENTITY_KINDS:
    router.include_router(create_entity_router(get_kind_spec(_kind)))

router.include_router(entities_router)
router.include_router(stats_router)
