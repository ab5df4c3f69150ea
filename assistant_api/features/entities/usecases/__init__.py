"""Entity use cases."""

from .entity_crud_usecase import EntityCrudUseCaseImpl
from .get_stats_usecase import GetStatsUseCaseImpl
from .resolve_entity_usecase import EntityResolverImpl

__all__ = [
    "EntityCrudUseCaseImpl",
    "EntityResolverImpl",
    "GetStatsUseCaseImpl",
]
