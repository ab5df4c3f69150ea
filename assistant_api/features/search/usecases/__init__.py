"""Search use cases."""

from .search_entities_usecase import SearchEntitiesUseCaseImpl

__all__ = ["SearchEntitiesUseCaseImpl"]
