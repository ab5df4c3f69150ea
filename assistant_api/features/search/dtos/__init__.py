"""Search data transfer objects."""

from .search_dto import SearchRequest, SearchResponse, SearchType

__all__ = ["SearchRequest", "SearchResponse", "SearchType"]
