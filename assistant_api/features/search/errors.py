"""Custom exceptions for unified search."""


class MissingQueryError(ValueError):
    """Raised when a search arrives without query text."""

    def __init__(self, detail: str = "query is required"):
        super().__init__(detail)


class SearchFailedError(RuntimeError):
    """Raised when every searched kind failed."""

    def __init__(self):
        super().__init__("Search failed")
