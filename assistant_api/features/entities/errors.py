"""Custom exceptions for entity operations."""


class InvalidEntityError(ValueError):
    """Raised when a write payload fails validation."""

    pass


class MalformedEntityIdError(ValueError):
    """Raised when an ID does not have the ``<prefix>_<token>`` shape."""

    def __init__(self, entity_id: str):
        self.entity_id: str = entity_id
        super().__init__(
            f"Invalid ID format '{entity_id}'. Expected format: prefix_id (e.g., tsk_abc123)"
        )


class UnknownIdPrefixError(LookupError):
    """Raised when an ID's prefix maps to no known kind."""

    def __init__(self, entity_id: str, valid_prefixes: list[str]):
        self.entity_id: str = entity_id
        self.valid_prefixes: list[str] = valid_prefixes
        super().__init__(
            f"Unknown ID prefix in '{entity_id}'. Valid prefixes: {', '.join(valid_prefixes)}"
        )


class EntityNotFoundError(LookupError):
    """Raised when an ID has no stored record of the requested kind."""

    def __init__(self, kind: str, entity_id: str):
        self.kind: str = kind
        self.entity_id: str = entity_id
        super().__init__(f"{kind} not found")


class EntityOperationError(RuntimeError):
    """Raised when the vector store fails an operation.

    The message is generic; the upstream detail is only logged.
    """

    def __init__(self, verb: str, kind: str):
        self.verb: str = verb
        self.kind: str = kind
        super().__init__(f"Failed to {verb} {kind}")


ENTITY_ERRORS: tuple[type[Exception], ...] = (
    InvalidEntityError,
    MalformedEntityIdError,
    UnknownIdPrefixError,
    EntityNotFoundError,
    EntityOperationError,
)
