"""Entity model shared by every kind.

Kind-specific fields (``start_time``, ``remind_at``, ``priority``...) are kept
as pydantic extras; only the common capability fields are declared.
"""

from collections.abc import Iterable
from typing import Any, ClassVar, Protocol

from pydantic import BaseModel, ConfigDict


class HasIdentity(Protocol):
    """Anything addressable by a prefixed ID."""

    id: str


class HasTitle(Protocol):
    """Anything carrying a human title."""

    title: str | None


class Entity(BaseModel):
    """A stored entity of any kind."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="allow")

    id: str
    title: str | None = None
    description: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_record(self) -> dict[str, Any]:
        """Flatten declared fields and extras into one plain record."""
        return self.model_dump()


# Fields the server owns; never taken from a create payload.
SERVER_FIELDS: frozenset[str] = frozenset({"created_at", "updated_at"})


def has_title(item: HasTitle) -> bool:
    """Whether ``item`` carries a non-blank title."""
    return isinstance(item.title, str) and bool(item.title.strip())


def identities(items: Iterable[HasIdentity]) -> set[str]:
    return {item.id for item in items}
