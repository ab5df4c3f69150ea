"""Entity kind registry.

Single source of truth for each kind's ID prefix, plural noun (route segment
and index suffix) and create-time validation. The ID generator and the ID
resolver both read from here.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

# Returns an error message, or None when the payload is acceptable.
EntityValidator = Callable[[Mapping[str, Any]], str | None]


class EntityKind(StrEnum):
    """Closed set of entity kinds, plus the search-only history kind."""

    TASK = "task"
    EVENT = "event"
    REMINDER = "reminder"
    PERSON = "person"
    PLACE = "place"
    DOCUMENT = "document"
    MEMORY = "memory"
    PROJECT = "project"
    THING = "thing"
    ORGANIZATION = "organization"
    HISTORY = "history"


@dataclass(frozen=True)
class KindSpec:
    """Static description of one entity kind."""

    kind: EntityKind
    plural: str
    prefix: str | None = None
    validator: EntityValidator | None = None

    @property
    def has_identity(self) -> bool:
        """Whether entities of this kind are addressable by a prefixed ID."""
        return self.prefix is not None


def require_fields(kind: str, *fields: str) -> EntityValidator:
    """Build a validator rejecting payloads missing any of ``fields``."""

    def validate(payload: Mapping[str, Any]) -> str | None:
        for field in fields:
            value = payload.get(field)
            if value is None or value == "":
                return f"{field} is required for {kind}s"
        return None

    return validate


KIND_SPECS: dict[EntityKind, KindSpec] = {
    spec.kind: spec
    for spec in (
        KindSpec(EntityKind.TASK, "tasks", "tsk"),
        KindSpec(
            EntityKind.EVENT,
            "events",
            "evt",
            require_fields("event", "start_time"),
        ),
        KindSpec(
            EntityKind.REMINDER,
            "reminders",
            "rem",
            require_fields("reminder", "remind_at"),
        ),
        KindSpec(EntityKind.PERSON, "people", "per"),
        KindSpec(EntityKind.PLACE, "places", "plc"),
        KindSpec(EntityKind.DOCUMENT, "documents", "doc"),
        KindSpec(EntityKind.MEMORY, "memories", "mem"),
        KindSpec(EntityKind.PROJECT, "projects", "prj"),
        KindSpec(EntityKind.THING, "things", "thg"),
        KindSpec(EntityKind.ORGANIZATION, "organizations", "org"),
        KindSpec(EntityKind.HISTORY, "history"),
    )
}

# Kinds with CRUD routes and prefixed IDs.
ENTITY_KINDS: tuple[EntityKind, ...] = tuple(
    kind for kind, spec in KIND_SPECS.items() if spec.has_identity
)

# Kinds a search may target.
SEARCHABLE_KINDS: tuple[EntityKind, ...] = tuple(KIND_SPECS)

PREFIX_TO_KIND: dict[str, EntityKind] = {
    spec.prefix: kind for kind, spec in KIND_SPECS.items() if spec.prefix is not None
}

ID_DELIMITER = "_"


def get_kind_spec(kind: EntityKind) -> KindSpec:
    """Return the registered spec for ``kind``."""
    return KIND_SPECS[kind]


def prefix_for_kind(kind: EntityKind) -> str:
    """Return the ID prefix of an addressable kind.

    Raises:
        ValueError: If the kind has no ID prefix (history).
    """
    prefix = KIND_SPECS[kind].prefix
    if prefix is None:
        raise ValueError(f"{kind} entities have no ID prefix")
    return prefix


def kind_for_prefix(prefix: str) -> EntityKind | None:
    """Return the kind registered for ``prefix``, or None when unknown."""
    return PREFIX_TO_KIND.get(prefix)


def parse_kind(value: str) -> EntityKind | None:
    """Parse a kind token, returning None for anything outside the closed set."""
    try:
        return EntityKind(value.strip().lower())
    except ValueError:
        return None
