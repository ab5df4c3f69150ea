"""Opaque entity identifiers of the form ``<prefix>_<token>``."""

import secrets
import time

from assistant_api.features.entities.registry import (
    ID_DELIMITER,
    EntityKind,
    kind_for_prefix,
    prefix_for_kind,
)

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_RANDOM_LENGTH = 8


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_id(kind: EntityKind) -> str:
    """Generate a new ID for ``kind``.

    The token is the current epoch milliseconds in base36 followed by
    eight random base36 characters, so IDs are roughly time-correlated
    but not strictly ordered.
    """
    timestamp = _to_base36(time.time_ns() // 1_000_000)
    random_part = "".join(secrets.choice(_ALPHABET) for _ in range(_RANDOM_LENGTH))
    return f"{prefix_for_kind(kind)}{ID_DELIMITER}{timestamp}{random_part}"


def split_id(entity_id: str) -> tuple[str, str] | None:
    """Split an ID into ``(prefix, token)``; None if it is malformed."""
    prefix, delimiter, token = entity_id.partition(ID_DELIMITER)
    if not delimiter or not prefix or not token:
        return None
    return prefix, token


def kind_for_id(entity_id: str) -> EntityKind | None:
    """Derive the kind from an ID's prefix; None if unknown or malformed."""
    parts = split_id(entity_id)
    if parts is None:
        return None
    return kind_for_prefix(parts[0])


def has_kind_prefix(entity_id: str, kind: EntityKind) -> bool:
    """Whether ``entity_id`` is a well-formed ID of ``kind``."""
    parts = split_id(entity_id)
    return parts is not None and parts[0] == prefix_for_kind(kind)
