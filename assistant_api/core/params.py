"""Lenient parsing of loosely typed request parameters."""

from typing import Any

DEFAULT_LIMIT = 10


def normalize_limit(value: Any, default: int = DEFAULT_LIMIT) -> int:
    """Coerce a limit given as int or numeric string.

    Anything missing, non-numeric or not positive falls back to ``default``.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            return default
    else:
        return default
    return parsed if parsed > 0 else default
