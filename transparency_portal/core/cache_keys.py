"""Cache key builders shared by application services and repositories."""

from transparency_portal.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_DESCENDANTS,
    CACHE_PREFIX_PERMISSION,
)


def descendants_key(category_id: int) -> str:
    """Cache key for the descendant closure of one category."""
    return f"{CACHE_PREFIX_DESCENDANTS}{CACHE_KEY_SEP}{int(category_id)}"


def descendants_pattern() -> str:
    """Glob matching every descendant closure entry."""
    return f"{CACHE_PREFIX_DESCENDANTS}{CACHE_KEY_SEP}*"


def permission_key(user_id: int) -> str:
    """Cache key for a user's flattened permission codes."""
    return f"{CACHE_PREFIX_PERMISSION}{CACHE_KEY_SEP}{int(user_id)}"


def permission_pattern() -> str:
    return f"{CACHE_PREFIX_PERMISSION}{CACHE_KEY_SEP}*"
