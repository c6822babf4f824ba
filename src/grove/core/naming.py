"""Naming utilities for groves, branches and worktree folders.

Pure functions, no I/O. A grove's normalized name is a filesystem and
branch-safe slug followed by a short identifier derived from a stable hash of
the display name, e.g. "Auth Bug Fix" -> "auth-bug-fix-1a2b3".
"""

import hashlib
import re

MAX_NAME_LENGTH = 40
IDENTIFIER_LENGTH = 5


def slugify(name: str, max_length: int = MAX_NAME_LENGTH, fallback: str = "grove") -> str:
    """Turn an arbitrary name into a lowercase hyphenated slug.

    - Lowercases input
    - Replaces whitespace, underscores, dots and slashes with `-`
    - Drops characters outside `[a-z0-9-]`
    - Collapses consecutive `-` and strips leading/trailing `-`
    - Truncates to `max_length` and strips a trailing `-` left by truncation

    Args:
        name: Arbitrary string to slugify
        max_length: Maximum slug length
        fallback: Value returned when nothing usable remains

    Returns:
        The slug, or `fallback` if the result is empty

    Examples:
        >>> slugify("Auth Bug Fix")
        'auth-bug-fix'
        >>> slugify("packages/api")
        'packages-api'
    """
    lowered = name.strip().lower()
    replaced = re.sub(r"[\s_./\\]+", "-", lowered)
    cleaned = re.sub(r"[^a-z0-9-]", "", replaced)
    collapsed = re.sub(r"-+", "-", cleaned).strip("-")

    if len(collapsed) > max_length:
        collapsed = collapsed[:max_length].rstrip("-")

    return collapsed or fallback


def generate_identifier(name: str) -> str:
    """Deterministic short identifier for a display name.

    The same input always yields the same identifier.
    """
    return hashlib.sha256(name.encode("utf-8")).hexdigest()[:IDENTIFIER_LENGTH]


def normalize_grove_name(name: str, max_length: int = MAX_NAME_LENGTH) -> str:
    """Slug plus identifier suffix, used for the grove folder and branch names."""
    return f"{slugify(name, max_length)}-{generate_identifier(name)}"


def project_slug(project_path: str) -> str:
    """Slug for a monorepo sub-project path, e.g. "packages/api" -> "packages-api"."""
    return slugify(project_path, fallback="project")
