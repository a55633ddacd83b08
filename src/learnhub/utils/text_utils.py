"""Text processing utilities.

Common text manipulation functions used across modules.
"""

from __future__ import annotations

import re
import unicodedata

# Characters allowed in stored object names
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def clean_optional(text: str | None) -> str | None:
    """Strip surrounding whitespace; empty results become None.

    Form fields are optional in most places and an empty input means
    "no value" rather than an empty string.
    """
    if text is None:
        return None
    stripped = text.strip()
    return stripped or None


def sanitize_filename(name: str, fallback: str = "file") -> str:
    """Reduce a client-supplied file name to a safe object name.

    Drops any directory part, transliterates accents to ASCII and replaces
    everything outside [A-Za-z0-9._-] with underscores.

    Args:
        name: Original file name from the upload
        fallback: Name to use when nothing usable remains

    Returns:
        A non-empty name with no path separators
    """
    base = (name or "").replace("\\", "/").rsplit("/", 1)[-1]
    ascii_name = (
        unicodedata.normalize("NFKD", base).encode("ascii", "ignore").decode("ascii")
    )
    safe = _UNSAFE_FILENAME_CHARS.sub("_", ascii_name).strip("._")
    return safe or fallback


def matches_search(term: str, *fields: str | None) -> bool:
    """Case-insensitive substring match of term against any field."""
    needle = term.lower()
    return any(field and needle in field.lower() for field in fields)
