"""Identifier normalisation for generated Go code."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Final, MutableSet
from urllib.parse import urlsplit

from .errors import NamingError

GO_KEYWORDS: frozenset[str] = frozenset({
    "break",
    "case",
    "chan",
    "const",
    "continue",
    "default",
    "defer",
    "else",
    "fallthrough",
    "for",
    "func",
    "go",
    "goto",
    "if",
    "import",
    "interface",
    "map",
    "package",
    "range",
    "return",
    "select",
    "struct",
    "switch",
    "type",
    "var",
})

MAX_DISAMBIGUATION_SUFFIX: Final[int] = 100_000

_WORD_SEPARATOR = re.compile(r"[^0-9A-Za-z]+")


@lru_cache(maxsize=1024)
def to_identifier(value: str) -> str:
    """Convert arbitrary text to an exported Go identifier.

    Every run of characters that is not a letter or digit separates words;
    each word gets an upper case first letter and the words are joined.

    Examples:
        >>> to_identifier("Task Definition")
        'TaskDefinition'
        >>> to_identifier("task-group-resolved")
        'TaskGroupResolved'
        >>> to_identifier("3d  view")
        'X3dView'
    """
    words = [word for word in _WORD_SEPARATOR.split(value) if word]
    identifier = "".join(word[0].upper() + word[1:] for word in words)
    if not identifier:
        return "Unnamed"
    if identifier[0].isdigit():
        return f"X{identifier}"
    return identifier


def normalise(name: str, used: MutableSet[str]) -> str:
    """Return a normalised identifier for ``name`` not yet present in ``used``.

    Collisions are resolved by appending 1, 2, ... to the candidate. The
    returned identifier is added to ``used``, so a scope is simply the set
    passed in.

    Raises:
        NamingError: If no free suffix is found.
    """
    candidate = to_identifier(name)
    if candidate not in used:
        used.add(candidate)
        return candidate
    for suffix in range(1, MAX_DISAMBIGUATION_SUFFIX + 1):
        disambiguated = f"{candidate}{suffix}"
        if disambiguated not in used:
            used.add(disambiguated)
            return disambiguated
    raise NamingError(name)


@lru_cache(maxsize=1024)
def title_from_url(url: str) -> str:
    """Derive a fallback title from the last path segment of a URL."""
    path = urlsplit(url).path.rstrip("/")
    stem = path.rsplit("/", 1)[-1]
    if "." in stem:
        stem = stem.rsplit(".", 1)[0]
    return stem


@lru_cache(maxsize=1024)
def to_lower_camel(identifier: str) -> str:
    """Lower the first letter of an identifier (for example variable names)."""
    if not identifier:
        return identifier
    return identifier[0].lower() + identifier[1:]


def sanitize_param_name(value: str) -> str:
    """Make a route argument usable as a Go parameter name."""
    words = [word for word in _WORD_SEPARATOR.split(value) if word]
    if not words:
        return "arg"
    sanitized = words[0] + "".join(word[0].upper() + word[1:] for word in words[1:])
    if sanitized[0].isdigit():
        sanitized = f"x{sanitized}"
    if sanitized in GO_KEYWORDS:
        return f"{sanitized}_"
    return sanitized
