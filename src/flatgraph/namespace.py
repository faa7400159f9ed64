"""Namespace addressing: dotted attribute-name prefixes encoding tree position."""

from __future__ import annotations

ROOT = ""
SEPARATOR = "."


def child(parent: str, segment: str) -> str:
    """Namespace of the relation *segment* below *parent*.

    >>> child("", "comments")
    'comments'
    >>> child("comments", "author")
    'comments.author'
    """
    return (parent + SEPARATOR + segment).strip(SEPARATOR)


def split(name: str) -> tuple[str, str]:
    """Split an attribute name into ``(namespace, bare_name)`` at the last dot."""
    namespace, sep, bare = name.rpartition(SEPARATOR)
    if not sep:
        return ROOT, name
    return namespace, bare
