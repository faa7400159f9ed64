"""Exception taxonomy for flatgraph."""

from __future__ import annotations


class FlatGraphError(Exception):
    """Base class for every error raised by flatgraph."""


class InvalidEntityKind(FlatGraphError, TypeError):
    """The value handed to save/load is not a record instance."""


class BadSchemaTag(FlatGraphError):
    """Malformed field declaration on an entity type."""


class NoMoreProperties(FlatGraphError):
    """No attributes left at a namespace.

    Raised internally to end optional and repeated relations; only reaches
    the caller when the root record itself has no attributes.
    """

    def __init__(self, namespace: str = "") -> None:
        self.namespace = namespace
        where = repr(namespace) if namespace else "the root namespace"
        super().__init__(f"no more properties at {where}")


class ScalarEncodeError(FlatGraphError, ValueError):
    pass


class ScalarDecodeError(FlatGraphError, ValueError):
    pass


class KeyEncodeError(FlatGraphError, ValueError):
    pass


class KeyDecodeError(FlatGraphError, ValueError):
    pass
