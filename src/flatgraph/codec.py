"""Scalar codec: a single record's own scalar fields to and from attributes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from .errors import ScalarDecodeError, ScalarEncodeError
from .keys import KeyCodec, UrlSafeKeyCodec
from .schema import SchemaRegistry, default_registry
from .values import Attribute, AttributeList, from_value, to_value


class ScalarCodec(Protocol):
    def encode_scalars(self, entity: Any) -> AttributeList:
        """Attributes for the scalar fields of *entity*, with bare names."""
        ...

    def decode_scalars(self, entity: Any, attributes: AttributeList) -> None:
        """Populate the scalar fields of *entity*, ignoring unknown names."""
        ...


class DataclassScalarCodec:
    """Scalar codec driven by :class:`~flatgraph.schema.EntitySchema`.

    Every scalar field is written, ``None`` included, so the columns of a
    repeated relation stay aligned row by row.
    """

    def __init__(self, registry: SchemaRegistry | None = None) -> None:
        self.registry = registry if registry is not None else default_registry

    def encode_scalars(self, entity: Any) -> AttributeList:
        schema = self.registry.schema_of(entity)
        attributes: AttributeList = []
        for desc in schema.scalars:
            raw = getattr(entity, desc.attr)
            try:
                value = to_value(raw)
            except ScalarEncodeError as exc:
                raise ScalarEncodeError(
                    f"{schema.entity_type.__name__}.{desc.attr}: {exc}"
                ) from exc
            attributes.append(Attribute(desc.name, value, indexed=desc.indexed))
        return attributes

    def decode_scalars(self, entity: Any, attributes: AttributeList) -> None:
        schema = self.registry.schema_of(entity)
        for attr in attributes:
            desc = schema.scalar_by_name(attr.name)
            if desc is None:
                continue
            try:
                value = from_value(attr.value)
            except ScalarDecodeError as exc:
                raise ScalarDecodeError(
                    f"{schema.entity_type.__name__}.{desc.attr}: {exc}"
                ) from exc
            setattr(entity, desc.attr, value)


# ---------------------------------------------------------------------------
# Codecs bundle
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Codecs:
    """Collaborators threaded through the flatten/reconstruct recursion."""

    registry: SchemaRegistry
    scalars: ScalarCodec
    keys: KeyCodec

    @classmethod
    def default(cls, registry: SchemaRegistry | None = None) -> "Codecs":
        registry = registry if registry is not None else default_registry
        return cls(registry, DataclassScalarCodec(registry), UrlSafeKeyCodec())
