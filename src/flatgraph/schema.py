"""Entity declarations and the schema registry.

Entity types are ordinary dataclasses. Fields are declared with one of
three helpers, each of which is a thin wrapper around
:func:`dataclasses.field` that records flatgraph metadata:

* :func:`primary` -- the (single) primary-key field, holding a key string
* :func:`scalar`  -- a scalar field; optional, undeclared fields are scalars
* :func:`relation` -- a single or repeated child entity

Example::

    @entity
    @dataclass
    class Comment:
        id: str = primary()
        text: str = scalar("")

    @entity
    @dataclass
    class Post:
        text: str = ""
        comments: list[Comment] = relation("comments", Comment, many=True)

Declarations are read once per type into an :class:`EntitySchema`, held by
a :class:`SchemaRegistry`. Malformed declarations raise
:class:`BadSchemaTag` at that point.
"""

from __future__ import annotations

import dataclasses
from dataclasses import MISSING, dataclass, field
from enum import Enum, auto
from typing import Any, Callable, TypeVar, Union

from .errors import BadSchemaTag, InvalidEntityKind
from .namespace import SEPARATOR

KEY_NAME = "id"
"""Reserved bare name of the synthetic primary-key attribute."""

_META = "flatgraph"

T = TypeVar("T")


class FieldKind(Enum):
    PRIMARY = auto()
    SCALAR = auto()
    RELATION = auto()


class Cardinality(Enum):
    SINGLE = auto()
    REPEATED = auto()


@dataclass(frozen=True)
class FieldTag:
    """Metadata attached to a dataclass field by the declaration helpers."""

    kind: FieldKind
    name: str | None = None
    indexed: bool = False
    segment: str | None = None
    target: Union[type, str, None] = None
    cardinality: Cardinality = Cardinality.SINGLE


# ---------------------------------------------------------------------------
# Declaration helpers
# ---------------------------------------------------------------------------

def primary() -> Any:
    """Declare the primary-key field. Its value is a key string, empty if unset."""
    return field(default="", metadata={_META: FieldTag(FieldKind.PRIMARY)})


def scalar(
    default: Any = MISSING,
    *,
    name: str | None = None,
    indexed: bool = False,
    default_factory: Callable[[], Any] | Any = MISSING,
) -> Any:
    """Declare a scalar field stored under *name* (defaults to the field name)."""
    tag = FieldTag(FieldKind.SCALAR, name=name, indexed=indexed)
    return field(default=default, default_factory=default_factory, metadata={_META: tag})


def relation(segment: str, target: Union[type, str], *, many: bool = False) -> Any:
    """Declare a child relation stored under the namespace *segment*.

    *target* is the child entity type, or the name of a type registered with
    :func:`entity` (for self-referencing or not yet defined types).
    Repeated relations default to an empty list, single ones to ``None``.
    """
    tag = FieldTag(
        FieldKind.RELATION,
        segment=segment,
        target=target,
        cardinality=Cardinality.REPEATED if many else Cardinality.SINGLE,
    )
    if many:
        return field(default_factory=list, metadata={_META: tag})
    return field(default=None, metadata={_META: tag})


# ---------------------------------------------------------------------------
# Descriptors / EntitySchema
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScalarDescriptor:
    attr: str
    name: str
    indexed: bool = False


@dataclass(frozen=True)
class RelationDescriptor:
    attr: str
    segment: str
    target: Union[type, str]
    cardinality: Cardinality

    @property
    def repeated(self) -> bool:
        return self.cardinality is Cardinality.REPEATED


@dataclass(frozen=True)
class EntitySchema:
    entity_type: type
    primary: str | None
    scalars: tuple[ScalarDescriptor, ...]
    relations: tuple[RelationDescriptor, ...]

    def new_instance(self) -> Any:
        """Allocate an empty instance, as done for every loaded child."""
        try:
            return self.entity_type()
        except TypeError as exc:
            raise BadSchemaTag(
                f"{self.entity_type.__name__} cannot be created without arguments; "
                "give every field a default"
            ) from exc

    def scalar_by_name(self, name: str) -> ScalarDescriptor | None:
        for desc in self.scalars:
            if desc.name == name:
                return desc
        return None


def is_entity(obj: object) -> bool:
    """True for dataclass *instances* (not dataclass types)."""
    return dataclasses.is_dataclass(obj) and not isinstance(obj, type)


def _check_name(owner: str, what: str, name: object) -> str:
    if not isinstance(name, str) or not name:
        raise BadSchemaTag(f"{owner}: {what} must be a non-empty string, got {name!r}")
    if SEPARATOR in name:
        raise BadSchemaTag(f"{owner}: {what} {name!r} must not contain {SEPARATOR!r}")
    if name == KEY_NAME:
        raise BadSchemaTag(f"{owner}: {what} {name!r} is reserved for the primary key")
    return name


def build_schema(cls: type) -> EntitySchema:
    """Read the field declarations of the dataclass *cls*."""
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise BadSchemaTag(f"{cls!r} is not a dataclass type")

    owner = cls.__name__
    primary_attr: str | None = None
    scalars: list[ScalarDescriptor] = []
    relations: list[RelationDescriptor] = []

    for f in dataclasses.fields(cls):
        tag = f.metadata.get(_META)
        if tag is None:
            tag = FieldTag(FieldKind.SCALAR)
        elif not isinstance(tag, FieldTag):
            raise BadSchemaTag(f"{owner}.{f.name}: malformed field tag {tag!r}")

        if tag.kind is FieldKind.PRIMARY:
            if primary_attr is not None:
                raise BadSchemaTag(
                    f"{owner}: more than one primary field ({primary_attr}, {f.name})"
                )
            primary_attr = f.name

        elif tag.kind is FieldKind.SCALAR:
            name = _check_name(f"{owner}.{f.name}", "scalar name", tag.name or f.name)
            if any(s.name == name for s in scalars):
                raise BadSchemaTag(f"{owner}: duplicate scalar name {name!r}")
            scalars.append(ScalarDescriptor(f.name, name, tag.indexed))

        else:
            segment = _check_name(f"{owner}.{f.name}", "relation segment", tag.segment)
            if any(r.segment == segment for r in relations):
                raise BadSchemaTag(f"{owner}: duplicate relation segment {segment!r}")
            target = tag.target
            if isinstance(target, type):
                if not dataclasses.is_dataclass(target):
                    raise BadSchemaTag(
                        f"{owner}.{f.name}: relation target {target.__name__} "
                        "is not a dataclass"
                    )
            elif not (isinstance(target, str) and target):
                raise BadSchemaTag(f"{owner}.{f.name}: bad relation target {target!r}")
            relations.append(RelationDescriptor(f.name, segment, target, tag.cardinality))

    return EntitySchema(
        entity_type=cls,
        primary=primary_attr,
        scalars=tuple(scalars),
        relations=tuple(relations),
    )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class SchemaRegistry:
    """Schemas by entity type, plus a by-name index for string targets."""

    def __init__(self) -> None:
        self._schemas: dict[type, EntitySchema] = {}
        self._by_name: dict[str, type] = {}

    def __contains__(self, cls: object) -> bool:
        return cls in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def register(self, cls: type) -> EntitySchema:
        schema = build_schema(cls)
        self._schemas[cls] = schema
        self._by_name[cls.__name__] = cls
        return schema

    def resolve(self, cls: type) -> EntitySchema:
        """Schema for *cls*, built and registered on first use."""
        schema = self._schemas.get(cls)
        if schema is None:
            schema = self.register(cls)
        return schema

    def schema_of(self, entity: object) -> EntitySchema:
        """Schema for an entity instance; rejects anything else."""
        if not is_entity(entity):
            raise InvalidEntityKind(
                f"expected a dataclass instance, got {type(entity).__name__}"
            )
        return self.resolve(type(entity))

    def target_of(self, rel: RelationDescriptor) -> EntitySchema:
        """Schema of the child type of *rel*, resolving string targets by name."""
        target = rel.target
        if isinstance(target, str):
            resolved = self._by_name.get(target)
            if resolved is None:
                raise BadSchemaTag(
                    f"relation {rel.attr!r}: unknown entity type {target!r}; "
                    "register it with @entity"
                )
            target = resolved
        return self.resolve(target)

    def clear(self) -> None:
        self._schemas.clear()
        self._by_name.clear()


default_registry = SchemaRegistry()


def entity(cls: type[T] | None = None, *, registry: SchemaRegistry | None = None):
    """Class decorator registering a dataclass as an entity type.

    Apply it on top of ``@dataclass``. Usable bare or as
    ``@entity(registry=...)``.
    """
    target_registry = registry if registry is not None else default_registry

    def wrap(c: type[T]) -> type[T]:
        target_registry.register(c)
        return c

    if cls is None:
        return wrap
    return wrap(cls)
