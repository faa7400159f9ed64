"""flatgraph: flatten entity graphs into attribute lists and rebuild them."""

from .codec import Codecs, DataclassScalarCodec, ScalarCodec
from .config import Settings
from .errors import (
    BadSchemaTag,
    FlatGraphError,
    InvalidEntityKind,
    KeyDecodeError,
    KeyEncodeError,
    NoMoreProperties,
    ScalarDecodeError,
    ScalarEncodeError,
)
from .extract import Extraction, extract
from .flatten import flatten
from .keys import Key, KeyCodec, UrlSafeKeyCodec
from .reconstruct import reconstruct
from .schema import (
    Cardinality,
    EntitySchema,
    RelationDescriptor,
    SchemaRegistry,
    entity,
    primary,
    relation,
    scalar,
)
from .serializer import Serializer, load_entity, save_entity
from .values import (
    Attribute,
    AttributeList,
    Value,
    VBool,
    VBytes,
    VFloat,
    VInt,
    VKey,
    VNull,
    VText,
    VTime,
)

__all__ = [
    "save_entity",
    "load_entity",
    "Serializer",
    "Settings",
    "flatten",
    "extract",
    "Extraction",
    "reconstruct",
    "Attribute",
    "AttributeList",
    "Value",
    "VBool",
    "VBytes",
    "VFloat",
    "VInt",
    "VKey",
    "VNull",
    "VText",
    "VTime",
    "Key",
    "KeyCodec",
    "UrlSafeKeyCodec",
    "ScalarCodec",
    "DataclassScalarCodec",
    "Codecs",
    "Cardinality",
    "EntitySchema",
    "RelationDescriptor",
    "SchemaRegistry",
    "entity",
    "primary",
    "relation",
    "scalar",
    "FlatGraphError",
    "InvalidEntityKind",
    "BadSchemaTag",
    "NoMoreProperties",
    "ScalarEncodeError",
    "ScalarDecodeError",
    "KeyEncodeError",
    "KeyDecodeError",
]
