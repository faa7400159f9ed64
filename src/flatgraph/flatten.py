"""Flattener: entity graph -> attribute list (save direction)."""

from __future__ import annotations

import logging
from typing import Any

from .codec import Codecs
from .config import DEFAULT_MAX_DEPTH
from .errors import InvalidEntityKind
from .namespace import ROOT, child
from .schema import KEY_NAME
from .values import Attribute, AttributeList

logger = logging.getLogger(__name__)


def flatten(
    entity: Any,
    codecs: Codecs,
    namespace: str = ROOT,
    multiple: bool = False,
    depth: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> AttributeList:
    """Flatten *entity* and its relations into one attribute list.

    Output order: own scalars, then the key attribute (nested entities
    only), then each relation in declaration order, repeated children in
    sequence order. Entities deeper than *max_depth* contribute nothing.
    The graph is only read, never modified.
    """
    if depth > max_depth:
        logger.debug("depth %d exceeds cap %d at %r; dropped", depth, max_depth, namespace)
        return []

    schema = codecs.registry.schema_of(entity)

    attributes: AttributeList = [
        Attribute(child(namespace, a.name), a.value, indexed=a.indexed, multiple=multiple)
        for a in codecs.scalars.encode_scalars(entity)
    ]

    # The root's own key is kept out of band by the caller.
    if schema.primary is not None and namespace != ROOT:
        key_text = getattr(entity, schema.primary)
        if key_text:
            attributes.append(
                Attribute(
                    child(namespace, KEY_NAME),
                    codecs.keys.encode_key(key_text),
                    indexed=True,
                    multiple=multiple,
                )
            )

    for rel in schema.relations:
        sub = child(namespace, rel.segment)
        value = getattr(entity, rel.attr)
        if rel.repeated:
            if value is None:
                continue
            if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
                raise InvalidEntityKind(
                    f"relation {rel.attr!r} expects a sequence of entities, "
                    f"got {type(value).__name__}"
                )
            for item in value:
                attributes.extend(flatten(item, codecs, sub, True, depth + 1, max_depth))
        elif value is not None:
            attributes.extend(flatten(value, codecs, sub, multiple, depth + 1, max_depth))

    return attributes
