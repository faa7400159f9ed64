"""Reconstructor: attribute list -> entity graph (load direction)."""

from __future__ import annotations

import logging
from typing import Any

from .codec import Codecs
from .config import DEFAULT_MAX_DEPTH
from .errors import NoMoreProperties
from .extract import extract
from .namespace import ROOT, child
from .values import AttributeList

logger = logging.getLogger(__name__)


def reconstruct(
    entity: Any,
    attributes: AttributeList,
    codecs: Codecs,
    namespace: str = ROOT,
    depth: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> AttributeList:
    """Populate *entity* from the record at *namespace* and its relations.

    Returns the attributes left unconsumed. Raises :class:`NoMoreProperties`
    when there is no record at *namespace* (or it lies beyond *max_depth*);
    callers loading relations treat that as the end of the relation.
    Other failures propagate and may leave *entity* partially populated.
    """
    if depth > max_depth:
        raise NoMoreProperties(namespace)

    schema = codecs.registry.schema_of(entity)
    found = extract(namespace, attributes)
    if not found.properties:
        raise NoMoreProperties(namespace)

    properties = [a.with_multiple(False) for a in found.properties]
    codecs.scalars.decode_scalars(entity, properties)

    if found.key is not None:
        if schema.primary is None:
            logger.debug(
                "%s has no primary field; key at %r ignored",
                schema.entity_type.__name__,
                namespace,
            )
        else:
            setattr(entity, schema.primary, codecs.keys.decode_key(found.key))

    remaining = found.remainder
    for rel in schema.relations:
        # children would lie beyond the cap
        if depth >= max_depth:
            break
        sub = child(namespace, rel.segment)
        target = codecs.registry.target_of(rel)

        if rel.repeated:
            items = getattr(entity, rel.attr)
            if items is None:
                items = []
                setattr(entity, rel.attr, items)
            loaded = 0
            while True:
                item = target.new_instance()
                try:
                    remaining = reconstruct(item, remaining, codecs, sub, depth + 1, max_depth)
                except NoMoreProperties:
                    break
                items.append(item)
                loaded += 1
            logger.debug("loaded %d %s record(s) at %r", loaded, rel.attr, sub)

        elif getattr(entity, rel.attr) is None:
            item = target.new_instance()
            try:
                remaining = reconstruct(item, remaining, codecs, sub, depth + 1, max_depth)
            except NoMoreProperties:
                continue
            setattr(entity, rel.attr, item)

    return remaining
