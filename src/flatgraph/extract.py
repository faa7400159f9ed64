"""Extractor: slice one record's attributes out of an attribute list.

Attributes of N repeated children sharing a namespace are stored as N
occurrences of each bare name ("repeated columns"). One extraction pass
takes the first not-yet-seen occurrence of every bare name at the
namespace and leaves later occurrences behind, so successive passes over
the remainder peel off successive rows. A pass that finds nothing means
there are no more records at that namespace.

Because rows are recovered purely from occurrence order, a column that is
missing for some child shifts the following values up a row. Scalar codecs
therefore write every field, ``None`` included. The ``id`` column has no
such filler: in a collection mixing keyed and unkeyed children, the keys
attach to the first children in order, not to the ones that carried them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .namespace import split
from .schema import KEY_NAME
from .values import Attribute, AttributeList, Value


@dataclass
class Extraction:
    key: Value | None = None
    properties: AttributeList = field(default_factory=list)
    remainder: AttributeList = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.properties)


def extract(namespace: str, attributes: Iterable[Attribute]) -> Extraction:
    """Take one record's worth of attributes at exactly *namespace*.

    Returns the captured key value (first ``id`` occurrence, if any), the
    record's attributes renamed to their bare names, and every attribute
    not consumed, in original order. *attributes* itself is not modified.
    """
    result = Extraction()
    seen: set[str] = set()

    for attr in attributes:
        attr_namespace, bare = split(attr.name)
        if attr_namespace != namespace or bare in seen:
            result.remainder.append(attr)
            continue
        seen.add(bare)
        if bare == KEY_NAME:
            result.key = attr.value
        else:
            result.properties.append(attr.renamed(bare))

    return result
