"""Serializer facade: save and load whole entity graphs."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .codec import Codecs, ScalarCodec
from .config import Settings, default_settings
from .errors import InvalidEntityKind
from .flatten import flatten
from .keys import KeyCodec
from .namespace import ROOT
from .reconstruct import reconstruct
from .schema import SchemaRegistry, default_registry, is_entity
from .values import AttributeList

logger = logging.getLogger(__name__)


class Serializer:
    """Converts entity graphs to attribute lists and back.

    Usage::

        serializer = Serializer()
        attributes = serializer.save(post)

        loaded = Post()
        serializer.load(loaded, attributes)

    Entities nested deeper than ``settings.max_depth`` relation levels are
    dropped on save and never rebuilt on load.
    """

    def __init__(
        self,
        registry: SchemaRegistry | None = None,
        scalar_codec: ScalarCodec | None = None,
        key_codec: KeyCodec | None = None,
        settings: Settings | None = None,
    ) -> None:
        defaults = Codecs.default(registry)
        self.codecs = Codecs(
            registry=defaults.registry,
            scalars=scalar_codec if scalar_codec is not None else defaults.scalars,
            keys=key_codec if key_codec is not None else defaults.keys,
        )
        self.settings = settings if settings is not None else default_settings()

    @property
    def registry(self) -> SchemaRegistry:
        return self.codecs.registry

    def save(self, entity: Any) -> AttributeList:
        """Flatten *entity* into a new attribute list.

        The root entity's own primary key is not written.
        """
        _check_entity(entity)
        attributes = flatten(entity, self.codecs, max_depth=self.settings.max_depth)
        logger.debug("saved %s as %d attribute(s)", type(entity).__name__, len(attributes))
        return attributes

    def load(self, entity: Any, attributes: Iterable) -> None:
        """Populate *entity* from *attributes*.

        *attributes* is not modified. Raises :class:`NoMoreProperties` when
        no attribute belongs to the root record. After any failure *entity*
        may be partially populated and should be discarded.
        """
        _check_entity(entity)
        remaining = reconstruct(
            entity,
            list(attributes),
            self.codecs,
            ROOT,
            max_depth=self.settings.max_depth,
        )
        if remaining:
            logger.debug(
                "%d attribute(s) left unused loading %s",
                len(remaining),
                type(entity).__name__,
            )


def _check_entity(entity: Any) -> None:
    if not is_entity(entity):
        raise InvalidEntityKind(
            f"expected a dataclass instance, got {type(entity).__name__}"
        )


# ---------------------------------------------------------------------------
# Module-level shortcuts
# ---------------------------------------------------------------------------

_default: Serializer | None = None


def default_serializer() -> Serializer:
    global _default
    if _default is None:
        _default = Serializer(default_registry)
    return _default


def save_entity(entity: Any) -> AttributeList:
    """Flatten *entity* with the default serializer."""
    return default_serializer().save(entity)


def load_entity(entity: Any, attributes: Iterable) -> None:
    """Load *entity* from *attributes* with the default serializer."""
    default_serializer().load(entity, attributes)
