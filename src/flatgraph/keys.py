"""Primary keys and the key codec.

A :class:`Key` is an ancestor path of ``(kind, identifier)`` pairs. Its
canonical string form (``Key.urlsafe()``) is what entity primary-key fields
hold; the :class:`VKey` token is what gets stored in attribute lists.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from dataclasses import dataclass
from typing import Protocol, Union

from .errors import KeyDecodeError, KeyEncodeError
from .values import Value, VKey

Identifier = Union[str, int]

_URLSAFE_RE = re.compile(r"[A-Za-z0-9_-]+")


@dataclass(frozen=True)
class Key:
    kind: str
    identifier: Identifier
    parent: "Key | None" = None

    def path(self) -> list[tuple[str, Identifier]]:
        """Return the ``(kind, identifier)`` pairs from the root ancestor down."""
        pairs: list[tuple[str, Identifier]] = []
        key: Key | None = self
        while key is not None:
            pairs.append((key.kind, key.identifier))
            key = key.parent
        pairs.reverse()
        return pairs

    def urlsafe(self) -> str:
        raw = json.dumps(
            [[kind, ident] for kind, ident in self.path()],
            separators=(",", ":"),
        )
        return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")

    @classmethod
    def from_urlsafe(cls, text: str) -> "Key":
        """Parse the canonical string form produced by :meth:`urlsafe`.

        Raises :class:`ValueError` on anything malformed.
        """
        if not text:
            raise ValueError("empty key string")
        if not _URLSAFE_RE.fullmatch(text):
            raise ValueError(f"key string outside the urlsafe alphabet: {text!r}")
        padded = text + "=" * (-len(text) % 4)
        try:
            raw = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
            path = json.loads(raw.decode("utf-8"))
        except (binascii.Error, UnicodeError, json.JSONDecodeError, RecursionError) as exc:
            raise ValueError(f"malformed key string: {text!r}") from exc

        if not isinstance(path, list) or not path:
            raise ValueError(f"malformed key path: {text!r}")

        key: Key | None = None
        for pair in path:
            if (
                not isinstance(pair, list)
                or len(pair) != 2
                or not isinstance(pair[0], str)
                or not pair[0]
                or isinstance(pair[1], bool)
                or not isinstance(pair[1], (str, int))
            ):
                raise ValueError(f"malformed key path element: {pair!r}")
            key = cls(kind=pair[0], identifier=pair[1], parent=key)
        if key.urlsafe() != text:
            raise ValueError(f"non-canonical key string: {text!r}")
        return key

    def __str__(self) -> str:
        return "/".join(f"{kind}:{ident}" for kind, ident in self.path())


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------

class KeyCodec(Protocol):
    def encode_key(self, text: str) -> VKey:
        """Turn a primary-key string into a key token."""
        ...

    def decode_key(self, value: Value) -> str:
        """Turn a stored key token back into a primary-key string."""
        ...


class UrlSafeKeyCodec:
    """Key codec over :meth:`Key.urlsafe` / :meth:`Key.from_urlsafe`."""

    def encode_key(self, text: str) -> VKey:
        try:
            return VKey(Key.from_urlsafe(text))
        except ValueError as exc:
            raise KeyEncodeError(str(exc)) from exc

    def decode_key(self, value: Value) -> str:
        if not isinstance(value, VKey):
            raise KeyDecodeError(f"expected a key token, got {value!r}")
        return value.value.urlsafe()
