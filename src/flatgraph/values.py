"""Attribute payload types and the Attribute record."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Union

from .errors import ScalarDecodeError, ScalarEncodeError

if TYPE_CHECKING:
    from .keys import Key


# ---------------------------------------------------------------------------
# Value variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VText:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class VInt:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class VFloat:
    value: float

    def __str__(self) -> str:
        v = self.value
        if v.is_integer():
            return str(int(v))
        return str(v)


@dataclass(frozen=True)
class VBool:
    value: bool

    def __str__(self) -> str:
        return str(self.value).lower()


@dataclass(frozen=True)
class VTime:
    value: datetime.datetime

    def __str__(self) -> str:
        return self.value.isoformat()


@dataclass(frozen=True)
class VBytes:
    value: bytes

    def __str__(self) -> str:
        return self.value.hex()


@dataclass(frozen=True)
class VKey:
    """Key token stored as an attribute value."""

    value: "Key"

    def __str__(self) -> str:
        return self.value.urlsafe()


class _Null:
    """Singleton standing for a stored ``None``."""

    _instance: "_Null | None" = None

    def __new__(cls) -> "_Null":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "VNull"

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return "null"


VNull = _Null()

ScalarValue = Union[VText, VInt, VFloat, VBool, VTime, VBytes, _Null]
Value = Union[VText, VInt, VFloat, VBool, VTime, VBytes, VKey, _Null]

_SCALAR_TYPES = (VText, VInt, VFloat, VBool, VTime, VBytes)


def to_value(obj: object) -> ScalarValue:
    """Wrap a plain Python scalar in its value variant.

    ``bool`` is tested before ``int`` since it is a subclass of it.
    """
    if obj is None:
        return VNull
    if isinstance(obj, bool):
        return VBool(obj)
    if isinstance(obj, int):
        return VInt(obj)
    if isinstance(obj, float):
        return VFloat(obj)
    if isinstance(obj, str):
        return VText(obj)
    if isinstance(obj, datetime.datetime):
        return VTime(obj)
    if isinstance(obj, (bytes, bytearray)):
        return VBytes(bytes(obj))
    raise ScalarEncodeError(f"unsupported scalar type: {type(obj).__name__}")


def from_value(value: Value) -> object:
    """Unwrap a scalar variant back into a plain Python object."""
    if isinstance(value, _Null):
        return None
    if isinstance(value, _SCALAR_TYPES):
        return value.value
    raise ScalarDecodeError(f"not a scalar value: {value!r}")


# ---------------------------------------------------------------------------
# Attribute
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Attribute:
    """One named value in a flattened entity graph.

    ``name`` is ``<namespace>.<bare-name>``, or just the bare name at the
    root. ``multiple`` marks membership of a repeated relation; it is a
    storage hint and is not trusted when loading.
    """

    name: str
    value: Value
    indexed: bool = False
    multiple: bool = False

    def renamed(self, name: str) -> "Attribute":
        return replace(self, name=name)

    def with_multiple(self, multiple: bool) -> "Attribute":
        if self.multiple == multiple:
            return self
        return replace(self, multiple=multiple)

    def __str__(self) -> str:
        flags = []
        if self.indexed:
            flags.append("indexed")
        if self.multiple:
            flags.append("multiple")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        return f"{self.name}={self.value}{suffix}"


AttributeList = list[Attribute]
