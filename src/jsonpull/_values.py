"""
Value model shared by the encoder, decoder and traversal engine.

JSON values map onto plain Python types. Two singletons cover the cases a
dynamic container cannot express on its own: ``NULL`` stands for JSON
``null`` wherever ``None`` would read as "no value", and ``EMPTY`` stands for
an object without members, so that ``{}`` and ``[]`` stay distinguishable
after a round trip.
"""

from collections.abc import Iterator
from collections.abc import Mapping
from enum import Enum
from enum import StrEnum
from typing import Any

type Position = int
type PathSegment = str | int
type Path = tuple[PathSegment, ...]


class NullType:
    """
    JSON ``null``.

    Only one instance ever exists. It is falsy and survives copying and
    pickling as itself, so identity checks (``value is NULL``) are reliable.
    """

    __slots__ = ()
    _instance: "NullType | None" = None

    def __new__(cls) -> "NullType":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "null"

    def __reduce__(self) -> str:
        return "NULL"


class EmptyObject(Mapping[str, Any]):
    """
    Read-only JSON object with no members.

    Being a ``Mapping`` without mutating methods, any attempt to store into
    it fails with ``TypeError``. Compares equal to ``{}``.
    """

    __slots__ = ()
    _instance: "EmptyObject | None" = None

    def __new__(cls) -> "EmptyObject":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __getitem__(self, key: str) -> Any:
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return iter(())

    def __len__(self) -> int:
        return 0

    def __repr__(self) -> str:
        return "EMPTY"

    def __reduce__(self) -> str:
        return "EMPTY"


class _MissingType:
    """Marks a traversal value that has not been scanned yet."""

    __slots__ = ()
    _instance: "_MissingType | None" = None

    def __new__(cls) -> "_MissingType":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __reduce__(self) -> str:
        return "MISSING"


NULL = NullType()
EMPTY = EmptyObject()
MISSING = _MissingType()

type JsonValue = (
    NullType
    | bool
    | int
    | float
    | str
    | list[JsonValue]
    | dict[str, JsonValue]
    | EmptyObject
)


class ElementKind(StrEnum):
    """Kinds of elements reported to traversal callbacks."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class Action(Enum):
    """
    Outcomes a traversal callback may return.

    ``None`` and other falsy results mean ``CONTINUE``; any other truthy
    result on a container announcement means ``MATERIALIZE``. ``SKIP``
    passes over a container without reporting its children.
    """

    CONTINUE = "continue"
    MATERIALIZE = "materialize"
    SKIP = "skip"
    STOP = "stop"
