"""
Immutable configuration for decoding, traversal and encoding.

Public functions accept these fields as keyword arguments and build the
config once per call.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

DEFAULT_CHUNK_SIZE = 8192
DEFAULT_MAX_ARRAY_INDEX = 1_000_000

ParseFloatHook = Callable[[str], Any] | None
ParseIntHook = Callable[[str], Any] | None
DefaultHook = Callable[[Any], Any] | None


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures decoding and traversal.

    ``strict`` switches from the lenient dialect (optional commas, dropped
    backslashes on unknown escapes, ``+``/leading-zero numbers, block
    comments) to RFC 8259. ``allow_comments`` defaults to ``not strict``.
    ``chunk_size`` is used when reading from file objects.
    """

    strict: bool = False
    parse_float: ParseFloatHook = None
    parse_int: ParseIntHook = None
    allow_comments: bool | None = None
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        if not isinstance(self.strict, bool):
            raise TypeError("strict must be a boolean")
        if self.allow_comments is None:
            object.__setattr__(self, "allow_comments", not self.strict)
        elif not isinstance(self.allow_comments, bool):
            raise TypeError("allow_comments must be a boolean")
        if not isinstance(self.chunk_size, int) or self.chunk_size < 1:
            raise ValueError("chunk_size must be a positive integer")


@dataclass(frozen=True)
class EncodeConfig:
    """
    Configures encoding.

    Output is compact by default. ``detect_arrays`` turns on the array/object
    heuristic for mappings keyed by positive integers, bounded by
    ``max_array_index`` so that a sparse key cannot allocate a huge array.
    """

    ensure_ascii: bool = False
    sort_keys: bool = False
    indent: str | int | None = None
    separators: tuple[str, str] | None = None
    default: DefaultHook = None
    detect_arrays: bool = False
    max_array_index: int = DEFAULT_MAX_ARRAY_INDEX
    check_circular: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.ensure_ascii, bool):
            raise TypeError("ensure_ascii must be a boolean")
        if not isinstance(self.sort_keys, bool):
            raise TypeError("sort_keys must be a boolean")
        if not isinstance(self.detect_arrays, bool):
            raise TypeError("detect_arrays must be a boolean")
        if (
            not isinstance(self.max_array_index, int)
            or self.max_array_index < 1
        ):
            raise ValueError("max_array_index must be a positive integer")
        if self.separators is None:
            key_sep = ":" if self.indent is None else ": "
            object.__setattr__(self, "separators", (",", key_sep))

    @property
    def item_separator(self) -> str:
        assert self.separators is not None
        return self.separators[0]

    @property
    def key_separator(self) -> str:
        assert self.separators is not None
        return self.separators[1]
