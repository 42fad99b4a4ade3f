"""
Encoder: Python values to JSON text.

Lists and tuples are arrays, mappings are objects. Inside a mapping, members
whose key cannot name a JSON member or whose value has no JSON form are
left out rather than reported; everywhere else an unencodable value raises
``EncodingError``.
"""

import math
import re
from collections.abc import Mapping
from typing import Any

from ._config import EncodeConfig
from ._errors import EncodingError
from ._profile import ProfileContext
from ._values import EMPTY
from ._values import NULL

ESCAPE = re.compile(r'["\\/\x00-\x1f\x7f]')
ESCAPE_ASCII = re.compile(r'["\\/\x00-\x1f\x7f-\U0010ffff]')

ESCAPE_DICT = {
    '"': '\\"',
    "\\": "\\\\",
    "/": "\\/",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}
for _code in [*range(0x20), 0x7F]:
    ESCAPE_DICT.setdefault(chr(_code), f"\\u{_code:04X}")
del _code


def _replace(match: re.Match[str]) -> str:
    return ESCAPE_DICT[match.group()]


def _replace_ascii(match: re.Match[str]) -> str:
    char = match.group()
    escaped = ESCAPE_DICT.get(char)
    if escaped is not None:
        return escaped
    code = ord(char)
    if code < 0x10000:
        return f"\\u{code:04x}"
    code -= 0x10000
    high = 0xD800 | (code >> 10)
    low = 0xDC00 | (code & 0x3FF)
    return f"\\u{high:04x}\\u{low:04x}"


def encode_string(s: str, ensure_ascii: bool = False) -> str:
    """Quotes ``s``, escaping quote, backslash, slash and control codes."""
    if ensure_ascii:
        return '"' + ESCAPE_ASCII.sub(_replace_ascii, s) + '"'
    return '"' + ESCAPE.sub(_replace, s) + '"'


def _as_text(value: bytes | bytearray) -> str:
    return bytes(value).decode("utf-8", "surrogateescape")


def _array_index(key: Any) -> int | None:
    """Returns ``key`` as an int when it is an integer-valued number."""
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    if isinstance(key, float) and key.is_integer():
        return int(key)
    return None


def member_name(key: Any) -> str | None:
    """Returns the JSON member name for ``key``, or None to skip it."""
    if isinstance(key, str):
        return key
    if isinstance(key, bytes | bytearray):
        return _as_text(key)
    index = _array_index(key)
    return None if index is None else str(index)


def is_encodable(value: Any) -> bool:
    """True for values that have a JSON form."""
    if value is None or value is NULL or value is EMPTY:
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    return isinstance(
        value, str | bytes | bytearray | int | list | tuple | Mapping
    )


class Encoder:
    """Serializes one value per ``encode`` call under a fixed config."""

    def __init__(self, config: EncodeConfig) -> None:
        self.config = config
        if isinstance(config.indent, int):
            self._indent: str | None = " " * config.indent
        else:
            self._indent = config.indent
        self._markers: set[int] | None = (
            set() if config.check_circular else None
        )

    def encode(self, value: Any) -> str:
        with ProfileContext("encode"):
            return self._encode(value, 0)

    def _encode(self, value: Any, level: int) -> str:  # noqa: PLR0911
        if value is None or value is NULL:
            return "null"
        if value is EMPTY:
            return "{}"
        if value is True:
            return "true"
        if value is False:
            return "false"
        if isinstance(value, str):
            return encode_string(value, self.config.ensure_ascii)
        if isinstance(value, bytes | bytearray):
            return encode_string(_as_text(value), self.config.ensure_ascii)
        if isinstance(value, int):
            return int.__repr__(value)
        if isinstance(value, float):
            return self._encode_float(value)
        if isinstance(value, list | tuple):
            return self._guarded(value, level, self._encode_array)
        if isinstance(value, Mapping):
            return self._guarded(value, level, self._encode_mapping)
        if self.config.default is not None:
            return self._guarded(value, level, self._encode_default)
        raise EncodingError(
            f"Object of type {type(value).__name__} is not JSON serializable"
        )

    def _encode_float(self, value: float) -> str:
        if not math.isfinite(value):
            raise EncodingError(
                f"Out of range float values are not JSON compliant: {value!r}"
            )
        return float.__repr__(value)

    def _guarded(self, value: Any, level: int, encode: Any) -> str:
        """Runs ``encode`` with a circular reference check around it."""
        if self._markers is None:
            return encode(value, level)
        marker = id(value)
        if marker in self._markers:
            raise EncodingError("Circular reference detected")
        self._markers.add(marker)
        try:
            return encode(value, level)
        finally:
            self._markers.discard(marker)

    def _encode_default(self, value: Any, level: int) -> str:
        assert self.config.default is not None
        return self._encode(self.config.default(value), level)

    def _encode_array(self, items: Any, level: int) -> str:
        return self._join(
            "[", "]", [self._encode(item, level + 1) for item in items], level
        )

    def _encode_mapping(self, mapping: Mapping[Any, Any], level: int) -> str:
        if self.config.detect_arrays:
            length = self._array_length(mapping)
            if length is not None:
                items = [mapping.get(i, NULL) for i in range(1, length + 1)]
                return self._encode_array(items, level)

        members: list[tuple[str, Any]] = []
        for key, value in mapping.items():
            name = member_name(key)
            if name is None or not self._keeps(value):
                continue
            members.append((name, value))
        if self.config.sort_keys:
            members.sort(key=lambda member: member[0])

        key_separator = self.config.key_separator
        encoded = [
            encode_string(name, self.config.ensure_ascii)
            + key_separator
            + self._encode(value, level + 1)
            for name, value in members
        ]
        return self._join("{", "}", encoded, level)

    def _keeps(self, value: Any) -> bool:
        if is_encodable(value):
            return True
        return self.config.default is not None and not isinstance(value, float)

    def _array_length(self, mapping: Mapping[Any, Any]) -> int | None:
        """
        Returns the array length when ``mapping`` reads as an array.

        That is the case when every encodable member is keyed by an integer
        in ``1..max_array_index`` and every such member's value is
        encodable. An empty mapping reads as an empty array.
        """
        length = 0
        for key, value in mapping.items():
            index = _array_index(key)
            if index is not None and 1 <= index <= self.config.max_array_index:
                if not is_encodable(value):
                    return None
                length = max(length, index)
            elif member_name(key) is not None and is_encodable(value):
                return None
        return length

    def _join(
        self, opener: str, closer: str, items: list[str], level: int
    ) -> str:
        if not items:
            return opener + closer
        separator = self.config.item_separator
        if self._indent is None:
            return opener + separator.join(items) + closer
        inner = "\n" + self._indent * (level + 1)
        outer = "\n" + self._indent * level
        body = (separator + inner).join(items)
        return opener + inner + body + outer + closer


def encode(value: Any, **kwargs: Any) -> str:
    """
    Serializes ``value`` to JSON text.

    Accepts the ``EncodeConfig`` fields as keyword arguments. Raises
    ``EncodingError`` for NaN or infinite numbers and for values of
    unsupported types outside mapping members.
    """
    return Encoder(EncodeConfig(**kwargs)).encode(value)
