"""
Recursive-descent decoder building full values from an input source.
"""

from typing import Any

from ._config import ParseConfig
from ._profile import ProfileContext
from ._scanner import LBRACE
from ._scanner import LBRACKET
from ._scanner import RBRACE
from ._scanner import RBRACKET
from ._scanner import Scanner
from ._source import InputSource
from ._source import open_source
from ._values import EMPTY
from ._values import JsonValue
from ._values import Position

UTF8_BOM = b"\xef\xbb\xbf"


class Decoder(Scanner):
    """Decodes one JSON value per call, starting at any offset."""

    def scan_value(self, pos: Position) -> tuple[JsonValue, Position]:
        """Decodes the value at ``pos``; returns it and the offset past it."""
        pos = self.skip_whitespace(pos)
        char = self.source.peek(pos)
        if char is None:
            raise self.error("Expecting value", pos)
        if char == LBRACE:
            return self.scan_object(pos)
        if char == LBRACKET:
            return self.scan_array(pos)
        value, _, end = self.scan_scalar(pos)
        return value, end

    def scan_object(self, pos: Position) -> tuple[JsonValue, Position]:
        """
        Decodes an object.

        The dict is created on the first member, so ``{}`` yields ``EMPTY``.
        """
        with ProfileContext("scan_object"):
            opened_at = pos
            result: dict[str, JsonValue] | None = None
            pos += 1
            while True:
                pos, done = self.next_member(
                    pos, RBRACE, result is None, opened_at
                )
                if done:
                    return (EMPTY if result is None else result), pos
                key, pos = self.scan_key(pos)
                value, pos = self.scan_value(pos)
                if result is None:
                    result = {}
                result[key] = value

    def scan_array(self, pos: Position) -> tuple[JsonValue, Position]:
        """Decodes an array."""
        with ProfileContext("scan_array"):
            opened_at = pos
            result: list[JsonValue] = []
            pos += 1
            while True:
                pos, done = self.next_member(
                    pos, RBRACKET, not result, opened_at
                )
                if done:
                    return result, pos
                value, pos = self.scan_value(pos)
                result.append(value)

    def skip_value(self, pos: Position) -> Position:
        """Scans past the value at ``pos`` without building containers."""
        pos = self.skip_whitespace(pos)
        char = self.source.peek(pos)
        if char != LBRACE and char != LBRACKET:
            _, _, end = self.scan_scalar(pos)
            return end

        closer = RBRACE if char == LBRACE else RBRACKET
        opened_at = pos
        first = True
        pos += 1
        while True:
            pos, done = self.next_member(pos, closer, first, opened_at)
            if done:
                return pos
            if closer == RBRACE:
                _, pos = self.scan_key(pos)
            pos = self.skip_value(pos)
            first = False

    def scan_document(self) -> JsonValue:
        """Decodes a complete document, rejecting a BOM and trailing data."""
        start = self.source.start
        if self.source.startswith(UTF8_BOM, start):
            raise self.error(
                "JSON input should not contain BOM (Byte Order Mark)", start
            )
        value, end = self.scan_value(start)
        self.expect_end(end)
        return value


def prepare_source(
    source: Any, pos: Position, offset: Position, config: ParseConfig
) -> InputSource:
    """Opens ``source`` for a scan starting at ``pos``."""
    if not isinstance(pos, int) or pos < 0:
        raise ValueError("pos must be a non-negative integer")
    opened = open_source(source, offset, config.chunk_size)
    if opened is not source:
        opened.discard_before(pos)
    if pos < opened.start:
        raise ValueError(
            f"pos {pos} precedes the first available byte {opened.start}"
        )
    return opened


def decode(
    source: Any, pos: Position = 0, *, offset: Position = 0, **kwargs: Any
) -> tuple[JsonValue, Position]:
    """
    Decodes the JSON value starting at byte offset ``pos``.

    ``source`` is a ``str``/``bytes`` document, a loader returning successive
    chunks and then ``None`` or an empty chunk, a binary or text file, or an
    ``InputSource``. For loaders and files, ``offset`` is the position of the
    first byte they produce. Returns the value and the offset just past it;
    anything after the value is left unread.
    """
    config = ParseConfig(**kwargs)
    opened = prepare_source(source, pos, offset, config)
    return Decoder(opened, config).scan_value(pos)
