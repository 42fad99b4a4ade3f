"""
Input sources: one interface over a whole document and a chunk loader.

Scanners address input by absolute byte offset. A text source answers from
the encoded document directly; a loader source pulls chunks on demand and
appends them to its buffer, which never shrinks once a scan has started, so
every offset handed out during a call stays valid until the call returns.
"""

import functools
import re
from collections.abc import Callable
from typing import Any

from ._config import DEFAULT_CHUNK_SIZE
from ._values import Position

type Chunk = str | bytes | bytearray | memoryview | None
type Loader = Callable[[], Chunk]


class InputSource:
    """
    Byte-addressed view over a JSON document.

    ``offset`` is the logical position of the first byte the source holds,
    which lets a caller resume a document from a file it already seeked.
    """

    __slots__ = ("_base", "_buffer", "_loader")

    def __init__(
        self,
        data: bytes | bytearray = b"",
        loader: Loader | None = None,
        offset: Position = 0,
    ) -> None:
        if not isinstance(offset, int) or offset < 0:
            raise ValueError("offset must be a non-negative integer")
        self._base = offset
        self._buffer: bytes | bytearray = (
            data if loader is None else bytearray(data)
        )
        self._loader = loader

    @classmethod
    def from_text(
        cls, text: str | bytes | bytearray | memoryview
    ) -> "InputSource":
        """Wraps a complete document; ``str`` input is UTF-8 encoded once."""
        if isinstance(text, str):
            return cls(text.encode("utf-8", "surrogateescape"))
        if isinstance(text, bytes):
            return cls(text)
        if isinstance(text, bytearray | memoryview):
            return cls(bytes(text))
        raise TypeError(
            f"the JSON object must be str or bytes, not {type(text).__name__}"
        )

    @classmethod
    def from_loader(
        cls, loader: Loader, offset: Position = 0
    ) -> "InputSource":
        """Wraps a callable returning successive chunks, then an end marker."""
        if not callable(loader):
            raise TypeError("loader must be callable")
        return cls(loader=loader, offset=offset)

    @classmethod
    def from_file(
        cls,
        fp: Any,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        offset: Position = 0,
    ) -> "InputSource":
        """Reads ``fp`` in ``chunk_size`` pieces from its current position."""
        if not hasattr(fp, "read"):
            raise TypeError("fp must have a read() method")
        return cls.from_loader(functools.partial(fp.read, chunk_size), offset)

    @property
    def start(self) -> Position:
        """Offset of the first buffered byte."""
        return self._base

    @property
    def end(self) -> Position:
        """Offset just past the last buffered byte."""
        return self._base + len(self._buffer)

    @property
    def streaming(self) -> bool:
        """True while the loader may still produce chunks."""
        return self._loader is not None

    def document(self) -> bytes:
        """Returns the buffered input when it starts at offset 0."""
        if self._base:
            return b""
        return bytes(self._buffer)

    def _load(self) -> bool:
        """Appends one chunk; returns False once the loader signals the end."""
        if self._loader is None:
            return False
        chunk = self._loader()
        if not chunk:
            self._loader = None
            return False
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8", "surrogateescape")
        elif not isinstance(chunk, bytes | bytearray | memoryview):
            raise TypeError(
                f"loader returned {type(chunk).__name__}, "
                "expected str or bytes"
            )
        assert isinstance(self._buffer, bytearray)
        self._buffer += chunk
        return True

    def _fill(self, pos: Position) -> bool:
        """Loads chunks until ``pos`` is buffered."""
        while pos >= self._base + len(self._buffer):
            if not self._load():
                return False
        return True

    def peek(self, pos: Position) -> int | None:
        """Returns the byte at ``pos``, or None past the end of the stream."""
        index = pos - self._base
        if index < len(self._buffer):
            return self._buffer[index]
        if not self._fill(pos):
            return None
        return self._buffer[index]

    def slice(self, start: Position, stop: Position) -> bytes:
        """Returns bytes in ``[start, stop)``, fewer at the end of stream."""
        if stop > start:
            self._fill(stop - 1)
        return bytes(self._buffer[start - self._base : stop - self._base])

    def startswith(self, prefix: bytes, pos: Position) -> bool:
        return self.slice(pos, pos + len(prefix)) == prefix

    def search(
        self, pattern: re.Pattern[bytes], pos: Position, width: int = 1
    ) -> re.Match[bytes] | None:
        """
        Finds the first match of ``pattern`` at or after ``pos``.

        Loads chunks until a match appears or the stream ends. ``width`` is
        the longest match the pattern can produce, so a match straddling a
        chunk boundary is found once the next chunk arrives. Match offsets
        are relative to ``start`` at the time of the call.
        """
        index = pos - self._base
        while True:
            match = pattern.search(self._buffer, index)
            if match is not None:
                return match
            index = max(index, len(self._buffer) - width + 1)
            if not self._load():
                return None

    def find(self, needle: bytes, pos: Position) -> Position:
        """Returns the offset of ``needle`` at or after ``pos``, or -1."""
        match = self.search(re.compile(re.escape(needle)), pos, len(needle))
        return -1 if match is None else self._base + match.start()

    def exhausted(self, pos: Position) -> bool:
        """True when no byte exists at ``pos`` and none ever will."""
        return self.peek(pos) is None

    def discard_before(self, pos: Position) -> None:
        """
        Drops input preceding ``pos`` from a loader source.

        Called once before scanning starts, so that decoding deep into a
        stream holds only the bytes from ``pos`` onwards.
        """
        if not isinstance(self._buffer, bytearray) or pos <= self._base:
            return
        while pos > self._base + len(self._buffer):
            self._base += len(self._buffer)
            self._buffer = bytearray()
            if not self._load():
                break
        cut = min(pos - self._base, len(self._buffer))
        del self._buffer[:cut]
        self._base += cut


def open_source(
    source: Any,
    offset: Position = 0,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> InputSource:
    """
    Builds an input source from text, a loader, a file object or a source.

    ``offset`` applies to loaders and files only: a text document always
    starts at offset 0.
    """
    if isinstance(source, InputSource):
        return source
    if isinstance(source, str | bytes | bytearray | memoryview):
        return InputSource.from_text(source)
    if hasattr(source, "read"):
        return InputSource.from_file(source, chunk_size, offset)
    if callable(source):
        return InputSource.from_loader(source, offset)
    raise TypeError(
        "the JSON object must be str, bytes, a loader or a file, "
        f"not {type(source).__name__}"
    )
