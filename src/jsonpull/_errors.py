"""
Error types raised by the codec.

Decoding failures carry the byte offset where scanning stopped together with
line and column numbers, so callers can point at the offending input even
when it arrived through a chunk loader.
"""

from ._values import Position


class StructuralError(ValueError):
    """
    Handles malformed JSON with precise position and context information.

    Raised for missing brackets or quotes, bad separators, unterminated
    comments and strings, invalid literals and out-of-range numbers. ``pos``
    is a 0-based byte offset into the logical input stream. ``doc`` holds the
    input bytes seen so far when they start at offset 0, and is empty
    otherwise, in which case line and column are relative to ``pos`` alone.
    """

    def __init__(
        self, msg: str, doc: bytes = b"", pos: Position = 0
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.doc = doc
        self.pos = pos

        # Columns count bytes, matching pos
        self.lineno = doc.count(b"\n", 0, pos) + 1 if doc else 1
        self.colno = pos - doc.rfind(b"\n", 0, pos) if doc else pos + 1

        super().__init__(f"{msg} at line {self.lineno}, column {self.colno}")

    def __reduce__(self) -> tuple[type, tuple[str, bytes, Position]]:
        return self.__class__, (self.msg, self.doc, self.pos)


JSONDecodeError = StructuralError


class EncodingError(ValueError, TypeError):
    """
    Signals a value that has no JSON representation.

    Raised for NaN and infinite numbers, unsupported top-level types,
    unencodable array elements and circular references. Subclasses both
    ``ValueError`` and ``TypeError`` so code written against the standard
    library's encoder keeps catching it.
    """
