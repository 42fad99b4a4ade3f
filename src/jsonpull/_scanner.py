"""
Lexical scanners shared by the decoder and the traversal engine.

Every scanner takes the absolute byte offset of the first byte to consume
and returns the offset just past what it consumed. Lookahead goes through
the input source, so the same code runs over a whole document and over a
chunk loader.
"""

import math
import re
from typing import Any

from ._config import ParseConfig
from ._errors import StructuralError
from ._profile import ProfileContext
from ._source import InputSource
from ._values import NULL
from ._values import ElementKind
from ._values import Position

WHITESPACE = frozenset(b" \t\n\r")
NUMBER_START = frozenset(b"-0123456789")
LENIENT_NUMBER_START = frozenset(b"+.")
QUOTE = ord('"')
BACKSLASH = ord("\\")
SLASH = ord("/")
STAR = ord("*")
COMMA = ord(",")
COLON = ord(":")
LBRACE = ord("{")
RBRACE = ord("}")
LBRACKET = ord("[")
RBRACKET = ord("]")
LOWER_U = ord("u")

COMMENT_END = re.compile(rb"\*/")
HEX4 = re.compile(rb"[0-9a-fA-F]{4}")
NUMBER_END = re.compile(rb"[^-+0-9.eE]")
STRING_SPECIAL = re.compile(rb'["\\]')
STRING_SPECIAL_STRICT = re.compile(rb'["\\\x00-\x1f]')

STRICT_NUMBER = re.compile(
    rb"-?(?:0|[1-9][0-9]*)(?P<frac>\.[0-9]+)?(?P<exp>[eE][-+]?[0-9]+)?"
)
LENIENT_NUMBER = re.compile(
    rb"[-+]?(?=\.?[0-9])[0-9]*(?P<frac>\.[0-9]*)?(?P<exp>[eE][-+]?[0-9]+)?"
)

ESCAPES = {
    ord('"'): '"',
    ord("\\"): "\\",
    ord("/"): "/",
    ord("b"): "\b",
    ord("f"): "\f",
    ord("n"): "\n",
    ord("r"): "\r",
    ord("t"): "\t",
}

CONSTANTS: tuple[tuple[bytes, Any, ElementKind], ...] = (
    (b"true", True, ElementKind.BOOLEAN),
    (b"false", False, ElementKind.BOOLEAN),
    (b"null", NULL, ElementKind.NULL),
)

_CONTAINER_NAMES = {RBRACE: "object", RBRACKET: "array"}


class Scanner:
    """
    Scans JSON lexemes from an input source.

    Holds no cursor of its own: callers thread positions through every
    call, which is what lets a scan start at any offset.
    """

    def __init__(self, source: InputSource, config: ParseConfig) -> None:
        self.source = source
        self.config = config
        self.strict = config.strict
        self.allow_comments = config.allow_comments
        self._string_special = (
            STRING_SPECIAL_STRICT if config.strict else STRING_SPECIAL
        )
        self._number_grammar = (
            STRICT_NUMBER if config.strict else LENIENT_NUMBER
        )

    def error(self, msg: str, pos: Position) -> StructuralError:
        return StructuralError(msg, self.source.document(), pos)

    def skip_whitespace(self, pos: Position) -> Position:
        """Skips whitespace and, when allowed, block comments."""
        peek = self.source.peek
        while True:
            char = peek(pos)
            if char in WHITESPACE:
                pos += 1
            elif (
                char == SLASH and self.allow_comments and peek(pos + 1) == STAR
            ):
                pos = self.scan_comment(pos)
            else:
                return pos

    def scan_comment(self, pos: Position) -> Position:
        """Skips a ``/* ... */`` comment starting at ``pos``."""
        if not self.source.startswith(b"/*", pos):
            raise self.error("Expecting comment", pos)
        match = self.source.search(COMMENT_END, pos + 2, width=2)
        if match is None:
            raise self.error("Unterminated comment starting at", pos)
        return self.source.start + match.end()

    def scan_string(self, pos: Position) -> tuple[str, Position]:
        """
        Scans a string from its opening quote.

        Literal runs are copied as UTF-8 and escapes resolved in between. A
        ``\\u`` high surrogate must be followed directly by a ``\\u`` low
        surrogate; the pair becomes one code point. In the lenient dialect
        an unknown escape loses its backslash and an unpaired surrogate is
        dropped, while the strict dialect rejects both, along with raw
        control characters.
        """
        source = self.source
        with ProfileContext("scan_string"):
            if source.peek(pos) != QUOTE:
                raise self.error("Expecting string", pos)

            parts: list[str] = []
            high_surrogate: int | None = None
            index = pos + 1
            while True:
                match = source.search(self._string_special, index)
                if match is None:
                    raise self.error("Unterminated string starting at", pos)
                special = source.start + match.start()
                if special > index:
                    if high_surrogate is not None:
                        self._unpaired_surrogate(index)
                        high_surrogate = None
                    parts.append(
                        source.slice(index, special).decode(
                            "utf-8", "surrogateescape"
                        )
                    )

                char = source.peek(special)
                if char == QUOTE:
                    if high_surrogate is not None:
                        self._unpaired_surrogate(special)
                    return "".join(parts), special + 1
                if char != BACKSLASH:
                    raise self.error("Invalid control character at", special)

                escaped = source.peek(special + 1)
                if escaped is None:
                    raise self.error("Unterminated string starting at", pos)

                if escaped == LOWER_U:
                    digits = source.slice(special + 2, special + 6)
                    if not HEX4.fullmatch(digits):
                        raise self.error("Invalid \\uXXXX escape", special)
                    code = int(digits, 16)
                    index = special + 6
                    if 0xD800 <= code < 0xDC00:
                        if high_surrogate is not None:
                            self._unpaired_surrogate(special)
                        high_surrogate = code
                    elif 0xDC00 <= code < 0xE000:
                        if high_surrogate is None:
                            self._unpaired_surrogate(special)
                        else:
                            parts.append(
                                chr(
                                    (high_surrogate - 0xD800) * 0x400
                                    + (code - 0xDC00)
                                    + 0x10000
                                )
                            )
                            high_surrogate = None
                    else:
                        if high_surrogate is not None:
                            self._unpaired_surrogate(special)
                            high_surrogate = None
                        parts.append(chr(code))
                    continue

                if high_surrogate is not None:
                    self._unpaired_surrogate(special)
                    high_surrogate = None
                if escaped in ESCAPES:
                    parts.append(ESCAPES[escaped])
                    index = special + 2
                elif self.strict:
                    raise self.error("Invalid \\escape", special)
                else:
                    # Next run starts at the escaped byte itself
                    index = special + 1

    def _unpaired_surrogate(self, pos: Position) -> None:
        if self.strict:
            raise self.error("Unpaired surrogate in \\u escape", pos)

    def scan_number(self, pos: Position) -> tuple[Any, Position]:
        """
        Scans the longest run of ``+-0123456789.eE`` and parses it.

        The run must match the numeric grammar of the active dialect; it is
        never evaluated as an expression. Integers keep full precision,
        other numbers become floats and must be finite.
        """
        source = self.source
        with ProfileContext("scan_number"):
            match = source.search(NUMBER_END, pos)
            end = source.end if match is None else source.start + match.start()
            literal = source.slice(pos, end)

            grammar = self._number_grammar.fullmatch(literal)
            if grammar is None:
                raise self.error("Invalid number", pos)
            text = literal.decode("ascii")

            if grammar.group("frac") is None and grammar.group("exp") is None:
                return self._parse_int(text, pos), end

            if self.config.parse_float is not None:
                return self.config.parse_float(text), end
            value = float(text)
            if math.isinf(value):
                raise self.error("Number out of range", pos)
            return value, end

    def _parse_int(self, text: str, pos: Position) -> Any:
        if self.config.parse_int is not None:
            return self.config.parse_int(text)
        try:
            return int(text)
        except ValueError as e:
            raise self.error("Number too large", pos) from e

    def scan_constant(
        self, pos: Position
    ) -> tuple[Any, ElementKind, Position]:
        """Matches ``true``, ``false`` or ``null``, in that order."""
        with ProfileContext("scan_constant"):
            for literal, value, kind in CONSTANTS:
                if self.source.startswith(literal, pos):
                    return value, kind, pos + len(literal)
            raise self.error("Expecting value", pos)

    def scan_scalar(
        self, pos: Position
    ) -> tuple[Any, ElementKind, Position]:
        """Scans a string, number or constant at ``pos``."""
        char = self.source.peek(pos)
        if char is None:
            raise self.error("Expecting value", pos)
        if char == QUOTE:
            text, end = self.scan_string(pos)
            return text, ElementKind.STRING, end
        if char in NUMBER_START or (
            not self.strict and char in LENIENT_NUMBER_START
        ):
            number, end = self.scan_number(pos)
            return number, ElementKind.NUMBER, end
        return self.scan_constant(pos)

    def scan_key(self, pos: Position) -> tuple[str, Position]:
        """
        Scans an object key and its ``:`` separator.

        Returns the key and the offset of the member value. The lenient
        dialect also takes numbers and constants as keys, named by their
        source text.
        """
        char = self.source.peek(pos)
        if char == QUOTE:
            key, pos = self.scan_string(pos)
        elif self.strict or char in (LBRACE, LBRACKET, None):
            raise self.error(
                "Expecting property name enclosed in double quotes", pos
            )
        else:
            _, _, end = self.scan_scalar(pos)
            key = self.source.slice(pos, end).decode("ascii")
            pos = end

        pos = self.skip_whitespace(pos)
        if self.source.peek(pos) != COLON:
            raise self.error("Expecting ':' delimiter", pos)
        return key, self.skip_whitespace(pos + 1)

    def next_member(
        self, pos: Position, closer: int, first: bool, opened_at: Position
    ) -> tuple[Position, bool]:
        """
        Advances to the next member of an array or object.

        Returns ``(offset, True)`` past the closing bracket when the
        container ends, else ``(offset, False)`` at the next member. The
        lenient dialect allows one optional comma before any member; the
        strict one requires exactly one between members.
        """
        source = self.source
        name = _CONTAINER_NAMES[closer]
        pos = self.skip_whitespace(pos)
        char = source.peek(pos)
        if char is None:
            raise self.error(f"Unterminated {name} starting at", opened_at)
        if char == closer:
            return pos + 1, True

        if char == COMMA:
            if self.strict and first:
                raise self.error("Expecting value", pos)
            comma = pos
            pos = self.skip_whitespace(pos + 1)
            char = source.peek(pos)
            if char is None:
                raise self.error(f"Unterminated {name} starting at", opened_at)
            if char == closer:
                raise self.error(
                    f"Illegal trailing comma before end of {name}", comma
                )
        elif self.strict and not first:
            raise self.error("Expecting ',' delimiter", pos)
        return pos, False

    def expect_end(self, pos: Position) -> Position:
        """Rejects anything but whitespace after a complete document."""
        pos = self.skip_whitespace(pos)
        if not self.source.exhausted(pos):
            raise self.error("Extra data", pos)
        return pos
