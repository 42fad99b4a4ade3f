"""
Traversal engine: reports elements to a callback instead of building them.

Scalars are reported once, fully decoded. A container is visited in two
phases. The announcement carries ``MISSING`` as its value and no end offset.
If the callback answers with a truthy result (``True`` or
``Action.MATERIALIZE``) the container is decoded whole and reported a second
time with its value and end offset; otherwise the engine steps inside and
reports the children, extending the path by key or 0-based index.
``Action.SKIP`` scans past a container without reporting or building it.
Without materialization, memory stays proportional to nesting depth.

Returning ``Action.STOP`` from any callback ends the traversal without an
exception.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ._config import ParseConfig
from ._decoder import Decoder
from ._decoder import prepare_source
from ._scanner import LBRACE
from ._scanner import LBRACKET
from ._scanner import RBRACE
from ._scanner import RBRACKET
from ._source import InputSource
from ._values import MISSING
from ._values import Action
from ._values import ElementKind
from ._values import JsonValue
from ._values import Path
from ._values import PathSegment
from ._values import Position

type Callback = Callable[
    [Path, ElementKind, Any, Position, Position | None], Any
]

WILDCARD = "*"


@dataclass(frozen=True)
class TraversalResult:
    """
    Outcome of a traversal.

    ``next_pos`` is the offset just past the root element, or where
    scanning halted when a callback stopped it.
    """

    next_pos: Position
    stopped: bool = False


class Traverser(Decoder):
    """
    Walks one element tree, keeping the current path as an explicit stack.

    Materialization reuses the decoder's scans on the same source, so a
    materialized value is exactly what ``decode`` returns at that offset.
    """

    def __init__(
        self, source: InputSource, config: ParseConfig, callback: Callback
    ) -> None:
        super().__init__(source, config)
        self.callback = callback
        self.path: list[PathSegment] = []
        self.stopped = False

    def _emit(
        self,
        kind: ElementKind,
        value: Any,
        pos: Position,
        pos_last: Position | None,
    ) -> Action:
        outcome = self.callback(tuple(self.path), kind, value, pos, pos_last)
        if outcome is Action.STOP:
            self.stopped = True
            return Action.STOP
        if outcome is Action.SKIP:
            return Action.SKIP
        if outcome is Action.CONTINUE or not outcome:
            return Action.CONTINUE
        return Action.MATERIALIZE

    def visit(self, pos: Position) -> Position:
        """Reports the element at ``pos`` and everything below it."""
        pos = self.skip_whitespace(pos)
        char = self.source.peek(pos)
        if char is None:
            raise self.error("Expecting value", pos)

        if char != LBRACE and char != LBRACKET:
            value, kind, end = self.scan_scalar(pos)
            self._emit(kind, value, pos, end - 1)
            return end

        kind = ElementKind.OBJECT if char == LBRACE else ElementKind.ARRAY
        action = self._emit(kind, MISSING, pos, None)
        if action is Action.STOP:
            return pos
        if action is Action.MATERIALIZE:
            value, end = self.scan_value(pos)
            self._emit(kind, value, pos, end - 1)
            return end
        if action is Action.SKIP:
            return self.skip_value(pos)
        if kind is ElementKind.OBJECT:
            return self._walk_object(pos)
        return self._walk_array(pos)

    def _walk_object(self, pos: Position) -> Position:
        opened_at = pos
        first = True
        pos += 1
        while True:
            pos, done = self.next_member(pos, RBRACE, first, opened_at)
            if done:
                return pos
            key, pos = self.scan_key(pos)
            self.path.append(key)
            pos = self.visit(pos)
            self.path.pop()
            if self.stopped:
                return pos
            first = False

    def _walk_array(self, pos: Position) -> Position:
        opened_at = pos
        index = 0
        pos += 1
        while True:
            pos, done = self.next_member(pos, RBRACKET, index == 0, opened_at)
            if done:
                return pos
            self.path.append(index)
            pos = self.visit(pos)
            self.path.pop()
            if self.stopped:
                return pos
            index += 1


def traverse(
    source: Any,
    callback: Callback,
    pos: Position = 0,
    *,
    offset: Position = 0,
    **kwargs: Any,
) -> TraversalResult:
    """
    Reports the element at byte offset ``pos`` and its descendants.

    ``callback(path, kind, value, pos, pos_last)`` receives the path from
    the traversal root, the ``ElementKind``, the value (``MISSING`` on a
    container announcement), and the offsets of the element's first and
    last bytes (``pos_last`` is None on an announcement). Every reported
    ``pos`` is a valid start offset for ``decode`` on the same input.
    """
    config = ParseConfig(**kwargs)
    opened = prepare_source(source, pos, offset, config)
    traverser = Traverser(opened, config, callback)
    end = traverser.visit(pos)
    return TraversalResult(end, traverser.stopped)


def _matches(path: Path, prefix: Path) -> bool:
    if len(path) != len(prefix):
        return False
    return all(
        want == WILDCARD or want == got for got, want in zip(path, prefix)
    )


def _is_ancestor(path: Path, prefix: Path) -> bool:
    if len(path) >= len(prefix):
        return False
    return _matches(path, prefix[: len(path)])


def extract(
    source: Any,
    prefix: Path,
    pos: Position = 0,
    *,
    limit: int | None = None,
    offset: Position = 0,
    **kwargs: Any,
) -> list[tuple[Path, JsonValue]]:
    """
    Materializes only the elements found at ``prefix``.

    A ``"*"`` segment in ``prefix`` matches any key or index. Subtrees that
    cannot contain a match are skipped without being reported further, and
    scanning stops once ``limit`` elements were collected.
    """
    prefix = tuple(prefix)
    found: list[tuple[Path, JsonValue]] = []

    def collect(
        path: Path,
        kind: ElementKind,
        value: Any,
        pos: Position,
        pos_last: Position | None,
    ) -> Any:
        if _matches(path, prefix):
            if value is MISSING:
                return Action.MATERIALIZE
            found.append((path, value))
            if limit is not None and len(found) >= limit:
                return Action.STOP
            return Action.CONTINUE
        if value is MISSING and not _is_ancestor(path, prefix):
            return Action.SKIP
        return Action.CONTINUE

    traverse(source, collect, pos, offset=offset, **kwargs)
    return found
