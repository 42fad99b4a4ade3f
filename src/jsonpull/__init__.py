"""
JSON codec with offset-addressable decoding and streaming traversal.

Decodes from a whole document or from a loader that hands out chunks on
demand, starting at any byte offset; traverses documents element by element,
materializing only the parts a callback asks for; and encodes Python values
back to JSON text.
"""

from typing import IO
from typing import Any

from ._config import DEFAULT_CHUNK_SIZE
from ._config import EncodeConfig
from ._config import ParseConfig
from ._decoder import Decoder
from ._decoder import decode
from ._encoder import Encoder
from ._encoder import encode
from ._errors import EncodingError
from ._errors import JSONDecodeError
from ._errors import StructuralError
from ._profile import HotPathStats
from ._profile import clear_hot_path_stats
from ._profile import get_hot_path_stats
from ._source import InputSource
from ._traverse import TraversalResult
from ._traverse import extract
from ._traverse import traverse
from ._values import EMPTY
from ._values import MISSING
from ._values import NULL
from ._values import Action
from ._values import ElementKind
from ._values import EmptyObject
from ._values import JsonValue
from ._values import NullType
from ._values import Path
from ._values import Position

__version__ = "0.1.0"


def loads(s: str | bytes | bytearray, **kwargs: Any) -> JsonValue:
    """
    Decodes a complete JSON document.

    Unlike ``decode``, rejects a leading byte order mark and anything but
    whitespace after the value.
    """
    if not isinstance(s, str | bytes | bytearray):
        raise TypeError(
            f"the JSON object must be str or bytes, not {type(s).__name__}"
        )
    config = ParseConfig(**kwargs)
    return Decoder(InputSource.from_text(s), config).scan_document()


def load(fp: IO[Any], **kwargs: Any) -> JsonValue:
    """
    Decodes a complete JSON document from a file-like object.

    The file is read in ``chunk_size`` pieces as the scanner needs them.
    """
    config = ParseConfig(**kwargs)
    source = InputSource.from_file(fp, config.chunk_size)
    return Decoder(source, config).scan_document()


def dumps(obj: Any, **kwargs: Any) -> str:
    """Serializes ``obj`` to JSON text; same options as ``encode``."""
    return encode(obj, **kwargs)


def dump(obj: Any, fp: IO[str], **kwargs: Any) -> None:
    """Serializes ``obj`` to a text file."""
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")

    fp.write(encode(obj, **kwargs))


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "EMPTY",
    "MISSING",
    "NULL",
    "Action",
    "Decoder",
    "ElementKind",
    "EmptyObject",
    "EncodeConfig",
    "Encoder",
    "EncodingError",
    "HotPathStats",
    "InputSource",
    "JSONDecodeError",
    "JsonValue",
    "NullType",
    "ParseConfig",
    "Path",
    "Position",
    "StructuralError",
    "TraversalResult",
    "clear_hot_path_stats",
    "decode",
    "dump",
    "dumps",
    "encode",
    "extract",
    "get_hot_path_stats",
    "load",
    "loads",
    "traverse",
]
