"""
Test data generators for the benchmarks.

Creates JSON documents of different shapes:
- A small record and a long stream of records
- Deeply nested objects
- String-heavy content with escape sequences
- A lenient document with comments and optional commas

Every generator seeds its own random source, so a data type always yields
the same document.
"""

import json
import random
import string
from typing import Any

_ESCAPE_PROBABILITY = 0.3
_ESCAPES = ['\\"', "\\\\", "\\/", "\\b", "\\f", "\\n", "\\r", "\\t"]

DATA_TYPES = [
    "small_object",
    "record_stream",
    "nested_structure",
    "string_heavy",
]


def generate_test_data(data_type: str) -> str:
    """Generates JSON text for the given data type."""
    generators = {
        "small_object": _generate_small_object,
        "record_stream": _generate_record_stream,
        "nested_structure": _generate_nested_structure,
        "string_heavy": _generate_string_heavy,
        "lenient_document": _generate_lenient_document,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type](random.Random(data_type))


def generate_test_value(data_type: str) -> Any:
    """Generates the Python value behind ``generate_test_data``."""
    return json.loads(generate_test_data(data_type))


def _generate_small_object(rng: random.Random) -> str:
    """Generates a single record of under 1KB."""
    return json.dumps(_record(rng, 0))


def _generate_record_stream(rng: random.Random) -> str:
    """Generates an envelope holding a few thousand records."""
    data = {
        "source": "sensor-gateway",
        "count": 2000,
        "records": [_record(rng, i) for i in range(2000)],
        "checksum": _random_string(rng, 32),
    }
    return json.dumps(data)


def _generate_nested_structure(rng: random.Random) -> str:
    """Generates a tree eight levels deep with fan-out three."""

    def node(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"leaf": _random_string(rng, 10)}

        return {
            "depth": depth,
            "label": _random_string(rng, 15),
            "children": [node(depth - 1) for _ in range(3)],
        }

    return json.dumps(node(8))


def _generate_string_heavy(rng: random.Random) -> str:
    """Generates strings dense with escape sequences and \\u escapes."""

    def escaped(length: int) -> str:
        chars = []
        for _ in range(length):
            if rng.random() < _ESCAPE_PROBABILITY:
                chars.append(rng.choice(_ESCAPES))
            else:
                chars.append(
                    rng.choice(string.ascii_letters + string.digits + " ")
                )
        return "".join(chars)

    strings = ",".join(f'"{escaped(50)}"' for _ in range(200))
    unicode = ",".join(
        f'"\\u{rng.randint(0x00A0, 0x2FFF):04x}\\ud83d\\ude00"'
        for _ in range(100)
    )
    return f'{{"strings": [{strings}], "unicode": [{unicode}]}}'


def _generate_lenient_document(rng: random.Random) -> str:
    """Generates a record stream with comments and no commas."""
    lines = ["/* exported records */", "["]
    for i in range(500):
        lines.append(
            f'  {{"id": {i} "value": {rng.uniform(-1, 1):.4f}'
            f' "tag": "{_random_string(rng, 6)}"}} /* #{i} */'
        )
    lines.append("]")
    return "\n".join(lines)


def _record(rng: random.Random, index: int) -> dict[str, Any]:
    return {
        "id": index,
        "name": _random_string(rng, 12),
        "active": rng.choice([True, False]),
        "reading": round(rng.uniform(-100.0, 100.0), 3),
        "tags": [_random_string(rng, 5) for _ in range(rng.randint(0, 4))],
        "location": None if index % 7 else {"lat": 51.5, "lon": -0.12},
    }


def _random_string(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(string.ascii_letters, k=length))
