"""
Memory usage benchmarks.

Measures peak memory of full decoding across libraries, and compares it with
a jsonpull traversal that materializes nothing or a single field.
"""

import json
import tracemalloc
from io import BytesIO
from typing import Any

import orjson
import pytest
import ujson  # type: ignore[import-untyped]

import jsonpull
from benchmarks.data_generators import DATA_TYPES
from benchmarks.data_generators import generate_test_data


def measure_memory_usage(func: Any, *args: Any) -> tuple[Any, int]:
    """
    Measures peak memory usage during function execution.

    Returns:
        Tuple of (function_result, peak_memory_bytes)
    """
    tracemalloc.start()
    try:
        result = func(*args)
        current, peak = tracemalloc.get_traced_memory()
        return result, peak
    finally:
        tracemalloc.stop()


def traverse_stream(data: bytes) -> jsonpull.TraversalResult:
    """Traverses a document read from a file in small chunks."""
    return jsonpull.traverse(
        BytesIO(data), lambda *args: None, chunk_size=4096
    )


def decode_stream(data: bytes) -> Any:
    """Decodes a document read from a file in small chunks."""
    return jsonpull.load(BytesIO(data), chunk_size=4096)


class TestMemoryUsage:
    """Memory usage benchmarks for decoding and traversal."""

    @pytest.mark.parametrize("data_type", DATA_TYPES)
    @pytest.mark.parametrize(
        "library,parse_func",
        [
            ("stdlib_json", json.loads),
            ("orjson", orjson.loads),
            ("ujson", ujson.loads),
            ("jsonpull", jsonpull.loads),
        ],
    )
    def test_loads_memory(
        self, data_type: str, library: str, parse_func: Any
    ) -> None:
        """Measures peak memory of decoding a whole document."""
        test_data: Any = generate_test_data(data_type)
        if library == "orjson":
            test_data = test_data.encode("utf-8")
        result, peak_memory = measure_memory_usage(parse_func, test_data)

        print(f"\n{library} {data_type}: {peak_memory:,} bytes")
        assert result is not None

    @pytest.mark.parametrize("data_type", DATA_TYPES)
    def test_traverse_memory(self, data_type: str) -> None:
        """Measures peak memory of a traversal that builds nothing."""
        test_data = generate_test_data(data_type).encode("utf-8")
        result, peak_memory = measure_memory_usage(traverse_stream, test_data)

        print(f"\njsonpull traverse {data_type}: {peak_memory:,} bytes")
        assert result.next_pos == len(test_data)

    def test_traverse_vs_decode_summary(self) -> None:
        """Generates a decode versus traverse memory comparison."""
        results = {}

        for data_type in DATA_TYPES:
            test_data = generate_test_data(data_type).encode("utf-8")

            _, decode_memory = measure_memory_usage(decode_stream, test_data)
            _, traverse_memory = measure_memory_usage(
                traverse_stream, test_data
            )
            _, extract_memory = measure_memory_usage(
                jsonpull.extract, BytesIO(test_data), ("count",)
            )

            results[data_type] = {
                "document": len(test_data),
                "decode": decode_memory,
                "traverse": traverse_memory,
                "extract": extract_memory,
            }

        print("\n" + "=" * 72)
        print("PEAK MEMORY: DECODE VS TRAVERSE (bytes)")
        print("=" * 72)
        print(
            f"{'Data Type':<18} {'document':>12} {'decode':>12}"
            f" {'traverse':>12} {'extract':>12}"
        )
        print("-" * 72)

        for data_type, measurements in results.items():
            print(
                f"{data_type:<18} {measurements['document']:>12,}"
                f" {measurements['decode']:>12,}"
                f" {measurements['traverse']:>12,}"
                f" {measurements['extract']:>12,}"
            )

        print("=" * 72)

        assert len(results) == len(DATA_TYPES)
