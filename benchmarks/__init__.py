"""
Benchmark suite for jsonpull.

Compares jsonpull against standard JSON libraries including:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures decode and encode speed, and the memory a traversal needs compared
to materializing the whole document.
"""
