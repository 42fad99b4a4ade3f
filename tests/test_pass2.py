"""
JSON_checker pass2 test.

Validates parsing of a deeply nested array structure.
"""

import jsonpull

# from https://json.org/JSON_checker/test/pass2.json
JSON = r"""
[[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]
"""


def test_parse() -> None:
    """
    Validates parsing and round-trip encoding for deeply nested arrays.
    """
    res = jsonpull.loads(JSON, strict=True)

    out = jsonpull.encode(res)
    assert out == JSON.strip()
    assert res == jsonpull.loads(out)


def test_traverse_depth() -> None:
    """
    Validates traversal reports the string at the bottom of the nesting.
    """
    found = jsonpull.extract(JSON, (0,) * 19)
    assert found == [((0,) * 19, "Not too deep")]
