"""Path codec tests: encoding, decoding, resolution and the round trip."""

from __future__ import annotations

import random
import unittest

from lazyjson.document import (
    NOT_FOUND,
    ROOT,
    ancestor_chain,
    build_flat_index,
    decode_path,
    encode_path,
    last_segment_label,
    parent_path,
    resolve_path,
)


def _random_document(rng: random.Random, depth: int = 0) -> object:
    if depth >= 4 or rng.random() < 0.3:
        return rng.choice([None, True, False, 0, 1.5, -7, "text", "", "https://x.com/a.png"])
    if rng.random() < 0.5:
        return [_random_document(rng, depth + 1) for _ in range(rng.randint(0, 4))]
    keys = rng.sample(["alpha", "beta", "gamma", "delta", "key_1", "x-y", "0", "", "$"], rng.randint(0, 4))
    return {key: _random_document(rng, depth + 1) for key in keys}


class PathCodecTests(unittest.TestCase):
    def test_encode_root_children_omit_leading_dot(self) -> None:
        self.assertEqual(encode_path(ROOT, "a", False), "a")
        self.assertEqual(encode_path(ROOT, 3, True), "[3]")
        self.assertEqual(encode_path("a", "b", False), "a.b")
        self.assertEqual(encode_path("a.c", 0, True), "a.c[0]")

    def test_decode_splits_keys_and_indices(self) -> None:
        self.assertEqual(decode_path("a.c[0]"), ["a", "c", 0])
        self.assertEqual(decode_path("[2].name"), [2, "name"])
        self.assertEqual(decode_path(""), [])
        self.assertEqual(decode_path(None), [])

    def test_decode_accepts_root_marker(self) -> None:
        self.assertEqual(decode_path("$"), [])
        self.assertEqual(decode_path("$.users[1]"), ["users", 1])
        self.assertEqual(decode_path("$[0]"), [0])

    def test_resolve_returns_value_or_not_found(self) -> None:
        document = {"a": {"b": 1, "c": [True, None]}}
        self.assertIs(resolve_path(document, "a.c[0]"), True)
        self.assertIsNone(resolve_path(document, "a.c[1]"))
        self.assertIs(resolve_path(document, "a.c[2]"), NOT_FOUND)
        self.assertIs(resolve_path(document, "a.b.z"), NOT_FOUND)
        self.assertIs(resolve_path(document, "missing"), NOT_FOUND)
        self.assertIs(resolve_path(document, ""), document)

    def test_not_found_is_distinct_from_null(self) -> None:
        self.assertIsNot(NOT_FOUND, None)
        self.assertFalse(NOT_FOUND)
        self.assertEqual(repr(NOT_FOUND), "NOT_FOUND")

    def test_numeric_looking_mapping_key_resolves(self) -> None:
        document = {"0": "zero"}
        path = encode_path(ROOT, "0", False)
        self.assertEqual(resolve_path(document, path), "zero")

    def test_empty_and_dollar_keys_are_quoted(self) -> None:
        document = {"a": {"": 1}, "$": {"b": 2}, "": [3]}
        self.assertEqual(encode_path("a", "", False), 'a[""]')
        self.assertEqual(encode_path(ROOT, "$", False), '["$"]')
        self.assertEqual(encode_path(ROOT, "", False), '[""]')
        self.assertEqual(decode_path('["$"].b'), ["$", "b"])
        self.assertEqual(resolve_path(document, 'a[""]'), 1)
        self.assertEqual(resolve_path(document, '["$"]'), {"b": 2})
        self.assertEqual(resolve_path(document, '["$"].b'), 2)
        self.assertEqual(resolve_path(document, '[""][0]'), 3)
        self.assertEqual(parent_path('["$"].b'), '["$"]')
        self.assertIs(resolve_path(document, "$"), document)

    def test_parent_and_ancestors(self) -> None:
        self.assertEqual(parent_path("a.c[0]"), "a.c")
        self.assertEqual(parent_path("a"), ROOT)
        self.assertEqual(parent_path(ROOT), ROOT)
        self.assertEqual(ancestor_chain("a.c[0]"), [ROOT, "a", "a.c"])
        self.assertEqual(ancestor_chain(ROOT), [])

    def test_last_segment_label(self) -> None:
        self.assertEqual(last_segment_label("a.c[0]"), "[0]")
        self.assertEqual(last_segment_label("a.c"), "c")
        self.assertEqual(last_segment_label(ROOT), "$")

    def test_every_reachable_node_resolves_to_its_value(self) -> None:
        rng = random.Random(20240517)
        for _ in range(200):
            document = _random_document(rng)
            for descriptor in build_flat_index(document):
                self.assertIs(resolve_path(document, descriptor.path), descriptor.value, descriptor.path)


if __name__ == "__main__":
    unittest.main()
