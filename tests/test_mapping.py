"""Tests for folding streamed put/patch events into the mirrored record."""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from homerelay.models import ChangeEvent
from homerelay.store.mapping import apply_event, build_record, split_path


class TestApplyEvent(unittest.TestCase):
    def test_put_at_root_replaces_record(self):
        record = apply_event({"message": "old", "x": 1}, "put", "/", {"message": "new"})
        self.assertEqual(record, {"message": "new"})

    def test_put_at_child_sets_field(self):
        record = apply_event({"message": "old", "timestamp": "1"}, "put", "/message", "new")
        self.assertEqual(record, {"message": "new", "timestamp": "1"})

    def test_put_null_deletes_field(self):
        record = apply_event({"message": "old", "timestamp": "1"}, "put", "/message", None)
        self.assertEqual(record, {"timestamp": "1"})

    def test_put_null_at_root_clears(self):
        self.assertIsNone(apply_event({"message": "old"}, "put", "/", None))

    def test_patch_merges_children(self):
        record = apply_event({"message": "old", "timestamp": "1"}, "patch", "/", {"message": "new", "extra": True})
        self.assertEqual(record, {"message": "new", "timestamp": "1", "extra": True})

    def test_patch_with_nested_keys(self):
        record = apply_event(None, "patch", "/meta", {"a/b": 1})
        self.assertEqual(record, {"meta": {"a": {"b": 1}}})

    def test_initial_null_then_child_put(self):
        record = apply_event(None, "put", "/", None)
        record = apply_event(record, "put", "/message", "hi")
        self.assertEqual(record, {"message": "hi"})

    def test_scalar_root_replaced_by_child_write(self):
        record = apply_event("plain", "put", "/message", "hi")
        self.assertEqual(record, {"message": "hi"})

    def test_unknown_event_type_is_noop(self):
        record = {"message": "keep"}
        self.assertEqual(apply_event(record, "keep-alive", "/", None), {"message": "keep"})

    def test_put_copies_data(self):
        data = {"message": "a"}
        record = apply_event(None, "put", "/", data)
        data["message"] = "b"
        self.assertEqual(record["message"], "a")


class TestHelpers(unittest.TestCase):
    def test_split_path(self):
        self.assertEqual(split_path("/linebot/receive/"), ["linebot", "receive"])
        self.assertEqual(split_path("/"), [])
        self.assertEqual(split_path(""), [])

    def test_build_record(self):
        self.assertEqual(
            build_record("ただいま帰りました", now=1530000000.7),
            {"message": "ただいま帰りました", "timestamp": "1530000000"},
        )

    def test_change_event_from_non_object_record(self):
        event = ChangeEvent.from_record("/linebot/receive", "just a string")
        self.assertEqual(event.fields, {})
        self.assertIsNone(event.message)

    def test_change_event_custom_field(self):
        event = ChangeEvent.from_record("/p", {"text": "hello"}, message_field="text")
        self.assertEqual(event.message, "hello")


if __name__ == "__main__":
    unittest.main()
