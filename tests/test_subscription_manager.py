"""Tests for SubscriptionManager: relay decisions, error handling and lifecycle."""

import sys
import unittest
from pathlib import Path

# Allow importing homerelay when running from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from homerelay.errors import SubscriptionStateError
from homerelay.models import ChangeEvent
from homerelay.relay.subscription import SubscriptionManager, SubscriptionState
from homerelay.store.memory_mock import MemoryStore

PATH = "/linebot/receive"


class TestRelayDecisions(unittest.TestCase):
    """Which change events reach the notifier."""

    def setUp(self):
        self.store = MemoryStore()
        self.sent: list[str] = []
        self.manager = SubscriptionManager(self.store, self.sent.append)
        self.manager.start(PATH)

    def tearDown(self):
        self.manager.stop()

    def test_message_is_relayed_exactly_once(self):
        self.store.write(PATH, {"message": "帰るねー", "timestamp": "1530000000"})
        self.assertEqual(self.sent, ["帰るねー"])

    def test_record_without_message_is_ignored(self):
        self.store.write(PATH, {"other_field": "x"})
        self.assertEqual(self.sent, [])

    def test_empty_message_is_ignored(self):
        self.store.write(PATH, {"message": ""})
        self.assertEqual(self.sent, [])

    def test_null_and_non_string_message_are_ignored(self):
        self.store.write(PATH, {"message": None, "timestamp": "1"})
        self.store.write(PATH, {"message": 42})
        self.assertEqual(self.sent, [])

    def test_identical_messages_are_sent_twice(self):
        self.store.set_message(PATH, "腹ペコ")
        self.store.set_message(PATH, "腹ペコ")
        self.assertEqual(self.sent, ["腹ペコ", "腹ペコ"])

    def test_other_field_update_resends_current_message(self):
        """Every write delivers the whole record, so the current message goes out again."""
        self.store.write(PATH, {"message": "帰りまっせ", "timestamp": "1"})
        self.store.update(PATH, {"timestamp": "2"})
        self.assertEqual(self.sent, ["帰りまっせ", "帰りまっせ"])

    def test_read_error_never_dispatches(self):
        self.store.write(PATH, {"message": "hello"})
        self.store.fail(PATH, "permission_denied")
        self.assertEqual(self.sent, ["hello"])
        self.assertEqual(self.manager.stats()["errors"], 1)

    def test_stats_count_events(self):
        self.store.write(PATH, {"message": "a"})
        self.store.write(PATH, {"other": "b"})
        stats = self.manager.stats()
        # initial empty snapshot on subscribe + two writes
        self.assertEqual(stats["events_seen"], 3)
        self.assertEqual(stats["relayed"], 1)
        self.assertEqual(stats["skipped"], 2)


class TestDispatchFailure(unittest.TestCase):
    def test_dispatch_exception_does_not_break_subscription(self):
        store = MemoryStore()
        sent = []

        def flaky(text):
            if text == "boom":
                raise RuntimeError("endpoint down")
            sent.append(text)

        manager = SubscriptionManager(store, flaky)
        manager.start(PATH)
        store.set_message(PATH, "boom")
        store.set_message(PATH, "next")
        self.assertEqual(sent, ["next"])
        self.assertIs(manager.state, SubscriptionState.SUBSCRIBED)
        manager.stop()

    def test_handle_change_return_value(self):
        manager = SubscriptionManager(MemoryStore(), lambda text: None)
        self.assertTrue(manager.handle_change(ChangeEvent(path=PATH, fields={"message": "x"})))
        self.assertFalse(manager.handle_change(ChangeEvent(path=PATH, fields={})))


class TestLifecycle(unittest.TestCase):
    def test_states(self):
        store = MemoryStore()
        manager = SubscriptionManager(store, lambda text: None)
        self.assertIs(manager.state, SubscriptionState.UNSTARTED)
        manager.start(PATH)
        self.assertIs(manager.state, SubscriptionState.SUBSCRIBED)
        self.assertEqual(store.listener_count(PATH), 1)
        manager.stop()
        self.assertIs(manager.state, SubscriptionState.STOPPED)
        self.assertEqual(store.listener_count(PATH), 0)

    def test_double_start_rejected(self):
        store = MemoryStore()
        manager = SubscriptionManager(store, lambda text: None)
        manager.start(PATH)
        with self.assertRaises(SubscriptionStateError):
            manager.start(PATH)
        self.assertEqual(store.listener_count(PATH), 1)
        manager.stop()

    def test_start_after_stop_rejected(self):
        manager = SubscriptionManager(MemoryStore(), lambda text: None)
        manager.start(PATH)
        manager.stop()
        with self.assertRaises(SubscriptionStateError):
            manager.start(PATH)

    def test_stop_is_idempotent(self):
        manager = SubscriptionManager(MemoryStore(), lambda text: None)
        manager.stop()
        manager.stop()
        self.assertIs(manager.state, SubscriptionState.STOPPED)

    def test_no_events_after_stop(self):
        store = MemoryStore()
        sent = []
        manager = SubscriptionManager(store, sent.append)
        manager.start(PATH)
        manager.stop()
        store.set_message(PATH, "late")
        self.assertEqual(sent, [])

    def test_context_manager_releases_subscription(self):
        store = MemoryStore()
        sent = []
        with SubscriptionManager(store, sent.append).start(PATH) as manager:
            store.set_message(PATH, "inside")
        self.assertIs(manager.state, SubscriptionState.STOPPED)
        self.assertEqual(store.listener_count(PATH), 0)
        self.assertEqual(sent, ["inside"])

    def test_custom_callbacks(self):
        store = MemoryStore()
        seen, errors = [], []
        manager = SubscriptionManager(store, lambda text: None)
        manager.start(PATH, on_change=seen.append, on_error=errors.append)
        store.set_message(PATH, "x")
        store.fail(PATH, "auth_revoked")
        self.assertEqual(seen[-1].message, "x")
        self.assertEqual(errors[0].code, "auth_revoked")
        manager.stop()

    def test_listen_failure_leaves_manager_unstarted(self):
        class BrokenStore:
            def listen(self, path, on_change, on_error):
                raise ConnectionError("no route")

        manager = SubscriptionManager(BrokenStore(), lambda text: None)
        with self.assertRaises(ConnectionError):
            manager.start(PATH)
        self.assertIs(manager.state, SubscriptionState.UNSTARTED)


if __name__ == "__main__":
    unittest.main()
