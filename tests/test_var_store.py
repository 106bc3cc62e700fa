"""Tests for the variable store."""

import threading
import unittest

from nut_client.core.var_store import VarStore


class TestVarStore(unittest.TestCase):

    def setUp(self):
        self.store = VarStore()

    def test_empty(self):
        self.assertEqual(len(self.store), 0)
        self.assertIsNone(self.store.get("ups.load"))

    def test_set_and_get(self):
        self.store.set("ups.load", "24")
        self.assertEqual(self.store.get("ups.load"), "24")
        self.assertIn("ups.load", self.store)

    def test_overwrite(self):
        self.store.set("ups.load", "24")
        self.store.set("ups.load", "30")
        self.assertEqual(self.store.get("ups.load"), "30")
        self.assertEqual(len(self.store), 1)

    def test_dotted_names_are_plain_keys(self):
        self.store.set("battery.charge", "100")
        self.store.set("battery", "main")
        self.assertEqual(self.store.snapshot(),
                         {"battery.charge": "100", "battery": "main"})

    def test_snapshot_is_a_copy(self):
        self.store.set("a", "1")
        snap = self.store.snapshot()
        snap["a"] = "changed"
        self.assertEqual(self.store.get("a"), "1")

    def test_clear(self):
        self.store.set("a", "1")
        self.store.clear()
        self.assertEqual(len(self.store), 0)
        self.assertNotIn("a", self.store)

    def test_default(self):
        self.assertEqual(self.store.get("missing", "n/a"), "n/a")

    def test_concurrent_readers(self):
        """Readers never fail while a writer is filling the store."""
        errors = []

        def writer():
            for i in range(500):
                self.store.set(f"var.{i}", str(i))

        def reader():
            try:
                for _ in range(500):
                    snap = self.store.snapshot()
                    for name, value in snap.items():
                        self.assertEqual(name, f"var.{value}")
            except AssertionError as e:
                errors.append(e)

        threads = [threading.Thread(target=writer)] + \
            [threading.Thread(target=reader) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(errors, [])
        self.assertEqual(len(self.store), 500)


if __name__ == "__main__":
    unittest.main()
