import json
import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from runtime import JsonStateStore


class JsonStateStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(temp_dir.cleanup)
        self.path = Path(temp_dir.name) / "nested" / "state.json"
        self.store = JsonStateStore(self.path, logger=logging.getLogger("test"))

    def test_missing_file_reads_as_empty(self) -> None:
        self.assertIsNone(self.store.get("anything"))
        self.assertEqual(3, self.store.get("anything", 3))

    def test_update_creates_parent_and_keeps_other_keys(self) -> None:
        self.assertTrue(self.store.update("a", 1))
        self.assertTrue(self.store.update("b", {"nested": True}))

        data = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual({"a": 1, "b": {"nested": True}}, data)
        self.assertFalse(self.path.with_suffix(".tmp").exists())

    def test_corrupt_file_reads_as_empty_with_warning(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{broken", encoding="utf-8")

        with self.assertLogs("test", level="WARNING"):
            self.assertIsNone(self.store.get("a"))

    def test_non_object_file_reads_as_empty(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("[1, 2]", encoding="utf-8")

        with self.assertLogs("test", level="WARNING"):
            self.assertIsNone(self.store.get("a"))

    def test_write_failure_is_logged_and_reported(self) -> None:
        with patch("runtime.state_store.os.replace", side_effect=OSError("disk full")):
            with self.assertLogs("test", level="ERROR"):
                self.assertFalse(self.store.update("a", 1))

        self.assertFalse(self.path.exists())
        self.assertFalse(self.path.with_suffix(".tmp").exists())


if __name__ == "__main__":
    unittest.main()
