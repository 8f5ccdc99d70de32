from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from sessionizer.projects import history
from sessionizer.projects.history import VisitedDir


class HistoryTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmp = Path(tmp.name)
        self.history_path = self.tmp / "data" / "directory_history.json"
        patcher = mock.patch("sessionizer.projects.history.HISTORY_PATH", self.history_path)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _seed(self, *entries: VisitedDir) -> None:
        history.save_history(list(entries))

    def test_missing_or_malformed_file_reads_empty(self) -> None:
        self.assertEqual(history.load_history(), [])

        self.history_path.parent.mkdir(parents=True)
        self.history_path.write_text("[]", encoding="utf-8")
        self.assertEqual(history.load_history(), [])

    def test_malformed_entries_are_dropped_or_coerced(self) -> None:
        self.history_path.parent.mkdir(parents=True)
        self.history_path.write_text(
            json.dumps(
                {
                    "visited_dirs": [
                        {"dir": "/w/api", "last_accessed_timestamp": 5, "times": 2},
                        {"dir": "", "times": 1},
                        "nonsense",
                        {"dir": "/w/web", "times": "many"},
                    ]
                }
            ),
            encoding="utf-8",
        )

        self.assertEqual(
            history.load_history(),
            [
                VisitedDir(dir="/w/api", last_accessed_timestamp=5, times=2),
                VisitedDir(dir="/w/web", last_accessed_timestamp=0, times=0),
            ],
        )

    def test_record_visit_adds_then_bumps_entry(self) -> None:
        (self.tmp / "proj").mkdir()

        self.assertTrue(history.record_visit("proj", cwd=self.tmp, now=100))
        self.assertTrue(history.record_visit("proj", cwd=self.tmp, now=200))

        full = str((self.tmp / "proj").absolute())
        self.assertEqual(history.load_history(), [VisitedDir(dir=full, last_accessed_timestamp=200, times=2)])
        saved = json.loads(self.history_path.read_text(encoding="utf-8"))
        self.assertEqual(saved["visited_dirs"][0]["times"], 2)

    def test_record_visit_ignores_missing_directory(self) -> None:
        self.assertFalse(history.record_visit("nope", cwd=self.tmp, now=1))
        self.assertFalse(self.history_path.exists())

    def test_history_keeps_most_visited_entries(self) -> None:
        entries = [
            VisitedDir(dir=f"/w/dir-{idx}", last_accessed_timestamp=idx, times=idx)
            for idx in range(history.MAX_HISTORY_ENTRIES)
        ]
        self._seed(*entries)
        (self.tmp / "fresh").mkdir()

        history.record_visit("fresh", cwd=self.tmp, now=1)

        kept = history.load_history()
        self.assertEqual(len(kept), history.MAX_HISTORY_ENTRIES)
        self.assertNotIn("/w/dir-0", {entry.dir for entry in kept})

    def test_expansion_prefers_last_component_match(self) -> None:
        self._seed(
            VisitedDir(dir="/c/CloudRepos/Hehe", last_accessed_timestamp=1, times=10),
            VisitedDir(dir="/c/CloudRepos", last_accessed_timestamp=1, times=1),
        )

        self.assertEqual(history.find_expanded_folder("Cloud"), "/c/CloudRepos")
        self.assertEqual(history.find_expanded_folder("Repos/He"), "/c/CloudRepos/Hehe")
        self.assertIsNone(history.find_expanded_folder("missing"))

    def test_expansion_prefers_most_visited(self) -> None:
        self._seed(
            VisitedDir(dir="/a/api", last_accessed_timestamp=1, times=1),
            VisitedDir(dir="/b/api", last_accessed_timestamp=1, times=5),
        )

        self.assertEqual(history.find_expanded_folder("api"), "/b/api")

    def test_existing_relative_path_is_not_expanded(self) -> None:
        (self.tmp / "api").mkdir()
        self._seed(VisitedDir(dir="/elsewhere/api", last_accessed_timestamp=1, times=3))

        self.assertEqual(history.expand_directory("api", cwd=self.tmp), "api")
        self.assertEqual(history.expand_directory("api", cwd=self.tmp / "api"), "/elsewhere/api")
        self.assertEqual(history.expand_directory("zzz", cwd=self.tmp), "zzz")


if __name__ == "__main__":
    unittest.main()
