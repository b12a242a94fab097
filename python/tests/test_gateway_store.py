from __future__ import annotations

import os
import tempfile
import unittest

from services.gateway.app.store import AnalysisStore

ROOM = {"dimensions": {"width": 5.0, "length": 6.0, "height": 2.8}}


class AnalysisStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.NamedTemporaryFile(delete=False)
        self._tmp.close()
        self.store = AnalysisStore(self._tmp.name)

    def tearDown(self) -> None:
        try:
            os.remove(self._tmp.name)
        except FileNotFoundError:
            pass

    def test_create_and_fetch(self) -> None:
        record = self.store.create_run(ROOM)
        fetched = self.store.get_run(record.id)
        self.assertIsNotNone(fetched)
        assert fetched is not None
        self.assertEqual(fetched.status, "queued")
        self.assertEqual(fetched.progress, 0.0)
        self.assertAlmostEqual(fetched.room["dimensions"]["width"], 5.0)

    def test_unknown_run_is_none(self) -> None:
        self.assertIsNone(self.store.get_run("missing"))

    def test_complete_run_updates_status(self) -> None:
        record = self.store.create_run(ROOM)
        self.store.mark_running(record.id)
        result = {"best_configuration": "stereoWithSub"}
        self.store.complete_run(record.id, result)
        fetched = self.store.get_run(record.id)
        assert fetched is not None
        self.assertEqual(fetched.status, "succeeded")
        self.assertEqual(fetched.result, result)

    def test_mark_failed_sets_error(self) -> None:
        record = self.store.create_run(ROOM)
        self.store.mark_failed(record.id, "Room surfaces provide no absorption")
        fetched = self.store.get_run(record.id)
        assert fetched is not None
        self.assertEqual(fetched.status, "failed")
        self.assertEqual(fetched.error, "Room surfaces provide no absorption")

    def test_progress_never_moves_backwards(self) -> None:
        record = self.store.create_run(ROOM)
        self.store.update_progress(record.id, 0.6, "Identifying acoustic issues...")
        self.store.update_progress(record.id, 0.3, "late update")
        fetched = self.store.get_run(record.id)
        assert fetched is not None
        self.assertEqual(fetched.progress, 0.6)
        self.assertEqual(fetched.progress_label, "late update")

    def test_updates_to_unknown_run_raise(self) -> None:
        with self.assertRaises(KeyError):
            self.store.update_progress("missing", 0.5, "halfway")
        with self.assertRaises(KeyError):
            self.store.mark_running("missing")

    def test_list_runs_returns_newest_first(self) -> None:
        first = self.store.create_run(ROOM)
        second = self.store.create_run(ROOM)
        runs = self.store.list_runs()
        self.assertGreaterEqual(len(runs), 2)
        self.assertEqual(runs[0].id, second.id)
        self.assertEqual(runs[1].id, first.id)

    def test_list_runs_with_status_filter(self) -> None:
        queued = self.store.create_run(ROOM)
        running = self.store.create_run(ROOM)
        self.store.mark_running(running.id)
        completed = self.store.create_run(ROOM)
        self.store.mark_running(completed.id)
        self.store.complete_run(completed.id, {"ok": True})

        queued_runs = self.store.list_runs(status="queued")
        self.assertTrue(any(run.id == queued.id for run in queued_runs))
        self.assertFalse(any(run.id == running.id for run in queued_runs))

        running_runs = self.store.list_runs(status="running")
        self.assertTrue(any(run.id == running.id for run in running_runs))

        succeeded_runs = self.store.list_runs(status="succeeded")
        self.assertTrue(any(run.id == completed.id for run in succeeded_runs))

        with self.assertRaises(ValueError):
            self.store.list_runs(status="bogus")

    def test_status_counts_includes_all_statuses(self) -> None:
        self.store.create_run(ROOM)
        running = self.store.create_run(ROOM)
        failed = self.store.create_run(ROOM)
        self.store.mark_running(running.id)
        self.store.mark_running(failed.id)
        self.store.mark_failed(failed.id, "boom")

        counts = self.store.status_counts()
        self.assertEqual(counts["queued"], 1)
        self.assertEqual(counts["running"], 1)
        self.assertEqual(counts["failed"], 1)
        self.assertEqual(counts["succeeded"], 0)

    def test_delete_all(self) -> None:
        self.store.create_run(ROOM)
        self.store.delete_all()
        self.assertEqual(self.store.list_runs(), [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
