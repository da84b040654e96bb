import json
import tempfile
import unittest
from pathlib import Path

from drillstats.stats import (
    clear_generic_history,
    get_generic_mistake_areas,
    get_generic_problem_areas,
    update_generic_cumulative_stats,
    update_mistake_cumulative_stats,
)
from drillstats.storage import JsonFileStore, MemoryStore, load_cumulative_stats


class RoundTripTests(unittest.TestCase):
    def test_time_merge_then_rank(self) -> None:
        store = MemoryStore()
        cumulative: dict = {}
        update_generic_cumulative_stats(
            "int_cumulativeStats",
            {
                "C Major": {"total": 5, "firstTry": 4, "times": [1.0, 1.2, 1.1, 1.3, 1.0], "slow": 0},
                "D Minor": {"total": 5, "firstTry": 2, "times": [2.5, 3.0, 2.8, 3.2, 2.1], "slow": 3},
            },
            cumulative,
            store=store,
        )
        problems = get_generic_problem_areas(cumulative)
        self.assertEqual([p.name for p in problems], ["D Minor", "C Major"])

    def test_perfect_session_scores_zero(self) -> None:
        cumulative: dict = {}
        update_generic_cumulative_stats(
            "k", {"C Major": {"total": 10, "firstTry": 10, "times": [1] * 10, "slow": 0}}, cumulative, store=MemoryStore()
        )
        problems = get_generic_problem_areas(cumulative)
        self.assertEqual(len(problems), 1)
        self.assertEqual(problems[0].problem_score, 0)

    def test_mistake_merge_then_rank(self) -> None:
        cumulative: dict = {}
        update_mistake_cumulative_stats(
            "k",
            {"Good": {"attempts": 10, "mistakes": 1}, "Bad": {"attempts": 10, "mistakes": 8}, "OK": {"attempts": 10, "mistakes": 2}},
            cumulative,
            store=MemoryStore(),
        )
        self.assertEqual([p.key for p in get_generic_mistake_areas(cumulative)], ["Bad"])

    def test_file_store_merge_reload_and_clear(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "stats.json"
            store = JsonFileStore(path)
            store.set("int_history", json.dumps([{"date": "2025-01-01"}]))
            update_generic_cumulative_stats(
                "int_cumulativeStats",
                {"C": {"total": 5, "firstTry": 3, "times": [1, 2, 3, 4, 5], "slow": 2}},
                {},
                store=store,
            )

            reloaded = load_cumulative_stats(JsonFileStore(path), "int_cumulativeStats", "time")
            self.assertEqual(reloaded["C"], {"attempts": 5, "firstTry": 3, "totalTime": 15.0, "slow": 2})
            update_generic_cumulative_stats(
                "int_cumulativeStats", {"C": {"total": 1, "firstTry": 1, "times": [0.5]}}, reloaded, store=store
            )
            self.assertEqual(json.loads(store.get("int_cumulativeStats"))["C"]["attempts"], 6)

            rendered = []
            cleared = clear_generic_history(
                "int_history", "int_cumulativeStats", lambda: rendered.append(True), store=store, confirm=lambda _m: True
            )
            self.assertTrue(cleared)
            self.assertEqual(rendered, [True])
            self.assertIsNone(store.get("int_history"))
            self.assertIsNone(store.get("int_cumulativeStats"))


if __name__ == "__main__":
    unittest.main()
