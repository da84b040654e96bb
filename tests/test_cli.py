import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from drillstats.app import explain
from drillstats.app.cli import main, terminal_confirm
from drillstats.storage.store import JsonFileStore


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.store_path = self.dir / "stats.json"

    def tearDown(self) -> None:
        explain.enable(False)
        self._tmp.cleanup()

    def _run(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(["--store", str(self.store_path), *argv])
        return code, out.getvalue(), err.getvalue()

    def _write_session(self, data: dict) -> str:
        path = self.dir / "session.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    def test_list_drills(self) -> None:
        code, out, _ = self._run("list-drills")
        self.assertEqual(code, 0)
        self.assertIn("int: time", out)
        self.assertIn("vl: history", out)

    def test_merge_then_problems(self) -> None:
        session = self._write_session(
            {
                "C Major": {"total": 5, "firstTry": 4, "times": [1.0, 1.2, 1.1, 1.3, 1.0], "slow": 0},
                "D Minor": {"total": 5, "firstTry": 2, "times": [2.5, 3.0, 2.8, 3.2, 2.1], "slow": 3},
            }
        )
        code, out, _ = self._run("merge", "--drill", "int", "--session", session)
        self.assertEqual(code, 0, out)
        store = JsonFileStore(self.store_path)
        saved = json.loads(store.get("int_cumulativeStats"))
        self.assertEqual(saved["D Minor"]["attempts"], 5)
        history = json.loads(store.get("int_history"))
        self.assertEqual(len(history), 1)
        self.assertIn("D Minor", history[0]["items"])

        code, out, _ = self._run("problems", "--drill", "int", "--json")
        self.assertEqual(code, 0)
        areas = json.loads(out)
        self.assertEqual([a["name"] for a in areas], ["D Minor", "C Major"])

        code, out, _ = self._run("problems", "--drill", "int", "--limit", "1")
        self.assertIn("D Minor", out)
        self.assertNotIn("C Major", out)

    def test_merge_rejects_bad_session(self) -> None:
        session = self._write_session({"C": {"attempts": "many", "mistakes": 1}})
        code, _, err = self._run("merge", "--drill", "shell", "--session", session)
        self.assertEqual(code, 2)
        self.assertIn("ERROR", err)
        self.assertIsNone(JsonFileStore(self.store_path).get("shell_cumulativeStats"))

    def test_merge_rejects_counts_above_total(self) -> None:
        store = JsonFileStore(self.store_path)
        stored = {"C": {"attempts": 50, "firstTry": 40, "totalTime": 100.0, "slow": 5}}
        store.set("int_cumulativeStats", json.dumps(stored))
        bad = self._write_session({"C": {"total": 1, "firstTry": 20, "times": [1.0]}})
        code, _, err = self._run("merge", "--drill", "int", "--session", bad)
        self.assertEqual(code, 2)
        self.assertIn("firstTry must be <= total", err)
        self.assertEqual(json.loads(store.get("int_cumulativeStats")), stored)
        self.assertIsNone(store.get("int_history"))

        good = self._write_session({"C": {"total": 1, "firstTry": 1, "times": [1.0]}})
        code, _, _ = self._run("merge", "--drill", "int", "--session", good)
        self.assertEqual(code, 0)
        merged = json.loads(store.get("int_cumulativeStats"))["C"]
        self.assertEqual((merged["attempts"], merged["firstTry"], merged["slow"]), (51, 41, 5))
        self.assertAlmostEqual(merged["totalTime"], 101.0)

    def test_merge_keeps_invalid_stored_record(self) -> None:
        store = JsonFileStore(self.store_path)
        raw = json.dumps({"C": {"attempts": 4, "mistakes": 1}, "D": {"attempts": 2, "mistakes": 9}})
        store.set("shell_cumulativeStats", raw)
        session = self._write_session({"C": {"attempts": 1, "mistakes": 0}})
        code, _, err = self._run("merge", "--drill", "shell", "--session", session)
        self.assertEqual(code, 2)
        self.assertIn("refusing to overwrite", err)
        self.assertEqual(store.get("shell_cumulativeStats"), raw)

        # read-only views still work and skip the bad record
        code, out, _ = self._run("problems", "--drill", "shell", "--json")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), [])

    def test_unknown_drill(self) -> None:
        code, _, err = self._run("problems", "--drill", "nope")
        self.assertEqual(code, 2)
        self.assertIn("Unknown drill id", err)

    def test_history_only_drill_has_no_problems(self) -> None:
        code, _, err = self._run("problems", "--drill", "vl")
        self.assertEqual(code, 2)
        self.assertIn("no cumulative stats", err)

    def test_reset_with_prompt(self) -> None:
        store = JsonFileStore(self.store_path)
        store.set("shell_history", "[]")
        store.set("shell_cumulativeStats", "{}")
        with mock.patch("builtins.input", return_value="n"):
            code, out, _ = self._run("reset", "--drill", "shell")
        self.assertEqual(code, 1)
        self.assertEqual(store.get("shell_history"), "[]")
        with mock.patch("builtins.input", return_value="y"):
            code, out, _ = self._run("reset", "--drill", "shell")
        self.assertEqual(code, 0)
        self.assertIn("Cleared history", out)
        self.assertIsNone(store.get("shell_history"))
        self.assertIsNone(store.get("shell_cumulativeStats"))

    def test_reset_yes_history_only(self) -> None:
        store = JsonFileStore(self.store_path)
        store.set("vl_history", "[]")
        code, _, _ = self._run("reset", "--drill", "vl", "--yes")
        self.assertEqual(code, 0)
        self.assertIsNone(store.get("vl_history"))

    def test_report(self) -> None:
        JsonFileStore(self.store_path).set(
            "shell_cumulativeStats", json.dumps({"C": {"attempts": 10, "mistakes": 6}, "D": {"attempts": 10, "mistakes": 1}})
        )
        outdir = self.dir / "reports"
        code, _, _ = self._run("report", "--drill", "shell", "--out", str(outdir), "--plot")
        self.assertEqual(code, 0)
        self.assertTrue((outdir / "shell_problem_areas.csv").exists())
        self.assertTrue((outdir / "shell_cumulative.ndjson").exists())
        self.assertTrue((outdir / "shell_cumulative.parquet").exists())
        self.assertTrue((outdir / "shell_problem_areas.png").exists())

    def test_explain_traces(self) -> None:
        session = self._write_session({"C": {"attempts": 3, "mistakes": 1}})
        code, out, _ = self._run("--explain", "merge", "--drill", "shell", "--session", session)
        self.assertEqual(code, 0)
        self.assertIn("[EXPLAIN] merge.cumulative_merged [shell_cumulativeStats]", out)
        self.assertIn('"items":["C"]', out)

    def test_bad_config(self) -> None:
        code, _, err = self._run("--config", str(self.dir / "missing.yml"), "list-drills")
        self.assertEqual(code, 2)
        self.assertIn("Config file not found", err)


class TerminalConfirmTests(unittest.TestCase):
    def test_answers(self) -> None:
        self.assertTrue(terminal_confirm("Sure?", input_fn=lambda _p: "Y"))
        self.assertTrue(terminal_confirm("Sure?", input_fn=lambda _p: " yes "))
        self.assertFalse(terminal_confirm("Sure?", input_fn=lambda _p: ""))

    def test_eof_declines(self) -> None:
        def _eof(_p: str) -> str:
            raise EOFError

        self.assertFalse(terminal_confirm("Sure?", input_fn=_eof))


if __name__ == "__main__":
    unittest.main()
