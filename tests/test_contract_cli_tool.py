from __future__ import annotations

import json
import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]


def _run(*args: str) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(REPO_ROOT)
    env.pop("RANGEPICKER_TZ", None)
    cmd = [sys.executable, "-m", "rangepicker.cli", *args]
    return subprocess.run(cmd, cwd=str(REPO_ROOT), env=env, capture_output=True, text=True)


class TestCliToolContract(unittest.TestCase):
    def test_json_snapshot(self) -> None:
        p = _run("--tz", "UTC", "--start", "2024-03-03", "--end", "2024-03-09", "--json")
        self.assertEqual(p.returncode, 0, p.stderr)
        data = json.loads(p.stdout)
        self.assertEqual(data["selected_text"], "03/03/2024 - 03/09/2024")
        self.assertEqual(data["state"], "idle")
        self.assertEqual(data["left"]["header"]["title"], "March 2024")

    def test_text_view(self) -> None:
        p = _run("--tz", "UTC", "--start", "2024-03-03", "--end", "2024-03-09")
        self.assertEqual(p.returncode, 0, p.stderr)
        self.assertIn("March 2024", p.stdout)
        self.assertIn("April 2024", p.stdout)
        self.assertIn("03/03/2024 - 03/09/2024", p.stdout)

    def test_text_input_and_config_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            cfg = Path(td) / "opts.json"
            cfg.write_text(json.dumps({"tz": "UTC", "locale": {"format": "YYYY-MM-DD", "separator": " to "}}), encoding="utf-8")
            p = _run("--config", str(cfg), "--text", "2024-05-01 to 2024-05-04", "--json")
            self.assertEqual(p.returncode, 0, p.stderr)
            self.assertEqual(json.loads(p.stdout)["selected_text"], "2024-05-01 to 2024-05-04")

    def test_errors_exit_non_zero(self) -> None:
        p = _run("--config", str(REPO_ROOT / "no_such_options.json"))
        self.assertEqual(p.returncode, 2)
        self.assertIn("[rangepicker] ERROR:", p.stderr)

        p = _run("--tz", "No/Such_Zone")
        self.assertEqual(p.returncode, 2)
        self.assertIn("Invalid options", p.stderr)


if __name__ == "__main__":
    unittest.main(verbosity=2)
