import contextlib
import io
import os
import tempfile
import textwrap
import unittest
from pathlib import Path
from unittest.mock import patch

import main

SECRETS = {
    "ANTHROPIC_API_KEY": "key",
    "GOOGLE_CALENDAR_ID": "primary",
    "GOOGLE_SERVICE_ACCOUNT_FILE": "/tmp/service-account.json",
}

RESPONSE = (
    '"recommendations": [{"priority": "HIGH", "title": "Walk", '
    '"action": {"type": "create", "start": "2030-01-01T07:00:00Z", '
    '"end": "2030-01-01T07:30:00Z"}}]}'
)


class _CalendarStub:
    def __init__(self, *args, **kwargs):
        self.created: list[str] = []

    def list_events(self, *, time_min, time_max):
        return []

    def create_event(self, *, title, start, end, description=None, provenance=None):
        self.created.append(title)
        return "evt-1"


class _OracleStub:
    def complete(self, prompt: str, *, prefix: str = "") -> str:
        return RESPONSE


class MainTests(unittest.TestCase):
    def _write_config(self, root: Path, *, dry_run: bool = False) -> Path:
        (root / "strategy.yaml").write_text(
            'recurring_events:\n  - "Walk every day"\n',
            encoding="utf-8",
        )
        config_path = root / "config.toml"
        config_path.write_text(
            textwrap.dedent(
                f"""
                [policy]
                file = "strategy.yaml"

                [run]
                dry_run = {"true" if dry_run else "false"}
                """
            ).strip(),
            encoding="utf-8",
        )
        return config_path

    def _run(self, argv: list[str], calendar: _CalendarStub) -> tuple[int, str]:
        stdout = io.StringIO()
        with patch.dict(os.environ, SECRETS, clear=True), patch.object(
            main, "GoogleCalendar", return_value=calendar
        ), patch.object(
            main, "build_oracle_backend", return_value=_OracleStub()
        ), contextlib.redirect_stdout(stdout):
            code = main.main(argv)
        return code, stdout.getvalue()

    def test_missing_config_exits_with_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            code, _ = self._run(
                ["--config", str(Path(temp_dir) / "missing.toml")],
                _CalendarStub(),
            )

        self.assertEqual(1, code)

    def test_successful_run_prints_report(self) -> None:
        calendar = _CalendarStub()
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = self._write_config(Path(temp_dir))
            code, output = self._run(["--config", str(config_path)], calendar)

        self.assertEqual(0, code)
        self.assertEqual(["Walk"], calendar.created)
        self.assertIn("Scheduling Suggestions:", output)
        self.assertIn("Outcome: APPLIED", output)

    def test_dry_run_flag_skips_writes(self) -> None:
        calendar = _CalendarStub()
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = self._write_config(Path(temp_dir))
            code, output = self._run(["--config", str(config_path), "--dry-run"], calendar)

        self.assertEqual(0, code)
        self.assertEqual([], calendar.created)
        self.assertIn("Outcome: SKIPPED (dry run)", output)


if __name__ == "__main__":
    unittest.main()
