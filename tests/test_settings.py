import json
import os
from pathlib import Path
import tempfile
import unittest
from unittest import mock

from search_lab.settings import DEFAULT_SETTINGS, SETTINGS_ENV_VAR, load_settings


class SettingsTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "search_lab.json"

    def _write(self, payload: object) -> None:
        self.path.write_text(json.dumps(payload), encoding="utf-8")

    def test_missing_file_gives_defaults(self) -> None:
        self.assertEqual(load_settings(self.path), DEFAULT_SETTINGS)

    def test_file_values_override_defaults(self) -> None:
        self._write({"board_size": 6, "engine": "a-star"})
        settings = load_settings(self.path)
        self.assertEqual(settings["board_size"], 6)
        self.assertEqual(settings["engine"], "a-star")
        self.assertEqual(settings["max_steps"], DEFAULT_SETTINGS["max_steps"])

    def test_invalid_json_falls_back_to_defaults(self) -> None:
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertLogs("search_lab.settings", level="WARNING"):
            self.assertEqual(load_settings(self.path), DEFAULT_SETTINGS)

    def test_unknown_keys_are_ignored(self) -> None:
        self._write({"colour": "red"})
        with self.assertLogs("search_lab.settings", level="WARNING"):
            settings = load_settings(self.path)
        self.assertNotIn("colour", settings)

    def test_invalid_values_rejected(self) -> None:
        for payload in ({"board_size": 0}, {"engine": "dfs"}, {"log_level": "LOUD"}):
            with self.subTest(payload=payload):
                self._write(payload)
                with self.assertRaises(ValueError):
                    load_settings(self.path)

    def test_environment_variable_names_file(self) -> None:
        self._write({"max_steps": 7})
        with mock.patch.dict(os.environ, {SETTINGS_ENV_VAR: str(self.path)}):
            self.assertEqual(load_settings()["max_steps"], 7)


if __name__ == "__main__":
    unittest.main()
