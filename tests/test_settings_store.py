import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from store import settings_store
from store.settings_store import DEFAULT_SETTINGS, Settings


class SettingsStoreTestCase(unittest.TestCase):
    def test_missing_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            with patch.object(settings_store, "SETTINGS_PATH", Path(td) / "settings.ini"):
                self.assertEqual(DEFAULT_SETTINGS, settings_store.load_settings())

    def test_invalid_values_fall_back(self):
        with tempfile.TemporaryDirectory() as td:
            ini_path = Path(td) / "settings.ini"
            ini_path.write_text(
                "[game]\n"
                "auto_move_secs = soon\n"
                "status_display_secs = -3\n"
                "new_game_secs = 2.5\n"
                "save_prefix = ../evil\n",
                encoding="utf-8",
            )
            data = settings_store.load_settings(ini_path)
        self.assertEqual(DEFAULT_SETTINGS.auto_move_secs, data.auto_move_secs)
        self.assertEqual(DEFAULT_SETTINGS.status_display_secs, data.status_display_secs)
        self.assertEqual(2.5, data.new_game_secs)
        self.assertEqual(DEFAULT_SETTINGS.save_prefix, data.save_prefix)

    def test_save_then_load(self):
        with tempfile.TemporaryDirectory() as td:
            ini_path = Path(td) / "settings.ini"
            settings = Settings(auto_move_secs=0.05, save_dir=td, save_prefix="deal.")
            settings_store.save_settings(settings, ini_path)
            text = ini_path.read_text(encoding="utf-8")
            self.assertIn("[game]", text)
            self.assertIn("auto_move_secs = 0.05", text)
            self.assertEqual(settings, settings_store.load_settings(ini_path))

    def test_file_without_section_gives_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            ini_path = Path(td) / "settings.ini"
            ini_path.write_text("[ui]\ntheme_name = Forest\n", encoding="utf-8")
            self.assertEqual(DEFAULT_SETTINGS, settings_store.load_settings(ini_path))


if __name__ == "__main__":
    unittest.main()
