import tempfile
import unittest
from pathlib import Path

from app_config_schema import UIServerSettings
from server.config import ServerConfigurationError, UIServerConfig


class UIServerConfigTests(unittest.TestCase):
    def test_from_settings_without_index_file_serves_builtin_page(self) -> None:
        config = UIServerConfig.from_settings(UIServerSettings())

        self.assertTrue(config.enabled)
        self.assertEqual("127.0.0.1", config.host)
        self.assertEqual(8765, config.port)
        self.assertEqual("", config.index_file)
        self.assertEqual("/ws", config.websocket_path)

    def test_from_settings_keeps_explicit_index_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            custom = Path(temp_dir) / "index.html"
            custom.write_text("<html></html>", encoding="utf-8")

            config = UIServerConfig.from_settings(
                UIServerSettings(index_file=f"  {custom}  ")
            )

            self.assertEqual(str(custom), config.index_file)

    def test_missing_index_file_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            settings = UIServerSettings(index_file=str(Path(temp_dir) / "missing.html"))

            with self.assertRaises(ServerConfigurationError):
                UIServerConfig.from_settings(settings)

    def test_index_directory_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with self.assertRaises(ServerConfigurationError):
                UIServerConfig(index_file=temp_dir)

    def test_disabled_server_skips_index_validation(self) -> None:
        config = UIServerConfig(enabled=False, index_file="/does/not/exist.html")
        self.assertFalse(config.enabled)

    def test_invalid_host_and_port_are_rejected(self) -> None:
        for kwargs in ({"host": "  "}, {"port": 0}, {"port": 70000}):
            with self.subTest(**kwargs):
                with self.assertRaises(ServerConfigurationError):
                    UIServerConfig(**kwargs)


if __name__ == "__main__":
    unittest.main()
