import json
import os
import tempfile
import unittest
from unittest.mock import patch

from ..config import DEFAULT_CONFIG, load_config, save_config, validate_config
from ..errors import ConfigError


class TestLoadConfig(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.config_file = os.path.join(self.tmpdir.name, "config.json")

        # keep the developer's shell and .env out of the picture
        env = patch.dict(os.environ, {}, clear=True)
        env.start()
        self.addCleanup(env.stop)
        dotenv = patch("product_browser.config.dotenv.load_dotenv")
        dotenv.start()
        self.addCleanup(dotenv.stop)

    def write(self, data):
        with open(self.config_file, "w", encoding="utf-8") as f:
            if isinstance(data, str):
                f.write(data)
            else:
                json.dump(data, f)

    def test_defaults_without_file(self):
        config = load_config(self.config_file)
        self.assertEqual(config, DEFAULT_CONFIG)
        config["ui"]["per_page"] = 100
        self.assertEqual(DEFAULT_CONFIG["ui"]["per_page"], 25)

    def test_file_is_deep_merged(self):
        self.write({"ui": {"per_page": 50}, "on_demand": {"buffer_pages": 4}})
        config = load_config(self.config_file)
        self.assertEqual(config["ui"]["per_page"], 50)
        self.assertEqual(config["ui"]["default_view"], "paginated")
        self.assertEqual(config["on_demand"]["buffer_pages"], 4)
        self.assertEqual(config["on_demand"]["page_size"], 50)

    def test_environment_overrides_file(self):
        self.write({"api": {"latency_ms": 500}})
        os.environ["PRODUCT_BROWSER_LATENCY_MS"] = "0"
        os.environ["PRODUCT_BROWSER_DB_PATH"] = ":memory:"
        os.environ["PRODUCT_BROWSER_LOG_LEVEL"] = "DEBUG"
        config = load_config(self.config_file)
        self.assertEqual(config["api"]["latency_ms"], 0)
        self.assertEqual(config["sqlite"]["db_path"], ":memory:")
        self.assertEqual(config["logging"]["level"], "DEBUG")

    def test_bad_environment_value(self):
        os.environ["PRODUCT_BROWSER_LATENCY_MS"] = "fast"
        with self.assertRaises(ConfigError):
            load_config(self.config_file)

    def test_bad_file(self):
        self.write("{not json")
        with self.assertRaises(ConfigError):
            load_config(self.config_file)
        self.write([1, 2, 3])
        with self.assertRaises(ConfigError):
            load_config(self.config_file)

    def test_invalid_values_are_rejected(self):
        self.write({"on_demand": {"prefetch_pages": 3, "buffer_pages": 1}})
        with self.assertRaises(ConfigError):
            load_config(self.config_file)
        self.write({"ui": {"per_page": 30}})
        with self.assertRaises(ConfigError):
            load_config(self.config_file)
        self.write({"ui": {"default_view": "grid"}})
        with self.assertRaises(ConfigError):
            load_config(self.config_file)

    def test_saved_config_loads_back(self):
        config = load_config(self.config_file)
        config["ui"]["default_view"] = "on-demand"
        self.assertTrue(save_config(config, self.config_file))
        self.assertEqual(load_config(self.config_file)["ui"]["default_view"], "on-demand")

    def test_save_to_missing_directory_fails_quietly(self):
        self.assertFalse(save_config(DEFAULT_CONFIG, os.path.join(self.tmpdir.name, "no", "such.json")))


class TestValidateConfig(unittest.TestCase):
    def test_default_config_is_valid(self):
        validate_config(DEFAULT_CONFIG)


if __name__ == "__main__":
    unittest.main()
