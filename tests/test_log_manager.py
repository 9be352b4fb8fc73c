# tests/test_log_manager.py
import logging
import os
import shutil
import sys
import tempfile
import unittest

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from spinwheel.infrastructure.logging.log_manager import LogManager


class TestLogModes(unittest.TestCase):

    def setUp(self):
        self.config = {
            "level": "INFO",
            "console_level": "INFO",
            "loggers": {"domain.spin": {"level": "INFO"}, "infrastructure.rng": {"level": "WARNING"}},
        }

    def test_no_mode_keeps_config(self):
        self.assertEqual(LogManager.apply_mode(self.config, None), self.config)

    def test_all_raises_every_logger_to_debug(self):
        config = LogManager.apply_mode(self.config, "all")

        self.assertEqual(config["level"], "DEBUG")
        self.assertEqual(config["loggers"], {"domain.spin": {"level": "DEBUG"},
                                             "infrastructure.rng": {"level": "DEBUG"}})
        # The input is left alone
        self.assertEqual(self.config["loggers"]["domain.spin"], {"level": "INFO"})

    def test_layer_modes(self):
        domain = LogManager.apply_mode(self.config, "domain")
        self.assertEqual(domain["loggers"]["domain"], {"level": "DEBUG"})
        self.assertEqual(domain["loggers"]["application"], {"level": "WARNING"})

        app = LogManager.apply_mode(self.config, "app")
        self.assertEqual(app["loggers"]["application"], {"level": "DEBUG"})

        none = LogManager.apply_mode(self.config, "none")
        self.assertEqual(none["loggers"], {})
        self.assertEqual(none["console_level"], "WARNING")

    def test_verbose_wins(self):
        config = LogManager.apply_mode(self.config, "none", verbose=True)
        self.assertEqual(config["level"], "DEBUG")
        self.assertEqual(config["console_level"], "DEBUG")

    def test_unknown_mode(self):
        with self.assertRaises(ValueError):
            LogManager.apply_mode(self.config, "loud")


class TestLogManager(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.manager = LogManager()
        self.root_level = logging.getLogger().level

    def tearDown(self):
        self.manager.shutdown()
        logging.getLogger().setLevel(self.root_level)
        logging.getLogger("tests.logmanager").propagate = True
        shutil.rmtree(self.temp_dir)

    def test_file_handler_and_logger_levels(self):
        log_path = os.path.join(self.temp_dir, "logs", "run.log")
        self.manager.initialize({
            "level": "WARNING",
            "console": False,
            "file": {"enabled": True, "path": log_path, "level": "DEBUG"},
            "loggers": {"tests.logmanager": {"level": "debug"}},
        })

        logger = logging.getLogger("tests.logmanager")
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertFalse(logger.propagate)
        self.assertIn(self.manager.handlers["file"], logger.handlers)

        logger.debug("spin settled")
        self.manager.handlers["file"].flush()
        with open(log_path, encoding="utf-8") as f:
            self.assertIn("spin settled", f.read())

    def test_initialize_once_until_shutdown(self):
        self.manager.initialize({"console": True, "level": "INFO"})
        console = self.manager.handlers["console"]
        self.manager.initialize({"console": True, "level": "DEBUG"})
        self.assertIs(self.manager.handlers["console"], console)

        self.manager.shutdown()
        self.assertFalse(self.manager.initialized)
        self.assertNotIn(console, logging.getLogger().handlers)

    def test_level_names(self):
        self.assertEqual(LogManager._get_log_level("warn"), logging.WARNING)
        self.assertEqual(LogManager._get_log_level(logging.ERROR), logging.ERROR)
        self.assertEqual(LogManager._get_log_level("chatty"), logging.INFO)


if __name__ == "__main__":
    unittest.main()
