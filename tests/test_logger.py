import os
import sys
import tempfile
import unittest
from unittest import mock

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from utils import logger as logger_mod  # noqa: E402


class LogFileTestCase(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.log_path = os.path.join(self.temp_dir.name, "store.log")
        # start from a fresh console, put the shared one back afterwards
        self.saved = (logger_mod._console, logger_mod._log_file)
        logger_mod._console = None
        logger_mod._log_file = None

    def tearDown(self):
        logger_mod.close_log_file()
        logger_mod._console, logger_mod._log_file = self.saved
        self.temp_dir.cleanup()

    def test_log_file_is_closed_and_output_falls_back_to_stderr(self):
        with mock.patch.dict(os.environ, {"STORE_LOG_FILE": self.log_path}):
            console = logger_mod._shared_console()
        handle = logger_mod._log_file
        self.assertFalse(handle.closed)

        console.print("catalog loaded")
        logger_mod.close_log_file()

        self.assertTrue(handle.closed)
        self.assertIsNone(logger_mod._log_file)
        self.assertIs(console.file, sys.stderr)
        with open(self.log_path, encoding="utf-8") as f:
            self.assertIn("catalog loaded", f.read())

        # closing twice is harmless
        logger_mod.close_log_file()

    def test_no_log_file_without_env(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            logger_mod._shared_console()
        self.assertIsNone(logger_mod._log_file)
        logger_mod.close_log_file()


if __name__ == "__main__":
    unittest.main()
