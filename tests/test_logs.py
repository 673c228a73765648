from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from loguru import logger

from trydir.logs import setup_logging


class SetupLoggingTests(unittest.TestCase):
    def tearDown(self) -> None:
        setup_logging()

    def test_file_sink_receives_debug_records(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_file = Path(tmp) / "logs" / "trydir.log"
            setup_logging(log_file)

            logger.debug("scanned {} entries", 3)
            logger.remove()

            contents = log_file.read_text(encoding="utf-8")

        self.assertIn("DEBUG", contents)
        self.assertIn("scanned 3 entries", contents)


if __name__ == "__main__":
    unittest.main()
