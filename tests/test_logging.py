"""Unit tests for app.core.logging: UTC timestamps and the audit logger."""

import logging
import time
import unittest

from app.core.logging import (
    AUDIT_LOGGER_NAME,
    LOG_DATEFMT,
    LOG_FORMAT,
    configure_logging,
    get_audit_logger,
)


class TestConfigureLogging(unittest.TestCase):
    def setUp(self) -> None:
        self._converter = logging.Formatter.converter

    def tearDown(self) -> None:
        logging.Formatter.converter = self._converter

    def test_timestamps_are_utc(self) -> None:
        configure_logging()
        self.assertIs(logging.Formatter.converter, time.gmtime)

        # 2025-03-01T12:00:00Z
        record = logging.LogRecord("app.test", logging.INFO, __file__, 1, "hello", None, None)
        record.created = 1740830400.0
        line = logging.Formatter(LOG_FORMAT, LOG_DATEFMT).format(record)
        self.assertTrue(line.startswith("2025-03-01T12:00:00Z INFO app.test hello"), line)

    def test_audit_logger_name(self) -> None:
        self.assertEqual(get_audit_logger().name, AUDIT_LOGGER_NAME)


if __name__ == "__main__":
    unittest.main()
