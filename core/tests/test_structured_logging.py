"""Tests for scan-aware logging context."""

import contextvars
import logging
import unittest

from core.structured_logging import (
    UNSET,
    _ScanContextFilter,
    current_context,
    file_scope,
    get_phase,
    get_scan_id,
    scan_scope,
    set_scan_id,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord("rubymap", logging.INFO, __file__, 1, "msg", None, None)


class TestStructuredLogging(unittest.TestCase):
    def run(self, result=None):
        # Each test gets a fresh copy of the logging context.
        return contextvars.copy_context().run(super().run, result)

    def test_set_scan_id(self) -> None:
        self.assertEqual(set_scan_id("scan-1"), "scan-1")
        self.assertEqual(get_scan_id(), "scan-1")

    def test_generated_scan_id(self) -> None:
        value = set_scan_id()
        self.assertTrue(value)
        self.assertEqual(get_scan_id(), value)

    def test_scan_scope_reuses_scan_id(self) -> None:
        set_scan_id("scan-3")
        with scan_scope("lib") as context:
            self.assertEqual(context.scan_id, "scan-3")
            self.assertEqual(get_phase(), "scan")
            self.assertEqual(current_context().file, "lib")
        self.assertEqual(get_phase(), UNSET)

    def test_scan_scope_generates_scan_id(self) -> None:
        self.assertEqual(get_scan_id(), UNSET)
        with scan_scope("lib") as context:
            self.assertNotEqual(context.scan_id, UNSET)

    def test_file_scope_nests_inside_scan(self) -> None:
        set_scan_id("scan-4")
        with scan_scope("lib"):
            with file_scope("lib/a.rb"):
                self.assertEqual(
                    (get_scan_id(), get_phase(), current_context().file),
                    ("scan-4", "parse", "lib/a.rb"),
                )
            self.assertEqual(get_phase(), "scan")
            self.assertEqual(current_context().file, "lib")

    def test_file_scope_resets_on_error(self) -> None:
        with self.assertRaises(ValueError):
            with file_scope("lib/a.rb"):
                raise ValueError("boom")
        self.assertEqual(current_context().file, UNSET)

    def test_filter_injects_context(self) -> None:
        set_scan_id("scan-2")
        record = _record()
        with file_scope("lib/b.rb"):
            self.assertTrue(_ScanContextFilter().filter(record))
        self.assertEqual(record.scan_id, "scan-2")
        self.assertEqual(record.phase, "parse")
        self.assertEqual(record.file, "lib/b.rb")

    def test_filter_outside_scan_uses_placeholders(self) -> None:
        record = _record()
        _ScanContextFilter().filter(record)
        self.assertEqual((record.scan_id, record.phase, record.file), (UNSET, UNSET, UNSET))


if __name__ == "__main__":
    unittest.main()
