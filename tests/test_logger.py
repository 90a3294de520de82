"""Tests for the request-scoped log context."""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

import helpers  # noqa: F401,E402  sets DATABASE_URL before src is imported
import structlog

from src.utils.logger import bind_context, clear_context, request_log_context


class TestRequestLogContext(unittest.TestCase):
    def tearDown(self):
        clear_context()

    def test_binds_inside_block_and_clears_after(self):
        with request_log_context("req-1", path="/api/medicines/search"):
            self.assertEqual(
                structlog.contextvars.get_contextvars(),
                {"request_id": "req-1", "path": "/api/medicines/search"},
            )
        self.assertEqual(structlog.contextvars.get_contextvars(), {})

    def test_drops_stale_context_from_previous_request(self):
        bind_context(request_id="old", user="someone")
        with request_log_context("req-2"):
            self.assertEqual(structlog.contextvars.get_contextvars(), {"request_id": "req-2"})

    def test_clears_when_block_raises(self):
        with self.assertRaises(RuntimeError):
            with request_log_context("req-3"):
                raise RuntimeError("boom")
        self.assertEqual(structlog.contextvars.get_contextvars(), {})


if __name__ == "__main__":
    unittest.main()
