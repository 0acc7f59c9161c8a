#!/usr/bin/env python3
"""
Tests for the decorators module.
"""
import unittest
import time
import logging
from unittest.mock import patch
import os
import sys

# Add the parent directory to sys.path so we can import from utils
sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

from utils.decorators import log_errors, log_step, timed


class TestDecorators(unittest.TestCase):
    """Tests for the decorators module."""

    def setUp(self):
        """Set up test fixtures."""
        logging.basicConfig(level=logging.INFO)

    @patch('utils.decorators.logger')
    def test_log_errors_decorator(self, mock_logger):
        """Test the log_errors decorator."""

        @log_errors()
        def test_error_function():
            raise ValueError("Test error")

        # The function should raise the exception
        with self.assertRaises(ValueError):
            test_error_function()

        # Verify logger was called with error
        mock_logger.error.assert_called_once()
        self.assertIn("test_error_function", mock_logger.error.call_args[0][0])

    @patch('utils.decorators.logger')
    def test_log_errors_default_return(self, mock_logger):
        """Errors are swallowed and the default returned when reraise is False."""

        @log_errors(reraise=False, default_return="fallback")
        def test_error_function():
            raise KeyError("missing")

        self.assertEqual(test_error_function(), "fallback")
        mock_logger.error.assert_called_once()

    @patch('utils.decorators.logger')
    def test_log_errors_ignores_unexpected_exceptions(self, mock_logger):
        """Exceptions outside expected_exceptions pass through unlogged."""

        @log_errors([KeyError, IndexError])
        def test_error_function():
            raise ValueError("not expected")

        with self.assertRaises(ValueError):
            test_error_function()
        mock_logger.error.assert_not_called()

    @patch('utils.logging_utils.get_logger')
    def test_log_step_decorator(self, mock_get_logger):
        """Test the log_step decorator."""
        mock_logger = mock_get_logger.return_value

        @log_step("Test Step")
        def test_step_function():
            return "step_result"

        result = test_step_function()

        # Verify logger was called for start and end
        self.assertEqual(mock_logger.info.call_count, 2)
        self.assertIn("Test Step", mock_logger.info.call_args_list[0][0][0])
        self.assertEqual(result, "step_result")

    @patch('utils.decorators.logger')
    def test_timed_decorator(self, mock_logger):
        """Test the timed decorator."""

        @timed
        def test_timed_function():
            time.sleep(0.01)
            return "timed_result"

        result = test_timed_function()

        # Verify logger was called
        mock_logger.info.assert_called_once()
        self.assertIn("test_timed_function executed in", mock_logger.info.call_args[0][0])
        self.assertEqual(result, "timed_result")

    @patch('utils.decorators.logger')
    def test_timed_decorator_with_params(self, mock_logger):
        """Test the timed decorator with parameters."""

        @timed("Custom Timing", log_level="debug")
        def test_timed_function_with_params(arg1, arg2=None):
            time.sleep(0.01)
            return f"{arg1}_{arg2}"

        result = test_timed_function_with_params("test", arg2="value")

        # Verify logger was called with debug level
        mock_logger.debug.assert_called_once()
        self.assertIn("Custom Timing", mock_logger.debug.call_args[0][0])
        self.assertEqual(result, "test_value")

    @patch('utils.decorators.logger')
    def test_timed_logs_on_failure(self, mock_logger):
        """Timing is logged even when the wrapped function raises."""

        @timed("Failing step")
        def failing():
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            failing()
        mock_logger.info.assert_called_once()


if __name__ == "__main__":
    unittest.main()
