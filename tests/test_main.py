#!/usr/bin/env python3
"""
Tests for the command-line entry point.
"""
import unittest
import tempfile
from unittest.mock import patch
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

import main
from utils.logging_utils import LoggerProvider, logger


class TestMain(unittest.TestCase):
    """Tests for main.main."""

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        LoggerProvider._logger = logger
        self.tmp_dir.cleanup()

    def test_parse_arguments(self):
        """Flags map onto the expected attributes."""
        args = main.parse_arguments(["--criterion", "bic", "--no-stepwise", "--category", ""])
        self.assertEqual(args.criterion, "bic")
        self.assertTrue(args.no_stepwise)
        self.assertEqual(args.category, "")
        self.assertFalse(args.simulate)

    def test_setup_config_overrides(self):
        """Command-line values override the configuration."""
        args = main.parse_arguments(["--criterion", "bic", "--no-stepwise", "--results-dir", self.tmp_dir.name,
                                     "--no-save", "--category", ""])
        config = main.setup_config(args).app_config

        self.assertEqual(config.model_criterion, "bic")
        self.assertFalse(config.model_stepwise)
        self.assertEqual(config.results_dir, self.tmp_dir.name)
        self.assertFalse(config.save_results)
        self.assertEqual(config.data_category, "")

    def test_simulated_run(self):
        """A simulated run writes results and exits with 0."""
        exit_code = main.main(["--simulate", "--results-dir", self.tmp_dir.name, "--log-level", "WARNING"])
        self.assertEqual(exit_code, 0)
        self.assertTrue(os.path.exists(os.path.join(self.tmp_dir.name, "brand_summary.csv")))

    def test_missing_input_files(self):
        """Missing input files exit with 1."""
        exit_code = main.main([
            "--transactions", os.path.join(self.tmp_dir.name, "missing.csv"),
            "--products", os.path.join(self.tmp_dir.name, "missing.csv"),
            "--no-save", "--log-level", "ERROR",
        ])
        self.assertEqual(exit_code, 1)

    @patch("main.ModelRunner.run")
    def test_unexpected_error_exits_with_one(self, mock_run):
        """Errors outside the domain hierarchy still exit with 1."""
        mock_run.side_effect = KeyError("UNITS1")
        exit_code = main.main(["--simulate", "--no-save", "--log-level", "ERROR"])
        self.assertEqual(exit_code, 1)

    def test_invalid_config_file(self):
        """A malformed configuration file exits with 1."""
        path = os.path.join(self.tmp_dir.name, "config.json")
        with open(path, "w") as f:
            f.write("{broken")
        self.assertEqual(main.main(["--config", path, "--no-save"]), 1)


if __name__ == "__main__":
    unittest.main()
