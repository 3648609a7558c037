#!/usr/bin/env python3
"""
Unit tests for the Genetic TSP Command Line Interface
"""

import unittest
from unittest.mock import patch
import tempfile
import io
import json
import sys
import os

# Add project root and tests directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from tsp_cli import build_config, create_parser, main
from tsp_genetic import CrossoverFallback
from tsp_test_utils import SAMPLE_TSPLIB


class TestTSPCli(unittest.TestCase):
    """Test command line parsing and the main entry point"""

    def setUp(self):
        """Set up test fixtures"""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.problem_path = os.path.join(self.temp_dir.name, "sample8.tsp")
        with open(self.problem_path, 'w') as f:
            f.write(SAMPLE_TSPLIB)

    def test_build_config_from_arguments(self):
        args = create_parser().parse_args([
            self.problem_path, '--population-size', '20', '--mutation-rate', '5',
            '--culling', '0.5', '--seed', '3', '--verbose'])
        config = build_config(args)

        self.assertEqual(config.population_size, 20)
        self.assertIsNone(config.max_generations)
        self.assertEqual(config.mutation_rate, 5)
        self.assertEqual(config.culling_fraction, 0.5)
        self.assertEqual(config.seed, 3)
        self.assertTrue(config.verbose)

    def test_arguments_override_config_file(self):
        config_path = os.path.join(self.temp_dir.name, "ga.json")
        with open(config_path, 'w') as f:
            json.dump({'population_size': 40, 'max_generations': 100,
                       'crossover_fallback': 'random'}, f)

        args = create_parser().parse_args([
            self.problem_path, '--config', config_path, '--population-size', '12'])
        config = build_config(args)

        self.assertEqual(config.population_size, 12)
        self.assertEqual(config.max_generations, 100)
        self.assertEqual(config.crossover_fallback, CrossoverFallback.RANDOM)

    def test_main_runs_and_writes_report(self):
        report_path = os.path.join(self.temp_dir.name, "out", "sample8.data")

        with patch('sys.stdout', new_callable=io.StringIO) as stdout:
            exit_code = main([self.problem_path, '--iterations', '2', '--optimal', '80',
                              '--population-size', '10', '--max-generations', '10',
                              '--seed', '1', '--report', report_path])

        self.assertEqual(exit_code, 0)
        output = stdout.getvalue()
        self.assertIn("Run 1:", output)
        self.assertIn("Run 2:", output)
        self.assertIn("OPTIMAL: 80", output)
        self.assertTrue(os.path.exists(report_path))

    def test_main_missing_file(self):
        with patch('sys.stderr', new_callable=io.StringIO) as stderr:
            exit_code = main([os.path.join(self.temp_dir.name, "missing.tsp")])

        self.assertEqual(exit_code, 1)
        self.assertIn("not found", stderr.getvalue())

    def test_main_invalid_parameters(self):
        with patch('sys.stderr', new_callable=io.StringIO) as stderr:
            exit_code = main([self.problem_path, '--mutation-rate', '0'])

        self.assertEqual(exit_code, 1)
        self.assertIn("mutation_rate", stderr.getvalue())

    def test_main_malformed_problem(self):
        bad_path = os.path.join(self.temp_dir.name, "bad.tsp")
        with open(bad_path, 'w') as f:
            f.write(SAMPLE_TSPLIB.replace("EUC_2D", "GEO"))

        with patch('sys.stderr', new_callable=io.StringIO):
            self.assertEqual(main([bad_path]), 1)


if __name__ == '__main__':
    unittest.main()
