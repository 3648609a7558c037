#!/usr/bin/env python3
"""
Unit tests for the TSPLIB Problem Reader
"""

import unittest
import tempfile
import sys
import os

# Add project root and tests directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from tsp_genetic import EdgeWeightType, TSPLIBFormatError, load_problem, parse_problem
from tsp_test_utils import SAMPLE_TSPLIB


class TestParseProblem(unittest.TestCase):
    """Test parse_problem"""

    def test_parses_headers_and_coordinates(self):
        problem = parse_problem(SAMPLE_TSPLIB)

        self.assertEqual(problem.name, "sample8")
        self.assertEqual(problem.dimension, 8)
        self.assertEqual(problem.city_count, 8)
        self.assertEqual(problem.edge_weight_type, EdgeWeightType.EUC_2D)
        self.assertEqual(problem.comment, "Eight cities on two rows")
        self.assertEqual(problem.coordinates.shape, (8, 2))
        self.assertEqual(tuple(problem.coordinates[4]), (30.0, 10.0))

    def test_att_problem_with_extra_whitespace(self):
        text = ("NAME: tiny\nTYPE: TSP\nDIMENSION: 4\nEDGE_WEIGHT_TYPE:ATT\n"
                "NODE_COORD_SECTION\n 1   6734 1453\n2 2233 10\n3 5530 1424\n4 401 841\n")
        problem = parse_problem(text)

        self.assertEqual(problem.edge_weight_type, EdgeWeightType.ATT)
        self.assertEqual(problem.dimension, 4)

    def test_default_name(self):
        text = SAMPLE_TSPLIB.replace("NAME : sample8\n", "")
        self.assertEqual(parse_problem(text, default_name="fallback").name, "fallback")

    def test_stops_at_display_section(self):
        text = SAMPLE_TSPLIB.replace("EOF", "DISPLAY_DATA_SECTION\n1 5 5\nEOF")
        self.assertEqual(parse_problem(text).dimension, 8)

    def test_dimension_mismatch(self):
        text = SAMPLE_TSPLIB.replace("DIMENSION : 8", "DIMENSION : 9")
        with self.assertRaises(TSPLIBFormatError):
            parse_problem(text)

    def test_unsupported_edge_weight_type(self):
        text = SAMPLE_TSPLIB.replace("EUC_2D", "GEO")
        with self.assertRaises(TSPLIBFormatError):
            parse_problem(text)

    def test_missing_edge_weight_type(self):
        text = SAMPLE_TSPLIB.replace("EDGE_WEIGHT_TYPE : EUC_2D\n", "")
        with self.assertRaises(TSPLIBFormatError):
            parse_problem(text)

    def test_unsupported_problem_type(self):
        text = SAMPLE_TSPLIB.replace("TYPE : TSP", "TYPE : ATSP")
        with self.assertRaises(TSPLIBFormatError):
            parse_problem(text)

    def test_explicit_weights_rejected(self):
        text = ("NAME : explicit\nTYPE : TSP\nDIMENSION : 4\nEDGE_WEIGHT_TYPE : EUC_2D\n"
                "EDGE_WEIGHT_SECTION\n0 1 2 3\nEOF\n")
        with self.assertRaises(TSPLIBFormatError):
            parse_problem(text)

    def test_non_numeric_coordinates(self):
        text = SAMPLE_TSPLIB.replace("3 20 0", "3 twenty 0")
        with self.assertRaises(TSPLIBFormatError):
            parse_problem(text)

    def test_no_coordinates(self):
        text = "NAME : empty\nTYPE : TSP\nEDGE_WEIGHT_TYPE : EUC_2D\nNODE_COORD_SECTION\nEOF\n"
        with self.assertRaises(TSPLIBFormatError):
            parse_problem(text)


class TestLoadProblem(unittest.TestCase):
    """Test load_problem"""

    def test_load_from_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, "rows.tsp")
            with open(path, 'w') as f:
                f.write(SAMPLE_TSPLIB.replace("NAME : sample8\n", ""))

            problem = load_problem(path)

        # Without a NAME header the file stem is used
        self.assertEqual(problem.name, "rows")
        self.assertEqual(problem.dimension, 8)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_problem("/nonexistent/problem.tsp")


if __name__ == '__main__':
    unittest.main()
