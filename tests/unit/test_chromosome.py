#!/usr/bin/env python3
"""
Unit tests for Tour Chromosome
Tests the permutation representation, fitness caching and validation
"""

import unittest
import sys
import os

# Add project root and tests directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from tsp_genetic import TourChromosome, InvariantViolation
from tsp_test_utils import TSPTestBase


class TestTourChromosome(TSPTestBase):
    """Test TourChromosome class"""

    def test_chromosome_creation(self):
        chromosome = TourChromosome([0, 3, 1, 2])

        self.assertEqual(chromosome.genes, [0, 3, 1, 2])
        self.assertEqual(len(chromosome), 4)
        self.assertIsNone(chromosome.fitness)
        self.assertEqual(chromosome.creation_method, "unknown")
        self.assertEqual(chromosome.pinned_prefix, [0])

    def test_genes_are_copied(self):
        genes = [0, 1, 2, 3]
        chromosome = TourChromosome(genes)
        genes[1] = 99
        self.assertEqual(chromosome.genes, [0, 1, 2, 3])

    def test_evaluate_caches_fitness(self):
        chromosome = TourChromosome([0, 1, 2, 3])
        self.assertEqual(chromosome.evaluate(self.square_model), 40.0)

        # Stale cache is returned until invalidated
        chromosome.genes = [0, 2, 1, 3]
        self.assertEqual(chromosome.evaluate(self.square_model), 40.0)
        chromosome._invalidate_cache()
        self.assertEqual(chromosome.evaluate(self.square_model), 48.0)

    def test_swap_segments(self):
        chromosome = TourChromosome(list(range(8)))
        chromosome.swap_segments(1, 5, 2)
        self.assertEqual(chromosome.genes, [0, 5, 6, 3, 4, 1, 2, 7])

    def test_swap_adjacent_segments(self):
        chromosome = TourChromosome(list(range(6)))
        chromosome.swap_segments(2, 4, 2)
        self.assertEqual(chromosome.genes, [0, 1, 4, 5, 2, 3])

    def test_swap_segments_invalidates_fitness(self):
        chromosome = TourChromosome([0, 1, 2, 3])
        chromosome.evaluate(self.square_model)
        chromosome.swap_segments(1, 2, 1)
        self.assertIsNone(chromosome.fitness)

    def test_swap_segments_rejects_bad_bounds(self):
        chromosome = TourChromosome(list(range(8)))
        with self.assertRaises(ValueError):
            chromosome.swap_segments(0, 4, 2)    # touches the pinned city
        with self.assertRaises(ValueError):
            chromosome.swap_segments(2, 3, 2)    # overlapping
        with self.assertRaises(ValueError):
            chromosome.swap_segments(2, 7, 2)    # past the end
        with self.assertRaises(ValueError):
            chromosome.swap_segments(2, 4, 0)

    def test_is_valid_permutation(self):
        self.assertTrue(TourChromosome([2, 0, 3, 1]).is_valid_permutation())
        self.assertTrue(TourChromosome([2, 0, 3, 1]).is_valid_permutation(4))
        self.assertFalse(TourChromosome([2, 0, 3, 1]).is_valid_permutation(5))
        self.assertFalse(TourChromosome([0, 1, 1, 3]).is_valid_permutation())

    def test_validate_reports_missing_and_duplicates(self):
        chromosome = TourChromosome([0, 1, 1, 3])

        with self.assertRaises(InvariantViolation) as context:
            chromosome.validate(4, [0], operator="heuristic_crossover", generation=7)

        error = context.exception
        self.assertEqual(error.operator, "heuristic_crossover")
        self.assertEqual(error.generation, 7)
        self.assertEqual(error.genes, [0, 1, 1, 3])
        self.assertIn("missing=[2]", str(error))
        self.assertIn("duplicates=[1]", str(error))
        self.assertIn("generation=7", str(error))

    def test_validate_detects_moved_prefix(self):
        chromosome = TourChromosome([1, 0, 2, 3])
        with self.assertRaises(InvariantViolation):
            chromosome.validate(4, [0])

    def test_validate_accepts_valid_tour(self):
        TourChromosome([0, 3, 2, 1]).validate(4, [0])

    def test_copy_is_independent(self):
        original = TourChromosome([0, 1, 2, 3])
        original.evaluate(self.square_model)
        original.creation_method = "heuristic_crossover"
        original.generation = 4

        clone = original.copy()
        self.assertEqual(clone, original)
        self.assertEqual(clone.fitness, 40.0)
        self.assertEqual(clone.generation, 4)
        self.assertEqual(clone.creation_method, "heuristic_crossover")

        clone.swap_segments(1, 2, 1)
        self.assertEqual(original.genes, [0, 1, 2, 3])
        self.assertEqual(original.fitness, 40.0)

    def test_get_tour_stats(self):
        chromosome = TourChromosome([0, 2, 1, 3])
        stats = chromosome.get_tour_stats(self.square_model)

        self.assertEqual(stats['total_length'], 48.0)
        self.assertEqual(stats['city_count'], 4)
        self.assertEqual(stats['longest_edge'], 14.0)
        self.assertEqual(stats['shortest_edge'], 10.0)

    def test_string_representation(self):
        chromosome = TourChromosome([0, 1, 2, 3])
        self.assertIn("length=?", str(chromosome))
        chromosome.evaluate(self.square_model)
        self.assertIn("length=40", str(chromosome))


if __name__ == '__main__':
    unittest.main()
