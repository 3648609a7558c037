#!/usr/bin/env python3
"""
Unit tests for Genetic TSP Visualization
Tests tour and convergence plots are written to disk
"""

import unittest
import tempfile
import sys
import os

# Add project root and tests directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from tsp_genetic import GAConfig, TSPGeneticOptimizer
from tsp_genetic.visualization import TSPVisualizer, VisualizationConfig
from tsp_test_utils import TSPTestBase


class TestTSPVisualizer(TSPTestBase):
    """Test TSPVisualizer class"""

    def setUp(self):
        """Set up test fixtures"""
        super().setUp()
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.visualizer = TSPVisualizer(VisualizationConfig(
            output_dir=os.path.join(self.temp_dir.name, "plots"),
            dpi=50, timestamp_files=False))
        self.results = TSPGeneticOptimizer(
            self.distance_model, GAConfig(population_size=8, max_generations=5, seed=2)).optimize()

    def test_output_directory_created(self):
        self.assertTrue(os.path.isdir(os.path.join(self.temp_dir.name, "plots")))

    def test_save_tour_plot(self):
        path = self.visualizer.save_tour_plot(self.coordinates, self.results.best_tour,
                                              filename="tour")

        self.assertTrue(path.endswith("tour.png"))
        self.assertTrue(os.path.exists(path))

    def test_save_convergence_plot(self):
        path = self.visualizer.save_convergence_plot(self.results, optimal=1000.0,
                                                     filename="convergence")
        self.assertTrue(os.path.exists(path))

    def test_timestamped_filenames(self):
        visualizer = TSPVisualizer(VisualizationConfig(
            output_dir=self.temp_dir.name, dpi=50, figure_format="svg"))
        path = visualizer.save_convergence_plot(self.results, filename="run")

        self.assertTrue(os.path.basename(path).startswith("run_"))
        self.assertTrue(path.endswith(".svg"))


if __name__ == '__main__':
    unittest.main()
