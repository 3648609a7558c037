#!/usr/bin/env python3
"""
Genetic TSP Visualization
Saves the best tour and the convergence curve of a run as image files
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence, Tuple

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np

from .optimizer import GAResults

logger = logging.getLogger(__name__)


@dataclass
class VisualizationConfig:
    """Configuration for visualization generation"""
    output_dir: str = "tsp_visualizations"
    figure_format: str = "png"  # png, pdf, svg
    figure_size: Tuple[int, int] = (10, 8)
    dpi: int = 150
    timestamp_files: bool = True


class TSPVisualizer:
    """Plots tours and fitness histories"""

    def __init__(self, config: Optional[VisualizationConfig] = None):
        """Initialize visualizer

        Args:
            config: Visualization configuration
        """
        self.config = config or VisualizationConfig()

        # Create output directory
        self.output_dir = Path(self.config.output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        plt.style.use('default')

    def save_figure(self, fig: plt.Figure, filename: str) -> str:
        """Save and close a figure

        Args:
            fig: Matplotlib figure to save
            filename: Base filename (without extension)

        Returns:
            Full path to saved file
        """
        if self.config.timestamp_files:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"{filename}_{timestamp}"

        filepath = self.output_dir / f"{filename}.{self.config.figure_format}"
        fig.savefig(filepath, dpi=self.config.dpi, bbox_inches='tight',
                    facecolor='white', edgecolor='none')
        plt.close(fig)

        logger.info(f"Saved figure {filepath}")
        return str(filepath)

    def save_tour_plot(self, coordinates: np.ndarray, tour: Sequence[int],
                       title: str = "Best tour", filename: str = "best_tour") -> str:
        """Draw a closed tour over the city coordinates

        Args:
            coordinates: (n, 2) array of city positions
            tour: City indices in visiting order
            title: Plot title
            filename: Base filename

        Returns:
            Path of the saved image
        """
        coordinates = np.asarray(coordinates, dtype=float)
        order = list(tour) + [tour[0]]

        fig, ax = plt.subplots(figsize=self.config.figure_size, dpi=self.config.dpi)
        ax.plot(coordinates[order, 0], coordinates[order, 1], '-', color='#45B7D1',
                linewidth=1.5, zorder=1)
        ax.scatter(coordinates[:, 0], coordinates[:, 1], c='#2C3E50', s=20, zorder=2)
        ax.scatter(coordinates[tour[0], 0], coordinates[tour[0], 1], c='#FF6B6B', s=80,
                   marker='*', zorder=3, label=f'Start (city {tour[0]})')

        ax.set_title(title, fontsize=14, fontweight='bold')
        ax.set_xlabel('x')
        ax.set_ylabel('y')
        ax.set_aspect('equal', adjustable='datalim')
        ax.legend(loc='best')
        ax.grid(True, alpha=0.3)

        return self.save_figure(fig, filename)

    def save_convergence_plot(self, results: GAResults, title: str = "Convergence",
                              filename: str = "convergence",
                              optimal: Optional[float] = None) -> str:
        """Plot best and average tour length per generation

        Args:
            results: Results of one run
            title: Plot title
            filename: Base filename
            optimal: Known optimal length drawn as a reference line

        Returns:
            Path of the saved image
        """
        generations = np.arange(len(results.fitness_history))

        fig, ax = plt.subplots(figsize=self.config.figure_size, dpi=self.config.dpi)
        ax.plot(generations, results.fitness_history, color='#FF6B6B', linewidth=2,
                label='Best length')
        if results.average_history:
            ax.plot(generations, results.average_history, color='#4ECDC4', linewidth=1,
                    alpha=0.8, label='Average length')
        if optimal is not None:
            ax.axhline(optimal, color='#96CEB4', linestyle='--', label=f'Optimal ({optimal:.0f})')

        ax.set_title(f"{title} ({results.termination_reason.value})", fontsize=14, fontweight='bold')
        ax.set_xlabel('Generation')
        ax.set_ylabel('Tour length')
        ax.legend(loc='upper right')
        ax.grid(True, alpha=0.3)

        return self.save_figure(fig, filename)
