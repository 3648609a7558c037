#!/usr/bin/env python3
"""
Best Chromosomes Selection
Keeps the fittest fraction of a population and refills it to constant size
"""

import logging

from .config import DEFAULT_CULLING_FRACTION
from .common import round_half_up
from .population import Population

logger = logging.getLogger(__name__)


class BestChromosomesSelector:
    """Truncation selector with duplicate refill"""

    name = "best_chromosomes_selector"

    def __init__(self, culling_fraction: float = DEFAULT_CULLING_FRACTION):
        """Initialize selector

        Args:
            culling_fraction: Fraction of the population kept as survivors
        """
        self.culling_fraction = culling_fraction

    def survivor_count(self, population_size: int) -> int:
        return max(1, int(round_half_up(population_size * self.culling_fraction)))

    def select(self, population: Population) -> Population:
        """Rank by fitness, keep the best fraction and duplicate it back to size

        Args:
            population: Fully evaluated population

        Returns:
            New population of the same size, sorted best first, made of
            copies of the survivors
        """
        size = len(population)
        if size == 0:
            return Population([])

        ranked = population.ranked()
        survivors = ranked[:self.survivor_count(size)]

        selected = [chromosome.copy() for chromosome in survivors]
        index = 0
        while len(selected) < size:
            selected.append(survivors[index % len(survivors)].copy())
            index += 1

        # Keep the result ordered best first after the refill
        selected.sort(key=lambda c: c.fitness)

        logger.debug(f"Selected {len(survivors)}/{size} survivors, "
                     f"refilled {size - len(survivors)} duplicates")
        return Population(selected)
