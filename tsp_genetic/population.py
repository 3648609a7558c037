#!/usr/bin/env python3
"""
GA Population and Initialization
Fixed-size tour populations and the stochastic greedy initializer
"""

import random
import logging
from typing import List, Optional, Iterator

import numpy as np

from .chromosome import TourChromosome
from .distance import DistanceModel

logger = logging.getLogger(__name__)


class Population:
    """Fixed-size ordered collection of tours"""

    def __init__(self, chromosomes: List[TourChromosome]):
        self.chromosomes = list(chromosomes)

    def __len__(self) -> int:
        return len(self.chromosomes)

    def __iter__(self) -> Iterator[TourChromosome]:
        return iter(self.chromosomes)

    def __getitem__(self, index) -> TourChromosome:
        return self.chromosomes[index]

    def evaluate(self, distance_model: DistanceModel) -> List[float]:
        """Evaluate every tour and return the fitness scores in order"""
        return [chromosome.evaluate(distance_model) for chromosome in self.chromosomes]

    def fitness_scores(self) -> List[float]:
        """Cached fitness scores; every tour must already be evaluated"""
        scores = [chromosome.fitness for chromosome in self.chromosomes]
        if any(score is None for score in scores):
            raise ValueError("Population contains unevaluated tours")
        return scores

    def get_fittest(self) -> TourChromosome:
        """Shortest tour (first one on ties)"""
        return min(self.chromosomes, key=lambda c: c.fitness)

    def best_fitness(self) -> float:
        return min(self.fitness_scores())

    def average_fitness(self) -> float:
        return float(np.mean(self.fitness_scores()))

    def ranked(self) -> List[TourChromosome]:
        """Tours sorted ascending by fitness; stable for equal lengths"""
        return sorted(self.chromosomes, key=lambda c: c.fitness)


class StochasticInitializer:
    """Builds random tours biased toward locally short edges"""

    name = "stochastic_initialization"

    def __init__(self, distance_model: DistanceModel, start_offset: int = 1):
        """Initialize population creator

        Args:
            distance_model: Edge weights for the problem
            start_offset: Leading cities 0..k-1 pinned at positions 0..k-1
        """
        self.distance_model = distance_model
        self.start_offset = start_offset
        self.pinned = list(range(start_offset))
        self.movable = list(range(start_offset, distance_model.city_count))

    def create_tour(self, rng: Optional[random.Random] = None) -> TourChromosome:
        """Build one tour

        Starting from the pinned prefix, repeatedly compute the mean edge
        weight from the last placed city to every unplaced city, then try
        unplaced cities in random order and accept the first one at or
        below the mean. The nearest remaining city is accepted if rounding
        leaves no candidate at or below the mean.

        Args:
            rng: Random source (module-level random if omitted)

        Returns:
            A new, unevaluated TourChromosome
        """
        rng = rng if rng is not None else random

        remaining = self.movable.copy()
        rng.shuffle(remaining)

        genes = self.pinned.copy()
        if not genes:
            genes.append(remaining.pop(0))

        while remaining:
            if len(remaining) == 1:
                genes.append(remaining.pop())
                break

            last = genes[-1]
            mean = self.distance_model.mean_distance(last, remaining)

            accepted = None
            for candidate in rng.sample(remaining, len(remaining)):
                if self.distance_model.distance(last, candidate) <= mean:
                    accepted = candidate
                    break

            if accepted is None:
                accepted = self.distance_model.nearest(last, remaining)
                logger.debug(f"No candidate at or below mean {mean:.2f} from city {last}; "
                             f"falling back to nearest city {accepted}")

            remaining.remove(accepted)
            genes.append(accepted)

        chromosome = TourChromosome(genes, self.start_offset)
        chromosome.creation_method = self.name
        chromosome.generation = 0
        return chromosome

    def create_population(self, size: int, rng: Optional[random.Random] = None) -> Population:
        """Create and evaluate an initial population

        Args:
            size: Population size
            rng: Random source

        Returns:
            Population with every tour evaluated
        """
        logger.debug(f"Creating population of {size} tours over {self.distance_model.city_count} cities")

        population = Population([self.create_tour(rng) for _ in range(size)])
        population.evaluate(self.distance_model)
        return population
