#!/usr/bin/env python3
"""
Genetic Algorithm Operators
Permutation-preserving crossover and mutation for tour chromosomes
"""

import random
import logging
from typing import Dict, List, Optional, Sequence

from .chromosome import TourChromosome
from .config import CrossoverFallback
from .distance import DistanceModel

logger = logging.getLogger(__name__)


class HeuristicCrossover:
    """Grefenstette greedy crossover

    The child is grown one city at a time. From the current city, each
    parent proposes the city that follows it in that parent's tour and the
    shorter edge wins. A city already in the child is never chosen again:
    the other parent's proposal is used instead, and when both are placed
    the configured fallback picks an unplaced city.
    """

    name = "heuristic_crossover"

    def __init__(self, distance_model: DistanceModel, start_offset: int = 1,
                 fallback: CrossoverFallback = CrossoverFallback.NEAREST):
        """Initialize crossover operator

        Args:
            distance_model: Edge weights used to compare proposals
            start_offset: Number of pinned leading positions
            fallback: Rule used when both proposals are already placed
        """
        self.distance_model = distance_model
        self.start_offset = start_offset
        self.fallback = fallback

    def _next_city(self, genes: Sequence[int], positions: Dict[int, int], city: int) -> int:
        """City following `city` in a parent, wrapping past the pinned prefix"""
        index = positions[city] + 1
        if index >= len(genes):
            index = self.start_offset
        return genes[index]

    def _fallback_city(self, current: int, unplaced: List[int], rng) -> int:
        if self.fallback is CrossoverFallback.RANDOM:
            return rng.choice(sorted(unplaced))
        return self.distance_model.nearest(current, unplaced)

    def crossover(self, parent1: TourChromosome, parent2: TourChromosome,
                  rng: Optional[random.Random] = None) -> TourChromosome:
        """Combine two parents into one child

        Args:
            parent1: First parent (read-only)
            parent2: Second parent with the same pinned prefix (read-only)
            rng: Random source for the RANDOM fallback

        Returns:
            New, unevaluated child chromosome
        """
        rng = rng if rng is not None else random

        genes1, genes2 = parent1.genes, parent2.genes
        if len(genes1) != len(genes2):
            raise ValueError(f"Parents differ in length: {len(genes1)} != {len(genes2)}")

        positions1 = {city: i for i, city in enumerate(genes1)}
        positions2 = {city: i for i, city in enumerate(genes2)}

        if self.start_offset > 0:
            child = list(genes1[:self.start_offset])
        else:
            child = [genes1[0]]
        placed = set(child)

        while len(child) < len(genes1):
            current = child[-1]
            candidate1 = self._next_city(genes1, positions1, current)
            candidate2 = self._next_city(genes2, positions2, current)

            if self.distance_model.distance(current, candidate1) <= \
                    self.distance_model.distance(current, candidate2):
                preferred, other = candidate1, candidate2
            else:
                preferred, other = candidate2, candidate1

            if preferred not in placed:
                chosen = preferred
            elif other not in placed:
                chosen = other
            else:
                unplaced = [city for city in genes1 if city not in placed]
                chosen = self._fallback_city(current, unplaced, rng)

            child.append(chosen)
            placed.add(chosen)

        offspring = TourChromosome(child, self.start_offset)
        offspring.creation_method = self.name
        return offspring


class SegmentSwapMutation:
    """2-opt style mutation exchanging two equal-length blocks of the tour"""

    name = "segment_swap_mutation"

    def __init__(self, mutation_rate: int = 3, start_offset: int = 1):
        """Initialize mutation operator

        Args:
            mutation_rate: Inverse probability m; a tour mutates with probability 1/m
            start_offset: Number of pinned leading positions
        """
        self.mutation_rate = mutation_rate
        self.start_offset = start_offset

    def choose_segments(self, tour_length: int, rng) -> tuple:
        """Pick (first_start, second_start, length) inside the mutable region"""
        mutable = tour_length - self.start_offset
        if mutable < 2:
            raise ValueError(f"Need at least two movable positions, got {mutable}")

        length = rng.randint(1, mutable // 2)
        first_start = rng.randint(self.start_offset, tour_length - 2 * length)
        second_start = rng.randint(first_start + length, tour_length - length)
        return first_start, second_start, length

    def mutate(self, chromosome: TourChromosome, rng: Optional[random.Random] = None) -> bool:
        """Mutate a tour in place with probability 1/m

        The tour's cached fitness is invalidated when it changes; the
        caller re-evaluates before use.

        Args:
            chromosome: Tour to perturb
            rng: Random source

        Returns:
            True if the tour was mutated
        """
        rng = rng if rng is not None else random

        if rng.randrange(self.mutation_rate) != 0:
            return False

        first_start, second_start, length = self.choose_segments(len(chromosome), rng)
        chromosome.swap_segments(first_start, second_start, length)
        chromosome.creation_method = f"{chromosome.creation_method}+{self.name}"
        return True
