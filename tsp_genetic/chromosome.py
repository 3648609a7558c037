#!/usr/bin/env python3
"""
Genetic Algorithm Chromosome Classes
Implements the permutation-encoded tour representation for GA optimization
"""

from typing import List, Optional, Sequence, Dict, Any

from .distance import DistanceModel
from .errors import InvariantViolation


class TourChromosome:
    """Represents a closed tour as a permutation of city indices (GA chromosome)"""

    def __init__(self, genes: Sequence[int], start_offset: int = 1):
        """Initialize tour chromosome

        Args:
            genes: City indices in visiting order
            start_offset: Number of leading positions pinned in place
        """
        self.genes = list(genes)
        self.start_offset = start_offset

        # Cached fitness (closed tour length, lower = better)
        self.fitness = None

        # Metadata
        self.generation = 0                # Generation when created
        self.creation_method = "unknown"   # How chromosome was created

    def __len__(self) -> int:
        return len(self.genes)

    def __getitem__(self, index):
        return self.genes[index]

    def __iter__(self):
        return iter(self.genes)

    def _invalidate_cache(self) -> None:
        """Invalidate cached calculations"""
        self.fitness = None

    @property
    def pinned_prefix(self) -> List[int]:
        """Leading cities that never move"""
        return self.genes[:self.start_offset]

    def evaluate(self, distance_model: DistanceModel) -> float:
        """Get the tour length, recomputing it if the cache is stale"""
        if self.fitness is None:
            self.fitness = distance_model.tour_length(self.genes)
        return self.fitness

    def swap_segments(self, first_start: int, second_start: int, length: int) -> None:
        """Exchange two equal-length, non-overlapping blocks of genes

        Args:
            first_start: Index of the first block (must come first)
            second_start: Index of the second block
            length: Block length
        """
        if length < 1:
            raise ValueError(f"Segment length must be positive, got {length}")
        if first_start < self.start_offset:
            raise ValueError("Segments must not touch the pinned prefix")
        if first_start + length > second_start or second_start + length > len(self.genes):
            raise ValueError(
                f"Segments [{first_start}, {first_start + length}) and "
                f"[{second_start}, {second_start + length}) overlap or exceed the tour")

        first = self.genes[first_start:first_start + length]
        second = self.genes[second_start:second_start + length]
        self.genes[first_start:first_start + length] = second
        self.genes[second_start:second_start + length] = first
        self._invalidate_cache()

    def is_valid_permutation(self, city_count: Optional[int] = None) -> bool:
        """Check that genes are a permutation of 0..n-1"""
        n = len(self.genes) if city_count is None else city_count
        return len(self.genes) == n and sorted(self.genes) == list(range(n))

    def validate(self, city_count: int, pinned_prefix: Optional[Sequence[int]] = None,
                 operator: Optional[str] = None, generation: Optional[int] = None) -> None:
        """Fail fast if the tour violates the permutation invariant

        Args:
            city_count: Expected number of cities
            pinned_prefix: Expected leading cities, if any
            operator: Operator that produced the tour (for diagnostics)
            generation: Generation index (for diagnostics)

        Raises:
            InvariantViolation: If the tour is not a valid permutation or
                its pinned prefix has moved
        """
        if not self.is_valid_permutation(city_count):
            missing = sorted(set(range(city_count)) - set(self.genes))
            seen = set()
            duplicates = sorted({g for g in self.genes if g in seen or seen.add(g)})
            raise InvariantViolation(
                f"Tour is not a permutation of 0..{city_count - 1}: "
                f"length={len(self.genes)}, missing={missing}, duplicates={duplicates}",
                operator=operator, generation=generation, genes=self.genes)

        if pinned_prefix is not None and self.genes[:len(pinned_prefix)] != list(pinned_prefix):
            raise InvariantViolation(
                f"Pinned prefix changed: expected {list(pinned_prefix)}, "
                f"got {self.genes[:len(pinned_prefix)]}",
                operator=operator, generation=generation, genes=self.genes)

    def get_tour_stats(self, distance_model: DistanceModel) -> Dict[str, Any]:
        """Get summary statistics for the tour"""
        edges = [distance_model.distance(self.genes[i], self.genes[(i + 1) % len(self.genes)])
                 for i in range(len(self.genes))]
        return {
            'total_length': self.evaluate(distance_model),
            'city_count': len(self.genes),
            'longest_edge': max(edges) if edges else 0.0,
            'shortest_edge': min(edges) if edges else 0.0,
            'generation': self.generation,
            'creation_method': self.creation_method,
        }

    def copy(self) -> 'TourChromosome':
        """Create a deep copy of the chromosome"""
        new_chromosome = TourChromosome(self.genes, self.start_offset)
        new_chromosome.fitness = self.fitness
        new_chromosome.generation = self.generation
        new_chromosome.creation_method = self.creation_method
        return new_chromosome

    def __eq__(self, other) -> bool:
        if not isinstance(other, TourChromosome):
            return NotImplemented
        return self.genes == other.genes

    __hash__ = None

    def __str__(self) -> str:
        """String representation of chromosome"""
        fitness = f"{self.fitness:.0f}" if self.fitness is not None else "?"
        return f"TourChromosome({len(self.genes)} cities, length={fitness}, method={self.creation_method})"

    def __repr__(self) -> str:
        return self.__str__()
