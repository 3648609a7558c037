#!/usr/bin/env python3
"""
Convergence Detection for Genetic Algorithm
Stagnation-based early termination when the best tour length stops changing
"""

import logging
from enum import Enum
from typing import Dict, Any, List, Optional

logger = logging.getLogger(__name__)


class FitnessTrend(Enum):
    """Outcome of comparing a generation's best with the previous one"""
    IMPROVED = "improved"
    UNCHANGED = "unchanged"
    WORSENED = "worsened"


class StagnationDetector:
    """Counts consecutive generations whose best fitness did not change"""

    def __init__(self, stagnation_limit: int):
        """Initialize detector

        Args:
            stagnation_limit: Consecutive unchanged generations that signal convergence
        """
        self.stagnation_limit = stagnation_limit
        self.reset()

    def reset(self, initial_best: Optional[float] = None) -> None:
        """Start tracking a new run"""
        self.stagnation_count = 0
        self.previous_best = initial_best
        self.best_fitness = initial_best
        self.last_improvement_generation = 0
        self.history: List[float] = []

    def update(self, generation: int, current_best: float) -> FitnessTrend:
        """Record one generation's best fitness

        Equal to the previous generation: the counter grows. Better: the
        counter resets and the run best is updated if beaten. Worse: the counter
        resets and the recorded best is kept. The previous-generation
        reference always moves to the current value.

        Args:
            generation: Generation index
            current_best: Best (lowest) fitness in the generation

        Returns:
            FitnessTrend for this generation
        """
        self.history.append(current_best)

        if self.previous_best is not None and current_best == self.previous_best:
            self.stagnation_count += 1
            trend = FitnessTrend.UNCHANGED
        elif self.previous_best is None or current_best < self.previous_best:
            if self.best_fitness is None or current_best < self.best_fitness:
                self.best_fitness = current_best
                self.last_improvement_generation = generation
            self.stagnation_count = 0
            trend = FitnessTrend.IMPROVED
        else:
            self.stagnation_count = 0
            trend = FitnessTrend.WORSENED
            logger.warning(f"Best fitness worsened at generation {generation}: "
                           f"{self.previous_best} -> {current_best}")

        self.previous_best = current_best
        return trend

    @property
    def converged(self) -> bool:
        return self.stagnation_count >= self.stagnation_limit

    def get_convergence_stats(self) -> Dict[str, Any]:
        """Get convergence statistics"""
        return {
            'stagnation_count': self.stagnation_count,
            'stagnation_limit': self.stagnation_limit,
            'best_fitness': self.best_fitness,
            'last_improvement_generation': self.last_improvement_generation,
        }
