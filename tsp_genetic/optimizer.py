#!/usr/bin/env python3
"""
Genetic Algorithm TSP Optimizer
Generation loop, run state and the run-level interface used by collaborators
"""

import time
import random
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Optional, Tuple, Callable, Sequence, Union

import numpy as np

from .chromosome import TourChromosome
from .common import safe_divide
from .config import GAConfig, RunParameters
from .convergence import StagnationDetector, FitnessTrend
from .distance import DistanceModel, EdgeWeightType
from .errors import ConfigurationError, InvariantViolation, RunStateError
from .operators import HeuristicCrossover, SegmentSwapMutation
from .population import Population, StochasticInitializer
from .selection import BestChromosomesSelector

# Configure logging
logger = logging.getLogger(__name__)


class RunState(Enum):
    """Lifecycle of one evolution run"""
    READY = "ready"
    INITIALIZING = "initializing"
    EVOLVING = "evolving"
    CONVERGED = "converged"      # Best fitness stagnated
    EXHAUSTED = "exhausted"      # Generation budget used up

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.CONVERGED, RunState.EXHAUSTED)


@dataclass
class GAResults:
    """Results from genetic algorithm optimization"""
    best_tour: List[int]
    best_fitness: float
    termination_reason: RunState
    generation_found: int
    total_generations: int
    total_time: float
    fitness_history: List[float] = field(default_factory=list)   # Best per generation, initial first
    average_history: List[float] = field(default_factory=list)   # Mean per generation, initial first
    stats: Dict[str, Any] = field(default_factory=dict)

    def as_tuple(self) -> Tuple[List[int], float, RunState]:
        """(best tour, best fitness, termination reason)"""
        return list(self.best_tour), self.best_fitness, self.termination_reason


class TSPGeneticOptimizer:
    """Evolves tours for one problem instance

    Composes the stochastic initializer, best-chromosomes selector,
    heuristic crossover and segment-swap mutation. Each call to
    optimize() is one run; reset() prepares the next run with fresh
    randomness and the same parameters.
    """

    def __init__(self, distance_model: DistanceModel, config: Optional[GAConfig] = None):
        """Initialize genetic optimizer

        Args:
            distance_model: Edge weights for the problem
            config: GA configuration parameters

        Raises:
            ConfigurationError: If the configuration does not fit the problem
        """
        self.distance_model = distance_model
        self.config = config or GAConfig()
        self.params: RunParameters = self.config.resolve(distance_model.city_count)

        # Operators
        self.initializer = StochasticInitializer(distance_model, self.params.start_offset)
        self.selector = BestChromosomesSelector(self.params.culling_fraction)
        self.crossover = HeuristicCrossover(distance_model, self.params.start_offset,
                                            self.params.crossover_fallback)
        self.mutation = SegmentSwapMutation(self.params.mutation_rate, self.params.start_offset)
        self.pinned_prefix = list(range(self.params.start_offset))

        self.detector = StagnationDetector(self.params.stagnation_limit)
        self._seed_source = random.Random(self.params.seed)

        self._pool = None

        # Callbacks
        self.generation_callback: Optional[Callable[[int, Population], None]] = None

        self.reset()

    def reset(self) -> None:
        """Clear run state so the next optimize() starts a fresh run"""
        self.rng = random.Random(self._seed_source.getrandbits(64))
        self.state = RunState.READY
        self.generation = 0
        self.population: Optional[Population] = None
        self.best_chromosome: Optional[TourChromosome] = None
        self.best_fitness = float('inf')
        self.best_generation = 0
        self.fitness_history: List[float] = []
        self.average_history: List[float] = []
        self.generation_times: List[float] = []
        self.detector.reset()

    def optimize(self) -> GAResults:
        """Run the genetic algorithm until convergence or the generation budget

        Returns:
            GAResults with the best tour found

        Raises:
            RunStateError: If this run already finished and reset() was not called
            InvariantViolation: If an operator produced an invalid tour
        """
        if self.state is not RunState.READY:
            raise RunStateError(f"Run is {self.state.value}; call reset() before evolving again")

        params = self.params
        logger.info(f"Population size: {params.population_size}, "
                    f"max generations: {params.max_generations}, "
                    f"mutation rate: 1/{params.mutation_rate}, "
                    f"culling fraction: {params.culling_fraction}")

        if params.verbose:
            print(f"🧬 Starting GA optimization:")
            print(f"   Cities: {self.distance_model.city_count} "
                  f"({self.distance_model.edge_weight_type.value})")
            print(f"   Population: {params.population_size}")
            print(f"   Max generations: {params.max_generations}")
            print(f"   Mutation rate: 1/{params.mutation_rate}")
            print(f"   Culling fraction: {params.culling_fraction}")

        start_time = time.time()

        # Initialize population
        self.state = RunState.INITIALIZING
        population = self.initializer.create_population(params.population_size, self.rng)
        for chromosome in population:
            self._check_tour(chromosome, self.initializer.name, 0)

        self.population = population
        self._record_generation(population)
        self.detector.reset(self.best_fitness)
        initial_best = self.best_fitness

        if params.verbose:
            print(f"✅ Initial population created")
            print(f"   Best length: {self.best_fitness:.0f}")
            print(f"   Average length: {self.average_history[-1]:.1f}")

        # Main evolution loop
        self.state = RunState.EVOLVING
        termination = RunState.EXHAUSTED

        with self._executor() as executor:
            self._pool = executor
            try:
                for generation in range(1, params.max_generations + 1):
                    self.generation = generation
                    gen_start_time = time.time()

                    population = self._evolve_generation(population, generation)
                    self.population = population
                    self.generation_times.append(time.time() - gen_start_time)

                    current_best = self._record_generation(population)
                    trend = self.detector.update(generation, current_best)

                    logger.debug(f"Generation {generation}: best={current_best:.0f} "
                                 f"({trend.value}), stagnation={self.detector.stagnation_count}")

                    if params.verbose and (generation % params.progress_interval == 0
                                           or trend is FitnessTrend.IMPROVED):
                        print(f"   Gen {generation:4d}: Best={self.best_fitness:.0f}, "
                              f"Current={current_best:.0f}, Avg={self.average_history[-1]:.1f}, "
                              f"Time={self.generation_times[-1]:.3f}s")

                    if self.generation_callback:
                        self.generation_callback(generation, population)

                    if self.detector.converged:
                        termination = RunState.CONVERGED
                        logger.info(f"Exiting early: best fitness unchanged for "
                                    f"{self.detector.stagnation_count} generations")
                        if params.verbose:
                            print(f"🎯 Converged after {generation} generations")
                        break
            except InvariantViolation as e:
                logger.error(f"Run aborted: {e}")
                raise
            finally:
                self._pool = None

        self.state = termination
        total_time = time.time() - start_time

        results = GAResults(
            best_tour=list(self.best_chromosome.genes),
            best_fitness=self.best_fitness,
            termination_reason=termination,
            generation_found=self.best_generation,
            total_generations=self.generation,
            total_time=total_time,
            fitness_history=list(self.fitness_history),
            average_history=list(self.average_history),
            stats=self._get_optimization_stats(initial_best),
        )

        logger.info(f"Run {termination.value} after {self.generation} generations: "
                    f"best length {self.best_fitness:.0f} (found at generation {self.best_generation})")

        if params.verbose:
            print(f"🏁 Optimization completed:")
            print(f"   Best length: {self.best_fitness:.0f}")
            print(f"   Found at generation: {self.best_generation}")
            print(f"   Total time: {total_time:.2f}s")
            print(f"   Termination: {termination.value}")

        return results

    def _executor(self):
        """Thread pool for per-child work, or a serial stand-in"""
        if self.params.max_workers > 1:
            return ThreadPoolExecutor(max_workers=self.params.max_workers,
                                      thread_name_prefix="tsp-ga")
        return _SerialExecutor()

    def _evolve_generation(self, population: Population, generation: int) -> Population:
        """Produce the next generation

        Selection, elite carry-over, then crossover + mutation + evaluation
        for every remaining slot. Parent picks and per-child seeds are
        drawn here, in slot order, so the result does not depend on the
        number of worker threads.
        """
        selected = self.selector.select(population)

        elite_count = min(self.params.elite_count, len(selected))
        next_generation = [selected[i].copy() for i in range(elite_count)]

        tasks = []
        for _ in range(self.params.population_size - elite_count):
            parent1 = selected[self.rng.randrange(len(selected))]
            parent2 = selected[self.rng.randrange(len(selected))]
            tasks.append((parent1, parent2, self.rng.getrandbits(64), generation))

        pool = self._pool if self._pool is not None else _SerialExecutor()
        next_generation.extend(pool.map(self._breed_child, tasks))

        return Population(next_generation)

    def _breed_child(self, task: Tuple[TourChromosome, TourChromosome, int, int]) -> TourChromosome:
        """Crossover, mutation and evaluation for one slot"""
        parent1, parent2, seed, generation = task
        rng = random.Random(seed)

        child = self.crossover.crossover(parent1, parent2, rng)
        self._check_tour(child, self.crossover.name, generation)

        if self.mutation.mutate(child, rng):
            self._check_tour(child, self.mutation.name, generation)

        child.generation = generation
        child.evaluate(self.distance_model)
        return child

    def _check_tour(self, chromosome: TourChromosome, operator: str, generation: int) -> None:
        chromosome.validate(self.distance_model.city_count, self.pinned_prefix,
                            operator=operator, generation=generation)

    def _record_generation(self, population: Population) -> float:
        """Track history and the run's best tour; return the generation's best"""
        fittest = population.get_fittest()
        current_best = fittest.fitness

        self.fitness_history.append(current_best)
        self.average_history.append(population.average_fitness())

        if current_best < self.best_fitness:
            self.best_chromosome = fittest.copy()
            self.best_fitness = current_best
            self.best_generation = self.generation

        return current_best

    def _get_optimization_stats(self, initial_best: float) -> Dict[str, Any]:
        """Summary statistics for the finished run"""
        return {
            'initial_best_fitness': initial_best,
            'improvement': initial_best - self.best_fitness,
            'improvement_percent': safe_divide(100.0 * (initial_best - self.best_fitness),
                                               initial_best),
            'avg_generation_time': float(np.mean(self.generation_times)) if self.generation_times else 0.0,
            'population_size': self.params.population_size,
            'max_generations': self.params.max_generations,
            'convergence': self.detector.get_convergence_stats(),
        }


class _SerialExecutor:
    """In-thread stand-in for ThreadPoolExecutor"""

    def map(self, fn, iterable):
        return [fn(item) for item in iterable]

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        return False


# =============================================================================
# RUN-LEVEL INTERFACE
# =============================================================================

@dataclass
class RunHandle:
    """Static problem data plus the optimizer that owns one run at a time"""
    distance_model: DistanceModel
    optimizer: TSPGeneticOptimizer
    runs_completed: int = 0
    last_results: Optional[GAResults] = None

    @property
    def params(self) -> RunParameters:
        return self.optimizer.params

    @property
    def state(self) -> RunState:
        return self.optimizer.state


def initialize_run(city_count: int,
                   coordinates: Union[Sequence[Sequence[float]], np.ndarray],
                   edge_weight_type: Union[str, EdgeWeightType],
                   population_size: Optional[int] = None,
                   max_generations: Optional[int] = None,
                   mutation_rate: Optional[int] = None,
                   culling_fraction: Optional[float] = None,
                   start_offset: Optional[int] = None,
                   config: Optional[GAConfig] = None,
                   **options) -> RunHandle:
    """Validate a problem and its parameters and prepare a run

    Args:
        city_count: Number of cities
        coordinates: (x, y) per city
        edge_weight_type: 'ATT' or 'EUC_2D'
        population_size: Tours per generation (None -> size estimate)
        max_generations: Generation budget (None -> size estimate)
        mutation_rate: Inverse mutation probability m (default 3)
        culling_fraction: Fraction of each generation kept by selection (default 0.75)
        start_offset: Number of pinned leading cities (default 1)
        config: Base configuration; explicit arguments override it
        **options: Further GAConfig fields (elite_count, seed, max_workers, ...)

    Returns:
        RunHandle ready for evolve()

    Raises:
        ConfigurationError: On any invalid input; no run is started
    """
    distance_model = DistanceModel(coordinates, edge_weight_type)
    if distance_model.city_count != city_count:
        raise ConfigurationError(
            f"city_count={city_count} but {distance_model.city_count} coordinates were given")

    base = config.to_dict() if config is not None else {}
    overrides = {
        'population_size': population_size,
        'max_generations': max_generations,
        'mutation_rate': mutation_rate,
        'culling_fraction': culling_fraction,
        'start_offset': start_offset,
    }
    base.update({key: value for key, value in overrides.items() if value is not None})
    base.update(options)
    run_config = GAConfig.from_dict(base)

    return RunHandle(distance_model, TSPGeneticOptimizer(distance_model, run_config))


def evolve(handle: RunHandle) -> Tuple[List[int], float, RunState]:
    """Run one evolution on a prepared handle

    Returns:
        (best tour, best fitness, RunState.CONVERGED or RunState.EXHAUSTED)
    """
    results = handle.optimizer.optimize()
    handle.runs_completed += 1
    handle.last_results = results
    return results.as_tuple()


def reset(handle: RunHandle) -> None:
    """Prepare the handle for another run with fresh randomization"""
    handle.optimizer.reset()
