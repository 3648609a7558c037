#!/usr/bin/env python3
"""
Genetic TSP Package
Genetic algorithm for the Traveling Salesman Problem over TSPLIB ATT / EUC_2D instances
"""

# Core components
from .distance import DistanceModel, EdgeWeightType
from .chromosome import TourChromosome
from .population import Population, StochasticInitializer
from .operators import HeuristicCrossover, SegmentSwapMutation
from .selection import BestChromosomesSelector
from .convergence import StagnationDetector, FitnessTrend
from .optimizer import (
    TSPGeneticOptimizer, GAResults, RunState, RunHandle,
    initialize_run, evolve, reset
)

# Configuration
from .config import (
    GAConfig, RunParameters, CrossoverFallback,
    estimate_population_size, load_config
)

# Errors
from .errors import (
    TSPGeneticError, ConfigurationError, InvariantViolation,
    RunStateError, TSPLIBFormatError
)

# Collaborators
from .tsplib import TSPProblem, load_problem, parse_problem
from .experiment import (
    ExperimentRunner, ExperimentSummary, RunRecord, KNOWN_OPTIMA,
    format_summary, write_report, percent_above_optimal
)

from .common import setup_logging

__version__ = "1.0.0"

__all__ = [
    # Core
    'DistanceModel',
    'EdgeWeightType',
    'TourChromosome',
    'Population',
    'StochasticInitializer',
    'HeuristicCrossover',
    'SegmentSwapMutation',
    'BestChromosomesSelector',
    'StagnationDetector',
    'FitnessTrend',
    'TSPGeneticOptimizer',
    'GAResults',
    'RunState',
    'RunHandle',
    'initialize_run',
    'evolve',
    'reset',

    # Configuration
    'GAConfig',
    'RunParameters',
    'CrossoverFallback',
    'estimate_population_size',
    'load_config',

    # Errors
    'TSPGeneticError',
    'ConfigurationError',
    'InvariantViolation',
    'RunStateError',
    'TSPLIBFormatError',

    # Collaborators
    'TSPProblem',
    'load_problem',
    'parse_problem',
    'ExperimentRunner',
    'ExperimentSummary',
    'RunRecord',
    'KNOWN_OPTIMA',
    'format_summary',
    'write_report',
    'percent_above_optimal',

    'setup_logging',
]
