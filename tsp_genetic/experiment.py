#!/usr/bin/env python3
"""
Repeated TSP Experiments
Runs one problem several times and aggregates the results
"""

import os
import time
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

import numpy as np

from .config import GAConfig
from .optimizer import RunHandle, RunState, initialize_run, evolve, reset
from .tsplib import TSPProblem

logger = logging.getLogger(__name__)

# Best known tour lengths for reference instances
KNOWN_OPTIMA = {
    'wi29': 27603,
    'att48': 10628,
    'eil101': 629,
    'a280': 2579,
}


def percent_above_optimal(fitness: float, optimal: Optional[float]) -> Optional[float]:
    """Gap to the optimum relative to the found length: 100 * (f - opt) / f"""
    if optimal is None or fitness <= 0:
        return None
    return 100.0 * (fitness - optimal) / fitness


@dataclass
class RunRecord:
    """Outcome of one run"""
    iteration: int
    best_fitness: float
    best_tour: List[int]
    termination_reason: RunState
    generations: int
    running_time: float
    percent_above_optimal: Optional[float] = None


@dataclass
class ExperimentSummary:
    """Aggregate statistics over all runs"""
    problem_name: str
    iterations: int
    optimal: Optional[float]
    average_fitness: float
    average_percent: Optional[float]
    average_running_time: float
    best_fitness: float
    best_percent: Optional[float]
    best_tour: List[int]
    converged_runs: int
    records: List[RunRecord] = field(default_factory=list)


class ExperimentRunner:
    """Runs a TSP instance repeatedly with the same static parameters"""

    def __init__(self, problem: TSPProblem, config: Optional[GAConfig] = None,
                 optimal: Optional[float] = None):
        """Initialize experiment

        Args:
            problem: Loaded TSPLIB instance
            config: GA configuration shared by every run
            optimal: Known optimal length (looked up by name if omitted)
        """
        self.problem = problem
        self.config = config or GAConfig()
        self.optimal = optimal if optimal is not None else KNOWN_OPTIMA.get(problem.name)
        self.handle: RunHandle = initialize_run(
            problem.dimension, problem.coordinates, problem.edge_weight_type,
            config=self.config)
        self.records: List[RunRecord] = []

    def run(self, iterations: int = 1) -> ExperimentSummary:
        """Evolve the problem `iterations` times and summarize

        Args:
            iterations: Number of independent runs

        Returns:
            ExperimentSummary over all runs
        """
        if iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {iterations}")

        self.records = []
        for iteration in range(1, iterations + 1):
            if iteration > 1:
                reset(self.handle)

            start_time = time.time()
            best_tour, best_fitness, reason = evolve(self.handle)
            running_time = time.time() - start_time

            record = RunRecord(
                iteration=iteration,
                best_fitness=best_fitness,
                best_tour=best_tour,
                termination_reason=reason,
                generations=self.handle.last_results.total_generations,
                running_time=running_time,
                percent_above_optimal=percent_above_optimal(best_fitness, self.optimal),
            )
            self.records.append(record)

            logger.info(f"Run {iteration}/{iterations}: length {best_fitness:.0f}, "
                        f"{reason.value} after {record.generations} generations, "
                        f"{running_time:.2f}s")

        return self.summarize()

    def summarize(self) -> ExperimentSummary:
        """Aggregate the recorded runs"""
        if not self.records:
            raise ValueError("No runs recorded")

        fitnesses = [r.best_fitness for r in self.records]
        best_record = min(self.records, key=lambda r: r.best_fitness)
        percents = [r.percent_above_optimal for r in self.records
                    if r.percent_above_optimal is not None]

        return ExperimentSummary(
            problem_name=self.problem.name,
            iterations=len(self.records),
            optimal=self.optimal,
            average_fitness=float(np.mean(fitnesses)),
            average_percent=float(np.mean(percents)) if percents else None,
            average_running_time=float(np.mean([r.running_time for r in self.records])),
            best_fitness=best_record.best_fitness,
            best_percent=percent_above_optimal(best_record.best_fitness, self.optimal),
            best_tour=list(best_record.best_tour),
            converged_runs=sum(1 for r in self.records if r.termination_reason is RunState.CONVERGED),
            records=list(self.records),
        )


def format_summary(summary: ExperimentSummary) -> str:
    """Human-readable summary block"""
    def fmt_percent(value: Optional[float]) -> str:
        return f"{value:.2f}%" if value is not None else "n/a"

    lines = [
        "-" * 50,
        f"PROBLEM: {summary.problem_name}",
        f"RUNS: {summary.iterations} ({summary.converged_runs} converged early)",
        f"AVERAGE: {summary.average_fitness:.1f}",
        f"AVERAGE PERCENT: {fmt_percent(summary.average_percent)}",
        f"AVERAGE RUNNING TIME: {summary.average_running_time:.3f} seconds",
        f"BEST: {summary.best_fitness:.0f}",
        f"PERCENTAGE: {fmt_percent(summary.best_percent)}",
    ]
    if summary.optimal is not None:
        lines.append(f"OPTIMAL: {summary.optimal:.0f}")
    return "\n".join(lines)


def write_report(summary: ExperimentSummary, path: Union[str, os.PathLike]) -> str:
    """Write per-run results and the summary block to a text file

    Each run is one tab-separated line: length, running time, percent above
    optimal.

    Returns:
        Path of the written report
    """
    path = os.fspath(path)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, 'w') as f:
        for record in summary.records:
            percent = (f"{record.percent_above_optimal:.4f}"
                       if record.percent_above_optimal is not None else "n/a")
            f.write(f"{record.best_fitness:.0f}\t{record.running_time:.3f} seconds\t{percent}\n")
        f.write("\n")
        f.write(format_summary(summary))
        f.write("\n")

    logger.info(f"Report written to {path}")
    return path
