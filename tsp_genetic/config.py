#!/usr/bin/env python3
"""
Genetic TSP Configuration
Run configuration, derived defaults and config-file loading
"""

import os
import json
import math
import numbers
from dataclasses import dataclass, asdict, fields
from enum import Enum
from typing import Dict, Any, Optional, Union

import yaml

from .common import round_half_up
from .errors import ConfigurationError

# Smallest instance the operators and the default-size formula accept
MIN_CITIES = 4

DEFAULT_MUTATION_RATE = 3          # 1 in 3 tours is mutated
DEFAULT_CULLING_FRACTION = 0.75
DEFAULT_START_OFFSET = 1
DEFAULT_ELITE_COUNT = 1
DEFAULT_STAGNATION_FRACTION = 0.3


class CrossoverFallback(Enum):
    """How crossover picks a city when both parents' candidates are placed"""
    NEAREST = "nearest"    # Nearest unplaced city, lowest index on ties
    RANDOM = "random"      # Uniformly random unplaced city


def estimate_population_size(city_count: int) -> int:
    """Closed-form population size estimate for a permutation GA

    round(ln(1 - 0.99^(1/n)) / ln((n-3)/(n-1)))

    The same estimate is used as the default generation budget. Both are
    overridable independently.

    Args:
        city_count: Number of cities n (at least 4)

    Returns:
        Estimated size, at least 1
    """
    if city_count < MIN_CITIES:
        raise ConfigurationError(
            f"At least {MIN_CITIES} cities are required, got {city_count}")

    numerator = math.log(1.0 - math.pow(0.99, 1.0 / city_count))
    denominator = math.log((city_count - 3) / (city_count - 1))
    return max(1, int(round_half_up(numerator / denominator)))


def _require_integer(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def _require_real(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")


@dataclass(frozen=True)
class RunParameters:
    """Fully resolved, validated parameters for one run"""
    city_count: int
    population_size: int
    max_generations: int
    mutation_rate: int
    culling_fraction: float
    start_offset: int
    elite_count: int
    stagnation_fraction: float
    crossover_fallback: CrossoverFallback
    max_workers: int
    seed: Optional[int]
    verbose: bool
    progress_interval: int

    @property
    def stagnation_limit(self) -> int:
        """Consecutive unchanged generations that end the run"""
        return max(1, math.ceil(self.stagnation_fraction * self.max_generations))


@dataclass
class GAConfig:
    """Configuration for the genetic TSP engine"""
    population_size: Optional[int] = None      # None -> estimate_population_size(n)
    max_generations: Optional[int] = None      # None -> estimate_population_size(n)
    mutation_rate: int = DEFAULT_MUTATION_RATE  # Inverse probability: 1/m tours mutate
    culling_fraction: float = DEFAULT_CULLING_FRACTION
    start_offset: int = DEFAULT_START_OFFSET
    elite_count: int = DEFAULT_ELITE_COUNT
    stagnation_fraction: float = DEFAULT_STAGNATION_FRACTION
    crossover_fallback: CrossoverFallback = CrossoverFallback.NEAREST
    max_workers: int = 1
    seed: Optional[int] = None
    verbose: bool = False
    progress_interval: int = 10

    def __post_init__(self):
        if isinstance(self.crossover_fallback, str):
            try:
                self.crossover_fallback = CrossoverFallback(self.crossover_fallback.lower())
            except ValueError:
                raise ConfigurationError(
                    f"Unknown crossover fallback: {self.crossover_fallback!r}") from None

    def resolve(self, city_count: int) -> RunParameters:
        """Fill derived defaults for a problem size and validate everything

        Args:
            city_count: Number of cities in the problem

        Returns:
            Validated RunParameters

        Raises:
            ConfigurationError: If any parameter has the wrong type or is out of range
        """
        estimate = estimate_population_size(city_count)
        population_size = self.population_size if self.population_size is not None else estimate
        max_generations = self.max_generations if self.max_generations is not None else estimate

        for name, value in (('population_size', population_size),
                            ('max_generations', max_generations),
                            ('mutation_rate', self.mutation_rate),
                            ('start_offset', self.start_offset),
                            ('elite_count', self.elite_count),
                            ('max_workers', self.max_workers),
                            ('progress_interval', self.progress_interval)):
            _require_integer(name, value)
        for name, value in (('culling_fraction', self.culling_fraction),
                            ('stagnation_fraction', self.stagnation_fraction)):
            _require_real(name, value)

        if population_size < 1:
            raise ConfigurationError(f"population_size must be >= 1, got {population_size}")
        if max_generations < 1:
            raise ConfigurationError(f"max_generations must be >= 1, got {max_generations}")
        if self.mutation_rate < 1:
            raise ConfigurationError(f"mutation_rate must be >= 1, got {self.mutation_rate}")
        if not 0.0 < self.culling_fraction <= 1.0:
            raise ConfigurationError(
                f"culling_fraction must be in (0, 1], got {self.culling_fraction}")
        if not 0 <= self.start_offset <= city_count - 2:
            raise ConfigurationError(
                f"start_offset must be in [0, {city_count - 2}] for {city_count} cities, "
                f"got {self.start_offset}")
        if not 0 <= self.elite_count <= population_size:
            raise ConfigurationError(
                f"elite_count must be in [0, {population_size}], got {self.elite_count}")
        if not 0.0 < self.stagnation_fraction <= 1.0:
            raise ConfigurationError(
                f"stagnation_fraction must be in (0, 1], got {self.stagnation_fraction}")
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.progress_interval < 1:
            raise ConfigurationError(
                f"progress_interval must be >= 1, got {self.progress_interval}")

        return RunParameters(
            city_count=city_count,
            population_size=population_size,
            max_generations=max_generations,
            mutation_rate=self.mutation_rate,
            culling_fraction=self.culling_fraction,
            start_offset=self.start_offset,
            elite_count=self.elite_count,
            stagnation_fraction=self.stagnation_fraction,
            crossover_fallback=self.crossover_fallback,
            max_workers=self.max_workers,
            seed=self.seed,
            verbose=self.verbose,
            progress_interval=self.progress_interval,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary view, suitable for JSON/YAML output"""
        data = asdict(self)
        data['crossover_fallback'] = self.crossover_fallback.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GAConfig':
        """Build a configuration from a mapping, rejecting unknown keys"""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)


def load_config(path: Union[str, os.PathLike]) -> GAConfig:
    """Load a GAConfig from a JSON or YAML file

    Args:
        path: Path ending in .json, .yaml or .yml

    Returns:
        GAConfig with the file's overrides applied to the defaults
    """
    path = os.fspath(path)
    extension = os.path.splitext(path)[1].lower()

    with open(path, 'r') as f:
        if extension == '.json':
            data = json.load(f)
        elif extension in ('.yaml', '.yml'):
            data = yaml.safe_load(f)
        else:
            raise ConfigurationError(f"Unsupported config file format: {path}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must contain a mapping: {path}")

    return GAConfig.from_dict(data)
