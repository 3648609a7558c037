#!/usr/bin/env python3
"""
Genetic TSP Exceptions
Error hierarchy shared by the engine and its collaborators
"""

from typing import List, Optional


class TSPGeneticError(Exception):
    """Base exception for the genetic TSP engine"""
    pass


class ConfigurationError(TSPGeneticError):
    """Invalid problem or run configuration, raised before evolution starts"""
    pass


class RunStateError(TSPGeneticError):
    """Operation not allowed in the run's current state"""
    pass


class TSPLIBFormatError(TSPGeneticError):
    """Malformed or unsupported TSPLIB problem file"""
    pass


class InvariantViolation(TSPGeneticError):
    """An operator produced a tour that is not a valid permutation

    This is a defect, not a recoverable condition. The run is aborted and
    the offending operator and generation are reported.
    """

    def __init__(self, message: str, operator: Optional[str] = None,
                 generation: Optional[int] = None, genes: Optional[List[int]] = None):
        self.operator = operator
        self.generation = generation
        self.genes = list(genes) if genes is not None else None

        details = []
        if operator is not None:
            details.append(f"operator={operator}")
        if generation is not None:
            details.append(f"generation={generation}")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)
