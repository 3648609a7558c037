#!/usr/bin/env python3
"""
Common helpers for the genetic TSP engine
Logging setup and small numeric utilities
"""

import sys
import math
import logging


def setup_logging(level=logging.INFO):
    """Set up logging configuration"""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def round_half_up(value: float) -> float:
    """Round to the nearest integer, halves away from -inf (TSPLIB nint)"""
    return float(math.floor(value + 0.5))


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Safely divide with default for division by zero"""
    return numerator / denominator if denominator != 0 else default
