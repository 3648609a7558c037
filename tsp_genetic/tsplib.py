#!/usr/bin/env python3
"""
TSPLIB Problem Reader
Loads city coordinates and the edge weight type from .tsp files
"""

import os
import re
import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

import numpy as np

from .distance import EdgeWeightType
from .errors import ConfigurationError, TSPLIBFormatError

logger = logging.getLogger(__name__)

_HEADER_PATTERN = re.compile(r'^\s*([A-Za-z_]+)\s*:\s*(.*?)\s*$')
_SECTION_END = ('EOF', 'DISPLAY_DATA_SECTION', 'TOUR_SECTION', 'EDGE_WEIGHT_SECTION')


@dataclass
class TSPProblem:
    """A symmetric TSPLIB instance with 2-D node coordinates"""
    name: str
    dimension: int
    edge_weight_type: EdgeWeightType
    coordinates: np.ndarray
    comment: str = ""

    @property
    def city_count(self) -> int:
        return self.dimension

    def __repr__(self) -> str:
        return (f"TSPProblem(name={self.name!r}, dimension={self.dimension}, "
                f"edge_weight_type={self.edge_weight_type.value})")


def parse_problem(text: str, default_name: str = "unnamed") -> TSPProblem:
    """Parse TSPLIB text

    Args:
        text: Contents of a .tsp file
        default_name: Name used when the file has no NAME header

    Returns:
        TSPProblem

    Raises:
        TSPLIBFormatError: If the content is malformed or uses an unsupported metric
    """
    headers: Dict[str, str] = {}
    coordinates: List[Tuple[float, float]] = []
    in_coords = False

    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith('NODE_COORD_SECTION'):
            in_coords = True
            continue
        if upper.startswith(_SECTION_END):
            if in_coords or upper.startswith('EOF'):
                break
            raise TSPLIBFormatError(f"Line {line_number}: unsupported section {line.split()[0]}")

        if in_coords:
            parts = line.split()
            if len(parts) < 3:
                raise TSPLIBFormatError(f"Line {line_number}: expected 'index x y', got {line!r}")
            try:
                coordinates.append((float(parts[1]), float(parts[2])))
            except ValueError:
                raise TSPLIBFormatError(
                    f"Line {line_number}: non-numeric coordinates in {line!r}") from None
            continue

        match = _HEADER_PATTERN.match(line)
        if not match:
            raise TSPLIBFormatError(f"Line {line_number}: expected 'KEY : VALUE', got {line!r}")
        headers[match.group(1).upper()] = match.group(2)

    problem_type = headers.get('TYPE', 'TSP').upper()
    if problem_type != 'TSP':
        raise TSPLIBFormatError(f"Unsupported problem type: {problem_type}")

    if 'EDGE_WEIGHT_TYPE' not in headers:
        raise TSPLIBFormatError("Missing EDGE_WEIGHT_TYPE header")
    try:
        edge_weight_type = EdgeWeightType.parse(headers['EDGE_WEIGHT_TYPE'])
    except ConfigurationError as e:
        raise TSPLIBFormatError(str(e)) from None

    if not coordinates:
        raise TSPLIBFormatError("No NODE_COORD_SECTION coordinates found")

    if 'DIMENSION' in headers:
        try:
            dimension = int(headers['DIMENSION'])
        except ValueError:
            raise TSPLIBFormatError(f"Invalid DIMENSION: {headers['DIMENSION']!r}") from None
        if dimension != len(coordinates):
            raise TSPLIBFormatError(
                f"DIMENSION is {dimension} but {len(coordinates)} coordinates were read")
    else:
        dimension = len(coordinates)

    return TSPProblem(
        name=headers.get('NAME', default_name),
        dimension=dimension,
        edge_weight_type=edge_weight_type,
        coordinates=np.array(coordinates, dtype=float),
        comment=headers.get('COMMENT', ''),
    )


def load_problem(path: Union[str, os.PathLike]) -> TSPProblem:
    """Load a TSPLIB .tsp file

    Raises:
        FileNotFoundError: If the file does not exist
        TSPLIBFormatError: If the file cannot be parsed
    """
    path = os.fspath(path)
    if not os.path.exists(path):
        raise FileNotFoundError(f"TSP file not found: {path}")

    with open(path, 'r') as f:
        text = f.read()

    default_name = os.path.splitext(os.path.basename(path))[0]
    problem = parse_problem(text, default_name=default_name)
    logger.info(f"Loaded {problem.name}: {problem.dimension} cities, "
                f"{problem.edge_weight_type.value}")
    return problem
