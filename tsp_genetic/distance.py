#!/usr/bin/env python3
"""
Distance Model
Edge weights between cities under the TSPLIB ATT and EUC_2D metrics
"""

import logging
from enum import Enum
from typing import Iterable, Sequence, Union

import numpy as np

from .config import MIN_CITIES
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class EdgeWeightType(Enum):
    """Supported TSPLIB edge weight types"""
    ATT = "ATT"          # Pseudo-Euclidean
    EUC_2D = "EUC_2D"    # Rounded Euclidean

    @classmethod
    def parse(cls, tag: Union[str, 'EdgeWeightType']) -> 'EdgeWeightType':
        """Convert a metric tag into an EdgeWeightType

        Raises:
            ConfigurationError: If the tag names an unsupported metric
        """
        if isinstance(tag, cls):
            return tag
        try:
            return cls(str(tag).strip().upper())
        except ValueError:
            supported = ', '.join(t.value for t in cls)
            raise ConfigurationError(
                f"Unsupported edge weight type: {tag!r} (supported: {supported})") from None


def round_att(rij):
    """Ceiling-biased rounding of a pseudo-Euclidean distance

    tij = nint(rij); the result is tij + 1 when tij < rij, else tij.
    Works on scalars and numpy arrays.
    """
    tij = np.floor(np.asarray(rij, dtype=float) + 0.5)
    return np.where(tij < rij, tij + 1.0, tij)


def euc_2d_matrix(coordinates: np.ndarray) -> np.ndarray:
    """Pairwise EUC_2D distances: Euclidean distance rounded half up"""
    dx = coordinates[:, 0][:, np.newaxis] - coordinates[:, 0][np.newaxis, :]
    dy = coordinates[:, 1][:, np.newaxis] - coordinates[:, 1][np.newaxis, :]
    return np.floor(np.sqrt(dx * dx + dy * dy) + 0.5)


def att_matrix(coordinates: np.ndarray) -> np.ndarray:
    """Pairwise ATT (pseudo-Euclidean) distances"""
    dx = coordinates[:, 0][:, np.newaxis] - coordinates[:, 0][np.newaxis, :]
    dy = coordinates[:, 1][:, np.newaxis] - coordinates[:, 1][np.newaxis, :]
    rij = np.sqrt((dx * dx + dy * dy) / 10.0)
    return round_att(rij)


_MATRIX_BUILDERS = {
    EdgeWeightType.ATT: att_matrix,
    EdgeWeightType.EUC_2D: euc_2d_matrix,
}


class DistanceModel:
    """Precomputed edge weights for one problem instance

    The coordinate table and the distance matrix are read-only for the
    lifetime of the model and can be shared between worker threads.
    """

    def __init__(self, coordinates: Union[Sequence[Sequence[float]], np.ndarray],
                 edge_weight_type: Union[str, EdgeWeightType]):
        """Build the distance matrix

        Args:
            coordinates: (x, y) pair for each city, indexed 0..n-1
            edge_weight_type: Metric tag ('ATT' or 'EUC_2D')

        Raises:
            ConfigurationError: On fewer than 4 cities, badly shaped
                coordinates or an unsupported metric
        """
        self.edge_weight_type = EdgeWeightType.parse(edge_weight_type)

        try:
            table = np.array(coordinates, dtype=float)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Coordinates must be numeric (x, y) pairs: {e}") from None

        if table.ndim != 2 or table.shape[1] != 2:
            raise ConfigurationError(
                f"Coordinates must have shape (n, 2), got {table.shape}")
        if table.shape[0] < MIN_CITIES:
            raise ConfigurationError(
                f"At least {MIN_CITIES} cities are required, got {table.shape[0]}")
        if not np.all(np.isfinite(table)):
            raise ConfigurationError("Coordinates must be finite numbers")

        table.setflags(write=False)
        self.coordinates = table
        self.city_count = table.shape[0]

        self.matrix = _MATRIX_BUILDERS[self.edge_weight_type](table)
        np.fill_diagonal(self.matrix, 0.0)
        self.matrix.setflags(write=False)

        logger.debug(f"Built {self.city_count}x{self.city_count} "
                     f"{self.edge_weight_type.value} distance matrix")

    def distance(self, city_a: int, city_b: int) -> float:
        """Edge weight from city_a to city_b"""
        return float(self.matrix[city_a, city_b])

    def tour_length(self, genes: Sequence[int]) -> float:
        """Closed-circuit length: consecutive edges plus last back to first"""
        if len(genes) < 2:
            return 0.0
        order = np.asarray(genes, dtype=np.intp)
        return float(self.matrix[order, np.roll(order, -1)].sum())

    def mean_distance(self, city: int, candidates: Iterable[int]) -> float:
        """Average edge weight from city to each candidate"""
        targets = np.fromiter(candidates, dtype=np.intp)
        if targets.size == 0:
            return 0.0
        return float(self.matrix[city, targets].mean())

    def nearest(self, city: int, candidates: Iterable[int]) -> int:
        """Candidate with the shortest edge from city, lowest index on ties"""
        targets = np.sort(np.fromiter(candidates, dtype=np.intp))
        if targets.size == 0:
            raise ValueError("nearest() needs at least one candidate")
        return int(targets[np.argmin(self.matrix[city, targets])])

    def __len__(self) -> int:
        return self.city_count

    def __repr__(self) -> str:
        return f"DistanceModel(cities={self.city_count}, metric={self.edge_weight_type.value})"
