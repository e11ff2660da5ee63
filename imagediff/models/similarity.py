from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Tuple
import numpy as np


class Channel(IntEnum):
    """Channel index inside an RGB pixel array."""
    RED = 0
    GREEN = 1
    BLUE = 2


@dataclass(frozen=True)
class GaussianWindowSpec:
    """
    Smoothing window shared by every local statistic.
    """
    width: int = 11
    height: int = 11
    sigma: float = 1.5

    @property
    def ksize(self) -> Tuple[int, int]:
        return self.width, self.height


@dataclass
class StatisticsFields:
    """
    Local statistics for one channel of an image pair, all (H, W) float32.
    """
    mean1: np.ndarray
    mean2: np.ndarray
    variance1: np.ndarray
    variance2: np.ndarray
    covariance12: np.ndarray


@dataclass(frozen=True)
class SimilarityScores:
    red: float
    green: float
    blue: float
    combined: float  # red * green * blue

    def for_channel(self, channel: Channel) -> float:
        return (self.red, self.green, self.blue)[Channel(channel)]


@dataclass(frozen=True)
class Region:
    """Axis-aligned bounding rectangle in image 2 coordinates."""
    x: int
    y: int
    width: int
    height: int

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height


@dataclass(frozen=True)
class SimilarityResult:
    """
    Everything a finished comparison produces.
    """
    scores: SimilarityScores
    regions: List[Region] = field(default_factory=list)

    @property
    def region_count(self) -> int:
        return len(self.regions)
