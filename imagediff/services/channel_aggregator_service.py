from typing import Sequence
import logging
import numpy as np
from ..models.similarity import SimilarityScores

logger = logging.getLogger(__name__)


class ChannelAggregatorService:
    """Reduces per-channel SSIM maps to scalar scores."""

    @staticmethod
    def mean_score(ssim_map: np.ndarray) -> float:
        return float(ssim_map.mean(dtype=np.float64))

    def aggregate(self, maps: Sequence[np.ndarray]) -> SimilarityScores:
        """
        Args:
            maps: the red, green and blue SSIM maps, in that order.

        Returns:
            SimilarityScores whose combined value is the product of the three
            channel means, so one badly matched channel drags it toward 0.
        """
        if len(maps) != 3:
            raise ValueError(f"Expected 3 channel maps, got {len(maps)}")
        red, green, blue = (self.mean_score(m) for m in maps)
        combined = red * green * blue
        logger.debug(f"SSIM red={red:.6f} green={green:.6f} blue={blue:.6f} combined={combined:.6f}")
        return SimilarityScores(red=red, green=green, blue=blue, combined=combined)
