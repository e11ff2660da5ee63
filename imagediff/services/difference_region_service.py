from typing import List, Sequence
import logging
import numpy as np
from ..models.similarity import Region
from ..repositories.plane_repository import PlaneRepository

logger = logging.getLogger(__name__)

GRAY_SCALE = 255
DIFFERENCE_THRESHOLD = 254


class DifferenceRegionService:
    """
    Finds clusters of dissimilar pixels in the per-channel SSIM maps.
    """

    def __init__(self, plane_repository: PlaneRepository | None = None):
        self.plane_repository = plane_repository or PlaneRepository()

    def difference_mask(self, maps: Sequence[np.ndarray]) -> np.ndarray:
        """
        Collapse the RGB SSIM maps to a uint8 mask: 255 where the
        luminance-weighted similarity scales below 254, 0 elsewhere.
        """
        repo = self.plane_repository
        gray = repo.rgb_to_gray(repo.merge_rgb(list(maps)))
        gray8 = repo.to_uint8(gray, GRAY_SCALE)
        return repo.threshold_binary_inv(gray8, DIFFERENCE_THRESHOLD)

    def extract_regions(self, maps: Sequence[np.ndarray]) -> List[Region]:
        mask = self.difference_mask(maps)
        contours = self.plane_repository.find_external_boundaries(mask)
        regions = [Region(*self.plane_repository.bounding_rectangle(c)) for c in contours]
        logger.debug(f"Found {len(regions)} difference regions")
        return regions
