import os
import logging
import numpy as np
from dotenv import load_dotenv
from ..models.similarity import StatisticsFields
from ..repositories.plane_repository import PlaneRepository

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

# Stabilisers for 8-bit luminance: (0.01 * 255)², (0.03 * 255)²
C1 = 6.5025
C2 = 58.5225

REFERENCE_DENOMINATOR = "reference"
TEXTBOOK_DENOMINATOR = "textbook"


class SimilarityMapService:
    """
    Turns local statistics into a per-pixel SSIM plane.

    The "reference" denominator pairs variance1 with covariance12, matching
    the golden outputs of the original tool. "textbook" uses
    variance1 + variance2 as in Wang et al. (2004).
    """

    def __init__(
        self,
        plane_repository: PlaneRepository | None = None,
        denominator: str | None = None,
    ):
        self.plane_repository = plane_repository or PlaneRepository()
        if denominator is None:
            denominator = os.getenv("SSIM_DENOMINATOR", REFERENCE_DENOMINATOR)
        denominator = denominator.strip().lower()
        if denominator not in (REFERENCE_DENOMINATOR, TEXTBOOK_DENOMINATOR):
            raise ValueError(f"Unknown SSIM denominator: {denominator!r}")
        self.denominator = denominator
        logger.debug(f"SSIM denominator: {denominator}")

    def build_map(self, fields: StatisticsFields) -> np.ndarray:
        repo = self.plane_repository

        mean1_sq = repo.square(fields.mean1)
        mean2_sq = repo.square(fields.mean2)
        mean1_mean2 = repo.multiply(fields.mean1, fields.mean2)

        # (2*mu1_mu2 + C1) * (2*sigma12 + C2)
        luminance_num = repo.scale(mean1_mean2, 2, C1)
        structure_num = repo.scale(fields.covariance12, 2, C2)
        numerator = repo.multiply(luminance_num, structure_num)

        # (mu1_sq + mu2_sq + C1) * (sigma1_sq + <second term> + C2)
        luminance_den = repo.scale(repo.add(mean1_sq, mean2_sq), 1, C1)
        second_term = fields.covariance12
        if self.denominator == TEXTBOOK_DENOMINATOR:
            second_term = fields.variance2
        structure_den = repo.scale(repo.add(fields.variance1, second_term), 1, C2)
        denominator = repo.multiply(luminance_den, structure_den)

        return repo.divide(numerator, denominator)
