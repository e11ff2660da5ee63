"""
Similarity Report Pipeline
Compares two equally sized RGB images with SSIM, counts the regions that
differ and optionally writes an annotated copy of the second image.
"""
from __future__ import annotations

import os
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Tuple, Union

import numpy as np
from dotenv import load_dotenv

from ..models.errors import NotComputedYet
from ..models.image import Image
from ..models.similarity import Channel, Region, SimilarityResult, SimilarityScores
from ..services.channel_aggregator_service import ChannelAggregatorService
from ..services.difference_region_service import DifferenceRegionService
from ..services.image_service import ImageService, parse_color
from ..services.similarity_map_service import SimilarityMapService
from ..services.statistics_service import WindowedStatisticsService

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

ImageSource = Union[str, Path, Image, None]


class SimilarityReport:
    """
    SSIM comparison of one image pair.

    Locations (or decoded Images) and the rectangle color may be changed
    until `compute()` succeeds. After that the result is cached and every
    further `compute()` returns it without touching the pixels again.
    """

    def __init__(
        self,
        image1: ImageSource = None,
        image2: ImageSource = None,
        image_different: Union[str, Path, None] = None,
        *,
        rect_color=None,
        image_service: ImageService | None = None,
        statistics_service: WindowedStatisticsService | None = None,
        similarity_map_service: SimilarityMapService | None = None,
        aggregator_service: ChannelAggregatorService | None = None,
        region_service: DifferenceRegionService | None = None,
        parallel_channels: bool | None = None,
    ):
        self.image1 = image1
        self.image2 = image2
        self.image_different = image_different

        self.image_service = image_service or ImageService()
        self.statistics_service = statistics_service or WindowedStatisticsService()
        self.similarity_map_service = similarity_map_service or SimilarityMapService()
        self.aggregator_service = aggregator_service or ChannelAggregatorService()
        self.region_service = region_service or DifferenceRegionService()

        self.rect_color = rect_color
        if parallel_channels is None:
            parallel_channels = os.getenv("SSIM_PARALLEL_CHANNELS", "0") == "1"
        self.parallel_channels = parallel_channels

        self._result: SimilarityResult | None = None
        self._annotated: Image | None = None

    # ── configuration ────────────────────────────────────────────────
    @property
    def rect_color(self) -> Tuple[int, int, int]:
        return self._rect_color

    @rect_color.setter
    def rect_color(self, value) -> None:
        """None restores the default; anything else goes through parse_color."""
        if value is None:
            value = self.image_service.default_rect_color
        self._rect_color = parse_color(value)

    # ── state ────────────────────────────────────────────────────────
    @property
    def is_computed(self) -> bool:
        return self._result is not None

    def _computed(self) -> SimilarityResult:
        if self._result is None:
            raise NotComputedYet()
        return self._result

    # ── core ─────────────────────────────────────────────────────────
    def _channel_map(self, planes: Tuple[np.ndarray, np.ndarray]) -> np.ndarray:
        fields = self.statistics_service.compute_fields(*planes)
        return self.similarity_map_service.build_map(fields)

    def _similarity_maps(self, img1: Image, img2: Image) -> List[np.ndarray]:
        pairs = list(zip(self.image_service.split_channels(img1),
                         self.image_service.split_channels(img2)))
        if self.parallel_channels:
            with ThreadPoolExecutor(max_workers=len(pairs)) as pool:
                return list(pool.map(self._channel_map, pairs))
        return [self._channel_map(pair) for pair in pairs]

    def compute(self) -> float:
        """
        Calculate the similarity of the two images.

        Returns:
            The combined score in [-1, 1]; 1 means the images are identical.

        Raises:
            InvalidInput: an image is unset, empty, or the sizes differ.
            ImageLoadFailure: an image could not be decoded.
            ImageSaveFailure: the difference image could not be written.
                The scores stay available in that case.
        """
        if self._result is not None:
            return self._result.scores.combined

        img1 = self.image_service.resolve(self.image1, "image1")
        img2 = self.image_service.resolve(self.image2, "image2")
        self.image_service.check_same_dimensions(img1, img2)

        maps = self._similarity_maps(img1, img2)
        scores = self.aggregator_service.aggregate(maps)

        if scores.combined == 1:
            # identical images: nothing to outline, nothing to save
            self._result = SimilarityResult(scores=scores, regions=[])
            return scores.combined

        regions = self.region_service.extract_regions(maps)
        self._result = SimilarityResult(scores=scores, regions=regions)
        logger.info(f"SSIM {scores.combined:.6f} with {len(regions)} difference regions")

        self._annotated = self.image_service.draw_regions(
            img2, regions, self.rect_color, self.image_different
        )
        if self.image_different is not None:
            self.image_service.save(self._annotated)

        return scores.combined

    # ── accessors ────────────────────────────────────────────────────
    def get_scores(self) -> SimilarityScores:
        return self._computed().scores

    def get_channel_score(self, channel: Channel) -> float:
        return self._computed().scores.for_channel(channel)

    def get_combined_score(self) -> float:
        return self._computed().scores.combined

    def get_region_count(self) -> int:
        return self._computed().region_count

    def get_regions(self) -> List[Region]:
        return list(self._computed().regions)

    def get_annotated_image(self) -> Image | None:
        """Copy of image 2 with the regions outlined; None for identical images."""
        self._computed()
        return self._annotated

    @property
    def ssim_red(self) -> float:
        return self.get_channel_score(Channel.RED)

    @property
    def ssim_green(self) -> float:
        return self.get_channel_score(Channel.GREEN)

    @property
    def ssim_blue(self) -> float:
        return self.get_channel_score(Channel.BLUE)

    @property
    def ssim_all(self) -> float:
        return self.get_combined_score()

    @property
    def num_differences(self) -> int:
        return self.get_region_count()


def compare_images(
    image1: ImageSource,
    image2: ImageSource,
    image_different: Union[str, Path, None] = None,
    **kwargs,
) -> SimilarityReport:
    """
    Build a SimilarityReport for the pair, compute it and return it.
    """
    report = SimilarityReport(image1, image2, image_different, **kwargs)
    report.compute()
    return report
