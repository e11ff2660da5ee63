from pathlib import Path
from typing import Iterable, Tuple, Union
import logging
import numpy as np
import cv2
from PIL import Image as PILImage
from ..models.image import Image
from ..models.similarity import Region

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file I/O and pixel drawing for Image entities.
    """

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        if path is None:
            return Image(pixels)
        return Image(pixels=pixels, path=Path(path))

    @staticmethod
    def retrieve_image_dimensions(img: Image) -> Tuple[int, int, int]:
        return img.height, img.width, img.channels

    @staticmethod
    def load(path: Union[str, Path]) -> Image:
        path = Path(path)
        arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)

        if arr_bgr is None:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")

        arr = cv2.cvtColor(arr_bgr, cv2.COLOR_BGR2RGB)
        logger.debug(f"Loaded {path} ({arr.shape[1]}x{arr.shape[0]})")
        return Image(pixels=arr, path=path)

    @staticmethod
    def save(image: Image) -> None:
        pixels = image.pixels
        if pixels.dtype != np.uint8:
            # float32 samples are already on the 0-255 scale
            pixels = np.clip(np.rint(pixels), 0, 255).astype(np.uint8)
        PILImage.fromarray(pixels).save(image.path)

    @staticmethod
    def draw_rectangles(
        pixels: np.ndarray,
        regions: Iterable[Region],
        color: Tuple[int, int, int],
        thickness: int,
    ) -> np.ndarray:
        """
        Draw every region outline onto a copy of `pixels` and return the copy.
        """
        canvas = np.ascontiguousarray(pixels).copy()
        for region in regions:
            top_left = (region.x, region.y)
            bottom_right = (region.x + region.width - 1, region.y + region.height - 1)
            cv2.rectangle(canvas, top_left, bottom_right, tuple(int(c) for c in color), thickness)
        return canvas
