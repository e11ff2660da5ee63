from pathlib import Path
from typing import Iterable, List, Tuple, Union
import os
import logging
import cv2
import numpy as np
from dotenv import load_dotenv
from ..models.errors import ImageLoadFailure, ImageSaveFailure, InvalidInput
from ..models.image import Image
from ..models.similarity import Region
from ..repositories.image_repository import ImageRepository

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

RECT_THICKNESS = 2


def parse_color(value: Union[str, Iterable[int]]) -> Tuple[int, int, int]:
    """
    Accepts "R,G,B" or any 3-item iterable of ints in [0, 255].
    """
    parts = value.split(",") if isinstance(value, str) else list(value)
    try:
        color = tuple(int(p) for p in parts)
    except (TypeError, ValueError) as err:
        raise InvalidInput(f"Invalid color {value!r}: {err}") from err
    if len(color) != 3 or not all(0 <= c <= 255 for c in color):
        raise InvalidInput(f"Invalid color {value!r}: expected three values in [0, 255]")
    return color


class ImageService:
    """I/O and pixel-layout helpers.  No SSIM math here."""
    def __init__(self):
        self.default_rect_color = parse_color(os.getenv("SSIM_RECT_COLOR", "255,0,0"))
        self.image_repository = ImageRepository()

    def create_image(self, pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        return self.image_repository.create_image(pixels, path)

    def load(self, path: Union[str, Path]) -> Image:
        """Load a single image from disk, wrapping decoder failures."""
        try:
            img = self.image_repository.load(path)
        except (OSError, cv2.error) as err:
            raise ImageLoadFailure(str(err)) from err
        logger.info(f"Loaded image {path} ({img.width}x{img.height})")
        return img

    def resolve(self, source: Union[str, Path, Image, None], name: str) -> Image:
        """
        Accept either a location on disk or an already decoded Image.
        """
        if source is None or (isinstance(source, str) and not source.strip()):
            raise InvalidInput(f"{name} can not be null.")
        if isinstance(source, Image):
            self.validate(source, name)
            return source
        img = self.load(source)
        self.validate(img, name)
        return img

    @staticmethod
    def validate(img: Image, name: str) -> None:
        pixels = img.pixels
        if pixels is None or pixels.size == 0:
            raise InvalidInput(f"{name} is empty.")
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise InvalidInput(f"{name} must have 3 channels, got shape {pixels.shape}")
        if pixels.dtype not in (np.uint8, np.float32):
            raise InvalidInput(f"{name} must be uint8 or float32, got {pixels.dtype}")

    def check_same_dimensions(self, img1: Image, img2: Image) -> None:
        dims1 = self.image_repository.retrieve_image_dimensions(img1)
        dims2 = self.image_repository.retrieve_image_dimensions(img2)
        if dims1 != dims2:
            raise InvalidInput(
                f"Images differ in size: {dims1[1]}x{dims1[0]}x{dims1[2]} "
                f"vs {dims2[1]}x{dims2[0]}x{dims2[2]}"
            )

    @staticmethod
    def split_channels(img: Image) -> List[np.ndarray]:
        """
        Returns [red, green, blue] float32 planes.
        """
        as_float = img.pixels.astype(np.float32)
        return [np.ascontiguousarray(as_float[:, :, c]) for c in range(3)]

    def draw_regions(
        self,
        img: Image,
        regions: Iterable[Region],
        color: Tuple[int, int, int] | None = None,
        path: Union[str, Path] = None,
    ) -> Image:
        """
        Return a new Image: a copy of `img` with every region outlined.
        """
        if color is None:
            color = self.default_rect_color
        pixels = self.image_repository.draw_rectangles(img.pixels, regions, color, RECT_THICKNESS)
        return self.create_image(pixels, path)

    def save(self, image: Image) -> None:
        """
        Business-level method to save the image to its path.
        """
        if image.path is None:
            raise ImageSaveFailure("Image has no destination path.")
        try:
            self.image_repository.save(image)
        except (OSError, ValueError) as err:
            raise ImageSaveFailure(str(err)) from err
        logger.info(f"Saved difference image to {image.path}")
