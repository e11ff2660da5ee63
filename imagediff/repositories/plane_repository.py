# repositories/plane_repository.py
"""
Low-level arithmetic on single-channel planes.

• Wraps the OpenCV primitives the similarity pipeline relies on.
• Keeps every cv2 call for the SSIM math in one place, so the services
  only express the algorithm.
"""
from typing import List, Tuple
import cv2
import numpy as np
from ..models.errors import InvalidInput
from ..models.similarity import GaussianWindowSpec


class PlaneRepository:

    def __init__(self, window: GaussianWindowSpec = GaussianWindowSpec()) -> None:
        self.window = window

    # ---------- private helpers ----------
    @staticmethod
    def _check_same_shape(a: np.ndarray, b: np.ndarray) -> None:
        if a.shape != b.shape:
            raise InvalidInput(f"Plane dimensions differ: {a.shape} vs {b.shape}")

    # ---------- elementwise ----------
    def add(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        self._check_same_shape(a, b)
        return cv2.add(a, b)

    def subtract(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        self._check_same_shape(a, b)
        return cv2.subtract(a, b)

    def multiply(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        self._check_same_shape(a, b)
        return cv2.multiply(a, b)

    def divide(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        self._check_same_shape(a, b)
        return cv2.divide(a, b)

    def square(self, a: np.ndarray) -> np.ndarray:
        # multiply rather than pow: keeps a*a and a**2 bit-identical
        return cv2.multiply(a, a)

    @staticmethod
    def scale(a: np.ndarray, alpha: float, beta: float = 0.0) -> np.ndarray:
        """alpha * a + beta, in the plane's own float type."""
        return (a * np.float32(alpha) + np.float32(beta)).astype(a.dtype, copy=False)

    # ---------- filtering ----------
    def convolve_gaussian(self, a: np.ndarray) -> np.ndarray:
        return cv2.GaussianBlur(
            a,
            self.window.ksize,
            sigmaX=self.window.sigma,
            sigmaY=self.window.sigma,
            borderType=cv2.BORDER_REFLECT_101,
        )

    # ---------- conversions ----------
    @staticmethod
    def merge_rgb(planes: List[np.ndarray]) -> np.ndarray:
        return cv2.merge(planes)

    @staticmethod
    def rgb_to_gray(rgb: np.ndarray) -> np.ndarray:
        """Luminance 0.299 R + 0.587 G + 0.114 B."""
        return cv2.cvtColor(rgb, cv2.COLOR_RGB2GRAY)

    @staticmethod
    def to_uint8(a: np.ndarray, alpha: float) -> np.ndarray:
        """Scale by alpha, round to nearest and saturate to [0, 255]."""
        return np.clip(np.rint(a * alpha), 0, 255).astype(np.uint8)

    @staticmethod
    def threshold_binary_inv(a: np.ndarray, thresh: int, max_value: int = 255) -> np.ndarray:
        """
        Pixels below `thresh` become `max_value`, the rest become 0.
        `a` must be an integer (uint8) plane.
        """
        _, binary = cv2.threshold(a, thresh - 1, max_value, cv2.THRESH_BINARY_INV)
        return binary

    # ---------- contours ----------
    @staticmethod
    def find_external_boundaries(binary: np.ndarray) -> List[np.ndarray]:
        contours, _ = cv2.findContours(binary, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        return list(contours)

    @staticmethod
    def bounding_rectangle(contour: np.ndarray) -> Tuple[int, int, int, int]:
        x, y, w, h = cv2.boundingRect(contour)
        return int(x), int(y), int(w), int(h)
