from pathlib import Path

import cv2
import numpy as np
import pytest
from PIL import Image as PILImage


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("SSIM_RECT_COLOR", "SSIM_DENOMINATOR", "SSIM_PARALLEL_CHANNELS", "SSIM_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def make_textured(height: int = 96, width: int = 96, seed: int = 7) -> np.ndarray:
    """Lightly blurred RGB noise stretched to the full 8-bit range."""
    rng = np.random.default_rng(seed)
    noise = rng.uniform(0, 255, size=(height, width, 3)).astype(np.float32)
    blurred = cv2.GaussianBlur(noise, (0, 0), sigmaX=1.0)
    stretched = cv2.normalize(blurred, None, 0, 255, cv2.NORM_MINMAX)
    return np.rint(stretched).astype(np.uint8)


def write_png(path: Path, pixels: np.ndarray) -> Path:
    PILImage.fromarray(pixels).save(path)
    return path


@pytest.fixture
def textured() -> np.ndarray:
    return make_textured()


@pytest.fixture
def textured_png(tmp_path, textured) -> Path:
    return write_png(tmp_path / "original.png", textured)


# rows 30..59, cols 40..69
PATCH = (40, 30, 30, 30)


@pytest.fixture
def tampered(textured) -> np.ndarray:
    x, y, w, h = PATCH
    out = textured.copy()
    out[y:y + h, x:x + w] = make_textured(h, w, seed=99)
    return out


@pytest.fixture
def tampered_png(tmp_path, tampered) -> Path:
    return write_png(tmp_path / "tampered.png", tampered)
