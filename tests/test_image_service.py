import numpy as np
import pytest

from imagediff.models.errors import ImageLoadFailure, ImageSaveFailure, InvalidInput
from imagediff.models.image import Image
from imagediff.models.similarity import Region
from imagediff.repositories.image_repository import ImageRepository
from imagediff.services.image_service import ImageService, parse_color
from conftest import write_png


@pytest.fixture
def service():
    return ImageService()


def test_load_keeps_rgb_order(tmp_path, service):
    pixels = np.zeros((4, 5, 3), np.uint8)
    pixels[..., 0], pixels[..., 1], pixels[..., 2] = 10, 20, 30
    img = service.load(write_png(tmp_path / "rgb.png", pixels))
    assert (img.height, img.width, img.channels) == (4, 5, 3)
    assert img.pixels[0, 0].tolist() == [10, 20, 30]


def test_repository_reports_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ImageRepository.load(tmp_path / "nope.png")


def test_service_wraps_load_errors(tmp_path, service):
    bogus = tmp_path / "bogus.png"
    bogus.write_text("not an image")
    with pytest.raises(ImageLoadFailure):
        service.load(bogus)


def test_resolve_rejects_unset(service):
    with pytest.raises(InvalidInput, match="image1"):
        service.resolve(None, "image1")
    with pytest.raises(InvalidInput):
        service.resolve("  ", "image2")


def test_resolve_rejects_grayscale(service):
    with pytest.raises(InvalidInput, match="3 channels"):
        service.resolve(Image(np.zeros((4, 4), np.uint8)), "image1")


def test_resolve_rejects_empty(service):
    with pytest.raises(InvalidInput, match="empty"):
        service.resolve(Image(np.zeros((0, 4, 3), np.uint8)), "image1")


def test_dimension_check(service):
    a = Image(np.zeros((4, 4, 3), np.uint8))
    b = Image(np.zeros((4, 5, 3), np.uint8))
    with pytest.raises(InvalidInput, match="differ in size"):
        service.check_same_dimensions(a, b)


def test_split_channels(service, textured):
    red, green, blue = service.split_channels(Image(textured))
    assert red.dtype == np.float32
    assert red.flags["C_CONTIGUOUS"]
    assert np.array_equal(blue, textured[:, :, 2].astype(np.float32))


def test_draw_regions_works_on_a_copy(service):
    img = Image(np.zeros((20, 20, 3), np.uint8))
    out = service.draw_regions(img, [Region(5, 5, 10, 10)], (0, 255, 0))
    assert img.pixels.max() == 0
    assert out.pixels[5, 5].tolist() == [0, 255, 0]
    assert out.pixels[10, 10].tolist() == [0, 0, 0]


def test_default_color_from_environment(monkeypatch):
    monkeypatch.setenv("SSIM_RECT_COLOR", "0,0,255")
    assert ImageService().default_rect_color == (0, 0, 255)


@pytest.mark.parametrize("value", ["1,2", "a,b,c", "0,0,256", (1, 2, 3, 4)])
def test_parse_color_rejects(value):
    with pytest.raises(InvalidInput):
        parse_color(value)


def test_save_without_path(service):
    with pytest.raises(ImageSaveFailure):
        service.save(Image(np.zeros((2, 2, 3), np.uint8)))


def test_resolve_accepts_float32(service):
    img = Image(np.full((4, 4, 3), 127.5, np.float32))
    assert service.resolve(img, "image1") is img


def test_resolve_rejects_other_dtypes(service):
    with pytest.raises(InvalidInput, match="uint8 or float32"):
        service.resolve(Image(np.zeros((4, 4, 3), np.float64)), "image1")


def test_float32_image_is_saved_as_8bit(tmp_path, service):
    pixels = np.zeros((3, 3, 3), np.float32)
    pixels[..., 0] = 254.6
    pixels[..., 2] = 300.0
    service.save(Image(pixels, tmp_path / "float.png"))
    loaded = service.load(tmp_path / "float.png")
    assert loaded.pixels.dtype == np.uint8
    assert loaded.pixels[0, 0].tolist() == [255, 0, 255]
