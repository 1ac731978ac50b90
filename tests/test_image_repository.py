import numpy as np
import pytest
from PIL import Image as PILImage

from models.pixel_buffer import PixelBuffer
from models.pixel_buffer_image import PixelBufferImage
from repositories.image_repository import ImageRepository


@pytest.fixture
def repo():
    return ImageRepository()


def test_load_png_keeps_rgba_bytes(repo, tmp_path):
    rgba = np.arange(3 * 4 * 4, dtype=np.uint8).reshape(3, 4, 4)
    path = tmp_path / "in.png"
    PILImage.fromarray(rgba).save(path)

    buf = repo.load(path)
    assert buf.size == (4, 3)
    assert bytes(buf.data) == rgba.tobytes()
    assert buf.path == path


def test_load_sniffs_content_not_extension(repo, tmp_path):
    path = tmp_path / "really_a_png.jpg"
    PILImage.new("RGB", (2, 2), (10, 20, 30)).save(path, format="PNG")
    buf = repo.load(path)
    assert buf.pixel(1, 1) == (10, 20, 30, 255)


def test_load_jpeg(repo, tmp_path):
    path = tmp_path / "in.jpg"
    PILImage.new("RGB", (8, 6), (128, 128, 128)).save(path, format="JPEG")
    buf = repo.load(path)
    assert buf.size == (8, 6)
    r, g, b, a = buf.pixel(4, 3)
    assert a == 255
    assert abs(r - 128) <= 2


def test_unwrap_converts_grayscale_mode(repo):
    buf = repo.unwrap(PILImage.new("L", (3, 2), 77))
    assert buf.size == (3, 2)
    assert buf.pixel(2, 1) == (77, 77, 77, 255)


def test_load_missing_file(repo, tmp_path):
    with pytest.raises(FileNotFoundError):
        repo.load(tmp_path / "nope.png")


def test_load_undecodable_file(repo, tmp_path):
    path = tmp_path / "junk.png"
    path.write_bytes(b"definitely not an image")
    with pytest.raises(ValueError, match="decode"):
        repo.load(path)


def test_wrap_validates_layout(repo):
    view = repo.wrap(bytearray(2 * 2 * 4), 2)
    assert isinstance(view, PixelBufferImage)
    assert view.bounds() == (0, 0, 2, 2)
    with pytest.raises(ValueError):
        repo.wrap(bytearray(7), 1)


def test_save_jpeg_drops_alpha(repo, tmp_path):
    buf = PixelBuffer(bytearray((200, 200, 200, 100) * 16), 4)
    out = repo.save_jpeg(PixelBufferImage(buf), tmp_path / "out.jpg", quality=95)
    with PILImage.open(out) as img:
        assert img.format == "JPEG"
        assert img.mode == "RGB"
        assert img.size == (4, 4)
        assert abs(img.getpixel((1, 1))[0] - 200) <= 2


def test_save_jpeg_from_generic_image_like(repo, tmp_path):
    class Checker:
        def color_model(self):
            return "RGBA"

        def bounds(self):
            return 0, 0, 8, 8

        def at(self, x, y):
            return (255, 255, 255, 255) if x < 4 else (0, 0, 0, 255)

    out = repo.save_jpeg(Checker(), tmp_path / "generic.jpg", quality=95)
    with PILImage.open(out) as img:
        assert img.getpixel((0, 0))[0] > 200
        assert img.getpixel((7, 7))[0] < 55


def test_save_jpeg_rejects_empty_image(repo, tmp_path):
    with pytest.raises(ValueError):
        repo.save_jpeg(PixelBufferImage(PixelBuffer(bytearray(), 0)), tmp_path / "e.jpg")


def test_save_jpeg_into_missing_directory(repo, tmp_path):
    buf = PixelBuffer(bytearray(4 * 4), 2)
    with pytest.raises(OSError):
        repo.save_jpeg(PixelBufferImage(buf), tmp_path / "missing" / "out.jpg")


def test_load_oversized_image_is_a_decode_error(repo, tmp_path, monkeypatch):
    path = tmp_path / "big.png"
    PILImage.new("RGB", (10, 10)).save(path)
    monkeypatch.setattr(PILImage, "MAX_IMAGE_PIXELS", 10)
    with pytest.raises(ValueError, match="Cannot decode image"):
        repo.load(path)


def test_view_reports_stored_alpha(repo):
    view = repo.wrap(bytearray((0, 0, 0, 0, 40, 40, 40, 100)), 2)
    assert view.at(0, 0) == (0, 0, 0, 0)
    assert view.at(1, 0) == (40, 40, 40, 100)
