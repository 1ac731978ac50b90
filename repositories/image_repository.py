from pathlib import Path
from typing import Union
import logging
import numpy as np
from PIL import Image as PILImage, UnidentifiedImageError
from PIL.Image import DecompressionBombError
from models.pixel_buffer import PixelBuffer
from models.pixel_buffer_image import ImageLike, PixelBufferImage

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file I/O and the PixelBuffer <-> Pillow bridge.
    The only place that touches Pillow image types.
    """

    @staticmethod
    def wrap(data: Union[bytes, bytearray], width: int) -> PixelBufferImage:
        return PixelBufferImage(PixelBuffer(data, width))

    @staticmethod
    def unwrap(pil_img: PILImage.Image, path: Union[str, Path] = None) -> PixelBuffer:
        """
        Drains a Pillow image into flat, non-premultiplied RGBA.
        """
        if pil_img.mode != "RGBA":
            pil_img = pil_img.convert("RGBA")
        width, height = pil_img.size
        buffer = PixelBuffer.from_array(np.asarray(pil_img), Path(path) if path is not None else None)
        logger.debug(f"Unwrapped {width}x{height} image ({len(buffer)} bytes)")
        return buffer

    def load(self, path: Union[str, Path]) -> PixelBuffer:
        """
        Decodes any Pillow-supported format, detected from the file contents.
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found: {path}")
        try:
            with PILImage.open(path) as pil_img:
                pil_img.load()
                return self.unwrap(pil_img, path)
        except UnidentifiedImageError as err:
            raise ValueError(f"Cannot decode image: {path}") from err
        except DecompressionBombError as err:
            raise ValueError(f"Cannot decode image: {path} ({err})") from err

    @staticmethod
    def to_pil(img: ImageLike) -> PILImage.Image:
        """
        Render an ImageLike into a Pillow RGB image (alpha dropped).
        """
        if isinstance(img, PixelBufferImage):
            buffer = img.buffer
            rgba = PILImage.frombytes("RGBA", buffer.size, bytes(buffer.data))
            return rgba.convert("RGB")

        min_x, min_y, max_x, max_y = img.bounds()
        width, height = max_x - min_x, max_y - min_y
        pixels = np.zeros((height, width, 3), dtype=np.uint8)
        for y in range(height):
            for x in range(width):
                pixels[y, x] = img.at(min_x + x, min_y + y)[:3]
        return PILImage.fromarray(pixels)

    def save_jpeg(self, img: ImageLike, path: Union[str, Path], quality: int = 75) -> Path:
        path = Path(path)
        min_x, min_y, max_x, max_y = img.bounds()
        if max_x - min_x <= 0 or max_y - min_y <= 0:
            raise ValueError(f"Cannot encode an empty {max_x - min_x}x{max_y - min_y} image")
        self.to_pil(img).save(path, format="JPEG", quality=quality)
        logger.debug(f"Wrote JPEG (quality={quality}) → {path}")
        return path
