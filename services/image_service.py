from __future__ import annotations
from pathlib import Path
from typing import Union
import os
from dotenv import load_dotenv
from models.pixel_buffer import PixelBuffer
from models.pixel_buffer_image import PixelBufferImage
from repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()


class ImageService:
    """I/O helpers.  No pixel math here."""
    def __init__(self, jpeg_quality: int | None = None):
        self.JPEG_QUALITY = jpeg_quality if jpeg_quality is not None else int(os.getenv("SOBEL_JPEG_QUALITY", "75"))
        if not 1 <= self.JPEG_QUALITY <= 100:
            raise ValueError(f"JPEG quality must be in [1, 100], got {self.JPEG_QUALITY}")
        self.image_repository = ImageRepository()

    def load(self, path: Union[str, Path]) -> PixelBuffer:
        """Load a single image from disk into a PixelBuffer."""
        return self.image_repository.load(path)

    def wrap(self, buffer: PixelBuffer) -> PixelBufferImage:
        return PixelBufferImage(buffer)

    def save(self, buffer: PixelBuffer, path: Union[str, Path]) -> Path:
        """
        Business-level method to write the buffer as a JPEG.
        """
        return self.image_repository.save_jpeg(self.wrap(buffer), path, quality=self.JPEG_QUALITY)
