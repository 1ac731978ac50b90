from __future__ import annotations
from typing import Protocol
from models.pixel_buffer import PixelBuffer


class ImageLike(Protocol):
    """
    The three capabilities the encoder needs from an image.
    """
    def color_model(self) -> str: ...

    def bounds(self) -> tuple[int, int, int, int]: ...

    def at(self, x: int, y: int) -> tuple[int, int, int, int]: ...


class PixelBufferImage:
    """
    Read-only ImageLike view over a PixelBuffer.
    No copy is made; the view reflects the buffer it wraps.
    """
    def __init__(self, buffer: PixelBuffer):
        self.buffer = buffer

    def color_model(self) -> str:
        return "RGBA"

    def bounds(self) -> tuple[int, int, int, int]:
        """(min_x, min_y, max_x, max_y), max exclusive."""
        return 0, 0, self.buffer.width, self.buffer.height

    def at(self, x: int, y: int) -> tuple[int, int, int, int]:
        """
        Stored (r, g, b, a), alpha included as-is: edge pixels read back
        with alpha 100 and untouched borders with 0. The JPEG encoder
        ignores alpha.
        """
        return self.buffer.pixel(x, y)
