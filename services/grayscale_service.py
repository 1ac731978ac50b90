# services/grayscale_service.py
from typing import Union
import logging
import numpy as np
from models.pixel_buffer import CHANNELS, PixelBuffer, validate_layout

logger = logging.getLogger(__name__)

# Luma weights in thousandths: 0.299 R + 0.587 G + 0.114 B
LUMA_WEIGHTS = (299, 587, 114)
LUMA_SCALE = 1000
OPAQUE = 255


def to_grayscale(data: Union[bytes, bytearray], width: int) -> bytearray:
    """
    Replaces R, G and B of every pixel with its truncated luma and forces
    alpha to 255. Returns a fresh buffer of the same length.
    """
    validate_layout(len(data), width)
    px = np.frombuffer(data, dtype=np.uint8).reshape(-1, CHANNELS).astype(np.uint32)

    w_r, w_g, w_b = LUMA_WEIGHTS
    gray = (w_r * px[:, 0] + w_g * px[:, 1] + w_b * px[:, 2]) // LUMA_SCALE

    out = np.empty(px.shape, dtype=np.uint8)
    out[:, :3] = gray[:, None]
    out[:, 3] = OPAQUE
    return bytearray(out.tobytes())


class GrayscaleService:
    """
    PixelBuffer-level wrapper around `to_grayscale`.
    """

    def convert(self, buffer: PixelBuffer) -> PixelBuffer:
        logger.debug(f"Grayscale on {buffer.width}x{buffer.height}")
        return PixelBuffer(to_grayscale(buffer.data, buffer.width), buffer.width, buffer.path)
