# services/edge_detection_service.py
from __future__ import annotations
from typing import Union
import logging
import os
import numpy as np
from dotenv import load_dotenv
from models.pixel_buffer import PixelBuffer, validate_layout
from models.sobel_kernels import HORIZONTAL, VERTICAL

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

EDGE_ALPHA = 100
OVERFLOW_MODES = ("wrap", "clamp")


def _correlate3x3(lum: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """
    Kernel-weighted neighbourhood sums for every interior pixel of `lum`.
    Result shape is (H-2, W-2); entry [y-1, x-1] belongs to pixel (x, y).
    """
    h, w = lum.shape
    acc = np.zeros((h - 2, w - 2), dtype=np.int64)
    for ky in range(3):
        for kx in range(3):
            weight = int(kernel[ky, kx])
            if weight:
                acc += weight * lum[ky:ky + h - 2, kx:kx + w - 2]
    return acc


def _to_byte(magnitude: np.ndarray, overflow: str) -> np.ndarray:
    if overflow == "wrap":
        return (magnitude & 0xFF).astype(np.uint8)
    return np.minimum(magnitude, 255).astype(np.uint8)


def detect_edges(
    data: Union[bytes, bytearray],
    width: int,
    height: int,
    overflow: str = "wrap",
    horizontal: np.ndarray = HORIZONTAL,
    vertical: np.ndarray = VERTICAL,
) -> bytearray:
    """
    Gradient magnitude of a grayscale RGBA buffer.

    Interior pixels become (m, m, m, 100) with
    m = trunc(sqrt(Gx**2 + Gy**2)) reduced to a byte by `overflow`
    ("wrap" keeps the low 8 bits, "clamp" saturates at 255).
    The output starts all-zero and border pixels are never written.
    """
    if overflow not in OVERFLOW_MODES:
        raise ValueError(f"Unknown overflow mode {overflow!r}, expected one of {OVERFLOW_MODES}")
    validate_layout(len(data), width, height)

    edges = PixelBuffer.blank(width, height)
    if width < 3 or height < 3:
        return edges.data

    # R == G == B after grayscale, any channel will do
    lum = PixelBuffer(data, width).to_array()[:, :, 0].astype(np.int64)

    gx = np.abs(_correlate3x3(lum, horizontal))
    gy = np.abs(_correlate3x3(lum, vertical))
    magnitude = np.floor(np.sqrt((gx * gx + gy * gy).astype(np.float64))).astype(np.int64)

    m = _to_byte(magnitude, overflow)
    out = edges.to_array(writable=True)
    out[1:-1, 1:-1, 0] = m
    out[1:-1, 1:-1, 1] = m
    out[1:-1, 1:-1, 2] = m
    out[1:-1, 1:-1, 3] = EDGE_ALPHA
    return edges.data


class EdgeDetectionService:
    """
    PixelBuffer-level Sobel stage.
    Overflow policy comes from SOBEL_MAGNITUDE_OVERFLOW unless given.
    """

    def __init__(self, overflow: str | None = None):
        self.overflow = (overflow or os.getenv("SOBEL_MAGNITUDE_OVERFLOW", "wrap")).strip().lower()
        if self.overflow not in OVERFLOW_MODES:
            raise ValueError(f"Unknown overflow mode {self.overflow!r}, expected one of {OVERFLOW_MODES}")
        logger.debug(f"EdgeDetectionService initialized with overflow={self.overflow}")

    def detect(self, buffer: PixelBuffer) -> PixelBuffer:
        edges = detect_edges(buffer.data, buffer.width, buffer.height, overflow=self.overflow)
        return PixelBuffer(edges, buffer.width, buffer.path)
