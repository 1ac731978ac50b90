from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import numpy as np

CHANNELS = 4  # R, G, B, A


def validate_layout(length: int, width: int, height: int | None = None) -> int:
    """
    Checks that `length` bytes of interleaved RGBA samples form whole rows of
    `width` pixels and returns the derived height.

    A zero-sized image (no bytes, width 0) is accepted and has height 0.
    Raises ValueError on any other malformed layout.
    """
    if length % CHANNELS != 0:
        raise ValueError(f"Buffer length {length} is not a multiple of {CHANNELS}")
    if width < 0:
        raise ValueError(f"Width must be positive, got {width}")
    if width == 0:
        if length != 0:
            raise ValueError(f"Width 0 is only valid for an empty buffer, got {length} bytes")
        derived = 0
    else:
        n_pixels = length // CHANNELS
        if n_pixels % width != 0:
            raise ValueError(f"Width {width} does not divide pixel count {n_pixels}")
        derived = n_pixels // width
    if height is not None and height != derived:
        raise ValueError(f"Declared height {height} does not match buffer height {derived}")
    return derived


@dataclass
class PixelBuffer:
    """
    Flat row-major RGBA bytes plus the declared width.
    Height is derived, never stored.
    """
    data: bytearray # len(data) == width * height * 4
    width: int
    path: Path | None = field(default=None, compare=False) # Source of the pixels, bookkeeping only.

    def __post_init__(self):
        self.data = bytearray(self.data)
        validate_layout(len(self.data), self.width)

    @classmethod
    def blank(cls, width: int, height: int) -> PixelBuffer:
        """All-zero buffer, alpha included."""
        if height < 0:
            raise ValueError(f"Height must be positive, got {height}")
        return cls(bytearray(width * height * CHANNELS), width)

    @classmethod
    def from_array(cls, arr: np.ndarray, path: Path | None = None) -> PixelBuffer:
        if arr.ndim != 3 or arr.shape[2] != CHANNELS:
            raise ValueError(f"Expected an (H, W, 4) array, got shape {arr.shape}")
        if arr.dtype != np.uint8:
            raise ValueError(f"Expected uint8 samples, got {arr.dtype}")
        return cls(bytearray(np.ascontiguousarray(arr).tobytes()), arr.shape[1], path)

    @property
    def height(self) -> int:
        return validate_layout(len(self.data), self.width)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def __len__(self) -> int:
        return len(self.data)

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height}")
        i = (y * self.width + x) * CHANNELS
        r, g, b, a = self.data[i:i + CHANNELS]
        return r, g, b, a

    def to_array(self, writable: bool = False) -> np.ndarray:
        """
        (H, W, 4) uint8 view over the buffer, read-only unless `writable`.
        Writes through a writable view land in `data`.
        """
        arr = np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, CHANNELS)
        if not writable:
            arr.flags.writeable = False
        return arr
