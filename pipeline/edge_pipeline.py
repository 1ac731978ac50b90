# pipeline/edge_pipeline.py
from __future__ import annotations
from pathlib import Path
import logging
import os

from dotenv import load_dotenv

from models.pixel_buffer import PixelBuffer
from services.edge_detection_service import EdgeDetectionService
from services.grayscale_service import GrayscaleService
from services.image_service import ImageService

# ------------------------------------------------------------------
# env‑vars
load_dotenv()
DEFAULT_OUTPUT_PATH = os.getenv("SOBEL_OUTPUT_PATH", "./output.jpg")

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
def process_buffer(
    buffer: PixelBuffer,
    *,
    grayscale_service: GrayscaleService | None = None,
    edge_detection_service: EdgeDetectionService | None = None,
) -> PixelBuffer:
    """
    decoded pixels → grayscale → edge magnitude.
    Each stage returns a fresh buffer; the input is left untouched.
    """
    grayscale_service = grayscale_service or GrayscaleService()
    edge_detection_service = edge_detection_service or EdgeDetectionService()

    gray = grayscale_service.convert(buffer)
    return edge_detection_service.detect(gray)


def detect_edges_in_file(
    input_path: str | Path,
    output_path: str | Path = DEFAULT_OUTPUT_PATH,
    *,
    image_service: ImageService | None = None,
    grayscale_service: GrayscaleService | None = None,
    edge_detection_service: EdgeDetectionService | None = None,
) -> Path:
    """
    Load *input_path*, run both stages, write a JPEG to *output_path*.
    Returns the written path.
    """
    image_service = image_service or ImageService()

    # 1. decode
    buffer = image_service.load(input_path)
    logger.info(f"Loaded {input_path} ({buffer.width}x{buffer.height})")

    # 2. grayscale + edges, in memory
    edges = process_buffer(buffer,
                           grayscale_service=grayscale_service,
                           edge_detection_service=edge_detection_service)

    # 3. encode
    written = image_service.save(edges, output_path)
    logger.info(f"Edge map saved → {written}")
    return written
