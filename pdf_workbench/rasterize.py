"""
rasterize.py - PDF page to pixel buffer conversion using PyMuPDF.

Pages are rendered one at a time, in memory, at a fixed scale.
"""

import logging
from dataclasses import dataclass

import numpy as np
try:
    import fitz  # pip install pymupdf
except ImportError:
    import pymupdf as fitz  # apt install python3-pymupdf

from .exceptions import MalformedDocumentError, RenderTargetUnavailableError

logger = logging.getLogger(__name__)

# 1.5x is roughly 108 px per inch over the 72 pt/inch PDF base
RENDER_SCALE = 1.5

# MuPDF errors (FzErrorLimit, FzErrorMemory, ...) do not derive from RuntimeError
_RENDER_ERRORS = (RuntimeError, MemoryError, fitz.mupdf.FzErrorBase)


@dataclass
class RasterFrame:
    """Rendered page pixels (RGB, H x W x 3)."""
    pixels: np.ndarray
    width: int
    height: int
    scale: float


def open_render_source(data: bytes) -> "fitz.Document":
    """
    Open PDF bytes with the rendering reader.

    Raises:
        MalformedDocumentError: If PyMuPDF cannot parse the bytes
    """
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except (fitz.FileDataError, RuntimeError, ValueError) as e:
        raise MalformedDocumentError(f"Failed to open PDF for rendering: {e}") from e
    logger.debug(f"Opened render source: {len(doc)} pages")
    return doc


def get_page_count(source: "fitz.Document") -> int:
    """Get total page count."""
    return len(source)


def render_page_to_raster(
    source: "fitz.Document",
    page_number: int,
    scale: float = RENDER_SCALE
) -> RasterFrame:
    """
    Render a single page to an RGB pixel buffer.

    Args:
        source: Document opened with open_render_source
        page_number: 1-based page number
        scale: Multiplier applied to the page's size in points

    Returns:
        RasterFrame owning a copy of the pixels

    Raises:
        RenderTargetUnavailableError: If the pixmap cannot be created
    """
    page = source[page_number - 1]
    matrix = fitz.Matrix(scale, scale)

    try:
        pixmap = page.get_pixmap(matrix=matrix, alpha=False)
    except _RENDER_ERRORS as e:
        raise RenderTargetUnavailableError(
            f"Could not render page {page_number}: {e}"
        ) from e

    # Copy so the frame outlives the pixmap
    pixels = np.frombuffer(pixmap.samples, dtype=np.uint8).reshape(
        pixmap.height, pixmap.width, pixmap.n
    ).copy()

    logger.debug(
        f"Rasterized page {page_number}: {pixmap.width}x{pixmap.height} @ {scale}x"
    )

    return RasterFrame(
        pixels=pixels,
        width=pixmap.width,
        height=pixmap.height,
        scale=scale
    )


def release_page_cache():
    """Drop PyMuPDF's cached fonts, images and display lists."""
    fitz.TOOLS.store_shrink(100)
