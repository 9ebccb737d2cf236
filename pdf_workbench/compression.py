"""
compression.py - JPEG encoding of rendered pages.

Quality is expressed on a 0.0-1.0 scale. Named presets describe the
strength of compression, so "high" means the lowest JPEG quality.
"""

import io
import logging
from dataclasses import dataclass
from typing import Union

from PIL import Image

from .exceptions import InvalidParameterError
from .rasterize import RasterFrame

logger = logging.getLogger(__name__)

QUALITY_PRESETS = {
    "low": 0.8,     # High quality, low compression
    "medium": 0.6,
    "high": 0.4,    # Low quality, high compression
}


def validate_quality(quality: float) -> float:
    """Check that quality lies in [0.0, 1.0]."""
    if not 0.0 <= quality <= 1.0:
        raise InvalidParameterError(f"Quality must be between 0.0 and 1.0, got {quality}")
    return float(quality)


def resolve_quality(value: Union[str, float]) -> float:
    """Turn a preset name ("low", "medium", "high") or a number into a quality."""
    if isinstance(value, str):
        key = value.strip().lower()
        if key in QUALITY_PRESETS:
            return QUALITY_PRESETS[key]
        try:
            value = float(key)
        except ValueError:
            raise InvalidParameterError(
                f"Unknown quality preset {value!r}; use one of {', '.join(QUALITY_PRESETS)}"
            )
    return validate_quality(value)


def raster_to_jpeg_bytes(frame: RasterFrame, quality: float) -> bytes:
    """
    Encode a rendered frame as JPEG.

    Args:
        frame: Rendered page
        quality: 0.0-1.0, mapped linearly onto Pillow's 1-100 scale

    Returns:
        JPEG bytes
    """
    quality = validate_quality(quality)
    pil_quality = max(1, round(quality * 100))

    img = Image.fromarray(frame.pixels)
    if img.mode != "RGB":
        img = img.convert("RGB")

    buffer = io.BytesIO()
    img.save(
        buffer,
        format="JPEG",
        quality=pil_quality,
        optimize=True,
        subsampling=2  # 4:2:0 chroma subsampling
    )

    data = buffer.getvalue()
    logger.debug(f"Encoded {frame.width}x{frame.height} frame: {len(data):,} bytes | q={pil_quality}")
    return data


@dataclass
class CompressionResult:
    """Result of compressing a PDF."""
    data: bytes
    original_size: int
    page_count: int
    quality: float

    @property
    def compressed_size(self) -> int:
        return len(self.data)

    @property
    def bytes_saved(self) -> int:
        return self.original_size - self.compressed_size

    @property
    def reduction_percent(self) -> float:
        """Size saving in percent; 0 when the output grew."""
        if self.original_size == 0:
            return 0.0
        return max(0.0, (1 - self.compressed_size / self.original_size) * 100)

    def summary(self) -> str:
        return (
            f"Pages: {self.page_count}\n"
            f"Quality: {self.quality:.2f}\n"
            f"Input:  {self.original_size:,} bytes\n"
            f"Output: {self.compressed_size:,} bytes\n"
            f"Reduction: {self.reduction_percent:.1f}%"
        )
