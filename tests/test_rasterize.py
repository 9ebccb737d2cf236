"""Tests for page rendering and JPEG encoding."""

import io

import numpy as np
import pytest
from PIL import Image

from pdf_workbench.compression import (
    QUALITY_PRESETS,
    CompressionResult,
    raster_to_jpeg_bytes,
    resolve_quality,
)
from pdf_workbench import rasterize
from pdf_workbench.exceptions import (
    InvalidParameterError,
    MalformedDocumentError,
    RenderTargetUnavailableError,
)
from pdf_workbench.rasterize import (
    RENDER_SCALE,
    RasterFrame,
    get_page_count,
    open_render_source,
    release_page_cache,
    render_page_to_raster,
)

from .conftest import build_pdf


def test_render_scales_page_size():
    source = open_render_source(build_pdf([(200, 100), (100, 400)]))
    try:
        assert get_page_count(source) == 2
        frame = render_page_to_raster(source, 2)
        release_page_cache()
    finally:
        source.close()

    assert RENDER_SCALE == 1.5
    assert (frame.width, frame.height) == (150, 600)
    assert frame.pixels.shape == (600, 150, 3)
    assert frame.pixels.dtype == np.uint8
    # Blank page renders white
    assert frame.pixels.min() == 255


def test_render_custom_scale():
    source = open_render_source(build_pdf([(200, 100)]))
    frame = render_page_to_raster(source, 1, scale=1.0)
    source.close()
    assert (frame.width, frame.height) == (200, 100)


def test_render_oversized_page_raises():
    source = open_render_source(build_pdf([(200, 100)]))
    try:
        with pytest.raises(RenderTargetUnavailableError) as exc:
            render_page_to_raster(source, 1, scale=100000)
    finally:
        source.close()
    assert exc.value.__cause__ is not None


@pytest.mark.parametrize("error", [RuntimeError("no pixmap"), MemoryError()])
def test_render_failure_raises(monkeypatch, error):
    def failing_get_pixmap(self, *args, **kwargs):
        raise error

    monkeypatch.setattr(rasterize.fitz.Page, "get_pixmap", failing_get_pixmap)
    source = open_render_source(build_pdf([(200, 100), (200, 100)]))
    try:
        with pytest.raises(RenderTargetUnavailableError, match="page 2"):
            render_page_to_raster(source, 2)
    finally:
        source.close()


def test_open_render_source_rejects_garbage():
    with pytest.raises(MalformedDocumentError):
        open_render_source(b"this is not a pdf")


def _frame(width=32, height=16):
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[:, : width // 2] = (255, 0, 0)
    return RasterFrame(pixels=pixels, width=width, height=height, scale=1.0)


def test_raster_to_jpeg_bytes_encodes_frame():
    data = raster_to_jpeg_bytes(_frame(), 0.6)
    assert data[:2] == b"\xff\xd8"
    img = Image.open(io.BytesIO(data))
    assert img.size == (32, 16)


def test_lower_quality_is_smaller():
    rng = np.random.default_rng(0)
    pixels = rng.integers(0, 256, size=(120, 160, 3), dtype=np.uint8)
    frame = RasterFrame(pixels=pixels, width=160, height=120, scale=1.0)
    assert len(raster_to_jpeg_bytes(frame, 0.2)) < len(raster_to_jpeg_bytes(frame, 0.9))


@pytest.mark.parametrize("quality", [0.0, 1.0])
def test_quality_bounds_accepted(quality):
    assert raster_to_jpeg_bytes(_frame(), quality)[:2] == b"\xff\xd8"


@pytest.mark.parametrize("quality", [-0.1, 1.5, 80])
def test_quality_out_of_range(quality):
    with pytest.raises(InvalidParameterError):
        raster_to_jpeg_bytes(_frame(), quality)


def test_quality_presets():
    assert QUALITY_PRESETS == {"low": 0.8, "medium": 0.6, "high": 0.4}
    assert resolve_quality("High") == 0.4
    assert resolve_quality("0.25") == 0.25
    assert resolve_quality(0.7) == 0.7
    with pytest.raises(InvalidParameterError):
        resolve_quality("extreme")


def test_compression_result_reduction():
    result = CompressionResult(data=b"x" * 25, original_size=100, page_count=1, quality=0.6)
    assert result.compressed_size == 25
    assert result.bytes_saved == 75
    assert result.reduction_percent == 75.0

    grown = CompressionResult(data=b"x" * 150, original_size=100, page_count=1, quality=0.6)
    assert grown.reduction_percent == 0.0
    assert "Pages: 1" in grown.summary()
