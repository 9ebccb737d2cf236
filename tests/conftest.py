"""Shared test fixtures."""

from __future__ import annotations

import io

import pikepdf
import pytest
from PIL import Image


def build_pdf(sizes: list[tuple[float, float]]) -> bytes:
    """Build a PDF with one blank page per (width, height)."""
    pdf = pikepdf.Pdf.new()
    for width, height in sizes:
        pdf.add_blank_page(page_size=(width, height))
    buffer = io.BytesIO()
    pdf.save(buffer)
    return buffer.getvalue()


def build_image(fmt: str, size: tuple[int, int], mode: str = "RGB", color=(200, 30, 30)) -> bytes:
    """Encode a solid-colour image in the given Pillow format."""
    img = Image.new(mode, size, color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


def page_sizes(data: bytes) -> list[tuple[float, float]]:
    """Media-box sizes of every page in a PDF."""
    with pikepdf.open(io.BytesIO(data)) as pdf:
        sizes = []
        for page in pdf.pages:
            box = page.mediabox
            sizes.append((float(box[2]) - float(box[0]), float(box[3]) - float(box[1])))
        return sizes


@pytest.fixture
def ten_page_pdf() -> bytes:
    """Ten pages, page N is (100 + N) points wide."""
    return build_pdf([(100 + n, 200) for n in range(1, 11)])


@pytest.fixture
def jpeg_bytes() -> bytes:
    return build_image("JPEG", (40, 30))


@pytest.fixture
def png_bytes() -> bytes:
    return build_image("PNG", (20, 50))
