"""
pipeline.py - Whole-document transformations.

Each operation takes bytes in and returns new PDF bytes. Nothing is shared
between calls, and any error aborts the operation without partial output.

compress_pdf:
1. Render page at 1.5x
2. Encode as JPEG
3. Place the JPEG as a full-page image in a new PDF
"""

import logging
import time
from typing import Callable, Iterable, Optional, Tuple

from .compression import CompressionResult, raster_to_jpeg_bytes, validate_quality
from .document import create_document, load_document, serialize
from .exceptions import UnsupportedImageFormatError
from .images import embed_image
from .page_ranges import parse_ranges
from .rasterize import (
    RENDER_SCALE,
    get_page_count,
    open_render_source,
    release_page_cache,
    render_page_to_raster,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def images_to_pdf(images: Iterable[Tuple[bytes, str]]) -> bytes:
    """
    Build a PDF with one page per image.

    Each page is sized to the image's pixel dimensions and the image fills
    it. Images of unsupported types are skipped, so the result may have
    fewer pages than inputs, or none.

    Args:
        images: (image bytes, MIME type) pairs, in page order

    Returns:
        PDF bytes
    """
    doc = create_document()
    skipped = 0

    for position, (data, mime_type) in enumerate(images):
        try:
            image = embed_image(doc, data, mime_type)
        except UnsupportedImageFormatError as e:
            logger.warning(f"Skipping image {position}: {e}")
            skipped += 1
            continue

        width, height = image.scale(1)
        page = doc.add_blank_page(width, height)
        doc.draw_image(page, image, x=0, y=0, width=width, height=height)

    logger.info(f"Converted images to PDF: {doc.page_count} pages, {skipped} skipped")
    return serialize(doc)


def merge_pdfs(files: Iterable[bytes]) -> bytes:
    """
    Concatenate PDFs, keeping every page in its original order.

    Args:
        files: PDF bytes, in output order

    Returns:
        PDF bytes with the pages of all inputs
    """
    merged = create_document()
    file_count = 0

    for data in files:
        source = load_document(data)
        merged.copy_pages(source, range(source.page_count))
        file_count += 1

    logger.info(f"Merged {file_count} files: {merged.page_count} pages")
    return serialize(merged)


def split_pdf(data: bytes, range_expr: str) -> bytes:
    """
    Extract the pages selected by a range expression such as "1-3, 5".

    Pages come out in ascending order regardless of how the expression
    lists them.

    Raises:
        InvalidRangeError: If the expression selects no pages
        MalformedDocumentError: If data is not a PDF
    """
    source = load_document(data)
    indices = parse_ranges(range_expr, source.page_count)

    result = create_document()
    result.copy_pages(source, indices)

    logger.info(f"Split {len(indices)} of {source.page_count} pages ({range_expr!r})")
    return serialize(result)


def _rasterize_pages(
    data: bytes,
    quality: float,
    on_progress: Optional[ProgressCallback]
) -> Tuple[bytes, int]:
    source = open_render_source(data)
    try:
        total = get_page_count(source)
        output = create_document()

        # Strictly one page at a time: one live frame bounds memory
        for page_number in range(1, total + 1):
            if on_progress:
                on_progress(page_number, total)

            frame = render_page_to_raster(source, page_number, RENDER_SCALE)
            jpeg_data = raster_to_jpeg_bytes(frame, quality)

            image = embed_image(output, jpeg_data, "image/jpeg")
            page = output.add_blank_page(frame.width, frame.height)
            output.draw_image(page, image, x=0, y=0, width=frame.width, height=frame.height)

            del frame
            release_page_cache()

            logger.debug(f"Page {page_number}/{total}: {len(jpeg_data):,} bytes")

        return serialize(output), total
    finally:
        source.close()


def compress_pdf(
    data: bytes,
    quality: float,
    on_progress: Optional[ProgressCallback] = None
) -> bytes:
    """
    Compress a PDF by replacing every page with a JPEG rendering of it.

    Lossy: text and vector content are flattened. Scanned documents shrink
    well; compact text-only PDFs may grow. The caller compares sizes if it
    needs a guarantee.

    Args:
        data: PDF bytes
        quality: JPEG quality, 0.0-1.0
        on_progress: Optional callback(current, total), called once per page

    Returns:
        PDF bytes with the same number of pages
    """
    return compress_pdf_with_stats(data, quality, on_progress).data


def compress_pdf_with_stats(
    data: bytes,
    quality: float,
    on_progress: Optional[ProgressCallback] = None
) -> CompressionResult:
    """Like compress_pdf, but also report sizes and page count."""
    quality = validate_quality(quality)
    start_time = time.time()

    output, page_count = _rasterize_pages(data, quality, on_progress)

    result = CompressionResult(
        data=output,
        original_size=len(data),
        page_count=page_count,
        quality=quality
    )

    logger.info(
        f"Compressed {page_count} pages: {result.original_size:,} -> "
        f"{result.compressed_size:,} bytes in {time.time() - start_time:.1f}s"
    )
    return result

