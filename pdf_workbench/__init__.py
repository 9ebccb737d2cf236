"""
PDF Workbench - local PDF and image transformation pipeline.

Converts images to PDF, merges and splits PDFs, and compresses PDFs by
rasterizing every page to JPEG and rebuilding the document.
"""

from .exceptions import (
    WorkbenchError,
    InvalidRangeError,
    MalformedDocumentError,
    UnsupportedImageFormatError,
    ImageDecodeError,
    RenderTargetUnavailableError,
    InvalidParameterError,
    RemoteServiceError,
    ServiceUnavailableError,
)
from .page_ranges import parse_ranges
from .pipeline import (
    images_to_pdf,
    merge_pdfs,
    split_pdf,
    compress_pdf,
    compress_pdf_with_stats,
)

__version__ = "1.0.0"
__author__ = "PDF Workbench"

__all__ = [
    "images_to_pdf",
    "merge_pdfs",
    "split_pdf",
    "compress_pdf",
    "compress_pdf_with_stats",
    "parse_ranges",
    "WorkbenchError",
    "InvalidRangeError",
    "MalformedDocumentError",
    "UnsupportedImageFormatError",
    "ImageDecodeError",
    "RenderTargetUnavailableError",
    "InvalidParameterError",
    "RemoteServiceError",
    "ServiceUnavailableError",
    "__version__",
]
