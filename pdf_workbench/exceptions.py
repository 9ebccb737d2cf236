"""
exceptions.py - Error types raised by the transformation pipeline.

Every error aborts the whole operation; nothing is retried.
"""


class WorkbenchError(Exception):
    """Base exception for pdf_workbench errors."""
    pass


class InvalidRangeError(WorkbenchError):
    """Raised when a page-range expression selects no valid pages."""
    pass


class MalformedDocumentError(WorkbenchError):
    """Raised when input bytes cannot be parsed as a PDF."""
    pass


class UnsupportedImageFormatError(WorkbenchError):
    """Raised by the embedder for MIME types other than JPEG or PNG.

    images_to_pdf catches this and skips the image.
    """
    pass


class ImageDecodeError(WorkbenchError):
    """Raised when image bytes of a supported type cannot be decoded."""
    pass


class RenderTargetUnavailableError(WorkbenchError):
    """Raised when a page cannot be rendered to a pixel buffer."""
    pass


class InvalidParameterError(WorkbenchError, ValueError):
    """Raised when an invalid parameter is provided."""
    pass


class RemoteServiceError(WorkbenchError):
    """Raised for failures of the remote OCR / image-editing service."""
    pass


class ServiceUnavailableError(RemoteServiceError):
    """Raised when no remote service is configured."""
    pass
