"""
remote.py - Boundary to the remote OCR / image-editing service.

The service itself is injected as a callable taking a base64 JPEG and a
prompt and returning text (or base64 image data). Its errors reach the
caller unchanged; nothing is retried.
"""

import base64
import logging
from typing import Callable, Optional

from .exceptions import RemoteServiceError, ServiceUnavailableError

logger = logging.getLogger(__name__)

RemoteService = Callable[[str, str], str]

OCR_PROMPT = (
    "Extract all text from this image. Keep the formatting as close as possible "
    "to the original. If there is a table, try to represent it in Markdown."
)

BACKGROUND_REMOVAL_PROMPT = (
    "Remove the background from this image. Return the main subject on a solid "
    "white background. Ensure high precision for edges."
)

NO_TEXT_MESSAGE = "No text could be extracted."


def _call(service: Optional[RemoteService], image_data: bytes, prompt: str) -> str:
    if service is None:
        raise ServiceUnavailableError("No remote service configured")
    encoded = base64.b64encode(image_data).decode("ascii")
    logger.debug(f"Calling remote service with {len(image_data):,} byte image")
    return service(encoded, prompt)


def extract_text(image_data: bytes, service: Optional[RemoteService]) -> str:
    """OCR an image through the remote service."""
    text = _call(service, image_data, OCR_PROMPT)
    return text or NO_TEXT_MESSAGE


def remove_background(image_data: bytes, service: Optional[RemoteService]) -> bytes:
    """
    Replace an image's background with white through the remote service.

    Returns:
        Decoded image bytes from the service
    """
    reply = _call(service, image_data, BACKGROUND_REMOVAL_PROMPT)
    if not reply:
        raise RemoteServiceError("No image generated.")
    try:
        return base64.b64decode(reply, validate=True)
    except ValueError as e:
        raise RemoteServiceError(f"Service returned invalid image data: {e}") from e
