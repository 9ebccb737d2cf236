"""
images.py - Raster image embedding and resizing.

Supports:
- JPEG (embedded as-is with DCTDecode)
- PNG (decoded, FlateDecode, alpha kept as a soft mask)

Other formats are rejected with UnsupportedImageFormatError.
"""

import io
import logging
import zlib
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np
import cv2
import pikepdf
from pikepdf import Stream, Dictionary, Name, Array
from PIL import Image, UnidentifiedImageError

from .document import Document
from .exceptions import (
    ImageDecodeError,
    InvalidParameterError,
    UnsupportedImageFormatError,
)

logger = logging.getLogger(__name__)

JPEG_TYPES = ("image/jpeg", "image/jpg")
PNG_TYPES = ("image/png",)

_PIL_FORMATS = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/png": "PNG",
}


@dataclass
class EmbeddedImage:
    """Image XObject owned by one Document.

    Holds its Document so the underlying pikepdf.Pdf stays alive as long
    as the image does.
    """
    document: Document = field(repr=False)
    stream: pikepdf.Object
    width: int
    height: int

    @property
    def owner(self) -> int:
        return self.document.token

    def scale(self, factor: float) -> Tuple[float, float]:
        """Natural pixel size multiplied by factor."""
        return self.width * factor, self.height * factor


def _open_image(data: bytes) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Cannot decode image data: {e}") from e
    return img


def _jpeg_stream(document: Document, data: bytes) -> Tuple[Stream, int, int]:
    img = _open_image(data)
    if img.format != "JPEG":
        raise ImageDecodeError(f"Expected JPEG data, got {img.format}")
    width, height = img.size

    decode = None
    if img.mode == "L":
        colorspace = Name.DeviceGray
    elif img.mode == "CMYK":
        colorspace = Name.DeviceCMYK
        # Adobe writes inverted CMYK
        if "adobe" in img.info:
            decode = Array([1, 0, 1, 0, 1, 0, 1, 0])
    else:
        colorspace = Name.DeviceRGB

    image_dict = Dictionary({
        '/Type': Name.XObject,
        '/Subtype': Name.Image,
        '/Width': width,
        '/Height': height,
        '/ColorSpace': colorspace,
        '/BitsPerComponent': 8,
        '/Filter': Name.DCTDecode,
    })
    if decode is not None:
        image_dict['/Decode'] = decode

    return Stream(document.pdf, data, image_dict), width, height


def _png_stream(document: Document, data: bytes) -> Tuple[Stream, int, int]:
    img = _open_image(data)
    width, height = img.size

    if img.mode == "PA" or (img.mode == "P" and "transparency" in img.info):
        img = img.convert("RGBA")
    elif img.mode == "P":
        img = img.convert("RGB")
    elif img.mode in ("1", "I", "I;16", "F"):
        img = img.convert("L")

    alpha = None
    if img.mode in ("RGBA", "LA"):
        alpha_channel = img.getchannel("A")
        if alpha_channel.getextrema() != (255, 255):
            alpha = alpha_channel
        img = img.convert("RGB" if img.mode == "RGBA" else "L")
    elif img.mode != "L" and img.mode != "RGB":
        img = img.convert("RGB")

    colorspace = Name.DeviceGray if img.mode == "L" else Name.DeviceRGB

    image_dict = Dictionary({
        '/Type': Name.XObject,
        '/Subtype': Name.Image,
        '/Width': width,
        '/Height': height,
        '/ColorSpace': colorspace,
        '/BitsPerComponent': 8,
        '/Filter': Name.FlateDecode,
    })
    img_stream = Stream(document.pdf, zlib.compress(img.tobytes(), level=9), image_dict)

    if alpha is not None:
        smask_dict = Dictionary({
            '/Type': Name.XObject,
            '/Subtype': Name.Image,
            '/Width': width,
            '/Height': height,
            '/ColorSpace': Name.DeviceGray,
            '/BitsPerComponent': 8,
            '/Filter': Name.FlateDecode,
        })
        smask = Stream(document.pdf, zlib.compress(alpha.tobytes(), level=9), smask_dict)
        img_stream['/SMask'] = document.pdf.make_indirect(smask)

    return img_stream, width, height


def embed_image(document: Document, data: bytes, mime_type: str) -> EmbeddedImage:
    """
    Embed a JPEG or PNG image into a document.

    Args:
        document: Destination document
        data: Encoded image bytes
        mime_type: image/jpeg, image/jpg or image/png

    Returns:
        EmbeddedImage sized to the image's natural pixel dimensions

    Raises:
        UnsupportedImageFormatError: For any other MIME type
        ImageDecodeError: If the bytes cannot be decoded
    """
    mime = (mime_type or "").lower()

    if mime in JPEG_TYPES:
        img_stream, width, height = _jpeg_stream(document, data)
    elif mime in PNG_TYPES:
        img_stream, width, height = _png_stream(document, data)
    else:
        raise UnsupportedImageFormatError(f"Unsupported image type: {mime_type!r}")

    logger.debug(f"Embedded {mime} image: {width}x{height}, {len(data):,} bytes")

    return EmbeddedImage(
        document=document,
        stream=document.pdf.make_indirect(img_stream),
        width=width,
        height=height
    )


def resize_image(
    data: bytes,
    mime_type: str,
    width: Optional[int] = None,
    height: Optional[int] = None,
    keep_aspect: bool = True
) -> bytes:
    """
    Resize a JPEG or PNG image, keeping its format.

    With keep_aspect, a missing width or height is derived from the
    original aspect ratio. If both are given they are used as-is.

    Returns:
        Encoded image bytes in the input format
    """
    mime = (mime_type or "").lower()
    if mime not in _PIL_FORMATS:
        raise UnsupportedImageFormatError(f"Unsupported image type: {mime_type!r}")

    img = _open_image(data)
    src_width, src_height = img.size

    if width is None and height is None:
        raise InvalidParameterError("Width or height is required")
    if keep_aspect:
        aspect = src_width / src_height
        if width is None:
            width = round(height * aspect)
        elif height is None:
            height = round(width / aspect)
    else:
        width = src_width if width is None else width
        height = src_height if height is None else height

    if width <= 0 or height <= 0:
        raise InvalidParameterError(f"Invalid target size {width}x{height}")

    pil_format = _PIL_FORMATS[mime]
    if pil_format == "JPEG":
        img = img.convert("L" if img.mode == "L" else "RGB")
    elif img.mode not in ("L", "LA", "RGB", "RGBA"):
        img = img.convert("RGBA")

    # Area averaging for shrinking, cubic for enlarging
    shrinking = width * height < src_width * src_height
    interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_CUBIC
    pixels = cv2.resize(np.asarray(img), (width, height), interpolation=interpolation)

    output = io.BytesIO()
    resized = Image.fromarray(pixels)
    if pil_format == "JPEG":
        resized.save(output, format="JPEG", quality=92)
    else:
        resized.save(output, format="PNG", optimize=True)

    logger.info(f"Resized {src_width}x{src_height} -> {width}x{height} ({pil_format})")
    return output.getvalue()
