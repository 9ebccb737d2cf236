"""
document.py - In-memory PDF documents built on pikepdf.

A Document owns a pikepdf.Pdf. Pages are handed out as lightweight
handles (owner token + index into the page table) rather than live
pikepdf objects, so a handle can never be used against another document.
"""

import io
import itertools
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional

import pikepdf
from pikepdf import Pdf, Stream, Name

from .exceptions import MalformedDocumentError

if TYPE_CHECKING:
    from .images import EmbeddedImage

logger = logging.getLogger(__name__)

_owner_tokens = itertools.count(1)


@dataclass(frozen=True)
class Page:
    """Handle to one page of a Document."""
    owner: int
    index: int
    width: float
    height: float


class Document:
    """
    Ordered page sequence backed by a pikepdf.Pdf.

    Only ever grows: pages are appended, copied in or drawn on, never removed.
    """

    def __init__(self, pdf: Pdf):
        self.pdf = pdf
        self.token = next(_owner_tokens)
        # Foreign stream data is read lazily at save time
        self._sources: List["Document"] = []

    @property
    def page_count(self) -> int:
        return len(self.pdf.pages)

    @property
    def pages(self) -> List[Page]:
        return [self._handle(i) for i in range(self.page_count)]

    def page(self, index: int) -> Page:
        """Get the handle for the page at a zero-based index."""
        if not 0 <= index < self.page_count:
            raise IndexError(f"Page index {index} out of range (0-{self.page_count - 1})")
        return self._handle(index)

    def _handle(self, index: int) -> Page:
        box = self.pdf.pages[index].mediabox
        width = float(box[2]) - float(box[0])
        height = float(box[3]) - float(box[1])
        return Page(owner=self.token, index=index, width=width, height=height)

    def _check_owner(self, page: Page):
        if page.owner != self.token:
            raise ValueError("Page handle belongs to a different document")

    def copy_pages(self, source: "Document", indices: Iterable[int]) -> List[Page]:
        """
        Copy pages of another document onto the end of this one.

        Pages are copied in the order given; repeated indices produce
        repeated, independent pages.

        Args:
            source: Document to copy from
            indices: Zero-based page indices into source

        Returns:
            Handles of the new pages, in the same order as indices
        """
        if source is not self and source not in self._sources:
            self._sources.append(source)

        copied = []
        for index in indices:
            # pikepdf imports foreign pages on insert; qpdf shallow-copies repeats
            self.pdf.pages.append(source.pdf.pages[index])
            copied.append(self._handle(self.page_count - 1))
        logger.debug(f"Copied {len(copied)} pages from document {source.token} to {self.token}")
        return copied

    def append_page(self, page: Page) -> Page:
        """Append a copy of one of this document's pages."""
        self._check_owner(page)
        self.pdf.pages.append(self.pdf.pages[page.index])
        return self._handle(self.page_count - 1)

    def add_blank_page(self, width: float, height: float) -> Page:
        """Append an empty page of the given size in PDF points."""
        self.pdf.add_blank_page(page_size=(width, height))
        return self._handle(self.page_count - 1)

    def draw_image(
        self,
        page: Page,
        image: "EmbeddedImage",
        x: float = 0,
        y: float = 0,
        width: Optional[float] = None,
        height: Optional[float] = None
    ):
        """
        Draw an embedded image onto a page.

        Width and height default to the image's natural pixel size.
        """
        self._check_owner(page)
        if image.owner != self.token:
            raise ValueError("Image was embedded into a different document")

        width = image.width if width is None else width
        height = image.height if height is None else height

        pdf_page = self.pdf.pages[page.index]
        name = pdf_page.add_resource(image.stream, Name.XObject, prefix="Im")

        content = f"q\n{width:.4f} 0 0 {height:.4f} {x:.4f} {y:.4f} cm\n{name} Do\nQ\n"
        pdf_page.contents_add(Stream(self.pdf, content.encode("latin-1")))

        logger.debug(
            f"Drew {image.width}x{image.height} image on page {page.index} "
            f"at ({x}, {y}) size {width}x{height}"
        )


def create_document() -> Document:
    """Create an empty Document."""
    return Document(Pdf.new())


def load_document(data: bytes) -> Document:
    """
    Parse PDF bytes into a Document.

    Raises:
        MalformedDocumentError: If the bytes are not a readable PDF
    """
    try:
        pdf = pikepdf.open(io.BytesIO(data))
    except pikepdf.PdfError as e:
        raise MalformedDocumentError(f"Failed to open PDF: {e}") from e
    doc = Document(pdf)
    logger.debug(f"Loaded document {doc.token}: {doc.page_count} pages, {len(data):,} bytes")
    return doc


def copy_pages(destination: Document, source: Document, indices: Iterable[int]) -> List[Page]:
    return destination.copy_pages(source, indices)


def append_page(document: Document, page: Page) -> Page:
    return document.append_page(page)


def add_blank_page(document: Document, width: float, height: float) -> Page:
    return document.add_blank_page(width, height)


def serialize(document: Document) -> bytes:
    """Save a Document to PDF bytes."""
    buffer = io.BytesIO()
    document.pdf.save(
        buffer,
        compress_streams=True,
        object_stream_mode=pikepdf.ObjectStreamMode.generate
    )
    data = buffer.getvalue()
    logger.debug(f"Serialized document {document.token}: {document.page_count} pages, {len(data):,} bytes")
    return data
