# services/api/core/artifacts.py

from __future__ import annotations
import io
from dataclasses import dataclass, field
from typing import Union

import pypdfium2 as pdfium
from PIL import Image


class ArtifactLoadError(Exception):
    """The artifact could not be fetched or decoded."""


@dataclass
class ImageArtifact:
    """Scanned image: the front end renders it straight from its URL."""
    url: str


@dataclass
class PaginatedArtifact:
    """Multi-page document (PDF) held in memory after a successful fetch."""
    url: str
    data: bytes = field(repr=False)
    page_count: int

    def render_page(self, page_index: int, scale: float = 1.5) -> bytes:
        """
        Rasterize one page with pdfium and return PNG bytes.
        Rough DPI = 72 * scale.
        """
        if not (0 <= page_index < self.page_count):
            raise IndexError(f"page_index {page_index} out of range (0..{self.page_count - 1})")

        doc = pdfium.PdfDocument(self.data)
        try:
            page = doc[page_index]
            pil_page: Image.Image = page.render(scale=scale).to_pil()
            buf = io.BytesIO()
            pil_page.save(buf, format="PNG")
            return buf.getvalue()
        finally:
            doc.close()


Artifact = Union[ImageArtifact, PaginatedArtifact]


def open_paginated(url: str, data: bytes) -> PaginatedArtifact:
    """Decode PDF bytes far enough to know the page count."""
    if not data:
        raise ArtifactLoadError(f"Empty document at {url}")
    try:
        doc = pdfium.PdfDocument(data)
    except pdfium.PdfiumError as e:
        raise ArtifactLoadError(f"Cannot decode document at {url}: {e}") from e
    try:
        page_count = len(doc)
    finally:
        doc.close()
    if page_count <= 0:
        raise ArtifactLoadError(f"Document at {url} has no pages")
    return PaginatedArtifact(url=url, data=data, page_count=page_count)
