"""
Document viewer pane.

Keeps the displayed artifact in step with the console selection. Loading a
multi-page document is the only asynchronous operation of the console: it
runs as an asyncio task keyed by the selection, and a newer selection
cancels the previous task. A result that still arrives for an older
selection is dropped, so the pane never shows another document's pages.
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from models import ArtifactKind, Document, DocumentCategory
from adapters.base import ArtifactFetcher
from core.artifacts import Artifact, ArtifactLoadError, ImageArtifact, PaginatedArtifact

logger = logging.getLogger(__name__)


class ViewerState(str, Enum):
    EMPTY = "EMPTY"        # nothing to show for the selection
    LOADING = "LOADING"
    READY = "READY"
    ERROR = "ERROR"        # terminal for the selection; no automatic retry


class LayoutMode(str, Enum):
    SPLIT = "split"
    FULL_DOC = "full-doc"
    FULL_DATA = "full-data"


class ViewerNotReady(Exception):
    pass


SelectionKey = Tuple[Optional[str], Optional[DocumentCategory]]


class DocumentViewer:
    def __init__(
        self,
        fetcher: ArtifactFetcher,
        zoom_step: float = 0.2,
        zoom_min: float = 0.2,
        zoom_max: float = 4.0,
        render_scale: float = 1.5,
    ):
        self.fetcher = fetcher
        self.zoom_step = zoom_step
        self.zoom_min = zoom_min
        self.zoom_max = zoom_max
        self.render_scale = render_scale

        self.zoom = 1.0
        self.layout = LayoutMode.SPLIT
        self.state = ViewerState.EMPTY
        self.title: Optional[str] = None
        self.artifact: Optional[Artifact] = None
        self.error: Optional[str] = None
        self.page = 0
        self.page_count = 0

        self._key: Optional[SelectionKey] = None
        self._identity: Optional[Tuple[Any, ...]] = None
        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._pending_url: Optional[str] = None

    # ---------- selection sync ----------

    def sync(
        self,
        student_id: Optional[str],
        category: Optional[DocumentCategory],
        document: Optional[Document],
    ) -> None:
        """
        Point the viewer at the document of the current selection.

        Zoom goes back to 1.0 only when the student or category changes.
        Calling this again for an unchanged selection is a no-op, which keeps
        an ERROR state terminal until the operator selects something else.
        """
        key: SelectionKey = (student_id, category)
        identity = (key, document.url if document else None, document.is_paginated if document else None)

        if key != self._key:
            self._key = key
            self.zoom = 1.0
        if identity == self._identity:
            self._resume_pending()
            return
        self._identity = identity

        self._supersede()

        if document is None:
            self.state = ViewerState.EMPTY
            return

        self.title = document.name
        if not document.is_paginated:
            self.artifact = ImageArtifact(url=document.url)
            self.page_count = 1
            self.state = ViewerState.READY
            return

        self.state = ViewerState.LOADING
        self._start_load(document.url)

    def _start_load(self, url: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Called outside an event loop: stay LOADING until the next
            # sync() or wait() that runs on one.
            self._pending_url = url
            return
        self._pending_url = None
        self._task = loop.create_task(self._load(self._generation, url))

    def _resume_pending(self) -> None:
        if self._pending_url is not None:
            self._start_load(self._pending_url)

    def _supersede(self) -> None:
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._pending_url = None
        self.artifact = None
        self.error = None
        self.title = None
        self.page = 0
        self.page_count = 0

    async def _load(self, generation: int, url: str) -> None:
        try:
            artifact = await self.fetcher.fetch(url, ArtifactKind.PDF)
        except ArtifactLoadError as e:
            if generation == self._generation:
                logger.warning(f"Artifact load failed for {url}: {e}")
                self._fail(str(e))
            return
        except Exception as e:
            if generation == self._generation:
                logger.exception(f"Unexpected error loading {url}")
                self._fail(f"Gagal memuat dokumen: {e}")
            return

        if generation != self._generation:
            logger.debug(f"Discarding stale artifact for {url}")
            return

        self.artifact = artifact
        self.page_count = getattr(artifact, "page_count", 1)
        self.page = 0
        self.state = ViewerState.READY

    def _fail(self, message: str) -> None:
        self.state = ViewerState.ERROR
        self.error = message
        self.artifact = None

    async def wait(self) -> None:
        """Wait for the in-flight load (if any) to settle."""
        self._resume_pending()
        task = self._task
        if task is not None:
            await asyncio.wait({task})

    # ---------- zoom / layout / pages ----------

    def _clamp(self, value: float) -> float:
        return round(min(self.zoom_max, max(self.zoom_min, value)), 2)

    def zoom_in(self) -> float:
        self.zoom = self._clamp(self.zoom + self.zoom_step)
        return self.zoom

    def zoom_out(self) -> float:
        self.zoom = self._clamp(self.zoom - self.zoom_step)
        return self.zoom

    def set_zoom(self, value: float) -> float:
        self.zoom = self._clamp(value)
        return self.zoom

    def reset_zoom(self) -> float:
        self.zoom = 1.0
        return self.zoom

    def set_layout(self, mode: LayoutMode) -> None:
        self.layout = LayoutMode(mode)

    def toggle_full_document(self) -> LayoutMode:
        self.layout = LayoutMode.SPLIT if self.layout == LayoutMode.FULL_DOC else LayoutMode.FULL_DOC
        return self.layout

    def next_page(self) -> int:
        if self.page + 1 < self.page_count:
            self.page += 1
        return self.page

    def prev_page(self) -> int:
        if self.page > 0:
            self.page -= 1
        return self.page

    def render_current_page(self) -> bytes:
        if self.state != ViewerState.READY or not isinstance(self.artifact, PaginatedArtifact):
            raise ViewerNotReady("No paginated document is ready in the viewer")
        return self.artifact.render_page(self.page, scale=self.render_scale * self.zoom)

    def snapshot(self) -> Dict[str, Any]:
        kind = None
        if isinstance(self.artifact, ImageArtifact):
            kind = "image"
        elif isinstance(self.artifact, PaginatedArtifact):
            kind = "paginated"

        return {
            "state": self.state.value,
            "title": self.title,
            "zoom": self.zoom,
            "zoom_percent": round(self.zoom * 100),
            "layout": self.layout.value,
            "kind": kind,
            "image_url": self.artifact.url if isinstance(self.artifact, ImageArtifact) else None,
            "page": self.page,
            "page_count": self.page_count,
            "error": self.error,
        }
