"""
Tests for the document viewer: zoom/layout state and artifact loading.

Run with: pytest tests/test_viewer.py -v
"""
import asyncio

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.artifacts import ArtifactLoadError, PaginatedArtifact
from core.viewer import DocumentViewer, LayoutMode, ViewerState
from models import ArtifactKind, Document, DocumentCategory

KK = DocumentCategory.KK
AKTA = DocumentCategory.AKTA


def image_doc(category=KK, url="kk.jpg") -> Document:
    return Document(id=f"img-{category.value}", category=category, name=url, kind=ArtifactKind.IMAGE, url=url)


def pdf_doc(category, url) -> Document:
    return Document(id=f"pdf-{category.value}", category=category, name=url, kind=ArtifactKind.PDF, url=url)


class GatedFetcher:
    """Fetcher whose loads finish only when the test releases them."""

    def __init__(self, results):
        self.results = results
        self.calls = []
        self.gates = {}

    def _gate(self, location):
        return self.gates.setdefault(location, asyncio.Event())

    def release(self, location):
        self._gate(location).set()

    async def fetch(self, location, kind):
        self.calls.append(location)
        await self._gate(location).wait()
        result = self.results[location]
        if isinstance(result, Exception):
            raise result
        return result


class ImmediateFetcher(GatedFetcher):
    async def fetch(self, location, kind):
        self.release(location)
        return await super().fetch(location, kind)


class TestZoomAndLayout:
    def test_zoom_steps_and_clamp(self):
        viewer = DocumentViewer(ImmediateFetcher({}), zoom_step=0.2, zoom_min=0.2, zoom_max=1.4)
        assert viewer.zoom_in() == 1.2
        assert viewer.zoom_in() == 1.4
        assert viewer.zoom_in() == 1.4
        viewer.reset_zoom()
        for _ in range(10):
            viewer.zoom_out()
        assert viewer.zoom == 0.2

    def test_zoom_resets_on_student_change(self):
        """Zoom 1.4 on student A's document; switching to student B resets it."""
        viewer = DocumentViewer(ImmediateFetcher({}))
        viewer.sync("A", KK, image_doc())
        viewer.zoom_in()
        viewer.zoom_in()
        assert viewer.zoom == 1.4

        viewer.sync("A", KK, image_doc())
        assert viewer.zoom == 1.4

        viewer.sync("B", KK, image_doc(url="kk-b.jpg"))
        assert viewer.zoom == 1.0

    def test_zoom_resets_on_category_change(self):
        viewer = DocumentViewer(ImmediateFetcher({}))
        viewer.sync("A", KK, image_doc())
        viewer.set_zoom(2.0)
        viewer.sync("A", AKTA, None)
        assert viewer.zoom == 1.0

    def test_layout(self):
        viewer = DocumentViewer(ImmediateFetcher({}))
        assert viewer.layout == LayoutMode.SPLIT
        assert viewer.toggle_full_document() == LayoutMode.FULL_DOC
        assert viewer.toggle_full_document() == LayoutMode.SPLIT
        viewer.set_layout(LayoutMode.FULL_DATA)
        assert viewer.snapshot()["layout"] == "full-data"


class TestSyncWithoutLoading:
    def test_image_is_ready_immediately(self):
        viewer = DocumentViewer(ImmediateFetcher({}))
        viewer.sync("A", KK, image_doc(url="https://cdn/kk.jpg"))
        snap = viewer.snapshot()
        assert snap["state"] == "READY"
        assert snap["kind"] == "image"
        assert snap["image_url"] == "https://cdn/kk.jpg"

    def test_no_document_is_empty(self):
        viewer = DocumentViewer(ImmediateFetcher({}))
        viewer.sync("A", KK, None)
        assert viewer.state == ViewerState.EMPTY
        viewer.sync(None, KK, None)
        assert viewer.state == ViewerState.EMPTY


class TestPaginatedLoading:
    def test_load_success_exposes_page_count(self):
        async def scenario():
            fetcher = ImmediateFetcher({"y.pdf": PaginatedArtifact("y.pdf", b"%PDF", 3)})
            viewer = DocumentViewer(fetcher)
            viewer.sync("A", KK, pdf_doc(KK, "y.pdf"))
            assert viewer.state == ViewerState.LOADING
            await viewer.wait()
            return viewer

        viewer = asyncio.run(scenario())
        assert viewer.state == ViewerState.READY
        assert viewer.page_count == 3
        assert viewer.page == 0
        assert viewer.next_page() == 1
        assert viewer.next_page() == 2
        assert viewer.next_page() == 2
        assert viewer.prev_page() == 1

    def test_pdf_detected_by_name(self):
        async def scenario():
            doc = Document(id="d", category=KK, name="Scan.PDF", kind=ArtifactKind.IMAGE, url="scan")
            fetcher = ImmediateFetcher({"scan": PaginatedArtifact("scan", b"%PDF", 1)})
            viewer = DocumentViewer(fetcher)
            viewer.sync("A", KK, doc)
            await viewer.wait()
            return viewer, fetcher

        viewer, fetcher = asyncio.run(scenario())
        assert fetcher.calls == ["scan"]
        assert viewer.snapshot()["kind"] == "paginated"

    def test_sync_outside_event_loop_defers_load(self):
        fetcher = ImmediateFetcher({"y.pdf": PaginatedArtifact("y.pdf", b"%PDF", 2)})
        viewer = DocumentViewer(fetcher)
        viewer.sync("A", KK, pdf_doc(KK, "y.pdf"))
        assert viewer.state == ViewerState.LOADING
        assert fetcher.calls == []

        asyncio.run(viewer.wait())
        assert viewer.state == ViewerState.READY
        assert viewer.page_count == 2
        assert fetcher.calls == ["y.pdf"]

    def test_deferred_load_starts_on_next_sync_in_loop(self):
        fetcher = ImmediateFetcher({"y.pdf": PaginatedArtifact("y.pdf", b"%PDF", 1)})
        viewer = DocumentViewer(fetcher)
        doc = pdf_doc(KK, "y.pdf")
        viewer.sync("A", KK, doc)

        async def resync():
            viewer.sync("A", KK, doc)
            await viewer.wait()

        asyncio.run(resync())
        assert viewer.state == ViewerState.READY
        assert fetcher.calls == ["y.pdf"]

    def test_deferred_load_dropped_when_superseded(self):
        fetcher = ImmediateFetcher({"y.pdf": PaginatedArtifact("y.pdf", b"%PDF", 1)})
        viewer = DocumentViewer(fetcher)
        viewer.sync("A", KK, pdf_doc(KK, "y.pdf"))
        viewer.sync("A", AKTA, image_doc(AKTA, "akta.jpg"))

        asyncio.run(viewer.wait())
        assert viewer.state == ViewerState.READY
        assert viewer.snapshot()["kind"] == "image"
        assert fetcher.calls == []

    def test_last_selection_wins(self):
        """Y is loading, operator switches to Z; Y resolving later must not show."""
        async def scenario():
            fetcher = GatedFetcher({
                "y.pdf": PaginatedArtifact("y.pdf", b"y", 2),
                "z.pdf": PaginatedArtifact("z.pdf", b"z", 7),
            })
            viewer = DocumentViewer(fetcher)
            viewer.sync("A", KK, pdf_doc(KK, "y.pdf"))
            await asyncio.sleep(0)
            y_generation = viewer._generation

            viewer.sync("A", AKTA, pdf_doc(AKTA, "z.pdf"))
            fetcher.release("z.pdf")
            await viewer.wait()

            # Y's result arrives after Z is on screen
            fetcher.release("y.pdf")
            await viewer._load(y_generation, "y.pdf")
            return viewer

        viewer = asyncio.run(scenario())
        assert viewer.state == ViewerState.READY
        assert viewer.artifact.url == "z.pdf"
        assert viewer.page_count == 7

    def test_superseded_task_is_cancelled(self):
        async def scenario():
            fetcher = GatedFetcher({"y.pdf": PaginatedArtifact("y.pdf", b"y", 2)})
            viewer = DocumentViewer(fetcher)
            viewer.sync("A", KK, pdf_doc(KK, "y.pdf"))
            task = viewer._task
            await asyncio.sleep(0)
            viewer.sync("B", KK, image_doc())
            await asyncio.wait({task})
            return viewer, task

        viewer, task = asyncio.run(scenario())
        assert task.cancelled()
        assert viewer.state == ViewerState.READY
        assert viewer.snapshot()["kind"] == "image"

    def test_failure_is_terminal_for_selection(self):
        async def scenario():
            fetcher = ImmediateFetcher({"bad.pdf": ArtifactLoadError("HTTP 404")})
            viewer = DocumentViewer(fetcher)
            doc = pdf_doc(KK, "bad.pdf")
            viewer.sync("A", KK, doc)
            await viewer.wait()
            state_after_failure = viewer.state
            # Same selection again: no retry
            viewer.sync("A", KK, doc)
            await viewer.wait()
            return viewer, fetcher, state_after_failure

        viewer, fetcher, state_after_failure = asyncio.run(scenario())
        assert state_after_failure == ViewerState.ERROR
        assert viewer.state == ViewerState.ERROR
        assert "404" in viewer.error
        assert fetcher.calls == ["bad.pdf"]

    def test_unexpected_fetch_error_becomes_error_state(self):
        async def scenario():
            viewer = DocumentViewer(ImmediateFetcher({"x.pdf": KeyError("boom")}))
            viewer.sync("A", KK, pdf_doc(KK, "x.pdf"))
            await viewer.wait()
            return viewer

        viewer = asyncio.run(scenario())
        assert viewer.state == ViewerState.ERROR

    def test_reselecting_after_error_retries(self):
        async def scenario():
            fetcher = ImmediateFetcher({"bad.pdf": ArtifactLoadError("timeout")})
            viewer = DocumentViewer(fetcher)
            viewer.sync("A", KK, pdf_doc(KK, "bad.pdf"))
            await viewer.wait()
            viewer.sync("A", AKTA, None)
            viewer.sync("A", KK, pdf_doc(KK, "bad.pdf"))
            await viewer.wait()
            return fetcher

        fetcher = asyncio.run(scenario())
        assert fetcher.calls == ["bad.pdf", "bad.pdf"]
