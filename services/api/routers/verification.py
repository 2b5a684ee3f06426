# services/api/routers/verification.py
from __future__ import annotations

import asyncio
import logging
from typing import Annotated, Optional

from cachetools import TTLCache
from fastapi import APIRouter, Depends, HTTPException, Response, status

from main import get_console_sessions, new_console
from core.console import VerificationConsole
from core.validation import (
    PAGE_ACTIONS,
    ZOOM_ACTIONS,
    coerce_layout_mode,
    validate_category,
    validate_choice,
    validate_data_tab,
    validate_field_path,
)
from core.viewer import ViewerNotReady
from schemas.verification import (
    ClassSelect,
    ConsoleView,
    DataTabSelect,
    DocumentSelect,
    FieldEdit,
    LayoutSelect,
    PageCommand,
    RejectNote,
    SessionCreate,
    StudentSelect,
    ZoomCommand,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/verification", tags=["verification"])

# ---- DI alias (no default value allowed) ----
Sessions = Annotated[TTLCache, Depends(get_console_sessions)]


def _console(sessions: TTLCache, session_id: str) -> VerificationConsole:
    console = sessions.get(session_id)
    if console is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="SESSION_NOT_FOUND")
    # Re-insert to restart the idle timer
    sessions[session_id] = console
    return console


# ========== Sessions ==========

@router.post("/sessions", response_model=ConsoleView, status_code=status.HTTP_201_CREATED)
async def open_session(payload: Optional[SessionCreate] = None):
    """
    Open a verification console.

    If `target_student_id` is given (e.g. from a notification), the console
    starts on that student and its class, whatever the default filter is.
    """
    session_id, console = new_console(payload.target_student_id if payload else None)
    return console.view(session_id)


@router.get("/sessions/{session_id}", response_model=ConsoleView)
async def get_session(sessions: Sessions, session_id: str):
    return _console(sessions, session_id).view(session_id)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(sessions: Sessions, session_id: str):
    _console(sessions, session_id)
    sessions.pop(session_id, None)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ========== Selection ==========

@router.put("/sessions/{session_id}/class", response_model=ConsoleView)
async def select_class(sessions: Sessions, session_id: str, payload: ClassSelect):
    console = _console(sessions, session_id)
    console.select_class(payload.class_name)
    return console.view(session_id)


@router.put("/sessions/{session_id}/student", response_model=ConsoleView)
async def select_student(sessions: Sessions, session_id: str, payload: StudentSelect):
    console = _console(sessions, session_id)
    console.select_student(payload.student_id)
    return console.view(session_id)


@router.post("/sessions/{session_id}/jump", response_model=ConsoleView)
async def jump_to_student(sessions: Sessions, session_id: str, payload: StudentSelect):
    """Force the console to a student, overriding the class filter."""
    console = _console(sessions, session_id)
    console.jump_to_student(payload.student_id)
    return console.view(session_id)


@router.put("/sessions/{session_id}/document", response_model=ConsoleView)
async def select_document(sessions: Sessions, session_id: str, payload: DocumentSelect):
    console = _console(sessions, session_id)
    console.select_document(validate_category(payload.category))
    return console.view(session_id)


@router.put("/sessions/{session_id}/data-tab", response_model=ConsoleView)
async def select_data_tab(sessions: Sessions, session_id: str, payload: DataTabSelect):
    console = _console(sessions, session_id)
    console.select_data_tab(validate_data_tab(payload.tab))
    return console.view(session_id)


# ========== Record editing ==========

@router.post("/sessions/{session_id}/edit-mode", response_model=ConsoleView)
async def toggle_edit_mode(sessions: Sessions, session_id: str):
    """Toggle edit mode. Leaving it keeps every edit already made."""
    console = _console(sessions, session_id)
    console.toggle_edit_mode()
    return console.view(session_id)


@router.patch("/sessions/{session_id}/record", response_model=ConsoleView)
async def edit_field(sessions: Sessions, session_id: str, payload: FieldEdit):
    console = _console(sessions, session_id)
    console.edit_field(validate_field_path(payload.path), payload.value)
    return console.view(session_id)


@router.post("/sessions/{session_id}/record/undo", response_model=ConsoleView)
async def undo_edit(sessions: Sessions, session_id: str):
    console = _console(sessions, session_id)
    console.undo_edit()
    return console.view(session_id)


# ========== Review ==========

@router.post("/sessions/{session_id}/approve", response_model=ConsoleView)
async def approve_document(sessions: Sessions, session_id: str):
    console = _console(sessions, session_id)
    console.approve()
    return console.view(session_id)


@router.post("/sessions/{session_id}/reject/open", response_model=ConsoleView)
async def open_reject_dialog(sessions: Sessions, session_id: str):
    console = _console(sessions, session_id)
    console.open_reject_dialog()
    return console.view(session_id)


@router.put("/sessions/{session_id}/reject/note", response_model=ConsoleView)
async def set_reject_note(sessions: Sessions, session_id: str, payload: RejectNote):
    console = _console(sessions, session_id)
    console.set_draft_note(payload.note)
    return console.view(session_id)


@router.post("/sessions/{session_id}/reject/confirm", response_model=ConsoleView)
async def confirm_reject(sessions: Sessions, session_id: str):
    console = _console(sessions, session_id)
    console.confirm_reject()
    return console.view(session_id)


@router.post("/sessions/{session_id}/reject/cancel", response_model=ConsoleView)
async def cancel_reject(sessions: Sessions, session_id: str):
    console = _console(sessions, session_id)
    console.cancel_reject()
    return console.view(session_id)


# ========== Viewer ==========

@router.post("/sessions/{session_id}/viewer/zoom", response_model=ConsoleView)
async def zoom(sessions: Sessions, session_id: str, payload: ZoomCommand):
    console = _console(sessions, session_id)
    console.zoom(validate_choice(payload.action, ZOOM_ACTIONS, "action"))
    return console.view(session_id)


@router.put("/sessions/{session_id}/viewer/layout", response_model=ConsoleView)
async def set_layout(sessions: Sessions, session_id: str, payload: LayoutSelect):
    console = _console(sessions, session_id)
    console.set_layout(coerce_layout_mode(payload.mode))
    return console.view(session_id)


@router.post("/sessions/{session_id}/viewer/page", response_model=ConsoleView)
async def turn_page(sessions: Sessions, session_id: str, payload: PageCommand):
    console = _console(sessions, session_id)
    console.turn_page(validate_choice(payload.action, PAGE_ACTIONS, "action"))
    return console.view(session_id)


@router.get("/sessions/{session_id}/viewer/page.png")
async def render_page(sessions: Sessions, session_id: str):
    """
    Rasterize the current page of the document in the viewer at the
    current zoom. Images are served from their own URL instead.
    """
    console = _console(sessions, session_id)
    try:
        png = await asyncio.to_thread(console.viewer.render_current_page)
    except ViewerNotReady as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return Response(
        content=png,
        media_type="image/png",
        headers={"Cache-Control": "no-store"},
    )
