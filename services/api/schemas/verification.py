"""
Pydantic schemas for the verification console.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from models import ArtifactKind, DocumentCategory, DocumentStatus


# ============ Requests ============


class SessionCreate(BaseModel):
    """Open a console; optionally jump straight to one student."""
    target_student_id: Optional[str] = Field(None, description="Student to open first (e.g. from a notification)")


class ClassSelect(BaseModel):
    class_name: str = Field(..., min_length=1)


class StudentSelect(BaseModel):
    student_id: str = Field(..., min_length=1)


class DocumentSelect(BaseModel):
    category: str = Field(..., description="Document category, e.g. KK")


class DataTabSelect(BaseModel):
    tab: str = Field(..., description="Data tab id, e.g. DAPO_ORTU")


class FieldEdit(BaseModel):
    path: str = Field(..., min_length=1, description="Dotted field path, e.g. father.name")
    value: Any = Field(None, description="New value for the field")


class RejectNote(BaseModel):
    note: str = Field("", max_length=1000, description="Draft rejection note")


class ZoomCommand(BaseModel):
    action: str = Field(..., description="in, out or reset")


class LayoutSelect(BaseModel):
    mode: str = Field(..., description="split, full-doc or full-data")


class PageCommand(BaseModel):
    action: str = Field(..., description="next or prev")


# ============ View model ============


class StudentOption(BaseModel):
    id: str
    full_name: str


class DocumentTab(BaseModel):
    """One button of the document-type selector."""
    category: DocumentCategory
    label: str
    status: DocumentStatus
    tone: str = Field(..., description="muted / warning / success / danger")
    active: bool = False


class DocumentOut(BaseModel):
    id: str
    category: DocumentCategory
    name: str
    kind: ArtifactKind
    url: str
    status: DocumentStatus
    admin_note: Optional[str] = None


class FieldOut(BaseModel):
    label: str
    path: str
    value: Any = None
    display: str
    editable: bool = False
    full_width: bool = False


class SectionOut(BaseModel):
    title: str
    fields: List[FieldOut] = Field(default_factory=list)


class ViewerOut(BaseModel):
    state: str
    title: Optional[str] = None
    zoom: float = 1.0
    zoom_percent: int = 100
    layout: str = "split"
    kind: Optional[str] = None
    image_url: Optional[str] = None
    page: int = 0
    page_count: int = 0
    error: Optional[str] = None


class RejectDialogOut(BaseModel):
    open: bool = False
    draft_note: str = ""


class ConsoleView(BaseModel):
    """Everything the verification screen needs to render."""
    session_id: Optional[str] = None

    classes: List[str] = Field(default_factory=list)
    selected_class: Optional[str] = None
    students: List[StudentOption] = Field(default_factory=list)
    selected_student_id: Optional[str] = None
    student_name: Optional[str] = None

    document_tabs: List[DocumentTab] = Field(default_factory=list)
    selected_category: DocumentCategory
    document: Optional[DocumentOut] = None
    can_review: bool = False

    data_tabs: List[str] = Field(default_factory=list)
    data_tab: str
    sections: List[SectionOut] = Field(default_factory=list)
    admin_note: Optional[str] = None
    edit_mode: bool = False
    record_version: int = 0
    can_undo: bool = False

    viewer: ViewerOut
    reject_dialog: RejectDialogOut = Field(default_factory=RejectDialogOut)

    message: Optional[str] = None
    empty_state: Optional[str] = None
