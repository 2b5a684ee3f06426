"""
Verification console: the document review screen.

Composes the selection navigator, the document status model, the record
editor and the document viewer, and owns the rejection dialog. Every
operation is a synchronous event handler; the only background work is the
viewer's artifact load.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from models import CATEGORY_LABELS, Document, DocumentCategory, Student
from core.doc_status import (
    DEFAULT_APPROVAL_NOTE,
    STATUS_TONES,
    DocumentStatusModel,
    TransitionError,
    resolve_document,
    resolve_status,
)
from adapters.base import PersistenceNotifier
from core.navigator import SelectionNavigator
from core.record_editor import DATA_TABS, DEFAULT_DATA_TAB, EditModeError, FieldPatch, RecordEditor
from core.viewer import DocumentViewer, LayoutMode
from schemas.verification import (
    ConsoleView,
    DocumentOut,
    DocumentTab,
    RejectDialogOut,
    SectionOut,
    StudentOption,
    ViewerOut,
)

logger = logging.getLogger(__name__)

NO_STUDENT_TEXT = "Pilih siswa."
NO_DOCUMENT_TEXT = "Belum ada dokumen."


@dataclass
class VerificationSelection:
    """Transient UI selection; never persisted."""
    class_name: Optional[str] = None
    student_id: Optional[str] = None
    category: DocumentCategory = DocumentCategory.IJAZAH
    data_tab: str = DEFAULT_DATA_TAB


@dataclass
class RejectDialog:
    open: bool = False
    draft_note: str = ""


class VerificationConsole:
    def __init__(
        self,
        students: Sequence[Student],
        viewer: DocumentViewer,
        notifier: Optional[PersistenceNotifier] = None,
        approval_note: str = DEFAULT_APPROVAL_NOTE,
        target_student_id: Optional[str] = None,
    ):
        self.navigator = SelectionNavigator(students)
        self.status_model = DocumentStatusModel(notifier, approval_note)
        self.editor = RecordEditor(notifier)
        self.viewer = viewer

        self.selection = VerificationSelection()
        self.dialog = RejectDialog()
        self.message: Optional[str] = None

        if target_student_id:
            self.jump_to_student(target_student_id)
        else:
            self._settle()

    # ---------- derived state ----------

    @property
    def current_student(self) -> Optional[Student]:
        return self.navigator.resolve(self.selection.class_name, self.selection.student_id)

    @property
    def current_document(self) -> Optional[Document]:
        return resolve_document(self.current_student, self.selection.category)

    def _settle(self) -> None:
        """Re-resolve the selection against the live list and resync the viewer."""
        previous = self.selection.student_id
        class_name, student_id = self.navigator.reconcile(
            self.selection.class_name, self.selection.student_id
        )
        self.selection.class_name = class_name
        self.selection.student_id = student_id

        if student_id != previous:
            self.editor.forget_history()
            self.dialog = RejectDialog()

        self.viewer.sync(student_id, self.selection.category, self.current_document)

    # ---------- navigation ----------

    def refresh(self, students: Optional[Sequence[Student]] = None) -> None:
        if students is not None:
            self.navigator.students = students
        self._settle()

    def select_class(self, class_name: str) -> None:
        self.selection.class_name = class_name
        self._settle()

    def select_student(self, student_id: str) -> None:
        self.selection.student_id = student_id
        self._settle()
        if self.selection.student_id != student_id:
            self.message = f"Siswa {student_id} tidak ada di kelas {self.selection.class_name}"

    def jump_to_student(self, student_id: str) -> None:
        target = self.navigator.jump_to(student_id)
        if target is None:
            logger.warning(f"Jump to unknown student {student_id}")
            self.message = f"Siswa {student_id} tidak ditemukan"
        else:
            self.selection.class_name, self.selection.student_id = target
        self._settle()

    def select_document(self, category: DocumentCategory) -> None:
        self.selection.category = DocumentCategory(category)
        self._settle()

    def select_data_tab(self, tab: str) -> None:
        if tab not in DATA_TABS:
            raise ValueError(f"Unknown data tab: {tab}")
        self.selection.data_tab = tab

    # ---------- record editing ----------

    def toggle_edit_mode(self) -> bool:
        return self.editor.toggle()

    def edit_field(self, path: str, value: Any) -> None:
        student = self.current_student
        if student is None:
            self.message = NO_STUDENT_TEXT
            return
        try:
            self.editor.apply(student, FieldPatch(path=path, value=value))
        except (EditModeError, ValueError) as e:
            self.message = str(e)

    def undo_edit(self) -> None:
        student = self.current_student
        if student is None:
            self.message = NO_STUDENT_TEXT
            return
        try:
            undone = self.editor.undo(student)
        except EditModeError as e:
            self.message = str(e)
            return
        if undone is None:
            self.message = "Tidak ada perubahan untuk dibatalkan"

    # ---------- review ----------

    def _report(self, e: TransitionError) -> None:
        label = CATEGORY_LABELS[self.selection.category]
        self.message = f"{label}: {e}"

    def approve(self) -> None:
        try:
            self.status_model.approve(self.current_student, self.current_document)
        except TransitionError as e:
            self._report(e)

    def open_reject_dialog(self) -> None:
        if self.current_document is None:
            self.message = f"{CATEGORY_LABELS[self.selection.category]}: {NO_DOCUMENT_TEXT}"
            return
        self.dialog = RejectDialog(open=True, draft_note="")

    def set_draft_note(self, text: str) -> None:
        if self.dialog.open:
            self.dialog.draft_note = text

    def confirm_reject(self) -> None:
        if not self.dialog.open:
            self.message = "Dialog penolakan belum dibuka"
            return
        try:
            self.status_model.reject(self.current_student, self.current_document, self.dialog.draft_note)
        except TransitionError as e:
            # Dialog stays open so the operator can fix the note.
            self._report(e)
            return
        self.dialog = RejectDialog()

    def cancel_reject(self) -> None:
        self.dialog = RejectDialog()

    # ---------- viewer ----------

    def zoom(self, action: str) -> float:
        if action == "in":
            return self.viewer.zoom_in()
        if action == "out":
            return self.viewer.zoom_out()
        if action == "reset":
            return self.viewer.reset_zoom()
        raise ValueError(f"Unknown zoom action: {action}")

    def set_layout(self, mode: LayoutMode) -> None:
        self.viewer.set_layout(mode)

    def toggle_full_document(self) -> None:
        self.viewer.toggle_full_document()

    def turn_page(self, action: str) -> int:
        if action == "next":
            return self.viewer.next_page()
        if action == "prev":
            return self.viewer.prev_page()
        raise ValueError(f"Unknown page action: {action}")

    # ---------- rendering ----------

    def document_tabs(self) -> List[DocumentTab]:
        student = self.current_student
        tabs = []
        for category, label in CATEGORY_LABELS.items():
            status = resolve_status(student, category)
            tabs.append(DocumentTab(
                category=category,
                label=label,
                status=status,
                tone=STATUS_TONES[status],
                active=category == self.selection.category,
            ))
        return tabs

    def view(self, session_id: Optional[str] = None) -> ConsoleView:
        self._settle()
        student = self.current_student
        doc = self.current_document

        empty_state = None
        if student is None:
            empty_state = NO_STUDENT_TEXT
        elif doc is None:
            empty_state = NO_DOCUMENT_TEXT

        message, self.message = self.message, None

        return ConsoleView(
            session_id=session_id,
            classes=self.navigator.classes(),
            selected_class=self.selection.class_name,
            students=[
                StudentOption(id=s.id, full_name=s.full_name)
                for s in self.navigator.students_in_class(self.selection.class_name)
            ],
            selected_student_id=self.selection.student_id,
            student_name=student.full_name if student else None,
            document_tabs=self.document_tabs(),
            selected_category=self.selection.category,
            document=DocumentOut(**doc.model_dump()) if doc else None,
            can_review=doc is not None,
            data_tabs=list(DATA_TABS),
            data_tab=self.selection.data_tab,
            sections=[SectionOut(**s) for s in self.editor.render(student, self.selection.data_tab)] if student else [],
            admin_note=doc.admin_note if doc else None,
            edit_mode=self.editor.editing,
            record_version=self.editor.version,
            can_undo=self.editor.can_undo,
            viewer=ViewerOut(**self.viewer.snapshot()),
            reject_dialog=RejectDialogOut(open=self.dialog.open, draft_note=self.dialog.draft_note),
            message=message,
            empty_state=empty_state,
        )
