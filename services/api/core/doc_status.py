"""
Verification status of a student's documents.

    UNSUBMITTED -> PENDING -> APPROVED | REVISION

UNSUBMITTED only means "no Document for this category". PENDING is set by
the upload side. The console writes APPROVED and REVISION; both may be
entered again any number of times while the operator reconsiders.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from models import Document, DocumentCategory, DocumentStatus, Student

logger = logging.getLogger(__name__)

DEFAULT_APPROVAL_NOTE = "Dokumen valid."

# Visual state of each status in the document-type selector
STATUS_TONES: Dict[DocumentStatus, str] = {
    DocumentStatus.UNSUBMITTED: "muted",
    DocumentStatus.PENDING: "warning",
    DocumentStatus.APPROVED: "success",
    DocumentStatus.REVISION: "danger",
}


class TransitionError(Exception):
    """Approve/reject could not be applied; the document is unchanged."""


class NoDocumentError(TransitionError):
    def __init__(self, category: Optional[DocumentCategory] = None):
        label = category.value if category else "this selection"
        super().__init__(f"No document has been uploaded for {label}")


class EmptyNoteError(TransitionError):
    def __init__(self):
        super().__init__("A rejection note is required")


def resolve_document(student: Optional[Student], category: Optional[DocumentCategory]) -> Optional[Document]:
    """First document of the category wins when several exist."""
    if student is None or category is None:
        return None
    return next((d for d in student.documents if d.category == category), None)


def resolve_status(student: Optional[Student], category: Optional[DocumentCategory]) -> DocumentStatus:
    doc = resolve_document(student, category)
    return doc.status if doc is not None else DocumentStatus.UNSUBMITTED


class DocumentStatusModel:
    def __init__(
        self,
        notifier: Optional[Callable[[Student], None]] = None,
        approval_note: str = DEFAULT_APPROVAL_NOTE,
    ):
        self.notifier = notifier
        self.approval_note = approval_note

    def approve(self, student: Optional[Student], doc: Optional[Document]) -> Document:
        if student is None or doc is None:
            raise NoDocumentError()

        doc.status = DocumentStatus.APPROVED
        doc.admin_note = self.approval_note
        logger.info(f"Approved {doc.category.value} of student {student.id}")
        self._notify(student)
        return doc

    def reject(self, student: Optional[Student], doc: Optional[Document], note: Optional[str]) -> Document:
        if student is None or doc is None:
            raise NoDocumentError()
        if not note or not note.strip():
            raise EmptyNoteError()

        doc.status = DocumentStatus.REVISION
        doc.admin_note = note
        logger.info(f"Sent {doc.category.value} of student {student.id} back for revision")
        self._notify(student)
        return doc

    def _notify(self, student: Student) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier(student)
        except Exception:
            # Optimistic update: the in-memory change stands even if sync fails.
            logger.exception(f"Persistence notification failed for student {student.id}")
