from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic.alias_generators import to_snake

from . import ArtifactKind, Document, DocumentCategory, DocumentStatus, Student

logger = logging.getLogger(__name__)

# Free-form groups whose keys are normalized to snake_case on load
NESTED_GROUPS = ("father", "mother", "dapodik")


def _status_from_row(v: Any) -> DocumentStatus:
    """
    Convert a stored status cell to DocumentStatus.
    Accepts any casing; UNSUBMITTED and unknown values fall back to PENDING,
    since a stored Document always has an explicit status.
    """
    s = str(v or "").strip().upper()
    if s in (DocumentStatus.APPROVED.value, DocumentStatus.REVISION.value):
        return DocumentStatus(s)
    return DocumentStatus.PENDING


def _category_from_row(v: Any) -> Optional[DocumentCategory]:
    s = str(v or "").strip().upper()
    try:
        return DocumentCategory(s)
    except ValueError:
        return None


def _kind_from_row(row: Dict[str, Any]) -> ArtifactKind:
    s = str(row.get("type") or row.get("kind") or "").strip().upper()
    return ArtifactKind.PDF if s == "PDF" else ArtifactKind.IMAGE


def document_from_row(row: Dict[str, Any]) -> Optional[Document]:
    category = _category_from_row(row.get("category"))
    if category is None:
        logger.warning(f"Skipping document {row.get('id')!r}: unknown category {row.get('category')!r}")
        return None

    return Document(
        id=str(row.get("id") or ""),
        category=category,
        name=row.get("name") or "",
        kind=_kind_from_row(row),
        url=row.get("url") or "",
        status=_status_from_row(row.get("status")),
        admin_note=row.get("adminNote") or row.get("admin_note") or None,
    )


def student_from_row(row: Dict[str, Any]) -> Student:
    """
    Convert a raw dict from the host JSON into a Student model.
    Documents with an unknown category are dropped.
    """
    data = dict(row)
    for group in NESTED_GROUPS:
        if isinstance(data.get(group), dict):
            data[group] = {to_snake(k): v for k, v in data[group].items()}
    raw_docs = data.pop("documents", None) or []
    student = Student.model_validate(data)
    student.documents = [d for d in (document_from_row(r) for r in raw_docs) if d is not None]
    return student


def student_to_row(student: Student) -> Dict[str, Any]:
    return student.model_dump(mode="json", by_alias=True)


def students_from_rows(rows: List[Dict[str, Any]]) -> List[Student]:
    return [student_from_row(r) for r in rows]
