# services/api/routers/students.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Annotated, Any, Dict, List, Optional

from main import get_student_store
from adapters.base import StudentSource
from models import CATEGORY_LABELS
from core.doc_status import resolve_status
from core.navigator import SelectionNavigator
from models.converters import student_to_row

router = APIRouter(prefix="/students", tags=["students"])

# ---- DI alias (no default value allowed) ----
Store = Annotated[StudentSource, Depends(get_student_store)]


@router.get("/classes", status_code=status.HTTP_200_OK)
async def list_classes(store: Store) -> Dict[str, List[str]]:
    """Distinct class names, sorted."""
    return {"classes": SelectionNavigator(store.students).classes()}


@router.get("", status_code=status.HTTP_200_OK)
async def list_students(
    store: Store,
    class_name: Optional[str] = Query(None, description="Only students of this class"),
) -> List[Dict[str, Any]]:
    """
    Student summaries in source order, with per-category document status.
    Read-only view of the live list shared with the grade and settings screens.
    """
    nav = SelectionNavigator(store.students)
    students = nav.students_in_class(class_name) if class_name else list(store.students)
    return [
        {
            "id": s.id,
            "fullName": s.full_name,
            "className": s.class_name,
            "documents": {c.value: resolve_status(s, c).value for c in CATEGORY_LABELS},
        }
        for s in students
    ]


@router.get("/{student_id}", status_code=status.HTTP_200_OK)
async def get_student(store: Store, student_id: str) -> Dict[str, Any]:
    student = store.get_student(student_id)
    if student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="STUDENT_NOT_FOUND")
    return student_to_row(student)
