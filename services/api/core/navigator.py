"""
Class → student selection over the live student list.
"""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from models import Student

Selection = Tuple[Optional[str], Optional[str]]


class SelectionNavigator:
    """
    Resolves the (class, student) part of the console selection.

    The student list belongs to the host application; it is read on every
    call and never copied, so edits and refreshes are visible immediately.
    """

    def __init__(self, students: Sequence[Student]):
        self.students = students

    def classes(self) -> List[str]:
        return sorted({s.class_name for s in self.students})

    def students_in_class(self, class_name: Optional[str]) -> List[Student]:
        return [s for s in self.students if s.class_name == class_name]

    def resolve(self, class_name: Optional[str], student_id: Optional[str]) -> Optional[Student]:
        if not student_id:
            return None
        return next((s for s in self.students_in_class(class_name) if s.id == student_id), None)

    def find(self, student_id: Optional[str]) -> Optional[Student]:
        if not student_id:
            return None
        return next((s for s in self.students if s.id == student_id), None)

    def reconcile(self, class_name: Optional[str], student_id: Optional[str]) -> Selection:
        """
        Apply the selection rules:
        - no class selected (or the class vanished) -> first class alphabetically
        - student not found in the class -> first student of that class
        - no students at all -> (None, None)
        """
        classes = self.classes()
        if not classes:
            return None, None

        if class_name not in classes:
            class_name = classes[0]

        if self.resolve(class_name, student_id) is None:
            members = self.students_in_class(class_name)
            student_id = members[0].id if members else None

        return class_name, student_id

    def jump_to(self, student_id: str) -> Optional[Selection]:
        """Select `student_id` regardless of the class filter; None if unknown."""
        target = self.find(student_id)
        if target is None:
            return None
        return target.class_name, target.id
