"""
Field editor for the student enrollment record (buku induk).

Edits are explicit FieldPatch values applied by a single reducer
(`RecordEditor.apply`) directly on the live Student, so nothing is staged:
switching data tabs or leaving edit mode never loses or rolls back a change.
Each applied patch bumps `version` and can be undone.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from models import Student
from core.record_paths import PathWrite, delete_path, read_path, write_path

logger = logging.getLogger(__name__)

PLACEHOLDER = "-"


@dataclass(frozen=True)
class FieldSpec:
    label: str
    path: str
    full_width: bool = False


@dataclass(frozen=True)
class Section:
    title: str
    fields: List[FieldSpec]


# Data tabs in display order
DATA_TABS: Dict[str, List[Section]] = {
    "DAPO_PRIBADI": [
        Section("Identitas Peserta Didik", [
            FieldSpec("Nama Lengkap", "full_name", full_width=True),
            FieldSpec("NISN", "nisn"),
            FieldSpec("NIS", "nis"),
            FieldSpec("Tempat Lahir", "birth_place", full_width=True),
            FieldSpec("Tanggal Lahir", "birth_date", full_width=True),
        ]),
        Section("Data Akademik", [
            FieldSpec("No Seri Ijazah", "diploma_number", full_width=True),
            FieldSpec("No Seri SKHUN", "dapodik.skhun", full_width=True),
        ]),
    ],
    "DAPO_ALAMAT": [
        Section("Alamat", [
            FieldSpec("Alamat Jalan", "address", full_width=True),
            FieldSpec("RT", "dapodik.rt"),
            FieldSpec("RW", "dapodik.rw"),
            FieldSpec("Dusun", "dapodik.dusun"),
            FieldSpec("Desa/Kel", "dapodik.kelurahan"),
            FieldSpec("Kecamatan", "sub_district"),
        ]),
    ],
    "DAPO_ORTU": [
        Section("Ayah", [
            FieldSpec("Nama Ayah", "father.name", full_width=True),
            FieldSpec("NIK Ayah", "father.nik"),
        ]),
        Section("Ibu", [
            FieldSpec("Nama Ibu", "mother.name", full_width=True),
            FieldSpec("NIK Ibu", "mother.nik"),
        ]),
    ],
    "DAPO_KIP": [
        Section("Kesejahteraan", [
            FieldSpec("Penerima KIP", "dapodik.kip_receiver"),
            FieldSpec("Nomor KIP", "dapodik.kip_number"),
            FieldSpec("Nama di KIP", "dapodik.kip_name", full_width=True),
        ]),
    ],
}

DEFAULT_DATA_TAB = "DAPO_PRIBADI"


class EditModeError(Exception):
    """A patch or undo was attempted while the editor is read-only."""


# Identity and the document list are owned by the host and the status model;
# the record editor never writes them or anything below them.
RESERVED_FIELDS = ("id", "documents")


class ReservedPathError(ValueError):
    pass


def is_reserved_path(path: str) -> bool:
    root = (path or "").split(".", 1)[0].strip()
    return root in RESERVED_FIELDS


@dataclass(frozen=True)
class FieldPatch:
    path: str
    value: Any


@dataclass
class _UndoEntry:
    student_id: str
    write: PathWrite


def display_value(value: Any) -> str:
    if value is None or value == "":
        return PLACEHOLDER
    return str(value)


class RecordEditor:
    def __init__(self, notifier: Optional[Callable[[Student], None]] = None):
        self.notifier = notifier
        self.editing = False
        self.version = 0
        self._undo: List[_UndoEntry] = []

    def toggle(self) -> bool:
        # Leaving edit mode neither validates nor rolls back: patches are already applied.
        self.editing = not self.editing
        return self.editing

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    def forget_history(self) -> None:
        self._undo.clear()

    def apply(self, student: Student, patch: FieldPatch) -> PathWrite:
        if not self.editing:
            raise EditModeError("Record is read-only; enable edit mode first")
        if is_reserved_path(patch.path):
            raise ReservedPathError(f"Field {patch.path!r} cannot be edited")

        result = write_path(student, patch.path, patch.value)
        self._undo.append(_UndoEntry(student_id=student.id, write=result))
        self.version += 1
        logger.debug(f"Patched {student.id}.{patch.path} (v{self.version})")
        self._notify(student)
        return result

    def undo(self, student: Student) -> Optional[str]:
        """Revert the last patch made on `student`. Returns its path, or None."""
        if not self.editing:
            raise EditModeError("Record is read-only; enable edit mode to undo")
        if not self._undo or self._undo[-1].student_id != student.id:
            return None

        w = self._undo.pop().write
        if w.created is not None:
            delete_path(student, w.created)
        elif w.existed:
            write_path(student, w.path, w.previous)
        else:
            delete_path(student, w.path)

        self.version += 1
        self._notify(student)
        return w.path

    def render(self, student: Student, tab: str) -> List[Dict[str, Any]]:
        sections = []
        for section in DATA_TABS.get(tab, []):
            fields = []
            for spec in section.fields:
                value = read_path(student, spec.path)
                fields.append({
                    "label": spec.label,
                    "path": spec.path,
                    "value": value,
                    "display": display_value(value),
                    "editable": self.editing,
                    "full_width": spec.full_width,
                })
            sections.append({"title": section.title, "fields": fields})
        return sections

    def _notify(self, student: Student) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier(student)
        except Exception:
            # In-memory state stays authoritative for the session.
            logger.exception(f"Persistence notification failed for student {student.id}")
