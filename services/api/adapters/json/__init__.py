"""
JSON file student store.
Simple file-based student source for local use and demos: the whole list is
loaded once and written back after every change.
Not production-ready (no locking, single process only).
"""
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from models import Student
from models.converters import student_to_row, students_from_rows

logger = logging.getLogger(__name__)


class JsonStudentStore:
    """
    Student source + persistence notifier backed by one JSON file.

    `students` is the live list handed to the console; it is never replaced,
    only mutated, so every console session sees the same objects.
    """

    def __init__(self, path: str = "data/students.json"):
        """
        Initialize the JSON store.

        Args:
            path: JSON file holding a list of student objects
        """
        self.path = Path(path)
        self.students: List[Student] = students_from_rows(self._read_file())
        logger.info(f"Loaded {len(self.students)} students from {self.path}")

    def _read_file(self) -> List[Dict[str, Any]]:
        """Read and parse the JSON file."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.warning(f"Student file {self.path} not found; starting empty")
            return []
        if not isinstance(data, list):
            raise ValueError(f"{self.path} must contain a JSON list of students")
        return data

    def _write_file(self, data: List[Dict[str, Any]]) -> None:
        """Write data to the JSON file atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write to temporary file first
        tmp_file = self.path.with_suffix(".tmp")
        with open(tmp_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False, default=str)

        # Atomic rename
        tmp_file.replace(self.path)

    def get_student(self, student_id: str) -> Optional[Student]:
        return next((s for s in self.students if s.id == student_id), None)

    def notify(self, student: Student) -> None:
        """
        Persistence notifier: called after a status change or record edit.
        Rows are serialized on the caller's thread; the file write runs in the
        default executor when an event loop is running.
        """
        rows = [student_to_row(s) for s in self.students]
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._write_file(rows)
            return

        future = loop.run_in_executor(None, self._write_file, rows)
        future.add_done_callback(lambda f: self._log_failure(f, student.id))

    @staticmethod
    def _log_failure(future: "asyncio.Future", student_id: str) -> None:
        if not future.cancelled() and future.exception() is not None:
            logger.error(f"Saving students failed after change to {student_id}: {future.exception()}")
