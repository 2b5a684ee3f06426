"""
Adapter interfaces for the verification console.
Defines the narrow contracts the console uses to reach the host application.
"""

from typing import List, Optional, Protocol

from models import ArtifactKind, Student
from core.artifacts import Artifact


class StudentSource(Protocol):
    """
    The host application's student list.

    `students` is the live, ordered list; the console reads and mutates the
    objects in it but never adds, removes or copies them.
    """

    students: List[Student]

    def get_student(self, student_id: str) -> Optional[Student]:
        """Return the student with that id, or None."""
        ...


class PersistenceNotifier(Protocol):
    """
    Called after every approve/reject and every record edit.

    The console does not wait for, or depend on, the outcome: a failure must
    not undo the in-memory change.
    """

    def __call__(self, student: Student) -> None:
        ...


class ArtifactFetcher(Protocol):
    """
    Turns a document's artifact location into something the viewer can show.
    """

    async def fetch(self, location: str, kind: ArtifactKind) -> Artifact:
        """
        Fetch an artifact.

        Args:
            location: URL or local path of the artifact
            kind: IMAGE or PDF

        Returns:
            ImageArtifact for images, PaginatedArtifact (with page_count) for documents.

        Raises:
            ArtifactLoadError if the location is malformed, unreachable or undecodable.
        """
        ...
