"""
Pydantic schemas for API request/response validation.
"""
from .verification import (
    ClassSelect,
    ConsoleView,
    DataTabSelect,
    DocumentOut,
    DocumentSelect,
    DocumentTab,
    FieldEdit,
    FieldOut,
    LayoutSelect,
    PageCommand,
    RejectDialogOut,
    RejectNote,
    SectionOut,
    SessionCreate,
    StudentOption,
    StudentSelect,
    ViewerOut,
    ZoomCommand,
)
