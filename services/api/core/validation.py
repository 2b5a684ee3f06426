"""
Validation utilities for the verification API.
Turns raw request values into domain values with clear error messages.
"""
from fastapi import HTTPException

from models import DocumentCategory
from core.record_editor import DATA_TABS, is_reserved_path
from core.viewer import LayoutMode

ZOOM_ACTIONS = ("in", "out", "reset")
PAGE_ACTIONS = ("next", "prev")


def validate_field_path(path: str) -> str:
    """
    Validate a dotted record path.

    Rules:
    - must not be empty
    - no empty segments ("a..b", ".a", "a.")
    - no private/dunder segments
    - not the student id or document list (or anything below them)

    Raises:
        HTTPException: 400 if validation fails
    """
    if not path or not path.strip():
        raise HTTPException(
            status_code=400,
            detail="path must not be empty"
        )

    segments = path.split(".")
    if any(not s.strip() for s in segments):
        raise HTTPException(
            status_code=400,
            detail=f"path has an empty segment: {path!r}"
        )
    if any(s.startswith("_") for s in segments):
        raise HTTPException(
            status_code=400,
            detail=f"path segments must not start with '_': {path!r}"
        )
    if is_reserved_path(path):
        raise HTTPException(
            status_code=400,
            detail=f"path {path!r} is not editable"
        )

    return path


def validate_category(category: str) -> DocumentCategory:
    """
    Parse a document category (case-insensitive).

    Raises:
        HTTPException: 400 for unknown categories
    """
    try:
        return DocumentCategory((category or "").strip().upper())
    except ValueError:
        allowed = ", ".join(c.value for c in DocumentCategory)
        raise HTTPException(
            status_code=400,
            detail=f"Unknown document category {category!r}; expected one of: {allowed}"
        )


def validate_data_tab(tab: str) -> str:
    normalized = (tab or "").strip().upper()
    if normalized not in DATA_TABS:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown data tab {tab!r}; expected one of: {', '.join(DATA_TABS)}"
        )
    return normalized


def validate_choice(value: str, allowed: tuple, name: str) -> str:
    normalized = (value or "").strip().lower()
    if normalized not in allowed:
        raise HTTPException(
            status_code=400,
            detail=f"{name} must be one of {', '.join(allowed)}, got {value!r}"
        )
    return normalized


def coerce_layout_mode(mode: str | None) -> LayoutMode:
    """
    Coerce a layout value to one of the allowed modes.

    Returns:
        LayoutMode; unknown or empty values fall back to split.
    """
    if not mode:
        return LayoutMode.SPLIT

    mode_lower = mode.lower().strip().replace("_", "-")

    for m in LayoutMode:
        if m.value == mode_lower:
            return m

    # Default to split for invalid values
    return LayoutMode.SPLIT
