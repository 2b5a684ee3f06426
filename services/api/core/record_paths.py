"""
Dotted-path access into a nested student record.

A record is any mix of pydantic models and dicts. Paths use attribute names
or their camelCase aliases, e.g. "father.name", "dapodik.rt", "fullName".

Contract:
- reads never raise for missing structure; a missing or None container
  yields the default
- writes create every missing intermediate container as an empty dict and
  set the leaf in place on the live record
- writing the same value twice leaves the same structure as writing it once
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel

_MISSING = object()


@dataclass
class PathWrite:
    """Result of a write: enough to undo it."""
    path: str
    previous: Any = None
    existed: bool = False
    # Path of the outermost container created by this write (None if none was)
    created: Optional[str] = None


def split_path(path: str) -> List[str]:
    if not path or not path.strip():
        raise ValueError("Field path must not be empty")
    keys = path.split(".")
    if any(not k.strip() for k in keys):
        raise ValueError(f"Field path has an empty segment: {path!r}")
    return keys


def _model_attr(model: BaseModel, key: str) -> Optional[str]:
    """Resolve `key` to an attribute name of `model` (field, alias or extra)."""
    fields = type(model).model_fields
    if key in fields:
        return key
    for name, info in fields.items():
        if info.alias == key:
            return name
    extra = model.__pydantic_extra__ or {}
    if key in extra:
        return key
    return None


def _get(container: Any, key: str) -> Any:
    if isinstance(container, BaseModel):
        name = _model_attr(container, key)
        if name is None:
            return _MISSING
        return getattr(container, name)
    if isinstance(container, dict):
        return container.get(key, _MISSING)
    return _MISSING


def _set(container: Any, key: str, value: Any) -> None:
    if isinstance(container, BaseModel):
        setattr(container, _model_attr(container, key) or key, value)
    elif isinstance(container, dict):
        container[key] = value
    else:
        raise ValueError(f"Cannot set {key!r} on a {type(container).__name__}")


def _delete(container: Any, key: str) -> None:
    if isinstance(container, BaseModel):
        name = _model_attr(container, key)
        if name is None:
            return
        if name in type(container).model_fields:
            setattr(container, name, None)
        else:
            del container.__pydantic_extra__[name]
    elif isinstance(container, dict):
        container.pop(key, None)


def _is_container(value: Any) -> bool:
    return isinstance(value, (dict, BaseModel))


def read_path(record: Any, path: str, default: Any = None) -> Any:
    current = record
    for key in split_path(path):
        current = _get(current, key)
        if current is _MISSING or current is None:
            return default
    return current


def _walk_creating(record: Any, keys: List[str]) -> Tuple[Any, Optional[str]]:
    """Walk to the parent of the leaf, creating missing containers."""
    current = record
    created: Optional[str] = None
    for i, key in enumerate(keys[:-1]):
        nxt = _get(current, key)
        if nxt is _MISSING or nxt is None:
            nxt = {}
            _set(current, key, nxt)
            if created is None:
                created = ".".join(keys[: i + 1])
        elif not _is_container(nxt):
            raise ValueError(f"Path {'.'.join(keys)!r} crosses a non-container value at {key!r}")
        current = nxt
    return current, created


def write_path(record: Any, path: str, value: Any) -> PathWrite:
    keys = split_path(path)
    parent, created = _walk_creating(record, keys)
    previous = _get(parent, keys[-1])
    _set(parent, keys[-1], value)
    return PathWrite(
        path=path,
        previous=None if previous is _MISSING else previous,
        existed=previous is not _MISSING,
        created=created,
    )


def delete_path(record: Any, path: str) -> None:
    """Remove the value at `path`; missing structure is ignored."""
    keys = split_path(path)
    current = record
    for key in keys[:-1]:
        current = _get(current, key)
        if current is _MISSING or current is None:
            return
    _delete(current, keys[-1])
