"""Utility helpers shared by the binder configuration loader."""

from __future__ import annotations

import typing as typ

from docbinder.models import TocDescriptor, TocItem
from docbinder.modules import DocumentModule

from .models import BinderConfigError


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _build_toc_items(payload: object, path: str) -> list[TocItem]:
    """Build TOC items recursively from a YAML list.

    ``path`` locates the list in the document for error messages.
    """
    if payload is None:
        return []
    if not isinstance(payload, list):
        msg = f"'{path}' must be a list of TOC items."
        raise BinderConfigError(msg)

    items: list[TocItem] = []
    for index, raw in enumerate(payload):
        location = f"{path}[{index}]"
        if not isinstance(raw, dict):
            msg = f"'{location}' must be a mapping."
            raise BinderConfigError(msg)
        name = _optional_str(raw.get("name"))
        if name is None:
            msg = f"'{location}' is missing 'name'."
            raise BinderConfigError(msg)
        items.append(
            TocItem(
                name=name,
                ref=_optional_str(raw.get("ref")),
                items=_build_toc_items(raw.get("items"), f"{location}.items"),
            )
        )
    return items


def _build_toc_descriptor(payload: object) -> TocDescriptor | None:
    """Return the declared TOC, or None when it is absent or has no items key."""
    match payload:
        case None:
            return None
        case dict() if "items" not in payload:
            return None
        case dict():
            name = _optional_str(payload.get("name")) or TocDescriptor().name
            return TocDescriptor(name=name, items=_build_toc_items(payload["items"], "toc.items"))
        case _:
            msg = "'toc' must be a mapping with 'name' and 'items'."
            raise BinderConfigError(msg)


def _build_modules(payload: object) -> list[DocumentModule] | None:
    """Build source modules, returning None to keep the defaults."""
    if payload is None:
        return None
    if not isinstance(payload, list) or not payload:
        msg = "'modules' must be a non-empty list."
        raise BinderConfigError(msg)

    modules: list[DocumentModule] = []
    for index, raw in enumerate(payload):
        if not isinstance(raw, dict):
            msg = f"'modules[{index}]' must be a mapping."
            raise BinderConfigError(msg)
        name = _optional_str(raw.get("name"))
        if name is None:
            msg = f"'modules[{index}]' is missing 'name'."
            raise BinderConfigError(msg)
        extension = _optional_str(raw.get("extension")) or name
        modules.append(
            DocumentModule(
                name=name,
                source_directory=_optional_str(raw.get("source_directory")) or name,
                extension=extension.lstrip("."),
            )
        )
    return modules


def _as_mapping(value: object, key: str) -> typ.Mapping[str, typ.Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"'{key}' must be a mapping."
        raise BinderConfigError(msg)
    return value


__all__ = [
    "_as_mapping",
    "_build_modules",
    "_build_toc_descriptor",
    "_build_toc_items",
    "_optional_str",
]
