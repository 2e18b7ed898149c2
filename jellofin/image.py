"""Lookup of artwork files for library items."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .item import Episode, Item

_SLOTS = ("primary", "backdrop", "logo", "thumb", "banner")


class ItemLookup(Protocol):
    def get_item(self, id: str) -> tuple[str, Item] | None: ...


def find_image_path(collections: ItemLookup, item_id: str, image_type: str) -> Path | None:
    """The image file of the given type for an item, or None.

    Episodes without a primary image fall back to their thumbnail.
    """
    found = collections.get_item(item_id)
    if found is None:
        return None
    _, item = found

    slot = image_type.lower()
    if slot not in _SLOTS:
        return None

    path = getattr(item.images, slot)
    if path is None and slot == "primary" and isinstance(item, Episode):
        path = item.images.thumb
    return path