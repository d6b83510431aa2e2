"""Helper functions for content store operations."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contentstore.storage._store import ContentStore, StoreOutcome


def extension_from_name(name: str | Path) -> str:
    """Return the lower-cased suffix of a file name without its leading dot."""
    return Path(name).suffix[1:].lower()


def store_file(store: ContentStore, path: str | Path, *, extension: str | None = None) -> StoreOutcome:
    """Store a file from disk in a ContentStore.

    The extension defaults to the file's own suffix.
    """
    path = Path(path)
    if extension is None:
        extension = extension_from_name(path)
    with path.open("rb") as handle:
        return store.store(handle, extension)
