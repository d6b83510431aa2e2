"""FileAttachments: upload handling for record fields that hold content references.

A record is represented by a mutable mapping of field values supplied by the
caller on every call. The caller decides when to invoke each step:

- ``load_uploads`` before validation, to place received uploads in the values
- ``save_uploads`` before insert/update, to store uploads and swap in references
- ``clean`` after the record is deleted, to remove every referenced file
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from contentstore.errors import ContentStoreError
from contentstore.storage import canonical_reference_path
from contentstore.uploads import UploadedFile

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, MutableMapping

    from contentstore.storage import ContentStore

logger = logging.getLogger(__name__)

UPLOAD_FAILED_MESSAGE = "File upload failed."


@dataclass(frozen=True, slots=True)
class CleanupReport:
    """Result of ``FileAttachments.clean``."""

    removed: tuple[str, ...]
    not_removed: tuple[str, ...]


class FileAttachments:
    """Store uploads for a fixed set of record fields and reclaim replaced files."""

    def __init__(
        self,
        store: ContentStore,
        fields: Iterable[str],
        *,
        on_stored: Callable[[str], object] | None = None,
    ) -> None:
        """Initialize with a content store, the reference-holding fields and an optional callback.

        ``on_stored`` receives the reference path of every newly stored upload.
        """
        self._store = store
        self._fields = tuple(fields)
        self._on_stored = on_stored

    @property
    def fields(self) -> tuple[str, ...]:
        """Return the declared reference-holding fields."""
        return self._fields

    def load_uploads(
        self,
        values: MutableMapping[str, object],
        uploads: Mapping[str, UploadedFile | None],
    ) -> None:
        """Place received uploads into the record values for declared fields."""
        for field in self._fields:
            upload = uploads.get(field)
            if upload is not None:
                values[field] = upload

    def save_uploads(
        self,
        values: MutableMapping[str, object],
        *,
        previous: Mapping[str, object] | None = None,
    ) -> dict[str, str]:
        """Store pending uploads and replace them with reference paths.

        The previous reference of a field is removed only after the new
        content is stored and only when the two references differ, compared
        with a single leading ``/``. A failed removal is logged and does not
        stop the remaining fields. Returns a mapping of field name to error
        message for uploads that failed; those fields are left unchanged.
        """
        errors: dict[str, str] = {}
        for field in self._fields:
            upload = values.get(field)
            if not isinstance(upload, UploadedFile):
                continue

            with upload.open() as handle:
                outcome = self._store.store(handle, upload.extension)
            if outcome.reference is None:
                logger.warning("Upload for field %r failed: %s", field, outcome.error)
                errors[field] = UPLOAD_FAILED_MESSAGE
                continue

            new_path = outcome.reference.path
            values[field] = new_path

            old_value = previous.get(field) if previous is not None else None
            if old_value:
                old_path = canonical_reference_path(str(old_value))
                if old_path != new_path:
                    self._remove(old_path, field)

            if self._on_stored is not None:
                self._on_stored(new_path)
        return errors

    def _remove(self, path: str, field: str) -> bool:
        """Remove one referenced file, logging instead of raising on failure."""
        try:
            return self._store.remove(path)
        except (OSError, ContentStoreError):
            logger.warning("Cannot remove %s for field %r", path, field, exc_info=True)
            return False

    def clean(self, values: Mapping[str, object]) -> CleanupReport:
        """Remove every file referenced by the declared fields.

        Each reference is attempted independently; a failure on one never
        stops the rest.
        """
        removed: list[str] = []
        not_removed: list[str] = []
        for field in self._fields:
            path = values.get(field)
            if not path:
                continue
            path = str(path)
            if self._remove(path, field):
                removed.append(path)
            else:
                not_removed.append(path)
        return CleanupReport(removed=tuple(removed), not_removed=tuple(not_removed))
