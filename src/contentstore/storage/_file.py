"""FileContentStore: file-system-based content-addressed storage."""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from contentstore.errors import (
    ContentIntegrityError,
    ContentNotFoundError,
    DirectoryCreationError,
    WriteError,
)
from contentstore.storage._reference import ContentReference
from contentstore.storage._store import (
    Content,
    StoreOutcome,
    build_reference_path,
    iter_chunks,
    normalize_reference_path,
    normalize_upload_path,
    validate_extension,
    validate_hash_algorithm,
)

if TYPE_CHECKING:
    from contentstore.config import StoreSettings

logger = logging.getLogger(__name__)

_TEMP_PREFIX = ".upload-"
_TEMP_SUFFIX = ".tmp"
_FILE_MODE = 0o644


def _fsync_directory(directory: Path) -> None:
    """Flush a directory so a rename inside it survives a crash (POSIX only)."""
    if os.name != "posix":
        return
    fd = os.open(directory, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


class FileContentStore:
    """File-system-based content store.

    Content is written to ``<storage_root>/<upload_path>/<digest>.<extension>``.
    The storage root is taken as given; directories are created lazily on the
    first store.
    """

    def __init__(
        self,
        storage_root: str | Path,
        upload_path: str,
        *,
        hash_algorithm: str = "md5",
    ) -> None:
        """Initialize with a storage root and the upload path nested beneath it."""
        self._root = Path(storage_root)
        self._upload_path = normalize_upload_path(upload_path)
        self._hash_algorithm = validate_hash_algorithm(hash_algorithm)

    @classmethod
    def from_settings(cls, settings: StoreSettings) -> FileContentStore:
        """Build a store from loaded ``StoreSettings``."""
        return cls(
            settings.storage_root,
            settings.upload_path,
            hash_algorithm=settings.hash_algorithm,
        )

    @property
    def root(self) -> Path:
        """Return the storage root directory."""
        return self._root

    @property
    def upload_path(self) -> str:
        """Return the normalized upload path (no leading or trailing separator)."""
        return self._upload_path

    @property
    def upload_dir(self) -> Path:
        """Return the absolute directory holding stored content."""
        return self._root / self._upload_path

    def _resolve_path(self, path: str) -> Path | None:
        """Resolve a reference path and ensure it stays under the storage root."""
        root = self._root.resolve()
        candidate = (self._root / path.lstrip("/")).resolve()
        try:
            candidate.relative_to(root)
        except ValueError:
            return None
        return candidate

    def resolve(self, ref_or_path: ContentReference | str) -> Path:
        """Return the absolute location of a reference."""
        path = normalize_reference_path(ref_or_path)
        resolved = self._resolve_path(path)
        if resolved is None:
            msg = f"Reference {path!r} resolves outside the storage root."
            raise ValueError(msg)
        return resolved

    def _write_temp(self, content: Content, directory: Path) -> tuple[Path, str]:
        """Stream content into a temporary file in ``directory``; return its path and digest."""
        hasher = hashlib.new(self._hash_algorithm)
        fd, temp_name = tempfile.mkstemp(prefix=_TEMP_PREFIX, suffix=_TEMP_SUFFIX, dir=directory)
        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "wb") as handle:
                for chunk in iter_chunks(content):
                    hasher.update(chunk)
                    handle.write(chunk)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(temp_path, _FILE_MODE)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise
        return temp_path, hasher.hexdigest()

    def store(self, content: Content, extension: str) -> StoreOutcome:
        """Store content under its digest and return the outcome.

        Directory creation and write failures are returned as the outcome's
        ``error``; no reference is returned unless the file is fully written.
        """
        validate_extension(extension)
        directory = self.upload_dir
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError:
            logger.warning("Cannot create upload directory %s", directory, exc_info=True)
            return StoreOutcome(error=DirectoryCreationError(str(directory)))

        try:
            temp_path, digest = self._write_temp(content, directory)
        except OSError:
            logger.warning("Cannot write content into %s", directory, exc_info=True)
            return StoreOutcome(error=WriteError(str(directory)))

        reference = ContentReference(build_reference_path(self._upload_path, digest, extension))
        destination = self._root / reference.path.lstrip("/")
        try:
            os.replace(temp_path, destination)
        except OSError:
            temp_path.unlink(missing_ok=True)
            logger.warning("Cannot move content to %s", destination, exc_info=True)
            return StoreOutcome(error=WriteError(str(destination)))

        # The destination may be shared with an earlier identical store, so it is left in place.
        try:
            _fsync_directory(directory)
        except OSError:
            logger.warning("Cannot flush directory entry for %s", destination, exc_info=True)
            return StoreOutcome(error=WriteError(str(destination)))

        logger.debug("Stored %s", reference.path)
        return StoreOutcome(reference=reference)

    def remove(self, ref_or_path: ContentReference | str) -> bool:
        """Delete stored content by reference. Missing content is not an error."""
        path = normalize_reference_path(ref_or_path)
        target = self._resolve_path(path)
        if target is None:
            logger.warning("Refusing to remove %r: resolves outside the storage root", path)
            return False

        try:
            target.unlink()
        except FileNotFoundError:
            return False
        except OSError:
            logger.warning("Cannot remove %s", target, exc_info=True)
            return False

        logger.debug("Removed %s", path)
        return True

    def has(self, ref_or_path: ContentReference | str) -> bool:
        """Check whether a file exists for a reference."""
        target = self._resolve_path(normalize_reference_path(ref_or_path))
        return target is not None and target.is_file()

    def read(self, ref_or_path: ContentReference | str) -> bytes:
        """Read stored bytes and verify them against the digest in the file name."""
        reference = ContentReference(normalize_reference_path(ref_or_path))
        target = self._resolve_path(reference.path)
        if target is None or not target.is_file():
            raise ContentNotFoundError(reference.path)
        data = target.read_bytes()
        actual = hashlib.new(self._hash_algorithm, data).hexdigest()
        if actual != reference.digest:
            raise ContentIntegrityError(reference.path, reference.digest, actual)
        return data
