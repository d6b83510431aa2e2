"""contentstore: content-addressed file storage for record uploads."""

import importlib.metadata as importlib_metadata

from contentstore.attachments import CleanupReport, FileAttachments
from contentstore.errors import (
    ContentIntegrityError,
    ContentNotFoundError,
    ContentStoreError,
    DirectoryCreationError,
    JsonFieldError,
    StoreError,
    WriteError,
)
from contentstore.json_fields import JsonFields
from contentstore.storage import (
    ContentReference,
    ContentStore,
    FileContentStore,
    InMemoryContentStore,
    StoreOutcome,
    store_file,
)
from contentstore.uploads import UploadedFile


def _detect_version() -> str:
    """Return installed package version or a local fallback when metadata is unavailable."""
    try:
        return importlib_metadata.version("contentstore")
    except importlib_metadata.PackageNotFoundError:
        return "0.0.0+unknown"


__version__ = _detect_version()

__all__ = [
    "CleanupReport",
    "ContentIntegrityError",
    "ContentNotFoundError",
    "ContentReference",
    "ContentStore",
    "ContentStoreError",
    "DirectoryCreationError",
    "FileAttachments",
    "FileContentStore",
    "InMemoryContentStore",
    "JsonFieldError",
    "JsonFields",
    "StoreError",
    "StoreOutcome",
    "UploadedFile",
    "WriteError",
    "store_file",
]
