"""ContentStore and ContentReference: content-addressed file storage."""

from contentstore.storage._file import FileContentStore
from contentstore.storage._helpers import extension_from_name, store_file
from contentstore.storage._memory import InMemoryContentStore
from contentstore.storage._reference import ContentReference
from contentstore.storage._store import (
    ContentStore,
    StoreOutcome,
    build_reference_path,
    canonical_reference_path,
    normalize_upload_path,
    validate_extension,
)

__all__ = [
    "ContentReference",
    "ContentStore",
    "FileContentStore",
    "InMemoryContentStore",
    "StoreOutcome",
    "build_reference_path",
    "canonical_reference_path",
    "extension_from_name",
    "normalize_upload_path",
    "store_file",
    "validate_extension",
]
