"""ContentStore: protocol for content-addressed storage backends."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import TYPE_CHECKING, BinaryIO, Protocol, runtime_checkable

from contentstore.storage._reference import ContentReference

if TYPE_CHECKING:
    from collections.abc import Iterator

    from contentstore.errors import StoreError

Content = bytes | bytearray | memoryview | BinaryIO

CHUNK_SIZE = 64 * 1024
MIN_DIGEST_BYTES = 16
_SEPARATORS = ("/", "\\")


@dataclass(frozen=True, slots=True)
class StoreOutcome:
    """Result of ``ContentStore.store``: either a reference or the failure that prevented it."""

    reference: ContentReference | None = None
    error: StoreError | None = None

    def __post_init__(self) -> None:
        """Ensure exactly one of ``reference`` and ``error`` is set."""
        if (self.reference is None) == (self.error is None):
            msg = "StoreOutcome requires exactly one of reference or error."
            raise ValueError(msg)

    @property
    def ok(self) -> bool:
        """Return whether the content was stored."""
        return self.reference is not None


def normalize_upload_path(upload_path: str) -> str:
    """Strip surrounding separators from an upload path segment.

    ``"/uploads/images/"`` becomes ``"uploads/images"``.
    """
    segment = upload_path.replace("\\", "/").strip("/")
    if not segment:
        msg = "upload_path must contain at least one path segment."
        raise ValueError(msg)
    parts = segment.split("/")
    if any(part in ("", ".", "..") for part in parts):
        msg = f"upload_path {upload_path!r} contains an empty or relative segment."
        raise ValueError(msg)
    return segment


def validate_extension(extension: str) -> str:
    """Validate a declared extension token and return it unchanged."""
    if not isinstance(extension, str) or not extension:
        msg = "extension must be a non-empty string."
        raise ValueError(msg)
    if any(sep in extension for sep in _SEPARATORS) or extension.startswith("."):
        msg = f"extension {extension!r} must not contain path separators or start with a dot."
        raise ValueError(msg)
    return extension


def validate_hash_algorithm(name: str) -> str:
    """Ensure ``name`` is a hashlib algorithm producing at least a 128-bit digest."""
    try:
        hasher = hashlib.new(name)
    except ValueError as exc:
        msg = f"Unknown hash algorithm: {name!r}"
        raise ValueError(msg) from exc
    if hasher.digest_size < MIN_DIGEST_BYTES:
        msg = f"Hash algorithm {name!r} produces fewer than 128 bits."
        raise ValueError(msg)
    return name


def build_reference_path(upload_path: str, digest: str, extension: str) -> str:
    """Build ``/<upload_path>/<digest>.<extension>`` from a normalized upload path."""
    return f"/{upload_path}/{digest}.{extension}"


def normalize_reference_path(ref_or_path: ContentReference | str) -> str:
    """Normalize a reference selector into its path string."""
    if isinstance(ref_or_path, str):
        return ref_or_path
    return ref_or_path.path


def canonical_reference_path(ref_or_path: ContentReference | str) -> str:
    """Return the reference path with exactly one leading ``/`` and forward slashes.

    ``"uploads/a.jpg"``, ``"/uploads/a.jpg"`` and ``ContentReference("/uploads/a.jpg")``
    all map to ``"/uploads/a.jpg"``.
    """
    path = normalize_reference_path(ref_or_path).replace("\\", "/")
    return "/" + path.lstrip("/")


def iter_chunks(content: Content) -> Iterator[bytes]:
    """Yield the content in chunks, reading binary file objects until exhausted."""
    if isinstance(content, (bytes, bytearray, memoryview)):
        yield bytes(content)
        return
    while True:
        chunk = content.read(CHUNK_SIZE)
        if not chunk:
            return
        yield chunk


@runtime_checkable
class ContentStore(Protocol):
    """Content-addressed storage protocol.

    Identical content with the same extension always maps to the same
    reference. Implementations keep no registry of live references; callers
    track which references are still in use.
    """

    def store(self, content: Content, extension: str) -> StoreOutcome:
        """Store content and return the outcome. I/O failures are reported, not raised."""
        ...

    def remove(self, ref_or_path: ContentReference | str) -> bool:
        """Remove stored content. Return ``True`` only when something was removed."""
        ...

    def has(self, ref_or_path: ContentReference | str) -> bool:
        """Check whether content exists for a reference."""
        ...

    def read(self, ref_or_path: ContentReference | str) -> bytes:
        """Return stored bytes for a reference."""
        ...
