"""InMemoryContentStore: dict-based content storage for development and testing."""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

from contentstore.errors import ContentNotFoundError
from contentstore.storage._reference import ContentReference
from contentstore.storage._store import (
    StoreOutcome,
    build_reference_path,
    iter_chunks,
    normalize_reference_path,
    normalize_upload_path,
    validate_extension,
    validate_hash_algorithm,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from contentstore.storage._store import Content


class InMemoryContentStore:
    """In-memory content store for development and testing."""

    def __init__(self, upload_path: str = "uploads", *, hash_algorithm: str = "md5") -> None:
        """Initialize an empty store that builds references under ``upload_path``."""
        self._upload_path = normalize_upload_path(upload_path)
        self._hash_algorithm = validate_hash_algorithm(hash_algorithm)
        self._contents: dict[str, bytes] = {}

    @classmethod
    def from_preloaded(
        cls,
        contents: Mapping[str, bytes],
        upload_path: str = "uploads",
        *,
        hash_algorithm: str = "md5",
    ) -> InMemoryContentStore:
        """Build a store from preloaded ``{reference path: bytes}`` data."""
        store = cls(upload_path, hash_algorithm=hash_algorithm)
        store._contents.update(contents)
        return store

    @property
    def paths(self) -> tuple[str, ...]:
        """Return stored reference paths in sorted order."""
        return tuple(sorted(self._contents))

    def store(self, content: Content, extension: str) -> StoreOutcome:
        """Store content under its digest and return the outcome."""
        validate_extension(extension)
        hasher = hashlib.new(self._hash_algorithm)
        chunks: list[bytes] = []
        for chunk in iter_chunks(content):
            hasher.update(chunk)
            chunks.append(chunk)
        reference = ContentReference(build_reference_path(self._upload_path, hasher.hexdigest(), extension))
        self._contents[reference.path] = b"".join(chunks)
        return StoreOutcome(reference=reference)

    def remove(self, ref_or_path: ContentReference | str) -> bool:
        """Delete stored content by reference."""
        return self._contents.pop(normalize_reference_path(ref_or_path), None) is not None

    def has(self, ref_or_path: ContentReference | str) -> bool:
        """Check whether content exists."""
        return normalize_reference_path(ref_or_path) in self._contents

    def read(self, ref_or_path: ContentReference | str) -> bytes:
        """Return stored bytes."""
        path = normalize_reference_path(ref_or_path)
        data = self._contents.get(path)
        if data is None:
            raise ContentNotFoundError(path)
        return data
