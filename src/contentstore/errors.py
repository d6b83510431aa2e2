"""Typed errors for contentstore."""


class ContentStoreError(Exception):
    """Base exception for all contentstore errors."""


class StoreError(ContentStoreError):
    """Base class for failures reported by ``ContentStore.store``."""

    def __init__(self, path: str, reason: str) -> None:
        """Initialize with the location that could not be written and the reason."""
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


class DirectoryCreationError(StoreError):
    """Raised when the upload directory cannot be created."""

    def __init__(self, path: str) -> None:
        """Initialize with the directory that could not be created."""
        super().__init__(path, "Cannot create upload directory")


class WriteError(StoreError):
    """Raised when content cannot be written to its destination."""

    def __init__(self, path: str) -> None:
        """Initialize with the destination that could not be written."""
        super().__init__(path, "Cannot write content")


class ContentNotFoundError(ContentStoreError):
    """Raised when a ContentReference cannot be resolved in a ContentStore."""

    def __init__(self, path: str) -> None:
        """Initialize with the missing reference path."""
        self.path = path
        super().__init__(f"Content not found: {path}")


class ContentIntegrityError(ContentStoreError):
    """Raised when stored content no longer matches the digest in its name."""

    def __init__(self, path: str, expected: str, actual: str) -> None:
        """Initialize with the reference path and mismatched digests."""
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(f"Content integrity check failed for {path}: expected {expected}, got {actual}")


class JsonFieldError(ContentStoreError):
    """Raised when a JSON field holds text that cannot be decoded."""

    def __init__(self, field: str) -> None:
        """Initialize with the offending field name."""
        self.field = field
        super().__init__(f"Field {field!r} does not contain valid JSON")
