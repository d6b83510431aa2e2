"""ContentReference: immutable handle to content-addressed data."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ContentReference:
    """Relative path of stored content, e.g. ``/uploads/images/<md5>.jpg``.

    Two references are equal iff their path strings are equal.
    """

    path: str

    def __str__(self) -> str:
        """Return the reference path."""
        return self.path

    @property
    def name(self) -> str:
        """Return the final path component (``<digest>.<extension>``)."""
        return self.path.rsplit("/", 1)[-1]

    @property
    def digest(self) -> str:
        """Return the hex digest encoded in the file name."""
        return self.name.split(".", 1)[0]

    @property
    def extension(self) -> str:
        """Return the declared extension encoded in the file name."""
        parts = self.name.split(".", 1)
        return parts[1] if len(parts) == 2 else ""
