"""UploadedFile: an upload already received by the host framework."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from contentstore.storage import extension_from_name


@dataclass(frozen=True, slots=True)
class UploadedFile:
    """A fully received upload: the client-side name plus a temporary file holding the bytes."""

    name: str
    temp_path: Path

    def __post_init__(self) -> None:
        """Normalize ``temp_path`` into a Path."""
        object.__setattr__(self, "temp_path", Path(self.temp_path))

    @classmethod
    def from_path(cls, path: str | Path, *, name: str | None = None) -> UploadedFile:
        """Wrap a file on disk, using its own file name unless ``name`` is given."""
        path = Path(path)
        return cls(name=name if name is not None else path.name, temp_path=path)

    @property
    def extension(self) -> str:
        """Return the lower-cased extension of the client-side name, without the dot."""
        return extension_from_name(self.name)

    @property
    def size(self) -> int:
        """Return the size of the received content in bytes."""
        return self.temp_path.stat().st_size

    def open(self) -> BinaryIO:
        """Open the received content for binary reading."""
        return self.temp_path.open("rb")
