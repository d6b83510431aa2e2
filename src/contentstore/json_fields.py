"""JsonFields: encode/decode record fields stored as JSON text columns."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING

from contentstore.errors import JsonFieldError

if TYPE_CHECKING:
    from collections.abc import Iterable, MutableMapping


def _to_json_data(value: object) -> object:
    """Recursively turn Mapping/tuple containers into dict/list values ``json`` accepts."""
    if isinstance(value, Mapping):
        return {str(key): _to_json_data(item) for key, item in value.items()}
    if isinstance(value, (tuple, list)):
        return [_to_json_data(item) for item in value]
    return value


class JsonFields:
    """Transcode a fixed set of record fields between structures and JSON text.

    Fields that are absent or ``None`` are left alone in both directions.
    """

    def __init__(self, fields: Iterable[str], *, indent: int | None = 4) -> None:
        """Initialize with the JSON-typed fields and the output indentation."""
        self._fields = tuple(fields)
        self._indent = indent

    @property
    def fields(self) -> tuple[str, ...]:
        """Return the declared JSON fields."""
        return self._fields

    def encode(self, values: MutableMapping[str, object]) -> None:
        """Replace each declared field's value with its JSON text, before a write."""
        for field in self._fields:
            value = values.get(field)
            if value is None:
                continue
            values[field] = json.dumps(_to_json_data(value), indent=self._indent, ensure_ascii=False)

    def decode(self, values: MutableMapping[str, object]) -> None:
        """Replace each declared field's JSON text with the decoded structure, after a read."""
        for field in self._fields:
            value = values.get(field)
            if value is None:
                continue
            if not isinstance(value, (str, bytes, bytearray)):
                msg = f"{field} must hold JSON text, got {type(value).__name__}."
                raise TypeError(msg)
            try:
                values[field] = json.loads(value)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise JsonFieldError(field) from exc
