"""Row translation — build one secret record from one CSV row."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from vaultsync.errors import InvalidRecordPathError
from vaultsync.sync.normalize import normalize_segment


@dataclass(frozen=True)
class SecretRecord:
    """A single secret: its store path and the fields written under it."""

    path: str
    fields: dict[str, str] = field(default_factory=dict, hash=False)

    @property
    def field_names(self) -> list[str]:
        return sorted(self.fields)


def build_path(folder: str, name: str) -> str:
    """Join a normalized folder and name into a secret path."""
    return normalize_segment(folder, True) + "/" + normalize_segment(name, False)


def translate_row(
    row: Mapping[str, str | None],
    name_column: str,
    path_column: str,
) -> SecretRecord:
    """Translate a CSV row into a :class:`SecretRecord`.

    Every column except the two source columns becomes a field, unless its
    value is empty. Missing cells count as empty.

    Raises:
        InvalidRecordPathError: if the derived path has an empty segment.
    """
    path = build_path(row.get(path_column) or "", row.get(name_column) or "")
    if any(segment == "" for segment in path.split("/")):
        raise InvalidRecordPathError(path)

    fields = {
        key: value
        for key, value in row.items()
        if key is not None
        and key not in (name_column, path_column)
        and value
    }
    return SecretRecord(path=path, fields=fields)
