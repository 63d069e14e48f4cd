"""
Searchable field definitions for dashboard records.

Records are arbitrary nested mappings. A schema lists which dotted paths are
searchable and what kind of scalar each holds:
- TEXT: string values
- NUMERIC: int/float values (booleans are not searchable)

A schema is either declared up front by the caller or discovered from one
representative record. Discovery descends into nested mappings and stops at
lists and any other non-mapping value.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


PATH_SEPARATOR = "."


class FieldType(str, Enum):
    """Kinds of scalar leaf the search engine can score."""

    TEXT = "text"
    NUMERIC = "numeric"


@dataclass(frozen=True)
class FieldDescriptor:
    """A searchable leaf: its dotted path and declared type."""

    path: str
    field_type: FieldType = FieldType.TEXT

    def accepts(self, value: Any) -> bool:
        """Return True if ``value`` fits the declared type (None always fits)."""
        if value is None:
            return True
        if self.field_type == FieldType.TEXT:
            return isinstance(value, str)
        return is_number(value)

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "type": self.field_type.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FieldDescriptor:
        return cls(path=data["path"], field_type=FieldType(data.get("type", FieldType.TEXT.value)))


class SearchSchema:
    """Ordered, de-duplicated collection of searchable fields.

    Iteration order is the declaration (or discovery) order, which keeps
    per-field scoring and highlight ordering deterministic.
    """

    def __init__(self, fields: Iterable[FieldDescriptor] = ()):
        seen: set[str] = set()
        ordered: list[FieldDescriptor] = []
        for descriptor in fields:
            if descriptor.path in seen:
                continue
            seen.add(descriptor.path)
            ordered.append(descriptor)
        self._fields = tuple(ordered)

    @classmethod
    def from_paths(cls, paths: Iterable[str], field_type: FieldType = FieldType.TEXT) -> SearchSchema:
        return cls(FieldDescriptor(path, field_type) for path in paths)

    @classmethod
    def from_sample(cls, sample: Mapping[str, Any] | None) -> SearchSchema:
        return cls(extract_fields(sample))

    @property
    def fields(self) -> tuple[FieldDescriptor, ...]:
        return self._fields

    @property
    def paths(self) -> list[str]:
        return [descriptor.path for descriptor in self._fields]

    def validate(self, record: Mapping[str, Any]) -> list[str]:
        """Return the paths whose value in ``record`` does not match its type.

        Missing and None values are not reported; records are allowed to be
        sparse.
        """
        return [
            descriptor.path
            for descriptor in self._fields
            if not descriptor.accepts(resolve_path(record, descriptor.path))
        ]

    def to_dict(self) -> dict[str, Any]:
        return {"fields": [descriptor.to_dict() for descriptor in self._fields]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SearchSchema:
        return cls(FieldDescriptor.from_dict(item) for item in data.get("fields", []))

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __bool__(self) -> bool:
        return bool(self._fields)

    def __repr__(self) -> str:
        return f"SearchSchema({self.paths!r})"


def is_number(value: Any) -> bool:
    """True for int/float values; bool is deliberately excluded."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def extract_fields(sample: Mapping[str, Any] | None, prefix: str = "") -> list[FieldDescriptor]:
    """Discover searchable fields from a representative record.

    Args:
        sample: Record whose shape defines the searchable fields.
        prefix: Dotted path of ``sample`` inside the root record.

    Returns:
        Descriptors for every string or numeric leaf, in mapping order.
        An empty or missing sample yields an empty list.

    Examples:
        >>> [f.path for f in extract_fields({"name": "A", "address": {"city": "Pune"}, "tags": ["x"]})]
        ['name', 'address.city']
    """
    if not sample:
        return []

    fields: list[FieldDescriptor] = []
    for key, value in sample.items():
        path = f"{prefix}{PATH_SEPARATOR}{key}" if prefix else str(key)
        if isinstance(value, str):
            fields.append(FieldDescriptor(path, FieldType.TEXT))
        elif is_number(value):
            fields.append(FieldDescriptor(path, FieldType.NUMERIC))
        elif isinstance(value, Mapping):
            fields.extend(extract_fields(value, path))
    return fields


def resolve_path(record: Any, path: str, default: Any = None) -> Any:
    """Walk a dotted path through nested mappings.

    Any missing intermediate key (or a non-mapping in the middle of the path)
    yields ``default``.
    """
    current = record
    for key in path.split(PATH_SEPARATOR):
        if not isinstance(current, Mapping) or key not in current:
            return default
        current = current[key]
    return current


def stringify(value: Any) -> str:
    """Render a scalar the way dashboard clients display it.

    Booleans become ``true``/``false`` and integral floats drop their
    trailing ``.0`` so ``150000.0`` and ``150000`` read the same.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if value is None:
        return ""
    return str(value)
