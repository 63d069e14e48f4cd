"""Domain models for search, filtering, sorting and saved searches.

Value objects are immutable (frozen=True) and carry no infrastructure
dependencies. Field aliases follow the camelCase keys dashboards already send
and persist (``caseSensitive``, ``createdAt``), while Python callers can use
the snake_case names.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


_MODEL_CONFIG = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class FilterOperator(str, Enum):
    """Operators understood by the filter engine."""

    EQUALS = "equals"
    CONTAINS = "contains"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"
    BETWEEN = "between"
    IN = "in"
    NOT_IN = "notIn"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    BEFORE = "before"
    AFTER = "after"
    REGEX = "regex"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SearchOptions(BaseModel):
    """Tuning knobs for free-text search.

    ``threshold`` bounds which per-field scores count as a match; ``limit``
    bounds how many ranked results are returned. ``fields`` is an optional
    allow-list of dotted paths; when it is empty the engine discovers fields.
    """

    model_config = _MODEL_CONFIG

    fuzzy: bool = True
    case_sensitive: bool = False
    exact_match: bool = False
    fields: list[str] | None = None
    limit: int = Field(default=100, ge=0)
    threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    highlight_style: Literal["html", "plain"] = "html"


class SearchResult(BaseModel):
    """A record paired with its relevance score and the fields that matched."""

    model_config = _MODEL_CONFIG

    item: Any
    score: float = Field(ge=0.0, le=1.0)
    matches: list[str] = Field(default_factory=list)
    highlights: dict[str, str] = Field(default_factory=dict)


class Filter(BaseModel):
    """A single structured predicate: ``field <operator> value``."""

    model_config = _MODEL_CONFIG

    field: str
    operator: FilterOperator
    value: Any = None
    label: str | None = None


class SortConfig(BaseModel):
    model_config = _MODEL_CONFIG

    field: str
    direction: SortDirection = SortDirection.ASC


class SavedSearchDraft(BaseModel):
    """Everything a caller supplies when saving a search.

    The store assigns ``id`` and ``created_at`` on save.
    """

    model_config = _MODEL_CONFIG

    name: str
    description: str | None = None
    query: str = ""
    filters: list[Filter] = Field(default_factory=list)
    sort: SortConfig | None = None
    is_default: bool | None = None


class SavedSearch(SavedSearchDraft):
    """A persisted, named (query, filters, sort) profile."""

    id: str
    created_at: datetime


class FilterChoice(BaseModel):
    model_config = _MODEL_CONFIG

    label: str
    value: Any


class FilterOption(BaseModel):
    """Describes one control in a filter panel.

    Panels render these and turn the user's selection into a :class:`Filter`
    via :meth:`to_filter`, so they never have to know operator semantics.
    """

    model_config = _MODEL_CONFIG

    id: str
    label: str
    type: Literal["text", "number", "date", "boolean", "select", "range"]
    value: Any = None
    options: list[FilterChoice] | None = None
    operator: FilterOperator | None = None

    def to_filter(self, value: Any) -> Filter:
        """Build the filter for a selected ``value``.

        Range controls always produce an inclusive ``between`` filter and
        expect ``value`` to be a ``(min, max)`` pair (ValueError otherwise).
        Everything else uses the configured operator, defaulting to ``equals``.
        """
        if self.type == "range":
            if not isinstance(value, (list, tuple)) or len(value) != 2:
                msg = f"Range filter {self.id!r} expects a (min, max) pair, got {value!r}"
                raise ValueError(msg)
            low, high = value
            return Filter(field=self.id, operator=FilterOperator.BETWEEN, value=[low, high], label=self.label)
        return Filter(
            field=self.id,
            operator=self.operator or FilterOperator.EQUALS,
            value=value,
            label=self.label,
        )
