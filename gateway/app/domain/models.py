"""Domain models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class QueryRequest:
    """SQL text plus positional parameters ($1, $2, ...)."""

    text: str
    params: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class FieldDescription:
    name: str
    data_type: int


@dataclass(frozen=True)
class QueryResult:
    """Rows returned by a statement (value object)."""

    rows: list[dict[str, Any]]
    row_count: int
    fields: list[FieldDescription] = field(default_factory=list)
