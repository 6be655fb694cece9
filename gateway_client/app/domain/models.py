"""Domain models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class QueryField:
    name: str
    data_type: int | None = None


@dataclass(frozen=True)
class QueryResult:
    """Decoded body of a successful POST /query."""

    rows: list[dict[str, Any]]
    row_count: int
    fields: list[QueryField] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "QueryResult":
        rows = list(payload.get("rows") or [])
        row_count = payload.get("rowCount")
        return cls(
            rows=rows,
            row_count=int(row_count) if row_count is not None else len(rows),
            fields=[
                QueryField(name=str(f.get("name", "")), data_type=f.get("dataType"))
                for f in (payload.get("fields") or [])
            ],
        )


@dataclass(frozen=True)
class ConnectionTestResult:
    is_connected: bool
    details: dict[str, Any] = field(default_factory=dict)


def is_healthy_payload(payload: Any) -> bool:
    """The gateway counts as connected only when healthy and its database is connected."""
    if not isinstance(payload, dict):
        return False
    return payload.get("status") == "healthy" and payload.get("database") == "connected"
