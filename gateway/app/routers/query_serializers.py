"""Helpers to turn driver row values into JSON-safe response bodies."""
from __future__ import annotations

import datetime as dt
import decimal
import ipaddress
import uuid
from collections.abc import Mapping
from typing import Any

from fastapi import Response

from gateway.app.domain.models import QueryResult
from gateway.app.routers.utils import json_response
from gateway.app.schemas.query import QueryField, QuerySuccessResponse

_PASSTHROUGH = (str, int, float, bool, type(None))
_STRINGIFIED = (
    decimal.Decimal,
    uuid.UUID,
    ipaddress.IPv4Address,
    ipaddress.IPv6Address,
    ipaddress.IPv4Network,
    ipaddress.IPv6Network,
    ipaddress.IPv4Interface,
    ipaddress.IPv6Interface,
)


def _is_range(value: Any) -> bool:
    return all(hasattr(value, attr) for attr in ("lower", "upper", "lower_inc", "upper_inc", "isempty"))


def _range_literal(value: Any) -> str:
    """PostgreSQL text form of a range: `[1,5)`, `(,10]`, `empty`."""
    if value.isempty:
        return "empty"
    lower = "" if value.lower is None else str(json_value(value.lower))
    upper = "" if value.upper is None else str(json_value(value.upper))
    return f"{'[' if value.lower_inc else '('}{lower},{upper}{']' if value.upper_inc else ')'}"


def json_value(value: Any) -> Any:
    """
    Map one column value to something JSON can carry.

    Rules:
    - str/int/float/bool/None -> unchanged
    - bytes (bytea) -> PostgreSQL hex literal `\\x...`
    - numeric, uuid, inet/cidr -> their text form
    - date/time/timestamp -> ISO 8601; interval -> str(timedelta)
    - range -> PostgreSQL text form
    - records/dicts and arrays/tuples -> converted recursively
    - anything else -> str(value)
    """
    if isinstance(value, _PASSTHROUGH):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "\\x" + bytes(value).hex()
    if isinstance(value, _STRINGIFIED):
        return str(value)
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return value.isoformat()
    if isinstance(value, dt.timedelta):
        return str(value)
    if isinstance(value, Mapping) or callable(getattr(value, "items", None)):
        return {str(k): json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_value(v) for v in value]
    if _is_range(value):
        return _range_literal(value)
    return str(value)


def response_from_result(result: QueryResult) -> Response:
    return json_response(
        QuerySuccessResponse(
            rows=[{str(k): json_value(v) for k, v in row.items()} for row in result.rows],
            row_count=result.row_count,
            fields=[QueryField(name=f.name, data_type=f.data_type) for f in result.fields],
        )
    )


__all__ = ["json_value", "response_from_result"]
