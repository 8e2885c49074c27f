"""Typed column projection of Jira issues for tabular output."""

import math
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field

from .issue import Issue, is_composite, to_json_text

# Jira REST date-time, e.g. 2019-05-14T10:22:03.000+0000
DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"

_INTEGER_TEXT = re.compile(r"[+-]?\d+")

ColumnType = Literal["string", "long", "double", "boolean", "timestamp", "json"]


class ColumnSpec(BaseModel):
    """A single output column resolved from an issue by dotted path."""

    name: str = Field(..., min_length=1, description="Dotted path into the fields")
    type: ColumnType = Field("string", description="Type to coerce the value to")
    format: str | None = Field(
        None, description="strptime format for timestamp columns"
    )


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def as_string(value: Any) -> str | None:
    """Render a value as text; sequences become comma-joined elements."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        return to_json_text(value)
    if is_composite(value):
        return ",".join(
            to_json_text(item) if is_composite(item) else _scalar_text(item)
            for item in value
        )
    return _scalar_text(value)


def as_long(value: Any) -> int | None:
    """Whole numbers as-is, fractional numbers truncated, integer text parsed."""
    if isinstance(value, bool) or value is None or is_composite(value):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str) and _INTEGER_TEXT.fullmatch(value):
        return int(value)
    return None


def as_double(value: Any) -> float | None:
    if isinstance(value, bool) or value is None or is_composite(value):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def as_boolean(value: Any) -> bool | None:
    """Only the text "true" (any case) is true; other scalars are false."""
    if value is None or is_composite(value):
        return None
    if isinstance(value, bool):
        return value
    return str(value).lower() == "true"


def as_timestamp(value: Any, fmt: str | None = None) -> datetime | None:
    """Parse a timestamp string, returning None when it doesn't match.

    Values parsed without an offset are taken to be UTC.
    """
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.strptime(value, fmt or DEFAULT_TIMESTAMP_FORMAT)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def as_json(value: Any) -> Any:
    """Keep mappings and sequences; scalars have no JSON column value."""
    return value if is_composite(value) else None


def coerce(value: Any, column: ColumnSpec) -> Any:
    """Coerce a raw field value to the column's type."""
    if column.type == "string":
        return as_string(value)
    if column.type == "long":
        return as_long(value)
    if column.type == "double":
        return as_double(value)
    if column.type == "boolean":
        return as_boolean(value)
    if column.type == "timestamp":
        return as_timestamp(value, column.format)
    return as_json(value)


def project(issue: Issue, columns: list[ColumnSpec]) -> dict[str, Any]:
    """Build one typed row from an issue.

    Args:
        issue: Issue to read from
        columns: Columns to emit, in order

    Returns:
        Mapping of column name to coerced value (None when missing or
        not coercible)
    """
    return {column.name: coerce(issue.value(column.name), column) for column in columns}
