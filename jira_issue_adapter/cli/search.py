"""CLI commands for searching Jira issues."""

import json
from datetime import datetime
from typing import Any, get_args

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from ..errors import JiraAdapterError
from ..jira_client.client import JiraGateway
from ..jira_client.config import JiraConfig
from ..jira_client.columns import ColumnSpec, ColumnType, project
from ..jira_client.issue import Issue, is_composite, to_json_text
from .options import (
    COLUMN_OPTION,
    FIELD_OPTION,
    FORMAT_OPTION,
    JQL_ARGUMENT,
    MAX_RESULTS_OPTION,
)

console = Console()


def _build_gateway() -> JiraGateway:
    """Create a gateway from JIRA_* environment variables."""
    return JiraGateway.setup(JiraConfig.from_env())


def parse_column(text: str) -> ColumnSpec:
    """Parse a ``name[:type[:format]]`` column, e.g. ``created:timestamp``.

    The format may itself contain colons (``%H:%M``).

    Raises:
        ValueError: If the name is empty or the type is unknown
    """
    name, _, rest = text.partition(":")
    column_type, _, fmt = rest.partition(":")
    try:
        return ColumnSpec(name=name, type=column_type or "string", format=fmt or None)
    except ValidationError as e:
        types = ", ".join(get_args(ColumnType))
        raise ValueError(
            f"Invalid column '{text}'. Use name[:type[:format]], type one of: {types}"
        ) from e


def issue_rows(
    issues: list[Issue],
    fields: list[str] | None,
    columns: list[ColumnSpec] | None = None,
) -> list[dict[str, Any]]:
    """Flatten issues, or pick only the requested fields or typed columns."""
    if columns:
        return [{"key": issue.key, **project(issue, columns)} for issue in issues]
    if fields:
        return [
            {"key": issue.key, **{path: issue.get(path) for path in fields}}
            for issue in issues
        ]
    return [{"key": issue.key, **issue.to_record()} for issue in issues]


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if is_composite(value):
        return to_json_text(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _json_default(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def render_table(rows: list[dict[str, Any]]) -> Table:
    """Build a rich table whose columns are the union of row keys."""
    columns: list[str] = []
    for row in rows:
        for column in row:
            if column not in columns:
                columns.append(column)

    table = Table(title="Jira Issues")
    for column in columns:
        table.add_column(column, style="cyan" if column == "key" else None)
    for row in rows:
        table.add_row(*[_cell(row.get(column)) for column in columns])
    return table


def search(
    jql: str = JQL_ARGUMENT,
    max_results: int = MAX_RESULTS_OPTION,
    field: list[str] | None = FIELD_OPTION,
    column: list[str] | None = COLUMN_OPTION,
    format: str = FORMAT_OPTION,
) -> None:
    """Search Jira issues and print them as flat records.

    Examples:
        jira-adapter search "project = ABC AND status = Open"
        jira-adapter search "project = ABC" -f status.name -f assignee.displayName
        jira-adapter search "project = ABC" --format json
        jira-adapter search "project = ABC" -c created:timestamp
    """
    if format not in ["table", "json"]:
        console.print(f"❌ Error: Unsupported format '{format}'. Use 'table' or 'json'.")
        raise typer.Exit(1)

    if field and column:
        console.print("❌ Error: Use either --field or --column, not both.")
        raise typer.Exit(1)

    try:
        columns = [parse_column(text) for text in column or []]
    except ValueError as e:
        console.print(f"❌ Error: {e}", markup=False)
        raise typer.Exit(1)

    try:
        gateway = _build_gateway()
        console.print(f"🔎 Searching: {jql}", markup=False)
        issues = gateway.search_issues(jql, {"maxResults": max_results})
    except (ValueError, JiraAdapterError) as e:
        console.print(f"❌ Error: {e}", markup=False)
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"❌ Unexpected error: {e}", markup=False)
        console.print("Please check your Jira credentials and network connection.")
        raise typer.Exit(1)

    if not issues:
        console.print("❌ No issues found matching the query")
        return

    rows = issue_rows(issues, field, columns)
    if format == "json":
        for row in rows:
            typer.echo(json.dumps(row, ensure_ascii=False, default=_json_default))
    else:
        console.print(render_table(rows))
        console.print(f"✅ Found {len(issues)} issues")


def count(jql: str = JQL_ARGUMENT) -> None:
    """Print the number of issues matching a JQL query."""
    try:
        gateway = _build_gateway()
        total = gateway.total_count(jql)
    except (ValueError, JiraAdapterError) as e:
        console.print(f"❌ Error: {e}", markup=False)
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"❌ Unexpected error: {e}", markup=False)
        console.print("Please check your Jira credentials and network connection.")
        raise typer.Exit(1)

    typer.echo(str(total))
