"""Shared CLI option definitions."""

import typer

JQL_ARGUMENT = typer.Argument(..., help="JQL query, e.g. 'project = ABC'")

MAX_RESULTS_OPTION = typer.Option(
    50, "--max-results", "-n", help="Maximum number of issues to fetch"
)

FIELD_OPTION = typer.Option(
    None,
    "--field",
    "-f",
    help="Dotted field path to show, e.g. status.name (can be used multiple times)",
)

COLUMN_OPTION = typer.Option(
    None,
    "--column",
    "-c",
    help="Typed column as name:type[:format], e.g. created:timestamp "
    "(types: string, long, double, boolean, timestamp, json; repeatable)",
)

FORMAT_OPTION = typer.Option(
    "table", "--format", help="Output format: table or json"
)

VERBOSE_OPTION = typer.Option(
    False, "--verbose", "-v", help="Log retries and requests to stderr"
)
