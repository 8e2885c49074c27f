"""Main CLI entry point."""

import logging

import typer
from dotenv import load_dotenv
from rich.console import Console

from .options import VERBOSE_OPTION
from .search import count, search

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="jira-adapter",
    help="Search Jira issues and flatten them into records",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


@app.callback()
def main(verbose: bool = VERBOSE_OPTION) -> None:
    """Search Jira issues and flatten them into records."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


app.command(name="search", context_settings={"help_option_names": ["-h", "--help"]})(
    search
)
app.command(name="count", context_settings={"help_option_names": ["-h", "--help"]})(
    count
)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from jira_issue_adapter import __version__

    console.print(f"Jira Issue Adapter v{__version__}")


if __name__ == "__main__":
    app()
