"""Jira search gateway using the jira client library."""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from jira import JIRA

from ..utils.retry import DeadlineRunner, Sleeper, call_with_retry, run_with_deadline
from .config import JiraConfig
from .issue import Issue

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JiraGateway:
    """Runs JQL searches with a per-attempt deadline and linear backoff."""

    def __init__(
        self,
        jira: JIRA,
        config: JiraConfig,
        sleep: Sleeper | None = None,
        run: DeadlineRunner = run_with_deadline,
    ):
        """Initialize the gateway around an already-built Jira client.

        Args:
            jira: Configured jira.JIRA instance
            config: Timeouts and retry budget
            sleep: Backoff sleeper; None waits on the enclosing attempt's
                cancellation event
            run: Deadline runner for each attempt
        """
        self.jira = jira
        self.config = config
        self._sleep = sleep
        self._run = run

    @classmethod
    def setup(cls, config: JiraConfig) -> "JiraGateway":
        """Build the Jira client from ``config`` and return a ready gateway."""
        logger.info(f"Configuring Jira client for {config.server}")
        jira = JIRA(
            server=config.server,
            basic_auth=(config.username, config.api_token),
            options={"verify": config.verify_ssl},
            get_server_info=False,
            timeout=config.request_timeout,
        )
        return cls(jira, config)

    def _with_retry(self, operation: Callable[[], T], timeout: float) -> T:
        return call_with_retry(
            operation,
            timeout,
            retry_limit=self.config.retry_limit,
            sleep=self._sleep,
            run=self._run,
        )

    @staticmethod
    def _validate_jql(jql: str) -> None:
        if not jql or not jql.strip():
            raise ValueError("JQL query must be a non-empty string")

    def search(self, jql: str, options: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a JQL search and return Jira's raw JSON response.

        Args:
            jql: JQL query string
            options: Keyword arguments passed through to the client's
                search_issues (e.g. ``{"maxResults": 50}``)

        Returns:
            Raw search result with ``issues`` and ``total`` entries

        Raises:
            TimeoutExceeded: If every attempt missed the search deadline
        """
        self._validate_jql(jql)
        search_options = {**(options or {}), "json_result": True}
        logger.debug(f"Searching Jira with query: {jql} {search_options}")

        return self._with_retry(
            lambda: self.jira.search_issues(jql, **search_options),
            self.config.search_timeout,
        )

    def search_issues(
        self, jql: str, options: dict[str, Any] | None = None
    ) -> list[Issue]:
        """Run a JQL search and wrap every returned issue.

        Uses the longer search_issues deadline around the whole search,
        including its own retries.

        Returns:
            Issues in the order Jira returned them

        Raises:
            TimeoutExceeded: If every attempt missed the deadline
            MissingFieldsError: If a returned issue has no ``fields``
        """
        self._validate_jql(jql)

        def fetch() -> list[Issue]:
            result = self.search(jql, options)
            return [Issue(raw_issue) for raw_issue in result.get("issues", [])]

        issues = self._with_retry(fetch, self.config.search_issues_timeout)
        logger.info(f"Fetched {len(issues)} issues for query: {jql}")
        return issues

    def total_count(self, jql: str) -> int:
        """Return the number of issues matching ``jql``.

        Requests a single-issue page and reads Jira's ``total``.
        """
        return int(self.search(jql, {"maxResults": 1})["total"])
