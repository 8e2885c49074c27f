"""Test configuration and fixtures."""

from typing import Any

import pytest

from jira_issue_adapter.jira_client.config import JiraConfig


@pytest.fixture
def raw_issue() -> dict[str, Any]:
    """A trimmed-down issue as returned by Jira's search endpoint."""
    return {
        "id": "10001",
        "key": "ABC-1",
        "self": "https://jira.example.com/rest/api/2/issue/10001",
        "fields": {
            "summary": "Login page times out",
            "issuetype": {"id": "1", "name": "Bug"},
            "project": {"id": "10000", "key": "ABC"},
            "status": {"name": "Open", "statusCategory": {"key": "new"}},
            "priority": {"id": "3"},
            "labels": ["frontend", "login"],
            "customfield_10010": {"foo": "bar"},
            "story_points": 5,
            "flagged": True,
            "resolution": None,
            "created": "2019-05-14T10:22:03.000+0000",
            "components": [{"name": "Web"}, {"name": "Auth"}],
        },
    }


@pytest.fixture
def jira_config() -> JiraConfig:
    """Configuration with a short retry budget."""
    return JiraConfig(
        server="https://jira.example.com",
        username="tester@example.com",
        api_token="secret",
        retry_limit=3,
    )
