"""Connection and retry settings for the Jira gateway."""

import os

from pydantic import BaseModel, Field

from ..utils.retry import DEFAULT_RETRY_LIMIT

SEARCH_TIMEOUT_SECONDS = 5.0
SEARCH_ISSUES_TIMEOUT_SECONDS = 60.0
REQUEST_TIMEOUT_SECONDS = 10.0


class JiraConfig(BaseModel):
    """Settings used to build the Jira client and its retry policy.

    Passed explicitly to JiraGateway.setup(); nothing is stored globally.
    """

    server: str = Field(..., min_length=1, description="Jira base URL")
    username: str = Field(..., min_length=1, description="Jira username or email")
    api_token: str = Field(
        ..., min_length=1, description="API token or password for basic auth"
    )
    search_timeout: float = Field(
        SEARCH_TIMEOUT_SECONDS, gt=0, description="Per-attempt deadline for search"
    )
    search_issues_timeout: float = Field(
        SEARCH_ISSUES_TIMEOUT_SECONDS,
        gt=0,
        description="Per-attempt deadline for search_issues",
    )
    request_timeout: float = Field(
        REQUEST_TIMEOUT_SECONDS,
        gt=0,
        description="HTTP timeout for each request the client sends",
    )
    retry_limit: int = Field(
        DEFAULT_RETRY_LIMIT,
        ge=1,
        le=10,
        description="Total attempts allowed before a timeout is surfaced",
    )
    verify_ssl: bool = Field(True, description="Verify the server's TLS certificate")

    @classmethod
    def from_env(cls) -> "JiraConfig":
        """Build configuration from JIRA_* environment variables.

        Raises:
            pydantic.ValidationError: If a required variable is missing or
                a value is out of range
        """
        values: dict[str, str] = {
            "server": os.getenv("JIRA_SERVER", ""),
            "username": os.getenv("JIRA_USERNAME", ""),
            "api_token": os.getenv("JIRA_API_TOKEN", ""),
        }
        optional = {
            "search_timeout": "JIRA_SEARCH_TIMEOUT",
            "search_issues_timeout": "JIRA_SEARCH_ISSUES_TIMEOUT",
            "request_timeout": "JIRA_REQUEST_TIMEOUT",
            "retry_limit": "JIRA_RETRY_LIMIT",
            "verify_ssl": "JIRA_VERIFY_SSL",
        }
        for field_name, env_var in optional.items():
            env_value = os.getenv(env_var)
            if env_value:
                values[field_name] = env_value

        return cls.model_validate(values)
