"""Command-line interface for the Jira issue adapter."""
