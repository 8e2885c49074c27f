"""Jira issue search adapter with timeout/retry and record flattening."""

__version__ = "0.1.0"
