"""Jira client package for searching and flattening issues."""

from .client import JiraGateway
from .columns import ColumnSpec, project
from .config import JiraConfig
from .issue import Issue

__all__ = [
    "ColumnSpec",
    "Issue",
    "JiraConfig",
    "JiraGateway",
    "project",
]
