"""Tests for Issue field access and flattening."""

import json
from typing import Any

import pytest

from jira_issue_adapter.errors import MissingFieldsError
from jira_issue_adapter.jira_client.issue import Issue, to_json_text, walk_path


class TestIssueConstruction:
    """Test building issues from raw payloads."""

    def test_valid_payload(self, raw_issue: dict[str, Any]) -> None:
        """Test an issue exposes its fields, key and id."""
        issue = Issue(raw_issue)
        assert issue.key == "ABC-1"
        assert issue.id == "10001"
        assert issue.fields["summary"] == "Login page times out"

    def test_fields_only_payload(self) -> None:
        """Test key and id are optional."""
        issue = Issue({"fields": {}})
        assert issue.key is None
        assert issue.fields == {}

    def test_missing_fields(self) -> None:
        """Test a payload without fields is rejected."""
        with pytest.raises(MissingFieldsError, match="no 'fields' entry"):
            Issue({"key": "ABC-1"})

    @pytest.mark.parametrize("fields", [None, "summary", ["a", "b"]])
    def test_fields_must_be_a_mapping(self, fields: Any) -> None:
        """Test a null or non-object fields entry raises MissingFieldsError."""
        with pytest.raises(MissingFieldsError, match="not a mapping") as exc_info:
            Issue({"key": "ABC-1", "fields": fields})

        assert exc_info.value.found_type == type(fields).__name__
        assert exc_info.value.payload_keys == ["fields", "key"]

    def test_missing_fields_is_a_key_error(self) -> None:
        """Test MissingFieldsError can be caught as KeyError."""
        with pytest.raises(KeyError):
            Issue({})

    def test_payload_is_copied(self, raw_issue: dict[str, Any]) -> None:
        """Test later changes to the raw payload don't leak into the issue."""
        issue = Issue(raw_issue)
        raw_issue["fields"]["summary"] = "changed"
        raw_issue["fields"]["status"]["name"] = "Closed"

        assert issue.get("summary") == "Login page times out"
        assert issue.get("status.name") == "Open"

    def test_fields_view_is_read_only(self, raw_issue: dict[str, Any]) -> None:
        """Test the fields mapping cannot be modified."""
        issue = Issue(raw_issue)
        with pytest.raises(TypeError):
            issue.fields["summary"] = "changed"  # type: ignore[index]


class TestIssueGet:
    """Test dotted-path lookups."""

    def test_top_level_scalar(self, raw_issue: dict[str, Any]) -> None:
        """Test scalars are returned unchanged."""
        issue = Issue(raw_issue)
        assert issue.get("summary") == "Login page times out"
        assert issue.get("story_points") == 5
        assert issue.get("flagged") is True

    def test_nested_path(self, raw_issue: dict[str, Any]) -> None:
        """Test walking into nested mappings."""
        issue = Issue(raw_issue)
        assert issue.get("status.name") == "Open"
        assert issue.get("status.statusCategory.key") == "new"

    def test_item_access(self, raw_issue: dict[str, Any]) -> None:
        """Test issue[path] behaves like get."""
        issue = Issue(raw_issue)
        assert issue["issuetype.name"] == "Bug"

    def test_composite_values_become_json(self, raw_issue: dict[str, Any]) -> None:
        """Test mappings and lists are returned as compact JSON text."""
        issue = Issue(raw_issue)
        assert issue.get("customfield_10010") == '{"foo":"bar"}'
        assert issue.get("labels") == '["frontend","login"]'
        assert json.loads(issue.get("status")) == raw_issue["fields"]["status"]

    def test_missing_first_component(self, raw_issue: dict[str, Any]) -> None:
        """Test an unknown top-level key returns None."""
        assert Issue(raw_issue).get("nonexistent.name") is None

    def test_missing_intermediate(self, raw_issue: dict[str, Any]) -> None:
        """Test a path through a null value returns None."""
        assert Issue(raw_issue).get("resolution.name") is None

    def test_path_through_scalar(self, raw_issue: dict[str, Any]) -> None:
        """Test a path continuing past a scalar returns None."""
        assert Issue(raw_issue).get("summary.length") is None

    def test_sequence_index(self, raw_issue: dict[str, Any]) -> None:
        """Test numeric path segments index into lists."""
        issue = Issue(raw_issue)
        assert issue.get("components.1.name") == "Auth"
        assert issue.get("labels.0") == "frontend"
        assert issue.get("labels.5") is None
        assert issue.get("labels.first") is None

    def test_value_keeps_structure(self, raw_issue: dict[str, Any]) -> None:
        """Test value() returns composites without serializing them."""
        assert Issue(raw_issue).value("customfield_10010") == {"foo": "bar"}


class TestIssueToRecord:
    """Test flattening issues into records."""

    def test_one_entry_per_field(self, raw_issue: dict[str, Any]) -> None:
        """Test every top-level field produces exactly one entry."""
        record = Issue(raw_issue).to_record()
        assert len(record) == len(raw_issue["fields"])

    def test_full_record(self, raw_issue: dict[str, Any]) -> None:
        """Test the per-value flattening rules."""
        record = Issue(raw_issue).to_record()

        assert record == {
            "summary": "Login page times out",
            "issuetype.name": "Bug",
            "project.id": "10000",
            "status.name": "Open",
            "priority.id": "3",
            "labels": '["frontend","login"]',
            "customfield_10010": '{"foo":"bar"}',
            "story_points": "5",
            "flagged": "true",
            "resolution": "null",
            "created": "2019-05-14T10:22:03.000+0000",
            "components": '[{"name":"Web"},{"name":"Auth"}]',
        }

    def test_name_preferred_over_id(self) -> None:
        """Test a mapping with both name and id emits .name."""
        record = Issue({"fields": {"issuetype": {"name": "Bug", "id": "1"}}}).to_record()
        assert record == {"issuetype.name": "Bug"}

    def test_plain_mapping(self) -> None:
        """Test a mapping without name or id becomes JSON text."""
        record = Issue({"fields": {"custom": {"foo": "bar"}}}).to_record()
        assert record == {"custom": '{"foo":"bar"}'}

    def test_null_is_not_omitted(self) -> None:
        """Test null values serialize to the JSON null literal."""
        assert Issue({"fields": {"assignee": None}}).to_record() == {"assignee": "null"}

    def test_records_are_fresh(self, raw_issue: dict[str, Any]) -> None:
        """Test each call returns a new dict."""
        issue = Issue(raw_issue)
        first = issue.to_record()
        first["summary"] = "changed"
        assert issue.to_record()["summary"] == "Login page times out"

    def test_unicode_kept(self) -> None:
        """Test non-ASCII text is not escaped."""
        record = Issue({"fields": {"tags": ["café"]}}).to_record()
        assert record == {"tags": '["café"]'}


class TestWalkPath:
    """Test the generic path walk."""

    def test_empty_root(self) -> None:
        """Test walking a None root returns None."""
        assert walk_path(None, ["a"]) is None

    def test_no_keys_returns_root(self) -> None:
        """Test an empty path returns the root itself."""
        assert walk_path({"a": 1}, []) == {"a": 1}

    def test_to_json_text_is_compact(self) -> None:
        """Test JSON text has no whitespace between tokens."""
        assert to_json_text({"a": [1, 2], "b": None}) == '{"a":[1,2],"b":null}'
