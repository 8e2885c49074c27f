"""Field access and flattening for raw Jira issue payloads."""

import copy
import json
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any, TypeAlias

from ..errors import MissingFieldsError

# Shape of anything Jira returns inside an issue's "fields"
JSONValue: TypeAlias = (
    str | int | float | bool | None | dict[str, "JSONValue"] | list["JSONValue"]
)


def to_json_text(value: Any) -> str:
    """Serialize a value to compact JSON, e.g. ``{"foo":"bar"}``."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def is_composite(value: Any) -> bool:
    """Return True for mappings and non-string sequences."""
    if isinstance(value, Mapping):
        return True
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def walk_path(root: JSONValue, keys: list[str]) -> JSONValue:
    """Follow ``keys`` into nested mappings and sequences.

    Mapping steps look the key up; sequence steps take a decimal index.
    Anything that cannot be followed yields None rather than raising.
    """
    current: Any = root
    for key in keys:
        if isinstance(current, Mapping):
            current = current.get(key)
        elif is_composite(current) and key.lstrip("-").isdigit():
            index = int(key)
            current = current[index] if -len(current) <= index < len(current) else None
        else:
            return None

        if current is None:
            return None

    return current


class Issue:
    """One Jira issue, wrapping the ``fields`` of a raw search result entry.

    The payload is copied on construction and never modified afterwards.
    """

    def __init__(self, raw_issue: Mapping[str, Any]):
        """Build an issue from a raw REST payload.

        Args:
            raw_issue: One element of a search result's ``issues`` list

        Raises:
            MissingFieldsError: If the payload has no ``fields`` entry, or it
                is not a mapping
        """
        if "fields" not in raw_issue:
            raise MissingFieldsError(sorted(raw_issue.keys()))
        fields = raw_issue["fields"]
        if not isinstance(fields, Mapping):
            raise MissingFieldsError(sorted(raw_issue.keys()), type(fields).__name__)

        self._fields: dict[str, JSONValue] = copy.deepcopy(dict(fields))
        self.key: str | None = raw_issue.get("key")
        self.id: str | None = raw_issue.get("id")

    @property
    def fields(self) -> Mapping[str, JSONValue]:
        """Read-only view of the issue's fields."""
        return MappingProxyType(self._fields)

    def value(self, path: str) -> JSONValue:
        """Resolve a dotted path (``"status.name"``) to the raw value."""
        return walk_path(self._fields, path.split("."))

    def get(self, path: str) -> JSONValue:
        """Resolve a dotted path, returning composite values as JSON text.

        Returns None when any step of the path is missing.
        """
        found = self.value(path)
        if is_composite(found):
            return to_json_text(found)
        return found

    def __getitem__(self, path: str) -> JSONValue:
        return self.get(path)

    def to_record(self) -> dict[str, Any]:
        """Flatten the top-level fields into a single-level record.

        Strings are kept. Mappings with a ``name`` (or failing that an
        ``id``) collapse to ``<key>.name`` / ``<key>.id``. Everything else,
        including numbers, booleans and null, becomes JSON text.
        """
        record: dict[str, Any] = {}

        for key, value in self._fields.items():
            if isinstance(value, str):
                record[key] = value
            elif isinstance(value, Mapping) and "name" in value:
                record[f"{key}.name"] = value["name"]
            elif isinstance(value, Mapping) and "id" in value:
                record[f"{key}.id"] = value["id"]
            else:
                record[key] = to_json_text(value)

        return record

    def __repr__(self) -> str:
        return f"Issue(key={self.key!r}, fields={len(self._fields)})"
