"""Core data models for pkgshape."""

import json
import re
from dataclasses import dataclass
from typing import Any

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class _Missing:
    """Marker for a required key that is absent from the document."""

    def __repr__(self) -> str:
        return "<missing>"


MISSING = _Missing()


def join_path(parent: str, key: str | int) -> str:
    """Extend a violation path with an object key or array index.

    Identifier-like keys are joined with a dot, array indexes and other keys
    use brackets: ``exports["./feature"].import[0]``.
    """
    if isinstance(key, int):
        return f"{parent}[{key}]"
    if _IDENTIFIER.match(key):
        return f"{parent}.{key}" if parent else key
    return f"{parent}[{json.dumps(key)}]"


@dataclass(frozen=True)
class ShapeViolation:
    """A single place where a document does not match the manifest shape."""

    path: str
    expected: str
    actual: Any = None
    kind: str = "type"  # type, missing, unrecognized, format, depth

    @property
    def message(self) -> str:
        where = self.path or "<root>"
        if self.kind == "missing":
            return f"{where}: required field is missing (expected {self.expected})"
        if self.kind == "unrecognized":
            return f"{where}: unrecognized field"
        if self.kind == "depth":
            return f"{where}: nested too deeply to check (expected {self.expected})"
        if self.kind == "format":
            return f"{where}: expected {self.expected}, got {json.dumps(self.actual)}"
        return f"{where}: expected {self.expected}, got {describe_value(self.actual)}"

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "kind": self.kind,
            "expected": self.expected,
            "actual": None if self.actual is MISSING else self.actual,
            "message": self.message,
        }

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationOptions:
    """Switches that tighten validation beyond the plain shape check."""

    reject_unknown: bool = False  # report unknown keys in closed records
    strict_version: bool = False  # require a semantic version in "version"


def describe_value(value: Any) -> str:
    """Name the JSON type of a value for violation messages."""
    if value is MISSING:
        return "nothing"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
