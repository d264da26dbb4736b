"""Shape combinators used to describe JSON documents.

A shape knows two things about the values it describes: a short human
description, used in violation messages and the ``fields`` listing, and its
rendering as a JSON Schema fragment. Validation itself runs on the rendered
schema (see ``validate.py``); the description of every composite shape
travels along as the fragment's ``title`` so violations can name it.

Shapes are built once at import time and never mutated afterwards, apart
from ``Forward.define`` which closes a recursive definition.
"""

import re

from .models import ValidationOptions

# MAJOR.MINOR.PATCH with optional pre-release and build metadata
SEMVER_PATTERN = re.compile(
    r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


def _options(options: ValidationOptions | None) -> ValidationOptions:
    return options or ValidationOptions()


class Shape:
    """Base shape: accepts any value."""

    description = "any value"

    def describe(self) -> str:
        return self.description

    def json_schema(self, options: ValidationOptions | None = None) -> dict:
        return {}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.describe()}>"


class Scalar(Shape):
    def __init__(self, description: str, schema_type: str):
        self.description = description
        self.schema_type = schema_type

    def json_schema(self, options: ValidationOptions | None = None) -> dict:
        return {"type": self.schema_type}


class Null(Shape):
    description = "null"

    def json_schema(self, options: ValidationOptions | None = None) -> dict:
        return {"type": "null"}


class OpaqueObject(Shape):
    """A JSON object whose content is not inspected."""

    description = "object"

    def json_schema(self, options: ValidationOptions | None = None) -> dict:
        return {"type": "object"}


class SemanticVersion(Shape):
    """A version string; the semantic-version format is only enforced on request."""

    description = "string"

    def json_schema(self, options: ValidationOptions | None = None) -> dict:
        schema = {"type": "string"}
        if _options(options).strict_version:
            schema["title"] = "semantic version"
            schema["pattern"] = SEMVER_PATTERN.pattern
        return schema


class ArrayOf(Shape):
    def __init__(self, item: Shape, description: str | None = None):
        self.item = item
        self.description = description

    def describe(self) -> str:
        if self.description:
            return self.description
        inner = self.item.describe()
        if " | " in inner:
            inner = f"({inner})"
        return f"array of {inner}"

    def json_schema(self, options: ValidationOptions | None = None) -> dict:
        return {
            "type": "array",
            "title": self.describe(),
            "items": self.item.json_schema(options),
        }


class OneOf(Shape):
    """Union of alternative shapes, rendered as ``anyOf``.

    When a value fails every alternative, only the alternatives whose JSON
    type matches the value are considered. If exactly one does, its nested
    violations are reported as-is so the author is pointed at the offending
    sub-field; otherwise a single violation names the whole union.
    """

    def __init__(self, *alternatives: Shape, description: str | None = None):
        self.alternatives = alternatives
        self.description = description

    def describe(self) -> str:
        if self.description:
            return self.description
        return " | ".join(alt.describe() for alt in self.alternatives)

    def json_schema(self, options: ValidationOptions | None = None) -> dict:
        return {
            "title": self.describe(),
            "anyOf": [alt.json_schema(options) for alt in self.alternatives],
        }


class Record(Shape):
    """A JSON object with known fields.

    ``extra`` makes the record open: keys outside ``fields`` are checked
    against it instead of being treated as unrecognized. Closed records only
    close (``additionalProperties: false``) when ``reject_unknown`` is set.
    """

    def __init__(
        self,
        fields: dict[str, Shape] | None = None,
        required: tuple[str, ...] = (),
        extra: Shape | None = None,
        description: str | None = None,
    ):
        self.fields = dict(fields or {})
        self.required = tuple(required)
        self.extra = extra
        self.description = description
        unknown = set(self.required) - set(self.fields)
        if unknown:
            raise ValueError(f"Required keys without a shape: {sorted(unknown)}")

    @property
    def is_open(self) -> bool:
        return self.extra is not None

    def describe(self) -> str:
        if self.description:
            return self.description
        if not self.fields and self.extra is not None:
            return f"object of {self.extra.describe()}"
        keys = [key if key in self.required else f"{key}?" for key in self.fields]
        if self.is_open:
            keys.append("...")
        return "{" + ", ".join(keys) + "}"

    def json_schema(self, options: ValidationOptions | None = None) -> dict:
        # required comes before properties so missing keys are reported first
        schema: dict = {"type": "object", "title": self.describe()}
        if self.required:
            schema["required"] = list(self.required)
        if self.fields:
            schema["properties"] = {
                key: shape.json_schema(options) for key, shape in self.fields.items()
            }
        if self.extra is None:
            if _options(options).reject_unknown:
                schema["additionalProperties"] = False
        elif not isinstance(self.extra, Anything):
            schema["additionalProperties"] = self.extra.json_schema(options)
        return schema


class Anything(Shape):
    """Accepts every value, including null."""


class Forward(Shape):
    """Late-bound shape, used to close recursive definitions.

    Renders as a ``$ref`` into ``$defs``; ``definition`` renders the target
    that goes there.
    """

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.target: Shape | None = None

    def define(self, shape: Shape) -> None:
        if self.target is not None:
            raise ValueError(f"Shape {self.name!r} is already defined")
        self.target = shape

    def _resolved(self) -> Shape:
        if self.target is None:
            raise ValueError(f"Shape {self.name!r} used before it was defined")
        return self.target

    def definition(self, options: ValidationOptions | None = None) -> dict:
        return self._resolved().json_schema(options)

    def json_schema(self, options: ValidationOptions | None = None) -> dict:
        return {"$ref": f"#/$defs/{self.name}"}


STRING = Scalar("string", "string")
BOOLEAN = Scalar("boolean", "boolean")
NULL = Null()
ANY = Anything()
OBJECT = OpaqueObject()
STRINGS = ArrayOf(STRING)


def map_of(value: Shape) -> Record:
    """Open record whose every value has the given shape."""
    return Record(extra=value)
