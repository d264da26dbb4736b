"""Tests for the shape combinators."""

import pytest
from jsonschema import Draft202012Validator

from pkgshape.models import ValidationOptions, join_path
from pkgshape.shapes import (
    ANY,
    BOOLEAN,
    NULL,
    OBJECT,
    SEMVER_PATTERN,
    STRING,
    STRINGS,
    ArrayOf,
    Forward,
    OneOf,
    Record,
    SemanticVersion,
    map_of,
)


def accepts(shape, value, **options):
    schema = shape.json_schema(ValidationOptions(**options))
    return Draft202012Validator(schema).is_valid(value)


class TestJoinPath:
    """Test violation path construction."""

    def test_identifier_keys_use_dots(self):
        """Should join identifier-like keys with a dot."""
        assert join_path("", "name") == "name"
        assert join_path("contributors[1]", "email") == "contributors[1].email"

    def test_indexes_use_brackets(self):
        """Should render array indexes in brackets."""
        assert join_path("keywords", 2) == "keywords[2]"

    def test_other_keys_are_quoted(self):
        """Should quote keys that are not identifiers."""
        assert join_path("exports", "./feature") == 'exports["./feature"]'
        assert join_path("dependencies", "@scope/pkg") == 'dependencies["@scope/pkg"]'
        assert join_path("", "left-pad") == '["left-pad"]'


class TestScalars:
    """Test scalar shapes."""

    def test_rendering(self):
        """Should render each scalar as a plain type."""
        assert STRING.json_schema() == {"type": "string"}
        assert BOOLEAN.json_schema() == {"type": "boolean"}
        assert NULL.json_schema() == {"type": "null"}
        assert OBJECT.json_schema() == {"type": "object"}
        assert ANY.json_schema() == {}

    def test_boolean_is_not_a_number(self):
        """Should keep booleans and numbers apart."""
        assert accepts(BOOLEAN, True)
        assert not accepts(BOOLEAN, 1)
        assert not accepts(STRING, True)

    def test_any_accepts_everything(self):
        """Should accept any value, including null."""
        for value in (None, 1, "x", [1], {"a": {}}):
            assert accepts(ANY, value)

    def test_opaque_object_does_not_look_inside(self):
        """Should accept any object without checking its content."""
        assert accepts(OBJECT, {"anything": [1, None, {"deep": True}]})
        assert not accepts(OBJECT, [])


class TestSemanticVersion:
    """Test the version shape."""

    def test_lenient_by_default(self):
        """Should only require a string unless strict mode is on."""
        assert SemanticVersion().json_schema() == {"type": "string"}
        assert accepts(SemanticVersion(), "not-a-version")

    def test_strict_mode_adds_pattern(self):
        """Should carry the semver pattern and its title in strict mode."""
        schema = SemanticVersion().json_schema(ValidationOptions(strict_version=True))
        assert schema["pattern"] == SEMVER_PATTERN.pattern
        assert schema["title"] == "semantic version"
        assert not accepts(SemanticVersion(), "1.0", strict_version=True)

    @pytest.mark.parametrize("version", ["1.0.0", "0.0.1-alpha.1", "10.2.3+build.7", "1.2.3-rc.1+sha.abc", "v2.0.0"])
    def test_strict_mode_accepts_semver(self, version):
        """Should accept well-formed semantic versions."""
        assert accepts(SemanticVersion(), version, strict_version=True)


class TestArrayOf:
    """Test array shapes."""

    def test_rendering(self):
        """Should render items and carry the description as title."""
        assert STRINGS.json_schema() == {
            "type": "array",
            "title": "array of string",
            "items": {"type": "string"},
        }

    def test_checks_every_item(self):
        """Should reject an array with one bad item."""
        assert accepts(STRINGS, ["a", "b"])
        assert not accepts(STRINGS, ["a", 1])

    def test_description_wraps_unions(self):
        """Should parenthesize union item descriptions."""
        assert ArrayOf(OneOf(STRING, BOOLEAN)).describe() == "array of (string | boolean)"


class TestRecord:
    """Test record shapes."""

    def setup_method(self):
        """Setup test fixtures."""
        self.closed = Record({"url": STRING, "type": STRING}, required=("url",))
        self.open = Record({"node": STRING}, required=("node",), extra=STRING)

    def test_required_before_properties(self):
        """Should list required keys ahead of the property schemas."""
        schema = self.closed.json_schema()
        assert list(schema) == ["type", "title", "required", "properties"]
        assert schema["required"] == ["url"]

    def test_closed_record_tolerates_unknown_keys_by_default(self):
        """Should leave additionalProperties open unless asked to reject."""
        assert "additionalProperties" not in self.closed.json_schema()
        assert accepts(self.closed, {"url": "u", "extra": 1})

    def test_closed_record_rejects_unknown_keys_on_request(self):
        """Should close the record when reject_unknown is set."""
        schema = self.closed.json_schema(ValidationOptions(reject_unknown=True))
        assert schema["additionalProperties"] is False
        assert not accepts(self.closed, {"url": "u", "extra": 1}, reject_unknown=True)

    def test_open_record_checks_extra_values(self):
        """Should check unknown keys against the extra shape in every mode."""
        schema = self.open.json_schema(ValidationOptions(reject_unknown=True))
        assert schema["additionalProperties"] == {"type": "string"}
        assert accepts(self.open, {"node": ">=18", "npm": ">=9"}, reject_unknown=True)
        assert not accepts(self.open, {"node": ">=18", "npm": 9})

    def test_open_to_anything(self):
        """Should not constrain extra keys when they accept any value."""
        schema = Record({"a": STRING}, extra=ANY).json_schema(ValidationOptions(reject_unknown=True))
        assert "additionalProperties" not in schema

    def test_describe(self):
        """Should describe required, optional and open keys."""
        assert self.closed.describe() == "{url, type?}"
        assert self.open.describe() == "{node, ...}"
        assert map_of(STRING).describe() == "object of string"
        assert self.closed.json_schema()["title"] == "{url, type?}"

    def test_required_key_needs_a_shape(self):
        """Should refuse required keys that have no field shape."""
        with pytest.raises(ValueError):
            Record({"a": STRING}, required=("b",))


class TestOneOf:
    """Test union shapes."""

    def test_rendering(self):
        """Should render an anyOf titled with the union description."""
        union = OneOf(STRING, Record({"name": STRING}, required=("name",)))
        schema = union.json_schema()
        assert schema["title"] == "string | {name}"
        assert [alt.get("type") for alt in schema["anyOf"]] == ["string", "object"]

    def test_description_override(self):
        """Should prefer an explicit description."""
        union = OneOf(STRINGS, ArrayOf(Record({"url": STRING}, required=("url",))), description="funding")
        assert union.describe() == "funding"
        assert union.json_schema()["title"] == "funding"

    def test_several_branches_one_matches(self):
        """Should accept a value matching any branch."""
        union = OneOf(STRINGS, ArrayOf(Record({"url": STRING}, required=("url",))))
        assert accepts(union, ["a"])
        assert accepts(union, [{"url": "u"}])
        assert not accepts(union, ["a", {"url": "u"}])


class TestForward:
    """Test recursive shapes."""

    def test_recursive_definition(self):
        """Should render a $ref and a definition that refers back to itself."""
        tree = Forward("tree", "tree")
        tree.define(OneOf(STRING, ArrayOf(tree)))
        assert tree.json_schema() == {"$ref": "#/$defs/tree"}

        schema = {"$ref": "#/$defs/tree", "$defs": {"tree": tree.definition()}}
        validator = Draft202012Validator(schema)
        assert validator.is_valid(["a", ["b", ["c", ["d"]]]])
        errors = list(validator.iter_errors(["a", ["b", [1]]]))
        assert errors

    def test_cannot_redefine(self):
        """Should refuse a second definition."""
        shape = Forward("x", "x")
        shape.define(STRING)
        with pytest.raises(ValueError):
            shape.define(BOOLEAN)

    def test_undefined_use(self):
        """Should fail loudly when rendered before definition."""
        with pytest.raises(ValueError):
            Forward("y", "y").definition()
