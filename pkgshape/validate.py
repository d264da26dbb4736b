"""Validation of package.json documents against the manifest shape.

Documents are checked by ``jsonschema`` against the schema rendered from
the shape tree (``pkgshape.jsonschema``). Each ``ValidationError`` is then
turned into one or more ``ShapeViolation`` entries, so callers see paths
such as ``exports["./feature"].import`` and the shape descriptions carried
in the schema titles rather than jsonschema's own messages.
"""

import json
import logging
from typing import Any

from jsonschema import Draft202012Validator, ValidationError

from .errors import ManifestSyntaxError
from .jsonschema import manifest_json_schema
from .models import MISSING, ShapeViolation, ValidationOptions, join_path

logger = logging.getLogger(__name__)

# (reject_unknown, strict_version) -> validator
_validators: dict[tuple[bool, bool], Draft202012Validator] = {}

# A violation together with the document keys leading to it
Located = tuple[tuple[Any, ...], ShapeViolation]


def manifest_validator(options: ValidationOptions | None = None) -> Draft202012Validator:
    """Return the validator for the manifest schema under the given options."""
    options = options or ValidationOptions()
    key = (options.reject_unknown, options.strict_version)
    if key not in _validators:
        schema = manifest_json_schema(options)
        Draft202012Validator.check_schema(schema)
        _validators[key] = Draft202012Validator(schema)
    return _validators[key]


def _render_path(parts) -> str:
    path = ""
    for part in parts:
        path = join_path(path, part)
    return path


def _expected(schema: Any, root: dict) -> str:
    """Name the shape a schema fragment stands for."""
    if schema is True or schema == {}:
        return "any value"
    if "$ref" in schema:
        name = schema["$ref"].rsplit("/", 1)[-1]
        return _expected(root["$defs"][name], root)
    return schema.get("title") or schema.get("type", "any value")


def _branches(error: ValidationError) -> list[list[ValidationError]]:
    """Group the suberrors of an anyOf failure by alternative."""
    branches: list[list[ValidationError]] = [[] for _ in error.validator_value]
    for suberror in error.context:
        branches[suberror.relative_schema_path[0]].append(suberror)
    return branches


def _rejects_type(errors: list[ValidationError]) -> bool:
    """True if an alternative failed on the value's JSON type itself."""
    for error in errors:
        if error.relative_path:
            continue
        if error.validator == "type":
            return True
        if error.validator == "anyOf" and not _admitting(error):
            return True
    return False


def _admitting(error: ValidationError) -> list[list[ValidationError]]:
    return [errors for errors in _branches(error) if not _rejects_type(errors)]


def _translate(error: ValidationError, root: dict, found: list[Located]) -> None:
    parts = tuple(error.absolute_path)
    path = _render_path(parts)

    if error.validator == "anyOf":
        admitting = _admitting(error)
        if len(admitting) == 1:
            for suberror in admitting[0]:
                _translate(suberror, root, found)
            return
        found.append((parts, ShapeViolation(path, _expected(error.schema, root), error.instance)))
        return

    if error.validator == "required":
        properties = error.schema.get("properties", {})
        for key in error.validator_value:
            if key not in error.instance:
                found.append((
                    parts + (key,),
                    ShapeViolation(
                        join_path(path, key),
                        _expected(properties.get(key, {}), root),
                        MISSING,
                        kind="missing",
                    ),
                ))
        return

    if error.validator == "additionalProperties" and error.validator_value is False:
        properties = error.schema.get("properties", {})
        for key, value in error.instance.items():
            if key not in properties:
                found.append((
                    parts + (key,),
                    ShapeViolation(join_path(path, key), "no such field", value, kind="unrecognized"),
                ))
        return

    if error.validator == "pattern":
        found.append((parts, ShapeViolation(path, _expected(error.schema, root), error.instance, kind="format")))
        return

    found.append((parts, ShapeViolation(path, _expected(error.schema, root), error.instance)))


def _collect(validator: Draft202012Validator, document: Any) -> list[Located]:
    found: list[Located] = []
    for error in validator.iter_errors(document):
        _translate(error, validator.schema, found)
    return found


def _collect_within_depth(validator: Draft202012Validator, document: Any) -> list[Located]:
    """Validate a document some field of which nests past the recursion limit.

    Each top-level field is checked on its own; fields that still hit the
    limit get a single ``depth`` violation and the rest of the document is
    validated without them.
    """
    root = validator.schema
    properties = root.get("properties", {})
    too_deep = []
    for key, value in document.items():
        if key not in properties:
            continue
        try:
            for error in validator.descend(value, properties[key], path=key):
                _translate(error, root, [])
        except RecursionError:
            too_deep.append(key)

    logger.warning("Fields nested too deeply to check: %s", ", ".join(too_deep))
    remainder = {key: value for key, value in document.items() if key not in too_deep}
    found = _collect(validator, remainder)
    for key in too_deep:
        found.append((
            (key,),
            ShapeViolation(join_path("", key), _expected(properties[key], root), kind="depth"),
        ))
    return found


def _position(document: Any, parts: tuple[Any, ...]) -> tuple[int, ...]:
    """Sort key placing a violation where its value sits in the document.

    Missing keys sort before the keys present in the same object.
    """
    rank = []
    node = document
    for part in parts:
        if isinstance(node, dict):
            if part not in node:
                rank.append(-1)
                break
            rank.append(list(node).index(part))
            node = node[part]
        elif isinstance(node, list):
            rank.append(part)
            node = node[part]
        else:
            break
    return tuple(rank)


def validate(document: Any, options: ValidationOptions | None = None) -> list[ShapeViolation]:
    """Check a decoded manifest document against the manifest shape.

    Every violation is collected in a single pass, in document order;
    nothing is raised for a non-conforming document.

    Args:
        document: The decoded JSON document
        options: Optional switches tightening the check

    Returns:
        List of violations, empty when the document conforms
    """
    validator = manifest_validator(options)
    try:
        found = _collect(validator, document)
    except RecursionError:
        if not isinstance(document, dict):
            raise
        found = _collect_within_depth(validator, document)

    found.sort(key=lambda item: _position(document, item[0]))
    violations: list[ShapeViolation] = []
    seen = set()
    for parts, violation in found:
        if (parts, violation.kind) in seen:
            continue
        seen.add((parts, violation.kind))
        violations.append(violation)

    logger.debug("Validated manifest: %d violation(s)", len(violations))
    return violations


def is_valid(document: Any, options: ValidationOptions | None = None) -> bool:
    """Return True if the document conforms to the manifest shape."""
    return not validate(document, options)


def parse_text(content: str) -> Any:
    """Decode manifest text, raising ManifestSyntaxError on malformed JSON."""
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestSyntaxError(f"Invalid JSON: {e.msg}", line=e.lineno, column=e.colno) from e


def validate_text(content: str, options: ValidationOptions | None = None) -> list[ShapeViolation]:
    """Decode manifest text and validate it.

    Args:
        content: The package.json file content
        options: Optional switches tightening the check

    Returns:
        List of violations, empty when the document conforms

    Raises:
        ManifestSyntaxError: If the content is not valid JSON
    """
    return validate(parse_text(content), options)
