"""Render the manifest shape as a JSON Schema document.

The default rendering is the one served to editors. ``validate.py`` builds
its validators from the same function, passing the options that tighten the
check.
"""

import json

from .models import ValidationOptions
from .schema import EXPORT_TARGET, FIELD_DOCS, MANIFEST

SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"


def manifest_json_schema(options: ValidationOptions | None = None) -> dict:
    """Return the manifest shape as a draft 2020-12 JSON Schema.

    Args:
        options: Optional switches; ``reject_unknown`` closes the records
            without an extra-key shape, ``strict_version`` adds the semver
            pattern to ``version``

    Returns:
        A fresh schema dict
    """
    schema = {
        "$schema": SCHEMA_DIALECT,
        "description": "Package manifest in standard npm/yarn format",
    }
    schema.update(MANIFEST.json_schema(options))
    schema["title"] = "package.json"
    for key, text in FIELD_DOCS.items():
        schema["properties"][key]["description"] = text
    schema["$defs"] = {EXPORT_TARGET.name: EXPORT_TARGET.definition(options)}
    return schema


def dump_json_schema(indent: int = 2) -> str:
    return json.dumps(manifest_json_schema(), indent=indent)
