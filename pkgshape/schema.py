"""Shape of a package.json manifest.

Every recognized top-level field lives in ``FIELDS``; ``MANIFEST`` is the
record that ties them together. Only ``name`` and ``version`` are required.
"""

from .shapes import (
    ANY,
    BOOLEAN,
    NULL,
    OBJECT,
    STRING,
    STRINGS,
    ArrayOf,
    Forward,
    OneOf,
    Record,
    SemanticVersion,
    Shape,
    map_of,
)

REQUIRED_FIELDS = ("name", "version")

EXPORT_CONDITIONS = ("require", "import", "node", "default", "types")

DEPENDENCY_FIELDS = (
    "dependencies",
    "devDependencies",
    "optionalDependencies",
    "peerDependencies",
)

TOOL_CONFIG_FIELDS = ("eslintConfig", "prettier", "stylelint", "ava", "release", "jscpd")

# Lifecycle events with a well-known meaning. Any other script name is allowed.
SCRIPT_HOOKS = (
    "lint",
    "prepublish",
    "prepare",
    "prepublishOnly",
    "prepack",
    "postpack",
    "publish",
    "postpublish",
    "preinstall",
    "install",
    "postinstall",
    "preuninstall",
    "uninstall",
    "postuninstall",
    "preversion",
    "version",
    "postversion",
    "pretest",
    "test",
    "posttest",
    "prestop",
    "stop",
    "poststop",
    "prestart",
    "start",
    "poststart",
    "prerestart",
    "restart",
    "postrestart",
    "serve",
)

PERSON = OneOf(
    STRING,
    Record({"name": STRING, "url": STRING, "email": STRING}, required=("name",)),
    description="person",
)

FUNDING_WAY = Record({"url": STRING, "type": STRING}, required=("url",))

DEPENDENCY_MAP = map_of(STRING)

# exports: path | null | condition map | fallback array, nested to any depth
EXPORT_TARGET = Forward("exportTarget", "export target")
EXPORT_CONDITION_MAP = Record(
    {condition: EXPORT_TARGET for condition in EXPORT_CONDITIONS},
    extra=EXPORT_TARGET,
    description="export conditions",
)
EXPORT_FALLBACK = ArrayOf(EXPORT_TARGET, description="export fallback array")
EXPORT_TARGET.define(
    OneOf(STRING, NULL, EXPORT_CONDITION_MAP, EXPORT_FALLBACK, description="export target")
)

PEER_DEPENDENCY_META = Record(
    {"optional": BOOLEAN}, required=("optional",), extra=OneOf(STRING, BOOLEAN)
)

FIELDS: dict[str, Shape] = {
    "name": STRING,
    "version": SemanticVersion(),
    "description": STRING,
    "keywords": STRINGS,
    "homepage": STRING,
    "bugs": OneOf(STRING, Record({"url": STRING, "email": STRING}, required=("url", "email"))),
    "license": STRING,
    "author": PERSON,
    "contributors": ArrayOf(PERSON),
    "maintainers": ArrayOf(PERSON),
    "files": STRINGS,
    "main": STRING,
    "exports": EXPORT_TARGET,
    "bin": OneOf(STRING, OBJECT),
    "type": STRING,
    "types": STRING,
    "typings": STRING,
    "typesVersions": map_of(STRINGS),
    "man": OneOf(STRING, STRINGS),
    "directories": Record(
        {key: STRING for key in ("bin", "doc", "example", "lib", "man", "test")}
    ),
    "repository": OneOf(
        STRING, Record({"type": STRING, "url": STRING, "directory": STRING})
    ),
    "funding": OneOf(STRING, STRINGS, FUNDING_WAY, ArrayOf(FUNDING_WAY)),
    "scripts": Record({hook: STRING for hook in SCRIPT_HOOKS}, extra=STRING),
    "config": OBJECT,
    "dependencies": DEPENDENCY_MAP,
    "devDependencies": DEPENDENCY_MAP,
    "optionalDependencies": DEPENDENCY_MAP,
    "peerDependencies": DEPENDENCY_MAP,
    "peerDependenciesMeta": map_of(PEER_DEPENDENCY_META),
    "bundledDependencies": OneOf(BOOLEAN, STRINGS),
    "resolutions": OBJECT,
    "overrides": OBJECT,
    "packageManager": STRING,
    "engines": Record({"node": STRING}, required=("node",), extra=STRING),
    "engineStrict": BOOLEAN,
    "os": STRINGS,
    "cpu": STRINGS,
    "private": OneOf(BOOLEAN, STRING),
    "publishConfig": Record(
        {"access": STRING, "tag": STRING, "registry": STRING}, extra=STRING
    ),
    "dist": Record({"shasum": STRING, "tarball": STRING}),
    "readme": STRING,
    "module": STRING,
    "esnext": OneOf(STRING, Record({"main": STRING, "browser": STRING}, extra=STRING)),
    "workspaces": OneOf(STRINGS, Record({"packages": STRINGS, "nohoist": STRINGS})),
    "jspm": ANY,
    **{field: OBJECT for field in TOOL_CONFIG_FIELDS},
}

MANIFEST = Record(FIELDS, required=REQUIRED_FIELDS, description="package manifest")

FIELD_DOCS: dict[str, str] = {
    "name": "The name of the package.",
    "version": "Package version, parseable by node-semver.",
    "description": "Short summary shown in package search results.",
    "keywords": "Search keywords for the package.",
    "homepage": "URL of the project homepage.",
    "bugs": "Issue tracker URL, or an object with the tracker url and a report email.",
    "license": "License identifier telling users how they may use the package.",
    "author": "The person who created the package.",
    "contributors": "People who contributed to the package.",
    "maintainers": "People who maintain the package.",
    "files": "Files and folders included when the package is published.",
    "main": "Module ID of the primary entry point.",
    "exports": "Export map restricting which module paths can be imported, with conditions and fallbacks.",
    "bin": "Executable file, or a map of command name to file.",
    "type": 'Set to "module" to treat .js files as ES modules, "commonjs" otherwise.',
    "types": "Bundled type declaration file.",
    "typings": "Synonym for types.",
    "typesVersions": "Type declaration path overrides keyed by TypeScript version range.",
    "man": "Single file or list of files for the man program.",
    "directories": "Hints about the package layout (bin, doc, example, lib, man, test).",
    "repository": "Where the source code lives.",
    "funding": "Ways to help fund development of the package.",
    "scripts": "Commands run at lifecycle events, keyed by event name.",
    "config": "Configuration parameters for package scripts that persist across upgrades.",
    "dependencies": "Runtime dependencies: package name to version range, tarball or git URL.",
    "devDependencies": "Development-only dependencies.",
    "optionalDependencies": "Dependencies whose install failure is not fatal.",
    "peerDependencies": "Packages the host project is expected to provide.",
    "peerDependenciesMeta": "Extra information about peer dependencies, such as marking them optional.",
    "bundledDependencies": "Package names bundled when publishing, or true to bundle all.",
    "resolutions": "Selective version resolutions (yarn).",
    "overrides": "Selective version overrides (npm).",
    "packageManager": "Package manager expected when working on the project (corepack).",
    "engines": "Runtime version ranges the package works on; node is required.",
    "engineStrict": "Treat engines as a hard requirement.",
    "os": "Operating systems the package runs on.",
    "cpu": "CPU architectures the package runs on.",
    "private": "When true the registry refuses to publish the package.",
    "publishConfig": "Settings applied at publish time (access, tag, registry, ...).",
    "dist": "Published tarball information.",
    "readme": "Readme content.",
    "module": "ECMAScript module entry point.",
    "esnext": "Entry point with untranspiled code.",
    "workspaces": "Workspace package globs, or an object with packages and nohoist lists.",
    "jspm": "jspm configuration.",
    "eslintConfig": "ESLint configuration.",
    "prettier": "Prettier configuration.",
    "stylelint": "Stylelint configuration.",
    "ava": "AVA test runner configuration.",
    "release": "semantic-release configuration.",
    "jscpd": "jscpd copy/paste detector configuration.",
}


def is_recognized(key: str) -> bool:
    """Return True if ``key`` is a known top-level manifest field."""
    return key in FIELDS
