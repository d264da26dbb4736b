"""Typed access to package.json documents.

``Manifest.from_dict`` turns a conforming document into dataclasses with
named, typed fields; ``Manifest.to_dict`` writes the same JSON shape back.
Keys that the typed model has no attribute for are kept in ``extra`` so
nothing is lost on a round trip.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Union

from .errors import InvalidManifestError
from .models import ValidationOptions
from .schema import FIELDS
from .validate import parse_text, validate

MANIFEST_FILENAME = "package.json"

# "Barney Rubble <b@rubble.com> (http://barnyrubble.tumblr.com/)"
_PERSON_PATTERN = re.compile(r"^\s*([^<(]*?)\s*(?:<([^>]*)>)?\s*(?:\(([^)]*)\))?\s*$")


def _dump(value: Any) -> Any:
    if hasattr(value, "to_value"):
        return value.to_value()
    if isinstance(value, list):
        return [_dump(item) for item in value]
    if isinstance(value, dict):
        return {key: _dump(item) for key, item in value.items()}
    return value


class JsonRecord:
    """Mixin for dataclasses backed by a JSON object.

    ``json_keys`` maps attribute names to JSON keys; keys outside it are
    carried in ``extra``.
    """

    json_keys: ClassVar[dict[str, str]] = {}

    @classmethod
    def from_value(cls, value: dict):
        known = {attr: value[key] for attr, key in cls.json_keys.items() if key in value}
        names = set(cls.json_keys.values())
        extra = {key: item for key, item in value.items() if key not in names}
        return cls(**known, extra=extra)

    def to_value(self) -> dict:
        out: dict[str, Any] = {}
        for attr, key in self.json_keys.items():
            item = getattr(self, attr)
            if item is not None:
                out[key] = _dump(item)
        out.update(_dump(self.extra))
        return out


@dataclass
class Person(JsonRecord):
    """Someone involved in creating or maintaining the package."""

    name: str
    url: str | None = None
    email: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    raw: str | None = field(default=None, compare=False)

    json_keys: ClassVar[dict[str, str]] = {"name": "name", "url": "url", "email": "email"}

    @classmethod
    def parse(cls, text: str) -> "Person":
        """Parse the ``Name <email> (url)`` shorthand."""
        match = _PERSON_PATTERN.match(text)
        if not match:
            return cls(name=text.strip(), raw=text)
        name, email, url = match.groups()
        return cls(name=name, email=email or None, url=url or None, raw=text)

    @classmethod
    def from_value(cls, value: str | dict) -> "Person":
        if isinstance(value, str):
            return cls.parse(value)
        return super().from_value(value)

    def format(self) -> str:
        parts = [self.name]
        if self.email:
            parts.append(f"<{self.email}>")
        if self.url:
            parts.append(f"({self.url})")
        return " ".join(part for part in parts if part)

    def to_value(self) -> str | dict:
        if self.raw is None:
            return super().to_value()
        if Person.parse(self.raw) == self:
            return self.raw
        return self.format()


@dataclass
class Bugs(JsonRecord):
    url: str
    email: str
    extra: dict[str, Any] = field(default_factory=dict)

    json_keys: ClassVar[dict[str, str]] = {"url": "url", "email": "email"}


@dataclass
class Repository(JsonRecord):
    type: str | None = None
    url: str | None = None
    directory: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    json_keys: ClassVar[dict[str, str]] = {"type": "type", "url": "url", "directory": "directory"}


@dataclass
class FundingWay(JsonRecord):
    url: str
    type: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    json_keys: ClassVar[dict[str, str]] = {"url": "url", "type": "type"}


@dataclass
class Directories(JsonRecord):
    bin: str | None = None
    doc: str | None = None
    example: str | None = None
    lib: str | None = None
    man: str | None = None
    test: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    json_keys: ClassVar[dict[str, str]] = {
        key: key for key in ("bin", "doc", "example", "lib", "man", "test")
    }


@dataclass
class Workspaces(JsonRecord):
    packages: list[str] | None = None
    nohoist: list[str] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    json_keys: ClassVar[dict[str, str]] = {"packages": "packages", "nohoist": "nohoist"}


@dataclass
class PeerDependencyMeta(JsonRecord):
    optional: bool
    extra: dict[str, Any] = field(default_factory=dict)

    json_keys: ClassVar[dict[str, str]] = {"optional": "optional"}


@dataclass
class Engines(JsonRecord):
    """Runtime version ranges; ``extra`` holds engines other than node."""

    node: str
    extra: dict[str, str] = field(default_factory=dict)

    json_keys: ClassVar[dict[str, str]] = {"node": "node"}


@dataclass
class PublishConfig(JsonRecord):
    access: str | None = None
    tag: str | None = None
    registry: str | None = None
    extra: dict[str, str] = field(default_factory=dict)

    json_keys: ClassVar[dict[str, str]] = {"access": "access", "tag": "tag", "registry": "registry"}


@dataclass
class Dist(JsonRecord):
    shasum: str | None = None
    tarball: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    json_keys: ClassVar[dict[str, str]] = {"shasum": "shasum", "tarball": "tarball"}


@dataclass
class Esnext(JsonRecord):
    main: str | None = None
    browser: str | None = None
    extra: dict[str, str] = field(default_factory=dict)

    json_keys: ClassVar[dict[str, str]] = {"main": "main", "browser": "browser"}


@dataclass(frozen=True)
class ExportPath:
    """Module path resolved for a specifier."""

    path: str

    def to_value(self) -> str:
        return self.path


@dataclass(frozen=True)
class ExportBlocked:
    """``null`` target: importing the specifier is disallowed."""

    def to_value(self) -> None:
        return None


@dataclass
class ExportConditions:
    """Targets keyed by condition name or by sub-path, in document order."""

    entries: dict[str, "ExportTarget"]

    @property
    def subpaths(self) -> dict[str, "ExportTarget"]:
        return {key: target for key, target in self.entries.items() if key.startswith(".")}

    @property
    def conditions(self) -> dict[str, "ExportTarget"]:
        return {key: target for key, target in self.entries.items() if not key.startswith(".")}

    def to_value(self) -> dict:
        return {key: target.to_value() for key, target in self.entries.items()}


@dataclass
class ExportFallback:
    """Alternatives tried in order by the consumer, first match wins."""

    alternatives: list["ExportTarget"]

    def to_value(self) -> list:
        return [target.to_value() for target in self.alternatives]


ExportTarget = Union[ExportPath, ExportBlocked, ExportConditions, ExportFallback]


def export_target(value: Any) -> ExportTarget:
    """Build the typed variant for a raw ``exports`` value."""
    if value is None:
        return ExportBlocked()
    if isinstance(value, str):
        return ExportPath(value)
    if isinstance(value, list):
        return ExportFallback([export_target(item) for item in value])
    if isinstance(value, dict):
        return ExportConditions({key: export_target(item) for key, item in value.items()})
    raise TypeError(f"Not an export target: {value!r}")


def _string_or(record: type[JsonRecord]):
    def read(value):
        return value if isinstance(value, str) else record.from_value(value)

    return read


def _people(value: list) -> list[Person]:
    return [Person.from_value(item) for item in value]


def _funding(value):
    if isinstance(value, dict):
        return FundingWay.from_value(value)
    if isinstance(value, list):
        return [item if isinstance(item, str) else FundingWay.from_value(item) for item in value]
    return value


def _workspaces(value):
    return list(value) if isinstance(value, list) else Workspaces.from_value(value)


def _peer_meta(value: dict) -> dict[str, PeerDependencyMeta]:
    return {name: PeerDependencyMeta.from_value(meta) for name, meta in value.items()}


# JSON key -> attribute name, where they differ
_ATTRIBUTE_NAMES = {
    "typesVersions": "types_versions",
    "devDependencies": "dev_dependencies",
    "optionalDependencies": "optional_dependencies",
    "peerDependencies": "peer_dependencies",
    "peerDependenciesMeta": "peer_dependencies_meta",
    "bundledDependencies": "bundled_dependencies",
    "packageManager": "package_manager",
    "engineStrict": "engine_strict",
    "publishConfig": "publish_config",
    "eslintConfig": "eslint_config",
}

_READERS = {
    "bugs": _string_or(Bugs),
    "author": Person.from_value,
    "contributors": _people,
    "maintainers": _people,
    "exports": export_target,
    "directories": Directories.from_value,
    "repository": _string_or(Repository),
    "funding": _funding,
    "peerDependenciesMeta": _peer_meta,
    "engines": Engines.from_value,
    "publishConfig": PublishConfig.from_value,
    "dist": Dist.from_value,
    "esnext": _string_or(Esnext),
    "workspaces": _workspaces,
}


@dataclass
class Manifest:
    """A package.json document with typed fields."""

    name: str
    version: str
    description: str | None = None
    keywords: list[str] | None = None
    homepage: str | None = None
    bugs: str | Bugs | None = None
    license: str | None = None
    author: Person | None = None
    contributors: list[Person] | None = None
    maintainers: list[Person] | None = None
    files: list[str] | None = None
    main: str | None = None
    exports: ExportTarget | None = None
    bin: str | dict[str, Any] | None = None
    type: str | None = None
    types: str | None = None
    typings: str | None = None
    types_versions: dict[str, list[str]] | None = None
    man: str | list[str] | None = None
    directories: Directories | None = None
    repository: str | Repository | None = None
    funding: str | list[str] | FundingWay | list[FundingWay] | None = None
    scripts: dict[str, str] | None = None
    config: dict[str, Any] | None = None
    dependencies: dict[str, str] | None = None
    dev_dependencies: dict[str, str] | None = None
    optional_dependencies: dict[str, str] | None = None
    peer_dependencies: dict[str, str] | None = None
    peer_dependencies_meta: dict[str, PeerDependencyMeta] | None = None
    bundled_dependencies: bool | list[str] | None = None
    resolutions: dict[str, Any] | None = None
    overrides: dict[str, Any] | None = None
    package_manager: str | None = None
    engines: Engines | None = None
    engine_strict: bool | None = None
    os: list[str] | None = None
    cpu: list[str] | None = None
    private: bool | str | None = None
    publish_config: PublishConfig | None = None
    dist: Dist | None = None
    readme: str | None = None
    module: str | None = None
    esnext: str | Esnext | None = None
    workspaces: list[str] | Workspaces | None = None
    jspm: Any = None
    eslint_config: dict[str, Any] | None = None
    prettier: dict[str, Any] | None = None
    stylelint: dict[str, Any] | None = None
    ava: dict[str, Any] | None = None
    release: dict[str, Any] | None = None
    jscpd: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    # JSON keys in document order, so to_dict writes them back the same way
    key_order: list[str] = field(default_factory=list, repr=False, compare=False)

    @classmethod
    def from_dict(cls, document: Any, options: ValidationOptions | None = None) -> "Manifest":
        """Build a Manifest from a decoded document.

        Raises:
            InvalidManifestError: If the document does not conform; carries
                every violation found
        """
        violations = validate(document, options)
        if violations:
            raise InvalidManifestError(violations)

        values: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in document.items():
            if key not in FIELDS:
                extra[key] = value
                continue
            reader = _READERS.get(key)
            values[_ATTRIBUTE_NAMES.get(key, key)] = reader(value) if reader else value
        return cls(**values, extra=extra, key_order=list(document))

    @classmethod
    def from_json(cls, content: str, options: ValidationOptions | None = None) -> "Manifest":
        return cls.from_dict(parse_text(content), options)

    def to_dict(self) -> dict[str, Any]:
        """Write the manifest back to its JSON shape."""
        json_names = {attr: key for key, attr in _ATTRIBUTE_NAMES.items()}
        out: dict[str, Any] = {}
        for attr in self.__dataclass_fields__:
            if attr in ("extra", "key_order"):
                continue
            value = getattr(self, attr)
            if value is not None:
                out[json_names.get(attr, attr)] = _dump(value)
        out.update(self.extra)

        # Keys read from a document keep their place; keys set afterwards follow
        ordered = {key: out.pop(key) for key in self.key_order if key in out}
        ordered.update(out)
        return ordered

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent) + "\n"


def resolve_manifest_path(path: str | Path) -> Path:
    """Return the manifest file for a path, looking inside directories."""
    path = Path(path)
    if path.is_dir():
        return path / MANIFEST_FILENAME
    return path


def load_manifest(path: str | Path, options: ValidationOptions | None = None) -> Manifest:
    """Read and validate a package.json file into a Manifest."""
    content = resolve_manifest_path(path).read_text(encoding="utf-8")
    return Manifest.from_json(content, options)
