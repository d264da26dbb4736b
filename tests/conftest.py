"""Pytest configuration and fixtures."""

import json

import pytest


@pytest.fixture
def minimal_manifest():
    """Smallest conforming manifest."""
    return {"name": "x", "version": "1.0.0"}


@pytest.fixture
def full_manifest():
    """Manifest exercising most recognized fields."""
    return {
        "name": "@acme/widget",
        "version": "2.3.1-beta.2",
        "description": "Widgets for everyone",
        "keywords": ["widget", "ui"],
        "homepage": "https://acme.example/widget",
        "bugs": {"url": "https://github.com/acme/widget/issues", "email": "bugs@acme.example"},
        "license": "MIT",
        "author": "Barney Rubble <b@rubble.com> (http://barnyrubble.tumblr.com/)",
        "contributors": [
            "Fred Flintstone",
            {"name": "Wilma", "email": "wilma@example.com"},
        ],
        "maintainers": [{"name": "Betty", "url": "https://betty.example"}],
        "files": ["dist", "README.md"],
        "main": "dist/index.cjs",
        "module": "dist/index.mjs",
        "type": "module",
        "types": "dist/index.d.ts",
        "exports": {
            ".": {
                "types": "./dist/index.d.ts",
                "import": "./dist/index.mjs",
                "require": "./dist/index.cjs",
            },
            "./feature": [{"node": "./feature-node.js"}, "./feature.js"],
            "./internal/*": None,
        },
        "bin": {"widget": "bin/widget.js"},
        "typesVersions": {">=4.2": ["ts4.2/*"]},
        "man": ["man/widget.1"],
        "directories": {"lib": "dist", "test": "test"},
        "repository": {"type": "git", "url": "https://github.com/acme/widget.git", "directory": "packages/widget"},
        "funding": [{"type": "github", "url": "https://github.com/sponsors/acme"}],
        "scripts": {
            "build": "tsc -p .",
            "test": "vitest run",
            "prepublishOnly": "npm run build",
        },
        "config": {"port": 8080},
        "dependencies": {"lodash": "^4.17.21", "left-pad": "git+https://github.com/left/pad.git"},
        "devDependencies": {"typescript": ">=5.0.0 <6"},
        "optionalDependencies": {"fsevents": "*"},
        "peerDependencies": {"react": "^18.0.0"},
        "peerDependenciesMeta": {"react": {"optional": True}},
        "bundledDependencies": ["left-pad"],
        "resolutions": {"minimist": "1.2.8"},
        "overrides": {"foo": {"bar": "1.0.0"}},
        "packageManager": "pnpm@8.6.0",
        "engines": {"node": ">=18", "npm": ">=9"},
        "engineStrict": False,
        "os": ["linux", "darwin"],
        "cpu": ["x64", "arm64"],
        "private": False,
        "publishConfig": {"access": "public", "provenance": "true"},
        "dist": {"shasum": "abc123", "tarball": "https://registry.example/widget.tgz"},
        "readme": "# Widget",
        "esnext": {"main": "src/index.js", "server": "src/server.js"},
        "workspaces": {"packages": ["packages/*"], "nohoist": ["**/react-native"]},
        "jspm": {"main": "index"},
        "eslintConfig": {"extends": "eslint:recommended"},
        "prettier": {"semi": False},
        "stylelint": {},
        "ava": {"files": ["test/**"]},
        "release": {"branches": ["main"]},
        "jscpd": {"threshold": 0},
    }


@pytest.fixture
def full_package_json(full_manifest):
    """The full manifest as package.json text."""
    return json.dumps(full_manifest, indent=2)


@pytest.fixture
def manifest_file(tmp_path, full_package_json):
    """Create a temporary package.json file for testing."""
    manifest = tmp_path / "package.json"
    manifest.write_text(full_package_json)
    return manifest
