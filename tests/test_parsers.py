"""Tests for the lock file parsers."""

import json

import pytest

from conftest import cargo_lock
from lockfile_timeline.errors import ParseError, UnknownLockFormat
from lockfile_timeline.models import LockFormat
from lockfile_timeline.parsers import (
    detect_format,
    parse_cargo_lock,
    parse_composer_lock,
    parse_npm_lock,
    parse_version,
)


def test_cargo_lock_finds_package_among_others():
    content = cargo_lock(("anyhow", "1.0.75"), ("serde", "1.0.188"), ("serde_json", "1.0.107"))

    assert parse_cargo_lock(content, "serde") == "1.0.188"
    assert parse_cargo_lock(content, "serde_json") == "1.0.107"


def test_cargo_lock_does_not_match_substrings():
    content = cargo_lock(("serde_json", "1.0.107"), ("serde_derive", "1.0.188"))

    assert parse_cargo_lock(content, "serde") is None
    assert parse_cargo_lock(content, "json") is None


def test_cargo_lock_is_case_sensitive():
    content = cargo_lock(("Inflector", "0.11.4"))

    assert parse_cargo_lock(content, "inflector") is None
    assert parse_cargo_lock(content, "Inflector") == "0.11.4"


def test_cargo_lock_package_without_version():
    content = '[[package]]\nname = "workspace-member"\n'

    assert parse_cargo_lock(content, "workspace-member") is None


def test_cargo_lock_first_of_duplicate_names_wins():
    content = cargo_lock(("syn", "1.0.109"), ("syn", "2.0.38"))

    assert parse_cargo_lock(content, "syn") == "1.0.109"


def test_cargo_lock_empty_document():
    assert parse_cargo_lock("", "serde") is None


def test_cargo_lock_invalid_toml_is_parse_error():
    with pytest.raises(ParseError) as excinfo:
        parse_cargo_lock("[[package]\nname = ", "serde")

    assert excinfo.value.fmt is LockFormat.CARGO


def test_cargo_lock_wrong_package_type_is_parse_error():
    with pytest.raises(ParseError):
        parse_cargo_lock('package = "nope"\n', "serde")


def composer_lock(packages=None, packages_dev=None) -> str:
    data = {"_readme": ["This file locks the dependencies"], "content-hash": "abc"}
    if packages is not None:
        data["packages"] = [{"name": n, "version": v, "type": "library"} for n, v in packages]
    if packages_dev is not None:
        data["packages-dev"] = [{"name": n, "version": v} for n, v in packages_dev]
    return json.dumps(data, indent=4)


def test_composer_lock_finds_package():
    content = composer_lock(packages=[("monolog/monolog", "2.9.1"), ("symfony/console", "v6.3.4")])

    assert parse_composer_lock(content, "symfony/console") == "v6.3.4"


def test_composer_lock_falls_back_to_dev_packages():
    content = composer_lock(
        packages=[("monolog/monolog", "2.9.1")],
        packages_dev=[("phpunit/phpunit", "10.3.5")],
    )

    assert parse_composer_lock(content, "phpunit/phpunit") == "10.3.5"


def test_composer_lock_prefers_primary_list():
    content = composer_lock(
        packages=[("psr/log", "3.0.0")],
        packages_dev=[("psr/log", "1.1.4")],
    )

    assert parse_composer_lock(content, "psr/log") == "3.0.0"


def test_composer_lock_requires_exact_name():
    content = composer_lock(packages=[("symfony/console", "v6.3.4")])

    assert parse_composer_lock(content, "console") is None
    assert parse_composer_lock(content, "symfony/console-extra") is None


def test_composer_lock_missing_lists():
    assert parse_composer_lock("{}", "psr/log") is None


@pytest.mark.parametrize("content", ["{not json", "[]", '{"packages": {}}'])
def test_composer_lock_malformed_is_parse_error(content):
    with pytest.raises(ParseError):
        parse_composer_lock(content, "psr/log")


def npm_lock_v1(deps) -> str:
    return json.dumps({
        "name": "app",
        "lockfileVersion": 1,
        "requires": True,
        "dependencies": {n: {"version": v, "integrity": "sha512-x"} for n, v in deps},
    })


def npm_lock_v3(packages) -> str:
    data = {"": {"name": "app", "version": "1.0.0"}}
    data.update({k: {"version": v} for k, v in packages})
    return json.dumps({"name": "app", "lockfileVersion": 3, "requires": True, "packages": data})


def test_npm_lock_legacy_schema():
    content = npm_lock_v1([("lodash", "4.17.21"), ("lodash.merge", "4.6.2")])

    assert parse_npm_lock(content, "lodash") == "4.17.21"


def test_npm_lock_modern_schema():
    content = npm_lock_v3([("node_modules/lodash", "4.17.21"), ("node_modules/react", "18.2.0")])

    assert parse_npm_lock(content, "react") == "18.2.0"


def test_npm_lock_schemas_agree():
    legacy = npm_lock_v1([("express", "4.18.2")])
    modern = npm_lock_v3([("node_modules/express", "4.18.2")])

    assert parse_npm_lock(legacy, "express") == parse_npm_lock(modern, "express") == "4.18.2"


def test_npm_lock_scoped_package():
    content = npm_lock_v3([("node_modules/@babel/core", "7.23.0"), ("node_modules/core", "1.0.0")])

    assert parse_npm_lock(content, "@babel/core") == "7.23.0"
    assert parse_npm_lock(content, "core") == "1.0.0"


def test_npm_lock_prefers_top_level_install():
    content = npm_lock_v3([
        ("node_modules/a/node_modules/debug", "2.6.9"),
        ("node_modules/debug", "4.3.4"),
    ])

    assert parse_npm_lock(content, "debug") == "4.3.4"


def test_npm_lock_nested_install_only():
    content = npm_lock_v3([("node_modules/a/node_modules/ms", "2.0.0")])

    assert parse_npm_lock(content, "ms") == "2.0.0"


def test_npm_lock_does_not_match_path_suffixes():
    content = npm_lock_v3([("node_modules/lodash.merge", "4.6.2"), ("node_modules/my-lodash", "1.0.0")])

    assert parse_npm_lock(content, "lodash") is None
    assert parse_npm_lock(content, "merge") is None


def test_npm_lock_ignores_root_and_links():
    content = json.dumps({
        "lockfileVersion": 3,
        "packages": {
            "": {"name": "app", "version": "1.0.0"},
            "node_modules/shared": {"resolved": "packages/shared", "link": True},
        },
    })

    assert parse_npm_lock(content, "app") is None
    assert parse_npm_lock(content, "shared") is None


def test_npm_lock_falls_back_to_packages_when_legacy_map_lacks_dependency():
    content = json.dumps({
        "lockfileVersion": 2,
        "dependencies": {"lodash": {"version": "4.17.21"}},
        "packages": {"node_modules/react": {"version": "18.2.0"}},
    })

    assert parse_npm_lock(content, "react") == "18.2.0"


@pytest.mark.parametrize("content", ["", "null", '{"dependencies": []}', '{"packages": []}'])
def test_npm_lock_malformed_is_parse_error(content):
    with pytest.raises(ParseError) as excinfo:
        parse_npm_lock(content, "lodash")

    assert excinfo.value.fmt is LockFormat.NPM


def test_parse_version_dispatches_on_format():
    content = cargo_lock(("rand", "0.8.5"))

    assert parse_version(LockFormat.CARGO, content, "rand") == "0.8.5"
    with pytest.raises(ParseError):
        parse_version(LockFormat.NPM, content, "rand")


@pytest.mark.parametrize("path, expected", [
    ("Cargo.lock", LockFormat.CARGO),
    ("crates/app/Cargo.lock", LockFormat.CARGO),
    ("composer.lock", LockFormat.COMPOSER),
    ("package-lock.json", LockFormat.NPM),
    ("frontend/npm-shrinkwrap.json", LockFormat.NPM),
    ("cargo.lock", LockFormat.CARGO),
])
def test_detect_format(path, expected):
    assert detect_format(path) is expected


@pytest.mark.parametrize("path", ["yarn.lock", "package.json", "Gemfile.lock"])
def test_detect_format_unknown(path):
    with pytest.raises(UnknownLockFormat):
        detect_format(path)
