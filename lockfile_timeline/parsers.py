"""
Lock file parsers for Cargo, Composer and npm.

Each parser maps the text of a lock file and a dependency name to the
version recorded for that dependency, or ``None`` when the dependency is
not listed. Content that cannot be read as the declared format raises
``ParseError``.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import PurePosixPath
from typing import Any, Dict, Optional

from .errors import ParseError, UnknownLockFormat
from .interfaces import LockParser
from .models import LockFormat


logger = logging.getLogger(__name__)

NODE_MODULES = "node_modules/"


def _version_string(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def _load_json(content: str, fmt: LockFormat) -> Dict[str, Any]:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in {fmt.value} lock file: {e}", fmt) from e
    if not isinstance(data, dict):
        raise ParseError(
            f"Expected a JSON object at the top of the {fmt.value} lock file", fmt
        )
    return data


def parse_cargo_lock(content: str, dependency: str) -> Optional[str]:
    """Return the version of ``dependency`` from a Cargo.lock document.

    Cargo.lock is TOML with one ``[[package]]`` table per resolved crate.
    A crate may be locked at several versions; the first in file order wins.
    """
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ParseError(f"Invalid TOML in Cargo.lock: {e}", LockFormat.CARGO) from e

    packages = data.get("package", [])
    if not isinstance(packages, list):
        raise ParseError("Expected 'package' to be an array of tables", LockFormat.CARGO)

    for package in packages:
        if not isinstance(package, dict):
            raise ParseError("Expected every 'package' entry to be a table", LockFormat.CARGO)
        if package.get("name") != dependency:
            continue
        version = _version_string(package.get("version"))
        if version is not None:
            return version
        logger.debug("Package %s in Cargo.lock has no version", dependency)
    return None


def _find_composer_package(data: Dict[str, Any], key: str, dependency: str) -> Optional[str]:
    packages = data.get(key)
    if packages is None:
        return None
    if not isinstance(packages, list):
        raise ParseError(f"Expected '{key}' to be a list", LockFormat.COMPOSER)

    for package in packages:
        if not isinstance(package, dict):
            raise ParseError(f"Expected every '{key}' entry to be an object", LockFormat.COMPOSER)
        if package.get("name") == dependency:
            version = _version_string(package.get("version"))
            if version is not None:
                return version
    return None


def parse_composer_lock(content: str, dependency: str) -> Optional[str]:
    """Return the version of ``dependency`` from a composer.lock document.

    The ``packages`` list is searched first, then ``packages-dev``.
    """
    data = _load_json(content, LockFormat.COMPOSER)
    version = _find_composer_package(data, "packages", dependency)
    if version is None:
        version = _find_composer_package(data, "packages-dev", dependency)
    return version


def _package_name_from_path(key: str) -> Optional[str]:
    """Return the package name installed at a ``packages`` key, if any.

    ``node_modules/a/node_modules/@scope/b`` installs ``@scope/b``.
    """
    if NODE_MODULES not in key:
        return None
    return key.rsplit(NODE_MODULES, 1)[1]


def parse_npm_lock(content: str, dependency: str) -> Optional[str]:
    """Return the version of ``dependency`` from package-lock.json or npm-shrinkwrap.json.

    Lockfile v1 (and v2, for backwards compatibility) keeps a ``dependencies``
    map keyed by package name. Lockfile v2/v3 keeps a ``packages`` map keyed by
    install path. The legacy map is consulted first.
    """
    data = _load_json(content, LockFormat.NPM)

    dependencies = data.get("dependencies")
    if dependencies is not None:
        if not isinstance(dependencies, dict):
            raise ParseError("Expected 'dependencies' to be an object", LockFormat.NPM)
        entry = dependencies.get(dependency)
        if isinstance(entry, dict):
            version = _version_string(entry.get("version"))
            if version is not None:
                return version

    packages = data.get("packages")
    if packages is None:
        return None
    if not isinstance(packages, dict):
        raise ParseError("Expected 'packages' to be an object", LockFormat.NPM)

    top_level = packages.get(NODE_MODULES + dependency)
    if isinstance(top_level, dict):
        version = _version_string(top_level.get("version"))
        if version is not None:
            return version

    for key, entry in packages.items():
        if not isinstance(entry, dict):
            continue
        if _package_name_from_path(key) != dependency:
            continue
        # linked workspace packages carry no version
        version = _version_string(entry.get("version"))
        if version is not None:
            return version
    return None


PARSERS: Dict[LockFormat, LockParser] = {
    LockFormat.CARGO: parse_cargo_lock,
    LockFormat.COMPOSER: parse_composer_lock,
    LockFormat.NPM: parse_npm_lock,
}


def parse_version(fmt: LockFormat, content: str, dependency: str) -> Optional[str]:
    """Extract ``dependency``'s version from ``content`` using the parser for ``fmt``."""
    return PARSERS[fmt](content, dependency)


def detect_format(path: str) -> LockFormat:
    """Infer the lock format from a file name."""
    name = PurePosixPath(str(path).replace("\\", "/")).name
    for fmt in LockFormat:
        if name in fmt.filenames:
            return fmt

    lowered = name.lower()
    if lowered.endswith(".lock"):
        stem = lowered[: -len(".lock")]
        if stem == "cargo":
            return LockFormat.CARGO
        if stem == "composer":
            return LockFormat.COMPOSER
    raise UnknownLockFormat(
        f"Cannot infer lock file format from '{name}'; pass --format explicitly"
    )
