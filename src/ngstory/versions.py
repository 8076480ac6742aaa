"""Webpack variant selection from declared Angular versions.

Manifest values are loose ranges such as ``^12.1.0`` or ``~11.2``. They are
coerced to a plain ``major.minor.patch`` triple before comparing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple

from .exceptions import MissingDependency

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = "12.0.0"

_VERSION_RE = re.compile(r"(\d{1,16})(?:\.(\d{1,16}))?(?:\.(\d{1,16}))?")


class Variant(str, Enum):
    """Build pipeline used by the Storybook builder."""

    WEBPACK4 = "webpack4"
    WEBPACK5 = "webpack5"


class SemVer(NamedTuple):
    """A normalized version. Tuple ordering is semver precedence."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class VersionPair:
    """Declared versions of one dependency in a package manifest."""

    regular: str | None = None
    dev: str | None = None


def coerce_version(value: Any) -> SemVer | None:
    """Coerce a loosely typed manifest value into a SemVer.

    Takes the first ``major[.minor[.patch]]`` run in the string, padding
    missing parts with zero. Returns None for anything without digits,
    including non-string values.

    Examples:
        >>> coerce_version("^12.1.0")
        SemVer(major=12, minor=1, patch=0)
        >>> coerce_version("~11.2")
        SemVer(major=11, minor=2, patch=0)
        >>> coerce_version("latest") is None
        True
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None

    match = _VERSION_RE.search(str(value))
    if not match:
        return None

    major, minor, patch = (int(part) if part else 0 for part in match.groups())
    return SemVer(major, minor, patch)


def resolve_version(versions: VersionPair) -> SemVer | None:
    """Pick the regular dependency version, falling back to the dev one."""
    return coerce_version(versions.regular) or coerce_version(versions.dev)


def select_variant(
    regular: str | None,
    dev: str | None,
    threshold: str = DEFAULT_THRESHOLD,
) -> Variant:
    """Choose the webpack variant for the declared Angular version.

    Args:
        regular: Version from ``dependencies``.
        dev: Version from ``devDependencies``.
        threshold: First version that needs webpack 5.

    Returns:
        Variant.WEBPACK5 if the resolved version is at least the threshold,
        Variant.WEBPACK4 otherwise.

    Raises:
        MissingDependency: Neither value contains a version.
        ValueError: The threshold itself is not a version.
    """
    minimum = coerce_version(threshold)
    if minimum is None:
        raise ValueError(f"Invalid version threshold: {threshold!r}")

    version = resolve_version(VersionPair(regular, dev))
    if version is None:
        raise MissingDependency()

    variant = Variant.WEBPACK5 if version >= minimum else Variant.WEBPACK4
    logger.debug(f"Angular {version} (threshold {minimum}) -> {variant.value}")
    return variant
