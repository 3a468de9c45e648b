"""
L1 Domain — Dotted version parsing and comparison (pure).

CUDA toolkit versions ("11.8", "12.0", "12.2.1") are compared by
numeric component, never lexicographically, so "10.0" > "9.0".
Missing trailing components count as zero: "12" == "12.0" == "12.0.0".

No I/O, no subprocess.
"""

from __future__ import annotations

import re

_VERSION_RE = re.compile(r"\A[0-9]+(?:\.[0-9]+)*\Z")


class VersionError(ValueError):
    """Raised when a version string cannot be parsed."""


def parse_version(version: str) -> tuple[int, ...]:
    """Parse a dotted version string into a normalized tuple of ints.

    Trailing zero components are dropped so that equal versions with a
    different number of components produce equal tuples.

    Args:
        version: Dotted numeric version, e.g. ``"11.8"``.

    Returns:
        Tuple of ints, e.g. ``(11, 8)``.

    Raises:
        VersionError: If the string is empty or has a non-numeric component.
    """
    if not isinstance(version, str):
        raise VersionError(f"Invalid version: {version!r}")

    # ASCII digits and dots only; no sign, underscore or inner space
    match = _VERSION_RE.match(version.strip().lstrip("v"))
    if not match:
        raise VersionError(f"Invalid version: {version!r}")

    parts = [int(x) for x in match.group(0).split(".")]

    while len(parts) > 1 and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as ``a`` is older than, equal to, or newer than ``b``."""
    pa, pb = parse_version(a), parse_version(b)
    if pa < pb:
        return -1
    if pa > pb:
        return 1
    return 0


def version_at_least(version: str, minimum: str) -> bool:
    """True when ``version >= minimum``."""
    return compare_versions(version, minimum) >= 0


def version_older(version: str, other: str) -> bool:
    """True when ``version < other``."""
    return compare_versions(version, other) < 0
