from __future__ import annotations

import re

from gitversion_report.errors import VersionFormatError


SEMVER_CORE = r"([0-9]+)\.([0-9]+)\.([0-9]+)"

_STRICT_RE = re.compile(SEMVER_CORE)


def parse_semver(value: str) -> tuple[int, int, int]:
    """Parse a strict `MAJOR.MINOR.PATCH` string.

    Raises:
        VersionFormatError: If the value has a prefix, a suffix, surrounding whitespace or missing parts.
    """

    if not isinstance(value, str):
        raise VersionFormatError(f"Version must be a string, got {type(value).__name__}")

    m = _STRICT_RE.fullmatch(value)
    if m is None:
        raise VersionFormatError(
            f"Version '{value}' does not follow semver format (MAJOR.MINOR.PATCH)."
        )
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


def compare_versions(a: str | tuple[int, int, int], b: str | tuple[int, int, int]) -> int:
    """Return -1, 0 or 1 as `a` is lower than, equal to, or greater than `b`."""

    ta = parse_semver(a) if isinstance(a, str) else tuple(a)
    tb = parse_semver(b) if isinstance(b, str) else tuple(b)
    return (ta > tb) - (ta < tb)
