"""Version metadata primitives.

Stable, dependency-free building blocks: the immutable descriptor the reporter
prints, and strict semver parsing/ordering used by the git resolver.
"""

from __future__ import annotations

from .descriptor import VersionDescriptor
from .semver import compare_versions, parse_semver

__all__ = [
    "VersionDescriptor",
    "compare_versions",
    "parse_semver",
]
