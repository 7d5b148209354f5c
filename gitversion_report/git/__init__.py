"""Version resolution from git tags (`git describe`)."""

from __future__ import annotations

from .resolver import ResolvedVersion, ResolveOptions, resolve_version
from .runner import GitResult, GitRunner, SubprocessGitRunner, find_git

__all__ = [
    "GitResult",
    "GitRunner",
    "ResolveOptions",
    "ResolvedVersion",
    "SubprocessGitRunner",
    "find_git",
    "resolve_version",
]
