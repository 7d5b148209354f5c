from __future__ import annotations


class GitVersionError(Exception):
    """Base exception for this project."""


class ConfigError(GitVersionError):
    """Raised when configuration is invalid or incomplete."""

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class VersionError(GitVersionError):
    """Raised when version metadata is malformed or inconsistent."""


class VersionFormatError(VersionError):
    pass


class VersionMismatchError(VersionError):
    """Raised when a git tag disagrees with the declared default version."""

    def __init__(self, message: str, *, expected: str, actual: str):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class GitCommandError(GitVersionError):
    """Raised when git cannot be started or does not finish in time."""

    def __init__(self, message: str, *, args: tuple[str, ...] = ()):
        super().__init__(message)
        self.git_args = args
