from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from gitversion_report.core.descriptor import VersionDescriptor
from gitversion_report.core.semver import compare_versions, parse_semver
from gitversion_report.errors import GitCommandError, VersionMismatchError

from .runner import GitResult, GitRunner, SubprocessGitRunner, find_git


logger = logging.getLogger(__name__)

_VERSION = r"[0-9]+\.[0-9]+\.[0-9]+"

# Hash length used for both describe and rev-parse.
ABBREV = 9


@dataclass(frozen=True, slots=True)
class ResolveOptions:
    default_version: str = "0.0.0"
    source_dir: str | Path = "."
    prefix: str = ""
    fail_on_mismatch: bool = False
    detect_dirty: bool = True
    timeout_s: float = 10.0


@dataclass(frozen=True, slots=True)
class ResolvedVersion:
    """Version metadata derived from a working tree.

    `descriptor.display` is always the short `MAJOR.MINOR.PATCH` form;
    `full_version` carries the development/build/dirty decorations.
    """

    descriptor: VersionDescriptor
    full_version: str
    source: str = "default"  # "default" | "git"
    tag_name: str | None = None
    commits_since_tag: int = 0
    commit_hash: str | None = None
    is_tagged: bool = False
    is_development: bool = False
    is_dirty: bool = False

    @property
    def version(self) -> str:
        return self.descriptor.short

    def full_descriptor(self) -> VersionDescriptor:
        return self.descriptor.with_display(self.full_version)

    def as_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "full_version": self.full_version,
            "major": self.descriptor.major,
            "minor": self.descriptor.minor,
            "patch": self.descriptor.patch,
            "source": self.source,
            "tag_name": self.tag_name,
            "commits_since_tag": self.commits_since_tag,
            "commit_hash": self.commit_hash,
            "is_tagged": self.is_tagged,
            "is_development": self.is_development,
            "is_dirty": self.is_dirty,
        }


def _tag_patterns(prefix: str) -> tuple[re.Pattern[str], re.Pattern[str]]:
    # Without an explicit prefix a leading "v" is still tolerated.
    lead = re.escape(prefix) if prefix else "v?"
    exact = re.compile(rf"^{lead}({_VERSION})$")
    dev = re.compile(rf"^{lead}({_VERSION})-([0-9]+)-g([0-9a-f]+)$")
    return exact, dev


def _run(runner: GitRunner, *args: str) -> GitResult | None:
    try:
        return runner.run(*args)
    except GitCommandError as e:
        logger.warning("git_command_failed", extra={"error": str(e), "git_args": list(args)})
        return None


def _with_dirty_suffix(full_version: str) -> str:
    # Inside build metadata "-" would read as part of the hash; use "." there.
    return f"{full_version}.dirty" if "+" in full_version else f"{full_version}-dirty"


def _is_dirty(runner: GitRunner) -> bool:
    res = _run(runner, "status", "--porcelain", "--untracked-files=no")
    if res is None or not res.ok:
        return False
    return bool(res.stdout.strip())


def resolve_version(
    options: ResolveOptions | None = None,
    *,
    runner: GitRunner | None = None,
) -> ResolvedVersion:
    """Derive a version from the nearest `MAJOR.MINOR.PATCH` git tag.

    Falls back to `options.default_version` when git is unavailable, the
    source directory is not a repository root, or no tag matches.

    Args:
        options: Resolution settings. Defaults to `ResolveOptions()`.
        runner: Git runner to use. When omitted, a `SubprocessGitRunner` is
            created for `options.source_dir` if `git` is on PATH.

    Raises:
        VersionFormatError: If `default_version` is not strict semver.
        VersionMismatchError: If `fail_on_mismatch` is set and the tag
            contradicts `default_version`.
    """

    opts = options or ResolveOptions()
    default_triple = parse_semver(opts.default_version)
    default_short = "{}.{}.{}".format(*default_triple)
    fallback = ResolvedVersion(
        descriptor=VersionDescriptor(*default_triple),
        full_version=default_short,
    )

    source_dir = Path(opts.source_dir)

    if runner is None:
        if find_git() is None:
            logger.info("git_not_found", extra={"default_version": default_short})
            return fallback
        runner = SubprocessGitRunner(source_dir, timeout_s=opts.timeout_s)

    if not (source_dir / ".git").exists():
        logger.info(
            "not_a_git_repository",
            extra={"source_dir": str(source_dir), "default_version": default_short},
        )
        return fallback

    exact_re, dev_re = _tag_patterns(opts.prefix)
    describe = _run(
        runner,
        "describe",
        "--tags",
        f"--abbrev={ABBREV}",
        f"--match={opts.prefix}*.*.*",
    )

    resolved = fallback
    if describe is not None and describe.ok:
        output = describe.stdout.strip()
        if (m := exact_re.match(output)) is not None:
            tag_version = m.group(1)
            if opts.fail_on_mismatch and compare_versions(default_short, tag_version) != 0:
                raise VersionMismatchError(
                    f"Project version ({default_short}) does not match Git tag ({tag_version}).",
                    expected=default_short,
                    actual=tag_version,
                )
            resolved = ResolvedVersion(
                descriptor=VersionDescriptor.parse(tag_version),
                full_version=tag_version,
                source="git",
                tag_name=output,
                is_tagged=True,
            )
        elif (m := dev_re.match(output)) is not None:
            tag_version, count, commit = m.group(1), int(m.group(2)), m.group(3)
            if opts.fail_on_mismatch and compare_versions(default_short, tag_version) < 0:
                raise VersionMismatchError(
                    f"Project version ({default_short}) must be at least equal to "
                    f"tagged ancestor ({tag_version}).",
                    expected=default_short,
                    actual=tag_version,
                )
            resolved = ResolvedVersion(
                descriptor=VersionDescriptor.parse(tag_version),
                full_version=f"{tag_version}-dev.{count}+{commit}",
                source="git",
                tag_name=output[: m.start(2) - 1],
                commits_since_tag=count,
                commit_hash=commit,
                is_development=True,
            )
        else:
            logger.warning("describe_unparsed", extra={"describe_output": output})
    else:
        if describe is not None:
            logger.warning(
                "describe_failed",
                extra={"returncode": describe.returncode, "stderr": describe.stderr},
            )
        head = _run(runner, "rev-parse", f"--short={ABBREV}", "HEAD")
        if head is not None and head.ok and head.stdout:
            commit = head.stdout.strip()
            resolved = ResolvedVersion(
                descriptor=fallback.descriptor,
                full_version=f"{default_short}+{commit}",
                source="git",
                commit_hash=commit,
            )
        else:
            logger.warning("rev_parse_failed", extra={"source_dir": str(source_dir)})

    if opts.detect_dirty and _is_dirty(runner):
        resolved = replace(
            resolved,
            full_version=_with_dirty_suffix(resolved.full_version),
            is_dirty=True,
        )

    logger.info("version_resolved", extra=resolved.as_dict())
    return resolved
