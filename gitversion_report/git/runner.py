from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from gitversion_report.errors import GitCommandError


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GitResult:
    returncode: int
    stdout: str
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GitRunner(Protocol):
    """Runs a git subcommand against one working tree."""

    def run(self, *args: str) -> GitResult: ...


def find_git(executable: str = "git") -> str | None:
    return shutil.which(executable)


class SubprocessGitRunner:
    """`GitRunner` backed by a real `git` executable (`git -C <dir> ...`)."""

    def __init__(self, source_dir: str | Path, *, executable: str = "git", timeout_s: float = 10.0):
        self.source_dir = Path(source_dir)
        self.executable = executable
        self.timeout_s = float(timeout_s)

    def run(self, *args: str) -> GitResult:
        cmd = [self.executable, "-C", str(self.source_dir), *args]
        logger.debug("git_command", extra={"argv": cmd})
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout_s,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(
                f"git {' '.join(args)} timed out after {self.timeout_s:g}s", args=args
            ) from e
        except OSError as e:
            raise GitCommandError(f"Failed to start git: {e}", args=args) from e

        return GitResult(
            returncode=proc.returncode,
            stdout=proc.stdout.strip(),
            stderr=proc.stderr.strip(),
        )
