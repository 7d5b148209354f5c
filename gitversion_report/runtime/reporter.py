from __future__ import annotations

import sys
from typing import IO

from gitversion_report.core.descriptor import VersionDescriptor


DEFAULT_TITLE = "Basic Example Application"
SEPARATOR = "-" * 24


def format_report(descriptor: VersionDescriptor, *, title: str = DEFAULT_TITLE) -> str:
    """Render the six-line version report, newline-terminated."""

    lines = [
        title,
        SEPARATOR,
        f"Version: {descriptor.display}",
        f"Major: {descriptor.major}",
        f"Minor: {descriptor.minor}",
        f"Patch: {descriptor.patch}",
    ]
    return "\n".join(lines) + "\n"


def write_report(
    descriptor: VersionDescriptor,
    stream: IO[str] | None = None,
    *,
    title: str = DEFAULT_TITLE,
) -> None:
    out = stream if stream is not None else sys.stdout
    out.write(format_report(descriptor, title=title))
    out.flush()
