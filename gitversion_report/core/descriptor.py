from __future__ import annotations

from dataclasses import dataclass

from gitversion_report.errors import VersionFormatError

from .semver import parse_semver


@dataclass(frozen=True, slots=True)
class VersionDescriptor:
    """Immutable version fields describing one application build.

    `display` defaults to `MAJOR.MINOR.PATCH`. A longer display string is
    accepted only when it extends that triple with a pre-release (`-...`) or
    build (`+...`) suffix, so the numbers and the display cannot disagree.
    """

    major: int
    minor: int
    patch: int
    display: str = ""

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            # bool is an int subclass; reject it explicitly.
            if isinstance(value, bool) or not isinstance(value, int):
                raise VersionFormatError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise VersionFormatError(f"{name} must be non-negative, got {value}")

        short = self.short
        if not self.display:
            object.__setattr__(self, "display", short)
            return

        if not isinstance(self.display, str):
            raise VersionFormatError(f"display must be a string, got {self.display!r}")
        if self.display != short and not (
            self.display.startswith(short) and self.display[len(short)] in "-+"
        ):
            raise VersionFormatError(
                f"display '{self.display}' is inconsistent with version {short}"
            )

    @property
    def short(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @property
    def triple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    @classmethod
    def parse(cls, value: str) -> VersionDescriptor:
        major, minor, patch = parse_semver(value)
        return cls(major=major, minor=minor, patch=patch)

    def with_display(self, display: str) -> VersionDescriptor:
        return VersionDescriptor(self.major, self.minor, self.patch, display)
