from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Mapping

from gitversion_report.core.descriptor import VersionDescriptor
from gitversion_report.core.semver import parse_semver
from gitversion_report.errors import ConfigError, VersionFormatError
from gitversion_report.git.resolver import ResolveOptions
from gitversion_report.runtime.reporter import DEFAULT_TITLE


LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_INT_RE = re.compile(r"-?[0-9]+")


def _section(raw: Mapping[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError("must be a mapping (dict)", path=key)
    return dict(value)


def _str(d: Mapping[str, Any], key: str, default: str, *, path: str) -> str:
    value = d.get(key, default)
    if value is None:
        return default
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        raise ConfigError("must be a string", path=f"{path}.{key}")
    return str(value)


def _int(d: Mapping[str, Any], key: str, *, path: str) -> int | None:
    # Strings are allowed so that "${ENV}" placeholders can feed version fields.
    value = d.get(key)
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and _INT_RE.fullmatch(value):
        return int(value)
    raise ConfigError(f"must be an integer, got {value!r}", path=f"{path}.{key}")


def _float(d: Mapping[str, Any], key: str, default: float, *, path: str) -> float:
    value = d.get(key, default)
    if isinstance(value, bool):
        raise ConfigError("must be a number", path=f"{path}.{key}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError("must be a number", path=f"{path}.{key}") from e


def _bool(d: Mapping[str, Any], key: str, default: bool, *, path: str) -> bool:
    value = d.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError("must be true or false", path=f"{path}.{key}")
    return value


@dataclass(frozen=True)
class AppSection:
    title: str = DEFAULT_TITLE


@dataclass(frozen=True)
class VersionConfig:
    """Explicitly declared version fields.

    Either all of major/minor/patch are set, or none is.
    """

    major: int | None = None
    minor: int | None = None
    patch: int | None = None
    display: str | None = None

    @property
    def is_set(self) -> bool:
        return self.major is not None

    def descriptor(self) -> VersionDescriptor | None:
        if not self.is_set:
            return None
        return VersionDescriptor(
            major=self.major,  # type: ignore[arg-type]
            minor=self.minor,  # type: ignore[arg-type]
            patch=self.patch,  # type: ignore[arg-type]
            display=self.display or "",
        )


@dataclass(frozen=True)
class GitConfig:
    enabled: bool = False
    source_dir: str = "."
    default_version: str = "0.0.0"
    prefix: str = ""
    fail_on_mismatch: bool = False
    detect_dirty: bool = True
    timeout_s: float = 10.0

    def to_options(self) -> ResolveOptions:
        return ResolveOptions(
            default_version=self.default_version,
            source_dir=Path(self.source_dir).expanduser(),
            prefix=self.prefix,
            fail_on_mismatch=self.fail_on_mismatch,
            detect_dirty=self.detect_dirty,
            timeout_s=self.timeout_s,
        )


@dataclass(frozen=True)
class ReportConfig:
    full_version: bool = False


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "WARNING"


@dataclass(frozen=True)
class AppConfig:
    app: AppSection = field(default_factory=AppSection)
    version: VersionConfig = field(default_factory=VersionConfig)
    git: GitConfig = field(default_factory=GitConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def build_app_config(raw: Mapping[str, Any] | None) -> AppConfig:
    """Validate a raw (already env-expanded) mapping into `AppConfig`.

    Unknown top-level keys are ignored. Errors carry the dotted key path.
    """

    raw = raw or {}
    if not isinstance(raw, Mapping):
        raise ConfigError("Config root must be a mapping/object")

    app_raw = _section(raw, "app")
    app = AppSection(title=_str(app_raw, "title", AppSection.title, path="app"))
    if not app.title.strip():
        raise ConfigError("must be a non-empty string", path="app.title")

    version_raw = _section(raw, "version")
    triple = {k: _int(version_raw, k, path="version") for k in ("major", "minor", "patch")}
    given = [k for k, v in triple.items() if v is not None]
    if given and len(given) != 3:
        missing = sorted(set(triple) - set(given))
        raise ConfigError(f"major, minor and patch must be set together (missing: {', '.join(missing)})", path="version")
    display = version_raw.get("display")
    if display is not None and not given:
        raise ConfigError("display requires major, minor and patch", path="version.display")
    version = VersionConfig(
        major=triple["major"],
        minor=triple["minor"],
        patch=triple["patch"],
        display=str(display) if display is not None else None,
    )
    try:
        version.descriptor()
    except VersionFormatError as e:
        raise ConfigError(str(e), path="version") from e

    git_raw = _section(raw, "git")
    git = GitConfig(
        enabled=_bool(git_raw, "enabled", GitConfig.enabled, path="git"),
        source_dir=_str(git_raw, "source_dir", GitConfig.source_dir, path="git"),
        default_version=_str(git_raw, "default_version", GitConfig.default_version, path="git"),
        prefix=_str(git_raw, "prefix", GitConfig.prefix, path="git"),
        fail_on_mismatch=_bool(git_raw, "fail_on_mismatch", GitConfig.fail_on_mismatch, path="git"),
        detect_dirty=_bool(git_raw, "detect_dirty", GitConfig.detect_dirty, path="git"),
        timeout_s=_float(git_raw, "timeout_s", GitConfig.timeout_s, path="git"),
    )
    try:
        parse_semver(git.default_version)
    except VersionFormatError as e:
        raise ConfigError(str(e), path="git.default_version") from e
    if git.timeout_s <= 0:
        raise ConfigError("must be > 0", path="git.timeout_s")

    report_raw = _section(raw, "report")
    report = ReportConfig(
        full_version=_bool(report_raw, "full_version", ReportConfig.full_version, path="report"),
    )

    logging_raw = _section(raw, "logging")
    level = _str(logging_raw, "level", LoggingConfig.level, path="logging").upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"unknown level {level!r}", path="logging.level")

    return AppConfig(
        app=app,
        version=version,
        git=git,
        report=report,
        logging=LoggingConfig(level=level),
    )

