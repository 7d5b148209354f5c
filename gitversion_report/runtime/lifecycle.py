from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from gitversion_report import __version__
from gitversion_report.config.loader import load_config, resolve_config_paths
from gitversion_report.config.model import LOG_LEVELS, AppConfig, build_app_config
from gitversion_report.core.descriptor import VersionDescriptor
from gitversion_report.core.semver import parse_semver
from gitversion_report.errors import ConfigError, GitVersionError, VersionError, VersionFormatError
from gitversion_report.git.resolver import ResolvedVersion, resolve_version
from gitversion_report.observability.logging import configure_logging
from gitversion_report.runtime.reporter import write_report


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_VERSION_ERROR = 3

_COMMANDS = ("report", "resolve", "print-config")
# Global options that take exactly one value.
_GLOBAL_VALUE_OPTS = ("--config", "--log-level")


def _add_git_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--source-dir", default=None, help="Directory whose git tags define the version")
    p.add_argument("--default-version", default=None, help="Fallback version when no tag matches (MAJOR.MINOR.PATCH)")
    p.add_argument("--prefix", default=None, help="Tag prefix, e.g. 'v' for tags like v1.2.3")
    p.add_argument(
        "--fail-on-mismatch",
        action="store_true",
        help="Fail when the git tag disagrees with --default-version",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitversion-report",
        description="Print the application version report (optionally derived from git tags)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=sorted(LOG_LEVELS),
        default=None,
        metavar="LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL); overrides logging.level from config",
    )
    parser.add_argument(
        "--config",
        type=Path,
        action="append",
        default=None,
        help="YAML config file; repeat to overlay files (default: ./configs/app.yaml if present)",
    )

    sub = parser.add_subparsers(dest="command")

    report_p = sub.add_parser("report", help="Print the version report (default)")
    report_p.add_argument("--git", action="store_true", help="Resolve the version from git tags (implied by any of the git options below)")
    report_p.add_argument("--full", action="store_true", help="Show the full version in the 'Version:' line")
    _add_git_options(report_p)

    resolve_p = sub.add_parser("resolve", help="Resolve the version from git and print it as JSON")
    _add_git_options(resolve_p)

    sub.add_parser("print-config", help="Load and print the effective config as JSON")

    return parser


def _with_default_command(argv: list[str]) -> list[str]:
    """Insert `report` when no subcommand is given, after any global options."""

    if any(tok in _COMMANDS for tok in argv) or any(tok in ("-h", "--help", "--version") for tok in argv):
        return argv

    i = 0
    while i < len(argv):
        tok = argv[i]
        if tok in _GLOBAL_VALUE_OPTS:
            i += 2
        elif tok.split("=", 1)[0] in _GLOBAL_VALUE_OPTS:
            i += 1
        else:
            break
    return [*argv[:i], "report", *argv[i:]]


def _apply_cli_overrides(cfg: AppConfig, ns: argparse.Namespace) -> AppConfig:
    """Overlay command-line options on the loaded config.

    Any git option turns git resolution on, so it is never silently ignored.
    """

    git = cfg.git
    overrides = {
        key: getattr(ns, key)
        for key in ("source_dir", "default_version", "prefix")
        if getattr(ns, key, None) is not None
    }
    if getattr(ns, "fail_on_mismatch", False):
        overrides["fail_on_mismatch"] = True
    if overrides or getattr(ns, "git", False) or ns.command == "resolve":
        git = replace(git, enabled=True, **overrides)

    if "default_version" in overrides:
        try:
            parse_semver(git.default_version)
        except VersionFormatError as e:
            raise ConfigError(str(e), path="git.default_version") from e

    report = cfg.report
    if getattr(ns, "full", False):
        report = replace(report, full_version=True)

    return replace(cfg, git=git, report=report)


def select_descriptor(cfg: AppConfig) -> tuple[VersionDescriptor, ResolvedVersion | None]:
    """Pick the descriptor to report.

    Order: git resolution when enabled, then `version.*` from config, then
    this package's own version.
    """

    if cfg.git.enabled:
        resolved = resolve_version(cfg.git.to_options())
        if cfg.report.full_version:
            return resolved.full_descriptor(), resolved
        return resolved.descriptor, resolved

    declared = cfg.version.descriptor()
    if declared is not None:
        return declared, None

    return VersionDescriptor.parse(__version__), None


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint referenced by pyproject.toml."""

    argv_list = _with_default_command(list(argv) if argv is not None else sys.argv[1:])
    parser = _build_parser()

    try:
        ns = parser.parse_args(argv_list)
    except SystemExit as e:
        # argparse has already printed help/usage to stdout/stderr.
        code = e.code
        return int(code) if isinstance(code, int) else EXIT_CONFIG_ERROR

    configure_logging(level=ns.log_level or "WARNING")

    try:
        config_paths = resolve_config_paths(ns.config)
        raw = load_config(config_paths) if config_paths else {}
        cfg = _apply_cli_overrides(build_app_config(raw), ns)

        if ns.log_level is None:
            configure_logging(level=cfg.logging.level)

        logger.info("config_loaded", extra={"config_files": [str(p) for p in config_paths]})

        if ns.command == "print-config":
            sys.stdout.write(json.dumps(cfg.as_dict(), ensure_ascii=False, indent=2))
            sys.stdout.write("\n")
            return EXIT_OK

        if ns.command == "resolve":
            resolved = resolve_version(cfg.git.to_options())
            sys.stdout.write(json.dumps(resolved.as_dict(), ensure_ascii=False, indent=2))
            sys.stdout.write("\n")
            return EXIT_OK

        descriptor, _ = select_descriptor(cfg)
        write_report(descriptor, sys.stdout, title=cfg.app.title)
        return EXIT_OK

    except ConfigError as e:
        logger.error("config_error", extra={"error": str(e)})
        sys.stderr.write(f"ConfigError: {e}\n")
        return EXIT_CONFIG_ERROR
    except VersionError as e:
        logger.error("version_error", extra={"error": str(e)})
        sys.stderr.write(f"{type(e).__name__}: {e}\n")
        return EXIT_VERSION_ERROR
    except GitVersionError as e:
        logger.error("gitversion_error", extra={"error": str(e)})
        sys.stderr.write(f"{type(e).__name__}: {e}\n")
        return EXIT_FAILURE
    except Exception as e:  # noqa: BLE001
        logger.exception("fatal_error")
        sys.stderr.write(f"Fatal error: {e}\n")
        return EXIT_FAILURE
