from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml
from dotenv import load_dotenv

from gitversion_report.errors import ConfigError


DEFAULT_CONFIG_PATH = Path("configs") / "app.yaml"

_ENV_PLACEHOLDER_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _merge(base: dict[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    # Sections merge key by key; any other value from the overlay wins.
    out = dict(base)
    for key, value in overlay.items():
        current = out.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            out[key] = _merge(dict(current), value)
        else:
            out[key] = value
    return out


def _expand_env(value: Any, key_path: str, problems: list[str]) -> Any:
    """Substitute ${VAR} in string leaves of nested sections.

    Every missing or empty variable is appended to `problems` and its
    placeholder is left as-is.
    """

    if isinstance(value, Mapping):
        return {
            str(k): _expand_env(v, f"{key_path}.{k}" if key_path else str(k), problems)
            for k, v in value.items()
        }
    if not isinstance(value, str):
        return value

    def substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        env_value = os.environ.get(name)
        if not env_value:
            state = "missing" if env_value is None else "empty"
            problems.append(f"{name} ({state}) at {key_path or '<root>'}")
            return match.group(0)
        return env_value

    return _ENV_PLACEHOLDER_RE.sub(substitute, value)


def _read_fragment(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError("Config file not found", path=str(path))
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read YAML config: {e}", path=str(path)) from e
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError("Top-level YAML must be a mapping/dict", path=str(path))

    problems: list[str] = []
    expanded = _expand_env(data, "", problems)
    if problems:
        detail = "\n".join(f"- {p}" for p in problems)
        raise ConfigError(f"Unresolved environment variables in config:\n{detail}", path=str(path))
    return expanded


def load_config(
    paths: Path | Sequence[Path],
    *,
    load_dotenv_file: bool = True,
    dotenv_path: Path | None = None,
) -> dict[str, Any]:
    """Load one or more YAML config files into a single raw mapping.

    Files are read in order and overlaid, so later files win. `${VAR}`
    placeholders are expanded per file and must resolve to a non-empty value.
    A `.env` file (by default in the working directory) is loaded first,
    without overriding variables already set in the environment.

    Raises:
        ConfigError: For a missing file, invalid YAML, a non-mapping document,
            or unresolved placeholders. The error path names the file.
    """

    files = [Path(paths)] if isinstance(paths, (str, Path)) else [Path(p) for p in paths]
    if not files:
        raise ConfigError("No config files provided")

    if load_dotenv_file:
        load_dotenv(dotenv_path or Path.cwd() / ".env", override=False)

    merged: dict[str, Any] = {}
    for path in files:
        merged = _merge(merged, _read_fragment(path))
    return merged


def resolve_config_paths(explicit: Sequence[Path] | None, *, cwd: Path | None = None) -> list[Path]:
    """Pick the config files to load.

    Explicit paths are returned as-is. Otherwise `configs/app.yaml` under `cwd`
    is used when it exists; an empty list means built-in defaults.
    """

    if explicit:
        return [Path(p) for p in explicit]
    candidate = (cwd or Path.cwd()) / DEFAULT_CONFIG_PATH
    return [candidate] if candidate.exists() else []
