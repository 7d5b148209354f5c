from __future__ import annotations

from pathlib import Path

import pytest

from gitversion_report.config.loader import DEFAULT_CONFIG_PATH, load_config, resolve_config_paths
from gitversion_report.errors import ConfigError


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text.lstrip(), encoding="utf-8")
    return path


def test_load_config_expands_env_vars(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_TITLE", "Demo")

    cfg_path = _write(
        tmp_path / "app.yaml",
        """
app:
  title: ${APP_TITLE} Application
git:
  source_dir: /srv/${APP_TITLE}/src
  timeout_s: 5
""",
    )

    cfg = load_config(cfg_path, load_dotenv_file=False)
    assert cfg["app"]["title"] == "Demo Application"
    assert cfg["git"] == {"source_dir": "/srv/Demo/src", "timeout_s": 5}


def test_load_config_missing_env_var_is_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITVERSION_DEFAULT", raising=False)

    cfg_path = _write(
        tmp_path / "app.yaml",
        """
git:
  default_version: ${GITVERSION_DEFAULT}
""",
    )

    with pytest.raises(ConfigError) as ei:
        load_config(cfg_path, load_dotenv_file=False)

    msg = str(ei.value)
    assert "GITVERSION_DEFAULT" in msg
    assert "missing" in msg
    assert "git.default_version" in msg


def test_load_config_empty_env_var_is_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITVERSION_DEFAULT", "")

    cfg_path = _write(
        tmp_path / "app.yaml",
        """
git:
  default_version: ${GITVERSION_DEFAULT}
""",
    )

    with pytest.raises(ConfigError) as ei:
        load_config(cfg_path, load_dotenv_file=False)

    assert "empty" in str(ei.value)


def test_unresolved_env_var_names_the_offending_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITVERSION_PREFIX", raising=False)
    base = _write(tmp_path / "app.yaml", "app:\n  title: Base\n")
    overlay = _write(tmp_path / "dev.yaml", "git:\n  prefix: ${GITVERSION_PREFIX}\n")

    with pytest.raises(ConfigError) as ei:
        load_config([base, overlay], load_dotenv_file=False)

    assert ei.value.path == str(overlay)
    assert "- GITVERSION_PREFIX (missing) at git.prefix" in str(ei.value)


def test_placeholders_are_only_expanded_in_strings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITVERSION_UNUSED", raising=False)
    cfg_path = _write(tmp_path / "app.yaml", "extra:\n  - ${GITVERSION_UNUSED}\n")

    assert load_config(cfg_path, load_dotenv_file=False) == {"extra": ["${GITVERSION_UNUSED}"]}


def test_load_config_reads_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so monkeypatch removes what load_dotenv() sets.
    monkeypatch.setenv("GITVERSION_PREFIX", "unset")
    monkeypatch.delenv("GITVERSION_PREFIX")
    dotenv = _write(tmp_path / ".env", "GITVERSION_PREFIX=v\n")
    cfg_path = _write(tmp_path / "app.yaml", "git:\n  prefix: ${GITVERSION_PREFIX}\n")

    cfg = load_config(cfg_path, dotenv_path=dotenv)
    assert cfg["git"]["prefix"] == "v"


def test_later_files_override_earlier_ones(tmp_path: Path) -> None:
    base = _write(
        tmp_path / "app.yaml",
        """
app:
  title: Base
git:
  enabled: false
  prefix: v
""",
    )
    overlay = _write(tmp_path / "dev.yaml", "git:\n  enabled: true\n")

    cfg = load_config([base, overlay], load_dotenv_file=False)
    assert cfg == {"app": {"title": "Base"}, "git": {"enabled": True, "prefix": "v"}}


def test_empty_file_is_empty_mapping(tmp_path: Path) -> None:
    assert load_config(_write(tmp_path / "app.yaml", "\n"), load_dotenv_file=False) == {}


def test_missing_file_is_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as ei:
        load_config(tmp_path / "nope.yaml", load_dotenv_file=False)
    assert "not found" in str(ei.value)


def test_non_mapping_root_is_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path / "app.yaml", "- a\n- b\n"), load_dotenv_file=False)


def test_invalid_yaml_is_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as ei:
        load_config(_write(tmp_path / "app.yaml", "app: [unclosed\n"), load_dotenv_file=False)
    assert "Failed to read YAML" in str(ei.value)


def test_resolve_config_paths(tmp_path: Path) -> None:
    assert resolve_config_paths(None, cwd=tmp_path) == []

    default = _write(tmp_path / DEFAULT_CONFIG_PATH, "app: {}\n")
    assert resolve_config_paths(None, cwd=tmp_path) == [default]

    explicit = [tmp_path / "other.yaml"]
    assert resolve_config_paths(explicit, cwd=tmp_path) == explicit
