from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from gitversion_report.config.model import DEFAULT_TITLE, AppConfig, build_app_config
from gitversion_report.errors import ConfigError


def test_empty_config_uses_defaults() -> None:
    cfg = build_app_config({})
    assert cfg == AppConfig()
    assert cfg.app.title == DEFAULT_TITLE
    assert cfg.version.descriptor() is None
    assert cfg.git.enabled is False
    assert cfg.git.default_version == "0.0.0"
    assert cfg.logging.level == "WARNING"


def test_full_config() -> None:
    cfg = build_app_config(
        {
            "app": {"title": "Demo"},
            "version": {"major": 1, "minor": 2, "patch": 3, "display": "1.2.3"},
            "git": {
                "enabled": True,
                "source_dir": "sub",
                "default_version": "1.0.0",
                "prefix": "v",
                "fail_on_mismatch": True,
                "detect_dirty": False,
                "timeout_s": 5,
            },
            "report": {"full_version": True},
            "logging": {"level": "debug"},
        }
    )

    assert cfg.app.title == "Demo"
    d = cfg.version.descriptor()
    assert d is not None and d.triple == (1, 2, 3)
    assert cfg.git.prefix == "v"
    assert cfg.git.timeout_s == 5.0
    assert cfg.report.full_version is True
    assert cfg.logging.level == "DEBUG"

    opts = cfg.git.to_options()
    assert opts.source_dir == Path("sub")
    assert opts.default_version == "1.0.0"
    assert opts.fail_on_mismatch is True
    assert opts.detect_dirty is False


def test_version_fields_must_be_set_together() -> None:
    with pytest.raises(ConfigError) as ei:
        build_app_config({"version": {"major": 1, "minor": 2}})
    assert ei.value.path == "version"
    assert "patch" in str(ei.value)


def test_version_display_must_be_consistent() -> None:
    with pytest.raises(ConfigError) as ei:
        build_app_config({"version": {"major": 1, "minor": 2, "patch": 3, "display": "9.9.9"}})
    assert ei.value.path == "version"


def test_negative_version_is_rejected() -> None:
    with pytest.raises(ConfigError):
        build_app_config({"version": {"major": -1, "minor": 0, "patch": 0}})


@pytest.mark.parametrize(
    ("raw", "path"),
    [
        ({"app": "nope"}, "app"),
        ({"app": {"title": "  "}}, "app.title"),
        ({"version": {"major": "x", "minor": 0, "patch": 0}}, "version.major"),
        ({"version": {"major": 1.9, "minor": 2, "patch": 3}}, "version.major"),
        ({"version": {"major": 1, "minor": "2.5", "patch": 3}}, "version.minor"),
        ({"version": {"major": 1, "minor": 2, "patch": True}}, "version.patch"),
        ({"version": {"display": "1.0.0"}}, "version.display"),
        ({"git": {"enabled": "yes"}}, "git.enabled"),
        ({"git": {"default_version": "1.2"}}, "git.default_version"),
        ({"git": {"timeout_s": 0}}, "git.timeout_s"),
        ({"git": {"timeout_s": "soon"}}, "git.timeout_s"),
        ({"report": {"full_version": 1}}, "report.full_version"),
        ({"logging": {"level": "LOUD"}}, "logging.level"),
    ],
)
def test_invalid_values_report_their_path(raw: dict[str, Any], path: str) -> None:
    with pytest.raises(ConfigError) as ei:
        build_app_config(raw)
    assert ei.value.path == path
    assert str(ei.value).startswith(f"{path}: ")


def test_as_dict_round_trips_sections() -> None:
    data = build_app_config({"git": {"prefix": "v"}}).as_dict()
    assert set(data) == {"app", "version", "git", "report", "logging"}
    assert data["git"]["prefix"] == "v"


def test_integer_strings_are_accepted_for_version_fields() -> None:
    cfg = build_app_config({"version": {"major": "4", "minor": "0", "patch": "12"}})
    d = cfg.version.descriptor()
    assert d is not None and d.triple == (4, 0, 12)


def test_float_version_field_is_not_truncated() -> None:
    with pytest.raises(ConfigError) as ei:
        build_app_config({"version": {"major": 1.9, "minor": 2, "patch": 3}})
    assert ei.value.path == "version.major"
    assert "1.9" in str(ei.value)
