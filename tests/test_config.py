"""Tests for protoc_gen_swagger.config -- parameter string and swagger.toml."""

from __future__ import annotations

from pathlib import Path

import pytest

from protoc_gen_swagger.config import (
    CONFIG_FILENAME,
    load_config,
    parse_parameter,
    split_parameter,
)
from protoc_gen_swagger.exceptions import ConfigError
from protoc_gen_swagger.exit_codes import EXIT_CONFIG_ERROR
from protoc_gen_swagger.models import PluginConfig

SAMPLE_TOML = """\
Host = "api.example.com"
Service = "user-api"

[Header]
Auth = "Authorization"
"""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_config(directory: Path, text: str = SAMPLE_TOML) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / CONFIG_FILENAME
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# split_parameter
# ---------------------------------------------------------------------------


class TestSplitParameter:
    def test_empty(self) -> None:
        assert split_parameter("") == []

    def test_pairs(self) -> None:
        assert split_parameter("confdir=./conf,include_reserved=true") == [
            ("confdir", "./conf"),
            ("include_reserved", "true"),
        ]

    def test_bare_key_and_blanks(self) -> None:
        assert split_parameter(" include_reserved , ,x=1") == [
            ("include_reserved", ""),
            ("x", "1"),
        ]

    def test_value_may_contain_equals(self) -> None:
        assert split_parameter("confdir=a=b") == [("confdir", "a=b")]


# ---------------------------------------------------------------------------
# load_config
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_full_file(self, tmp_path: Path) -> None:
        _write_config(tmp_path)
        config = load_config(tmp_path)
        assert config.host == "api.example.com"
        assert config.service == "user-api"
        assert config.header.auth == "Authorization"
        assert config.include_reserved is False

    def test_partial_file(self, tmp_path: Path) -> None:
        _write_config(tmp_path, 'Host = "localhost:8080"\n')
        config = load_config(tmp_path)
        assert config.host == "localhost:8080"
        assert config.header.auth is None

    def test_unknown_keys_ignored(self, tmp_path: Path) -> None:
        _write_config(tmp_path, 'Host = "h"\nColour = "blue"\n')
        assert load_config(str(tmp_path)).host == "h"

    def test_defaults_to_current_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_config(tmp_path)
        monkeypatch.chdir(tmp_path)
        assert load_config().host == "api.example.com"
        assert load_config("").service == "user-api"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found") as exc_info:
            load_config(tmp_path / "nowhere")
        assert exc_info.value.exit_code == EXIT_CONFIG_ERROR

    def test_invalid_toml(self, tmp_path: Path) -> None:
        _write_config(tmp_path, "Host = \n")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(tmp_path)

    def test_wrong_type(self, tmp_path: Path) -> None:
        _write_config(tmp_path, "Host = 42\n")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(tmp_path)


# ---------------------------------------------------------------------------
# parse_parameter
# ---------------------------------------------------------------------------


class TestParseParameter:
    def test_empty_gives_defaults(self) -> None:
        assert parse_parameter("") == PluginConfig()

    def test_confdir(self, tmp_path: Path) -> None:
        _write_config(tmp_path)
        config = parse_parameter(f"confdir={tmp_path}")
        assert config.host == "api.example.com"

    def test_include_reserved_flag(self) -> None:
        assert parse_parameter("include_reserved").include_reserved is True
        assert parse_parameter("include_reserved=yes").include_reserved is True
        assert parse_parameter("include_reserved=false").include_reserved is False

    def test_flag_order_does_not_matter(self, tmp_path: Path) -> None:
        _write_config(tmp_path)
        config = parse_parameter(f"include_reserved=1,confdir={tmp_path}")
        assert config.include_reserved is True
        assert config.host == "api.example.com"

    def test_invalid_flag_value(self) -> None:
        with pytest.raises(ConfigError, match="include_reserved"):
            parse_parameter("include_reserved=maybe")

    def test_unknown_keys_ignored(self) -> None:
        assert parse_parameter("paths=source_relative") == PluginConfig()

    def test_missing_confdir(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            parse_parameter(f"confdir={tmp_path / 'missing'}")
