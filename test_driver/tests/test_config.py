"""Tests for config loading, tokens and small helpers in launcher_tools.core."""

from __future__ import annotations

from pathlib import Path

import pytest

from launcher_tools.core import (
    TokenFormatter,
    get_config_value,
    load_config,
    parse_port,
    resolve_tokens,
)


class TestLoadConfig:
    def test_no_file(self, tmp_path: Path):
        assert load_config(str(tmp_path)) == {}

    def test_empty(self, tmp_path: Path):
        (tmp_path / "config.yaml").write_text("", encoding="utf-8")
        assert load_config(str(tmp_path)) == {}

    def test_valid(self, tmp_path: Path):
        (tmp_path / "config.yaml").write_text(
            "launcher:\n  mode: full_auto\n  notify_port: 11111\n", encoding="utf-8",
        )
        cfg = load_config(str(tmp_path))
        assert cfg["launcher"]["mode"] == "full_auto"
        assert cfg["launcher"]["notify_port"] == 11111

    def test_non_dict(self, tmp_path: Path):
        (tmp_path / "config.yaml").write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(TypeError, match="top-level mapping"):
            load_config(str(tmp_path))


class TestGetConfigValue:
    def test_nested(self):
        assert get_config_value({"a": {"b": 3}}, "a.b") == 3

    def test_missing_returns_default(self):
        assert get_config_value({"a": {}}, "a.b", "x") == "x"

    def test_none_returns_default(self):
        assert get_config_value({"a": None}, "a", 5) == 5


class TestTokens:
    def test_recursive_resolution(self):
        fmt = TokenFormatter({"a": "{b}/x", "b": "root"})
        assert fmt.resolve("{a}") == "root/x"

    def test_cycle_detected(self):
        fmt = TokenFormatter({"a": "{b}", "b": "{a}"})
        with pytest.raises(ValueError):
            fmt.resolve("{a}")

    def test_missing_token(self):
        with pytest.raises(KeyError, match="Missing token"):
            TokenFormatter({}).resolve("{nope}")

    def test_resolve_tokens_builtins_and_config(self, tmp_path: Path):
        tokens = resolve_tokens(str(tmp_path), {"tokens": {"scratch": "{workspace_root}/tmp", "skip": [1]}})
        assert tokens["workspace_root"] == tmp_path.as_posix()
        assert tokens["scratch"] == f"{tmp_path.as_posix()}/tmp"
        assert "skip" not in tokens
        assert {"exe_ext", "path_sep", "home"} <= set(tokens)


class TestParsePort:
    @pytest.mark.parametrize(("raw", "expected"), [(1, 1), ("8080", 8080), (65535, 65535)])
    def test_valid(self, raw, expected):
        assert parse_port(raw) == expected

    @pytest.mark.parametrize("raw", [None, 0, -1, 65536, "x", False, True, 3.5j])
    def test_invalid(self, raw):
        assert parse_port(raw) is None
