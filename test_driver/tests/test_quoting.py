"""Tests for dialect-aware quoting helpers (launcher_tools.quoting)."""

from __future__ import annotations

import pytest

from launcher_tools.options import ShellDialect
from launcher_tools.quoting import (
    escape_string,
    format_array,
    format_config_arg,
    format_object,
    quote_token,
)

POSIX_LIKE = [ShellDialect.POSIX, ShellDialect.WSL]
POWERSHELL = [ShellDialect.POWERSHELL_LT_73, ShellDialect.POWERSHELL_GE_73]


class TestQuoteToken:
    @pytest.mark.parametrize("dialect", list(ShellDialect))
    def test_plain_value(self, dialect):
        assert quote_token("gpt-4o", dialect) == "'gpt-4o'"

    @pytest.mark.parametrize("dialect", POSIX_LIKE)
    def test_embedded_quote_posix(self, dialect):
        assert quote_token("it's", dialect) == "'it'\"'\"'s'"

    @pytest.mark.parametrize("dialect", POWERSHELL)
    def test_embedded_quote_powershell(self, dialect):
        assert quote_token("it's", dialect) == "'it''s'"

    def test_rejects_non_dialect(self):
        with pytest.raises(TypeError):
            quote_token("x", "posix")


class TestFormatConfigArg:
    @pytest.mark.parametrize("dialect", POSIX_LIKE)
    def test_posix_quotes_whole_pair(self, dialect):
        assert format_config_arg("k", "v", dialect) == ["-c", "'k=v'"]

    @pytest.mark.parametrize("dialect", POWERSHELL)
    def test_powershell_quotes_value_only(self, dialect):
        assert format_config_arg("k", "v", dialect) == ["-c", "k='v'"]


class TestFormatArray:
    def test_posix(self):
        assert format_array(["a", "b c"], ShellDialect.POSIX) == '["a", "b c"]'

    def test_powershell_lt_73_backslash_quotes(self):
        assert format_array(["x"], ShellDialect.POWERSHELL_LT_73) == r'[\"x\"]'

    def test_powershell_ge_73_plain_quotes(self):
        assert format_array(["x"], ShellDialect.POWERSHELL_GE_73) == '["x"]'

    def test_posix_passes_backslashes_through(self):
        assert format_array(["a\\b"], ShellDialect.POSIX) == '["a\\b"]'

    @pytest.mark.parametrize("dialect", POWERSHELL)
    def test_powershell_escapes_content(self, dialect):
        result = format_array(["C:\\x\ty"], dialect)
        assert "C:\\\\x\\ty" in result

    def test_empty(self):
        assert format_array([], ShellDialect.POSIX) == "[]"


class TestFormatObject:
    def test_posix_no_system_root(self):
        assert format_object({"A": "1", "B": "2"}, ShellDialect.POSIX) == '{"A"="1","B"="2"}'

    def test_wsl_no_system_root(self):
        assert "SystemRoot" not in format_object({"A": "1"}, ShellDialect.WSL)

    def test_powershell_lt_73_synthesizes_system_root(self):
        result = format_object({"A": "1"}, ShellDialect.POWERSHELL_LT_73)
        assert result == r'{\"A\"=\"1\",\"SystemRoot\"=\"C:\\Windows\"}'
        assert result.count("SystemRoot") == 1

    def test_powershell_ge_73_synthesizes_system_root(self):
        result = format_object({}, ShellDialect.POWERSHELL_GE_73)
        assert result == r'{"SystemRoot"="C:\\Windows"}'

    def test_existing_system_root_kept(self):
        result = format_object({"SystemRoot": "E:\\Win"}, ShellDialect.POWERSHELL_GE_73)
        assert result == r'{"SystemRoot"="E:\\Win"}'

    def test_input_not_mutated(self):
        env = {"A": "1"}
        format_object(env, ShellDialect.POWERSHELL_GE_73)
        assert env == {"A": "1"}


class TestEscapeString:
    @pytest.mark.parametrize(
        ("raw", "escaped"),
        [
            ("plain", "plain"),
            ("a\\b", "a\\\\b"),
            ('say "hi"', 'say \\"hi\\"'),
            ("line\nnext", "line\\nnext"),
            ("tab\there", "tab\\there"),
            ("cr\r", "cr\\r"),
            ("\x01", "\\u0001"),
        ],
    )
    def test_escapes(self, raw, escaped):
        assert escape_string(raw) == escaped
