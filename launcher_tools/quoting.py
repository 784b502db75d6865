"""Shell-dialect aware quoting for CLI tokens and ``-c key=value`` overrides.

The assistant CLIs parse ``-c`` values as TOML, so lists and tables are
rendered inline (``["a", "b"]``, ``{"K"="V"}``) and then wrapped in the
outer quoting of the target shell:

============================  ==================  =====================
dialect                       config token        array element
============================  ==================  =====================
POSIX / WSL                   ``'key=value'``     ``"elem"``
PowerShell < 7.3              ``key='value'``     ``\\"elem\\"``
PowerShell >= 7.3             ``key='value'``     ``"elem"``
============================  ==================  =====================

PowerShell before 7.3 strips bare double quotes from native command
arguments, hence the extra backslash there.  On both PowerShell dialects
element contents are escaped like Java string literals so that Windows
paths survive the TOML parser.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .options import ShellDialect

SYSTEM_ROOT_KEY = "SystemRoot"
SYSTEM_ROOT_VALUE = "C:\\Windows"

_JAVA_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\b": "\\b",
    "\f": "\\f",
}


def _check_dialect(dialect: ShellDialect) -> None:
    if not isinstance(dialect, ShellDialect):
        raise TypeError(f"Unsupported shell dialect: {dialect!r}")


def escape_string(value: str) -> str:
    """Escape *value* the way a Java string literal would."""
    out: list[str] = []
    for ch in value:
        if ch in _JAVA_ESCAPES:
            out.append(_JAVA_ESCAPES[ch])
        elif ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return "".join(out)


def _single_quote(value: str, dialect: ShellDialect) -> str:
    if dialect.is_powershell:
        return "'" + value.replace("'", "''") + "'"
    return "'" + value.replace("'", "'\"'\"'") + "'"


def quote_token(value: str, dialect: ShellDialect) -> str:
    """Quote a single argument value (``--model``, ``--cd``)."""
    _check_dialect(dialect)
    return _single_quote(value, dialect)


def format_config_arg(key: str, value: str, dialect: ShellDialect) -> list[str]:
    """Return ``["-c", token]`` for a ``key=value`` config override."""
    _check_dialect(dialect)
    if dialect.is_powershell:
        return ["-c", f"{key}={_single_quote(value, dialect)}"]
    return ["-c", _single_quote(f"{key}={value}", dialect)]


def _element_quote(dialect: ShellDialect) -> str:
    return '\\"' if dialect is ShellDialect.POWERSHELL_LT_73 else '"'


def _element(value: str, dialect: ShellDialect) -> str:
    quote = _element_quote(dialect)
    text = escape_string(value) if dialect.is_powershell else value
    return f"{quote}{text}{quote}"


def format_array(values: Iterable[str], dialect: ShellDialect) -> str:
    """Render *values* as an inline TOML array for a config value."""
    _check_dialect(dialect)
    return "[" + ", ".join(_element(v, dialect) for v in values) + "]"


def format_object(values: Mapping[str, str], dialect: ShellDialect) -> str:
    """Render *values* as an inline TOML table for a config value.

    PowerShell dialects get a ``SystemRoot`` entry when none is present;
    child processes on Windows fail to load DLLs without it.
    """
    _check_dialect(dialect)
    entries = dict(values)
    if dialect.is_powershell and not any(
        k.casefold() == SYSTEM_ROOT_KEY.casefold() for k in entries
    ):
        entries[SYSTEM_ROOT_KEY] = SYSTEM_ROOT_VALUE
    pairs = (f"{_element(k, dialect)}={_element(v, dialect)}" for k, v in entries.items())
    return "{" + ",".join(pairs) + "}"
