"""Build the CLI argument list for launching an assistant CLI.

:func:`build_args` is a pure function of the settings snapshot and a few
environment facts.  Token order is fixed::

    --full-auto
    <search flags>
    --cd '<dir>'
    --model '<name>'
    -c model_reasoning_effort=<effort>
    -c notify=[...]
    -c mcp_servers.<ide>.command=...
    -c mcp_servers.<ide>.args=[...]
    -c mcp_servers.<ide>.env={...}
    <custom args, verbatim>
"""

from __future__ import annotations

import bashlex

from .core import logger, parse_port
from .mcp_config import McpServerConfig, parse_mcp_config
from .options import Mode, ShellDialect
from .quoting import format_array, format_config_arg, format_object, quote_token
from .settings import LauncherSettings
from .wsl import to_wsl_path

FULL_AUTO_FLAG = "--full-auto"
DEFAULT_MCP_SERVER_NAME = "intellij"


def notify_command(port: int) -> list[str]:
    """Command vector the assistant runs on completion to ping the IDE."""
    return ["curl", "-s", "-X", "POST", f"http://localhost:{port}/refresh", "-d"]


def _cd_args(settings: LauncherSettings, project_root: str | None, dialect: ShellDialect) -> list[str]:
    directory = settings.cd_working_directory.strip() or (project_root or "").strip()
    if not directory:
        return []
    return ["--cd", quote_token(directory, dialect)]


def _mcp_args(config: McpServerConfig, server_name: str, dialect: ShellDialect) -> list[str]:
    command = config.command
    args = config.args
    if dialect is ShellDialect.WSL:
        command = to_wsl_path(command) if command else command
        args = [to_wsl_path(a) for a in args]

    prefix = f"mcp_servers.{server_name}"
    parts: list[str] = []
    if command:
        parts += format_config_arg(f"{prefix}.command", command, dialect)
    if args:
        parts += format_config_arg(f"{prefix}.args", format_array(args, dialect), dialect)
    if config.env:
        parts += format_config_arg(f"{prefix}.env", format_object(config.env, dialect), dialect)
    return parts


def inspect_custom_args(custom_args: str, dialect: ShellDialect) -> None:
    """Warn when a POSIX custom-args tail does not parse as a single command.

    The tail is appended verbatim either way; this only surfaces mistakes
    such as unbalanced quotes or an accidental ``; other-command``.
    """
    if dialect.is_powershell or not custom_args.strip():
        return
    try:
        parts = bashlex.parse(custom_args)
    except Exception as exc:
        # Besides ParsingError, bashlex raises AttributeError or TypeError on
        # some backtick and brace inputs.
        logger.warning(f"Custom args do not parse as shell words: {exc}")
        return
    if len(parts) != 1 or parts[0].kind != "command":
        logger.warning(f"Custom args chain additional shell commands: {custom_args!r}")


def build_args(
    settings: LauncherSettings,
    notify_port: int | None = None,
    project_root: str | None = None,
    dialect: ShellDialect | None = None,
    *,
    mcp_server_name: str = DEFAULT_MCP_SERVER_NAME,
) -> list[str]:
    """Return the argument tokens for ``settings.target``.

    *dialect* defaults to ``settings.shell_dialect``.  The notify hook is
    added whenever *notify_port* is a valid TCP port; whether notifications
    are wanted at all is the caller's decision.

    ``custom_args`` is appended as one final token, unchanged except that
    leading and trailing whitespace is stripped; a blank value adds nothing.
    """
    if dialect is None:
        dialect = settings.shell_dialect
    if not isinstance(dialect, ShellDialect):
        raise TypeError(f"Unsupported shell dialect: {dialect!r}")

    parts: list[str] = []

    if settings.mode is Mode.FULL_AUTO:
        parts.append(FULL_AUTO_FLAG)

    if settings.enable_search:
        parts.extend(settings.target.search_flags)

    if settings.enable_cd_project_root:
        parts += _cd_args(settings, project_root, dialect)

    model_name = settings.resolve_model_name()
    if model_name is not None:
        parts += ["--model", quote_token(model_name, dialect)]

    effort = settings.reasoning_effort.cli_name
    if effort:
        parts += format_config_arg("model_reasoning_effort", effort, dialect)

    port = parse_port(notify_port)
    if port is not None:
        parts += format_config_arg("notify", format_array(notify_command(port), dialect), dialect)

    mcp_config = parse_mcp_config(settings.mcp_config_input)
    if mcp_config is not None:
        parts += _mcp_args(mcp_config, mcp_server_name, dialect)

    custom_args = settings.custom_args.strip()
    if custom_args:
        inspect_custom_args(custom_args, dialect)
        parts.append(custom_args)

    return parts
