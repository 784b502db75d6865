"""LauncherSettings — the immutable settings snapshot fed to the args builder.

Settings come from the ``launcher`` section of ``config.yaml``::

    launcher:
        target: codex
        mode: full_auto
        model: custom
        custom_model: gpt-4o
        reasoning_effort: high
        enable_search: true
        win_shell: powershell_73_plus
        mcp_config_input: |
            {"command": "java", "args": ["-jar", "mcp.jar"]}
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any

import click

from .core import LauncherTool, TokenFormatter, ToolContext, logger
from .options import (
    CODEX,
    CliTarget,
    Mode,
    ReasoningEffort,
    ShellDialect,
    WinShell,
    _ModelOption,
    parse_target,
)

_BOOL_KEYS = (
    "open_file_on_change",
    "enable_notification",
    "enable_search",
    "enable_cd_project_root",
)

_STR_KEYS = (
    "custom_model",
    "cd_working_directory",
    "mcp_config_input",
    "custom_args",
)


@dataclasses.dataclass(frozen=True)
class LauncherSettings:
    target: CliTarget = CODEX
    mode: Mode = Mode.DEFAULT
    model: _ModelOption | None = None
    custom_model: str = ""
    reasoning_effort: ReasoningEffort = ReasoningEffort.DEFAULT
    open_file_on_change: bool = False
    enable_notification: bool = False
    enable_search: bool = False
    enable_cd_project_root: bool = False
    cd_working_directory: str = ""
    mcp_config_input: str = ""
    shell_dialect: ShellDialect = ShellDialect.POSIX
    custom_args: str = ""

    def __post_init__(self) -> None:
        if self.model is None:
            object.__setattr__(self, "model", self.target.model_enum.DEFAULT)
        elif not isinstance(self.model, self.target.model_enum):
            raise ValueError(
                f"Model {self.model!r} does not belong to target '{self.target.name}'"
            )

    def resolve_model_name(self) -> str | None:
        """Return the ``--model`` value, or ``None`` when no flag is wanted."""
        if self.model.is_default:
            return None
        if self.model.is_custom:
            return self.custom_model.strip() or None
        return self.model.cli_name

    def describe(self) -> dict[str, str]:
        """Human-readable view used by the ``settings`` command."""
        return {
            "target": self.target.display_name,
            "mode": self.mode.display_name,
            "model": self.model.display_name,
            "custom_model": self.custom_model,
            "reasoning_effort": self.reasoning_effort.display_name,
            "open_file_on_change": str(self.open_file_on_change).lower(),
            "enable_notification": str(self.enable_notification).lower(),
            "enable_search": str(self.enable_search).lower(),
            "enable_cd_project_root": str(self.enable_cd_project_root).lower(),
            "cd_working_directory": self.cd_working_directory,
            "mcp_config_input": "set" if self.mcp_config_input.strip() else "",
            "shell_dialect": self.shell_dialect.display_name,
            "custom_args": self.custom_args,
        }


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().casefold() in ("true", "yes", "on", "1"):
        return True
    if isinstance(value, str) and value.strip().casefold() in ("false", "no", "off", "0", ""):
        return False
    raise ValueError(f"Invalid value {value!r} for '{key}' (expected a boolean)")


def migrate_legacy(section: dict[str, Any]) -> dict[str, Any]:
    """Translate the legacy ``is_powershell_73_or_over`` flag into ``win_shell``.

    The flag always wins when set, and is dropped from the returned copy.
    """
    result = dict(section)
    legacy = result.pop("is_powershell_73_or_over", False)
    if legacy and _as_bool(legacy, "is_powershell_73_or_over"):
        result["win_shell"] = WinShell.POWERSHELL_73_PLUS.value
    return result


def settings_from_config(
    section: dict[str, Any] | None,
    *,
    host_windows: bool,
    tokens: dict[str, str] | None = None,
) -> LauncherSettings:
    """Build :class:`LauncherSettings` from a ``launcher`` config section.

    ``win_shell`` is combined with *host_windows* to pick the shell dialect;
    on non-Windows hosts the dialect is always POSIX.  When *tokens* is
    given, ``cd_working_directory`` is token-expanded.

    Raises :class:`ValueError` for unknown enum values or bad booleans.
    """
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise ValueError("'launcher' config section must be a mapping")
    raw = migrate_legacy(section)

    target = parse_target(raw.get("target", CODEX.name))
    kwargs: dict[str, Any] = {"target": target}

    if raw.get("mode") is not None:
        kwargs["mode"] = Mode.parse(raw["mode"], "mode")
    if raw.get("model") is not None:
        kwargs["model"] = target.model_enum.parse(raw["model"], "model")
    if raw.get("reasoning_effort") is not None:
        kwargs["reasoning_effort"] = ReasoningEffort.parse(
            raw["reasoning_effort"], "reasoning_effort",
        )

    for key in _BOOL_KEYS:
        if raw.get(key) is not None:
            kwargs[key] = _as_bool(raw[key], key)
    for key in _STR_KEYS:
        if raw.get(key) is not None:
            kwargs[key] = str(raw[key])
    # A YAML mapping is accepted in place of pasted JSON text.
    if isinstance(raw.get("mcp_config_input"), dict):
        kwargs["mcp_config_input"] = json.dumps(raw["mcp_config_input"])

    if tokens and kwargs.get("cd_working_directory"):
        kwargs["cd_working_directory"] = TokenFormatter(tokens).resolve(
            kwargs["cd_working_directory"],
        )

    if raw.get("shell_dialect") is not None:
        kwargs["shell_dialect"] = ShellDialect.parse(raw["shell_dialect"], "shell_dialect")
    else:
        win_shell = WinShell.parse(
            raw.get("win_shell", WinShell.POWERSHELL_LT_73.value), "win_shell",
        )
        kwargs["shell_dialect"] = ShellDialect.for_host(win_shell, host_windows)

    return LauncherSettings(**kwargs)


class SettingsTool(LauncherTool):
    name = "settings"
    help = "Display the resolved launcher settings"

    def setup(self, cmd: click.Command) -> click.Command:
        cmd = click.option("--json", "as_json", is_flag=True, help="Output as JSON")(cmd)
        return cmd

    def default_args(self, tokens: dict[str, str]) -> dict[str, Any]:
        return {"as_json": False}

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        view = ctx.settings.describe()
        if args.get("as_json"):
            print(json.dumps(view, indent=2))
        else:
            for key, value in view.items():
                logger.info(f"{key}: {value}")
