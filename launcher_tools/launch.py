"""ArgsTool and LaunchTool — print or run the assistant command line."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path
from typing import Any

import click

from .args_builder import build_args
from .command import (
    CommandScriptFactory,
    TempScriptRegistry,
    build_command_line,
    shell_argv,
    with_ide_server_port,
)
from .core import LauncherTool, ToolContext, get_config_value, logger, parse_port

_SCRIPT_REGISTRY = TempScriptRegistry()


def _project_root(ctx: ToolContext, args: dict[str, Any]) -> str:
    return str(args.get("project_root") or ctx.workspace_root)


def _notify_port(ctx: ToolContext, args: dict[str, Any]) -> int | None:
    """Port for the notify hook, or ``None`` when the hook is not wanted.

    The hook only serves file refresh and notifications, so it is skipped
    when both features are off.
    """
    raw = args.get("port")
    if raw is None:
        raw = get_config_value(ctx.config, "launcher.notify_port")
    port = parse_port(raw)
    if port is None:
        return None
    settings = ctx.settings
    if not (settings.enable_notification or settings.open_file_on_change):
        logger.debug("Notify hook skipped: notifications and file refresh are disabled")
        return None
    return port


def _mcp_server_name(ctx: ToolContext) -> str:
    return str(get_config_value(ctx.config, "launcher.mcp_server_name", "intellij"))


def _build_tokens(ctx: ToolContext, args: dict[str, Any]) -> list[str]:
    return build_args(
        ctx.settings,
        notify_port=_notify_port(ctx, args),
        project_root=_project_root(ctx, args),
        mcp_server_name=_mcp_server_name(ctx),
    )


def _port_option(cmd: click.Command) -> click.Command:
    cmd = click.option("--port", type=int, default=None, help="Notify hook port (overrides launcher.notify_port)")(cmd)
    cmd = click.option("--project-root", default=None, help="Project root used for --cd (default: workspace root)")(cmd)
    return cmd


class ArgsTool(LauncherTool):
    name = "args"
    help = "Print the argument tokens built from the launcher settings"

    def setup(self, cmd: click.Command) -> click.Command:
        cmd = _port_option(cmd)
        cmd = click.option("--json", "as_json", is_flag=True, help="Output tokens as a JSON list")(cmd)
        return cmd

    def default_args(self, tokens: dict[str, str]) -> dict[str, Any]:
        return {"as_json": False}

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        tokens = _build_tokens(ctx, args)
        if args.get("as_json"):
            print(json.dumps(tokens, indent=2))
        else:
            print(" ".join(tokens))


class LaunchTool(LauncherTool):
    name = "launch"
    help = "Build the assistant command line and run it in the configured shell"

    def setup(self, cmd: click.Command) -> click.Command:
        cmd = _port_option(cmd)
        cmd = click.option(
            "--ide-port", type=int, default=None,
            help="IDE server port exported to targets that read one",
        )(cmd)
        cmd = click.option("--dry-run", is_flag=True, help="Print resolved command without executing")(cmd)
        return cmd

    def default_args(self, tokens: dict[str, str]) -> dict[str, Any]:
        return {"dry_run": False}

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        settings = ctx.settings
        dialect = settings.shell_dialect

        command = build_command_line(settings.target, _build_tokens(ctx, args))
        ide_port = args.get("ide_port")
        if ide_port is None:
            ide_port = get_config_value(ctx.config, "launcher.ide_server_port")
        command = with_ide_server_port(command, settings.target, parse_port(ide_port), dialect)

        if args.get("dry_run"):
            logger.info(f"Would run: {command}")
            return

        factory = CommandScriptFactory(ctx.host_windows, registry=_SCRIPT_REGISTRY)
        plan = factory.build_plan(command)
        if plan is None:
            logger.error("Could not prepare a script for the command; see warnings above.")
            raise SystemExit(1)

        cwd = Path(_project_root(ctx, args))
        logger.info(f"Launching {settings.target.display_name} in {cwd}")
        logger.debug(f"Running: {plan.command}")
        try:
            subprocess.run(
                [*shell_argv(dialect), plan.command],
                cwd=cwd if cwd.is_dir() else None,
                check=True,
            )
        except FileNotFoundError as exc:
            plan.cleanup_on_failure()
            logger.error(f"Shell not found for {dialect.display_name}: {exc}")
            raise SystemExit(1) from exc
        except subprocess.CalledProcessError as exc:
            sys.exit(exc.returncode)
