"""Entry point: main(), click group, tool discovery."""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from pathlib import Path
from typing import Any

import click

from .core import (
    LauncherTool,
    ToolContext,
    is_windows,
    load_config,
    logger,
    register_tool,
    resolve_tokens,
)
from .settings import settings_from_config

# ── Tool Discovery ───────────────────────────────────────────────────


def _discover_tools(namespace_path: list[str], package_name: str) -> list[LauncherTool]:
    """Discover LauncherTool subclasses defined in the package modules."""
    tools: list[LauncherTool] = []
    for module_info in pkgutil.iter_modules(namespace_path):
        name = module_info.name
        if name.startswith("_") or name in ("cli", "core"):
            continue
        try:
            module = importlib.import_module(f"{package_name}.{name}")
        except ImportError as exc:
            logger.debug(f"Could not import {package_name}.{name}: {exc}")
            continue

        for _, cls in inspect.getmembers(module, inspect.isclass):
            if cls is LauncherTool or not issubclass(cls, LauncherTool):
                continue
            if cls.__module__ != module.__name__:
                continue
            tool = cls()
            if not tool.name:
                logger.warning(f"Skipping tool '{cls.__name__}' with empty name")
                continue
            tools.append(tool)
    return sorted(tools, key=lambda t: t.name)


# ── Click Command Builder ────────────────────────────────────────────


def _build_tool_context(ctx_obj: dict[str, Any], tool_name: str) -> ToolContext:
    config = ctx_obj["config"]
    tool_config = config.get(tool_name, {})
    if not isinstance(tool_config, dict):
        tool_config = {}
    return ToolContext(
        workspace_root=Path(ctx_obj["workspace_root"]),
        tokens=ctx_obj["tokens"],
        config=config,
        tool_config=tool_config,
        settings=ctx_obj["settings"],
        host_windows=ctx_obj["host_windows"],
    )


def _make_tool_command(tool: LauncherTool) -> click.Command:
    """Build a click command for a tool."""

    @click.pass_context
    def callback(ctx: click.Context, **kwargs: Any) -> None:
        context = _build_tool_context(ctx.obj, tool.name)

        # Merge: defaults < tool_config < CLI kwargs
        args: dict[str, Any] = {**tool.default_args(context.tokens)}
        for k, v in context.tool_config.items():
            if k not in kwargs or kwargs[k] is None:
                args[k] = v
        for k, v in kwargs.items():
            if v is not None:
                args[k] = v

        tool.execute(context, args)

    cmd = click.Command(name=tool.name, help=tool.help, callback=callback)
    return tool.setup(cmd)


# ── Main CLI Group ───────────────────────────────────────────────────


def _build_cli(
    workspace_root: str | None = None,
    host_windows: bool | None = None,
) -> click.Group:
    """Build the top-level click group with all discovered tools.

    *host_windows* overrides OS detection (tests pin it).
    """

    @click.group(context_settings={"help_option_names": ["-h", "--help"]})
    @click.option(
        "--workspace-root",
        type=click.Path(exists=True, file_okay=False),
        default=workspace_root,
        help="Directory holding config.yaml (default: current directory)",
    )
    @click.pass_context
    def cli(ctx: click.Context, workspace_root: str | None) -> None:
        ctx.ensure_object(dict)

        if workspace_root is None:
            workspace_root = str(Path.cwd())
        windows = is_windows() if host_windows is None else host_windows

        try:
            config = load_config(workspace_root)
            tokens = resolve_tokens(workspace_root, config)
            settings = settings_from_config(
                config.get("launcher"), host_windows=windows, tokens=tokens,
            )
        except (TypeError, ValueError, KeyError) as exc:
            logger.error(f"Invalid configuration: {exc}")
            raise SystemExit(1) from exc

        ctx.obj["workspace_root"] = workspace_root
        ctx.obj["config"] = config
        ctx.obj["tokens"] = tokens
        ctx.obj["settings"] = settings
        ctx.obj["host_windows"] = windows

    import launcher_tools as lt_pkg

    for tool in _discover_tools(list(lt_pkg.__path__), lt_pkg.__name__):
        register_tool(tool)
        cli.add_command(_make_tool_command(tool))

    return cli


def main() -> None:
    """CLI entry point (``launcher`` console script)."""
    from colorama import init as colorama_init
    colorama_init()

    cli = _build_cli()
    cli(prog_name="launcher", standalone_mode=True)


if __name__ == "__main__":
    main()
