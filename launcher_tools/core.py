"""Core framework: LauncherTool base, token system, config loading, utilities."""

from __future__ import annotations

import dataclasses
import logging
import platform
import string
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
import yaml
from colorama import Fore, Style

if TYPE_CHECKING:
    from .settings import LauncherSettings


# ── Logging ──────────────────────────────────────────────────────────


def _level_color(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return Fore.RED
    if levelno >= logging.WARNING:
        return Fore.YELLOW
    return Fore.CYAN


class ToolFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        color = _level_color(record.levelno)
        message = record.getMessage()
        return f"{color}[{record.levelname.lower()}]{Style.RESET_ALL} {message}"


logger = logging.getLogger("launcher_tools")
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(ToolFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False


# ── Token System ─────────────────────────────────────────────────────


class TokenFormatter(string.Formatter):
    """Format string subclass with circular-reference detection.

    Tokens can reference other tokens: ``{scratch}`` may expand to
    ``{workspace_root}/scratch``.  This formatter recursively resolves
    until stable, but raises on cycles.
    """

    MAX_DEPTH = 10

    def __init__(self, tokens: dict[str, str]) -> None:
        self._tokens = tokens

    def resolve(self, template: str) -> str:
        seen: set[str] = set()
        result = template
        for _ in range(self.MAX_DEPTH):
            try:
                expanded = result.format_map(self._tokens)
            except KeyError as exc:
                missing = exc.args[0] if exc.args else "unknown"
                raise KeyError(f"Missing token: {missing}") from exc
            if expanded == result:
                return expanded
            if expanded in seen:
                raise ValueError(f"Circular token reference: {expanded}")
            seen.add(expanded)
            result = expanded
        raise ValueError(f"Token expansion exceeded {self.MAX_DEPTH} iterations")


def _fwd(p: str) -> str:
    """Normalize path to forward slashes."""
    return Path(p).as_posix()


def _builtin_tokens() -> dict[str, str]:
    is_win = is_windows()
    return {
        "exe_ext": ".exe" if is_win else "",
        "path_sep": ";" if is_win else ":",
        "home": _fwd(str(Path.home())),
    }


def resolve_tokens(workspace_root: str, config: dict[str, Any]) -> dict[str, str]:
    """Build the full token dictionary.

    Merge order (later wins):
      1. Built-in tokens (exe_ext, path_sep, home)
      2. Variable tokens from the ``tokens`` config section
      3. ``workspace_root``
    """
    tokens: dict[str, str] = _builtin_tokens()

    section = config.get("tokens", {})
    if isinstance(section, dict):
        for key, value in section.items():
            if isinstance(value, (list, dict)):
                continue
            tokens[str(key)] = str(value)

    tokens["workspace_root"] = _fwd(workspace_root)

    # Resolve any cross-references in variable tokens
    formatter = TokenFormatter(tokens)
    resolved: dict[str, str] = {}
    for key, value in tokens.items():
        if "{" in value:
            try:
                resolved[key] = formatter.resolve(value)
            except (KeyError, ValueError):
                resolved[key] = value
        else:
            resolved[key] = value
    return resolved


# ── Config Loading ───────────────────────────────────────────────────


def load_config(workspace_root: str) -> dict[str, Any]:
    """Load config.yaml from workspace root."""
    config_path = Path(workspace_root) / "config.yaml"
    if not config_path.exists():
        return {}
    data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError("config.yaml must contain a top-level mapping.")
    return data


def get_config_value(config: dict, key_path: str, default: Any = None) -> Any:
    """Nested dict lookup by dot-separated key path."""
    current: Any = config
    for key in key_path.split("."):
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return default if current is None else current


# ── ToolContext ───────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True)
class ToolContext:
    """Immutable context passed to every tool execution."""

    workspace_root: Path
    tokens: dict[str, str]
    config: dict[str, Any]
    tool_config: dict[str, Any]
    settings: LauncherSettings
    host_windows: bool


# ── LauncherTool Base ────────────────────────────────────────────────


class LauncherTool:
    """Base class for all launcher subcommands.

    Subclasses set ``name`` and ``help``, then implement ``setup()`` to
    add click options and ``execute()`` to run the tool.
    """

    name: str = ""
    help: str = ""

    def setup(self, cmd: click.Command) -> click.Command:
        """Add click options/arguments to the command. Return the command."""
        return cmd

    def default_args(self, tokens: dict[str, str]) -> dict[str, Any]:
        """Return default args dict before config/CLI merge."""
        return {}

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        """Execute the tool with context and tool-specific args."""
        raise NotImplementedError


# ── Tool Registry ────────────────────────────────────────────────────

_TOOL_REGISTRY: dict[str, LauncherTool] = {}


def register_tool(tool: LauncherTool) -> None:
    """Add a tool to the global registry."""
    _TOOL_REGISTRY[tool.name] = tool


# ── Platform Detection ───────────────────────────────────────────────


def is_windows() -> bool:
    return platform.system() == "Windows"


def parse_port(value: Any) -> int | None:
    """Return *value* as a TCP port number, or ``None`` if it is not one."""
    if value is None or isinstance(value, bool):
        return None
    try:
        port = int(value)
    except (TypeError, ValueError):
        return None
    if 0 < port <= 65535:
        return port
    return None
