"""Turn argument tokens into the command line handed to a shell.

Long commands are written to a temporary script first, because terminals
truncate pasted input past a certain length.
"""

from __future__ import annotations

import atexit
import os
import stat
import tempfile
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .core import logger
from .options import CliTarget, ShellDialect

MAX_INLINE_COMMAND_LENGTH = 1024
SCRIPT_PREFIX = "codex-cmd-"
SCRIPT_SUFFIX = ".sh"

_SCRIPT_TEMPLATE = """\
trap 'rm -f "$0"' EXIT INT TERM
set -e
{command}
"""


def build_command_line(target: CliTarget, tokens: list[str]) -> str:
    """Join the binary and its argument tokens with single spaces."""
    args = " ".join(tokens)
    if not args.strip():
        return target.binary
    return f"{target.binary} {args}"


def with_ide_server_port(
    command: str, target: CliTarget, port: int | None, dialect: ShellDialect,
) -> str:
    """Prefix *command* with the target's IDE-port environment variable."""
    if target.ide_port_env is None or not port or port <= 0:
        return command
    if dialect.is_powershell:
        return f"$env:{target.ide_port_env}='{port}'; {command}"
    return f"export {target.ide_port_env}={port} && {command}"


def shell_argv(dialect: ShellDialect) -> list[str]:
    """Argv prefix that runs a command string in the given dialect's shell."""
    if dialect is ShellDialect.POWERSHELL_LT_73:
        return ["powershell", "-NoProfile", "-Command"]
    if dialect is ShellDialect.POWERSHELL_GE_73:
        return ["pwsh", "-NoProfile", "-Command"]
    if dialect is ShellDialect.WSL:
        return ["wsl.exe", "-e", "sh", "-c"]
    return ["sh", "-c"]


def quote_for_posix(path: str) -> str:
    return "'" + path.replace("'", "'\"'\"'") + "'"


# ── Temporary scripts ────────────────────────────────────────────────


class TempScriptRegistry:
    """Tracks temporary scripts and deletes whatever is left at exit."""

    def __init__(self) -> None:
        self._paths: set[Path] = set()
        atexit.register(self.cleanup)

    @property
    def paths(self) -> set[Path]:
        return set(self._paths)

    def register(self, path: Path) -> None:
        self._paths.add(path)

    def cleanup(self) -> None:
        for path in list(self._paths):
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                logger.debug(f"Could not delete temporary script {path}: {exc}")
            self._paths.discard(path)


@dataclass
class TerminalCommandPlan:
    command: str
    cleanup_on_failure: Callable[[], None] = field(default=lambda: None)
    script_path: Path | None = None


class CommandScriptFactory:
    """Choose between inline execution and a temporary wrapper script."""

    def __init__(
        self,
        host_windows: bool,
        registry: TempScriptRegistry | None = None,
        script_dir: Path | None = None,
    ) -> None:
        self._host_windows = host_windows
        self._registry = registry
        self._script_dir = script_dir

    def build_plan(self, command: str) -> TerminalCommandPlan | None:
        """Return how to run *command*, or ``None`` if the script could not be written."""
        if len(command) <= MAX_INLINE_COMMAND_LENGTH or self._host_windows:
            return TerminalCommandPlan(command)

        script_path = self._create_script(command)
        if script_path is None:
            return None

        def _cleanup() -> None:
            try:
                script_path.unlink(missing_ok=True)
            except OSError as exc:
                logger.info(f"Failed to delete temporary script after dispatch failure: {exc}")

        quoted = quote_for_posix(str(script_path.resolve()))
        return TerminalCommandPlan(f"sh {quoted}", _cleanup, script_path)

    def _create_script(self, command: str) -> Path | None:
        try:
            fd, name = tempfile.mkstemp(
                prefix=SCRIPT_PREFIX, suffix=SCRIPT_SUFFIX, dir=self._script_dir,
            )
        except OSError as exc:
            logger.warning(f"Failed to create temporary command script: {exc}")
            return None
        script_path = Path(name)
        if self._registry is not None:
            self._registry.register(script_path)

        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(_SCRIPT_TEMPLATE.format(command=command))
            mode = script_path.stat().st_mode
            script_path.chmod(mode | stat.S_IXUSR)
        except OSError as exc:
            logger.warning(f"Failed to write temporary command script: {exc}")
            script_path.unlink(missing_ok=True)
            return None
        return script_path
